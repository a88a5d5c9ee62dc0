"""
Console entry point: runs the typer app and turns escaped errors into a Rich panel.
"""

import asyncio
import logging
import os
import sys
from typing import Optional

import typer
from rich.console import Console

from icloud_album.cli.app import app
from icloud_album.cli.formatters import format_error_with_suggestions
from icloud_album.exceptions import SharedAlbumError, StatusError

log = logging.getLogger("icloud_album")


def _error_context(error: SharedAlbumError) -> Optional[dict]:
    if isinstance(error, StatusError):
        return {"status": error.status, "endpoint": error.endpoint or "unknown"}
    return None


def main() -> None:
    if os.name == "nt":
        try:
            sys.stdout.reconfigure(encoding="utf-8")
            sys.stderr.reconfigure(encoding="utf-8")
        except (TypeError, AttributeError):
            pass

    console = Console(stderr=True)
    try:
        app()
    except (typer.Exit, typer.Abort):
        pass
    except (KeyboardInterrupt, asyncio.CancelledError):
        console.print(
            "\n[yellow]⚠️  Cancelled; photos saved so far are kept.[/yellow]"
        )
        sys.exit(130)
    except SharedAlbumError as e:
        console.print(format_error_with_suggestions(e, _error_context(e)))
        sys.exit(1)
    except Exception as e:
        console.print(format_error_with_suggestions(e, {"type": "Unexpected"}))
        log.debug("Full traceback:", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
