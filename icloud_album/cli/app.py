"""
Defines the command-line interface for the application using Typer.
"""

import asyncio
import logging
import os
import time
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from icloud_album import __version__
from icloud_album.api.client import SharedStreamsClient
from icloud_album.core.download_manager import DownloadManager
from icloud_album.exceptions import SharedAlbumError
from icloud_album.media.downloader import PhotoDownloader
from icloud_album.models.album import AlbumResult
from icloud_album.models.config import AlbumConfig
from icloud_album.storage.config_manager import ConfigManager
from icloud_album.utils.path import parse_album_token
from icloud_album.utils.structured_logger import create_structured_logger

from .formatters import (
    print_album_details,
    print_album_info,
    print_config,
    print_summary_panel,
)
from .progress_manager import ProgressManager

console = Console()

logging.basicConfig(
    level="INFO",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[
        RichHandler(
            console=console,
            rich_tracebacks=True,
            show_path=False,
            show_level=False,
            markup=True,
        )
    ],
)
log = logging.getLogger("icloud_album")

app = typer.Typer(
    name="icloud-album",
    help=(
        "Fetch and download iCloud shared photo albums. Use 'icloud-album"
        " <command> --help' for more info."
    ),
    rich_markup_mode="rich",
    pretty_exceptions_show_locals=False,
    add_completion=False,
)


def get_config_dir() -> Path:
    if os.name == "nt":
        base_dir = Path(os.getenv("APPDATA", "~\\AppData\\Roaming"))
    else:
        base_dir = Path(os.getenv("XDG_CONFIG_HOME", "~/.config"))
    return base_dir.expanduser() / "icloud-album"


CONFIG_DIR = get_config_dir()
CONFIG_FILE = CONFIG_DIR / "config.ini"


def _load_config(cli_options: dict | None = None) -> AlbumConfig:
    try:
        return ConfigManager(CONFIG_FILE).load_config(cli_options)
    except SharedAlbumError as e:
        log.debug(f"Could not load configuration from {CONFIG_FILE}", exc_info=True)
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(code=1) from e


async def _fetch(token: str, config: AlbumConfig) -> AlbumResult:
    async with SharedStreamsClient(config=config) as client:
        return await client.fetch_album(token)


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase logging verbosity (-vv for debug).",
    ),
    version: bool = typer.Option(
        False, "--version", help="Show version and exit.", is_eager=True
    ),
    show_config: bool = typer.Option(
        False, "--show-config", help="Display the current configuration."
    ),
):
    """iCloud Shared Album CLI"""
    if version:
        console.print(
            f"[bold]icloud-album[/bold] version [cyan]{__version__}[/cyan]"
        )
        raise typer.Exit()

    log_level = "INFO"
    if verbose >= 2:
        log_level = "DEBUG"
    logging.getLogger("icloud_album").setLevel(log_level)

    if show_config:
        if not CONFIG_FILE.is_file():
            console.print(
                "[red]✗ Config file not found.[/] Run [cyan]icloud-album init[/cyan]"
                " first."
            )
            raise typer.Exit(code=1)
        config_data = ConfigManager(CONFIG_FILE).get_config_as_dict()
        print_config(console, CONFIG_FILE, config_data)
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


@app.command()
def init(
    force: bool = typer.Option(
        False, "--force", "-f", help="Overwrite an existing config without asking."
    ),
):
    """Write a configuration file with the default settings."""
    if (
        CONFIG_FILE.exists()
        and not force
        and not typer.confirm("Configuration file already exists. Overwrite it?")
    ):
        raise typer.Abort()

    ConfigManager(CONFIG_FILE).save_new_config()
    console.print(
        f"\n[bold green]✓ Configuration saved to '{CONFIG_FILE}'[/bold green]"
    )
    console.print(
        "Ready! Try: [cyan]icloud-album info <TOKEN or share URL>[/cyan]"
    )


@app.command()
def info(
    album: str = typer.Argument(..., help="Album token or shared album URL."),
):
    """Show an album's name, owner, photo count, and first few photos."""
    config = _load_config()
    result = asyncio.run(_fetch(parse_album_token(album), config))
    print_album_info(console, result)


@app.command()
def fetch(
    album: str = typer.Argument(..., help="Album token or shared album URL."),
    as_json: bool = typer.Option(
        False, "--json", help="Print the full album as JSON instead of a tree."
    ),
):
    """Fetch an album and list every photo with its derivatives and URLs."""
    config = _load_config()
    result = asyncio.run(_fetch(parse_album_token(album), config))
    if as_json:
        typer.echo(result.model_dump_json(by_alias=True, indent=2))
    else:
        print_album_details(console, result)


@app.command(name="download")
def download_command(
    album: str = typer.Argument(..., help="Album token or shared album URL."),
    output_dir: Path = typer.Argument(  # noqa: B008
        ..., help="Directory the photos are saved into."
    ),
    workers: int | None = typer.Option(
        None,
        "-w",
        "--workers",
        help="Number of simultaneous downloads (overrides the config file).",
    ),
    strict: bool | None = typer.Option(
        None,
        "--strict/--no-strict",
        help="Fail the whole fetch when asset URLs cannot be resolved.",
    ),
    log_dir: Path | None = typer.Option(  # noqa: B008
        None,
        "--log-dir",
        help="Write a JSONL event log of the session into this directory.",
    ),
):
    """Download every photo of an album in its best available quality."""
    token = parse_album_token(album)
    cli_options = {
        key: value
        for key, value in {
            "max_workers": workers,
            "strict_asset_urls": strict,
        }.items()
        if value is not None
    }
    config = _load_config(cli_options)
    base_logger, fetch_events, download_events = create_structured_logger(log_dir)
    base_logger.set_session_context(token=token)

    async def _download_async():
        async with SharedStreamsClient(config=config) as client:
            fetch_events.fetch_started(token)
            start_time = time.monotonic()
            try:
                result = await client.fetch_album(token)
            except SharedAlbumError as e:
                fetch_events.fetch_failed(token, str(e))
                raise
            fetch_events.fetch_completed(
                token,
                result.metadata.stream_name,
                len(result.photos),
                time.monotonic() - start_time,
            )
            for warning in result.warnings:
                fetch_events.fetch_degraded(token, warning)

            name = escape(result.metadata.stream_name)
            console.print(
                f"[bold cyan]📷 Downloading '{name}' "
                f"({len(result.photos)} photos)...[/bold cyan]"
            )
            downloader = PhotoDownloader(
                client.session, client.executor, config.request_timeout
            )
            async with ProgressManager(console=console) as progress_manager:
                manager = DownloadManager(
                    downloader,
                    max_workers=config.max_workers,
                    progress_manager=progress_manager,
                    events=download_events,
                )
                return await manager.download_album(result, output_dir)

    try:
        stats = asyncio.run(_download_async())
    finally:
        base_logger.close()

    print_summary_panel(console, stats, output_dir)
    if base_logger.json_path:
        console.print(f"[dim]Event log: {base_logger.json_path}[/dim]")
    if stats.photos_failed:
        raise typer.Exit(code=1)
