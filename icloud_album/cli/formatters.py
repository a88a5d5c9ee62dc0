"""
Functions for formatting and displaying data in the console using Rich.
"""

from pathlib import Path
from typing import Any

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from icloud_album.models.album import AlbumResult
from icloud_album.models.stats import DownloadStats
from icloud_album.utils.formatting import format_dimensions, format_duration, format_size

PREVIEW_LIMIT = 5


def format_error_with_suggestions(
    error: Exception, context: dict | None = None
) -> Panel:
    """Formats an error with actionable suggestions into a Rich Panel."""
    error_type = type(error).__name__
    error_msg = str(error)

    suggestions_map = {
        "InvalidTokenError": [
            "• The token is the part after '#' in the shared album URL.",
            "• Tokens start with a letter or digit; check for stray characters.",
        ],
        "StatusError": [
            "• The album may have been unshared or the link may have expired.",
            "• Open the shared album link in a browser to confirm it is public.",
        ],
        "TransportError": [
            "• A network connection issue occurred.",
            "• The iCloud service might be temporarily unavailable.",
            "• Please try again in a few minutes.",
        ],
        "SchemaError": [
            "• The service returned an unexpected response.",
            "• Run the command with -vv for detailed logs.",
        ],
        "ConfigurationError": [
            "• Check the values in your configuration file.",
            "• Run `icloud-album init --force` to write a fresh default config.",
        ],
    }

    suggestions = suggestions_map.get(
        error_type, ["• Run the command with -vv for detailed logs."]
    )

    error_text = Text()
    error_text.append(f"{error_type}: ", style="bold red")
    error_text.append(error_msg)

    content = Table.grid(padding=(1, 0))
    content.add_row(error_text)
    content.add_row()
    content.add_row(Text("Suggestions", style="bold yellow"))
    content.add_row(Text("\n".join(suggestions)))

    if context:
        content.add_row()
        content.add_row(Text(f"Context: {context}", style="dim"))

    return Panel(
        content,
        title="[bold red]An Error Occurred[/bold red]",
        border_style="red",
        expand=False,
    )


def _print_header(console: Console, album: AlbumResult) -> None:
    name = escape(album.metadata.stream_name)
    owner = escape(album.metadata.owner_name or "N/A")
    console.print(f"\n[bold]Album:[/bold] [cyan]{name}[/cyan]")
    console.print(f"[bold]Owner:[/bold] {owner}")
    console.print(f"[bold]Photos:[/bold] {len(album.photos)}")
    for warning in album.warnings:
        console.print(f"[yellow]⚠️  {escape(warning)}[/yellow]")


def print_album_info(console: Console, album: AlbumResult) -> None:
    """Album summary and the first few photos."""
    _print_header(console, album)
    if not album.photos:
        return

    table = Table(title="First few photos", box=box.SIMPLE, title_justify="left")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Date")
    table.add_column("Caption")
    for i, photo in enumerate(album.photos[:PREVIEW_LIMIT], start=1):
        table.add_row(
            str(i), photo.date_created or "N/A", escape(photo.caption or "N/A")
        )
    console.print(table)


def print_album_details(console: Console, album: AlbumResult) -> None:
    """Every photo with its derivatives, dimensions, and URLs."""
    _print_header(console, album)
    for i, photo in enumerate(album.photos, start=1):
        tree = Tree(f"[bold]Photo {i}:[/bold] {photo.photo_guid}")
        for key, derivative in photo.derivatives.items():
            dims = format_dimensions(derivative.width, derivative.height)
            url = derivative.url or "[dim]No URL[/dim]"
            tree.add(f"[cyan]{key}[/cyan]: {dims}  {url}")
        console.print(tree)


def print_summary_panel(
    console: Console, stats: DownloadStats, output_dir: Path
) -> None:
    """Prints the end-of-download summary."""
    table = Table.grid(padding=(0, 2))
    table.add_column(style="bold")
    table.add_column()
    table.add_row("Downloaded", f"[green]{stats.photos_downloaded}[/green]")
    if stats.photos_skipped:
        table.add_row("Skipped (no URL)", f"[yellow]{stats.photos_skipped}[/yellow]")
    if stats.photos_failed:
        table.add_row("Failed", f"[red]{stats.photos_failed}[/red]")
    table.add_row("Total size", format_size(stats.bytes_downloaded))
    table.add_row("Duration", format_duration(stats.elapsed))
    table.add_row("Average speed", f"{format_size(stats.average_speed_bps)}/s")
    table.add_row("Output", str(output_dir))

    style = "green" if not stats.photos_failed else "yellow"
    console.print(
        Panel(
            table,
            title=f"[bold {style}]Download Summary[/bold {style}]",
            border_style=style,
            expand=False,
        )
    )


def print_config(console: Console, config_path: Path, config_data: dict[str, Any]):
    """Displays the current configuration in a table."""
    table = Table(
        title=f"Configuration: [dim]{config_path}[/dim]",
        box=box.ROUNDED,
        title_justify="left",
    )
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    for key, value in sorted(config_data.items()):
        table.add_row(key, str(value))
    console.print(table)
