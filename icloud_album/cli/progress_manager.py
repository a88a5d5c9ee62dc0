"""
Manages a Rich progress display for album downloads.
"""

from typing import Optional

from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)


class ProgressManager:
    """One overall bar per album, plus failure/skip counters in the description."""

    def __init__(self, console: Console, transient: bool = False):
        self.console = console
        self.progress = Progress(
            SpinnerColumn(),
            TextColumn("[bold blue]{task.description}"),
            BarColumn(bar_width=40),
            MofNCompleteColumn(),
            "•",
            TimeElapsedColumn(),
            console=console,
            transient=transient,
        )
        self._task_id: Optional[TaskID] = None
        self._title = ""
        self.failed = 0
        self.skipped = 0

    async def __aenter__(self) -> "ProgressManager":
        self.progress.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        self.progress.stop()

    def start_album(self, title: str, total: int) -> None:
        self._title = title
        self._task_id = self.progress.add_task(title, total=total)

    def _describe(self) -> str:
        extras = []
        if self.failed:
            extras.append(f"[red]{self.failed} failed[/red]")
        if self.skipped:
            extras.append(f"[yellow]{self.skipped} skipped[/yellow]")
        return f"{self._title} {' '.join(extras)}".rstrip()

    def photo_done(self, failed: bool = False, skipped: bool = False) -> None:
        if failed:
            self.failed += 1
        if skipped:
            self.skipped += 1
        if self._task_id is not None:
            self.progress.update(self._task_id, advance=1, description=self._describe())
