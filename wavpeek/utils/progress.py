"""
Progress tracking utilities for wavpeek
"""
from rich.progress import (
    Progress,
    SpinnerColumn,
    BarColumn,
    TextColumn,
    MofNCompleteColumn,
    TaskID
)
from rich.console import Console
from typing import Optional


class ProgressTracker:
    """Manages progress bars for batch file processing"""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()
        self.progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            MofNCompleteColumn(),
            console=self.console,
            transient=True
        )
        self._active = False

    def __enter__(self):
        """Start progress tracking"""
        if not self._active:
            self.progress.start()
            self._active = True
        return self

    def __exit__(self, *args):
        """Stop progress tracking"""
        if self._active:
            self.progress.stop()
            self._active = False

    def add_task(self, description: str, total: Optional[int] = None) -> TaskID:
        """
        Add new progress task

        Args:
            description: Task description
            total: Total units for the task (None for indeterminate)

        Returns:
            Task ID
        """
        return self.progress.add_task(description, total=total)

    def update(self, task_id: TaskID, advance: int = 1, **kwargs):
        """Advance a task"""
        self.progress.update(task_id, advance=advance, **kwargs)
