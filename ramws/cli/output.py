"""Terminal output handling using Rich library.

This module provides the OutputHandler class for all CLI terminal output:
colored status messages, spinners around long mirrors, and the status
report. Supports verbosity levels and the --no-color flag.
"""

import json
from contextlib import contextmanager
from typing import Any, Dict, Iterator

from rich.console import Console
from rich.live import Live
from rich.spinner import Spinner
from rich.table import Table

from ramws.workspace.fs_status import format_bytes
from ramws.workspace.status import StatusSnapshot


class OutputHandler:
    """Handles all terminal output using Rich library.

    Attributes:
        verbosity: Verbosity level (0=quiet, 1=info, 2=debug)
        console: Rich Console instance for output

    Example:
        >>> handler = OutputHandler(verbosity=1, no_color=False)
        >>> handler.success("Workspace ready")
        >>> with handler.spinner("Syncing..."):
        ...     pass
    """

    def __init__(self, verbosity: int = 1, no_color: bool = False):
        self.verbosity = verbosity
        self.console = Console(
            no_color=no_color,
            highlight=False,
        )

    def success(self, message: str) -> None:
        """Display success message in green."""
        self.console.print(f"[green]✓[/green] {message}")

    def error(self, message: str) -> None:
        """Display error message in red."""
        self.console.print(f"[red]✗[/red] {message}", style="red")

    def warning(self, message: str) -> None:
        """Display warning message in yellow."""
        self.console.print(f"[yellow]⚠[/yellow] {message}", style="yellow")

    def info(self, message: str) -> None:
        """Display info message (only if verbosity >= 1)."""
        if self.verbosity >= 1:
            self.console.print(message)

    def debug(self, message: str) -> None:
        """Display debug message (only if verbosity >= 2)."""
        if self.verbosity >= 2:
            self.console.print(f"[dim]{message}[/dim]")

    def print(self, message: str) -> None:
        """Display message without formatting."""
        self.console.print(message)

    @contextmanager
    def spinner(self, message: str) -> Iterator[None]:
        """Display spinner while a blocking mirror runs.

        Example:
            >>> with handler.spinner("Populating workspace..."):
            ...     workspace.ensure()
        """
        if not self.console.is_terminal:
            yield
            return
        spinner = Spinner("dots", text=message)
        with Live(spinner, console=self.console, refresh_per_second=10, transient=True):
            yield

    def print_json(self, data: Dict[str, Any]) -> None:
        """Print data as pretty JSON without Rich markup processing."""
        self.console.print(json.dumps(data, indent=2), markup=False, soft_wrap=True)

    def print_status(self, snapshot: StatusSnapshot) -> None:
        """Display a workspace status snapshot."""
        table = Table(show_header=False, box=None, pad_edge=False)
        table.add_column(style="bold")
        table.add_column()

        table.add_row("Workspace", str(snapshot.workspace_root))
        table.add_row("Exists", "yes" if snapshot.exists else "no")
        if snapshot.fs_type is not None:
            table.add_row("Filesystem", snapshot.fs_type)
        if snapshot.total is not None:
            table.add_row(
                "Capacity",
                f"total {format_bytes(snapshot.total)}, used {format_bytes(snapshot.used or 0)}",
            )
            table.add_row("Available", format_bytes(snapshot.available or 0))
        table.add_row(
            "Diff summary",
            f"changed {snapshot.diff.changed}, added {snapshot.diff.added}, "
            f"deleted {snapshot.diff.deleted}",
        )
        table.add_row("Sync on exit", snapshot.sync_policy.value)
        table.add_row("Config", str(snapshot.config_path))
        self.console.print(table)
