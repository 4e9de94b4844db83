"""Terminal output handling using Rich library.

Command results go to stdout as JSON so that other programs can consume
them; status messages and errors go to stderr.
"""

import json
from contextlib import contextmanager
from typing import Any, Iterator

from rich.console import Console
from rich.live import Live
from rich.markup import escape
from rich.spinner import Spinner
from rich.table import Table

FORMATS = ("json", "compact")


class OutputHandler:
    """Handles all terminal output using Rich library.

    Attributes:
        verbosity: Verbosity level (0=summary, 1=info, 2=debug)
        output_format: "json" (indented) or "compact" (single line)
        console: Rich Console for results (stdout)
        err_console: Rich Console for messages (stderr)

    Example:
        >>> handler = OutputHandler(verbosity=1, no_color=False)
        >>> handler.print_json({"id": "123"})
        >>> handler.success("Label added")
    """

    def __init__(self, verbosity: int = 0, no_color: bool = False, output_format: str = "json"):
        """Initialize output handler.

        Args:
            verbosity: Verbosity level (0=summary, 1=info, 2=debug)
            no_color: Disable color output if True
            output_format: "json" or "compact"
        """
        self.verbosity = verbosity
        self.output_format = output_format
        self.console = Console(no_color=no_color, highlight=False)
        self.err_console = Console(stderr=True, no_color=no_color, highlight=False)

    def success(self, message: str) -> None:
        self.err_console.print(f"[green]✓[/green] {escape(message)}")

    def error(self, message: str) -> None:
        self.err_console.print(f"[red]✗[/red] {escape(message)}", style="red")

    def warning(self, message: str) -> None:
        self.err_console.print(f"[yellow]⚠[/yellow] {escape(message)}", style="yellow")

    def info(self, message: str) -> None:
        """Display info message (only if verbosity >= 1)."""
        if self.verbosity >= 1:
            self.err_console.print(message)

    def debug(self, message: str) -> None:
        """Display debug message (only if verbosity >= 2)."""
        if self.verbosity >= 2:
            self.err_console.print(f"[dim]{message}[/dim]")

    def print(self, message: str) -> None:
        """Display message on stdout without markup or wrapping."""
        self.console.print(message, markup=False, emoji=False, soft_wrap=True)

    def print_json(self, data: Any) -> None:
        """Write a command result as JSON in the selected format."""
        if self.output_format == "compact":
            text = json.dumps(data, ensure_ascii=False, separators=(",", ":"))
        else:
            text = json.dumps(data, ensure_ascii=False, indent=2)
        self.print(text)

    def print_mapping(self, title: str, rows: Any) -> None:
        """Display key/value pairs as a two-column table."""
        table = Table(title=title, show_header=False)
        table.add_column("key", style="bold")
        table.add_column("value")
        for key, value in rows:
            table.add_row(key, "(none)" if value in (None, "") else str(value))
        self.console.print(table)

    @contextmanager
    def spinner(self, message: str) -> Iterator[None]:
        """Display a spinner on stderr while a single operation runs."""
        if not self.err_console.is_terminal:
            yield
            return
        spinner = Spinner("dots", text=message)
        with Live(spinner, console=self.err_console, refresh_per_second=10, transient=True):
            yield
