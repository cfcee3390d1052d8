"""Console output formatting for the SiteSync CLI."""

import json
from typing import Any, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table


class OutputFormatter:
    """Formats user-facing output, with quiet and JSON modes.

    Informational and success messages are suppressed in quiet mode.
    Warnings and errors are always shown and go to stderr.
    """

    def __init__(
        self,
        json_output: bool = False,
        quiet: bool = False,
        console: Optional[Console] = None,
        err_console: Optional[Console] = None,
    ):
        """Initialize output formatter.

        Args:
            json_output: Emit machine-readable JSON where supported
            quiet: Suppress non-essential output
            console: Console for regular output (defaults to stdout)
            err_console: Console for warnings and errors (defaults to stderr)
        """
        self.json_output = json_output
        self.quiet = quiet
        self.console = console or Console(highlight=False)
        self.err_console = err_console or Console(stderr=True, highlight=False)

    def print(self, message: str = "") -> None:
        """Print a plain line (not suppressed by quiet mode)."""
        self.console.print(escape(message), soft_wrap=True)

    def info(self, message: str) -> None:
        if self.quiet or self.json_output:
            return
        self.console.print(escape(message), soft_wrap=True)

    def success(self, message: str) -> None:
        if self.quiet or self.json_output:
            return
        self.console.print(f"[green]{escape(message)}[/green]", soft_wrap=True)

    def warning(self, message: str) -> None:
        self.err_console.print(f"[yellow]{escape(message)}[/yellow]", soft_wrap=True)

    def error(self, message: str) -> None:
        self.err_console.print(f"[red]{escape(message)}[/red]", soft_wrap=True)

    def output_json(self, data: Any) -> None:
        """Print data as JSON, bypassing rich markup."""
        self.console.print_json(json.dumps(data))

    def print_summary(self, title: str, rows: list[tuple[str, str]]) -> None:
        """Print a two-column summary table.

        Args:
            title: Table title
            rows: (label, value) pairs
        """
        if self.json_output:
            self.output_json({label: value for label, value in rows})
            return
        if self.quiet:
            return

        table = Table(title=title, show_header=False)
        table.add_column("Field", style="bold")
        table.add_column("Value")
        for label, value in rows:
            table.add_row(escape(label), escape(value))
        self.console.print(table)
