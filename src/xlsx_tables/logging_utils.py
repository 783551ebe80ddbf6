"""
Logging configuration using Rich for beautiful console output.
"""

import logging
from pathlib import Path
from typing import Any, List, Optional, Sequence

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

MAX_CELL_WIDTH = 40


def setup_logging(verbose: bool = False) -> None:
    """
    Configure logging with Rich handler.

    Args:
        verbose: Whether to enable debug-level logging
    """
    console = Console(stderr=True)

    level = logging.DEBUG if verbose else logging.INFO

    rich_handler = RichHandler(
        console=console,
        show_time=True,
        show_path=False,
        markup=True,
        rich_tracebacks=True
    )

    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[rich_handler],
        force=True
    )

    # Reduce noise from other libraries
    logging.getLogger("openpyxl").setLevel(logging.WARNING)
    logging.getLogger("xlsxwriter").setLevel(logging.WARNING)


def print_rows_table(
    rows: Sequence[Sequence[Any]],
    title: str,
    limit: Optional[int] = None,
    console: Optional[Console] = None
) -> None:
    """
    Print sheet rows as a table, using the first row as the header.

    Args:
        rows: Rows as returned by read_as_array
        title: Table title
        limit: Maximum number of data rows to show (None for all)
        console: Rich console instance (creates new one if None)
    """
    if console is None:
        console = Console()

    if not rows:
        console.print(f"[yellow]Sheet '{title}' is empty.[/yellow]")
        return

    header, body = rows[0], rows[1:]
    table = Table(title=title, show_header=True, header_style="bold magenta")
    for value in header:
        table.add_column(_display(value), style="white", no_wrap=False)

    shown = body if limit is None else body[:limit]
    for row in shown:
        table.add_row(*[_display(value) for value in row])

    console.print()
    console.print(table)

    if len(shown) < len(body):
        console.print(f"[dim]... {len(body) - len(shown)} more rows[/dim]")


def print_split_table(paths: List[Path], row_counts: List[int], console: Optional[Console] = None) -> None:
    """
    Print a formatted table of files created by a split.

    Args:
        paths: Output paths in sequence order
        row_counts: Data rows in each output file
        console: Rich console instance (creates new one if None)
    """
    if console is None:
        console = Console()

    if not paths:
        console.print("[yellow]No files were created.[/yellow]")
        return

    table = Table(title="Created Files", show_header=True, header_style="bold green")
    table.add_column("#", justify="right", style="cyan")
    table.add_column("Rows", justify="right", style="magenta")
    table.add_column("File Path", style="white", no_wrap=False)

    for idx, (path, row_count) in enumerate(zip(paths, row_counts), start=1):
        file_path = str(path)
        # Truncate long file paths
        if len(file_path) > 50:
            file_path = "..." + file_path[-47:]
        table.add_row(str(idx), str(row_count), file_path)

    console.print()
    console.print(table)


def print_success_message(message: str, detail: Optional[str] = None, console: Optional[Console] = None) -> None:
    """
    Print a success message.

    Args:
        message: Main message
        detail: Optional second line, e.g. an output path
        console: Rich console instance (creates new one if None)
    """
    if console is None:
        console = Console()

    console.print()
    console.print(f"✅ [bold green]{message}[/bold green]")
    if detail:
        console.print(f"   [cyan]{detail}[/cyan]")


def print_error_message(error: str, console: Optional[Console] = None) -> None:
    """
    Print an error message with Rich formatting.

    Args:
        error: Error message to display
        console: Rich console instance (creates new one if None)
    """
    if console is None:
        console = Console()

    console.print()
    console.print(f"❌ [bold red]Error:[/bold red] {escape(error)}", highlight=False)


def print_progress_step(step: str, console: Optional[Console] = None) -> None:
    """
    Print a progress step message.

    Args:
        step: Description of the current step
        console: Rich console instance (creates new one if None)
    """
    if console is None:
        console = Console()

    console.print(f"🔄 [bold blue]{step}[/bold blue]")


def _display(value: Any) -> str:
    if value is None:
        return ""
    text = str(value)
    if len(text) > MAX_CELL_WIDTH:
        text = text[:MAX_CELL_WIDTH - 3] + "..."
    return escape(text)
