"""
Command-line interface for xlsx-tables using Typer.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Annotated

import typer
from rich.console import Console

from . import __version__
from .reader import line_count, read_as_array, sheet_name
from .splitter import split_sheet
from .writer import build_simple
from .logging_utils import (
    setup_logging,
    print_rows_table,
    print_split_table,
    print_success_message,
    print_error_message,
    print_progress_step
)

app = typer.Typer(
    name="xlsx-tables",
    help="Build Excel sheets from tabular records, read them back and split large sheets",
    add_completion=False
)

console = Console()


@app.command()
def build(
    input_file: Annotated[
        Path,
        typer.Argument(help="JSON file holding an array of records", exists=True, file_okay=True, dir_okay=False)
    ],
    out: Annotated[
        Path,
        typer.Option("--out", "-o", help="Output Excel file")
    ],
    sheet: Annotated[
        str,
        typer.Option("--sheet", "-s", help="Name of the output sheet")
    ] = "Sheet1",
    totals: Annotated[
        Optional[Path],
        typer.Option("--totals", "-t", help="JSON file holding a totals record or an array of them", exists=True, dir_okay=False)
    ] = None,
    numeric: Annotated[
        Optional[List[str]],
        typer.Option("--numeric", "-n", help="Column to write as numbers (repeatable)")
    ] = None,
    number_format: Annotated[
        Optional[List[str]],
        typer.Option("--number-format", "-f", help="COLUMN=FORMAT display format (repeatable)")
    ] = None,
    description: Annotated[
        Optional[str],
        typer.Option("--description", "-d", help="Description embedded in the workbook properties")
    ] = None,
    overwrite: Annotated[
        bool,
        typer.Option("--overwrite", help="Replace an existing output file instead of writing a sibling")
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose logging")
    ] = False,
) -> None:
    """
    Build a workbook from a JSON array of records.

    Examples:

        # Basic usage
        xlsx-tables build trades.json --out trades.xlsx --sheet Trades

        # Numeric columns with a display format and a totals row
        xlsx-tables build trades.json -o trades.xlsx -t totals.json -n PRICE -f "PRICE=#,##0.00"
    """
    setup_logging(verbose)

    try:
        print_progress_step("Reading input records...", console)
        rows = _load_json(input_file)
        if not isinstance(rows, list):
            raise ValueError(f"{input_file} must contain a JSON array of records")

        totals_data = _load_json(totals) if totals else None
        formats = _parse_formats(number_format or [])
        options = {'description': description} if description else None

        path = build_simple(
            rows,
            totals_data,
            sheet,
            out,
            options,
            numeric_columns=numeric or None,
            numeric_column_formats=formats or None,
            overwrite=overwrite
        )
        print_success_message(f"Wrote {len(rows)} rows to sheet '{sheet}'", str(path), console)

    except Exception as e:
        print_error_message(str(e), console)
        raise typer.Exit(1)


@app.command()
def show(
    input_file: Annotated[
        Path,
        typer.Argument(help="Excel file to read", exists=True, file_okay=True, dir_okay=False)
    ],
    sheet: Annotated[
        Optional[str],
        typer.Option("--sheet", "-s", help="Sheet name (required for multi-sheet workbooks)")
    ] = None,
    limit: Annotated[
        Optional[int],
        typer.Option("--limit", "-l", help="Maximum number of data rows to print", min=0)
    ] = 20,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose logging")
    ] = False,
) -> None:
    """Print a sheet as a table."""
    setup_logging(verbose)

    try:
        rows = read_as_array(input_file, sheet)
        print_rows_table(rows, sheet or sheet_name(input_file, 0), limit, console)
    except Exception as e:
        print_error_message(str(e), console)
        raise typer.Exit(1)


@app.command()
def split(
    input_file: Annotated[
        Path,
        typer.Argument(help="Excel file to split", exists=True, file_okay=True, dir_okay=False)
    ],
    max_rows: Annotated[
        int,
        typer.Option("--max-rows", "-m", help="Maximum number of data rows per output file")
    ],
    sheet_index: Annotated[
        int,
        typer.Option("--sheet-index", "-i", help="0-based index of the sheet to split")
    ] = 0,
    out: Annotated[
        Optional[Path],
        typer.Option("--out", "-o", help="Output directory (default: next to the input file)")
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose logging")
    ] = False,
) -> None:
    """
    Split a sheet into files of at most --max-rows data rows, each keeping the header.

    Examples:

        xlsx-tables split big.xlsx --max-rows 5000 --out ./parts
    """
    setup_logging(verbose)

    try:
        print_progress_step(f"Splitting {input_file}...", console)
        paths = split_sheet(input_file, sheet_index, max_rows, out)
        print_split_table(paths, [line_count(path, 0) for path in paths], console)
        print_success_message(f"Successfully created {len(paths)} files", str(paths[0].parent), console)
    except Exception as e:
        print_error_message(str(e), console)
        raise typer.Exit(1)


@app.command()
def count(
    input_file: Annotated[
        Path,
        typer.Argument(help="Excel file to inspect", exists=True, file_okay=True, dir_okay=False)
    ],
    sheet_index: Annotated[
        int,
        typer.Option("--sheet-index", "-i", help="0-based index of the sheet")
    ] = 0,
) -> None:
    """Print the number of data rows (excluding the header) in a sheet."""
    try:
        console.print(line_count(input_file, sheet_index))
    except Exception as e:
        print_error_message(str(e), console)
        raise typer.Exit(1)


@app.command()
def name(
    input_file: Annotated[
        Path,
        typer.Argument(help="Excel file to inspect", exists=True, file_okay=True, dir_okay=False)
    ],
    sheet_index: Annotated[
        int,
        typer.Option("--sheet-index", "-i", help="0-based index of the sheet")
    ] = 0,
) -> None:
    """Print the name of a sheet."""
    try:
        console.print(sheet_name(input_file, sheet_index), markup=False, highlight=False)
    except Exception as e:
        print_error_message(str(e), console)
        raise typer.Exit(1)


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"xlsx-tables version {__version__}")


def _load_json(path: Path) -> Any:
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {path}: {e}")


def _parse_formats(values: List[str]) -> Dict[str, str]:
    formats = {}
    for value in values:
        column, sep, code = value.partition('=')
        if not sep or not column.strip() or not code:
            raise ValueError(f"Number format must look like COLUMN=FORMAT, got: {value!r}")
        formats[column.strip()] = code
    return formats


if __name__ == "__main__":
    app()
