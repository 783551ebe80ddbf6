"""
Split a large sheet into several bounded-size workbooks.

The source is streamed in read-only mode and every output file is written
with a write-only workbook, so memory use is bounded by one chunk of rows.
"""

import math
from pathlib import Path
from typing import Any, List, Optional, Sequence
import logging

from openpyxl import Workbook
from openpyxl.cell import WriteOnlyCell

from .exceptions import InvalidChunkSize, OutputInitializationFailed
from .io_utils import PathLike, ensure_out_dir, generate_unique_filename, load_workbook_safe, save_workbook
from .reader import line_count

logger = logging.getLogger(__name__)

PART_SUFFIX = "_part"
SEQUENCE_WIDTH = 3


def split_sheet(
    path: PathLike,
    sheet_index: int = 0,
    max_rows: int = 1000,
    out_dir: Optional[PathLike] = None,
) -> List[Path]:
    """
    Split a sheet's data rows across several files, repeating the header in each.

    Args:
        path: Source Excel file
        sheet_index: 0-based index of the sheet to split
        max_rows: Maximum number of data rows per output file
        out_dir: Output directory (defaults to the source file's directory)

    Returns:
        Output paths in sequence order

    Raises:
        InvalidChunkSize: If max_rows is not a positive integer
        OutputInitializationFailed: If the output directory or a file cannot be created
    """
    if isinstance(max_rows, bool) or not isinstance(max_rows, int) or max_rows <= 0:
        raise InvalidChunkSize(max_rows)

    source = Path(path)
    data_rows = line_count(source, sheet_index)
    expected_files = max(math.ceil(data_rows / max_rows), 1)
    logger.info(f"Splitting {source} ({data_rows} data rows) into {expected_files} file(s) of up to {max_rows} rows")

    target_dir = Path(out_dir) if out_dir is not None else source.parent
    try:
        ensure_out_dir(target_dir)
    except OSError as e:
        raise OutputInitializationFailed(target_dir, e) from e

    wb = load_workbook_safe(source, read_only=True)
    try:
        ws = wb.worksheets[sheet_index]
        title = ws.title
        rows = ws.iter_rows()

        header = next(rows, None)
        output_paths: List[Path] = []
        chunk: List[Sequence[Any]] = []
        written = 0

        for row in rows:
            if written >= data_rows:
                break
            chunk.append(row)
            written += 1
            if len(chunk) == max_rows:
                output_paths.append(_write_chunk(target_dir, source, len(output_paths) + 1, title, header, chunk))
                chunk = []

        if chunk or not output_paths:
            output_paths.append(_write_chunk(target_dir, source, len(output_paths) + 1, title, header, chunk))
    finally:
        wb.close()

    logger.info(f"Created {len(output_paths)} split file(s) in {target_dir}")
    return output_paths


def part_base_name(source: Path, sequence: int) -> str:
    """Return the output file name (without extension) for a chunk."""
    return f"{source.stem}{PART_SUFFIX}{sequence:0{SEQUENCE_WIDTH}d}"


def _write_chunk(
    out_dir: Path,
    source: Path,
    sequence: int,
    title: str,
    header: Optional[Sequence[Any]],
    rows: List[Sequence[Any]],
) -> Path:
    output_path = generate_unique_filename(out_dir / part_base_name(source, sequence), ".xlsx")

    wb = Workbook(write_only=True)
    try:
        ws = wb.create_sheet(title)
        if header is not None:
            ws.append(_copy_row(ws, header))
        for row in rows:
            ws.append(_copy_row(ws, row))
        save_workbook(wb, output_path)
    finally:
        wb.close()

    logger.info(f"Created {output_path} with {len(rows)} rows")
    return output_path


def _copy_row(ws, row: Sequence[Any]) -> List[Any]:
    """Copy read-only cells, keeping number formats and the text/formula distinction."""
    values = _trim_row(row)
    copied: List[Any] = []
    for cell in values:
        if cell.value is None:
            copied.append(None)
            continue

        out = WriteOnlyCell(ws, value=cell.value)
        if cell.data_type == 's':
            out.data_type = 's'
        number_format = getattr(cell, 'number_format', None)
        if number_format and number_format != 'General':
            out.number_format = number_format
        copied.append(out)
    return copied


def _trim_row(row: Sequence[Any]) -> Sequence[Any]:
    end = len(row)
    while end and row[end - 1].value is None:
        end -= 1
    return row[:end]
