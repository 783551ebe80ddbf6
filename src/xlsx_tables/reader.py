"""
Read-back helpers: sheet to array, line counts, sheet names and metadata.
"""

from typing import Any, Iterable, List, Optional
import logging

import pandas as pd
from openpyxl.workbook import Workbook

from .exceptions import AmbiguousSheetReference, SheetNotFound
from .io_utils import PathLike, load_workbook_safe
from .models import WorkbookOptions

logger = logging.getLogger(__name__)


def read_as_array(path: PathLike, sheet_name: Optional[str] = None) -> List[List[Any]]:
    """
    Read a sheet into a list of rows.

    Numbers come back as float, text as str and formula cells as their
    literal formula text (no calculation is performed).

    Args:
        path: Path to the Excel file
        sheet_name: Sheet to read; may be omitted for single-sheet workbooks

    Returns:
        Rows in sheet order, header first, trailing empty rows dropped

    Raises:
        AmbiguousSheetReference: If sheet_name is omitted and there are several sheets
        SheetNotFound: If sheet_name does not exist
    """
    wb = load_workbook_safe(path, read_only=True)
    try:
        ws = wb[_resolve_sheet_name(wb, sheet_name)]
        rows = [[decode_value(value) for value in row] for row in ws.iter_rows(values_only=True)]
    finally:
        wb.close()

    rows = trim_empty_rows(rows)
    logger.debug(f"Read {len(rows)} rows from {path}")
    return rows


def line_count(path: PathLike, sheet_index: int = 0) -> int:
    """
    Count the data rows of a sheet, excluding the header row.

    Footer rows count as data. A header-only or empty sheet yields 0.
    Rows with no values are not stored in the file, so trailing records
    whose values are all blank are not counted (nor copied by split_sheet).
    """
    wb = load_workbook_safe(path, read_only=True)
    try:
        ws = wb.worksheets[_check_index(wb, sheet_index)]
        used_rows = 0
        for idx, row in enumerate(ws.iter_rows(values_only=True), start=1):
            if _has_values(row):
                used_rows = idx
    finally:
        wb.close()

    return max(used_rows - 1, 0)


def sheet_name(path: PathLike, sheet_index: int = 0) -> str:
    """Return the name of the sheet at the given position."""
    wb = load_workbook_safe(path, read_only=True)
    try:
        return wb.sheetnames[_check_index(wb, sheet_index)]
    finally:
        wb.close()


def sheet_names(path: PathLike) -> List[str]:
    wb = load_workbook_safe(path, read_only=True)
    try:
        return list(wb.sheetnames)
    finally:
        wb.close()


def read_as_dataframe(path: PathLike, sheet_name: Optional[str] = None) -> pd.DataFrame:
    """
    Read a sheet as a pandas DataFrame with the header row as columns.

    Args:
        path: Path to the Excel file
        sheet_name: Sheet to read; may be omitted for single-sheet workbooks

    Returns:
        DataFrame with one row per data or footer row
    """
    rows = read_as_array(path, sheet_name)
    if not rows:
        return pd.DataFrame()

    header = [str(value) if value is not None else f"Unnamed_{i}" for i, value in enumerate(rows[0])]
    data = [row + [None] * (len(header) - len(row)) for row in rows[1:]]
    return pd.DataFrame(data, columns=header)


def read_properties(path: PathLike) -> WorkbookOptions:
    """Return the document properties embedded in a workbook."""
    wb = load_workbook_safe(path, read_only=True)
    try:
        props = wb.properties
        return WorkbookOptions(
            description=props.description,
            title=props.title,
            subject=props.subject,
            creator=props.creator,
            keywords=props.keywords,
            category=props.category,
        )
    finally:
        wb.close()


def decode_value(value: Any) -> Any:
    """Normalise a raw cell value: integers become float, everything else is kept."""
    if isinstance(value, int) and not isinstance(value, bool):
        return float(value)
    return value


def trim_empty_rows(rows: List[List[Any]]) -> List[List[Any]]:
    end = len(rows)
    while end and not _has_values(rows[end - 1]):
        end -= 1
    return rows[:end]


def _has_values(row: Iterable[Any]) -> bool:
    return any(value is not None and value != "" for value in row)


def _resolve_sheet_name(wb: Workbook, sheet_name: Optional[str]) -> str:
    names = wb.sheetnames

    if sheet_name is None:
        if len(names) > 1:
            raise AmbiguousSheetReference(names)
        if not names:
            raise SheetNotFound(sheet_name, names)
        return names[0]

    if sheet_name not in names:
        raise SheetNotFound(sheet_name, names)
    return sheet_name


def _check_index(wb: Workbook, sheet_index: int) -> int:
    names = wb.sheetnames
    if isinstance(sheet_index, bool) or not isinstance(sheet_index, int):
        raise SheetNotFound(sheet_index, names)
    if not 0 <= sheet_index < len(names):
        raise SheetNotFound(sheet_index, names)
    return sheet_index
