"""
xlsx-tables - build Excel sheets from tabular records and read them back.

This package turns ordered records (plus optional totals rows and styling
hints) into single-sheet workbooks, and provides helpers to read a sheet back
as an array, count its lines, get its name and split it into smaller files.
"""

__version__ = "0.1.0"

from .columns import ColumnTypeSpec, resolve_columns
from .exceptions import (
    AmbiguousSheetReference,
    EmptySheetName,
    InvalidChunkSize,
    InvalidNumericValue,
    InvalidSheetName,
    OutputInitializationFailed,
    SheetNotFound,
    UnknownColumn,
    XlsxTablesError,
)
from .models import (
    AlignmentSpec,
    BorderSpec,
    CellStyle,
    ColumnType,
    FillSpec,
    FontSpec,
    ListValue,
    NumberFormat,
    Scalar,
    SideSpec,
    Table,
    WorkbookOptions,
    build_table,
)
from .reader import line_count, read_as_array, read_as_dataframe, read_properties, sheet_name, sheet_names
from .splitter import split_sheet
from .writer import build_advanced, build_simple, write_fast, write_styled

__all__ = [
    "build_simple",
    "build_advanced",
    "write_fast",
    "write_styled",
    "read_as_array",
    "read_as_dataframe",
    "read_properties",
    "line_count",
    "sheet_name",
    "sheet_names",
    "split_sheet",
    "build_table",
    "resolve_columns",
    "ColumnTypeSpec",
    "Table",
    "Scalar",
    "ListValue",
    "ColumnType",
    "NumberFormat",
    "CellStyle",
    "FontSpec",
    "AlignmentSpec",
    "BorderSpec",
    "SideSpec",
    "FillSpec",
    "WorkbookOptions",
    "XlsxTablesError",
    "EmptySheetName",
    "InvalidSheetName",
    "UnknownColumn",
    "InvalidNumericValue",
    "InvalidChunkSize",
    "AmbiguousSheetReference",
    "SheetNotFound",
    "OutputInitializationFailed",
]
