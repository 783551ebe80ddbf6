"""
Error types raised by xlsx-tables.

Validation problems subclass ValueError so callers that already catch bad
input keep working; output problems subclass OSError.
"""

from typing import Any, Sequence


class XlsxTablesError(Exception):
    """Base class for all xlsx-tables errors."""


class EmptySheetName(XlsxTablesError, ValueError):
    """Raised when the target sheet name is blank."""

    def __init__(self) -> None:
        super().__init__("Sheet name cannot be blank")


class InvalidSheetName(XlsxTablesError, ValueError):
    """Raised when a sheet name breaks Excel's naming rules."""

    def __init__(self, sheet_name: str, reason: str) -> None:
        self.sheet_name = sheet_name
        self.reason = reason
        super().__init__(f"Invalid sheet name '{sheet_name}': {reason}")


class UnknownColumn(XlsxTablesError, ValueError):
    """Raised when an argument references a column missing from the header row."""

    def __init__(self, column: str, argument: str) -> None:
        self.column = column
        self.argument = argument
        super().__init__(f"Column '{column}' referenced in {argument} is not present in the header row")


class InvalidNumericValue(XlsxTablesError, ValueError):
    """Raised when a numeric column holds a value that cannot be parsed."""

    def __init__(self, row: int, column: str, value: Any) -> None:
        self.row = row
        self.column = column
        self.value = value
        super().__init__(f"Row {row}, column '{column}': {value!r} is not a numeric value")


class InvalidChunkSize(XlsxTablesError, ValueError):
    """Raised when a split is requested with a non-positive row bound."""

    def __init__(self, max_rows: int) -> None:
        self.max_rows = max_rows
        super().__init__(f"max_rows must be a positive integer, got: {max_rows}")


class AmbiguousSheetReference(XlsxTablesError, ValueError):
    """Raised when no sheet name is given for a workbook with several sheets."""

    def __init__(self, sheet_names: Sequence[str]) -> None:
        self.sheet_names = list(sheet_names)
        super().__init__(
            f"Workbook contains {len(self.sheet_names)} sheets, a sheet name is required. "
            f"Available sheets: {self.sheet_names}"
        )


class SheetNotFound(XlsxTablesError, ValueError):
    """Raised when a sheet name or index does not exist in the workbook."""

    def __init__(self, reference: Any, sheet_names: Sequence[str]) -> None:
        self.reference = reference
        self.sheet_names = list(sheet_names)
        super().__init__(f"Sheet {reference!r} not found. Available sheets: {self.sheet_names}")


class OutputInitializationFailed(XlsxTablesError, OSError):
    """Raised when the output file or its directory cannot be created."""

    def __init__(self, path: Any, reason: Any) -> None:
        self.path = str(path)
        self.reason = reason
        super().__init__(f"Unable to initialize output file {self.path}: {reason}")
