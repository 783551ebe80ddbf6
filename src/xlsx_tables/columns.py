"""
Per-column type and display-format resolution.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Mapping, Optional, Sequence
import logging

from .exceptions import InvalidNumericValue, UnknownColumn
from .models import ColumnType, FormatLike, format_code

logger = logging.getLogger(__name__)

NUMERIC_PATTERN = re.compile(r'^[+-]?(\d+\.?\d*|\.\d+)$')


@dataclass(frozen=True)
class ColumnTypeSpec:
    types: Dict[str, ColumnType] = field(default_factory=dict)
    formats: Dict[str, str] = field(default_factory=dict)

    def type_of(self, column: str) -> Optional[ColumnType]:
        return self.types.get(column)

    def format_code(self, column: str) -> Optional[str]:
        return self.formats.get(column)

    def coerce(self, column: str, value: Any, row: int) -> Any:
        """
        Convert a raw value for writing according to the column's type.

        Args:
            column: Column name
            value: Raw record value
            row: 1-based sheet row, used in error messages

        Returns:
            float for NUMERIC columns, formula text for FORMULA columns,
            str for STRING columns, the untouched value otherwise
        """
        column_type = self.types.get(column)
        if value is None or column_type is None:
            return value

        if column_type is ColumnType.NUMERIC:
            return parse_numeric(value, row, column)

        if column_type is ColumnType.FORMULA:
            text = str(value).strip()
            if not text:
                return None
            return text if text.startswith("=") else f"={text}"

        return str(value)


def parse_numeric(value: Any, row: int, column: str) -> Optional[float]:
    """
    Parse a numeric cell value to float.

    Raises:
        InvalidNumericValue: If the value is not a plain signed decimal number
    """
    if isinstance(value, bool):
        raise InvalidNumericValue(row, column, value)
    if isinstance(value, (int, float)):
        return float(value)

    text = str(value).strip()
    if not text:
        return None
    if not NUMERIC_PATTERN.match(text):
        raise InvalidNumericValue(row, column, value)
    return float(text)


def resolve_columns(
    header: Sequence[str],
    column_types: Optional[Mapping[str, Any]] = None,
    number_formats: Optional[Mapping[str, FormatLike]] = None,
    numeric_columns: Optional[Iterable[str]] = None,
    formats_argument: str = "number_formats",
) -> ColumnTypeSpec:
    """
    Validate per-column settings against the header and build a ColumnTypeSpec.

    Args:
        header: Header column names
        column_types: Column name to ColumnType (or its string value)
        number_formats: Column name to NumberFormat or raw format code
        numeric_columns: Column names to treat as NUMERIC (simple path)
        formats_argument: Argument name reported when a format names an unknown column

    Returns:
        The resolved ColumnTypeSpec

    Raises:
        UnknownColumn: If any argument references a column outside the header
    """
    header_set = set(header)
    types: Dict[str, ColumnType] = {}
    formats: Dict[str, str] = {}

    for column in numeric_columns or []:
        _require_column(column, header_set, "numeric_columns")
        types[column] = ColumnType.NUMERIC

    for column, column_type in (column_types or {}).items():
        _require_column(column, header_set, "column_types")
        types[column] = ColumnType(str(column_type.value if isinstance(column_type, ColumnType) else column_type).lower())

    for column, number_format in (number_formats or {}).items():
        _require_column(column, header_set, formats_argument)
        formats[column] = format_code(number_format)

    if types or formats:
        logger.debug(f"Resolved column types {dict((k, v.value) for k, v in types.items())}, formats {formats}")

    return ColumnTypeSpec(types=types, formats=formats)


def _require_column(column: str, header: set, argument: str) -> None:
    if column not in header:
        raise UnknownColumn(column, argument)
