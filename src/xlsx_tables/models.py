"""
Row model and typed configuration records for xlsx-tables.

A Table is the logical unit persisted as one named sheet: a header row, the
data rows in input order, and an optional footer (totals) block.
"""

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union
import logging

from .exceptions import EmptySheetName, InvalidSheetName, UnknownColumn

logger = logging.getLogger(__name__)

Record = Mapping[str, Any]

# Excel rejects these in sheet titles
INVALID_SHEET_CHARS = set('[]:*?/\\')
MAX_SHEET_NAME_LENGTH = 31


class ColumnType(str, Enum):
    STRING = "string"
    NUMERIC = "numeric"
    FORMULA = "formula"


class NumberFormat(Enum):
    """Named display formats. A raw format string may be used wherever one of these is accepted."""

    GENERAL = "General"
    TEXT = "@"
    NUMBER = "0"
    NUMBER_00 = "0.00"
    NUMBER_COMMA_SEPARATED = "#,##0.00"
    NUMERIC = "#,##0.00;[Red]-#,##0.00"
    PERCENTAGE = "0%"
    PERCENTAGE_00 = "0.00%"
    DATE_YYYYMMDD = "yyyy-mm-dd"
    DATETIME = "yyyy-mm-dd hh:mm:ss"
    CURRENCY_USD = '"$"#,##0.00'

    @property
    def code(self) -> str:
        return self.value


FormatLike = Union[NumberFormat, str]


def format_code(value: FormatLike) -> str:
    """Return the Excel format code for a NumberFormat member or a raw code string."""
    if isinstance(value, NumberFormat):
        return value.code
    if isinstance(value, str) and value.strip():
        return value
    raise ValueError(f"Number format must be a NumberFormat or a non-empty format string, got: {value!r}")


@dataclass(frozen=True)
class Scalar:
    """A totals value that occupies the first footer row only."""

    value: Any


@dataclass(frozen=True)
class ListValue:
    """A totals value spread positionally over consecutive footer rows."""

    values: Tuple[Any, ...]

    def __len__(self) -> int:
        return len(self.values)


TotalsValue = Union[Scalar, ListValue]


def to_totals_value(value: Any) -> TotalsValue:
    if isinstance(value, (Scalar, ListValue)):
        return value
    if isinstance(value, (list, tuple)):
        return ListValue(tuple(value))
    return Scalar(value)


@dataclass(frozen=True)
class FontSpec:
    bold: Optional[bool] = None
    italic: Optional[bool] = None
    size: Optional[float] = None
    color: Optional[str] = None
    name: Optional[str] = None


@dataclass(frozen=True)
class AlignmentSpec:
    horizontal: Optional[str] = None
    vertical: Optional[str] = None
    wrap_text: Optional[bool] = None


@dataclass(frozen=True)
class SideSpec:
    style: str = "thin"
    color: Optional[str] = None


@dataclass(frozen=True)
class BorderSpec:
    top: Optional[SideSpec] = None
    bottom: Optional[SideSpec] = None
    left: Optional[SideSpec] = None
    right: Optional[SideSpec] = None


@dataclass(frozen=True)
class FillSpec:
    """Solid or linear-gradient fill. Gradients use start/end colour and rotation in degrees."""

    start_color: str
    end_color: Optional[str] = None
    gradient: bool = False
    rotation: float = 0

    def __post_init__(self) -> None:
        if not self.start_color:
            raise ValueError("FillSpec.start_color is required")


@dataclass(frozen=True)
class CellStyle:
    font: Optional[FontSpec] = None
    alignment: Optional[AlignmentSpec] = None
    borders: Optional[BorderSpec] = None
    fill: Optional[FillSpec] = None


@dataclass(frozen=True)
class WorkbookOptions:
    """Document properties embedded in the written workbook."""

    description: Optional[str] = None
    title: Optional[str] = None
    subject: Optional[str] = None
    creator: Optional[str] = None
    keywords: Optional[str] = None
    category: Optional[str] = None

    @classmethod
    def from_mapping(cls, options: Optional[Mapping[str, Any]]) -> "WorkbookOptions":
        if isinstance(options, cls):
            return options
        if not options:
            return cls()
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(options) - known)
        if unknown:
            raise ValueError(f"Unknown workbook option(s): {unknown}. Supported options: {sorted(known)}")
        return cls(**{key: (None if value is None else str(value)) for key, value in options.items()})

    def items(self) -> List[Tuple[str, str]]:
        """Return the options that are set, as (name, value) pairs."""
        return [(f.name, getattr(self, f.name)) for f in fields(self) if getattr(self, f.name) is not None]


@dataclass
class Table:
    header: Tuple[str, ...] = ()
    rows: List[Dict[str, Any]] = field(default_factory=list)
    footer: List[Dict[str, Any]] = field(default_factory=list)

    def body(self) -> List[Dict[str, Any]]:
        """Data rows followed by footer rows, in output order."""
        return self.rows + self.footer

    def row_values(self, record: Record) -> List[Any]:
        return [record.get(column) for column in self.header]

    def all_rows(self) -> List[List[Any]]:
        """Header row, data rows then footer rows, each as a positional list."""
        if not self.header:
            return []
        return [list(self.header)] + [self.row_values(record) for record in self.body()]


def validate_sheet_name(sheet_name: Optional[str]) -> str:
    """
    Check a sheet name against Excel's rules.

    Raises:
        EmptySheetName: If the name is None, empty or whitespace only
        InvalidSheetName: If the name is too long or has forbidden characters
    """
    if sheet_name is None or not str(sheet_name).strip():
        raise EmptySheetName()

    if len(sheet_name) > MAX_SHEET_NAME_LENGTH:
        raise InvalidSheetName(sheet_name, f"longer than {MAX_SHEET_NAME_LENGTH} characters")

    bad_chars = sorted(INVALID_SHEET_CHARS.intersection(sheet_name))
    if bad_chars:
        raise InvalidSheetName(sheet_name, f"contains forbidden characters {bad_chars}")

    return sheet_name


def build_table(
    rows: Sequence[Record],
    totals: Optional[Union[Record, Sequence[Record]]] = None,
    sheet_name: Optional[str] = None,
) -> Table:
    """
    Assemble header, data rows and footer rows into a Table.

    Args:
        rows: Data records; the header is taken from the first record's keys
        totals: A totals record, a sequence of totals records, or None
        sheet_name: Target sheet name, validated when given

    Returns:
        The assembled Table

    Raises:
        EmptySheetName: If sheet_name is given but blank
        UnknownColumn: If a row or totals record uses a column outside the header
    """
    if sheet_name is not None:
        validate_sheet_name(sheet_name)

    rows = list(rows or [])
    header: Tuple[str, ...] = tuple(rows[0].keys()) if rows else ()
    header_set = set(header)

    data_rows = []
    for idx, record in enumerate(rows):
        extra = [key for key in record if key not in header_set]
        if extra:
            raise UnknownColumn(extra[0], f"rows[{idx}]")
        data_rows.append(dict(record))

    footer = []
    for record in _totals_records(totals):
        footer.extend(_expand_totals(record, header_set))

    logger.debug(f"Built table with {len(header)} columns, {len(data_rows)} rows, {len(footer)} footer rows")
    return Table(header=header, rows=data_rows, footer=footer)


def _totals_records(totals: Optional[Union[Record, Sequence[Record]]]) -> List[Record]:
    if not totals:
        return []
    if isinstance(totals, Mapping):
        return [totals]
    return list(totals)


def _expand_totals(record: Record, header: set) -> List[Dict[str, Any]]:
    """
    Expand one totals record into footer rows.

    List values are distributed positionally; scalars land on the first row
    only and are blank after that.
    """
    values = {}
    for key, raw in record.items():
        if key not in header:
            raise UnknownColumn(key, "totals")
        values[key] = to_totals_value(raw)

    height = 0
    for value in values.values():
        height = max(height, len(value) if isinstance(value, ListValue) else 1)

    footer_rows = []
    for position in range(height):
        footer_row = {}
        for key, value in values.items():
            if isinstance(value, ListValue):
                if position < len(value):
                    footer_row[key] = value.values[position]
            elif position == 0:
                footer_row[key] = value.value
        footer_rows.append(footer_row)

    return footer_rows
