"""
Workbook writers for the simple (fast) and advanced (styled) build paths.

The simple path goes through a pandas DataFrame and xlsxwriter; the advanced
path builds the sheet cell by cell with openpyxl so that styles, formulas and
per-cell formats can be applied.
"""

from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union
import logging

import pandas as pd
from xlsxwriter.exceptions import FileCreateError  # type: ignore
from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, GradientFill, PatternFill, Side
from openpyxl.utils import get_column_letter

from .columns import ColumnTypeSpec, resolve_columns
from .exceptions import OutputInitializationFailed, UnknownColumn
from .io_utils import PathLike, prepare_output_path, save_workbook
from .models import (
    CellStyle,
    ColumnType,
    FillSpec,
    FormatLike,
    Record,
    SideSpec,
    Table,
    WorkbookOptions,
    build_table,
    validate_sheet_name,
)

logger = logging.getLogger(__name__)

# A style target: (column, None) for the header cell, (column, "*") for every
# body cell, (column, n) for the cell in sheet row n.
StyleTarget = Tuple[str, Union[None, str, int]]

# xlsxwriter names for document properties
XLSXWRITER_PROPERTIES = {
    'description': 'comments',
    'title': 'title',
    'subject': 'subject',
    'creator': 'author',
    'keywords': 'keywords',
    'category': 'category',
}

MIN_AUTO_WIDTH = 10
MAX_AUTO_WIDTH = 50


def build_simple(
    rows: Sequence[Record],
    totals: Optional[Union[Record, Sequence[Record]]],
    sheet_name: str,
    path: PathLike,
    options: Optional[Union[Mapping[str, Any], WorkbookOptions]] = None,
    numeric_columns: Optional[Iterable[str]] = None,
    numeric_column_formats: Optional[Mapping[str, FormatLike]] = None,
    overwrite: bool = False,
) -> Path:
    """
    Build a workbook using the fast path (pandas + xlsxwriter).

    Args:
        rows: Data records; the header comes from the first record's keys
        totals: Totals record(s) appended after the data rows
        sheet_name: Name of the single output sheet
        path: Requested output path
        options: Workbook options, e.g. {'description': ...}
        numeric_columns: Columns whose values are written as numbers
        numeric_column_formats: Column name to number format
        overwrite: Replace an existing file instead of writing a sibling

    Returns:
        Path of the written file
    """
    validate_sheet_name(sheet_name)
    workbook_options = WorkbookOptions.from_mapping(options)
    table = build_table(rows, totals, sheet_name)
    column_spec = resolve_columns(
        table.header,
        number_formats=numeric_column_formats,
        numeric_columns=numeric_columns,
        formats_argument="numeric_column_formats",
    )
    body = coerce_body(table, column_spec)

    output_path = prepare_output_path(path, overwrite=overwrite)
    return write_fast(table, column_spec, output_path, sheet_name, workbook_options, body=body)


def build_advanced(
    rows: Sequence[Record],
    totals: Optional[Union[Record, Sequence[Record]]],
    sheet_name: str,
    path: PathLike,
    options: Optional[Union[Mapping[str, Any], WorkbookOptions]] = None,
    column_types: Optional[Mapping[str, Any]] = None,
    number_formats: Optional[Mapping[str, FormatLike]] = None,
    column_widths: Optional[Mapping[str, float]] = None,
    styles: Optional[Mapping[str, CellStyle]] = None,
    freeze_header: bool = False,
    auto_filter: bool = False,
    overwrite: bool = False,
) -> Path:
    """
    Build a workbook using the styled path (openpyxl).

    Args:
        rows: Data records; the header comes from the first record's keys
        totals: Totals record(s) appended after the data rows
        sheet_name: Name of the single output sheet
        path: Requested output path
        options: Workbook options, e.g. {'description': ...}
        column_types: Column name to ColumnType
        number_formats: Column name to number format
        column_widths: Column name to column width
        styles: Style target ("COL", "COL:*" or "COL:N") to CellStyle
        freeze_header: Freeze the header row
        auto_filter: Add an autofilter over the written range
        overwrite: Replace an existing file instead of writing a sibling

    Returns:
        Path of the written file
    """
    validate_sheet_name(sheet_name)
    workbook_options = WorkbookOptions.from_mapping(options)
    table = build_table(rows, totals, sheet_name)
    column_spec = resolve_columns(table.header, column_types=column_types, number_formats=number_formats)
    style_targets = parse_style_targets(styles, table.header)
    widths = validate_column_widths(column_widths, table.header)
    body = coerce_body(table, column_spec)

    output_path = prepare_output_path(path, overwrite=overwrite)
    return write_styled(
        table,
        column_spec,
        output_path,
        sheet_name,
        workbook_options,
        styles=style_targets,
        column_widths=widths,
        freeze_header=freeze_header,
        auto_filter=auto_filter,
        body=body,
    )


def coerce_body(table: Table, column_spec: ColumnTypeSpec) -> List[List[Any]]:
    """
    Convert data and footer rows to positional lists of write-ready values.

    Raises:
        InvalidNumericValue: If a NUMERIC column holds non-numeric text
    """
    body = []
    for offset, record in enumerate(table.body()):
        sheet_row = offset + 2
        body.append([column_spec.coerce(column, record.get(column), sheet_row) for column in table.header])
    return body


def parse_style_targets(
    styles: Optional[Mapping[str, CellStyle]],
    header: Sequence[str],
) -> List[Tuple[StyleTarget, CellStyle]]:
    """
    Parse style keys into targets.

    "COL" targets the header cell, "COL:*" every body cell and "COL:N" the
    cell in sheet row N. Column names may themselves contain colons; the
    last colon separates the row part only when the full key is not a column.

    Raises:
        UnknownColumn: If a key names a column outside the header
        ValueError: If the row part is neither "*" nor a positive integer
    """
    targets = []
    header_set = set(header)

    for key, style in (styles or {}).items():
        if not isinstance(style, CellStyle):
            raise ValueError(f"Style for '{key}' must be a CellStyle, got: {type(style).__name__}")

        if key in header_set or ':' not in key:
            column, row_part = key, None
        else:
            column, row_part = key.rsplit(':', 1)

        if column not in header_set:
            raise UnknownColumn(column, "styles")

        if row_part is None:
            target: StyleTarget = (column, None)
        elif row_part.strip() == '*':
            target = (column, '*')
        else:
            try:
                row = int(row_part)
            except ValueError:
                raise ValueError(f"Invalid row in style key '{key}': expected '*' or a row number")
            if row < 1:
                raise ValueError(f"Invalid row in style key '{key}': rows start at 1")
            target = (column, row)

        targets.append((target, style))

    return targets


def validate_column_widths(
    column_widths: Optional[Mapping[str, float]],
    header: Sequence[str],
) -> Dict[str, float]:
    widths = {}
    for column, width in (column_widths or {}).items():
        if column not in header:
            raise UnknownColumn(column, "column_widths")
        if isinstance(width, bool) or not isinstance(width, (int, float)) or width <= 0:
            raise ValueError(f"Width for column '{column}' must be a positive number, got: {width!r}")
        widths[column] = float(width)
    return widths


def write_fast(
    table: Table,
    column_spec: ColumnTypeSpec,
    path: Path,
    sheet_name: str,
    options: WorkbookOptions,
    body: Optional[List[List[Any]]] = None,
) -> Path:
    """
    Write a table using pandas + xlsxwriter.

    Numeric columns are already floats in the frame; columns with a number
    format have their body cells rewritten carrying that format.

    Raises:
        OutputInitializationFailed: If the file cannot be created
    """
    if body is None:
        body = coerce_body(table, column_spec)

    df = pd.DataFrame(body, columns=list(table.header), dtype=object)

    try:
        with pd.ExcelWriter(
            path,
            engine='xlsxwriter',
            engine_kwargs={'options': {'strings_to_formulas': False, 'strings_to_urls': False}},
        ) as writer:
            df.to_excel(writer, sheet_name=sheet_name, index=False, header=bool(table.header))

            workbook = writer.book
            worksheet = writer.sheets[sheet_name]

            properties = {XLSXWRITER_PROPERTIES[name]: value for name, value in options.items()}
            if properties:
                workbook.set_properties(properties)

            if table.header:
                # Freeze the header row
                worksheet.freeze_panes(1, 0)

            for col_idx, column in enumerate(table.header):
                worksheet.set_column(col_idx, col_idx, _auto_width(column, df[column]))

                code = column_spec.format_code(column)
                if not code:
                    continue

                cell_format = workbook.add_format({'num_format': code})
                for row_offset, value in enumerate(df[column]):
                    _write_formatted(worksheet, row_offset + 1, col_idx, value, cell_format)

    except (OSError, FileCreateError) as e:
        raise OutputInitializationFailed(path, e) from e

    logger.info(f"Created {path} with {len(table.rows)} rows and {len(table.footer)} footer rows (fast mode)")
    return path


def _write_formatted(worksheet, row: int, col: int, value: Any, cell_format) -> None:
    if value is None or (isinstance(value, float) and pd.isna(value)):
        worksheet.write_blank(row, col, None, cell_format)
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        worksheet.write_number(row, col, value, cell_format)
    else:
        worksheet.write_string(row, col, str(value), cell_format)


def _auto_width(column: str, values: Iterable[Any]) -> int:
    max_length = len(str(column))
    for value in values:
        if value is not None:
            max_length = max(max_length, len(str(value)))
    return min(max(max_length + 2, MIN_AUTO_WIDTH), MAX_AUTO_WIDTH)


def write_styled(
    table: Table,
    column_spec: ColumnTypeSpec,
    path: Path,
    sheet_name: str,
    options: WorkbookOptions,
    styles: Optional[List[Tuple[StyleTarget, CellStyle]]] = None,
    column_widths: Optional[Mapping[str, float]] = None,
    freeze_header: bool = False,
    auto_filter: bool = False,
    body: Optional[List[List[Any]]] = None,
) -> Path:
    """
    Write a table cell by cell with openpyxl.

    Raises:
        OutputInitializationFailed: If the file cannot be written
    """
    if body is None:
        body = coerce_body(table, column_spec)

    wb = Workbook()
    try:
        ws = wb.active
        ws.title = sheet_name

        for name, value in options.items():
            setattr(wb.properties, name, value)

        if table.header:
            ws.append(list(table.header))

        for row_offset, values in enumerate(body):
            row_idx = row_offset + 2
            for col_idx, column in enumerate(table.header, start=1):
                cell = ws.cell(row=row_idx, column=col_idx)
                value = values[col_idx - 1]
                if value is not None:
                    cell.value = value
                    if isinstance(value, str) and column_spec.type_of(column) is not ColumnType.FORMULA:
                        # only FORMULA columns hold formulas
                        cell.data_type = 's'

                code = column_spec.format_code(column)
                if code:
                    cell.number_format = code

        for column, width in (column_widths or {}).items():
            letter = get_column_letter(table.header.index(column) + 1)
            ws.column_dimensions[letter].width = width

        if freeze_header and table.header:
            ws.freeze_panes = 'A2'

        if auto_filter and table.header:
            last_col = get_column_letter(len(table.header))
            ws.auto_filter.ref = f"A1:{last_col}{len(body) + 1}"

        for target, style in styles or []:
            for cell in _target_cells(ws, table, len(body), target):
                apply_cell_style(cell, style)

        save_workbook(wb, path)
    finally:
        wb.close()

    logger.info(f"Created {path} with {len(table.rows)} rows and {len(table.footer)} footer rows (styled mode)")
    return path


def _target_cells(ws, table: Table, body_rows: int, target: StyleTarget):
    column, row = target
    col_idx = table.header.index(column) + 1

    if row is None:
        return [ws.cell(row=1, column=col_idx)]
    if row == '*':
        return [ws.cell(row=row_idx, column=col_idx) for row_idx in range(2, body_rows + 2)]
    return [ws.cell(row=row, column=col_idx)]


def apply_cell_style(cell, style: CellStyle) -> None:
    """Apply the parts of a CellStyle that are set to an openpyxl cell."""
    if style.font:
        cell.font = Font(
            name=style.font.name,
            size=style.font.size,
            bold=style.font.bold,
            italic=style.font.italic,
            color=_color(style.font.color),
        )
    if style.alignment:
        cell.alignment = Alignment(
            horizontal=style.alignment.horizontal,
            vertical=style.alignment.vertical,
            wrap_text=style.alignment.wrap_text,
        )
    if style.borders:
        cell.border = Border(
            left=_side(style.borders.left),
            right=_side(style.borders.right),
            top=_side(style.borders.top),
            bottom=_side(style.borders.bottom),
        )
    if style.fill:
        cell.fill = _fill(style.fill)


def _color(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return value.lstrip('#').upper()


def _side(side: Optional[SideSpec]) -> Side:
    if side is None:
        return Side()
    return Side(style=side.style, color=_color(side.color))


def _fill(fill: FillSpec):
    start = _color(fill.start_color)
    end = _color(fill.end_color) or start
    if fill.gradient:
        return GradientFill(type='linear', degree=fill.rotation, stop=(start, end))
    return PatternFill(fill_type='solid', start_color=start, end_color=end)
