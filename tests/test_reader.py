"""
Tests for the read-back helpers.
"""

import pytest
from pathlib import Path
import tempfile
import shutil
import openpyxl

from xlsx_tables.exceptions import AmbiguousSheetReference, SheetNotFound
from xlsx_tables.reader import (
    line_count,
    read_as_array,
    read_as_dataframe,
    read_properties,
    sheet_name,
    sheet_names,
)
from xlsx_tables.writer import build_simple


class TestReader:
    """Test suite for reader functions."""

    @pytest.fixture
    def temp_output_dir(self):
        """Create a temporary directory for test outputs."""
        temp_dir = Path(tempfile.mkdtemp())
        yield temp_dir
        # Cleanup after test
        shutil.rmtree(temp_dir)

    @pytest.fixture
    def ten_row_path(self, temp_output_dir):
        rows = [
            {'CUSIP': '123456789', 'DATE': '2018-01-01', 'ACTION': 'BUY'}
            for _ in range(10)
        ]
        return build_simple(rows, [], 'test', temp_output_dir / "testOutput.xlsx", [])

    @pytest.fixture
    def multi_sheet_path(self, temp_output_dir):
        """Create a workbook with two sheets written directly by openpyxl."""
        wb = openpyxl.Workbook()
        first = wb.active
        first.title = "Trades"
        first.append(['ID', 'QTY'])
        first.append([1, 10])
        first.append([2, 20])

        second = wb.create_sheet("Summary")
        second.append(['TOTAL'])
        second.append(['=SUM(Trades!B2:B3)'])

        path = temp_output_dir / "multi.xlsx"
        wb.save(path)
        wb.close()
        return path

    def test_line_count_excludes_header(self, ten_row_path):
        assert line_count(ten_row_path, 0) == 10

    def test_line_count_includes_footer(self, temp_output_dir):
        rows = [{'A': 'x'}, {'A': 'y'}]
        path = build_simple(rows, {'A': ['t1', 't2']}, 'test', temp_output_dir / "footer.xlsx")

        assert line_count(path, 0) == 4

    def test_trailing_blank_record_is_not_counted(self, temp_output_dir):
        """A trailing record with no values leaves no row in the file."""
        path = build_simple([{'A': 'x'}, {'A': None}], [], 'test', temp_output_dir / "blank.xlsx")

        assert line_count(path, 0) == 1
        assert read_as_array(path, 'test') == [['A'], ['x']]

    def test_sheet_name_by_index(self, multi_sheet_path):
        assert sheet_name(multi_sheet_path, 0) == 'Trades'
        assert sheet_name(multi_sheet_path, 1) == 'Summary'

    def test_sheet_names(self, multi_sheet_path):
        assert sheet_names(multi_sheet_path) == ['Trades', 'Summary']

    def test_bad_sheet_index(self, multi_sheet_path):
        with pytest.raises(SheetNotFound):
            sheet_name(multi_sheet_path, 2)

        with pytest.raises(SheetNotFound):
            line_count(multi_sheet_path, -1)

    def test_read_without_name_on_multi_sheet_fails(self, multi_sheet_path):
        with pytest.raises(AmbiguousSheetReference) as exc_info:
            read_as_array(multi_sheet_path)

        assert exc_info.value.sheet_names == ['Trades', 'Summary']

    def test_read_unknown_sheet_fails(self, multi_sheet_path):
        with pytest.raises(SheetNotFound):
            read_as_array(multi_sheet_path, 'Missing')

    def test_read_named_sheet(self, multi_sheet_path):
        """Integers decode as float; formulas come back as literal text."""
        trades = read_as_array(multi_sheet_path, 'Trades')
        summary = read_as_array(multi_sheet_path, 'Summary')

        assert trades == [['ID', 'QTY'], [1.0, 10.0], [2.0, 20.0]]
        assert all(isinstance(value, float) for value in trades[1])
        assert summary == [['TOTAL'], ['=SUM(Trades!B2:B3)']]

    def test_read_without_name_on_single_sheet(self, ten_row_path):
        rows = read_as_array(ten_row_path)

        assert len(rows) == 11
        assert rows[0] == ['CUSIP', 'DATE', 'ACTION']

    def test_read_as_dataframe(self, ten_row_path):
        df = read_as_dataframe(ten_row_path, 'test')

        assert list(df.columns) == ['CUSIP', 'DATE', 'ACTION']
        assert len(df) == 10
        assert (df['ACTION'] == 'BUY').all()

    def test_read_properties(self, temp_output_dir):
        path = build_simple([{'A': 1}], [], 'meta', temp_output_dir / "meta.xlsx", {'description': 'Meta Description', 'title': 'Trades'})

        properties = read_properties(path)
        assert properties.description == 'Meta Description'
        assert properties.title == 'Trades'

    def test_missing_file(self, temp_output_dir):
        with pytest.raises(FileNotFoundError):
            read_as_array(temp_output_dir / "missing.xlsx")

    def test_non_excel_file(self, temp_output_dir):
        path = temp_output_dir / "data.csv"
        path.write_text("a,b\n1,2\n")

        with pytest.raises(ValueError, match="must be an Excel file"):
            line_count(path, 0)
