"""
Tests for the command-line interface.
"""

import json
import pytest
from pathlib import Path
import tempfile
import shutil
from typer.testing import CliRunner

from xlsx_tables.cli import app
from xlsx_tables.reader import line_count, read_as_array, read_properties

runner = CliRunner()


class TestCli:
    """Test suite for the xlsx-tables commands."""

    @pytest.fixture
    def temp_output_dir(self):
        """Create a temporary directory for test outputs."""
        temp_dir = Path(tempfile.mkdtemp())
        yield temp_dir
        # Cleanup after test
        shutil.rmtree(temp_dir)

    @pytest.fixture
    def rows_file(self, temp_output_dir):
        rows = [
            {'CUSIP': f'{i:09d}', 'ACTION': 'BUY', 'PRICE': f'{i}.5'}
            for i in range(10)
        ]
        path = temp_output_dir / "rows.json"
        path.write_text(json.dumps(rows), encoding='utf-8')
        return path

    @pytest.fixture
    def built_workbook(self, temp_output_dir, rows_file):
        out = temp_output_dir / "trades.xlsx"
        result = runner.invoke(app, ["build", str(rows_file), "--out", str(out), "--sheet", "test"])
        assert result.exit_code == 0, result.output
        return out

    def test_build(self, built_workbook):
        rows = read_as_array(built_workbook, 'test')

        assert rows[0] == ['CUSIP', 'ACTION', 'PRICE']
        assert len(rows) == 11

    def test_build_with_numeric_totals_and_description(self, temp_output_dir, rows_file):
        totals = temp_output_dir / "totals.json"
        totals.write_text(json.dumps({'CUSIP': 'TOTAL', 'PRICE': '50'}), encoding='utf-8')
        out = temp_output_dir / "numeric.xlsx"

        result = runner.invoke(app, [
            "build", str(rows_file),
            "-o", str(out),
            "-s", "num",
            "-t", str(totals),
            "-n", "PRICE",
            "-f", "PRICE=0.00",
            "-d", "Trades export",
        ])

        assert result.exit_code == 0, result.output
        rows = read_as_array(out, 'num')
        assert rows[1][2] == 0.5
        assert rows[-1] == ['TOTAL', None, 50.0]
        assert read_properties(out).description == 'Trades export'

    def test_build_blank_sheet_fails(self, temp_output_dir, rows_file):
        result = runner.invoke(app, ["build", str(rows_file), "--out", str(temp_output_dir / "x.xlsx"), "--sheet", ""])

        assert result.exit_code == 1
        assert "Sheet name cannot be blank" in result.output

    def test_build_unknown_numeric_column_fails(self, temp_output_dir, rows_file):
        result = runner.invoke(app, ["build", str(rows_file), "--out", str(temp_output_dir / "x.xlsx"), "-n", "MISSING"])

        assert result.exit_code == 1
        assert "MISSING" in result.output

    def test_bad_number_format_option(self, temp_output_dir, rows_file):
        result = runner.invoke(app, ["build", str(rows_file), "--out", str(temp_output_dir / "x.xlsx"), "-f", "PRICE"])

        assert result.exit_code == 1

    def test_count(self, built_workbook):
        result = runner.invoke(app, ["count", str(built_workbook)])

        assert result.exit_code == 0
        assert result.output.strip() == "10"

    def test_name(self, built_workbook):
        result = runner.invoke(app, ["name", str(built_workbook), "--sheet-index", "0"])

        assert result.exit_code == 0
        assert result.output.strip() == "test"

    def test_name_bad_index(self, built_workbook):
        result = runner.invoke(app, ["name", str(built_workbook), "--sheet-index", "3"])

        assert result.exit_code == 1

    def test_show(self, built_workbook):
        result = runner.invoke(app, ["show", str(built_workbook), "--limit", "2"])

        assert result.exit_code == 0
        assert "CUSIP" in result.output
        assert "8 more rows" in result.output

    def test_split(self, built_workbook, temp_output_dir):
        out_dir = temp_output_dir / "parts"

        result = runner.invoke(app, ["split", str(built_workbook), "--max-rows", "6", "--out", str(out_dir)])

        assert result.exit_code == 0, result.output
        parts = sorted(out_dir.glob("*.xlsx"))
        assert [line_count(p, 0) for p in parts] == [6, 4]

    def test_split_invalid_chunk(self, built_workbook):
        result = runner.invoke(app, ["split", str(built_workbook), "--max-rows", "0"])

        assert result.exit_code == 1

    def test_version(self):
        result = runner.invoke(app, ["version"])

        assert result.exit_code == 0
        assert "0.1.0" in result.output
