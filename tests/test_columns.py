"""
Tests for column type resolution and value coercion.
"""

import pytest

from xlsx_tables.columns import parse_numeric, resolve_columns
from xlsx_tables.exceptions import InvalidNumericValue, UnknownColumn
from xlsx_tables.models import ColumnType, NumberFormat

HEADER = ('CUSIP', 'PRICE', 'NEW PRICE', 'FORM')


class TestResolveColumns:
    """Test suite for resolve_columns function."""

    @pytest.mark.parametrize("kwargs, argument", [
        ({'column_types': {'InvalidName': ColumnType.FORMULA}}, 'column_types'),
        ({'number_formats': {'InvalidName': NumberFormat.GENERAL}}, 'number_formats'),
        ({'numeric_columns': ['InvalidNumberColumnName']}, 'numeric_columns'),
    ])
    def test_unknown_column_is_rejected(self, kwargs, argument):
        """Every argument is checked against the header."""
        with pytest.raises(UnknownColumn) as exc_info:
            resolve_columns(HEADER, **kwargs)

        assert exc_info.value.argument == argument
        assert argument in str(exc_info.value)

    def test_numeric_columns_become_numeric(self):
        column_spec = resolve_columns(HEADER, numeric_columns=['PRICE'])

        assert column_spec.type_of('PRICE') is ColumnType.NUMERIC
        assert column_spec.type_of('CUSIP') is None

    def test_column_type_strings_are_accepted(self):
        column_spec = resolve_columns(HEADER, column_types={'FORM': 'FORMULA', 'CUSIP': 'string'})

        assert column_spec.type_of('FORM') is ColumnType.FORMULA
        assert column_spec.type_of('CUSIP') is ColumnType.STRING

    def test_formats_resolve_to_codes(self):
        column_spec = resolve_columns(HEADER, number_formats={'PRICE': NumberFormat.NUMBER_00, 'FORM': '0.0%'})

        assert column_spec.format_code('PRICE') == '0.00'
        assert column_spec.format_code('FORM') == '0.0%'
        assert column_spec.format_code('CUSIP') is None


class TestCoercion:
    """Test suite for ColumnTypeSpec.coerce."""

    @pytest.fixture
    def column_spec(self):
        return resolve_columns(
            HEADER,
            column_types={'CUSIP': ColumnType.STRING, 'PRICE': ColumnType.NUMERIC, 'FORM': ColumnType.FORMULA},
            number_formats={'NEW PRICE': NumberFormat.NUMERIC},
        )

    def test_numeric_text_becomes_float(self, column_spec):
        value = column_spec.coerce('PRICE', '123.456', 2)

        assert isinstance(value, float)
        assert value == 123.456

    @pytest.mark.parametrize("raw, expected", [
        ('-5', -5.0),
        ('+.5', 0.5),
        ('10.', 10.0),
        (' 42 ', 42.0),
        (7, 7.0),
    ])
    def test_numeric_variants(self, raw, expected):
        assert parse_numeric(raw, 2, 'PRICE') == expected

    @pytest.mark.parametrize("raw", ['abc', '1,000', '1e5', '12.3.4', True])
    def test_non_numeric_value_fails(self, column_spec, raw):
        with pytest.raises(InvalidNumericValue) as exc_info:
            column_spec.coerce('PRICE', raw, 5)

        assert exc_info.value.row == 5
        assert exc_info.value.column == 'PRICE'

    def test_blank_numeric_stays_blank(self, column_spec):
        assert column_spec.coerce('PRICE', '', 2) is None
        assert column_spec.coerce('PRICE', None, 2) is None

    def test_formula_gets_leading_equals(self, column_spec):
        assert column_spec.coerce('FORM', 'E2-D2', 2) == '=E2-D2'
        assert column_spec.coerce('FORM', '=E2-D2', 2) == '=E2-D2'

    def test_string_column_is_never_coerced(self, column_spec):
        assert column_spec.coerce('CUSIP', 123456789, 2) == '123456789'
        assert column_spec.coerce('CUSIP', '00123', 2) == '00123'

    def test_format_only_column_keeps_literal_value(self, column_spec):
        assert column_spec.coerce('NEW PRICE', '150', 2) == '150'
