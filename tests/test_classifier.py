"""
Unit tests for classifier.py
"""

from unittest import mock

import pytest

from mysqldump.exceptions import UnsupportedTypeError
from mysqldump.models import ColumnInfo, ValueCategory
from mysqldump.classifier import (
    TYPE_CATEGORIES,
    ColumnCategories,
    classify,
    classify_column,
    classify_columns,
    normalize_type_name,
)


class TestNormalizeTypeName:
    """Tests for normalize_type_name function."""

    def test_plain_name(self):
        assert normalize_type_name("INT") == "INT"

    def test_lowercase_is_upper_cased(self):
        assert normalize_type_name("varchar") == "VARCHAR"

    def test_strips_unsigned(self):
        assert normalize_type_name("BIGINT UNSIGNED") == "BIGINT"

    def test_strips_unsigned_case_insensitive(self):
        assert normalize_type_name("int unsigned") == "INT"

    def test_strips_whitespace(self):
        assert normalize_type_name("  TINY INT ") == "TINYINT"

    def test_strips_length(self):
        assert normalize_type_name("int(11)") == "INT"
        assert normalize_type_name("decimal(10,2)") == "DECIMAL"

    def test_strips_length_and_qualifiers(self):
        assert normalize_type_name("int(10) unsigned zerofill") == "INT"

    def test_enum_values_are_dropped(self):
        """Enum members never leak into the type name, even 'unsigned'."""
        assert normalize_type_name("enum('unsigned','a b')") == "ENUM"
        assert normalize_type_name("set('x','y')") == "SET"


class TestClassify:
    """Tests for classify function."""

    @pytest.mark.parametrize("type_name", [
        "TINYINT", "SMALLINT", "MEDIUMINT", "INT", "INTEGER", "BIGINT",
    ])
    def test_integer_types(self, type_name):
        assert classify(type_name) is ValueCategory.INTEGER

    @pytest.mark.parametrize("type_name,category", [
        ("FLOAT", ValueCategory.FLOAT),
        ("DOUBLE", ValueCategory.FLOAT),
        ("DECIMAL", ValueCategory.DECIMAL),
        ("DEC", ValueCategory.DECIMAL),
        ("DATE", ValueCategory.DATE),
        ("DATETIME", ValueCategory.DATETIME),
        ("TIMESTAMP", ValueCategory.TIMESTAMP),
        ("TIME", ValueCategory.TIME),
        ("YEAR", ValueCategory.YEAR),
        ("ENUM", ValueCategory.ENUM_OR_SET),
        ("SET", ValueCategory.ENUM_OR_SET),
        ("BOOL", ValueCategory.BOOLEAN),
        ("BOOLEAN", ValueCategory.BOOLEAN),
        ("JSON", ValueCategory.JSON),
    ])
    def test_scalar_types(self, type_name, category):
        assert classify(type_name) is category

    @pytest.mark.parametrize("type_name", [
        "CHAR", "VARCHAR", "TINYTEXT", "TEXT", "MEDIUMTEXT", "LONGTEXT",
    ])
    def test_text_types(self, type_name):
        assert classify(type_name) is ValueCategory.TEXT

    @pytest.mark.parametrize("type_name", [
        "BIT", "BINARY", "VARBINARY", "TINYBLOB", "BLOB", "MEDIUMBLOB", "LONGBLOB",
    ])
    def test_binary_types(self, type_name):
        assert classify(type_name) is ValueCategory.BINARY

    def test_describe_output(self):
        """Test types as reported by DESCRIBE."""
        assert classify("bigint(20) unsigned") is ValueCategory.INTEGER
        assert classify("varchar(255)") is ValueCategory.TEXT
        assert classify("enum('small','large')") is ValueCategory.ENUM_OR_SET
        assert classify("datetime(6)") is ValueCategory.DATETIME

    def test_unsupported_type(self):
        with pytest.raises(UnsupportedTypeError) as exc_info:
            classify("GEOMETRY")
        assert exc_info.value.type_name == "GEOMETRY"
        assert "unsupported type: GEOMETRY" in str(exc_info.value)

    def test_unsupported_type_reports_normalized_name(self):
        with pytest.raises(UnsupportedTypeError) as exc_info:
            classify("point")
        assert exc_info.value.type_name == "POINT"

    def test_every_category_is_reachable(self):
        assert set(TYPE_CATEGORIES.values()) == set(ValueCategory)


class TestClassifyColumns:
    """Tests for classify_columns function."""

    def test_mixed_inputs(self):
        columns = [
            ColumnInfo("id", "int(11)"),
            "varchar(10)",
            ValueCategory.JSON,
        ]
        assert classify_columns(columns) == [
            ValueCategory.INTEGER,
            ValueCategory.TEXT,
            ValueCategory.JSON,
        ]

    def test_unsupported_column_fails(self):
        columns = [ColumnInfo("id", "int"), ColumnInfo("shape", "geometry")]
        with pytest.raises(UnsupportedTypeError):
            classify_columns(columns)


class TestClassifyColumn:
    """Tests for classify_column function."""

    def test_column_info(self):
        assert classify_column(ColumnInfo("price", "decimal(10,2)")) == ValueCategory.DECIMAL

    def test_type_name(self):
        assert classify_column("year(4)") == ValueCategory.YEAR

    def test_category_passthrough(self):
        assert classify_column(ValueCategory.BOOLEAN) == ValueCategory.BOOLEAN


class TestColumnCategories:
    """Tests for ColumnCategories class."""

    def test_len(self):
        assert len(ColumnCategories(["int", "geometry"])) == 2

    def test_unsupported_column_not_classified_until_used(self):
        categories = ColumnCategories([ColumnInfo("id", "int"), ColumnInfo("shape", "geometry")])

        assert categories[0] == ValueCategory.INTEGER
        with pytest.raises(UnsupportedTypeError):
            categories[1]

    def test_result_is_cached(self):
        categories = ColumnCategories(["varchar(10)"])
        with mock.patch("mysqldump.classifier.classify", wraps=classify) as spy:
            assert categories[0] == ValueCategory.TEXT
            assert categories[0] == ValueCategory.TEXT
        assert spy.call_count == 1
