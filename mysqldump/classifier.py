"""
Column type classification for MySQL Dump.

Maps the type reported by the server (``DESCRIBE`` output such as
``int(10) unsigned`` or ``enum('a','b')``) onto a ValueCategory.
"""

import re
from collections.abc import Iterable
from typing import Optional, Union

from .exceptions import UnsupportedTypeError
from .models import ColumnInfo, ValueCategory

_PARAMS_PATTERN = re.compile(r'\(.*\)', re.DOTALL)
_QUALIFIER_PATTERN = re.compile(r'UNSIGNED|ZEROFILL', re.IGNORECASE)
_WHITESPACE_PATTERN = re.compile(r'\s+')

TYPE_CATEGORIES: dict[str, ValueCategory] = {
    **dict.fromkeys(
        ['TINYINT', 'SMALLINT', 'MEDIUMINT', 'INT', 'INTEGER', 'BIGINT'],
        ValueCategory.INTEGER,
    ),
    **dict.fromkeys(['FLOAT', 'DOUBLE'], ValueCategory.FLOAT),
    **dict.fromkeys(['DECIMAL', 'DEC'], ValueCategory.DECIMAL),
    'DATE': ValueCategory.DATE,
    'DATETIME': ValueCategory.DATETIME,
    'TIMESTAMP': ValueCategory.TIMESTAMP,
    'TIME': ValueCategory.TIME,
    'YEAR': ValueCategory.YEAR,
    **dict.fromkeys(
        ['CHAR', 'VARCHAR', 'TINYTEXT', 'TEXT', 'MEDIUMTEXT', 'LONGTEXT'],
        ValueCategory.TEXT,
    ),
    **dict.fromkeys(
        ['BIT', 'BINARY', 'VARBINARY', 'TINYBLOB', 'BLOB', 'MEDIUMBLOB', 'LONGBLOB'],
        ValueCategory.BINARY,
    ),
    **dict.fromkeys(['ENUM', 'SET'], ValueCategory.ENUM_OR_SET),
    **dict.fromkeys(['BOOL', 'BOOLEAN'], ValueCategory.BOOLEAN),
    'JSON': ValueCategory.JSON,
}


def normalize_type_name(type_name: str) -> str:
    """Strip length/parameters, UNSIGNED/ZEROFILL and whitespace, then upper-case."""
    name = _PARAMS_PATTERN.sub('', type_name)
    name = _QUALIFIER_PATTERN.sub('', name)
    return _WHITESPACE_PATTERN.sub('', name).upper()


def classify(type_name: str) -> ValueCategory:
    """Return the ValueCategory for a reported column type.

    Raises:
        UnsupportedTypeError: The normalized name has no rendering rule.
    """
    normalized = normalize_type_name(type_name)
    try:
        return TYPE_CATEGORIES[normalized]
    except KeyError:
        raise UnsupportedTypeError(normalized) from None


def classify_column(column: Union[ColumnInfo, ValueCategory, str]) -> ValueCategory:
    """Classify one column given as ColumnInfo, a type name or a category."""
    if isinstance(column, ValueCategory):
        return column
    if isinstance(column, ColumnInfo):
        return classify(column.type)
    return classify(column)


def classify_columns(
    columns: Iterable[Union[ColumnInfo, ValueCategory, str]]
) -> list[ValueCategory]:
    """Classify every column eagerly."""
    return [classify_column(column) for column in columns]


class ColumnCategories:
    """Categories for a table's columns, each resolved on first use and cached.

    A column is classified the first time a non-NULL value is rendered for it,
    so an unsupported type only fails once it actually holds data.
    """

    def __init__(self, columns: Iterable[Union[ColumnInfo, ValueCategory, str]]):
        self.columns = list(columns)
        self._categories: list[Optional[ValueCategory]] = [None] * len(self.columns)

    def __len__(self) -> int:
        return len(self.columns)

    def __getitem__(self, index: int) -> ValueCategory:
        category = self._categories[index]
        if category is None:
            category = classify_column(self.columns[index])
            self._categories[index] = category
        return category
