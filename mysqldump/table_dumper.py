"""
Table dumping functionality for MySQL Dump.
"""

import logging
from collections.abc import Iterable, Sequence
from typing import Any, TextIO, Union

from .classifier import ColumnCategories
from .connection import DatabaseConnection
from .literals import NULL, render
from .models import ColumnInfo, DumpOptions, TableStats, ValueCategory

SECTION_RULE = "-- ----------------------------\n"


def serialize_row(
    table: str,
    columns: Union[ColumnCategories, Iterable[Union[ColumnInfo, ValueCategory, str]]],
    values: Sequence[Any],
    ignore_duplicates: bool = False
) -> str:
    """Render one row as a complete INSERT statement terminated by ``;\\n``.

    Args:
        table: Table name, embedded verbatim between backticks.
        columns: ColumnInfo objects, reported type names or categories,
                 positionally matching ``values``. Pass a ColumnCategories
                 to reuse classifications across rows.
        values: Driver values for the row; None becomes NULL without
                looking at the column type.
        ignore_duplicates: Emit ``INSERT IGNORE`` instead of ``INSERT``.
    """
    if not isinstance(columns, ColumnCategories):
        columns = ColumnCategories(columns)
    if len(columns) != len(values):
        raise ValueError(
            f"Row for table '{table}' has {len(values)} values for {len(columns)} columns"
        )

    statement = "INSERT IGNORE INTO" if ignore_duplicates else "INSERT INTO"
    rendered = ','.join(
        NULL if value is None else render(columns[index], value)
        for index, value in enumerate(values)
    )
    return f"{statement} `{table}` VALUES ({rendered});\n"


def make_create_idempotent(create_statement: str) -> str:
    """Turn the first ``CREATE TABLE`` into ``CREATE TABLE IF NOT EXISTS``."""
    return create_statement.replace("CREATE TABLE", "CREATE TABLE IF NOT EXISTS", 1)


class TableDumper:
    """Writes the structure and rows of individual tables to a text sink."""

    def __init__(self, connection: DatabaseConnection, sink: TextIO, options: DumpOptions):
        self.connection = connection
        self.sink = sink
        self.options = options

    def dump_table(self, table: str) -> TableStats:
        """
        Dump one table: optional DROP, structure, then rows when enabled.

        Errors propagate to the caller; nothing is retried or skipped.
        """
        stats = TableStats(table=table)

        if self.options.drop_table:
            self.sink.write(f"DROP TABLE IF EXISTS `{table}`;\n")

        self.write_structure(table)

        if self.options.data:
            stats.rows_dumped = self.write_data(table)
            stats.data_dumped = True

        return stats

    def write_structure(self, table: str) -> None:
        """Write the idempotent CREATE TABLE statement for ``table``."""
        self.sink.write(SECTION_RULE)
        self.sink.write(f"-- Table structure for {table}\n")
        self.sink.write(SECTION_RULE)

        create_statement = self.connection.get_create_table(table)
        self.sink.write(make_create_idempotent(create_statement))
        self.sink.write(";")
        self.sink.write("\n\n\n\n")

    def write_data(self, table: str) -> int:
        """Stream every row of ``table`` as INSERT statements.

        Each column is classified once, on its first non-NULL value, so a column
        type without a rendering rule only fails the table when it holds data.
        """
        self.sink.write(SECTION_RULE)
        self.sink.write(f"-- Records of {table}\n")
        self.sink.write(SECTION_RULE)

        columns = self.connection.get_table_columns(table)
        categories = ColumnCategories(columns)
        logging.debug(
            f"Table '{table}' columns: "
            + ', '.join(f"{col.name}={col.type}" for col in columns)
        )

        rows_dumped = 0
        for row in self.connection.iter_rows(table):
            self.sink.write(
                serialize_row(table, categories, row, self.options.insert_ignore)
            )
            rows_dumped += 1

        self.sink.write("\n\n")
        return rows_dumped
