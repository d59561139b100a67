"""
Database connection management for MySQL Dump.
"""

import logging
from collections.abc import Iterator
from typing import Optional

import mysql.connector
from mysql.connector import Error as MySQLError

from .config import ConnectionSettings
from .exceptions import DumpConnectionError, QueryError
from .models import ColumnInfo


class DatabaseConnection:
    """Manages a MySQL connection with context manager support."""

    DEFAULT_PORT = 3306
    DEFAULT_CHARSET = 'utf8mb4'

    def __init__(
        self,
        host: str,
        port: int,
        user: str,
        password: str,
        database: Optional[str] = None,
        charset: Optional[str] = None,
        collation: Optional[str] = None
    ):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.database = database
        self.charset = charset or self.DEFAULT_CHARSET
        self.collation = collation
        self.connection = None

    @classmethod
    def from_settings(cls, settings: ConnectionSettings) -> "DatabaseConnection":
        """Build a connection from parsed config or DSN settings.

        The DSN parameters ``charset`` (first entry of a comma-separated list)
        and ``collation`` are forwarded to the driver; any other parameter is
        logged and ignored.
        """
        params = dict(settings.params)
        charset = params.pop('charset', '').split(',')[0].strip()
        collation = params.pop('collation', None)
        for key in params:
            logging.warning(f"Ignoring unsupported DSN parameter '{key}'")
        return cls(
            host=settings.host,
            port=settings.port,
            user=settings.user,
            password=settings.password,
            database=settings.database,
            charset=charset or None,
            collation=collation or None
        )

    def __enter__(self) -> "DatabaseConnection":
        """Context manager entry - establish connection."""
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit - close connection."""
        self.disconnect()

    def connect(self) -> None:
        """Establish database connection and select the database."""
        connect_args = {
            'host': self.host,
            'port': self.port,
            'user': self.user,
            'password': self.password,
            'charset': self.charset,
            'use_unicode': True,
        }
        if self.collation:
            connect_args['collation'] = self.collation

        try:
            self.connection = mysql.connector.connect(**connect_args)
            logging.info(f"Connected to {self.host}:{self.port}")
        except MySQLError as e:
            logging.error(f"Failed to connect to database: {e}")
            raise DumpConnectionError(f"cannot connect to {self.host}:{self.port}: {e}") from e

        if self.database:
            self.use_database(self.database)

    def disconnect(self) -> None:
        """Close database connection."""
        if self.connection and self.connection.is_connected():
            self.connection.close()
            logging.debug("Database connection closed")

    def use_database(self, database: str) -> None:
        """Switch the session to ``database``."""
        try:
            self.execute_query(f"USE `{database}`", fetch=False)
        except QueryError as e:
            raise DumpConnectionError(f"cannot select database '{database}': {e}") from e
        self.database = database

    def execute_query(
        self,
        query: str,
        params: Optional[tuple] = None,
        fetch: bool = True
    ) -> list[tuple]:
        """Execute a query and return results."""
        cursor = self.connection.cursor()
        try:
            cursor.execute(query, params)
            return cursor.fetchall() if fetch else []
        except MySQLError as e:
            raise QueryError(f"query failed: {query}: {e}") from e
        finally:
            cursor.close()

    def get_cursor(self, buffered: bool = False):
        """Get a cursor for streaming large results.

        Args:
            buffered: If False (default), rows are read from the server one at
                     a time while iterating. If True, uses buffered cursor.
        """
        return self.connection.cursor(buffered=buffered)

    def get_tables(self) -> list[str]:
        """Get list of all tables in the current database, in server order."""
        results = self.execute_query("SHOW TABLES")
        return [row[0] for row in results]

    def get_table_columns(self, table: str) -> list[ColumnInfo]:
        """Get column information for a table."""
        results = self.execute_query(f"DESCRIBE `{table}`")
        return [
            ColumnInfo(
                name=row[0],
                type=_as_str(row[1]),
                nullable=row[2],
                key=row[3],
                default=row[4],
                extra=row[5]
            )
            for row in results
        ]

    def get_create_table(self, table: str) -> str:
        """Get CREATE TABLE statement as reported by the server."""
        results = self.execute_query(f"SHOW CREATE TABLE `{table}`")
        return results[0][1]

    def iter_rows(self, table: str) -> Iterator[tuple]:
        """Yield every row of ``table`` from an unbuffered cursor."""
        query = f"SELECT * FROM `{table}`"
        cursor = self.get_cursor()
        try:
            cursor.execute(query)
            yield from cursor
        except MySQLError as e:
            raise QueryError(f"query failed: {query}: {e}") from e
        finally:
            # an abandoned iteration leaves rows on the wire
            if self.connection.unread_result:
                self.connection.consume_results()
            cursor.close()


def _as_str(value) -> str:
    # some server versions report DESCRIBE types as bytes
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode('utf-8')
    return value
