"""
MySQL Dump
==========
Exports the schema and contents of a MySQL database as a replayable SQL
script:
- Idempotent CREATE TABLE IF NOT EXISTS statements
- Optional DROP TABLE IF EXISTS
- One INSERT (or INSERT IGNORE) statement per row
- Table inclusion and exclusion lists
"""

from .classifier import ColumnCategories, classify, normalize_type_name
from .config import ConfigLoader, ConnectionSettings, parse_dsn
from .connection import DatabaseConnection
from .database_dumper import DatabaseDumper, dump
from .exceptions import (
    ConversionError,
    DumpConnectionError,
    DumpError,
    QueryError,
    UnsupportedTypeError,
)
from .literals import render, render_value
from .main import main
from .models import (
    ColumnInfo,
    DumpEvent,
    DumpOptions,
    DumpStats,
    EventKind,
    TableStats,
    ValueCategory,
)
from .table_dumper import TableDumper, make_create_idempotent, serialize_row
from .utils import open_sink, setup_logging

__version__ = "1.0.0"

__all__ = [
    # Main entry points
    "main",
    "dump",
    # Core classes
    "ConfigLoader",
    "DatabaseConnection",
    "DatabaseDumper",
    "TableDumper",
    # Serialization
    "ColumnCategories",
    "classify",
    "normalize_type_name",
    "render",
    "render_value",
    "serialize_row",
    "make_create_idempotent",
    # Models
    "ColumnInfo",
    "ConnectionSettings",
    "DumpEvent",
    "DumpOptions",
    "DumpStats",
    "EventKind",
    "TableStats",
    "ValueCategory",
    # Errors
    "ConversionError",
    "DumpConnectionError",
    "DumpError",
    "QueryError",
    "UnsupportedTypeError",
    # Utilities
    "open_sink",
    "parse_dsn",
    "setup_logging",
]
