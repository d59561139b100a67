"""
Data models and enums for MySQL Dump.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, BinaryIO, Callable, Optional


class ValueCategory(Enum):
    """Semantic value class driving how a column is rendered as a SQL literal."""
    INTEGER = "integer"
    FLOAT = "float"
    DECIMAL = "decimal"
    DATE = "date"
    DATETIME = "datetime"
    TIMESTAMP = "timestamp"
    TIME = "time"
    YEAR = "year"
    TEXT = "text"
    BINARY = "binary"
    ENUM_OR_SET = "enum_or_set"
    BOOLEAN = "boolean"
    JSON = "json"


class EventKind(Enum):
    """Kinds of progress events emitted to a dump observer."""
    DUMP_STARTED = "dump_started"
    TABLE_STARTED = "table_started"
    TABLE_FINISHED = "table_finished"
    DUMP_FINISHED = "dump_finished"
    DUMP_FAILED = "dump_failed"


@dataclass(frozen=True)
class ColumnInfo:
    """Database column metadata."""
    name: str
    type: str
    nullable: str = "YES"
    key: str = ""
    default: Any = None
    extra: str = ""


@dataclass
class TableStats:
    """Statistics for a single table dump."""
    table: str
    rows_dumped: int = 0
    data_dumped: bool = False


@dataclass
class DumpStats:
    """Result of a whole dump run."""
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None
    tables: list[TableStats] = field(default_factory=list)
    total_rows: int = 0

    @property
    def elapsed(self) -> float:
        if self.started_at is None or self.finished_at is None:
            return 0.0
        return (self.finished_at - self.started_at).total_seconds()


@dataclass
class DumpEvent:
    """Structured progress event passed to DumpOptions.observer."""
    kind: EventKind
    table: Optional[str] = None
    rows: int = 0
    elapsed: float = 0.0
    error: Optional[BaseException] = None


@dataclass
class DumpOptions:
    """Options controlling what a dump writes.

    ``tables`` strictly dominates ``ignore_tables``; when ``tables`` is empty
    every table reported by the server is dumped except the ignored ones.
    ``all_tables`` is informational only: it is set whenever ``tables`` is
    empty and never changes which tables are selected.
    ``writer`` is a binary stream, standard output when left unset.
    """
    data: bool = False
    tables: list[str] = field(default_factory=list)
    ignore_tables: list[str] = field(default_factory=list)
    all_tables: bool = False
    drop_table: bool = False
    insert_ignore: bool = False
    writer: Optional[BinaryIO] = None
    observer: Optional[Callable[[DumpEvent], None]] = None

    def __post_init__(self):
        if not self.tables:
            self.all_tables = True

    @classmethod
    def from_config(cls, dump_config: dict[str, Any], **overrides: Any) -> "DumpOptions":
        """
        Create DumpOptions from the ``dump`` config section; non-None overrides win.
        """
        settings = {}
        for key in ['data', 'tables', 'ignore_tables', 'all_tables', 'drop_table', 'insert_ignore']:
            if key in dump_config and dump_config[key] is not None:
                settings[key] = dump_config[key]
            if overrides.get(key) is not None:
                settings[key] = overrides[key]
        for key in ('tables', 'ignore_tables'):
            if key in settings:
                settings[key] = list(settings[key])
        for key in ('writer', 'observer'):
            if overrides.get(key) is not None:
                settings[key] = overrides[key]
        return cls(**settings)
