"""
Main database dumping orchestration for MySQL Dump.
"""

import fnmatch
import logging
import re
from datetime import datetime
from typing import Optional, TextIO

from .config import parse_dsn
from .connection import DatabaseConnection
from .models import DumpEvent, DumpOptions, DumpStats, EventKind, TableStats
from .table_dumper import SECTION_RULE, TableDumper
from .utils import open_sink

TIMESTAMP_FORMAT = '%Y-%m-%d %H:%M:%S'


class DatabaseDumper:
    """Dumps the selected tables of one database into a single SQL script."""

    def __init__(self, connection: DatabaseConnection, options: Optional[DumpOptions] = None):
        self.connection = connection
        self.options = options or DumpOptions()

    def _compile_exclusion_patterns(self, exclude_patterns: list[str]) -> list[re.Pattern]:
        """
        Pre-compile exclusion patterns to regex for faster matching.

        Converts fnmatch patterns to compiled regex patterns.
        """
        return [re.compile(fnmatch.translate(pattern)) for pattern in exclude_patterns]

    def _is_table_excluded(
        self,
        table_name: str,
        exclude_patterns: list[str],
        compiled_patterns: Optional[list[re.Pattern]] = None
    ) -> bool:
        """
        Check if a table should be excluded.

        Supports:
        - Exact matches: 'users_backup'
        - Wildcard patterns: '*_old', 'tmp_*', '*_backup_*'
        """
        if table_name in exclude_patterns:
            logging.debug(f"Table '{table_name}' excluded by name")
            return True
        if compiled_patterns is None:
            compiled_patterns = self._compile_exclusion_patterns(exclude_patterns)
        for pattern, compiled in zip(exclude_patterns, compiled_patterns):
            if compiled.match(table_name):
                logging.debug(f"Table '{table_name}' excluded by pattern '{pattern}'")
                return True
        return False

    def resolve_tables(self) -> list[str]:
        """
        Get the tables to dump.

        An explicit table list wins outright; otherwise every table the server
        reports, in server order, minus the exclusion list.
        """
        if self.options.tables:
            return list(self.options.tables)

        table_names = self.connection.get_tables()
        exclude_patterns = self.options.ignore_tables
        if exclude_patterns:
            compiled_patterns = self._compile_exclusion_patterns(exclude_patterns)
            original_count = len(table_names)
            table_names = [
                t for t in table_names
                if not self._is_table_excluded(t, exclude_patterns, compiled_patterns)
            ]
            excluded_count = original_count - len(table_names)
            if excluded_count > 0:
                logging.info(f"Excluded {excluded_count} table(s) matching exclusion list")
        return table_names

    def run(self) -> DumpStats:
        """Run the dump, returning statistics.

        Any error is logged and re-raised; output written so far is flushed
        to the writer and must be treated as incomplete.
        """
        stats = DumpStats(started_at=datetime.now())
        logging.info(f"[dump] start at {stats.started_at.strftime(TIMESTAMP_FORMAT)}")
        self._emit(DumpEvent(EventKind.DUMP_STARTED))

        try:
            with open_sink(self.options.writer) as sink:
                self._write_header(sink, stats.started_at)

                tables = self.resolve_tables()
                logging.info(f"Dumping {len(tables)} table(s) from '{self.connection.database}'")

                dumper = TableDumper(self.connection, sink, self.options)
                for table in tables:
                    table_stats = self._dump_single_table(dumper, table)
                    stats.tables.append(table_stats)
                    stats.total_rows += table_stats.rows_dumped

                stats.finished_at = datetime.now()
                self._write_footer(sink, stats.elapsed)
        except Exception as e:
            stats.finished_at = datetime.now()
            logging.error(
                f"[dump] aborted after {len(stats.tables)} table(s), "
                f"cost {stats.elapsed:.3f}s: {e}"
            )
            self._emit(DumpEvent(EventKind.DUMP_FAILED, elapsed=stats.elapsed, error=e))
            raise

        logging.info(
            f"[dump] end at {stats.finished_at.strftime(TIMESTAMP_FORMAT)}, "
            f"cost {stats.elapsed:.3f}s"
        )
        self._emit(DumpEvent(EventKind.DUMP_FINISHED, rows=stats.total_rows, elapsed=stats.elapsed))
        return stats

    def _dump_single_table(self, dumper: TableDumper, table: str) -> TableStats:
        """Dump a single table and return stats."""
        self._emit(DumpEvent(EventKind.TABLE_STARTED, table=table))
        started = datetime.now()
        try:
            table_stats = dumper.dump_table(table)
        except Exception as e:
            logging.error(f"Error dumping table '{table}': {e}")
            raise

        elapsed = (datetime.now() - started).total_seconds()
        self._log_table_result(table_stats)
        self._emit(DumpEvent(
            EventKind.TABLE_FINISHED, table=table, rows=table_stats.rows_dumped, elapsed=elapsed
        ))
        return table_stats

    def _log_table_result(self, table_stats: TableStats) -> None:
        """Log the result of a table dump."""
        if table_stats.data_dumped:
            logging.info(f"  ✓ {table_stats.table}: {table_stats.rows_dumped} rows")
        else:
            logging.info(f"  ✓ {table_stats.table}: structure only")

    def _write_header(self, sink: TextIO, started_at: datetime) -> None:
        sink.write(SECTION_RULE)
        sink.write("-- MySQL Database Dump\n")
        sink.write(f"-- Start Time: {started_at.strftime(TIMESTAMP_FORMAT)}\n")
        sink.write(SECTION_RULE)
        sink.write("\n\n")

    def _write_footer(self, sink: TextIO, elapsed: float) -> None:
        sink.write(SECTION_RULE)
        sink.write("-- Dumped by mysqldump\n")
        sink.write(f"-- Cost Time: {elapsed:.3f}s\n")
        sink.write(SECTION_RULE)

    def _emit(self, event: DumpEvent) -> None:
        if self.options.observer is not None:
            self.options.observer(event)


def dump(
    dsn: Optional[str] = None,
    *,
    connection: Optional[DatabaseConnection] = None,
    options: Optional[DumpOptions] = None
) -> DumpStats:
    """
    Dump a database as a replayable SQL script.

    Either pass a Go-driver style ``dsn`` (``user:pass@tcp(host:port)/db``),
    in which case the connection is opened and closed here, or an already
    connected ``connection``.
    """
    if connection is not None:
        return DatabaseDumper(connection, options).run()
    if not dsn:
        raise ValueError("Either a DSN or a connection is required")

    with DatabaseConnection.from_settings(parse_dsn(dsn)) as conn:
        return DatabaseDumper(conn, options).run()
