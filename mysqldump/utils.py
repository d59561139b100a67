"""
Utility functions for MySQL Dump.
"""

import io
import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any, BinaryIO, Optional, TextIO

from .models import DumpOptions

DEFAULT_BUFFER_SIZE = 64 * 1024


def setup_logging(log_settings: dict[str, Any]) -> None:
    """Setup logging configuration.

    Records go to stderr so that stdout can carry the SQL script.
    """
    log_level = getattr(logging, log_settings.get('level', 'INFO').upper())
    log_file = log_settings.get('file')

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        handlers=handlers,
        force=True
    )


@contextmanager
def open_sink(
    writer: Optional[BinaryIO] = None,
    buffer_size: int = DEFAULT_BUFFER_SIZE
) -> Iterator[TextIO]:
    """Wrap a binary writer in a buffered UTF-8 text stream.

    The buffer is flushed on every exit path, including errors, and the
    caller's writer is left open.
    """
    if writer is None:
        writer = sys.stdout.buffer
    buffered = io.BufferedWriter(_NonClosing(writer), buffer_size=buffer_size)
    sink = io.TextIOWrapper(buffered, encoding='utf-8', newline='\n')
    try:
        yield sink
    finally:
        sink.flush()
        sink.detach()
        buffered.close()


class _NonClosing(io.RawIOBase):
    """Raw adapter over a caller-owned binary stream."""

    def __init__(self, target: BinaryIO):
        self._target = target

    def writable(self) -> bool:
        return True

    def write(self, data) -> int:
        self._target.write(data)
        return len(data)

    def flush(self) -> None:
        if not self.closed:
            self._target.flush()


def open_output_file(path: str) -> BinaryIO:
    """Open the configured output file for binary writing, creating parents."""
    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    return open(output_path, 'wb')


def print_dry_run_info(database: str, tables: list[str], options: DumpOptions) -> None:
    """Log what would be dumped in dry-run mode."""
    logging.info(f"Would dump database: {database}")
    parts = format_options_display(options)
    if parts:
        logging.info(f"  Options: {', '.join(parts)}")
    if not tables:
        logging.info("  - No tables selected")
    for table in tables:
        logging.info(f"  - {table}")


def format_options_display(options: DumpOptions) -> list[str]:
    """Format dump options for display in dry-run mode."""
    parts = []
    if options.data:
        parts.append("data")
    if options.drop_table:
        parts.append("drop-table")
    if options.insert_ignore:
        parts.append("insert-ignore")
    if options.tables:
        parts.append(f"tables={','.join(options.tables)}")
    elif options.ignore_tables:
        parts.append(f"ignore={','.join(options.ignore_tables)}")
    return parts
