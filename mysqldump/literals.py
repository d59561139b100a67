"""
SQL literal rendering for MySQL Dump.

Every function here is pure: it receives one non-NULL cell value as returned
by the driver and produces the exact text placed in an INSERT statement.
Numbers may arrive either as native Python values or as the raw bytes the
server sent; both must produce the same text.
"""

import json
import math
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Any, Callable

from .exceptions import ConversionError
from .models import ValueCategory

DATE_FORMAT = '%Y-%m-%d'
DATETIME_FORMAT = '%Y-%m-%d %H:%M:%S'

RAW_TYPES = (bytes, bytearray)

NULL = 'NULL'


def _raw_text(value: bytes, category: ValueCategory) -> str:
    try:
        return bytes(value).decode('utf-8')
    except UnicodeDecodeError:
        raise ConversionError(category, value, 'is not valid UTF-8') from None


def _as_text(value: Any, category: ValueCategory) -> str:
    if isinstance(value, RAW_TYPES):
        return _raw_text(value, category)
    return str(value)


def _quote(text: str) -> str:
    return f"'{text}'"


def escape_string(text: str) -> str:
    """Double every single quote; nothing else is escaped."""
    return text.replace("'", "''")


def _render_integer(value: Any) -> str:
    if isinstance(value, RAW_TYPES):
        return _raw_text(value, ValueCategory.INTEGER)
    if isinstance(value, int):
        return str(int(value))
    raise ConversionError(ValueCategory.INTEGER, value)


def format_float(value: float) -> str:
    """Fixed-notation text with the shortest digits that round-trip.

    ``3.5`` -> ``3.5``, ``3.0`` -> ``3``, ``1e20`` -> ``100000000000000000000``.
    """
    if not math.isfinite(value):
        raise ValueError(f"cannot render non-finite float {value!r}")
    text = format(Decimal(repr(float(value))), 'f')
    if '.' in text:
        text = text.rstrip('0').rstrip('.')
    return text


def _render_float(value: Any) -> str:
    if isinstance(value, RAW_TYPES):
        return _raw_text(value, ValueCategory.FLOAT)
    if isinstance(value, int):
        return str(int(value))
    if isinstance(value, float):
        try:
            return format_float(value)
        except ValueError:
            raise ConversionError(ValueCategory.FLOAT, value) from None
    raise ConversionError(ValueCategory.FLOAT, value)


def _render_decimal(value: Any) -> str:
    # fixed notation keeps the column scale (Decimal('0E-10') -> 0.0000000000)
    if isinstance(value, Decimal):
        return format(value, 'f')
    return _as_text(value, ValueCategory.DECIMAL)


def _render_date(value: Any) -> str:
    if not isinstance(value, date):
        raise ConversionError(ValueCategory.DATE, value)
    return _quote(value.strftime(DATE_FORMAT))


def _datetime_renderer(category: ValueCategory) -> Callable[[Any], str]:
    def render_datetime(value: Any) -> str:
        if not isinstance(value, datetime):
            raise ConversionError(category, value)
        return _quote(value.strftime(DATETIME_FORMAT))
    return render_datetime


def format_timedelta(value: timedelta) -> str:
    """Format a TIME value the way the server prints it, e.g. ``-838:59:59``."""
    total = (value.days * 86400 + value.seconds) * 1_000_000 + value.microseconds
    sign = '-' if total < 0 else ''
    seconds, micros = divmod(abs(total), 1_000_000)
    minutes, seconds = divmod(seconds, 60)
    hours, minutes = divmod(minutes, 60)
    text = f"{sign}{hours:02d}:{minutes:02d}:{seconds:02d}"
    if micros:
        text += f".{micros:06d}"
    return text


def _render_time(value: Any) -> str:
    if isinstance(value, RAW_TYPES):
        return _quote(_raw_text(value, ValueCategory.TIME))
    if isinstance(value, timedelta):
        return _quote(format_timedelta(value))
    if isinstance(value, time):
        return _quote(value.replace(tzinfo=None).isoformat())
    raise ConversionError(ValueCategory.TIME, value)


def _render_year(value: Any) -> str:
    if isinstance(value, RAW_TYPES):
        return _raw_text(value, ValueCategory.YEAR)
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    raise ConversionError(ValueCategory.YEAR, value)


def _render_text(value: Any) -> str:
    return _quote(escape_string(_as_text(value, ValueCategory.TEXT)))


def _render_binary(value: Any) -> str:
    if isinstance(value, int) and not isinstance(value, bool):
        # BIT columns come back from the driver as integers
        value = value.to_bytes(max(1, (value.bit_length() + 7) // 8), 'big')
    if not isinstance(value, (bytes, bytearray, memoryview)):
        raise ConversionError(ValueCategory.BINARY, value)
    return f"0x{bytes(value).hex().upper()}"


def _render_enum_or_set(value: Any) -> str:
    if isinstance(value, (set, frozenset)):
        members = sorted(_as_text(member, ValueCategory.ENUM_OR_SET) for member in value)
        return _quote(','.join(members))
    return _quote(_as_text(value, ValueCategory.ENUM_OR_SET))


def _render_boolean(value: Any) -> str:
    if not isinstance(value, bool):
        raise ConversionError(ValueCategory.BOOLEAN, value)
    return 'true' if value else 'false'


def _render_json(value: Any) -> str:
    # embedded quotes are left as-is, unlike TEXT
    if isinstance(value, (dict, list)):
        return _quote(json.dumps(value, ensure_ascii=False))
    return _quote(_as_text(value, ValueCategory.JSON))


RENDERERS: dict[ValueCategory, Callable[[Any], str]] = {
    ValueCategory.INTEGER: _render_integer,
    ValueCategory.FLOAT: _render_float,
    ValueCategory.DECIMAL: _render_decimal,
    ValueCategory.DATE: _render_date,
    ValueCategory.DATETIME: _datetime_renderer(ValueCategory.DATETIME),
    ValueCategory.TIMESTAMP: _datetime_renderer(ValueCategory.TIMESTAMP),
    ValueCategory.TIME: _render_time,
    ValueCategory.YEAR: _render_year,
    ValueCategory.TEXT: _render_text,
    ValueCategory.BINARY: _render_binary,
    ValueCategory.ENUM_OR_SET: _render_enum_or_set,
    ValueCategory.BOOLEAN: _render_boolean,
    ValueCategory.JSON: _render_json,
}


def render(category: ValueCategory, value: Any) -> str:
    """Render one non-NULL value as a SQL literal.

    Raises:
        ConversionError: The value's Python type does not fit the category.
    """
    return RENDERERS[category](value)


def render_value(category: ValueCategory, value: Any) -> str:
    """Render a value, mapping None to NULL regardless of category."""
    if value is None:
        return NULL
    return render(category, value)
