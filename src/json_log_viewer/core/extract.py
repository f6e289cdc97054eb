"""Project parsed JSON values onto canonical log records."""

from __future__ import annotations

import json
from typing import Any

from .models import Level, LogRecord
from .schemas import FieldMapping, find_key
from .timestamps import TimestampStyle, format_timestamp, parse_timestamp


def to_json(value: Any) -> str:
    """Serialize a JSON value compactly."""
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def value_to_text(value: Any) -> str:
    """Render a JSON value for display: strings as-is, everything else as compact JSON."""
    if isinstance(value, str):
        return value
    return to_json(value)


def parse_level(value: Any) -> Level | None:
    """Parse a string level name or a Bunyan numeric level."""
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        return Level.parse(value)
    if isinstance(value, int):
        return Level.from_bunyan(value)
    return None


def _display_timestamp(value: Any, tz: str, ts_format: TimestampStyle) -> str:
    parsed = parse_timestamp(value)
    if parsed is None:
        return value_to_text(value)
    try:
        return format_timestamp(parsed, tz, ts_format)
    except (OverflowError, OSError):
        # The instant falls outside datetime's range once shifted into tz.
        return value_to_text(value)


def extract_record(
    value: Any,
    mapping: FieldMapping,
    *,
    tz: str = "local",
    ts_format: TimestampStyle = "time",
) -> LogRecord:
    """Extract a LogRecord from a parsed JSON value.

    Keys consumed by a canonical role never appear in extras. Timestamps that do
    not parse are kept in their original text form. Raises TimezoneError when
    tz cannot be resolved.
    """
    if not isinstance(value, dict):
        return LogRecord(raw=value, message=to_json(value))

    level_key = find_key(mapping.level, value)
    ts_key = find_key(mapping.timestamp, value)
    logger_key = find_key(mapping.logger, value)
    message_key = find_key(mapping.message, value)
    stack_key = find_key(mapping.stack_trace, value)

    timestamp: str | None = None
    if ts_key is not None:
        ts_val = value[ts_key]
        timestamp = _display_timestamp(ts_val, tz, ts_format)

    consumed = {level_key, ts_key, logger_key, message_key, stack_key}
    extras = {k: value[k] for k in sorted(value) if k not in consumed}

    def text(key: str | None) -> str | None:
        return value_to_text(value[key]) if key is not None else None

    return LogRecord(
        raw=value,
        level=parse_level(value[level_key]) if level_key is not None else None,
        timestamp=timestamp,
        logger=text(logger_key),
        message=text(message_key),
        stack_trace=text(stack_key),
        stack_trace_key=stack_key,
        extras=extras,
    )
