"""Timestamp parsing and display helpers.

Normalizes ISO8601 strings and numeric epochs into timezone-aware datetimes and
formats them for display in a target timezone.
"""

from __future__ import annotations

import math
import re
from datetime import UTC, datetime, timedelta, timezone, tzinfo
from functools import lru_cache
from typing import Any, Literal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .errors import TimezoneError

TimestampStyle = Literal["time", "full"]

# Values at or above this magnitude are epoch milliseconds.
EPOCH_MILLIS_THRESHOLD = 1e12

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)

_ISO_RE = re.compile(
    r"(?P<y>\d{4})-(?P<mo>\d{2})-(?P<d>\d{2})"
    r"[Tt ](?P<h>\d{2}):(?P<mi>\d{2}):(?P<s>\d{2})"
    r"(?:\.(?P<frac>\d+))?"
    r"(?P<tz>[Zz]|[+-]\d{2}:\d{2})?",
    re.ASCII,
)


def _offset(text: str) -> tzinfo:
    if text in ("Z", "z"):
        return UTC
    sign = -1 if text[0] == "-" else 1
    hours, minutes = int(text[1:3]), int(text[4:6])
    if hours > 23 or minutes > 59:
        raise ValueError(f"offset out of range: {text}")
    return timezone(sign * timedelta(hours=hours, minutes=minutes))


def parse_iso(s: str) -> datetime | None:
    """Parse an ISO8601 timestamp. If the offset is missing, assume UTC."""
    m = _ISO_RE.fullmatch(s)
    if not m:
        return None

    frac = (m.group("frac") or "")[:6].ljust(6, "0")
    try:
        tz = _offset(m.group("tz")) if m.group("tz") else UTC
        return datetime(
            int(m.group("y")),
            int(m.group("mo")),
            int(m.group("d")),
            int(m.group("h")),
            int(m.group("mi")),
            int(m.group("s")),
            int(frac),
            tzinfo=tz,
        )
    except ValueError:
        return None


def split_epoch(value: float | int) -> tuple[int, int] | None:
    """Split a numeric epoch into whole seconds and a non-negative nanosecond part.

    Magnitudes >= 1e12 are milliseconds, everything else is seconds.
    """
    if isinstance(value, float) and not math.isfinite(value):
        return None

    if abs(value) >= EPOCH_MILLIS_THRESHOLD:
        secs, millis = divmod(int(value), 1000)
        return secs, millis * 1_000_000

    secs = math.floor(value)
    nanos = int((value - secs) * 1e9)
    return secs, min(nanos, 999_999_999)


def parse_epoch(value: float | int) -> datetime | None:
    """Convert a numeric epoch (seconds or milliseconds) into a UTC datetime."""
    parts = split_epoch(value)
    if parts is None:
        return None
    secs, nanos = parts
    try:
        return _EPOCH + timedelta(seconds=secs, microseconds=nanos // 1000)
    except OverflowError:
        return None


def parse_timestamp(value: Any) -> datetime | None:
    """Parse a JSON value into an aware datetime, or None if unrecognized."""
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        return parse_iso(value)
    if isinstance(value, (int, float)):
        return parse_epoch(value)
    return None


@lru_cache(maxsize=32)
def resolve_timezone(name: str) -> tzinfo | None:
    """Resolve a display timezone name.

    Returns None for the host's local zone, UTC for "utc", or a ZoneInfo for an
    IANA name. Raises TimezoneError for anything else.
    """
    key = name.lower()
    if key == "local":
        return None
    if key == "utc":
        return UTC
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError) as exc:
        raise TimezoneError(f"unknown timezone: {name}") from exc


def _format_offset(dt: datetime) -> str:
    delta = dt.utcoffset() or timedelta(0)
    sign = "-" if delta < timedelta(0) else "+"
    minutes = abs(int(delta.total_seconds())) // 60
    return f"{sign}{minutes // 60:02d}:{minutes % 60:02d}"


def format_timestamp(ts: datetime, tz: str, style: TimestampStyle = "full") -> str:
    """Format a timestamp in the requested timezone.

    "time" renders HH:MM:SS.mmm; "full" renders YYYY-MM-DDTHH:MM:SS.mmm followed
    by "Z" for UTC or a numeric offset for local and named zones.
    """
    target = resolve_timezone(tz)
    local = ts.astimezone(target)
    millis = local.microsecond // 1000

    clock = f"{local:%H:%M:%S}.{millis:03d}"
    if style == "time":
        return clock

    suffix = "Z" if target is UTC else _format_offset(local)
    return f"{local.year:04d}-{local.month:02d}-{local.day:02d}T{clock}{suffix}"
