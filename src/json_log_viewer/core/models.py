"""Core data models for JSON log rendering."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any

# Bunyan-style synonyms accepted when parsing level names.
_LEVEL_ALIASES = {
    "WARNING": "WARN",
    "CRITICAL": "FATAL",
    "PANIC": "FATAL",
}


class Level(IntEnum):
    """Normalized severity levels, ordered from least to most severe.

    Values follow the Bunyan numeric scale so numeric levels map directly.
    """

    TRACE = 10
    DEBUG = 20
    INFO = 30
    WARN = 40
    ERROR = 50
    FATAL = 60

    def __str__(self) -> str:
        return self.name

    @classmethod
    def parse(cls, value: str) -> Level | None:
        """Parse a level name, ignoring ASCII case, or return None."""
        name = value.upper() if value.isascii() else value
        name = _LEVEL_ALIASES.get(name, name)
        try:
            return cls[name]
        except KeyError:
            return None

    @classmethod
    def from_bunyan(cls, value: int) -> Level | None:
        """Map a Bunyan numeric level (10..60) to a Level."""
        try:
            return cls(value)
        except ValueError:
            return None


class Role(str, Enum):
    """Canonical roles a schema mapping may resolve."""

    LEVEL = "level"
    TIMESTAMP = "timestamp"
    LOGGER = "logger"
    MESSAGE = "message"
    STACK_TRACE = "stack_trace"


@dataclass(frozen=True, slots=True)
class LogRecord:
    """Canonical projection of one JSON log line."""

    raw: Any
    level: Level | None = None
    timestamp: str | None = None  # already formatted for display
    logger: str | None = None
    message: str | None = None
    stack_trace: str | None = None
    stack_trace_key: str | None = None  # key that supplied stack_trace
    extras: dict[str, Any] = field(default_factory=dict)  # sorted by key


@dataclass(frozen=True, slots=True)
class TextToken:
    """Template text copied verbatim."""

    text: str


@dataclass(frozen=True, slots=True)
class FieldToken:
    """Template placeholder for a canonical role."""

    role: Role


@dataclass(frozen=True, slots=True)
class CustomFieldToken:
    """Template placeholder looked up in a record's extras."""

    name: str


FormatToken = TextToken | FieldToken | CustomFieldToken
