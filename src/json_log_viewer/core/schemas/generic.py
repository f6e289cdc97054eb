"""Fallback mapping that guesses common field names."""

from __future__ import annotations

from .base import FieldMapping

GENERIC_MAPPING = FieldMapping(
    level=("level", "severity", "loglevel", "log_level", "lvl"),
    timestamp=("timestamp", "@timestamp", "time", "ts", "datetime", "date"),
    logger=("logger", "logger_name", "name", "component", "source", "caller"),
    message=("message", "msg", "text", "body", "log"),
    stack_trace=("stack_trace", "stacktrace", "stack", "exception", "traceback"),
)
