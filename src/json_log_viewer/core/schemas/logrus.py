"""Logrus (Go) JSONFormatter layout."""

from __future__ import annotations

from .base import FieldMapping, Schema, SchemaRule

LOGRUS_MAPPING = FieldMapping(
    level=("level",),
    timestamp=("time",),
    logger=("component",),
    message=("msg",),
    stack_trace=("stack_trace", "stacktrace"),
)

LOGRUS_RULE = SchemaRule(
    schema=Schema.LOGRUS,
    signature=("level", "msg", "time", "component"),
)
