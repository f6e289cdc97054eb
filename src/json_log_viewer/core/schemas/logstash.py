"""Logstash (logstash-logback-encoder) JSON layout."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .base import FieldMapping, Schema, SchemaRule

LOGSTASH_MAPPING = FieldMapping(
    level=("level",),
    timestamp=("@timestamp",),
    logger=("logger_name",),
    message=("message",),
    stack_trace=("stack_trace",),
)


def _at_timestamp_bonus(obj: Mapping[str, Any]) -> int:
    # @timestamp is a strong Logstash indicator.
    return 2 if "@timestamp" in obj else 0


LOGSTASH_RULE = SchemaRule(
    schema=Schema.LOGSTASH,
    signature=(
        "@timestamp",
        "level",
        "logger_name",
        "message",
        "stack_trace",
        "thread_name",
        "@version",
    ),
    bonus=_at_timestamp_bonus,
)
