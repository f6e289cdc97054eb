"""Bunyan (Node.js) JSON layout."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .base import FieldMapping, Schema, SchemaRule

BUNYAN_MAPPING = FieldMapping(
    level=("level",),
    timestamp=("time",),
    logger=("name",),
    message=("msg",),
    stack_trace=("stack",),
)


def _numeric_level_bonus(obj: Mapping[str, Any]) -> int:
    level = obj.get("level")
    if "v" in obj and isinstance(level, (int, float)) and not isinstance(level, bool):
        return 3
    return 0


BUNYAN_RULE = SchemaRule(
    schema=Schema.BUNYAN,
    signature=("v", "level", "name", "hostname", "pid", "time", "msg"),
    bonus=_numeric_level_bonus,
)
