"""Score-based schema detection."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from .base import FieldMapping, Schema, SchemaRule
from .bunyan import BUNYAN_MAPPING, BUNYAN_RULE
from .generic import GENERIC_MAPPING
from .logrus import LOGRUS_MAPPING, LOGRUS_RULE
from .logstash import LOGSTASH_MAPPING, LOGSTASH_RULE

# Order is the tie-break policy: on equal scores the earlier rule wins.
# Bunyan ahead of Logrus is arbitrary but fixed ({"level", "msg"} -> Bunyan).
DETECTION_RULES: Sequence[SchemaRule] = (LOGSTASH_RULE, BUNYAN_RULE, LOGRUS_RULE)

_MAPPINGS: dict[Schema, FieldMapping] = {
    Schema.LOGSTASH: LOGSTASH_MAPPING,
    Schema.LOGRUS: LOGRUS_MAPPING,
    Schema.BUNYAN: BUNYAN_MAPPING,
    Schema.GENERIC: GENERIC_MAPPING,
}


def field_mapping(schema: Schema) -> FieldMapping:
    """Return the field mapping for a schema."""
    return _MAPPINGS[schema]


def detect_schema(value: Any, *, rules: Sequence[SchemaRule] = DETECTION_RULES) -> Schema:
    """Guess the schema of a parsed JSON value; non-objects are Generic."""
    if not isinstance(value, dict):
        return Schema.GENERIC

    best: Schema = Schema.GENERIC
    best_score = 0
    for rule in rules:
        score = rule.score(value)
        if score > best_score:
            best, best_score = rule.schema, score
    return best


def schema_from_choice(choice: str, value: Any) -> Schema:
    """Resolve a user choice ("auto" or a schema name) against a sample value."""
    if choice == "auto":
        return detect_schema(value)
    return Schema(choice)
