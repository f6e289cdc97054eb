"""JSON log schemas and detection.

Each schema module declares its field mapping and detection rule as data.
"""

from __future__ import annotations

from .base import FieldMapping, Schema, SchemaRule, find_key
from .bunyan import BUNYAN_MAPPING, BUNYAN_RULE
from .detect import DETECTION_RULES, detect_schema, field_mapping, schema_from_choice
from .generic import GENERIC_MAPPING
from .logrus import LOGRUS_MAPPING, LOGRUS_RULE
from .logstash import LOGSTASH_MAPPING, LOGSTASH_RULE

__all__ = [
    "BUNYAN_MAPPING",
    "BUNYAN_RULE",
    "DETECTION_RULES",
    "FieldMapping",
    "GENERIC_MAPPING",
    "LOGRUS_MAPPING",
    "LOGRUS_RULE",
    "LOGSTASH_MAPPING",
    "LOGSTASH_RULE",
    "Schema",
    "SchemaRule",
    "detect_schema",
    "field_mapping",
    "find_key",
    "schema_from_choice",
]
