"""Schema mapping and detection rule types."""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any


class Schema(str, Enum):
    """Known JSON log schemas."""

    LOGSTASH = "logstash"
    LOGRUS = "logrus"
    BUNYAN = "bunyan"
    GENERIC = "generic"


@dataclass(frozen=True, slots=True)
class FieldMapping:
    """Ordered candidate keys for each canonical role (first present key wins)."""

    level: Sequence[str]
    timestamp: Sequence[str]
    logger: Sequence[str]
    message: Sequence[str]
    stack_trace: Sequence[str]


def find_key(candidates: Sequence[str], obj: Mapping[str, Any]) -> str | None:
    """Return the first candidate present in obj, in declared order."""
    for key in candidates:
        if key in obj:
            return key
    return None


@dataclass(frozen=True, slots=True)
class SchemaRule:
    """Detection rule: +1 per present signature key, plus a bonus."""

    schema: Schema
    signature: Sequence[str]
    bonus: Callable[[Mapping[str, Any]], int] = lambda obj: 0

    def score(self, obj: Mapping[str, Any]) -> int:
        """Score how strongly obj looks like this schema."""
        return sum(1 for key in self.signature if key in obj) + self.bonus(obj)
