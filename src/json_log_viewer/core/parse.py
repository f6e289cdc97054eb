"""Input line classification under the non-JSON policy."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any

from .config import NonJsonMode
from .errors import LineParseError
from .sanitize import sanitize


@dataclass(frozen=True, slots=True)
class JsonLine:
    value: Any


@dataclass(frozen=True, slots=True)
class PlainLine:
    """A non-JSON line to pass through, already sanitized."""

    text: str


ParsedLine = JsonLine | PlainLine


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-standard JSON constant: {name}")


_SURROGATE_RE = re.compile(r"[\ud800-\udfff]")


def _has_lone_surrogate(value: Any) -> bool:
    stack = [value]
    while stack:
        item = stack.pop()
        if isinstance(item, str):
            if _SURROGATE_RE.search(item):
                return True
        elif isinstance(item, dict):
            stack.extend(item.keys())
            stack.extend(item.values())
        elif isinstance(item, list):
            stack.extend(item)
    return False


def parse_line(line: str, mode: NonJsonMode) -> ParsedLine | None:
    """Parse one input line.

    Returns JsonLine for valid JSON. Otherwise returns PlainLine under
    "passthrough", None under "skip", and raises LineParseError under "fail".
    """
    try:
        value = json.loads(line, parse_constant=_reject_constant)
    except (ValueError, RecursionError):
        pass
    else:
        # Unpaired \uD800-\uDFFF escapes decode to text that cannot be written out.
        if "\\u" not in line or not _has_lone_surrogate(value):
            return JsonLine(value)

    if mode == "passthrough":
        return PlainLine(sanitize(line))
    if mode == "skip":
        return None
    raise LineParseError(f"not valid JSON: {sanitize(line)}")
