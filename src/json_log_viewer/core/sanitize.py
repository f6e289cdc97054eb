"""Terminal-safety helpers for untrusted log text."""

from __future__ import annotations

import re

# C0 controls except TAB/LF, DEL, and C1 controls (CSI/OSC/DCS introducers).
_CONTROL_RE = re.compile(r"[\x00-\x08\x0b-\x1f\x7f-\x9f]")


def sanitize(text: str) -> str:
    """Strip terminal control characters, keeping TAB and newline."""
    return _CONTROL_RE.sub("", text)


# Controls json.dumps(ensure_ascii=False) leaves unescaped.
_JSON_UNESCAPED_RE = re.compile(r"[\x7f-\x9f]")


def escape_json_controls(json_text: str) -> str:
    """Escape DEL and C1 controls in serialized JSON as \\uXXXX.

    These only occur inside JSON strings, so the decoded value is unchanged.
    """
    return _JSON_UNESCAPED_RE.sub(lambda m: f"\\u{ord(m[0]):04x}", json_text)
