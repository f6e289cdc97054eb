"""ANSI styling for rendered output."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TextIO

from .config import ColorMode, ColorName
from .models import Level

RESET = "\x1b[0m"
DIM = "\x1b[2m"

_FOREGROUND: dict[str, str] = {
    "black": "\x1b[30m",
    "red": "\x1b[31m",
    "green": "\x1b[32m",
    "yellow": "\x1b[33m",
    "blue": "\x1b[34m",
    "magenta": "\x1b[35m",
    "cyan": "\x1b[36m",
    "white": "\x1b[37m",
}

_LEVEL_STYLES: dict[Level, str] = {
    Level.TRACE: DIM,
    Level.DEBUG: _FOREGROUND["blue"],
    Level.INFO: _FOREGROUND["green"],
    Level.WARN: _FOREGROUND["yellow"],
    Level.ERROR: _FOREGROUND["red"],
    Level.FATAL: "\x1b[1;31m",
}


def color_enabled(mode: ColorMode, stream: TextIO | None = None) -> bool:
    """Decide whether to colorize; "auto" means only when writing to a terminal."""
    if mode == "always":
        return True
    if mode == "never" or stream is None:
        return False
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


@dataclass(frozen=True, slots=True)
class ColorConfig:
    """Immutable styling settings shared by every render call."""

    enabled: bool = False
    key_color: ColorName = "magenta"
    value_color: ColorName = "cyan"

    @classmethod
    def for_mode(
        cls,
        mode: ColorMode,
        *,
        stream: TextIO | None = None,
        key_color: ColorName = "magenta",
        value_color: ColorName = "cyan",
    ) -> ColorConfig:
        return cls(
            enabled=color_enabled(mode, stream),
            key_color=key_color,
            value_color=value_color,
        )

    def _wrap(self, text: str, code: str) -> str:
        if not self.enabled:
            return text
        return f"{code}{text}{RESET}"

    def style_level(self, level: Level) -> str:
        return self._wrap(str(level), _LEVEL_STYLES[level])

    def style_key(self, text: str) -> str:
        return self._wrap(text, _FOREGROUND[self.key_color])

    def style_value(self, text: str) -> str:
        return self._wrap(text, _FOREGROUND[self.value_color])

    def style_separator(self, sep: str) -> str:
        return self._wrap(sep, DIM)

    def dim(self, text: str) -> str:
        return self._wrap(text, DIM)
