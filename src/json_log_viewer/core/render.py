"""Render log records into display lines."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from .color import ColorConfig
from .config import ViewerOptions
from .extract import to_json, value_to_text
from .models import CustomFieldToken, FieldToken, FormatToken, LogRecord, Role, TextToken
from .sanitize import escape_json_controls, sanitize
from .template import RenderContext

STACK_TRACE_FIELD = "stack_trace"


def shorten_logger(name: str) -> str:
    """Abbreviate all but the last dotted segment: com.example.Foo -> c.e.Foo."""
    segments = name.split(".")
    if len(segments) <= 1:
        return name
    return ".".join([s[:1] for s in segments[:-1]] + [segments[-1]])


def truncate_logger(name: str, max_len: int) -> str:
    """Crop a logger name from the left to at most max_len characters (0 = unlimited).

    Whole leading segments are dropped first; if that is not enough, the rightmost
    max_len characters are kept.
    """
    if max_len == 0 or len(name) <= max_len:
        return name

    remaining = name
    while len(remaining) > max_len:
        _, dot, tail = remaining.partition(".")
        if not dot or not tail:
            break
        remaining = tail

    if len(remaining) > max_len:
        return remaining[-max_len:]
    return remaining


def _format_logger(name: str, options: ViewerOptions) -> str:
    if options.logger_format == "short-dots":
        name = shorten_logger(name)
    return truncate_logger(name, options.logger_length)


def _field_text(record: LogRecord, role: Role, color: ColorConfig, options: ViewerOptions) -> str:
    if role is Role.LEVEL:
        return color.style_level(record.level) if record.level is not None else ""
    if role is Role.TIMESTAMP:
        return sanitize(record.timestamp or "")
    if role is Role.LOGGER:
        return sanitize(_format_logger(record.logger or "", options))
    return sanitize(record.message or "")


def collect_extras(record: LogRecord, ctx: RenderContext) -> list[tuple[str, Any]]:
    """Select extras to append after the templated line.

    Fields already placed by the template are skipped. add_fields is an
    allow-list, omit_fields a deny-list; with neither set nothing is shown.
    """
    out: list[tuple[str, Any]] = []
    for key, value in record.extras.items():
        if key in ctx.template_custom_fields:
            continue
        if ctx.add_fields:
            keep = key in ctx.add_fields
        elif ctx.omit_fields:
            keep = key not in ctx.omit_fields
        else:
            keep = False
        if keep:
            out.append((key, value))
    return out


def _stack_trace_omitted(record: LogRecord, ctx: RenderContext) -> bool:
    if STACK_TRACE_FIELD in ctx.omit_fields:
        return True
    return record.stack_trace_key is not None and record.stack_trace_key in ctx.omit_fields


def format_stack_trace(stack_trace: str, color: ColorConfig) -> str:
    """Indent each stack trace line by four spaces, dimming each when colored."""
    lines = sanitize(stack_trace).split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return "".join("\n" + color.dim(f"    {line}") for line in lines)


def render(
    record: LogRecord,
    tokens: Sequence[FormatToken],
    color: ColorConfig,
    options: ViewerOptions,
    ctx: RenderContext,
) -> str:
    """Render a record to one (possibly multi-line) output string."""
    if options.raw_json:
        return escape_json_controls(to_json(record.raw))

    parts: list[str] = []
    for token in tokens:
        if isinstance(token, TextToken):
            parts.append(token.text)
        elif isinstance(token, FieldToken):
            parts.append(_field_text(record, token.role, color, options))
        elif isinstance(token, CustomFieldToken):
            if token.name in record.extras:
                parts.append(sanitize(value_to_text(record.extras[token.name])))

    extras = [
        (color.style_key(sanitize(k)), color.style_value(sanitize(value_to_text(v))))
        for k, v in collect_extras(record, ctx)
    ]
    if extras and options.expanded:
        sep = color.style_separator(":")
        parts.extend(f"\n  {key}{sep} {value}" for key, value in extras)
    elif extras:
        sep = color.style_separator("=")
        parts.append(" " + " ".join(f"{key}{sep}{value}" for key, value in extras))

    if record.stack_trace is not None and not _stack_trace_omitted(record, ctx):
        parts.append(format_stack_trace(record.stack_trace, color))

    return "".join(parts)
