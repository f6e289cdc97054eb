"""Run configuration and environment overrides."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .models import Level

DEFAULT_FORMAT = "{timestamp} {level} [{logger}] {message}"
DEFAULT_FOLLOW_INTERVAL = 0.2

ColorMode = Literal["auto", "always", "never"]
NonJsonMode = Literal["passthrough", "skip", "fail"]
SchemaChoice = Literal["auto", "logstash", "logrus", "bunyan", "generic"]
LoggerFormat = Literal["short-dots", "as-is"]
TsFormat = Literal["time", "full"]
ColorName = Literal["black", "red", "green", "yellow", "blue", "magenta", "cyan", "white"]


def parse_field_list(value: str | None) -> tuple[str, ...]:
    """Split a comma-separated field list, dropping blanks."""
    if not value:
        return ()
    return tuple(f.strip() for f in value.split(",") if f.strip())


class ViewerOptions(BaseModel):
    """Options consumed by the rendering pipeline."""

    model_config = ConfigDict(frozen=True)

    format: str = Field(default=DEFAULT_FORMAT, description="Output template with {field} placeholders.")
    add_fields: tuple[str, ...] = Field(default=(), description="Extras to show (allow-list).")
    omit_fields: tuple[str, ...] = Field(default=(), description="Extras to hide (deny-list).")
    color: ColorMode = "auto"
    non_json: NonJsonMode = "passthrough"
    schema_choice: SchemaChoice = "auto"
    logger_format: LoggerFormat = "short-dots"
    logger_length: int = Field(default=30, ge=0, description="0 means unlimited.")
    ts_format: TsFormat = "time"
    min_level: Level | None = None
    raw_json: bool = False
    expanded: bool = False
    key_color: ColorName = "magenta"
    value_color: ColorName = "cyan"
    tz: str = "local"
    follow: bool = False
    files: tuple[Path, ...] = ()
    output: Path | None = None

    @field_validator("add_fields", "omit_fields", mode="before")
    @classmethod
    def _split_fields(cls, value: object) -> object:
        if value is None:
            return ()
        if isinstance(value, str):
            return parse_field_list(value)
        return value

    @field_validator("min_level", mode="before")
    @classmethod
    def _parse_min_level(cls, value: object) -> object:
        if isinstance(value, str):
            level = Level.parse(value)
            if level is None:
                raise ValueError(f"unknown log level: {value}")
            return level
        return value

    @model_validator(mode="after")
    def _check_field_lists(self) -> ViewerOptions:
        if self.add_fields and self.omit_fields:
            raise ValueError("add_fields and omit_fields are mutually exclusive")
        return self


def resolve_log_level() -> int:
    """Return the diagnostic logging level from JLV_LOG_LEVEL (default WARNING)."""
    name = os.getenv("JLV_LOG_LEVEL", "WARNING").upper()
    level = logging.getLevelName(name)
    if not isinstance(level, int):
        raise ValueError(f"JLV_LOG_LEVEL must be a logging level name, got {name!r}")
    return level


def resolve_follow_interval() -> float:
    """Return the follow-mode EOF backoff in seconds, honouring JLV_FOLLOW_INTERVAL_MS."""
    env = os.getenv("JLV_FOLLOW_INTERVAL_MS")
    if env is None or env == "":
        return DEFAULT_FOLLOW_INTERVAL

    try:
        value = int(env)
    except ValueError as exc:
        raise ValueError("JLV_FOLLOW_INTERVAL_MS must be an integer") from exc
    if value < 1:
        raise ValueError("JLV_FOLLOW_INTERVAL_MS must be >= 1")
    return value / 1000
