from __future__ import annotations

import logging
from pathlib import Path

import pytest
from pydantic import ValidationError

from json_log_viewer.core.config import (
    DEFAULT_FOLLOW_INTERVAL,
    DEFAULT_FORMAT,
    ViewerOptions,
    parse_field_list,
    resolve_follow_interval,
    resolve_log_level,
)
from json_log_viewer.core.models import Level


def test_defaults() -> None:
    options = ViewerOptions()
    assert options.format == DEFAULT_FORMAT
    assert options.color == "auto"
    assert options.non_json == "passthrough"
    assert options.schema_choice == "auto"
    assert options.logger_length == 30
    assert options.tz == "local"
    assert options.files == ()
    assert options.output is None


def test_parse_field_list() -> None:
    assert parse_field_list(None) == ()
    assert parse_field_list("") == ()
    assert parse_field_list(" a, b ,,c ") == ("a", "b", "c")


def test_field_lists_split_from_strings() -> None:
    options = ViewerOptions(omit_fields="host, pid")
    assert options.omit_fields == ("host", "pid")
    assert ViewerOptions(add_fields=None).add_fields == ()


def test_add_and_omit_are_exclusive() -> None:
    with pytest.raises(ValidationError, match="mutually exclusive"):
        ViewerOptions(add_fields="a", omit_fields="b")


def test_min_level_parsing() -> None:
    assert ViewerOptions(min_level="warning").min_level is Level.WARN
    assert ViewerOptions(min_level=Level.ERROR).min_level is Level.ERROR
    with pytest.raises(ValidationError, match="unknown log level"):
        ViewerOptions(min_level="loud")


def test_rejects_bad_choices() -> None:
    with pytest.raises(ValidationError):
        ViewerOptions(color="sometimes")
    with pytest.raises(ValidationError):
        ViewerOptions(logger_length=-1)


def test_options_are_frozen() -> None:
    options = ViewerOptions(files=(Path("a.log"),))
    with pytest.raises(ValidationError):
        options.follow = True


def test_resolve_log_level(monkeypatch) -> None:
    monkeypatch.delenv("JLV_LOG_LEVEL", raising=False)
    assert resolve_log_level() == logging.WARNING

    monkeypatch.setenv("JLV_LOG_LEVEL", "debug")
    assert resolve_log_level() == logging.DEBUG

    monkeypatch.setenv("JLV_LOG_LEVEL", "chatty")
    with pytest.raises(ValueError, match="JLV_LOG_LEVEL"):
        resolve_log_level()


def test_resolve_follow_interval(monkeypatch) -> None:
    monkeypatch.delenv("JLV_FOLLOW_INTERVAL_MS", raising=False)
    assert resolve_follow_interval() == DEFAULT_FOLLOW_INTERVAL

    monkeypatch.setenv("JLV_FOLLOW_INTERVAL_MS", "50")
    assert resolve_follow_interval() == 0.05

    for bad in ("0", "fast"):
        monkeypatch.setenv("JLV_FOLLOW_INTERVAL_MS", bad)
        with pytest.raises(ValueError, match="JLV_FOLLOW_INTERVAL_MS"):
            resolve_follow_interval()
