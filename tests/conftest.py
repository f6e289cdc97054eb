from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest


@pytest.fixture
def write_jsonl() -> Callable[[Path, list[Any]], None]:
    def _write(path: Path, records: list[Any]) -> None:
        path.write_text(
            "".join(json.dumps(r) + "\n" for r in records),
            encoding="utf-8",
        )

    return _write


@pytest.fixture
def logstash_lines() -> list[dict[str, Any]]:
    return [
        {
            "@timestamp": "2024-01-15T10:30:00Z",
            "level": "DEBUG",
            "logger_name": "com.example.service.Handler",
            "message": "debug msg",
        },
        {
            "@timestamp": "2024-01-15T10:30:01.250Z",
            "level": "ERROR",
            "logger_name": "com.example.service.Handler",
            "message": "error msg",
            "host": "server1",
            "stack_trace": "java.lang.IllegalStateException: boom\n\tat com.example.Foo.bar(Foo.java:10)",
        },
    ]


@pytest.fixture
def write_bytes() -> Callable[[Path, bytes], None]:
    def _write(path: Path, data: bytes) -> None:
        path.write_bytes(data)

    return _write
