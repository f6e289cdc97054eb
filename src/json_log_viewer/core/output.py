"""Output sinks for rendered lines."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Protocol, TextIO


class OutputSink(Protocol):
    def write_line(self, line: str) -> None:
        ...

    def close(self) -> None:
        ...


class StreamSink:
    """Write to an interactive stream, flushing after every record."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self.stream = stream if stream is not None else sys.stdout

    def write_line(self, line: str) -> None:
        self.stream.write(line + "\n")
        self.stream.flush()

    def close(self) -> None:
        pass


class FileSink:
    """Write to a file with normal buffering."""

    def __init__(self, path: str | Path) -> None:
        self.stream = Path(path).open("w", encoding="utf-8")

    def write_line(self, line: str) -> None:
        self.stream.write(line + "\n")

    def close(self) -> None:
        self.stream.close()
