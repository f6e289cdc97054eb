"""Line sources: stdin, whole files, and tail-style followed files."""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path
from typing import Any, BinaryIO, Protocol

import aiofiles
from aiofiles.threadpool import wrap

from .config import DEFAULT_FOLLOW_INTERVAL
from .rotation import IdentityProbe, LengthProbe, RotationProbe

logger = logging.getLogger(__name__)

ENCODING = "utf-8"
DECODE_ERRORS = "replace"

# Consecutive identity misses tolerated before switching to length probing.
IDENTITY_MISS_LIMIT = 3


def decode_line(data: bytes) -> str:
    """Decode a raw line, dropping a trailing LF or CRLF."""
    if data.endswith(b"\n"):
        data = data[:-1]
        if data.endswith(b"\r"):
            data = data[:-1]
    return data.decode(ENCODING, errors=DECODE_ERRORS)


class LineSource(Protocol):
    """Async source of terminator-stripped lines; None means end of input."""

    async def next_line(self) -> str | None:
        ...

    async def aclose(self) -> None:
        ...


async def _open_file(path: Path) -> Any:
    if not path.is_file():
        raise FileNotFoundError(f"Log file not found: {path}")
    return await aiofiles.open(path, mode="rb")


class _HandleSource:
    _handle: Any = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._handle is not None:
            await self._handle.close()
            self._handle = None


class StdinSource(_HandleSource):
    """Read lines from standard input (or any binary stream).

    The stream is wrapped on the first read, so building the source never
    touches stdin.
    """

    def __init__(self, stream: BinaryIO | None = None) -> None:
        self._stream = stream

    def _wrap(self) -> Any:
        stream = self._stream
        if stream is None:
            stream = getattr(sys.stdin, "buffer", None)
            if stream is None:
                raise OSError("standard input is not available")
        try:
            return wrap(stream)
        except TypeError as exc:
            raise OSError(f"standard input cannot be read: {exc}") from exc

    async def next_line(self) -> str | None:
        if self._handle is None:
            self._handle = self._wrap()
        data = await self._handle.readline()
        if not data:
            return None
        return decode_line(data)

    async def aclose(self) -> None:
        # The process owns stdin; just drop the wrapper.
        self._handle = None


class FileSource(_HandleSource):
    """Read a file from start to end."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    async def next_line(self) -> str | None:
        if self._handle is None:
            self._handle = await _open_file(self.path)
        data = await self._handle.readline()
        if not data:
            return None
        return decode_line(data)


class FollowSource(_HandleSource):
    """Follow a file like ``tail -f``, surviving rotation and truncation.

    Reads from the start of the file, then waits for appended data. A trailing
    fragment without a newline is buffered until its newline arrives. After EOF
    the path is re-opened every ``interval`` seconds; if it now names a different
    file, or the file shrank below the read offset, reading restarts at offset 0
    and any buffered fragment is discarded. ``next_line`` never returns None.
    """

    def __init__(
        self,
        path: str | Path,
        *,
        interval: float = DEFAULT_FOLLOW_INTERVAL,
        identity_miss_limit: int = IDENTITY_MISS_LIMIT,
    ) -> None:
        self.path = Path(path)
        self.interval = interval
        self.identity_miss_limit = identity_miss_limit
        self.offset = 0
        self._partial = bytearray()
        self._probe: RotationProbe = IdentityProbe()
        self._fallback = LengthProbe()
        self._identity_misses = 0

    @property
    def pending(self) -> bytes:
        """Bytes of an incomplete trailing line awaiting its newline."""
        return bytes(self._partial)

    async def _ensure_open(self) -> None:
        if self._handle is None:
            self._handle = await _open_file(self.path)
            if isinstance(self._probe, IdentityProbe):
                self._probe.track(self._handle)

    async def poll(self) -> str | None:
        """Return the next complete line if one is available, without waiting."""
        await self._ensure_open()
        while True:
            chunk = await self._handle.readline()
            if not chunk:
                return None
            self.offset += len(chunk)
            if not chunk.endswith(b"\n"):
                self._partial += chunk
                continue
            data = bytes(self._partial) + chunk
            self._partial.clear()
            return decode_line(data)

    async def _check_rotation(self, handle: Any) -> bool:
        result = await self._probe.rotated(handle, self.offset)
        if result is not None:
            self._identity_misses = 0
            return result

        self._identity_misses += 1
        if self._identity_misses >= self.identity_miss_limit:
            logger.warning(
                "file identity unavailable for %s; falling back to length-based rotation checks",
                self.path,
            )
            self._probe = self._fallback
        return bool(await self._fallback.rotated(handle, self.offset))

    async def reopen(self) -> bool:
        """Re-open the path and reposition; return True if a rotation was detected."""
        await self._ensure_open()
        try:
            handle = await aiofiles.open(self.path, mode="rb")
        except FileNotFoundError:
            # Mid-rotation: the old name is gone and the new file not yet created.
            return False

        try:
            rotated = await self._check_rotation(handle)
        except BaseException:
            await handle.close()
            raise

        await self._handle.close()
        self._handle = handle
        if rotated:
            logger.info("%s was rotated or truncated; reading from the start", self.path)
            self.offset = 0
            self._partial.clear()
        await handle.seek(self.offset)
        return rotated

    async def next_line(self) -> str:
        while True:
            line = await self.poll()
            if line is not None:
                return line
            await asyncio.sleep(self.interval)
            await self.reopen()
