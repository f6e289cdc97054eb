"""Rotation detection strategies for followed files.

A probe inspects a freshly re-opened handle and decides whether the path now
names a different (rotated) or truncated file relative to the read offset.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Protocol


@dataclass(frozen=True, slots=True)
class FileIdentity:
    device: int
    inode: int


def identity_of(st: os.stat_result) -> FileIdentity | None:
    """Return the file identity, or None where the platform reports no inode."""
    if not st.st_ino:
        return None
    return FileIdentity(device=st.st_dev, inode=st.st_ino)


class RotationProbe(Protocol):
    """Decide whether a re-opened file was rotated.

    Returns True/False, or None when the probe cannot tell.
    """

    async def rotated(self, handle: Any, offset: int) -> bool | None:
        ...


class IdentityProbe:
    """Compare device/inode with the tracked identity and check for shrinkage."""

    def __init__(self) -> None:
        self.identity: FileIdentity | None = None

    def track(self, handle: Any) -> None:
        """Remember the identity of the currently open file."""
        try:
            self.identity = identity_of(os.fstat(handle.fileno()))
        except OSError:
            self.identity = None

    async def rotated(self, handle: Any, offset: int) -> bool | None:
        try:
            st = os.fstat(handle.fileno())
        except OSError:
            return None
        current = identity_of(st)
        if current is None:
            return None

        replaced = self.identity is not None and current != self.identity
        self.identity = current
        return replaced or st.st_size < offset


class LengthProbe:
    """Fallback: the file was rotated if it is now shorter than the read offset."""

    async def rotated(self, handle: Any, offset: int) -> bool | None:
        length = await handle.seek(0, os.SEEK_END)
        return length < offset
