# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Replayable WSGI input stream."""

from __future__ import annotations

import io
from typing import IO, Any


class ReplayInput(io.RawIOBase):
    """
    Serve `buffered` bytes first, then whatever is left in `remainder`.

    Installed as `wsgi.input` after the verifier has consumed part of the body so
    downstream handlers read the request exactly as it arrived.
    """

    def __init__(self, buffered: bytes, remainder: IO[bytes] | Any | None = None):
        super().__init__()
        self._buffer = io.BytesIO(buffered)
        self._remainder = remainder

    def readable(self) -> bool:
        return True

    def readinto(self, target: Any) -> int:
        view = memoryview(target).cast("B")
        n = self._buffer.readinto(view)
        if n or self._remainder is None or not len(view):
            return n
        chunk = self._remainder.read(len(view))
        if not chunk:
            return 0
        view[: len(chunk)] = chunk
        return len(chunk)

    def read(self, size: int | None = -1) -> bytes:
        if size is None or size < 0:
            data = self._buffer.read()
            if self._remainder is not None:
                data += self._remainder.read()
            return data
        return super().read(size) or b""

    def readline(self, size: int | None = -1) -> bytes:
        line = self._buffer.readline(-1 if size is None else size)
        if line.endswith(b"\n") or self._remainder is None:
            return line
        if size is not None and size >= 0:
            remaining = size - len(line)
            if remaining <= 0:
                return line
            return line + self._remainder.readline(remaining)
        return line + self._remainder.readline()


def read_limited(stream: Any, limit: int) -> bytes:
    """Read up to `limit` bytes, looping over short reads until EOF."""
    chunks: list[bytes] = []
    remaining = limit
    while remaining > 0:
        chunk = stream.read(min(remaining, 64 * 1024))
        if not chunk:
            break
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)
