"""Buffered, robust reading and writing over sockets, descriptors and byte streams."""

from __future__ import annotations

import os
from typing import Callable, Iterator

RIO_BUFSIZE = 8192
MAXLINE = 8192


def _reader_for(source) -> Callable[[int], bytes]:
    """Return a callable that reads up to a given number of bytes from source."""
    if isinstance(source, int):
        return lambda size: os.read(source, size)
    for name in ("recv", "read1", "read"):
        method = getattr(source, name, None)
        if callable(method):
            return method
    raise TypeError(f"cannot read bytes from {type(source).__name__}")


class RioReader:
    """Reads bytes and text lines from a source through an internal buffer.

    The source may be a socket, a binary file object or a raw file descriptor.
    Short reads happen only at end of input; read errors propagate as OSError.
    """

    def __init__(self, source):
        self._recv = _reader_for(source)
        self._buffer = b""

    def _fill(self) -> bool:
        """Refill the buffer if it is empty; return False at end of input."""
        if not self._buffer:
            self._buffer = self._recv(RIO_BUFSIZE) or b""
        return bool(self._buffer)

    def _take(self, size: int) -> bytes:
        chunk, self._buffer = self._buffer[:size], self._buffer[size:]
        return chunk

    def read(self, n: int) -> bytes:
        """Read up to n bytes, fewer only if the input ends first."""
        parts = []
        remaining = n
        while remaining > 0 and self._fill():
            chunk = self._take(remaining)
            parts.append(chunk)
            remaining -= len(chunk)
        return b"".join(parts)

    def readline(self, maxlen: int = MAXLINE) -> bytes:
        """Read one line, newline included, of at most maxlen - 1 bytes.

        Returns b"" at end of input when nothing was read.
        """
        limit = maxlen - 1
        parts = []
        count = 0
        while count < limit and self._fill():
            room = limit - count
            end = self._buffer.find(b"\n", 0, room)
            size = end + 1 if end >= 0 else min(len(self._buffer), room)
            chunk = self._take(size)
            parts.append(chunk)
            count += len(chunk)
            if end >= 0:
                break
        return b"".join(parts)

    def __iter__(self) -> Iterator[bytes]:
        while line := self.readline():
            yield line


def write_all(sock, data: bytes) -> int:
    """Write every byte of data to a socket, descriptor or binary stream."""
    if isinstance(sock, int):
        view = memoryview(data)
        while view:
            view = view[os.write(sock, view):]
        return len(data)
    sendall = getattr(sock, "sendall", None)
    if callable(sendall):
        sendall(data)
        return len(data)
    view = memoryview(data)
    while view:
        written = sock.write(view)
        if written is None:
            raise BlockingIOError("stream is not ready for writing")
        view = view[written:]
    flush = getattr(sock, "flush", None)
    if callable(flush):
        flush()
    return len(data)