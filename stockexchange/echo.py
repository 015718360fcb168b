"""Echo text lines back to a connected peer until it closes the connection."""

from __future__ import annotations

import sys

from .rio import RioReader, write_all


def echo(conn, out=None) -> int:
    """Echo every line read from conn back to it; return the bytes echoed."""
    out = sys.stdout if out is None else out
    total = 0
    for line in RioReader(conn):
        print(f"server received {len(line)} bytes", file=out, flush=True)
        write_all(conn, line)
        total += len(line)
    return total