"""Interactive client: sends each input line to the server and prints the reply line."""

from __future__ import annotations

import sys

from .net import open_client
from .rio import MAXLINE, RioReader, write_all


def _text(reply: bytes) -> str:
    return reply.split(b"\0", 1)[0].decode("utf-8", errors="replace")


def run_client(host, port, stdin=None, stdout=None) -> int:
    """Send every line of stdin and write one reply line for each to stdout.

    Stops early when the server closes the connection. Returns the number
    of requests sent.
    """
    stdin = sys.stdin if stdin is None else stdin
    stdout = sys.stdout if stdout is None else stdout
    limit = MAXLINE - 1
    sent = 0
    with open_client(host, port) as sock:
        reader = RioReader(sock)
        for line in stdin:
            data = line.encode("utf-8") if isinstance(line, str) else line
            for start in range(0, len(data), limit):
                write_all(sock, data[start:start + limit])
                sent += 1
                reply = reader.readline(MAXLINE)
                if not reply:
                    return sent
                stdout.write(_text(reply))
                stdout.flush()
    return sent


def main(argv=None) -> int:
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) != 2:
        print("usage: stockclient <host> <port>", file=sys.stderr)
        return 0
    host, port = args
    try:
        run_client(host, port, sys.stdin, sys.stdout)
    except OSError as error:
        print(f"stockclient: {error}", file=sys.stderr)
        return 1
    return 0