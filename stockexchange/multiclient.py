"""Load generator: many client processes each sending random stock orders."""

from __future__ import annotations

import multiprocessing
import os
import random
import re
import sys
import time

from .net import open_client
from .rio import MAXLINE, RioReader, write_all

MAX_CLIENT = 100
ORDER_PER_CLIENT = 10
STOCK_NUM = 10
BUY_SELL_MAX = 10
ORDER_DELAY = 1.0

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def random_order(rng: random.Random) -> str:
    """Return a random "show", "buy <id> <n>" or "sell <id> <n>" request line."""
    option = rng.randrange(3)
    if option == 0:
        return "show\n"
    stock_id = rng.randrange(STOCK_NUM) + 1
    quantity = rng.randrange(BUY_SELL_MAX) + 1
    verb = "buy" if option == 1 else "sell"
    return f"{verb} {stock_id} {quantity}\n"


def _text(reply: bytes) -> str:
    return reply.split(b"\0", 1)[0].decode("utf-8", errors="replace")


def run_child(host, port, seed=None, orders=ORDER_PER_CLIENT, delay=ORDER_DELAY) -> list[str]:
    """Send random orders over one connection and print each reply.

    The random sequence is seeded with the process ID unless a seed is given.
    Returns the text of every reply.
    """
    print(f"child {os.getpid()}", flush=True)
    rng = random.Random(os.getpid() if seed is None else seed)
    replies = []
    with open_client(host, port) as sock:
        reader = RioReader(sock)
        for _ in range(orders):
            write_all(sock, random_order(rng).encode("ascii"))
            text = _text(reader.read(MAXLINE))
            sys.stdout.write(text)
            sys.stdout.flush()
            replies.append(text)
            time.sleep(delay)
    return replies


def _child(host, port) -> None:
    try:
        run_child(host, port)
    except OSError as error:
        print(f"multiclient: {error}", file=sys.stderr)
        raise SystemExit(1) from error


def run_clients(host, port, count: int) -> list[int | None]:
    """Start count client processes, wait for all, and return their exit codes."""
    if count > MAX_CLIENT:
        raise ValueError(f"at most {MAX_CLIENT} clients are supported")
    processes = [
        multiprocessing.Process(target=_child, args=(host, port))
        for _ in range(max(count, 0))
    ]
    for process in processes:
        process.start()
    for process in processes:
        process.join()
    return [process.exitcode for process in processes]


def _atoi(text: str) -> int:
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


def main(argv=None) -> int:
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) != 3:
        print("usage: multiclient <host> <port> <client#>", file=sys.stderr)
        return 0
    host, port, count = args
    try:
        run_clients(host, port, _atoi(count))
    except ValueError as error:
        print(f"multiclient: {error}", file=sys.stderr)
        return 1
    return 0