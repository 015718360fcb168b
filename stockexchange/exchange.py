"""Request parsing and order handling for the stock exchange server."""

from __future__ import annotations

import enum
import os
import re
import threading
from dataclasses import dataclass

from .inventory import Inventory
from .rio import MAXLINE

_NAME = re.compile(rb"\s*(\S{1,15})")
_NUMBER = re.compile(rb"\s*([+-]?\d+)")

BUY_SUCCESS = "[buy] success\n"
BUY_SHORT = "Not enough left stock\n"
SELL_SUCCESS = "[sell] success\n"


class Command(enum.Enum):
    SHOW = "show"
    BUY = "buy"
    SELL = "sell"
    EXIT = "exit"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Request:
    """A parsed request line: its command word and any numeric arguments."""

    command: Command
    name: str = ""
    stock_id: int | None = None
    quantity: int | None = None


@dataclass(frozen=True)
class Reply:
    """What to send back for a request, and whether the sender asked to exit."""

    payload: bytes | None = None
    exit: bool = False


def _as_bytes(text: bytes | str) -> bytes:
    return text if isinstance(text, bytes) else text.encode("latin-1")


def parse_request(line: bytes | str) -> Request:
    """Parse "<command> [id] [quantity]"; buy and sell need both numbers."""
    data = _as_bytes(line).split(b"\0", 1)[0]
    match = _NAME.match(data)
    if match is None:
        return Request(Command.UNKNOWN)
    name = match.group(1).decode("latin-1")
    numbers = []
    pos = match.end()
    while len(numbers) < 2:
        number = _NUMBER.match(data, pos)
        if number is None:
            break
        numbers.append(int(number.group(1)))
        pos = number.end()
    stock_id = numbers[0] if numbers else None
    quantity = numbers[1] if len(numbers) > 1 else None

    if name == "show":
        command = Command.SHOW
    elif name in ("buy", "sell") and len(numbers) == 2:
        command = Command(name)
    elif name == "exit":
        command = Command.EXIT
    else:
        command = Command.UNKNOWN
    return Request(command, name, stock_id, quantity)


def format_response(line: bytes | str, status: str, listing: str) -> bytes:
    """Build the fixed-size reply: request line, status and listing, NUL padded."""
    body = _as_bytes(line)[: MAXLINE - 1] + status.encode("ascii") + listing.encode("ascii")
    body = body[: MAXLINE - 1]
    return body.ljust(MAXLINE, b"\0")


class StockExchange:
    """Applies show, buy, sell and exit requests to an inventory kept on disk."""

    def __init__(self, inventory: Inventory, path: str | os.PathLike):
        self.inventory = inventory
        self.path = path
        self._lock = threading.Lock()

    def persist(self) -> None:
        """Save the inventory; a file that cannot be opened is skipped."""
        try:
            self.inventory.save(self.path)
        except OSError:
            pass

    def handle(self, line: bytes | str) -> Reply:
        """Apply one request line and return the reply for it."""
        request = parse_request(line)
        with self._lock:
            if request.command is Command.SHOW:
                return Reply(format_response(line, "", self.inventory.listing()))
            if request.command is Command.BUY:
                item = self.inventory.find(request.stock_id)
                if item is not None and item.left_stock >= request.quantity:
                    item.left_stock -= request.quantity
                    self.persist()
                    return Reply(format_response(line, BUY_SUCCESS, ""))
                return Reply(format_response(line, BUY_SHORT, ""))
            if request.command is Command.SELL:
                item = self.inventory.find(request.stock_id)
                if item is not None:
                    item.left_stock += request.quantity
                    self.persist()
                return Reply(format_response(line, SELL_SUCCESS, ""))
            if request.command is Command.EXIT:
                self.persist()
                return Reply(exit=True)
            return Reply()