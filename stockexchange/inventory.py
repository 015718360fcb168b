"""Stock inventory kept in order of stock ID, with a plain-text file format."""

from __future__ import annotations

import bisect
import os
from dataclasses import dataclass
from typing import Iterator


@dataclass
class StockItem:
    """One stock: its ID, the number of shares left and its price."""

    stock_id: int
    left_stock: int
    price: int

    def line(self) -> str:
        return f"{self.stock_id} {self.left_stock} {self.price}\n"


def _key(item: StockItem) -> int:
    return item.stock_id


class Inventory:
    """Stock items ordered by ID; items sharing an ID keep insertion order."""

    def __init__(self):
        self._items: list[StockItem] = []

    def insert(self, item: StockItem) -> StockItem:
        """Add an item after any existing items with the same ID."""
        bisect.insort_right(self._items, item, key=_key)
        return item

    def find(self, stock_id: int) -> StockItem | None:
        """Return the first inserted item with this ID, or None."""
        index = bisect.bisect_left(self._items, stock_id, key=_key)
        if index < len(self._items) and self._items[index].stock_id == stock_id:
            return self._items[index]
        return None

    def __iter__(self) -> Iterator[StockItem]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    @classmethod
    def load(cls, path: str | os.PathLike) -> "Inventory":
        """Read whitespace-separated "ID left price" triples from a file.

        Reading stops at the first token that is not an integer or at an
        incomplete triple.
        """
        with open(path, encoding="ascii") as stream:
            tokens = stream.read().split()
        inventory = cls()
        numbers = []
        for token in tokens:
            try:
                numbers.append(int(token))
            except ValueError:
                break
        for start in range(0, len(numbers) - 2, 3):
            stock_id, left_stock, price = numbers[start:start + 3]
            inventory.insert(StockItem(stock_id, left_stock, price))
        return inventory

    def save(self, path: str | os.PathLike) -> None:
        """Write every item as an "ID left price" line, in ID order."""
        with open(path, "w", encoding="ascii") as stream:
            stream.write(self.listing())

    def listing(self) -> str:
        """Return every item as an "ID left price" line, in ID order."""
        return "".join(item.line() for item in self._items)