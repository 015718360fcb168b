"""Stock server that hands connections to a fixed pool of worker threads."""

from __future__ import annotations

import os
import selectors
import socket
import sys
import threading
from collections import deque

from .exchange import StockExchange
from .inventory import Inventory
from .net import open_listener
from .rio import RioReader, write_all

STOCK_FILE = "stock.txt"
NTHREADS = 8
SBUFSIZE = 16


class ConnectionQueue:
    """Bounded first-in first-out queue; put blocks when full, get when empty."""

    def __init__(self, size: int):
        if size < 1:
            raise ValueError("queue size must be at least 1")
        self._items: deque = deque()
        self._mutex = threading.Lock()
        self._slots = threading.Semaphore(size)
        self._available = threading.Semaphore(0)

    def put(self, item) -> None:
        self._slots.acquire()
        with self._mutex:
            self._items.append(item)
        self._available.release()

    def get(self):
        self._available.acquire()
        with self._mutex:
            item = self._items.popleft()
        self._slots.release()
        return item

    def __len__(self) -> int:
        with self._mutex:
            return len(self._items)


def _describe(address) -> tuple[str, str]:
    try:
        return socket.getnameinfo(address, 0)
    except (OSError, ValueError):
        return str(address[0]), str(address[1])


class ThreadedStockServer:
    """Accepts connections and serves each one on a pooled worker thread.

    An "exit" request closes only the connection that sent it.
    """

    def __init__(
        self,
        port,
        stock_file: str | os.PathLike = STOCK_FILE,
        nthreads: int = NTHREADS,
        queue_size: int = SBUFSIZE,
    ):
        if nthreads < 1:
            raise ValueError("at least one worker thread is needed")
        self.exchange = StockExchange(Inventory.load(stock_file), stock_file)
        self._listener = open_listener(port)
        self.port = self._listener.getsockname()[1]
        self._queue = ConnectionQueue(queue_size)
        self._nthreads = nthreads
        self._wake_r, self._wake_w = socket.socketpair()
        self._selector = selectors.DefaultSelector()
        self._selector.register(self._listener, selectors.EVENT_READ)
        self._selector.register(self._wake_r, selectors.EVENT_READ)
        self._stopping = threading.Event()
        self._active: set[socket.socket] = set()
        self._active_lock = threading.Lock()

    def serve_forever(self) -> None:
        """Start the workers and accept connections until shut down."""
        for number in range(self._nthreads):
            threading.Thread(
                target=self._work, name=f"stock-worker-{number}", daemon=True
            ).start()
        try:
            while not self._stopping.is_set():
                for key, _events in self._selector.select():
                    if key.fileobj is self._wake_r:
                        self._wake_r.recv(64)
                        continue
                    conn, address = self._listener.accept()
                    host, port = _describe(address)
                    print(f"Connected to ({host}, {port})", flush=True)
                    self._queue.put(conn)
        finally:
            self._selector.close()
            for sock in (self._listener, self._wake_r, self._wake_w):
                sock.close()

    def shutdown(self) -> None:
        """Save the inventory, stop accepting and end open connections."""
        self.exchange.persist()
        self._stopping.set()
        try:
            self._wake_w.send(b"\0")
        except OSError:
            pass
        with self._active_lock:
            for conn in self._active:
                try:
                    conn.shutdown(socket.SHUT_RDWR)
                except OSError:
                    pass

    def _work(self) -> None:
        while True:
            conn = self._queue.get()
            if self._stopping.is_set():
                conn.close()
                continue
            self._serve(conn)

    def _serve(self, conn: socket.socket) -> None:
        with self._active_lock:
            self._active.add(conn)
        try:
            for line in RioReader(conn):
                print(f"server received {len(line)} bytes", flush=True)
                reply = self.exchange.handle(line)
                if reply.payload is not None:
                    write_all(conn, reply.payload)
                if reply.exit:
                    break
        except OSError:
            pass
        finally:
            with self._active_lock:
                self._active.discard(conn)
            conn.close()


def main(argv=None) -> int:
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) != 1:
        print("usage: stockserver <port>", file=sys.stderr)
        return 0
    try:
        server = ThreadedStockServer(args[0], STOCK_FILE)
    except OSError as error:
        print(f"stockserver: {error}", file=sys.stderr)
        return 1
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        server.shutdown()
    return 0