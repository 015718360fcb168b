"""Single-threaded stock server that multiplexes its clients with select."""

from __future__ import annotations

import os
import selectors
import socket
import sys
import threading
from dataclasses import dataclass

from .exchange import StockExchange
from .inventory import Inventory
from .net import open_listener
from .rio import MAXLINE, RIO_BUFSIZE, write_all

STOCK_FILE = "stock.txt"
MAXCLIENT = 100


def _split_lines(buffer: bytes) -> tuple[list[bytes], bytes]:
    """Cut complete lines (at most MAXLINE - 1 bytes each) from buffer."""
    limit = MAXLINE - 1
    lines = []
    while True:
        end = buffer.find(b"\n", 0, limit)
        if end >= 0:
            size = end + 1
        elif len(buffer) >= limit:
            size = limit
        else:
            return lines, buffer
        lines.append(buffer[:size])
        buffer = buffer[size:]


def _describe(address) -> tuple[str, str]:
    try:
        return socket.getnameinfo(address, 0)
    except (OSError, ValueError):
        return str(address[0]), str(address[1])


@dataclass
class _Client:
    sock: socket.socket
    pending: bytes = b""


class SelectStockServer:
    """Serves stock requests from up to MAXCLIENT connections in one thread.

    An "exit" request from any client saves the inventory and stops the server.
    """

    def __init__(self, port, stock_file: str | os.PathLike = STOCK_FILE):
        self.exchange = StockExchange(Inventory.load(stock_file), stock_file)
        self._listener = open_listener(port)
        self.port = self._listener.getsockname()[1]
        self._wake_r, self._wake_w = socket.socketpair()
        self._selector = selectors.DefaultSelector()
        self._selector.register(self._listener, selectors.EVENT_READ)
        self._selector.register(self._wake_r, selectors.EVENT_READ)
        self._clients: dict[socket.socket, _Client] = {}
        self._stopping = threading.Event()

    def serve_forever(self) -> None:
        """Accept and serve clients until shut down or asked to exit."""
        try:
            while not self._stopping.is_set():
                for key, _events in self._selector.select():
                    sock = key.fileobj
                    if sock is self._wake_r:
                        sock.recv(64)
                    elif sock is self._listener:
                        self._accept()
                    elif self._serve(self._clients[sock]):
                        self._stopping.set()
                    if self._stopping.is_set():
                        break
        finally:
            self._close_all()

    def shutdown(self) -> None:
        """Save the inventory and make serve_forever return."""
        self.exchange.persist()
        self._stopping.set()
        try:
            self._wake_w.send(b"\0")
        except OSError:
            pass

    def _accept(self) -> None:
        conn, address = self._listener.accept()
        host, port = _describe(address)
        print(f"Connected to ({host}, {port})", flush=True)
        if len(self._clients) >= MAXCLIENT:
            conn.close()
            return
        self._clients[conn] = _Client(conn)
        self._selector.register(conn, selectors.EVENT_READ)

    def _drop(self, client: _Client) -> None:
        self._selector.unregister(client.sock)
        del self._clients[client.sock]
        client.sock.close()

    def _serve(self, client: _Client) -> bool:
        """Handle what a client sent; return True if it asked the server to exit."""
        try:
            data = client.sock.recv(RIO_BUFSIZE)
        except OSError:
            data = b""
        if data:
            lines, client.pending = _split_lines(client.pending + data)
            closing = False
        else:
            lines = [client.pending] if client.pending else []
            client.pending = b""
            closing = True
        for line in lines:
            print(f"server received {len(line)} bytes", flush=True)
            reply = self.exchange.handle(line)
            if reply.payload is not None:
                try:
                    write_all(client.sock, reply.payload)
                except OSError:
                    closing = True
                    break
            if reply.exit:
                return True
        if closing:
            self._drop(client)
        return False

    def _close_all(self) -> None:
        for client in list(self._clients.values()):
            client.sock.close()
        self._clients.clear()
        self._selector.close()
        for sock in (self._listener, self._wake_r, self._wake_w):
            sock.close()


def main(argv=None) -> int:
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) != 1:
        print("usage: stockserver <port>", file=sys.stderr)
        return 0
    try:
        server = SelectStockServer(args[0], STOCK_FILE)
    except OSError as error:
        print(f"stockserver: {error}", file=sys.stderr)
        return 1
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        server.shutdown()
    return 0