import io
import socket

from stockexchange.echo import echo
from stockexchange.rio import RioReader


def _exchange(payload):
    client, server = socket.socketpair()
    with client, server:
        client.sendall(payload)
        client.shutdown(socket.SHUT_WR)
        out = io.StringIO()
        total = echo(server, out)
        server.shutdown(socket.SHUT_WR)
        returned = RioReader(client).read(len(payload) + 100)
    return total, returned, out.getvalue()


def test_echo_returns_same_bytes():
    payload = b"hello\nworld\n"
    total, returned, _ = _exchange(payload)
    assert returned == payload
    assert total == len(payload)


def test_echo_reports_each_line():
    _, _, log = _exchange(b"hello\nworld!\n")
    assert log == "server received 6 bytes\nserver received 7 bytes\n"


def test_echo_empty_connection():
    total, returned, log = _exchange(b"")
    assert total == 0
    assert returned == b""
    assert log == ""


def test_echo_partial_final_line():
    payload = b"line\ntail"
    total, returned, log = _exchange(payload)
    assert returned == payload
    assert log.splitlines()[-1] == "server received 4 bytes"