import io
import socket
import threading

import pytest

from stockexchange.client import main, run_client
from stockexchange.inventory import Inventory
from stockexchange.thread_server import ThreadedStockServer

STOCK = "1 10 100\n2 5 200\n3 0 300\n"


@pytest.fixture
def server(tmp_path):
    path = tmp_path / "stock.txt"
    path.write_text(STOCK)
    srv = ThreadedStockServer(0, path, 2, 4)
    thread = threading.Thread(target=srv.serve_forever, daemon=True)
    thread.start()
    yield srv, path
    srv.shutdown()
    thread.join(5)


def free_port():
    with socket.socket() as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


def test_single_request_prints_echoed_line(server):
    srv, path = server
    out = io.StringIO()
    sent = run_client("localhost", srv.port, io.StringIO("sell 2 1\n"), out)
    assert sent == 1
    assert out.getvalue() == "sell 2 1\n"
    assert Inventory.load(path).find(2).left_stock == 5 + 1


def test_each_request_reads_one_reply_line(server):
    srv, path = server
    out = io.StringIO()
    sent = run_client("localhost", srv.port, io.StringIO("show\nbuy 1 2\n"), out)
    assert sent == 2
    assert out.getvalue() == "show\n1 10 100\n"
    assert Inventory.load(path).find(1).left_stock == 10 - 2


def test_stops_when_server_closes(server):
    srv, _path = server
    out = io.StringIO()
    sent = run_client("localhost", srv.port, io.StringIO("exit\nshow\nshow\n"), out)
    assert sent == 1
    assert out.getvalue() == ""


def test_refused_connection_raises():
    with pytest.raises(OSError):
        run_client("127.0.0.1", free_port(), io.StringIO("show\n"), io.StringIO())


def test_main_usage(capsys):
    assert main(["localhost"]) == 0
    assert "usage:" in capsys.readouterr().err


def test_main_reports_connection_error(capsys):
    assert main(["127.0.0.1", str(free_port())]) == 1
    assert "stockclient" in capsys.readouterr().err