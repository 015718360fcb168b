# stockexchange

A small stock trading service that speaks a plain, line-oriented protocol
over TCP. Stock is kept in a text file (`stock.txt` in the working
directory) of whitespace-separated integer triples, one item per line:

```
<id> <left_stock> <price>
```

The server loads this file at start-up and keeps the items ordered by id.
It writes the file back after every successful `buy` or `sell`, on `exit`
and on shutdown. The file must exist when a server starts.

## Installing

```
pip install .
```

Tests need the `test` extra:

```
pip install ".[test]"
pytest
```

## Servers

Two servers share the same protocol and stock file handling:

- `stockserver-select <port>` serves up to 100 clients from a single
  event loop built on `select`. An `exit` request from any client saves
  the stock file and stops the server.
- `stockserver-threaded <port>` accepts connections on the main thread
  and hands them to a pool of 8 worker threads through a bounded
  connection queue of 16 slots. An `exit` request saves the stock file
  and closes only the connection that sent it.

Both print `Connected to (<host>, <port>)` for each new client and
`server received <n> bytes` for each request line. Press Ctrl-C to save
the stock file and stop.

## Protocol

Each request is a single line:

| Request             | Effect                                                        |
|---------------------|---------------------------------------------------------------|
| `show`              | list every item as `<id> <left_stock> <price>`, sorted by id  |
| `buy <id> <count>`  | take stock if the item exists and enough is left              |
| `sell <id> <count>` | add stock to the item, if it exists                           |
| `exit`              | save the stock file and end the session (see above)           |

`show`, `buy` and `sell` are answered with a fixed-size block of 8192
bytes: the echoed request line, then a status line (`[buy] success`,
`Not enough left stock`, `[sell] success`, or nothing for `show`), then
the listing for `show`, padded with NUL bytes. `sell` reports success
even for an unknown id. `exit` and unrecognised requests get no reply.

## Clients

Interactive client, sending each line of standard input and printing one
line read back for each:

```
stockclient <host> <port>
```

Load generator, starting a number of client processes (at most 100) that
each send ten random `show`, `buy` and `sell` requests one second apart
and print the replies:

```
stock-multiclient <host> <port> <clients>
```

## Library use

The pieces are usable on their own:

```python
from stockexchange.inventory import Inventory
from stockexchange.exchange import StockExchange

inventory = Inventory.load("stock.txt")
exchange = StockExchange(inventory, "stock.txt")
reply = exchange.handle("buy 1 2\n")
print(reply.payload.rstrip(b"\0").decode())
```

- `stockexchange.inventory`: `StockItem` and `Inventory` (`insert`,
  `find`, `load`, `save`, `listing`).
- `stockexchange.exchange`: `parse_request`, `format_response`, and
  `StockExchange.handle`, which returns a `Reply` with the bytes to send
  and whether the sender asked to exit.
- `stockexchange.rio`: `RioReader` gives buffered `read` and `readline`
  over a socket, binary stream or file descriptor; `write_all` writes
  every byte.
- `stockexchange.net`: `open_client` and `open_listener` open connected
  and listening sockets.
- `stockexchange.echo`: `echo` sends every received line back to the
  peer.
- `stockexchange.select_server.SelectStockServer` and
  `stockexchange.thread_server.ThreadedStockServer` (with
  `ConnectionQueue`) run the servers in-process via `serve_forever` and
  `shutdown`.