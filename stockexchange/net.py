"""Open connected client sockets and listening server sockets by host and port."""

from __future__ import annotations

import socket

LISTENQ = 1024

_ADDRCONFIG = getattr(socket, "AI_ADDRCONFIG", 0)
_NUMERICSERV = getattr(socket, "AI_NUMERICSERV", 0)


def open_client(host: str, port: str | int) -> socket.socket:
    """Connect to the first address of host and numeric port that accepts.

    Raises socket.gaierror when the name cannot be resolved and OSError
    when no address can be connected to.
    """
    infos = socket.getaddrinfo(
        host, port, type=socket.SOCK_STREAM, flags=_NUMERICSERV | _ADDRCONFIG
    )
    last_error: OSError | None = None
    for family, socktype, proto, _canonname, address in infos:
        try:
            sock = socket.socket(family, socktype, proto)
        except OSError as error:
            last_error = error
            continue
        try:
            sock.connect(address)
        except OSError as error:
            sock.close()
            last_error = error
            continue
        return sock
    if last_error is not None:
        raise last_error
    raise OSError(f"no address to connect to for {host}:{port}")


def open_listener(port: str | int) -> socket.socket:
    """Bind a listening socket to the numeric port on any local address.

    Raises socket.gaierror when the port cannot be resolved and OSError
    when no address can be bound or listened on.
    """
    infos = socket.getaddrinfo(
        None,
        port,
        type=socket.SOCK_STREAM,
        flags=socket.AI_PASSIVE | _ADDRCONFIG | _NUMERICSERV,
    )
    last_error: OSError | None = None
    for family, socktype, proto, _canonname, address in infos:
        try:
            sock = socket.socket(family, socktype, proto)
        except OSError as error:
            last_error = error
            continue
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        except OSError:
            sock.close()
            raise
        try:
            sock.bind(address)
        except OSError as error:
            sock.close()
            last_error = error
            continue
        try:
            sock.listen(LISTENQ)
        except OSError:
            sock.close()
            raise
        return sock
    if last_error is not None:
        raise last_error
    raise OSError(f"no address to listen on for port {port}")