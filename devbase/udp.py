"""UDP listening and broadcast sockets."""

from __future__ import annotations

import socket
from typing import Optional

ANY_ADDRESS = "0.0.0.0"
BROADCAST_ADDRESS = "255.255.255.255"
CLIENT_BROADCAST_TIMEOUT = 2


def make_address(ip: Optional[str], port: int) -> tuple[str, int]:
    """Return a socket address; ``None`` means every local interface."""
    return (ANY_ADDRESS if ip is None else ip, port)


def _udp_socket() -> socket.socket:
    return socket.socket(socket.AF_INET, socket.SOCK_DGRAM, socket.IPPROTO_UDP)


def _bound(sock: socket.socket, address: tuple[str, int]) -> socket.socket:
    try:
        sock.bind(address)
    except OSError:
        sock.close()
        raise
    return sock


def _apply_timeout(sock: socket.socket, timeout: float) -> None:
    sock.settimeout(timeout if timeout else None)


def create_listen_udp(ip: Optional[str], port: int) -> socket.socket:
    """Create a UDP socket with SO_REUSEADDR bound to ``ip:port``."""
    sock = _udp_socket()
    sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    return _bound(sock, make_address(ip, port))


def create_listen_udp_timeout(
    ip: Optional[str], port: int, timeout: float
) -> socket.socket:
    """Like create_listen_udp, with receives timing out after ``timeout`` seconds.

    A timeout of zero leaves the socket blocking.
    """
    sock = create_listen_udp(ip, port)
    _apply_timeout(sock, timeout)
    return sock


def create_client_broadcast(port: int) -> tuple[socket.socket, tuple[str, int]]:
    """Return a broadcast-enabled socket and the all-hosts address for ``port``."""
    sock = _udp_socket()
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_BROADCAST, 1)
    except OSError:
        sock.close()
        raise
    return sock, make_address(BROADCAST_ADDRESS, port)


def create_client_broadcast_timeout(
    port: int,
) -> tuple[socket.socket, tuple[str, int]]:
    """Like create_client_broadcast, with a two-second receive timeout."""
    sock, address = create_client_broadcast(port)
    _apply_timeout(sock, CLIENT_BROADCAST_TIMEOUT)
    return sock, address


def create_listen_broadcast(ip: Optional[str], port: int) -> socket.socket:
    """Create a broadcast-enabled UDP socket bound to ``ip:port``."""
    sock = _udp_socket()
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_BROADCAST, 1)
    except OSError:
        sock.close()
        raise
    return _bound(sock, make_address(ip, port))


def create_dest_ip_send_broadcast(
    ip: str, port: int
) -> tuple[socket.socket, tuple[str, int]]:
    """Bind a broadcast socket to the interface ``ip`` on a free port.

    Returns the socket and the limited-broadcast address for ``port``.
    """
    if ip is None:
        raise ValueError("ip must not be None")
    sock = _udp_socket()
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_BROADCAST, 1)
    except OSError:
        sock.close()
        raise
    _bound(sock, (ip, 0))
    return sock, (BROADCAST_ADDRESS, port)