"""TCP client and server sockets, socket options and host lookups."""

from __future__ import annotations

import enum
import fcntl
import logging
import os
import socket
import struct
import threading
from typing import Optional, Union

LISTENMAX = 5
SEND_TIMEOUT = 5
DNS_TIMEOUT = 5
UNRESOLVED_IP = "0.0.0.0"
ANY_ADDRESS = "0.0.0.0"
NETWORK_CHECK_HOST = "www.baidu.com"

_SIOCGIFADDR = 0x8915
_IFNAMSIZ = 16

_log = logging.getLogger(__name__)

HostEntry = tuple[str, list, list]


class ResolveMode(enum.Enum):
    """How get_server_ip finds the address of a server."""

    NONE = "none"
    DNS = "dns"
    DNS_TIMEOUT = "dns_timeout"


def resolve_host_with_timeout(hostname: str, timeout: float) -> Optional[HostEntry]:
    """Look ``hostname`` up, giving up after ``timeout`` seconds.

    Returns ``(name, aliases, addresses)``, or None when the lookup failed or
    took too long. A timeout of zero or less waits as long as it takes.
    """
    result: dict[str, Optional[HostEntry]] = {}

    def lookup() -> None:
        try:
            result["host"] = socket.gethostbyname_ex(hostname)
        except OSError:
            result["host"] = None

    worker = threading.Thread(target=lookup, name="host-lookup", daemon=True)
    worker.start()
    worker.join(timeout if timeout and timeout > 0 else None)
    if worker.is_alive():
        _log.warning("time out resolving %s", hostname)
        return None
    return result.get("host")


def check_network(timeout: float) -> bool:
    """Return True when a well-known host name resolves within ``timeout``."""
    return resolve_host_with_timeout(NETWORK_CHECK_HOST, timeout) is not None


def get_server_ip(hostname: str, mode: ResolveMode = ResolveMode.NONE) -> str:
    """Find the IPv4 address of ``hostname`` the way ``mode`` asks.

    With no lookup configured the unresolved address is returned; a failed
    lookup raises OSError.
    """
    mode = ResolveMode(mode)
    if mode is ResolveMode.NONE:
        _log.info("no server address lookup configured")
        return UNRESOLVED_IP
    if mode is ResolveMode.DNS:
        try:
            addresses = socket.gethostbyname_ex(hostname)[2]
        except OSError as exc:
            raise OSError(f"cannot resolve {hostname}: {exc}") from exc
    else:
        entry = resolve_host_with_timeout(hostname, DNS_TIMEOUT)
        if entry is None:
            raise OSError(f"cannot resolve {hostname}")
        addresses = entry[2]
    if not addresses:
        raise OSError(f"no address for {hostname}")
    return addresses[0]


def create_client(server_ip: str, port: int) -> socket.socket:
    """Connect a TCP socket to ``server_ip:port`` with a five-second send timeout."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    try:
        sock.setsockopt(
            socket.SOL_SOCKET, socket.SO_SNDTIMEO, struct.pack("@ll", SEND_TIMEOUT, 0)
        )
        sock.connect((server_ip, port))
    except OSError:
        sock.close()
        raise
    return sock


def create_server(bind_ip: Optional[str], port: int) -> socket.socket:
    """Create a listening TCP socket; ``None`` binds every local interface."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind((ANY_ADDRESS if bind_ip is None else bind_ip, port))
        sock.listen(LISTENMAX)
    except OSError:
        sock.close()
        raise
    return sock


def get_recv_buffer_size(sock: socket.socket) -> int:
    """Return the size of the receive buffer."""
    return sock.getsockopt(socket.SOL_SOCKET, socket.SO_RCVBUF)


def get_send_buffer_size(sock: socket.socket) -> int:
    """Return the size of the send buffer."""
    return sock.getsockopt(socket.SOL_SOCKET, socket.SO_SNDBUF)


def set_recv_buffer_size(sock: socket.socket, size: int) -> None:
    """Ask for a receive buffer of ``size`` bytes."""
    sock.setsockopt(socket.SOL_SOCKET, socket.SO_RCVBUF, size)


def set_send_buffer_size(sock: socket.socket, size: int) -> None:
    """Ask for a send buffer of ``size`` bytes."""
    sock.setsockopt(socket.SOL_SOCKET, socket.SO_SNDBUF, size)


def set_blocking(sock: Union[socket.socket, int], blocking: bool) -> None:
    """Switch a socket or descriptor between blocking and non-blocking mode."""
    if isinstance(sock, int):
        os.set_blocking(sock, bool(blocking))
    else:
        sock.setblocking(bool(blocking))


def set_tcp_nodelay(sock: socket.socket) -> None:
    """Turn off Nagle's algorithm."""
    sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)


def get_interface_ip(name: str) -> str:
    """Return the IPv4 address of the network interface ``name``.

    Raises OSError when the interface is unknown or has no address.
    """
    request = struct.pack("256s", name.encode("utf-8")[: _IFNAMSIZ - 1])
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
        reply = fcntl.ioctl(sock.fileno(), _SIOCGIFADDR, request)
    address = socket.inet_ntoa(reply[20:24])
    if address == UNRESOLVED_IP:
        raise OSError(f"interface {name} has no address")
    return address