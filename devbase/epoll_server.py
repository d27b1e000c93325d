"""Edge-triggered epoll loop that accepts clients and dispatches their data."""

from __future__ import annotations

import logging
import select
import socket
import time
from typing import Callable, Optional

_log = logging.getLogger(__name__)

ConnectCallback = Callable[["EpollServer", socket.socket], object]
ReceiveCallback = Callable[["EpollServer", socket.socket], object]


def set_nonblocking(sock: socket.socket) -> None:
    """Put ``sock`` into non-blocking mode."""
    sock.setblocking(False)


class EpollServer:
    """Watches up to ``max_events`` sockets for input.

    Set ``listen_socket`` to the listening socket (and add it) so that new
    connections are accepted and handed to ``on_connect``; input on any other
    socket goes to ``on_receive``.
    """

    def __init__(
        self,
        max_events: int,
        on_connect: ConnectCallback,
        on_receive: ReceiveCallback,
    ) -> None:
        if max_events <= 0:
            raise ValueError("max_events must be positive")
        self.max_events = max_events
        self.on_connect = on_connect
        self.on_receive = on_receive
        self.listen_socket: Optional[socket.socket] = None
        self.connection: Optional[socket.socket] = None
        self._epoll = select.epoll(max_events)
        self._sockets: dict[int, socket.socket] = {}

    def __len__(self) -> int:
        return len(self._sockets)

    def add_socket(self, sock: socket.socket) -> None:
        """Watch ``sock`` for input; it is closed if the server is full."""
        fd = sock.fileno()
        if fd < 0:
            raise ValueError("socket is closed")
        if len(self._sockets) >= self.max_events:
            sock.close()
            raise RuntimeError(f"too many connections, more than {self.max_events}")
        set_nonblocking(sock)
        self._epoll.register(fd, select.EPOLLIN | select.EPOLLET)
        self._sockets[fd] = sock
        _log.debug("added fd %d to epoll", fd)

    def remove_socket(self, sock: socket.socket) -> None:
        """Stop watching ``sock``; it is closed if nothing is being watched."""
        if not self._sockets:
            sock.close()
            raise RuntimeError("no socket is being watched")
        fd = sock.fileno()
        if fd < 0:
            raise ValueError("socket is closed")
        self._epoll.unregister(fd)
        self._sockets.pop(fd, None)
        _log.debug("removed fd %d from epoll", fd)

    def _accept(self) -> None:
        try:
            conn, address = self.listen_socket.accept()
        except BlockingIOError:
            return
        _log.info("connect ip : %s", address[0])
        self.connection = conn
        self.on_connect(self, conn)

    def poll_once(self, timeout: Optional[float] = None) -> int:
        """Wait up to ``timeout`` seconds (None: forever) and dispatch events.

        Returns the number of events that were reported.
        """
        events = self._epoll.poll(
            -1 if timeout is None else timeout, max(len(self._sockets), 1)
        )
        listen_fd = None if self.listen_socket is None else self.listen_socket.fileno()
        for fd, mask in events:
            sock = self._sockets.get(fd)
            if sock is None:
                continue
            if fd == listen_fd:
                self._accept()
            elif mask & select.EPOLLIN:
                self.on_receive(self, sock)
        return len(events)

    def listen_forever(self) -> None:
        """Dispatch events until the server is closed."""
        while not self._epoll.closed:
            try:
                self.poll_once(None)
            except InterruptedError:
                continue
            except ValueError:
                if self._epoll.closed:
                    return
                raise
            except OSError:
                _log.exception("epoll wait failed")
                time.sleep(0.001)

    def close(self) -> None:
        """Release the epoll handle; watched sockets are left open."""
        self._epoll.close()
        self._sockets.clear()

    def __enter__(self) -> "EpollServer":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()