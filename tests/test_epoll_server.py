import socket
import threading

import pytest

from devbase.epoll_server import EpollServer, set_nonblocking


@pytest.fixture
def listener():
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    sock.listen(5)
    yield sock
    sock.close()


def _ignore(server, sock):
    pass


def test_set_nonblocking():
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        set_nonblocking(sock)
        assert sock.getblocking() is False


def test_accepts_and_receives(listener):
    connections = []
    received = []

    def on_connect(server, conn):
        connections.append(conn)
        server.add_socket(conn)

    def on_receive(server, sock):
        received.append(sock.recv(1024))

    with EpollServer(4, on_connect, on_receive) as server:
        server.listen_socket = listener
        server.add_socket(listener)
        client = socket.create_connection(listener.getsockname())
        with client:
            assert server.poll_once(2.0) == 1
            assert len(connections) == 1
            assert server.connection is connections[0]
            assert len(server) == 2
            client.sendall(b"hello")
            assert server.poll_once(2.0) == 1
            assert received == [b"hello"]
        for conn in connections:
            conn.close()


def test_poll_without_events_returns_zero(listener):
    with EpollServer(2, _ignore, _ignore) as server:
        server.listen_socket = listener
        server.add_socket(listener)
        assert server.poll_once(0.05) == 0


def test_full_server_rejects_and_closes(listener):
    extra = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    with EpollServer(1, _ignore, _ignore) as server:
        server.add_socket(listener)
        with pytest.raises(RuntimeError):
            server.add_socket(extra)
        assert extra.fileno() == -1
        assert len(server) == 1


def test_remove_then_remove_again(listener):
    with EpollServer(2, _ignore, _ignore) as server:
        server.add_socket(listener)
        server.remove_socket(listener)
        assert len(server) == 0
        with pytest.raises(RuntimeError):
            server.remove_socket(listener)
        assert listener.fileno() == -1


def test_invalid_max_events():
    with pytest.raises(ValueError):
        EpollServer(0, _ignore, _ignore)


def test_listen_forever_stops_when_closed(listener):
    accepted = []

    def on_connect(server, conn):
        accepted.append(conn)
        server.close()

    server = EpollServer(2, on_connect, _ignore)
    server.listen_socket = listener
    server.add_socket(listener)
    worker = threading.Thread(target=server.listen_forever, daemon=True)
    worker.start()
    client = socket.create_connection(listener.getsockname())
    worker.join(5)
    client.close()
    for conn in accepted:
        conn.close()
    assert not worker.is_alive()
    assert len(accepted) == 1