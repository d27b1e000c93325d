import socket
import time
from unittest import mock

import pytest

from devbase import tcp


@pytest.fixture
def server():
    sock = tcp.create_server("127.0.0.1", 0)
    yield sock
    sock.close()


def test_no_lookup_configured_gives_unresolved_address():
    assert tcp.get_server_ip("example.com", tcp.ResolveMode.NONE) == tcp.UNRESOLVED_IP


@mock.patch("socket.gethostbyname_ex", return_value=("host", [], ["10.0.0.7"]))
def test_dns_lookup_returns_first_address(_lookup):
    assert tcp.get_server_ip("example.com", tcp.ResolveMode.DNS) == "10.0.0.7"


@mock.patch("socket.gethostbyname_ex", side_effect=socket.gaierror("no such host"))
def test_dns_lookup_failure_raises(_lookup):
    with pytest.raises(OSError):
        tcp.get_server_ip("example.com", tcp.ResolveMode.DNS)


@mock.patch("socket.gethostbyname_ex", side_effect=socket.gaierror("no such host"))
def test_timed_lookup_failure_raises(_lookup):
    with pytest.raises(OSError):
        tcp.get_server_ip("example.com", tcp.ResolveMode.DNS_TIMEOUT)


@mock.patch("socket.gethostbyname_ex", return_value=("host", [], ["10.0.0.9"]))
def test_resolve_with_timeout_returns_entry(_lookup):
    assert tcp.resolve_host_with_timeout("example.com", 2) == ("host", [], ["10.0.0.9"])


def test_resolve_with_timeout_gives_up():
    def slow(_name):
        time.sleep(0.5)
        return ("host", [], ["10.0.0.1"])

    with mock.patch("socket.gethostbyname_ex", side_effect=slow):
        assert tcp.resolve_host_with_timeout("example.com", 0.05) is None


@mock.patch("socket.gethostbyname_ex", return_value=("host", [], ["10.0.0.1"]))
def test_check_network_succeeds(_lookup):
    assert tcp.check_network(2) is True


@mock.patch("socket.gethostbyname_ex", side_effect=socket.gaierror("down"))
def test_check_network_fails(_lookup):
    assert tcp.check_network(2) is False


def test_client_and_server_exchange_data(server):
    host, port = server.getsockname()
    client = tcp.create_client(host, port)
    conn, _ = server.accept()
    with client, conn:
        client.sendall(b"ping")
        assert conn.recv(16) == b"ping"


def test_server_listens_with_reuseaddr(server):
    assert server.getsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR) == 1


def test_client_connection_refused():
    probe = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    probe.bind(("127.0.0.1", 0))
    port = probe.getsockname()[1]
    probe.close()
    with pytest.raises(OSError):
        tcp.create_client("127.0.0.1", port)


def test_buffer_sizes_grow_to_request():
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        tcp.set_recv_buffer_size(sock, 65536)
        tcp.set_send_buffer_size(sock, 65536)
        assert tcp.get_recv_buffer_size(sock) >= 65536
        assert tcp.get_send_buffer_size(sock) >= 65536


def test_set_blocking_toggles_mode():
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        tcp.set_blocking(sock, False)
        assert sock.getblocking() is False
        tcp.set_blocking(sock, True)
        assert sock.getblocking() is True


def test_set_tcp_nodelay():
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        tcp.set_tcp_nodelay(sock)
        assert sock.getsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY) == 1


def test_unknown_interface_raises():
    with pytest.raises(OSError):
        tcp.get_interface_ip("nosuchif0")