"""Plain HTTP file download: URL splitting, response headers and transfer."""

from __future__ import annotations

import logging
import os
import re
import socket
from dataclasses import dataclass

DEFAULT_PORT = 80
_CHUNK = 4096
_BAR_WIDTH = 50
_INT_PREFIX = re.compile(r"[+-]?\d+")
_SCHEMES = ("http://", "https://")
_ACCEPT = (
    "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8"
)
_USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537(KHTML, like Gecko) "
    "Chrome/47.0.2526Safari/537.36"
)

_log = logging.getLogger(__name__)


class DownloadError(OSError):
    """The file could not be fetched or stored."""


@dataclass
class ResponseHeader:
    """The parts of an HTTP response header the downloader uses."""

    status_code: int = 0
    content_type: str = ""
    content_length: int = 0
    file_name: str = ""


def parse_url(url: str) -> tuple[str, int, str]:
    """Split ``url`` into ``(domain, port, file_name)``.

    The port defaults to 80; the file name is the last non-empty path segment.
    """
    start = 0
    for scheme in _SCHEMES:
        if url.startswith(scheme):
            start = len(scheme)

    slash = url.find("/", start)
    domain = url[start:] if slash < 0 else url[start:slash]

    port = DEFAULT_PORT
    colon = domain.find(":")
    if colon >= 0:
        match = _INT_PREFIX.match(domain, colon + 1)
        if match:
            port = int(match.group())
        domain = domain[:colon]

    last = len(url) - 1
    name: list[str] = []
    for position, char in enumerate(url[start:], start):
        if char == "/":
            if position != last:
                name = []
        else:
            name.append(char)
    return domain, port, "".join(name)


def _second_token(text: str, marker: str):
    position = text.find(marker)
    if position < 0:
        return None
    tokens = text[position:].split()
    return tokens[1] if len(tokens) > 1 else None


def _leading_int(token, default: int) -> int:
    if token is None:
        return default
    match = _INT_PREFIX.match(token)
    return int(match.group()) if match else default


def parse_response_header(text: str) -> ResponseHeader:
    """Read the status code, Content-Type and Content-Length from a header."""
    header = ResponseHeader()
    header.status_code = _leading_int(_second_token(text, "HTTP/"), 0)
    content_type = _second_token(text, "Content-Type:")
    if content_type is not None:
        header.content_type = content_type
    header.content_length = _leading_int(_second_token(text, "Content-Length:"), 0)
    return header


def progress_bar(current: int, total: int) -> str:
    """Return a one-line progress bar; a newline is added once it is full."""
    if total == 0:
        raise ValueError("total must not be zero")
    percent = current / total
    shown = min(max(int(_BAR_WIDTH * percent), 1), _BAR_WIDTH)
    bar = ("=" * shown).ljust(_BAR_WIDTH)
    line = "\r%.2f%%\t[%s] %.2f/%.2fMB" % (
        percent * 100,
        bar,
        current / 1024.0 / 1024.0,
        total / 1024.0 / 1024.0,
    )
    return line + "\n" if shown == _BAR_WIDTH else line


def _request(url: str, domain: str) -> bytes:
    return (
        f"GET {url} HTTP/1.1\r\n"
        f"Accept:{_ACCEPT}\r\n"
        f"User-Agent:{_USER_AGENT}\r\n"
        f"Host:{domain}\r\n"
        "Connection:close\r\n"
        "\r\n"
    ).encode("latin-1")


def _read_header(sock: socket.socket) -> bytes:
    """Read byte by byte until the header ends with four CR/LF characters."""
    response = bytearray()
    while True:
        byte = sock.recv(1)
        if not byte:
            break
        response += byte
        if len(response) - len(response.rstrip(b"\r\n")) == 4:
            break
    return bytes(response)


def download_http_file(url: str, directory: str = ".") -> ResponseHeader:
    """Fetch ``url`` over plain HTTP into ``directory`` under its own file name.

    Returns the parsed response header; raises DownloadError on failure.
    """
    domain, port, file_name = parse_url(url)
    try:
        addresses = socket.gethostbyname_ex(domain)[2]
    except OSError as exc:
        raise DownloadError(f"can not get ip address of {domain}") from exc
    if not addresses:
        raise DownloadError(f"can not get ip address of {domain}")
    ip = addresses[0]
    _log.info("url=%s domain=%s ip=%s port=%d file=%s", url, domain, ip, port, file_name)

    try:
        sock = socket.create_connection((ip, port))
    except OSError as exc:
        raise DownloadError(f"connect to {ip}:{port} failed: {exc}") from exc

    with sock:
        try:
            sock.sendall(_request(url, domain))
            header = parse_response_header(_read_header(sock).decode("latin-1"))
        except OSError as exc:
            raise DownloadError(f"request failed: {exc}") from exc
        header.file_name = file_name

        path = os.path.join(directory, file_name)
        try:
            fd = os.open(path, os.O_CREAT | os.O_WRONLY, 0o777)
        except OSError as exc:
            raise DownloadError(f"create file {path} failed: {exc}") from exc

        received = 0
        with os.fdopen(fd, "wb") as out:
            while received < header.content_length:
                try:
                    chunk = sock.recv(_CHUNK)
                except OSError as exc:
                    raise DownloadError(f"receive failed: {exc}") from exc
                if not chunk:
                    break
                out.write(chunk)
                received += len(chunk)

    if received == header.content_length:
        _log.info("download successful: %s", path)
    return header