"""Open a serial device in raw 8N1 mode at a chosen baud rate."""

from __future__ import annotations

import os
import termios

_SPEEDS = (
    0, 50, 75, 110, 134, 150, 200, 300, 600, 1200, 1800,
    2400, 4800, 9600, 19200, 38400, 57600, 115200, 230400,
)


class SerialError(OSError):
    """The serial device could not be opened or configured."""


def baud_constant(speed: int) -> int:
    """Map a baud rate to its termios constant; unsupported rates give B0."""
    if speed in _SPEEDS:
        return getattr(termios, f"B{speed}", termios.B0)
    return termios.B0


def _raw_attributes(baud: int, cc_count: int) -> list:
    cflag = termios.CS8 | termios.CLOCAL | termios.CREAD
    cc = [0] * cc_count
    cc[termios.VTIME] = 0
    cc[termios.VMIN] = 0
    return [0, 0, cflag, 0, baud, baud, cc]


def configure_serial(fd: int, speed: int) -> None:
    """Put ``fd`` into raw mode: 8 data bits, no parity, one stop bit."""
    baud = baud_constant(speed)
    try:
        cc_count = len(termios.tcgetattr(fd)[6])
        termios.tcflush(fd, termios.TCIFLUSH)
        termios.tcsetattr(fd, termios.TCSANOW, _raw_attributes(baud, cc_count))
    except termios.error as exc:
        raise SerialError(f"setting the serial port failed: {exc}") from exc


def open_serial(path: str, speed: int) -> int:
    """Open ``path`` non-blocking, configure it, and return the descriptor."""
    try:
        fd = os.open(path, os.O_RDWR | os.O_NOCTTY | os.O_NONBLOCK)
    except OSError as exc:
        raise SerialError(exc.errno, f"open failed: {exc.strerror}", path) from exc
    try:
        configure_serial(fd, speed)
    except SerialError:
        os.close(fd)
        raise
    return fd