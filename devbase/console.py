"""Interactive command prompt read on a background thread."""

from __future__ import annotations

import signal
import sys
import threading
from typing import Callable, TextIO

PROMPT = "cmd :"
_LINE_LIMIT = 31
_C_SPACE = " \t\n\v\f\r"
_ASCII_LOWER = str.maketrans(
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ", "abcdefghijklmnopqrstuvwxyz"
)

_SIGNAL_MESSAGES = {
    "SIGINT": "Catch a signal -- ctrl+c  ",
    "SIGQUIT": "Catch a signal -- ctrl+\\",
    "SIGTSTP": "Catch a signal -- ctrl+z  ",
}


def normalize_command(text: str, lowercase: bool = True) -> str:
    """Strip surrounding whitespace and, if asked, lower-case ASCII letters."""
    text = text.strip(_C_SPACE)
    return text.translate(_ASCII_LOWER) if lowercase else text


def command_loop(
    handler: Callable[[str], None], stdin: TextIO, stdout: TextIO
) -> int:
    """Prompt, read and hand each command to ``handler`` until input ends.

    Lines longer than 31 characters are read in pieces. Returns the number
    of commands handled.
    """
    handled = 0
    while True:
        stdout.write(PROMPT)
        stdout.flush()
        line = stdin.readline(_LINE_LIMIT)
        if not line:
            return handled
        handler(normalize_command(line, True))
        handled += 1


def _report_signal(signo: int, _frame) -> None:
    name = signal.Signals(signo).name
    message = _SIGNAL_MESSAGES.get(name)
    if message is not None:
        print(message)


def init_interface(handler: Callable[[str], None]) -> threading.Thread:
    """Catch ctrl-c/ctrl-\\/ctrl-z and start reading commands from stdin."""
    for name in _SIGNAL_MESSAGES:
        signo = getattr(signal, name, None)
        if signo is not None:
            signal.signal(signo, _report_signal)
    thread = threading.Thread(
        target=command_loop,
        args=(handler, sys.stdin, sys.stdout),
        name="command-interface",
        daemon=True,
    )
    thread.start()
    return thread