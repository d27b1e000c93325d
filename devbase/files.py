"""File length, path tail extraction and recursive directory scanning."""

from __future__ import annotations

import errno
import logging
import os
import stat
from typing import BinaryIO, Callable, Iterator, Optional

_log = logging.getLogger(__name__)


def file_length(stream: BinaryIO) -> int:
    """Return the size of a seekable stream, leaving its position unchanged."""
    position = stream.tell()
    try:
        start = stream.seek(0, os.SEEK_SET)
        end = stream.seek(0, os.SEEK_END)
    finally:
        stream.seek(position, os.SEEK_SET)
    return end - start


def text_after_last(text: Optional[str], needle: str) -> Optional[str]:
    """Return what follows the last ``needle`` in ``text``, or None if absent.

    ``text_after_last("/mnt/sdcard/test.mp3", "/")`` gives ``"test.mp3"``.
    """
    if text is None:
        return None
    index = text.rfind(needle)
    if index < 0:
        return None
    return text[index + 1 :]


def _prepare(base_path) -> str:
    if base_path is None:
        raise ValueError("base_path must not be None")
    base = os.fsdecode(os.fspath(base_path))
    if not os.access(base, os.F_OK):
        raise FileNotFoundError(errno.ENOENT, "no such directory", base)
    if len(base) > 1 and base.endswith("/"):
        base = base[:-1]
    return base


def _walk(base: str, top: bool) -> Iterator[tuple[str, str]]:
    try:
        with os.scandir(base) as scanner:
            names = [entry.name for entry in scanner]
    except OSError:
        if top:
            raise
        _log.warning("cannot open directory %s", base)
        return
    for name in names:
        path = f"{base}/{name}"
        try:
            mode = os.lstat(path).st_mode
        except OSError:
            _log.warning("lstat failed for %s", path)
            break
        if stat.S_ISREG(mode):
            yield path, name
        elif stat.S_ISDIR(mode):
            yield from _walk(path, False)


def iter_files(base_path) -> Iterator[tuple[str, str]]:
    """Yield ``(path, name)`` for every regular file below ``base_path``.

    Symbolic links are neither followed nor reported.
    """
    base = _prepare(base_path)
    return _walk(base, True)


def scan_dir(base_path, callback: Callable[[str, str], None]) -> int:
    """Call ``callback(path, name)`` for each regular file; return how many."""
    count = 0
    for path, name in iter_files(base_path):
        callback(path, name)
        count += 1
    return count