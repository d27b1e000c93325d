"""Conversion between UTF-8 and GB2312 byte strings."""

from __future__ import annotations


def _convert(data: bytes | str, source: str, target: str) -> bytes:
    text = data if isinstance(data, str) else bytes(data).decode(source)
    return text.encode(target)


def utf8_to_gb2312(data: bytes | str) -> bytes:
    """Re-encode UTF-8 bytes (or text) as GB2312; raise UnicodeError if impossible."""
    return _convert(data, "utf-8", "gb2312")


def gb2312_to_utf8(data: bytes | str) -> bytes:
    """Re-encode GB2312 bytes (or text) as UTF-8; raise UnicodeError if invalid."""
    return _convert(data, "gb2312", "utf-8")