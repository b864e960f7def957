"""Brace-placeholder string building."""

from __future__ import annotations

from typing import Any

_MAX_OPTIONS = 4
_FLOAT_MAX_LENGTH = 19


def _format_int(value: int, opts: str) -> str:
    sign = "-" if value < 0 else ""
    value = abs(value)
    is_hex = opts[:1] == "h"
    digits = format(value, "x" if is_hex else "d")
    if len(opts) > 1:
        width = ord(opts[1]) - ord("0")
        pad_char = opts[2] if len(opts) > 2 else "0"
        if len(digits) < width:
            digits = pad_char * (width - len(digits)) + digits
    if is_hex:
        digits = "0x" + digits
    return sign + digits


def _format_arg(arg: Any, opts: str) -> str:
    if isinstance(arg, str):
        return arg
    if isinstance(arg, (bytes, bytearray)):
        return bytes(arg).decode("utf-8")
    if isinstance(arg, float):
        return f"{arg:f}"[:_FLOAT_MAX_LENGTH]
    if isinstance(arg, int):
        return _format_int(int(arg), opts)
    raise TypeError(f"cannot format value of type {type(arg).__name__}")


class StringBuilder:
    """Accumulates text from format strings with '{}' placeholders.

    A placeholder may hold up to four option characters: 'h' for hexadecimal
    with a '0x' prefix, then a pad width digit, then a pad character ('0' by
    default).
    """

    def __init__(self) -> None:
        self._parts: list[str] = []

    def append(self, fmt: str, *args: Any) -> None:
        parts = self._parts
        index = 0
        length = len(fmt)
        for arg in args:
            brace = fmt.find("{", index)
            if brace == -1:
                parts.append(fmt[index:])
                index = length
                continue
            parts.append(fmt[index:brace])
            start = brace + 1
            close = start
            while close < length and close - start < _MAX_OPTIONS and fmt[close] != "}":
                close += 1
            parts.append(_format_arg(arg, fmt[start:close]))
            index = min(close + 1, length)
        parts.append(fmt[index:])

    def append_char(self, ch: str) -> None:
        if len(ch) != 1:
            raise ValueError("append_char expects exactly one character")
        self._parts.append(ch)

    def truncate(self, by: int) -> None:
        text = "".join(self._parts)
        if by > len(text):
            raise ValueError("cannot truncate past the start of the buffer")
        self._parts = [text[:len(text) - by]]

    def build(self) -> str:
        """Return the accumulated text and empty the builder."""
        text = "".join(self._parts)
        self._parts = []
        return text

    def __len__(self) -> int:
        return sum(map(len, self._parts))


def format_string(fmt: str, *args: Any) -> str:
    builder = StringBuilder()
    builder.append(fmt, *args)
    return builder.build()