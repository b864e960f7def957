"""Byte streams with big-endian integer, varint and string helpers."""

from __future__ import annotations

import enum


class StreamError(Exception):
    """Raised when a stream operation fails or is not supported."""


class StreamTruncatedError(StreamError):
    """Raised when fewer bytes are available than were asked for."""


class SeekMode(enum.Enum):
    """Where a seek offset is measured from."""

    SET = enum.auto()
    ADD = enum.auto()
    END = enum.auto()


class Stream:
    """Base stream; subclasses override seek, read and write as they support them."""

    def seek(self, offset: int, mode: SeekMode) -> int:
        raise StreamError(f"{type(self).__name__} does not support seeking")

    def read(self, size: int) -> bytes:
        raise StreamError(f"{type(self).__name__} does not support reading")

    def write(self, data: bytes) -> None:
        raise StreamError(f"{type(self).__name__} does not support writing")

    def read_byte(self) -> int:
        data = self.read(1)
        if len(data) != 1:
            raise StreamTruncatedError("expected 1 byte, stream is exhausted")
        return data[0]

    def write_byte(self, byte: int) -> None:
        self.write(bytes((byte,)))

    def read_be(self, size: int, signed: bool = False) -> int:
        """Read a big-endian integer of *size* bytes."""
        data = self.read(size)
        if len(data) != size:
            raise StreamTruncatedError(f"expected {size} bytes, got {len(data)}")
        return int.from_bytes(data, "big", signed=signed)

    def write_be(self, value: int, size: int) -> None:
        """Write the low *size* bytes of *value* in big-endian order."""
        self.write((value % (1 << (8 * size))).to_bytes(size, "big"))

    def read_varint(self, size: int = 4) -> int:
        """Read a little-endian base-128 varint into an unsigned *size*-byte integer."""
        value = 0
        for count in range(size + 1):
            byte = self.read_byte()
            value |= (byte & 0x7F) << (7 * count)
            if not byte & 0x80:
                break
        return value & ((1 << (8 * size)) - 1)

    def write_varint(self, value: int) -> None:
        if value < 0:
            raise ValueError("varint value must not be negative")
        while value >= 0x80:
            self.write_byte((value & 0x7F) | 0x80)
            value >>= 7
        self.write_byte(value & 0x7F)

    def read_string(self) -> str:
        """Read a varint length followed by that many UTF-8 bytes."""
        length = self.read_varint(4)
        data = self.read(length)
        if len(data) != length:
            raise StreamTruncatedError(f"expected {length} string bytes, got {len(data)}")
        return data.decode("utf-8")

    def write_string(self, string: str | bytes) -> None:
        data = string.encode("utf-8") if isinstance(string, str) else bytes(string)
        self.write_varint(len(data))
        self.write(data)


class SpanStream(Stream):
    """A read-only stream over an in-memory byte sequence."""

    def __init__(self, data: bytes | bytearray | memoryview) -> None:
        self._data = bytes(data)
        self._head = 0

    def seek(self, offset: int, mode: SeekMode) -> int:
        if mode is SeekMode.SET:
            head = offset
        elif mode is SeekMode.ADD:
            head = self._head + offset
        else:
            raise StreamError(f"seek mode {mode.name} is not supported")
        if head < 0:
            raise StreamError("cannot seek before the start of the stream")
        self._head = head
        return self._head

    def read(self, size: int) -> bytes:
        chunk = self._data[self._head:self._head + size]
        self._head += len(chunk)
        return chunk