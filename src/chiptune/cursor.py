"""Sequential big-endian reader over an in-memory byte buffer."""

from __future__ import annotations

from chiptune.errors import UnexpectedEndOfData


class ByteCursor:
    """Reads SMF integers from ``data`` between ``position`` and ``end``.

    Every read either consumes exactly the bytes it needs or raises
    :class:`UnexpectedEndOfData` without moving the cursor. ``end`` defaults
    to the end of the buffer and is clamped to it.
    """

    def __init__(self, data: bytes, position: int = 0, end: int | None = None) -> None:
        self._data = data if isinstance(data, bytes) else bytes(data)
        self._pos = position
        self._end = len(self._data) if end is None else min(end, len(self._data))

    @property
    def position(self) -> int:
        return self._pos

    @property
    def end(self) -> int:
        return self._end

    def has_more(self) -> bool:
        return self._pos < self._end

    def seek(self, position: int) -> None:
        self._pos = max(0, position)

    def window(self, length: int) -> ByteCursor:
        """A cursor over the next ``length`` bytes; this cursor does not move."""
        return ByteCursor(self._data, self._pos, self._pos + length)

    def _take(self, n: int) -> bytes:
        if n < 0 or self._pos + n > self._end:
            raise UnexpectedEndOfData(self._pos, n, self._end)
        chunk = self._data[self._pos:self._pos + n]
        self._pos += n
        return chunk

    def peek_u8(self) -> int:
        if self._pos >= self._end:
            raise UnexpectedEndOfData(self._pos, 1, self._end)
        return self._data[self._pos]

    def read_u8(self) -> int:
        return self._take(1)[0]

    def read_u16_be(self) -> int:
        return int.from_bytes(self._take(2), "big")

    def read_u32_be(self) -> int:
        return int.from_bytes(self._take(4), "big")

    def read_bytes(self, n: int) -> bytes:
        return self._take(n)

    def read_vlq(self) -> int:
        """Read a MIDI variable-length quantity (7 bits per byte, MSB = more)."""
        start = self._pos
        value = 0
        while True:
            if self._pos >= self._end:
                wanted = self._pos - start + 1
                self._pos = start
                raise UnexpectedEndOfData(start, wanted, self._end)
            byte = self._data[self._pos]
            self._pos += 1
            value = (value << 7) | (byte & 0x7F)
            if not byte & 0x80:
                return value

    def skip(self, n: int) -> None:
        self._take(n)


def encode_vlq(value: int) -> bytes:
    """Encode a non-negative integer as a MIDI variable-length quantity."""
    if value < 0:
        raise ValueError(f"VLQ values are unsigned, got {value}")
    out = [value & 0x7F]
    value >>= 7
    while value:
        out.append(0x80 | (value & 0x7F))
        value >>= 7
    return bytes(reversed(out))
