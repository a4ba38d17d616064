"""Least-significant-bit-first bit reader over a binary stream."""

from __future__ import annotations

from typing import BinaryIO, Protocol


class ReadBits(Protocol):
    """Anything that can hand out a number of bits at a time."""

    def get(self, cbit: int) -> int:
        ...


class BitReader:
    """Reads bit fields, least significant bit first, from a binary stream."""

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream
        self._bits = 0
        self._bit_count = 0

    def flush_buffer_to_byte_boundary(self) -> None:
        """Discard any bits left over from the current byte."""
        self._bit_count = 0

    def bit_position_in_current_byte(self) -> int:
        """Return how many bits of the current byte have been consumed."""
        return 8 - self._bit_count

    def _next_byte(self) -> int:
        data = self._stream.read(1)
        if not data:
            raise EOFError("unexpected end of bit stream")
        return data[0]

    def read_byte(self) -> int:
        """Read a whole byte; only allowed on a byte boundary."""
        if self._bit_count != 0:
            raise RuntimeError(
                "attempt to read bytes without first flushing to a byte boundary"
            )
        return self._next_byte()

    def get(self, cbit: int) -> int:
        """Read ``cbit`` bits (0 to 32) and return them as an integer."""
        if cbit == 0:
            return 0
        if not 0 < cbit <= 32:
            raise ValueError("attempt to read more than 32 bits")

        result = 0
        added = 0
        while added < cbit:
            if self._bit_count == 0:
                self._bits = self._next_byte()
                self._bit_count = 8

            take = min(cbit - added, self._bit_count)
            result |= (self._bits & ((1 << take) - 1)) << added

            self._bits >>= take
            self._bit_count -= take
            added += take

        return result