"""Least-significant-bit-first bit writer that collects output bytes."""

from __future__ import annotations


class BitWriter:
    """Accumulates bit fields and appends completed bytes to ``output``."""

    def __init__(self) -> None:
        self.bit_buffer = 0
        self.bits_in = 0
        self.output = bytearray()

    def write(self, bits: int, length: int) -> None:
        """Append the low ``length`` bits of ``bits``; the value must fit."""
        if bits < 0 or bits > (1 << length) - 1:
            raise ValueError(f"value {bits} does not fit in {length} bits")
        self.bit_buffer |= bits << self.bits_in
        self.bits_in += length
        self.flush_whole_bytes()

    def pad(self, fillbit: int) -> None:
        """Fill up to the next byte boundary with successive bits of ``fillbit``."""
        offset = 1
        while self.bits_in & 7:
            self.write(1 if fillbit & offset else 0, 1)
            offset <<= 1

    def flush_whole_bytes(self) -> None:
        """Move every complete byte from the bit buffer to ``output``."""
        while self.bits_in >= 8:
            self.output.append(self.bit_buffer & 0xFF)
            self.bit_buffer >>= 8
            self.bits_in -= 8