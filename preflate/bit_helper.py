"""Small bit-twiddling helpers and a debugging checksum."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

_U64_MASK = (1 << 64) - 1


def bit_length(n: int) -> int:
    """Return the number of bits needed to represent the unsigned 32-bit value ``n``."""
    if not 0 <= n <= 0xFFFF_FFFF:
        raise ValueError(f"value out of 32-bit unsigned range: {n}")
    return n.bit_length()


@dataclass
class DebugHash:
    """A cheap rolling checksum used to compare encoder and decoder state."""

    hash: int = 0

    def update(self, value: int) -> None:
        """Fold a single signed or unsigned integer into the checksum."""
        self.hash = (self.hash * 13 + value) & _U64_MASK

    def update_slice(self, values: Iterable[int]) -> None:
        """Fold every value of ``values`` into the checksum, in order."""
        for value in values:
            self.update(value)