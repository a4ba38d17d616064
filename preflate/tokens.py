"""Tokenized representation of deflate blocks."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

from preflate.huffman_encoding import HuffmanOriginalEncoding


class BlockType(enum.Enum):
    """The three kinds of deflate block."""

    STORED = 0
    STATIC_HUFF = 1
    DYNAMIC_HUFF = 2


@dataclass(frozen=True)
class Literal:
    """A single literal byte."""

    value: int


@dataclass(frozen=True)
class Reference:
    """A back reference of ``length`` bytes at distance ``dist``.

    ``irregular258`` marks a length of 258 coded with code 284 and all extra
    bits set instead of the standard code 285.
    """

    length: int
    dist: int
    irregular258: bool = False


Token = Literal | Reference


@dataclass
class TokenBlock:
    """A deflate block and everything needed to write it again bit for bit."""

    block_type: BlockType
    tokens: list[Token] = field(default_factory=list)
    uncompressed: bytearray = field(default_factory=bytearray)
    padding_bits: int = 0
    context_len: int = 0
    huffman_encoding: HuffmanOriginalEncoding = field(default_factory=HuffmanOriginalEncoding)

    def add_literal(self, byte: int) -> None:
        """Append a literal token."""
        self.tokens.append(Literal(byte))

    def add_reference(self, length: int, dist: int, irregular258: bool) -> None:
        """Append a back reference token."""
        self.tokens.append(Reference(length, dist, irregular258))