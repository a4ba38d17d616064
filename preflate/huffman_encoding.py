"""Dynamic and fixed deflate Huffman tables: reading, writing and coding."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

from preflate.bit_reader import ReadBits
from preflate.bit_writer import BitWriter
from preflate.huffman_helper import (
    InvalidDeflateError,
    calc_huffman_codes,
    calculate_huffman_code_tree,
    decode_symbol,
)

# order in which the code length alphabet's lengths are stored
TREE_CODE_ORDER_TABLE = (16, 17, 18, 0, 8, 7, 9, 6, 10, 5, 11, 4, 12, 3, 13, 2, 14, 1, 15)


class TreeCodeType(enum.IntEnum):
    """Kinds of entries in the run-length coded code length table."""

    CODE = 0
    """A code length of 0 - 15."""
    REPEAT = 16
    """Copy the previous code length 3 - 6 times."""
    ZERO_SHORT = 17
    """Repeat a zero code length 3 - 10 times."""
    ZERO_LONG = 18
    """Repeat a zero code length 11 - 138 times."""


# (amount subtracted before coding, number of extra bits)
_TREE_CODE_ADJUSTMENT = {
    TreeCodeType.REPEAT: (3, 2),
    TreeCodeType.ZERO_SHORT: (3, 3),
    TreeCodeType.ZERO_LONG: (11, 7),
}


def fixed_distance_lengths() -> tuple[list[int], list[int]]:
    """Return the literal/length and distance code lengths of the fixed table."""
    literal_lengths = [8] * 144 + [9] * 112 + [7] * 24 + [8] * 8
    return literal_lengths, [5] * 32


@dataclass
class HuffmanOriginalEncoding:
    """A dynamic Huffman table exactly as it was coded in the stream."""

    lengths: list[tuple[TreeCodeType, int]] = field(default_factory=list)
    code_lengths: list[int] = field(default_factory=lambda: [0] * 19)
    num_literals: int = 0
    num_dist: int = 0
    num_code_lengths: int = 0

    @classmethod
    def read(cls, bit_reader: ReadBits) -> HuffmanOriginalEncoding:
        """Read a dynamic Huffman table header from ``bit_reader``."""
        hlit = bit_reader.get(5) + 257
        hdist = bit_reader.get(5) + 1
        hclen = bit_reader.get(4) + 4

        code_lengths = [0] * 19
        for symbol in TREE_CODE_ORDER_TABLE[:hclen]:
            code_lengths[symbol] = bit_reader.get(3)

        tree = calculate_huffman_code_tree(code_lengths)

        total = hlit + hdist
        lengths: list[tuple[TreeCodeType, int]] = []
        codes_read = 0
        while codes_read < total:
            symbol = decode_symbol(bit_reader, tree)
            if symbol <= 15:
                lengths.append((TreeCodeType.CODE, symbol))
                codes_read += 1
                continue
            if symbol > 18:
                raise InvalidDeflateError("Invalid code length")
            tree_code = TreeCodeType(symbol)
            sub, bits = _TREE_CODE_ADJUSTMENT[tree_code]
            count = bit_reader.get(bits) + sub
            lengths.append((tree_code, count))
            codes_read += count

        if codes_read != total:
            raise InvalidDeflateError("Code table should be same size as hdist + hlit")

        return cls(
            lengths=lengths,
            code_lengths=code_lengths,
            num_literals=hlit,
            num_dist=hdist,
            num_code_lengths=hclen,
        )

    def write(self, bitwriter: BitWriter) -> None:
        """Write this table to ``bitwriter`` exactly as it was read."""
        bitwriter.write(self.num_literals - 257, 5)
        bitwriter.write(self.num_dist - 1, 5)
        bitwriter.write(self.num_code_lengths - 4, 4)

        for symbol in TREE_CODE_ORDER_TABLE[: self.num_code_lengths]:
            bitwriter.write(self.code_lengths[symbol], 3)

        codes = calc_huffman_codes(self.code_lengths)

        for tree_code, length in self.lengths:
            if tree_code is TreeCodeType.CODE:
                bitwriter.write(codes[length], self.code_lengths[length])
            else:
                bitwriter.write(codes[tree_code], self.code_lengths[tree_code])
                sub, bits = _TREE_CODE_ADJUSTMENT[tree_code]
                bitwriter.write(length - sub, bits)

    def get_literal_distance_lengths(self) -> tuple[list[int], list[int]]:
        """Expand the run-length coding into literal and distance code lengths."""
        expanded: list[int] = []
        previous = 0
        for tree_code, length in self.lengths:
            if tree_code is TreeCodeType.CODE:
                expanded.append(length)
                previous = length
            elif tree_code is TreeCodeType.REPEAT:
                expanded.extend([previous] * length)
            else:
                expanded.extend([0] * length)

        return expanded[: self.num_literals], expanded[self.num_literals :]


@dataclass
class HuffmanReader:
    """Decodes literal/length and distance symbols with a pair of trees."""

    lit_huff_code_tree: list[int]
    dist_huff_code_tree: list[int]

    @classmethod
    def create_fixed(cls) -> HuffmanReader:
        """Reader for the fixed Huffman table of RFC 1951."""
        literal_lengths, distance_lengths = fixed_distance_lengths()
        return cls(
            calculate_huffman_code_tree(literal_lengths),
            calculate_huffman_code_tree(distance_lengths),
        )

    @classmethod
    def from_original_encoding(cls, encoding: HuffmanOriginalEncoding) -> HuffmanReader:
        """Reader for a dynamic table."""
        literal_lengths, distance_lengths = encoding.get_literal_distance_lengths()
        return cls(
            calculate_huffman_code_tree(literal_lengths),
            calculate_huffman_code_tree(distance_lengths),
        )

    def fetch_next_literal_code(self, bit_reader: ReadBits) -> int:
        """Decode the next literal/length symbol."""
        return decode_symbol(bit_reader, self.lit_huff_code_tree)

    def fetch_next_distance_char(self, bit_reader: ReadBits) -> int:
        """Decode the next distance symbol."""
        return decode_symbol(bit_reader, self.dist_huff_code_tree)


@dataclass
class HuffmanWriter:
    """Encodes literal/length and distance symbols with a pair of code tables."""

    lit_code_lengths: list[int]
    lit_huffman_codes: list[int]
    dist_code_lengths: list[int]
    dist_huffman_codes: list[int]

    @classmethod
    def _from_lengths(cls, literal_lengths: list[int], distance_lengths: list[int]) -> HuffmanWriter:
        return cls(
            literal_lengths,
            calc_huffman_codes(literal_lengths),
            distance_lengths,
            calc_huffman_codes(distance_lengths),
        )

    @classmethod
    def start_dynamic(cls, bitwriter: BitWriter, encoding: HuffmanOriginalEncoding) -> HuffmanWriter:
        """Write the dynamic block type and table, and return a writer for it."""
        bitwriter.write(2, 2)
        encoding.write(bitwriter)
        return cls._from_lengths(*encoding.get_literal_distance_lengths())

    @classmethod
    def start_fixed(cls) -> HuffmanWriter:
        """Writer for the fixed Huffman table."""
        return cls._from_lengths(*fixed_distance_lengths())

    def write_literal(self, bitwriter: BitWriter, lit: int) -> None:
        """Write the code of literal/length symbol ``lit``."""
        bitwriter.write(self.lit_huffman_codes[lit], self.lit_code_lengths[lit])

    def write_distance(self, bitwriter: BitWriter, dist: int) -> None:
        """Write the code of distance symbol ``dist``."""
        bitwriter.write(self.dist_huffman_codes[dist], self.dist_code_lengths[dist])