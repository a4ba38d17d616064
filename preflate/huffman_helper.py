"""Canonical Huffman code construction and decoding (RFC 1951)."""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence

from preflate.bit_reader import ReadBits

_MAX_CODE_LENGTH = 16


class InvalidDeflateError(ValueError):
    """Raised when deflate data or its Huffman tables are malformed."""


def calc_huffman_codes(code_lengths: Sequence[int]) -> list[int]:
    """Return the canonical codes for ``code_lengths``, bit-reversed for LSB-first output."""
    if any(not 0 <= length < 32 for length in code_lengths):
        raise InvalidDeflateError("Huffman code length out of range")

    bl_count = Counter(code_lengths)
    bl_count[0] = 0
    max_bits = max(code_lengths, default=0)

    next_code = [0] * 32
    code = 0
    for bits in range(1, max_bits + 1):
        code = (code + bl_count[bits - 1]) << 1
        next_code[bits] = code

    result = []
    for length in code_lengths:
        if length == 0:
            result.append(0)
            continue
        code = next_code[length]
        next_code[length] += 1
        result.append(int(format(code, f"0{length}b")[::-1], 2))
    return result


def _is_valid_huffman_code_lengths(code_lengths: Sequence[int]) -> bool:
    if not code_lengths:
        return False
    if any(not 0 <= length < _MAX_CODE_LENGTH for length in code_lengths):
        return False

    counts = Counter(code_lengths)

    # every internal node must have exactly two children, so the tree is full
    internal_nodes = 2
    for length in range(1, _MAX_CODE_LENGTH):
        internal_nodes -= counts[length]
        if internal_nodes < 0:
            return False
        internal_nodes *= 2

    return internal_nodes == 0


def calculate_huffman_code_tree(code_lengths: Sequence[int]) -> list[int]:
    """Build a flat decoding tree from code lengths.

    Node ``N`` (even) has its '0' child at ``tree[N]`` and its '1' child at
    ``tree[N + 1]``. A negative entry ``v`` is a leaf for symbol ``-v - 1``.
    The root is at ``len(tree) - 2``.
    """
    if not _is_valid_huffman_code_lengths(code_lengths):
        raise InvalidDeflateError("Invalid Huffman code lengths")

    largest = max(code_lengths)
    nodes: list[int] = []
    previous_level_start = 0

    for current_bits in range(largest, 0, -1):
        level_start = len(nodes)
        nodes.extend(
            -1 - symbol
            for symbol, length in enumerate(code_lengths)
            if length == current_bits
        )
        nodes.extend(range(previous_level_start, level_start, 2))
        previous_level_start = level_start

    return nodes


def decode_symbol(bit_reader: ReadBits, huffman_tree: Sequence[int]) -> int:
    """Read one Huffman-coded symbol from ``bit_reader`` using ``huffman_tree``."""
    node = len(huffman_tree) - 2
    while True:
        node = huffman_tree[bit_reader.get(1) + node]
        if node < 0:
            return -(node + 1)