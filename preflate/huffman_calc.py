"""Huffman code length calculation mimicking zlib and miniz."""

from __future__ import annotations

import enum
from collections.abc import Sequence
from dataclasses import dataclass

_MAX_SUPPORTED_HUFF_CODESIZE = 32
_U16_MASK = 0xFFFF


class HufftreeBitCalc(enum.Enum):
    """Which compressor's Huffman length algorithm to reproduce."""

    ZLIB = "zlib"
    MINIZ = "miniz"


def calc_bit_lengths(
    bit_calc: HufftreeBitCalc, sym_count: Sequence[int], code_size_limit: int
) -> list[int]:
    """Calculate code lengths for ``sym_count`` using the chosen algorithm."""
    if bit_calc is HufftreeBitCalc.ZLIB:
        return calc_bit_lengths_zlib(sym_count, code_size_limit)
    if bit_calc is HufftreeBitCalc.MINIZ:
        return calc_bit_lengths_miniz(sym_count, code_size_limit)
    raise ValueError(f"unknown Huffman length algorithm: {bit_calc!r}")


# ---------------------------------------------------------------------------
# miniz

def _calculate_minimum_redundancy(keys: list[int]) -> None:
    """Turn sorted frequencies in ``keys`` into code depths, in place."""
    n = len(keys)
    if n == 0:
        return
    if n == 1:
        keys[0] = 1
        return

    keys[0] = (keys[0] + keys[1]) & _U16_MASK
    root = 0
    leaf = 2
    for nxt in range(1, n - 1):
        if leaf >= n or keys[root] < keys[leaf]:
            keys[nxt] = keys[root]
            keys[root] = nxt
            root += 1
        else:
            keys[nxt] = keys[leaf]
            leaf += 1

        if leaf >= n or (root < nxt and keys[root] < keys[leaf]):
            keys[nxt] = (keys[nxt] + keys[root]) & _U16_MASK
            keys[root] = nxt
            root += 1
        else:
            keys[nxt] = (keys[nxt] + keys[leaf]) & _U16_MASK
            leaf += 1

    keys[n - 2] = 0
    for nxt in range(n - 3, -1, -1):
        keys[nxt] = keys[keys[nxt]] + 1

    available = 1
    used = 0
    depth = 0
    root = n - 2
    nxt = n - 1
    while available > 0:
        while root >= 0 and keys[root] == depth:
            used += 1
            root -= 1
        while available > used:
            keys[nxt] = depth
            nxt -= 1
            available -= 1
        available = 2 * used
        depth += 1
        used = 0


def _enforce_max_code_size(
    num_codes: list[int], code_list_len: int, max_code_size: int
) -> None:
    if code_list_len <= 1:
        return

    num_codes[max_code_size] += sum(num_codes[max_code_size + 1 :])
    total = sum(
        num_codes[bits] << (max_code_size - bits)
        for bits in range(1, max_code_size + 1)
    )

    for _ in range(1 << max_code_size, total):
        num_codes[max_code_size] -= 1
        for i in range(max_code_size - 1, 0, -1):
            if num_codes[i]:
                num_codes[i] -= 1
                num_codes[i + 1] += 2
                break


def calc_bit_lengths_miniz(sym_count: Sequence[int], code_size_limit: int) -> list[int]:
    """Code lengths as miniz computes them; trailing unused symbols are dropped."""
    used = [(freq, index) for index, freq in enumerate(sym_count) if freq != 0]
    max_used = used[-1][1] + 1 if used else 0

    # miniz uses a stable radix sort on the 16-bit frequency
    symbols = sorted(used, key=lambda item: item[0])
    keys = [freq for freq, _ in symbols]
    _calculate_minimum_redundancy(keys)

    num_codes = [0] * (_MAX_SUPPORTED_HUFF_CODESIZE + 1)
    for depth in keys:
        num_codes[depth] += 1

    _enforce_max_code_size(num_codes, len(symbols), code_size_limit)

    code_sizes = [0] * max_used
    last = len(symbols)
    for size in range(1, code_size_limit + 1):
        first = last - num_codes[size]
        for _, index in symbols[first:last]:
            code_sizes[index] = size
        last = first

    return code_sizes


# ---------------------------------------------------------------------------
# zlib

@dataclass(frozen=True)
class _Node:
    freq: int
    depth: int
    symbol: int | None = None
    children: tuple[int, int] | None = None


def _smaller(n: _Node, m: _Node) -> bool:
    return n.freq < m.freq or (n.freq == m.freq and n.depth <= m.depth)


def _pqdownheap(heap: list[_Node], root: int) -> None:
    """Sift the node at ``root`` down until the heap property holds."""
    value = heap[root]
    child = 2 * root + 1
    while child < len(heap):
        if child + 1 < len(heap) and _smaller(heap[child + 1], heap[child]):
            child += 1
        if _smaller(value, heap[child]):
            break
        heap[root] = heap[child]
        root = child
        child = 2 * root + 1
    heap[root] = value


def calc_bit_lengths_zlib(sym_freq: Sequence[int], max_bits: int) -> list[int]:
    """Code lengths as zlib computes them, limited to ``max_bits``."""
    heap = [_Node(freq, 0, symbol=index) for index, freq in enumerate(sym_freq) if freq > 0]
    max_code = heap[-1].symbol if heap else 0

    node_bit_len = [0] * (max_code + 1)

    if len(heap) <= 1:
        # a lone symbol still needs a partner to form a valid tree
        node_bit_len[max_code] = 1
        if max_code != 0:
            node_bit_len[0] = 1
        else:
            node_bit_len.append(1)
        return node_bit_len

    for n in range(len(heap) // 2 - 1, -1, -1):
        _pqdownheap(heap, n)

    nodes: list[_Node] = []
    while True:
        least1 = heap[0]
        last = heap.pop()
        heap[0] = last
        _pqdownheap(heap, 0)

        least2 = heap[0]

        nodes.append(least1)
        nodes.append(least2)
        combined = _Node(
            least1.freq + least2.freq,
            max(least1.depth, least2.depth) + 1,
            children=(len(nodes) - 1, len(nodes) - 2),
        )

        if len(heap) == 1:
            nodes.append(combined)
            break
        heap[0] = combined
        _pqdownheap(heap, 0)

    stack = [(len(nodes) - 1, 0)]
    while stack:
        index, depth = stack.pop()
        node = nodes[index]
        if node.children is None:
            node_bit_len[node.symbol] = depth
        else:
            left, right = node.children
            stack.append((right, depth + 1))
            stack.append((left, depth + 1))

    bl_count = [0] * (max_bits + 1)
    overflow = 0
    for bit_len in node_bit_len:
        if bit_len > max_bits:
            bit_len = max_bits
            overflow += 1
        bl_count[bit_len] += 1

    if overflow > 0:
        while overflow > 0:
            bits = max_bits - 1
            while bl_count[bits] == 0:
                bits -= 1
            bl_count[bits] -= 1
            bl_count[bits + 1] += 2
            bl_count[max_bits] -= 1
            overflow -= 2

        # leaves were collected in ascending frequency order
        bits = max_bits
        for node in nodes:
            if node.symbol is not None:
                while bl_count[bits] == 0:
                    bits -= 1
                node_bit_len[node.symbol] = bits
                bl_count[bits] -= 1

    return node_bit_len