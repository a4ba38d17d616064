"""Hash chains that track earlier positions with the same hash value.

Positions are kept as 16-bit internal offsets relative to a running shift;
zero marks the end of a chain. When positions grow too large the tables are
normalized by subtracting a fixed delta from every entry.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Protocol

from preflate.hash_algorithm import LibdeflateHash3Secondary, LibdeflateHash4

MAX_UPDATE_HASH_BATCH = 0x180
"""The largest number of positions that may be added in one update."""

_TABLE_SIZE = 65536
_RESHIFT_DELTA = 0x7E00
_RESHIFT_THRESHOLD = 0xFE08
# starts negative so that the first position maps to 8, not to the end marker 0
_INITIAL_SHIFT = -8


class _HashFunction(Protocol):
    num_hash_bytes: int

    def get_hash(self, data: bytes) -> int:
        ...


def _to_internal(pos: int, total_shift: int) -> int:
    internal = pos - total_shift
    if not 0 <= internal < _TABLE_SIZE:
        raise ValueError(f"position {pos} is outside the current hash window")
    return internal


class _HashTable:
    """Heads of the chains per hash value and the links between positions."""

    def __init__(self) -> None:
        self.head = [0] * _TABLE_SIZE
        self.prev = [0] * _TABLE_SIZE

    def update_chain(self, hash_fn: _HashFunction, chars: bytes, pos: int, length: int) -> None:
        if length > len(chars):
            raise ValueError("update length exceeds the available input")
        if length + hash_fn.num_hash_bytes - 1 >= len(chars):
            # too close to the end of the stream for any further matches
            return

        view = memoryview(chars)
        head = self.head
        prev = self.prev
        for i in range(length):
            h = hash_fn.get_hash(view[i:])
            prev[pos] = head[h]
            head[h] = pos
            pos += 1

    def reshift(self, delta: int) -> None:
        self.head = [max(0, x - delta) for x in self.head]
        self.prev[: _TABLE_SIZE - delta] = [max(0, x - delta) for x in self.prev[delta:]]


def _walk(first_match: int | None, ref_pos: int, cur_pos: int, prev: list[int]) -> Iterator[int]:
    if first_match is not None:
        yield first_match
    while cur_pos > 0:
        yield ref_pos - cur_pos
        cur_pos = prev[cur_pos]


class HashChainNormalize:
    """A single hash chain over one hash function, normalized periodically."""

    def __init__(self, hash_impl: _HashFunction) -> None:
        self._hash = hash_impl
        self._table = _HashTable()
        self._total_shift = _INITIAL_SHIFT

    def iterate(self, data: bytes, pos: int, offset: int) -> Iterator[int]:
        """Yield distances to earlier candidates for a match at ``pos + offset``.

        ``data`` starts at the absolute position ``pos``; ``offset`` is 0, or 1
        for a lazy match whose first byte has not been added to the chain yet.
        """
        ref_pos = _to_internal(pos + offset, self._total_shift)
        h1 = self._hash.get_hash(data)
        first_match = None

        if offset == 0:
            curr_hash = h1
        elif offset == 1:
            curr_hash = self._hash.get_hash(data[1:])
            # the byte at pos is missing from the chain; offer it first
            if h1 == curr_hash:
                first_match = 1
        else:
            raise ValueError(f"offset must be 0 or 1, got {offset}")

        return _walk(first_match, ref_pos, self._table.head[curr_hash], self._table.prev)

    def update_hash(self, data: bytes, pos: int, length: int) -> None:
        """Add ``length`` positions starting at absolute ``pos``; ``data`` starts at ``pos``."""
        if length > MAX_UPDATE_HASH_BATCH:
            raise ValueError(f"cannot add more than {MAX_UPDATE_HASH_BATCH} positions at once")

        if pos - self._total_shift >= _RESHIFT_THRESHOLD:
            self._table.reshift(_RESHIFT_DELTA)
            self._total_shift += _RESHIFT_DELTA

        internal = _to_internal(pos, self._total_shift)
        self._table.update_chain(self._hash, data, internal, length)


_LIBFLATE_HASH_3 = LibdeflateHash3Secondary()
_LIBFLATE_HASH_4 = LibdeflateHash4()


class HashChainNormalizeLibflate4:
    """libdeflate style chains: a four byte chain plus a three byte secondary table."""

    def __init__(self) -> None:
        self._table = _HashTable()
        self._table_3 = _HashTable()
        self._total_shift = _INITIAL_SHIFT

    def iterate(self, data: bytes, pos: int, offset: int) -> Iterator[int]:
        """Yield distances to earlier candidates for a match at ``pos + offset``."""
        ref_pos = _to_internal(pos + offset, self._total_shift)
        first_match = None

        if offset == 0:
            # one look at the three byte table, then walk the four byte chain
            start_pos = self._table_3.head[_LIBFLATE_HASH_3.get_hash(data)]
            if start_pos > 0:
                first_match = ref_pos - start_pos
            cur_pos = self._table.head[_LIBFLATE_HASH_4.get_hash(data)]
        elif offset == 1:
            curr_hash = _LIBFLATE_HASH_4.get_hash(data[1:])
            if _LIBFLATE_HASH_4.get_hash(data) == curr_hash:
                first_match = 1
            cur_pos = self._table.head[curr_hash]
        else:
            raise ValueError(f"offset must be 0 or 1, got {offset}")

        return _walk(first_match, ref_pos, cur_pos, self._table.prev)

    def update_hash(self, data: bytes, pos: int, length: int) -> None:
        """Add ``length`` positions starting at absolute ``pos``; ``data`` starts at ``pos``."""
        if length > MAX_UPDATE_HASH_BATCH:
            raise ValueError(f"cannot add more than {MAX_UPDATE_HASH_BATCH} positions at once")

        if pos - self._total_shift >= _RESHIFT_THRESHOLD:
            self._table.reshift(_RESHIFT_DELTA)
            self._table_3.reshift(_RESHIFT_DELTA)
            self._total_shift += _RESHIFT_DELTA

        internal = _to_internal(pos, self._total_shift)
        self._table.update_chain(_LIBFLATE_HASH_4, data, internal, length)
        self._table_3.update_chain(_LIBFLATE_HASH_3, data, internal, length)


def new_hash_chain(hash_impl: _HashFunction) -> HashChainNormalize | HashChainNormalizeLibflate4:
    """Create the hash chain that belongs to ``hash_impl``."""
    if isinstance(hash_impl, LibdeflateHash3Secondary):
        raise ValueError("the secondary libdeflate hash has no chain of its own")
    if isinstance(hash_impl, LibdeflateHash4):
        return HashChainNormalizeLibflate4()
    return HashChainNormalize(hash_impl)