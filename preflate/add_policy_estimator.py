"""Estimating which substrings of a match a compressor adds to its dictionary.

Fast compressors often add only some substrings of a long match to the hash
table. By walking the matches of a stream and noting which earlier match
positions were later referenced, the policy the compressor used can be
recovered.
"""

from __future__ import annotations

import enum
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from preflate.tokens import BlockType, Literal, TokenBlock

UpdateFn = Callable[[bytes, int, int], None]

_WINDOW_MASK = 0x7FFF
_LAST_ADDED = 0x8000
_LAST_32K = 0x4000
_LENGTH_MASK = 0x0FFF
_MAX_MATCH = 258


class AddPolicyKind(enum.Enum):
    """The families of dictionary add policy."""

    ADD_ALL = "add_all"
    """Add every substring of a match."""
    ADD_FIRST = "add_first"
    """Add all substrings of matches up to the limit, else only the first."""
    ADD_FIRST_AND_LAST = "add_first_and_last"
    """Like ADD_FIRST, but also add the last substring of longer matches."""
    ADD_FIRST_EXCEPT_4K_BOUNDARY = "add_first_except_4k_boundary"
    """miniz fastest mode: the first substring, except near a 4k boundary."""
    ADD_FIRST_WITH_32K_BOUNDARY = "add_first_with_32k_boundary"
    """zlib-ng fast mode: the first substring, plus the last at the 32k window edge."""


@dataclass(frozen=True)
class DictionaryAddPolicy:
    """A dictionary add policy; ``limit`` applies to ADD_FIRST and ADD_FIRST_AND_LAST."""

    kind: AddPolicyKind = AddPolicyKind.ADD_ALL
    limit: int = 0

    def update_hash(self, data: bytes, pos: int, length: int, update_fn: UpdateFn) -> None:
        """Call ``update_fn(data, pos, count)`` for the substrings this policy adds."""
        if length == 1:
            update_fn(data, pos, 1)
            return

        kind = self.kind
        if kind is AddPolicyKind.ADD_ALL:
            update_fn(data, pos, length)
        elif kind is AddPolicyKind.ADD_FIRST:
            update_fn(data, pos, length if length <= self.limit else 1)
        elif kind is AddPolicyKind.ADD_FIRST_AND_LAST:
            if length <= self.limit:
                update_fn(data, pos, length)
            else:
                update_fn(data, pos, 1)
                update_fn(data[length - 1 :], pos + length - 1, 1)
        elif kind is AddPolicyKind.ADD_FIRST_EXCEPT_4K_BOUNDARY:
            if (pos & 4095) < 4093:
                update_fn(data, pos, 1)
        else:
            update_fn(data, pos, 1)
            if is_at_32k_boundary(length, pos):
                update_fn(data[length - 1 :], pos + length - 1, 1)


def is_at_32k_boundary(length: int, pos: int) -> bool:
    """Whether a match at ``pos`` crosses the point where zlib-ng refills its window."""
    edge = 32768 - 0x106
    return length > 1 and (pos & 0x7FFF) <= edge and ((pos + length) & 0x7FFF) >= edge


def estimate_add_policy(blocks: Sequence[TokenBlock]) -> DictionaryAddPolicy:
    """Work out the dictionary add policy that produced ``blocks``."""
    window = [0] * (_WINDOW_MASK + 1)
    block_4k = True
    max_length = 0
    max_length_last_add = 0
    last_outside_32k_seen = False
    offset = 0

    for block in blocks:
        if block.block_type is BlockType.STORED:
            # everything in a stored block is assumed to be in the dictionary
            for _ in range(len(block.uncompressed)):
                window[offset & _WINDOW_MASK] = 0
                offset += 1
            continue

        for token in block.tokens:
            if isinstance(token, Literal):
                window[offset & _WINDOW_MASK] = 0
                offset += 1
                continue

            if (offset & 4095) >= 4093:
                block_4k = False

            previous = window[(offset - token.dist) & _WINDOW_MASK]
            match_length = previous & _LENGTH_MASK

            max_length = max(max_length, match_length)
            if not previous & _LAST_ADDED:
                max_length_last_add = max(max_length_last_add, match_length)
            if match_length and not previous & _LAST_32K:
                last_outside_32k_seen = True

            last = _LAST_ADDED | (_LAST_32K if is_at_32k_boundary(token.length, offset) else 0)

            window[offset & _WINDOW_MASK] = 0
            offset += 1
            for i in range(1, token.length):
                window[offset & _WINDOW_MASK] = token.length | (
                    last if i == token.length - 1 else 0
                )
                offset += 1

    if max_length == 0 and block_4k:
        return DictionaryAddPolicy(AddPolicyKind.ADD_FIRST_EXCEPT_4K_BOUNDARY)
    if not last_outside_32k_seen:
        return DictionaryAddPolicy(AddPolicyKind.ADD_FIRST_WITH_32K_BOUNDARY)
    if max_length_last_add < max_length:
        return DictionaryAddPolicy(AddPolicyKind.ADD_FIRST_AND_LAST, max_length_last_add)
    if max_length < _MAX_MATCH:
        return DictionaryAddPolicy(AddPolicyKind.ADD_FIRST, max_length)
    return DictionaryAddPolicy(AddPolicyKind.ADD_ALL)