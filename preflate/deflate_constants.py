"""Length and distance code tables of the deflate format (RFC 1951)."""

from __future__ import annotations

from bisect import bisect_right

MIN_MATCH = 3
MAX_MATCH = 258
WINDOW_SIZE = 32768

NONLEN_CODE_COUNT = 257
LEN_CODE_COUNT = 29
LITLEN_CODE_COUNT = NONLEN_CODE_COUNT + LEN_CODE_COUNT
DIST_CODE_COUNT = 30
END_OF_BLOCK = 256

# base lengths are relative to MIN_MATCH
LENGTH_BASE_TABLE = (
    0, 1, 2, 3, 4, 5, 6, 7, 8, 10, 12, 14, 16, 20, 24, 28,
    32, 40, 48, 56, 64, 80, 96, 112, 128, 160, 192, 224, 255,
)
LENGTH_EXTRA_TABLE = (
    0, 0, 0, 0, 0, 0, 0, 0, 1, 1, 1, 1, 2, 2, 2, 2,
    3, 3, 3, 3, 4, 4, 4, 4, 5, 5, 5, 5, 0,
)

# base distances are relative to 1
DIST_BASE_TABLE = (
    0, 1, 2, 3, 4, 6, 8, 12, 16, 24, 32, 48, 64, 96, 128, 192,
    256, 384, 512, 768, 1024, 1536, 2048, 3072, 4096, 6144, 8192, 12288, 16384, 24576,
)
DIST_EXTRA_TABLE = (
    0, 0, 0, 0, 1, 1, 2, 2, 3, 3, 4, 4, 5, 5, 6, 6,
    7, 7, 8, 8, 9, 9, 10, 10, 11, 11, 12, 12, 13, 13,
)


def quantize_length(length: int) -> int:
    """Return the length code (0 - 28) used to encode a match of ``length``."""
    if not MIN_MATCH <= length <= MAX_MATCH:
        raise ValueError(f"match length out of range: {length}")
    return bisect_right(LENGTH_BASE_TABLE, length - MIN_MATCH) - 1


def quantize_distance(dist: int) -> int:
    """Return the distance code (0 - 29) used to encode a match distance."""
    if not 1 <= dist <= WINDOW_SIZE:
        raise ValueError(f"match distance out of range: {dist}")
    return bisect_right(DIST_BASE_TABLE, dist - 1) - 1