import pytest

from preflate.hash_algorithm import (
    LibdeflateHash3Secondary,
    LibdeflateHash4,
    MiniZHash,
    ZlibRotatingHash,
)
from preflate.hash_chain import (
    MAX_UPDATE_HASH_BATCH,
    HashChainNormalize,
    HashChainNormalizeLibflate4,
    new_hash_chain,
)


def _zlib_hash():
    return ZlibRotatingHash(hash_mask=0x7FFF, hash_shift=5)


def test_finds_earlier_matches_in_order():
    data = b"abcdabcdabcd"
    chain = HashChainNormalize(_zlib_hash())
    chain.update_hash(data, 0, 8)
    assert list(chain.iterate(data[8:], 8, 0)) == [4, 8]


def test_lazy_match_without_shared_hash():
    data = b"abcdabcdabcd"
    chain = HashChainNormalize(_zlib_hash())
    chain.update_hash(data, 0, 8)
    assert list(chain.iterate(data[7:], 7, 1)) == [4, 8]


def test_lazy_match_adds_distance_one_first():
    data = b"a" * 20
    chain = HashChainNormalize(_zlib_hash())
    chain.update_hash(data, 0, 5)
    assert list(chain.iterate(data[5:], 5, 1)) == [1, 2, 3, 4, 5, 6]


def test_update_near_end_adds_nothing():
    data = b"abc"
    chain = HashChainNormalize(_zlib_hash())
    chain.update_hash(data, 0, 1)
    assert list(chain.iterate(b"abcx", 10, 0)) == []


def test_invalid_offset_raises():
    chain = HashChainNormalize(_zlib_hash())
    with pytest.raises(ValueError):
        chain.iterate(b"abcd", 0, 2)


def test_batch_too_large_raises():
    chain = HashChainNormalize(_zlib_hash())
    with pytest.raises(ValueError):
        chain.update_hash(b"a" * 1000, 0, MAX_UPDATE_HASH_BATCH + 1)


def test_reshift_keeps_distances_and_drops_old_positions():
    chain = HashChainNormalize(_zlib_hash())
    chain.update_hash(b"abcd", 0, 1)
    chain.update_hash(b"abcd", 40000, 1)
    chain.update_hash(b"abcd", 65024, 1)
    distances = list(chain.iterate(b"abcd", 65100, 0))
    assert distances == [65100 - 65024, 65100 - 40000]


def test_libflate4_uses_secondary_table_first():
    data = b"abcdabcdabcd"
    chain = HashChainNormalizeLibflate4()
    chain.update_hash(data, 0, 8)
    assert list(chain.iterate(data[8:], 8, 0)) == [4, 4, 8]


def test_libflate4_lazy_match():
    data = b"a" * 20
    chain = HashChainNormalizeLibflate4()
    chain.update_hash(data, 0, 5)
    assert list(chain.iterate(data[5:], 5, 1)) == [1, 2, 3, 4, 5, 6]


def test_new_hash_chain_for_libdeflate4_uses_both_tables():
    data = b"abcdabcdabcd"
    chain = new_hash_chain(LibdeflateHash4())
    chain.update_hash(data, 0, 8)
    assert list(chain.iterate(data[8:], 8, 0)) == [4, 4, 8]


def test_new_hash_chain_for_miniz():
    data = b"xyzwxyzwxyzw"
    chain = new_hash_chain(MiniZHash())
    chain.update_hash(data, 0, 8)
    distances = list(chain.iterate(data[8:], 8, 0))
    assert distances[:2] == [4, 8]
    assert all(d > 0 for d in distances)


def test_new_hash_chain_rejects_secondary_hash():
    with pytest.raises(ValueError):
        new_hash_chain(LibdeflateHash3Secondary())