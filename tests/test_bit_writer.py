import io

import pytest

from preflate.bit_reader import BitReader
from preflate.bit_writer import BitWriter


def test_write_simple():
    b = BitWriter()
    b.write(1, 4)
    b.write(2, 4)
    b.write(3, 4)
    b.write(4, 4)
    b.write(4, 4)
    b.write(0x56, 8)
    b.write(0x78, 8)
    b.write(0x9F, 8)
    b.write(0xFE, 8)
    b.write(0xE, 4)

    assert bytes(b.output) == bytes([0x21, 0x43, 0x64, 0x85, 0xF7, 0xE9, 0xEF])


PATTERN = [
    (0, 1),
    (1, 1),
    (1, 2),
    (2, 3),
    (3, 4),
    (4, 5),
    (4, 6),
    (0x156, 9),
    (0x78, 8),
    (0x9F, 8),
    (0xFE, 8),
    (0x7FFF, 15),
    (0xFFFF, 16),
    (0xE, 4),
]


def test_write_roundtrip():
    b = BitWriter()
    for bits, length in PATTERN:
        b.write(bits, length)
    b.pad(0)
    b.flush_whole_bytes()

    reader = BitReader(io.BytesIO(bytes(b.output)))
    for bits, length in PATTERN:
        assert reader.get(length) == bits


def test_pad_with_zero_fill():
    b = BitWriter()
    b.write(1, 1)
    b.pad(0)
    assert bytes(b.output) == bytes([1])
    assert b.bits_in == 0


def test_pad_with_all_ones_fill():
    b = BitWriter()
    b.write(1, 1)
    b.pad(0xFF)
    assert bytes(b.output) == bytes([0xFF])


def test_pad_on_boundary_writes_nothing():
    b = BitWriter()
    b.write(0xAB, 8)
    b.pad(0xFF)
    assert bytes(b.output) == bytes([0xAB])


def test_partial_bits_held_until_byte_complete():
    b = BitWriter()
    b.write(5, 3)
    assert bytes(b.output) == b""
    assert b.bits_in == 3


def test_write_value_too_large_rejected():
    b = BitWriter()
    with pytest.raises(ValueError):
        b.write(4, 2)