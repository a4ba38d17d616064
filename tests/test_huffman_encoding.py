import io

import pytest

from preflate.bit_reader import BitReader
from preflate.bit_writer import BitWriter
from preflate.huffman_encoding import (
    HuffmanOriginalEncoding,
    HuffmanReader,
    HuffmanWriter,
    TreeCodeType,
    fixed_distance_lengths,
)
from preflate.huffman_helper import (
    InvalidDeflateError,
    calc_huffman_codes,
    calculate_huffman_code_tree,
    decode_symbol,
)

C = TreeCodeType.CODE
R = TreeCodeType.REPEAT
ZS = TreeCodeType.ZERO_SHORT
ZL = TreeCodeType.ZERO_LONG


def _simple_encoding():
    return HuffmanOriginalEncoding(
        lengths=[(C, 1), (C, 2), (C, 3), (ZL, 138), (ZL, 115), (C, 3), (C, 1), (C, 2), (C, 2)],
        code_lengths=[0, 2, 2, 2, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 2],
        num_literals=257,
        num_dist=3,
        num_code_lengths=19,
    )


def _roundtrip(encoding):
    writer = BitWriter()
    encoding.write(writer)
    writer.write(0x1234, 16)
    writer.pad(0)
    writer.flush_whole_bytes()

    reader = BitReader(io.BytesIO(bytes(writer.output)))
    encoding2 = HuffmanOriginalEncoding.read(reader)
    assert encoding == encoding2
    assert reader.get(16) == 0x1234, "sentinel value didn't match"


def test_roundtrip_huffman_bitreadwrite():
    code_lengths = [1, 0, 3, 3, 4, 4, 3, 0]
    codes = calc_huffman_codes(code_lengths)

    writer = BitWriter()
    for code, length in zip(codes, code_lengths):
        if length:
            writer.write(code, length)
    writer.write(0x1234, 16)
    writer.pad(0)

    reader = BitReader(io.BytesIO(bytes(writer.output)))
    tree = calculate_huffman_code_tree(code_lengths)
    for symbol, length in enumerate(code_lengths):
        if length:
            assert decode_symbol(reader, tree) == symbol
    assert reader.get(16) == 0x1234


def test_roundtrip_complicated():
    lengths = [
        (ZS, 10), (C, 11), (C, 0), (C, 0), (C, 11), (ZL, 18), (C, 6), (C, 14), (ZS, 5),
        (C, 11), (C, 9), (C, 10), (C, 0), (C, 0), (C, 10), (C, 11), (C, 8), (C, 0), (C, 7),
        (C, 6), (R, 6), (C, 6), (C, 7), (C, 10), (C, 0), (C, 0), (C, 10), (ZS, 3), (C, 8),
        (R, 5), (C, 11), (C, 0), (C, 9), (C, 0), (C, 0), (C, 10), (C, 10), (C, 11), (C, 9),
        (C, 10), (C, 12), (C, 10), (C, 9), (C, 10), (C, 11), (C, 0), (C, 11), (ZS, 3),
        (C, 11), (C, 9), (C, 11), (C, 0), (C, 11), (C, 12), (C, 7), (C, 10), (C, 8), (C, 8),
        (C, 6), (C, 9), (C, 8), (C, 8), (C, 8), (C, 0), (C, 10), (C, 8), (C, 9), (C, 7),
        (C, 7), (C, 8), (C, 13), (C, 7), (C, 7), (C, 7), (C, 8), (C, 11), (C, 10), (C, 10),
        (C, 8), (C, 12), (ZL, 133), (C, 14), (C, 5), (C, 6), (C, 6), (C, 4), (C, 5), (C, 5),
        (C, 8), (C, 5), (C, 5), (C, 6), (C, 4), (C, 6), (C, 5), (C, 9), (C, 5), (C, 7),
        (C, 4), (C, 5), (C, 6), (C, 7), (C, 4), (C, 6), (C, 6), (C, 6), (C, 7), (C, 7),
        (C, 8), (C, 8), (C, 6), (C, 12), (C, 0), (C, 0), (C, 13), (C, 13), (C, 11), (C, 9),
        (C, 10), (C, 9), (C, 9), (C, 5), (C, 7), (C, 6), (C, 5), (C, 5), (C, 6), (C, 5),
        (C, 5), (C, 4), (C, 4), (C, 3), (C, 3), (C, 4), (R, 4), (C, 5), (C, 4), (C, 6),
    ]
    encoding = HuffmanOriginalEncoding(
        lengths=lengths,
        code_lengths=[3, 0, 0, 6, 4, 3, 3, 4, 3, 4, 3, 4, 5, 6, 6, 0, 6, 6, 6],
        num_literals=286,
        num_dist=30,
        num_code_lengths=17,
    )
    _roundtrip(encoding)


def test_roundtrip_huffman_table():
    _roundtrip(_simple_encoding())


def test_literal_distance_lengths_expansion():
    literals, distances = _simple_encoding().get_literal_distance_lengths()
    assert len(literals) == 257
    assert literals[:3] == [1, 2, 3]
    assert literals[3:256] == [0] * 253
    assert literals[256] == 3
    assert distances == [1, 2, 2]


def test_repeat_copies_previous_length():
    encoding = HuffmanOriginalEncoding(
        lengths=[(C, 4), (R, 3), (ZS, 3)], num_literals=5, num_dist=2
    )
    assert encoding.get_literal_distance_lengths() == ([4, 4, 4, 4, 0], [0, 0])


def test_fixed_distance_lengths():
    literals, distances = fixed_distance_lengths()
    assert len(literals) == 288
    assert literals[0] == 8 and literals[143] == 8
    assert literals[144] == 9 and literals[255] == 9
    assert literals[256] == 7 and literals[279] == 7
    assert literals[280] == 8 and literals[287] == 8
    assert distances == [5] * 32


def test_fixed_writer_reader_roundtrip():
    symbols = [0, 65, 143, 144, 200, 255, 256, 279, 280, 285]
    distances = list(range(30))

    writer = BitWriter()
    huffman_writer = HuffmanWriter.start_fixed()
    for symbol in symbols:
        huffman_writer.write_literal(writer, symbol)
    for dist in distances:
        huffman_writer.write_distance(writer, dist)
    writer.pad(0)

    reader = BitReader(io.BytesIO(bytes(writer.output)))
    huffman_reader = HuffmanReader.create_fixed()
    assert [huffman_reader.fetch_next_literal_code(reader) for _ in symbols] == symbols
    assert [huffman_reader.fetch_next_distance_char(reader) for _ in distances] == distances


def test_fixed_end_of_block_code_is_seven_zero_bits():
    writer = BitWriter()
    HuffmanWriter.start_fixed().write_literal(writer, 256)
    assert writer.bits_in == 7
    assert writer.bit_buffer == 0


def test_dynamic_writer_reader_roundtrip():
    encoding = _simple_encoding()
    writer = BitWriter()
    huffman_writer = HuffmanWriter.start_dynamic(writer, encoding)
    literals = [0, 2, 1, 256, 0]
    distances = [2, 0, 1]
    for lit in literals:
        huffman_writer.write_literal(writer, lit)
    for dist in distances:
        huffman_writer.write_distance(writer, dist)
    writer.pad(0)

    reader = BitReader(io.BytesIO(bytes(writer.output)))
    assert reader.get(2) == 2
    read_encoding = HuffmanOriginalEncoding.read(reader)
    assert read_encoding == encoding
    huffman_reader = HuffmanReader.from_original_encoding(read_encoding)
    assert [huffman_reader.fetch_next_literal_code(reader) for _ in literals] == literals
    assert [huffman_reader.fetch_next_distance_char(reader) for _ in distances] == distances


def test_read_rejects_overlong_code_table():
    code_lengths = [0] * 19
    code_lengths[0] = 1
    code_lengths[18] = 1
    encoding = HuffmanOriginalEncoding(
        lengths=[(ZL, 138), (ZL, 138)],
        code_lengths=code_lengths,
        num_literals=257,
        num_dist=1,
        num_code_lengths=19,
    )
    writer = BitWriter()
    encoding.write(writer)
    writer.pad(0)

    with pytest.raises(InvalidDeflateError):
        HuffmanOriginalEncoding.read(BitReader(io.BytesIO(bytes(writer.output))))


def test_read_rejects_invalid_code_length_alphabet():
    writer = BitWriter()
    writer.write(0, 5)
    writer.write(0, 5)
    writer.write(0, 4)
    # four code length entries, only one of them used: not a full tree
    writer.write(1, 3)
    writer.write(0, 3)
    writer.write(0, 3)
    writer.write(0, 3)
    writer.pad(0)

    with pytest.raises(InvalidDeflateError):
        HuffmanOriginalEncoding.read(BitReader(io.BytesIO(bytes(writer.output))))


def test_read_truncated_stream_raises_eof():
    with pytest.raises(EOFError):
        HuffmanOriginalEncoding.read(BitReader(io.BytesIO(b"\x00")))