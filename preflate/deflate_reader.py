"""Parses a raw deflate stream into plain text and token blocks."""

from __future__ import annotations

from typing import BinaryIO

from preflate.bit_reader import BitReader
from preflate.deflate_constants import (
    DIST_BASE_TABLE,
    DIST_CODE_COUNT,
    DIST_EXTRA_TABLE,
    END_OF_BLOCK,
    LEN_CODE_COUNT,
    LENGTH_BASE_TABLE,
    LENGTH_EXTRA_TABLE,
    MAX_MATCH,
    MIN_MATCH,
    NONLEN_CODE_COUNT,
)
from preflate.huffman_encoding import HuffmanOriginalEncoding, HuffmanReader
from preflate.huffman_helper import InvalidDeflateError
from preflate.tokens import BlockType, TokenBlock

_NO_REFERENCE = 2**31 - 1


class DeflateReader:
    """Reads deflate blocks, collecting the decompressed text and the tokens."""

    def __init__(self, stream: BinaryIO) -> None:
        self._input = BitReader(stream)
        self._plain_text = bytearray()

    def read_eof_padding(self) -> int:
        """Return the bits left in the final byte after the last block."""
        return self._input.get(8 - self._input.bit_position_in_current_byte())

    def move_plain_text(self) -> bytes:
        """Hand over the text decompressed so far and start afresh."""
        text = bytes(self._plain_text)
        self._plain_text = bytearray()
        return text

    def read_block(self) -> tuple[TokenBlock, bool]:
        """Read one block; return it and whether it was the final block."""
        last = self._input.get(1) != 0
        mode = self._input.get(2)

        if mode == 0:
            block = TokenBlock(BlockType.STORED)
            block.padding_bits = self._input.get(8 - self._input.bit_position_in_current_byte())
            length = self._input.get(16)
            inverse = self._input.get(16)
            if length ^ inverse != 0xFFFF:
                raise InvalidDeflateError("Block length mismatch")
            self._input.flush_buffer_to_byte_boundary()
            data = bytes(self._input.read_byte() for _ in range(length))
            block.uncompressed.extend(data)
            self._plain_text.extend(data)
        elif mode == 1:
            block = TokenBlock(BlockType.STATIC_HUFF)
            self._decode_block(HuffmanReader.create_fixed(), block)
        elif mode == 2:
            block = TokenBlock(BlockType.DYNAMIC_HUFF)
            block.huffman_encoding = HuffmanOriginalEncoding.read(self._input)
            self._decode_block(HuffmanReader.from_original_encoding(block.huffman_encoding), block)
        else:
            raise InvalidDeflateError("Invalid block type")

        return block, last

    def _write_reference(self, dist: int, length: int) -> None:
        start = len(self._plain_text) - dist
        # byte by byte, since the copy may overlap what it produces
        for i in range(length):
            self._plain_text.append(self._plain_text[start + i])

    def _decode_block(self, decoder: HuffmanReader, block: TokenBlock) -> None:
        earliest_reference = _NO_REFERENCE
        cur_pos = 0

        while True:
            lit_len = decoder.fetch_next_literal_code(self._input)
            if lit_len < END_OF_BLOCK:
                self._plain_text.append(lit_len)
                block.add_literal(lit_len)
                cur_pos += 1
                continue
            if lit_len == END_OF_BLOCK:
                block.context_len = -earliest_reference
                return

            lcode = lit_len - NONLEN_CODE_COUNT
            if lcode >= LEN_CODE_COUNT:
                raise InvalidDeflateError("Invalid length code")
            length = (
                MIN_MATCH
                + LENGTH_BASE_TABLE[lcode]
                + self._input.get(LENGTH_EXTRA_TABLE[lcode])
            )
            # 258 may be coded as 284 with all extra bits set instead of 285
            irregular258 = length == MAX_MATCH and lcode != LEN_CODE_COUNT - 1

            dcode = decoder.fetch_next_distance_char(self._input)
            if dcode >= DIST_CODE_COUNT:
                raise InvalidDeflateError("Invalid distance code")
            dist = 1 + DIST_BASE_TABLE[dcode] + self._input.get(DIST_EXTRA_TABLE[dcode])
            if dist > len(self._plain_text):
                raise InvalidDeflateError("Invalid distance")

            self._write_reference(dist, length)
            block.add_reference(length, dist, irregular258)

            earliest_reference = min(earliest_reference, cur_pos - dist)
            cur_pos += length