"""Writes token blocks back out as a deflate stream."""

from __future__ import annotations

from preflate.bit_writer import BitWriter
from preflate.deflate_constants import (
    DIST_BASE_TABLE,
    DIST_EXTRA_TABLE,
    END_OF_BLOCK,
    LENGTH_BASE_TABLE,
    LENGTH_EXTRA_TABLE,
    LITLEN_CODE_COUNT,
    MIN_MATCH,
    NONLEN_CODE_COUNT,
    quantize_distance,
    quantize_length,
)
from preflate.huffman_encoding import HuffmanWriter
from preflate.tokens import BlockType, Literal, TokenBlock

_IRREGULAR_258_CODE = LITLEN_CODE_COUNT - 2
_IRREGULAR_258_EXTRA = 31
_IRREGULAR_258_EXTRA_BITS = 5


class DeflateWriter:
    """Encodes token blocks into deflate bytes."""

    def __init__(self) -> None:
        self._bitwriter = BitWriter()

    def detach_output(self) -> bytes:
        """Return the complete bytes written so far and clear them."""
        output = bytes(self._bitwriter.output)
        self._bitwriter.output.clear()
        return output

    def encode_block(self, block: TokenBlock, last: bool) -> None:
        """Write ``block``; ``last`` sets the final-block flag."""
        bitwriter = self._bitwriter
        bitwriter.write(int(last), 1)

        if block.block_type is BlockType.STORED:
            length = len(block.uncompressed)
            if length > 0xFFFF:
                raise ValueError("stored block longer than 65535 bytes")
            bitwriter.write(0, 2)
            bitwriter.pad(block.padding_bits)
            bitwriter.flush_whole_bytes()
            bitwriter.output += length.to_bytes(2, "little")
            bitwriter.output += (~length & 0xFFFF).to_bytes(2, "little")
            bitwriter.output += block.uncompressed
        elif block.block_type is BlockType.STATIC_HUFF:
            bitwriter.write(1, 2)
            self._encode_tokens(block, HuffmanWriter.start_fixed())
        else:
            self._encode_tokens(
                block, HuffmanWriter.start_dynamic(bitwriter, block.huffman_encoding)
            )

    def flush_with_padding(self, padding: int) -> None:
        """Pad the last byte with the bits of ``padding`` and flush it."""
        self._bitwriter.pad(padding)
        self._bitwriter.flush_whole_bytes()

    def _encode_tokens(self, block: TokenBlock, huffman_writer: HuffmanWriter) -> None:
        bitwriter = self._bitwriter
        for token in block.tokens:
            if isinstance(token, Literal):
                huffman_writer.write_literal(bitwriter, token.value)
                continue

            if token.irregular258:
                huffman_writer.write_literal(bitwriter, _IRREGULAR_258_CODE)
                bitwriter.write(_IRREGULAR_258_EXTRA, _IRREGULAR_258_EXTRA_BITS)
            else:
                lencode = quantize_length(token.length)
                huffman_writer.write_literal(bitwriter, NONLEN_CODE_COUNT + lencode)
                lenextra = LENGTH_EXTRA_TABLE[lencode]
                if lenextra:
                    bitwriter.write(
                        token.length - MIN_MATCH - LENGTH_BASE_TABLE[lencode], lenextra
                    )

            distcode = quantize_distance(token.dist)
            huffman_writer.write_distance(bitwriter, distcode)
            distextra = DIST_EXTRA_TABLE[distcode]
            if distextra:
                bitwriter.write(token.dist - 1 - DIST_BASE_TABLE[distcode], distextra)

        huffman_writer.write_literal(bitwriter, END_OF_BLOCK)