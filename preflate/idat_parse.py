"""Extracting the deflate stream from PNG IDAT chunks and putting it back."""

from __future__ import annotations

import zlib
from dataclasses import dataclass, field

_IDAT = b"IDAT"


class InvalidIdatError(ValueError):
    """Raised when IDAT chunks are missing, corrupt or inconsistent."""


@dataclass
class IdatContents:
    """What is needed, besides the deflate stream, to rebuild the IDAT chunks."""

    chunk_sizes: list[int] = field(default_factory=list)
    """The sizes of the IDAT chunks."""
    zlib_header: bytes = b"\x00\x00"
    """The two byte zlib header in front of the deflate stream."""
    total_chunk_length: int = 0
    """The size of all chunks together, including their headers and CRCs."""
    adler32: int = 0
    """The Adler-32 checksum that follows the deflate stream."""


def parse_idat(png_idat_stream: bytes, deflate_info_dump_level: int = 0) -> tuple[IdatContents, bytes]:
    """Read consecutive IDAT chunks; return their layout and the raw deflate stream."""
    if len(png_idat_stream) < 12 or png_idat_stream[4:8] != _IDAT:
        raise InvalidIdatError("No IDAT chunk found")

    joined = bytearray()
    chunk_sizes: list[int] = []
    pos = 0

    while pos + 8 <= len(png_idat_stream):
        chunk_len = int.from_bytes(png_idat_stream[pos : pos + 4], "big")
        chunk_type = png_idat_stream[pos + 4 : pos + 8]
        # only consecutive, complete IDAT chunks belong to the stream
        if chunk_type != _IDAT or pos + chunk_len + 12 > len(png_idat_stream):
            break

        chunk = png_idat_stream[pos + 8 : pos + 8 + chunk_len]
        stored_crc = int.from_bytes(png_idat_stream[pos + 8 + chunk_len : pos + 12 + chunk_len], "big")
        if zlib.crc32(chunk, zlib.crc32(chunk_type)) != stored_crc:
            raise InvalidIdatError("CRC mismatch")

        joined += chunk
        chunk_sizes.append(chunk_len)
        pos += chunk_len + 12

    if deflate_info_dump_level > 0:
        print(f"IDAT boundaries: {chunk_sizes}")

    if len(joined) < 6:
        raise InvalidIdatError("No IDAT data found")

    contents = IdatContents(
        chunk_sizes=chunk_sizes,
        zlib_header=bytes(joined[:2]),
        total_chunk_length=pos,
        adler32=int.from_bytes(joined[-4:], "big"),
    )
    return contents, bytes(joined[2:-4])


def recreate_idat(idat: IdatContents, deflate_stream: bytes) -> bytes:
    """Rebuild the IDAT chunks from their layout and the deflate stream."""
    if sum(idat.chunk_sizes) != len(deflate_stream) + 2 + 4:
        raise InvalidIdatError("Chunk sizes do not match deflate stream length")

    contents = bytes(idat.zlib_header) + bytes(deflate_stream) + idat.adler32.to_bytes(4, "big")

    output = bytearray()
    index = 0
    for size in idat.chunk_sizes:
        content = contents[index : index + size]
        output += size.to_bytes(4, "big")
        output += _IDAT
        output += content
        output += zlib.crc32(content, zlib.crc32(_IDAT)).to_bytes(4, "big")
        index += size

    return bytes(output)