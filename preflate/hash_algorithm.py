"""Hash functions that different deflate compressors use to find matches."""

from __future__ import annotations

import enum
import struct
from dataclasses import dataclass
from typing import ClassVar

_U16_MASK = 0xFFFF
_U32_MASK = 0xFFFF_FFFF

MINIZ_LEVEL1_HASH_SIZE_MASK = 4095
"""Size mask of the miniz hash table in fastest mode."""


class HashAlgorithm(enum.Enum):
    """The hash functions that can be recognised in a compressed stream."""

    NONE = "none"
    ZLIB = "zlib"
    MINIZ_FAST = "miniz_fast"
    LIBDEFLATE4_FAST = "libdeflate4_fast"
    """libdeflate 4 byte hash only."""
    LIBDEFLATE4 = "libdeflate4"
    """libdeflate 4 byte hash with a 3 byte secondary hash."""
    ZLIBNG = "zlibng"
    RANDOM_VECTOR = "random_vector"
    CRC32C_HASH = "crc32c_hash"


def _check_length(data: bytes, count: int) -> None:
    if len(data) < count:
        raise ValueError(f"hash needs at least {count} bytes, got {len(data)}")


def _le32(data: bytes) -> int:
    _check_length(data, 4)
    return int.from_bytes(data[:4], "little")


def _le24(data: bytes) -> int:
    _check_length(data, 3)
    return data[0] | (data[1] << 8) | (data[2] << 16)


@dataclass(frozen=True)
class ZlibRotatingHash:
    """The rotating three byte hash of zlib."""

    hash_mask: int = 0
    hash_shift: int = 0

    num_hash_bytes: ClassVar[int] = 3
    algorithm: ClassVar[HashAlgorithm] = HashAlgorithm.ZLIB

    def get_hash(self, data: bytes) -> int:
        """Hash the first three bytes of ``data``."""
        _check_length(data, 3)
        c = data[0]
        c = ((c << self.hash_shift) & _U16_MASK) ^ data[1]
        c = ((c << self.hash_shift) & _U16_MASK) ^ data[2]
        return c & self.hash_mask


@dataclass(frozen=True)
class MiniZHash:
    """The three byte hash of miniz in fastest mode."""

    num_hash_bytes: ClassVar[int] = 3
    algorithm: ClassVar[HashAlgorithm] = HashAlgorithm.MINIZ_FAST

    def get_hash(self, data: bytes) -> int:
        """Hash the first three bytes of ``data``."""
        value = _le24(data)
        return (value ^ (value >> 17)) & MINIZ_LEVEL1_HASH_SIZE_MASK


@dataclass(frozen=True)
class LibdeflateHash4Fast:
    """libdeflate's four byte hash without the secondary three byte hash (level 1)."""

    num_hash_bytes: ClassVar[int] = 4
    algorithm: ClassVar[HashAlgorithm] = HashAlgorithm.LIBDEFLATE4_FAST

    def get_hash(self, data: bytes) -> int:
        """Hash the first four bytes of ``data``."""
        return ((_le32(data) * 0x1E35A7BD) & _U32_MASK) >> 16


@dataclass(frozen=True)
class LibdeflateHash4:
    """libdeflate's four byte hash, used together with a three byte secondary hash."""

    num_hash_bytes: ClassVar[int] = 4
    algorithm: ClassVar[HashAlgorithm] = HashAlgorithm.LIBDEFLATE4

    def get_hash(self, data: bytes) -> int:
        """Hash the first four bytes of ``data``."""
        return ((_le32(data) * 0x1E35A7BD) & _U32_MASK) >> 16


@dataclass(frozen=True)
class LibdeflateHash3Secondary:
    """libdeflate's secondary three byte hash for short nearby matches.

    It only ever accompanies :class:`LibdeflateHash4` and has no algorithm of its own.
    """

    num_hash_bytes: ClassVar[int] = 3
    algorithm: ClassVar[HashAlgorithm | None] = None

    def get_hash(self, data: bytes) -> int:
        """Hash the first three bytes of ``data``."""
        return ((_le24(data) * 0x1E35A7BD) & _U32_MASK) >> 17


@dataclass(frozen=True)
class ZlibNGHash:
    """The four byte multiplicative hash of zlib-ng."""

    num_hash_bytes: ClassVar[int] = 4
    algorithm: ClassVar[HashAlgorithm] = HashAlgorithm.ZLIBNG

    def get_hash(self, data: bytes) -> int:
        """Hash the first four bytes of ``data``."""
        return ((_le32(data) * 2654435761) & _U32_MASK) >> 16


def _crc32c_table() -> tuple[int, ...]:
    table = []
    for byte in range(256):
        crc = byte
        for _ in range(8):
            crc = (crc >> 1) ^ 0x82F63B78 if crc & 1 else crc >> 1
        table.append(crc)
    return tuple(table)


_CRC32C_TABLE = _crc32c_table()


@dataclass(frozen=True)
class Crc32cHash:
    """A hash taken from the low 16 bits of a CRC32C over four bytes."""

    num_hash_bytes: ClassVar[int] = 4
    algorithm: ClassVar[HashAlgorithm] = HashAlgorithm.CRC32C_HASH

    def get_hash(self, data: bytes) -> int:
        """Hash the first four bytes of ``data``."""
        _check_length(data, 4)
        crc = _CRC32C_TABLE[data[0]]
        for byte in data[1:4]:
            crc = (crc >> 8) ^ _CRC32C_TABLE[(crc ^ byte) & 0xFF]
        return crc & _U16_MASK


# Three tables of 256 big-endian 16-bit random values, one per hashed byte.
_RANDOM_VECTOR_HEX = (
    "499d3dc22d07705b7a76346959db0c582b72412d124620951c1c47265f452c4e7b1b1e702743554f1334532878c141cc"
    "4b2c62a51d934aa464c865f0194d1ac03f9641df4389065b4b7415e203890b7e57785d957ffc1e6f546523d301ab567e"
    "0b3b6c2f5e4d264103a412144b0148f37ba9700912700e6740e8710d6b7f141845f62785472579041 4a271b831896ccc"
    "4d66701e41486c0501a85ff14fbb0a2a541d43783f1536770d82578b345d60520beb553d4d891315311c3f33226d3223"
    "478b487b5326160e05b3486d0f2f1ecc04b701a06f70425c3d3f1610421168d330417ddf596736f331a52137469256de"
    "53d844665720 6d64342169793151 5ee60e2f35d830ff307019b146516b4f4cea79914e0b2d3f3d1e09a04bac0571079a"
    "4380411a401257f50f7a5ae91b6d6f3c3b370b6660af17b977df286f14c922741d9667dc780168d909421c0649227a4b"
    "17326c5d49283c7064fa6ce82979163b437964ee37d35bf21725574926aa13e71e822226723c46774a6f0e39643150f7"
    "7ff97b8223077254 1c171d2c580d3b5f3e9946ee31055d1938bb413421bc068a0e6b5aa768ef2bd271b50db828c55a48"
    "14ad1ec02c71690c1559563873b226c6301b2aad256f15fd7e605a5a70a870a23c765a0049b30f1d7a4318d856e16101"
    "3f864ad926b40305388c13e236e935e4587c2e315ecb2ed3449340a60d5c57de5b6b656c1ca2167c65a575971f4f47dd"
    "602c21697ccb771907a3735b1afd63151fba36fe59614c6379af1126269a312f3d201783334b44a865802f6b51745daf"
    "01b415b833c15c4b302f73bf59ce0b131c9b2e1b27f700a77c7e6763202e7a6d4a1c20dd591d7edb7c3b753219091dd6"
    "466a72d02c9a79d70fda6dc049070a6c3f7534cc6e4235e46dbb51f02af5441f690727d9540b7095672366b31f856213"
    "405b06ed1d8b65502585002e3c075208793338977 77d03db4d9f50cc31f132134a706e2f78c45c1e391e0e49007b7c8f"
    "55d851b7447761ac7eb2330e18824d044b59318874f53ebe2a7f6b8e705b66881cfc084d60ed1cd957991f590beb6732"
    "6640782b455f5910706626b026d27e2622bd15b3634e24f04649282b563145391b49402348b1115b6ca65bde4f40288f"
    "41066f4162fe09b1792971e02a80216466be3fa8094b4a091177355f645a29405a2a53697ade0a6674e865026cbb1971"
    "2ba30ab52f4f4539150e1dc4326204ed5df035af5c4a4fb45fcd0dc76fef266e0be669d95e024650561f03e826e54778"
    "6be3437515597786 06532a4a482570f056f2596f4f6b09374e8953905bf903ea1eb7129619 6677bc6d2a3cf143a701a3"
    "2e0f696e56544ba666be6b162c6c3db47b522d5f0b3c739125f745bf44c770523da7117c079720b96b3561bc511a2168"
    "76936de24c7c04e1234a1e3616c72b675c401dd8716477cc0c1067891a4b42dd5ea5545a2c550eb7612648b61a5b093d"
    "77ee75d65e4c01532b5355874e6d4cff2afb37e14f616ff2175874b20b70414651b851fe6fae696b0a5843d0623e57c4"
    "07f8712c122173787c697bd000f435de6cd74947634415756 7ed1bd045f33d2d0bd166c87c1147b019bb669565095eed"
    "4e6a19ac32345dab3a2b7a795c582347434b32a73eb51a2a02ec1f6162a770c0228e445d5ab6401c540441cd46a93358"
    "1cb167d631067ae31ea62ad707d57aa5750a6601595b48677b8c0c0c3f99784327ac7a3c792820d9024f6c8f1b901142"
    "75c002271cb748637705553f7d446dff5f8c3dae19842410757d6403567c4bda49de10e96a0a20545cb1534e02067a42"
    "66b318f0604f1b4f2b971a3402845d71064263906d852e2a17d93d3f35d641185700 3e896ddb0dc26750232e566b77b6"
    "607f31cc0c29602b50f66ac0305c181a4c16701b7b3d20c53359703418370 90a5f2d583753dd68270afb29685983 3a36"
    "6a3b0b8e04e43bf73bba2c2b084e5ad40da46828733215f4034d1c3069076c5f07c3015469d0677930bc7bf6702e614c"
    "269676ff046356f75cfa6bf76cbc57d94d2510fb4e573668091c63a81a6d60b1567562ca5a16550e3b66147968271511"
    "64e97ee77b8d41371c4644e96d7c1709646e620a497a297123df1451558d693c52d627e1487d404e092b1f5733b73748"
)

_RANDOM_VECTOR = struct.unpack(">768H", bytes.fromhex(_RANDOM_VECTOR_HEX.replace(" ", "")))


@dataclass(frozen=True)
class RandomVectorHash:
    """A three byte hash built from a table of random values, one table per byte."""

    num_hash_bytes: ClassVar[int] = 3
    algorithm: ClassVar[HashAlgorithm] = HashAlgorithm.RANDOM_VECTOR

    def get_hash(self, data: bytes) -> int:
        """Hash the first three bytes of ``data``."""
        _check_length(data, 3)
        return (
            _RANDOM_VECTOR[data[0]]
            ^ _RANDOM_VECTOR[data[1] + 256]
            ^ _RANDOM_VECTOR[data[2] + 512]
        )