# preflate

A library for taking deflate streams apart and writing them back bit for bit.
A stream is read into token blocks (literals and back references) together
with the exact Huffman table encodings that were used, and the same blocks can
be written out again to reproduce the original bytes.

It depends only on the Python standard library and needs Python 3.10 or later.

## Modules

- `preflate.bit_reader.BitReader` and `preflate.bit_writer.BitWriter`:
  least-significant-bit-first bit I/O as deflate uses it. `BitWriter` collects
  finished bytes in its `output` bytearray.
- `preflate.bit_helper`: `bit_length` and the `DebugHash` rolling checksum.
- `preflate.huffman_helper`: canonical Huffman codes (`calc_huffman_codes`),
  flat decoding trees (`calculate_huffman_code_tree`) and `decode_symbol`.
  Malformed tables raise `InvalidDeflateError`.
- `preflate.huffman_calc`: code length calculation in the manner of zlib or
  miniz, chosen with `HufftreeBitCalc` in `calc_bit_lengths`, or called
  directly as `calc_bit_lengths_zlib` and `calc_bit_lengths_miniz`.
- `preflate.huffman_encoding`: `HuffmanOriginalEncoding` holds a dynamic table
  exactly as it was stored (`read`, `write`, `get_literal_distance_lengths`);
  `HuffmanReader` and `HuffmanWriter` decode and encode symbols with fixed or
  dynamic tables; `fixed_distance_lengths` gives the fixed table's lengths.
- `preflate.deflate_constants`: the length and distance code tables, with
  `quantize_length` and `quantize_distance`.
- `preflate.tokens`: `BlockType`, `Literal`, `Reference` and `TokenBlock`.
- `preflate.deflate_reader.DeflateReader` and
  `preflate.deflate_writer.DeflateWriter`: block-level decoding and
  re-encoding. Invalid data raises `InvalidDeflateError`.
- `preflate.add_policy_estimator`: `estimate_add_policy` works out from a list
  of token blocks which substrings of each match the compressor added to its
  dictionary, as a `DictionaryAddPolicy` (an `AddPolicyKind` and a limit).
- `preflate.hash_algorithm`: the match-finding hashes of zlib, miniz,
  libdeflate, zlib-ng and others (`ZlibRotatingHash`, `MiniZHash`,
  `LibdeflateHash4Fast`, `LibdeflateHash4`, `LibdeflateHash3Secondary`,
  `ZlibNGHash`, `Crc32cHash`, `RandomVectorHash`), each with `get_hash`.
- `preflate.hash_chain`: `HashChainNormalize` and
  `HashChainNormalizeLibflate4` keep chains of earlier positions per hash and
  yield candidate match distances from `iterate`; `new_hash_chain` picks the
  right chain for a hash.
- `preflate.idat_parse`: `parse_idat` joins consecutive PNG IDAT chunks,
  checks their CRCs and returns an `IdatContents` (chunk sizes, zlib header,
  total length, Adler-32) plus the raw deflate stream; `recreate_idat` builds
  the chunks again. Problems raise `InvalidIdatError`.

## Example: read and rewrite a deflate stream

```python
import io
import zlib

from preflate.add_policy_estimator import estimate_add_policy
from preflate.deflate_reader import DeflateReader
from preflate.deflate_writer import DeflateWriter

compressor = zlib.compressobj(6, zlib.DEFLATED, -15)
data = compressor.compress(b"hello hello hello world" * 20) + compressor.flush()

reader = DeflateReader(io.BytesIO(data))
blocks = []
while True:
    block, last = reader.read_block()
    blocks.append(block)
    if last:
        break
padding = reader.read_eof_padding()
text = reader.move_plain_text()

writer = DeflateWriter()
for index, block in enumerate(blocks):
    writer.encode_block(block, index == len(blocks) - 1)
writer.flush_with_padding(padding)

assert writer.detach_output() == data
assert text == b"hello hello hello world" * 20

policy = estimate_add_policy(blocks)
print(policy.kind, policy.limit)
```

## Example: PNG IDAT chunks

```python
from preflate.idat_parse import parse_idat, recreate_idat

# `chunks` starts at the length field of the first IDAT chunk of a PNG file
contents, deflate_stream = parse_idat(chunks)
rebuilt = recreate_idat(contents, deflate_stream)
assert rebuilt == chunks[: contents.total_chunk_length]
```

## What it does not do

- There is no command-line tool; everything is used as a library.
- There is no complete recompression pipeline: the package does not predict a
  stream's tokens from its plain text or store the differences, it provides the
  pieces (token blocks, Huffman tables, hashes, hash chains, add policy
  estimation) that such work is built from.
- It does not search files for deflate or PNG data; `parse_idat` must be given
  data that starts at an IDAT chunk.

## Tests

```
pip install -e .[test]
pytest
```