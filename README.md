# shrink

A small compression toolkit with three algorithms. Input files are read as
UTF-8 text; bytes that are not valid UTF-8 are replaced.

- **huffman**: a symbol-frequency header (`<freq>|<symbol>` entries), a
  separator, a padding byte and the Huffman-coded bit stream.
- **lzss**: textual back-references of the form `<offset,length>`; the
  characters `<`, `>`, `,` and `\` are escaped in the output. A reference is
  written only where it is shorter than the text it replaces.
- **flate**: a single deflate-style block with dynamic Huffman codes for
  literals/lengths, distances and code lengths (compression only).

## Installation

```
pip install .
```

## Command line

Compress a file. Huffman is the default algorithm, and the output is written
next to the input with the `.shk` extension. The sizes and the compression
ratio are printed:

```
shrink --compress notes.txt
shrink --compress --algorithm=lzss notes.txt
shrink --compress --algorithm=flate --btype=2 --bfinal=1 notes.txt
```

For `flate`, `--btype` (default 2) and `--bfinal` (default 0) are the values
written into the block header.

To compress several files at once, separate them with commas. Use
`--outfileext` to choose another extension, and `--delete` to remove the
originals afterwards:

```
shrink --compress --algorithm=lzss --outfileext=.lz --delete a.txt,b.txt
```

When neither `--compress` nor `--decompress` is given, the tool compresses.

Decompress. The result is named after the text of the path before its first
dot, with `-decompressed.txt` appended, so `notes.txt.shk` becomes
`notes-decompressed.txt`. `--delete` removes the compressed input afterwards:

```
shrink --decompress notes.txt.shk
shrink --decompress --algorithm=lzss notes.txt.shk
```

Show the available commands:

```
shrink --help
```

The command exits with status 1 when no arguments are given, when more than
one command is selected, when no file is named or a file does not exist, and
with status 2 when a flag cannot be parsed.

## Library use

```python
from shrink.engine import compress_bytes, decompress_bytes

packed = compress_bytes("huffman", b"hello world", None)
assert decompress_bytes("huffman", packed) == b"hello world"

block = compress_bytes("flate", b"hello hello hello", {"btype": 2, "bfinal": 1})
```

`shrink.engine` also offers `compress_file`, `compress_files`,
`decompress_file`, `decompress_files` and `decompressed_name`; an unknown
algorithm or missing flate options raise `EngineError`.

Each algorithm is also available on its own:

- `shrink.huffman.tree`: `build_tree`, `symbol_encodings`,
  `build_canonical_huffman_code`
- `shrink.huffman.codec`: `compress`, `decompress`, `encode_header`,
  `parse_header`, `bits_to_bytes`
- `shrink.lzss.encoder` / `shrink.lzss.decoder`: `compress` and `decompress`
  with the matching and escaping helpers
- `shrink.flate.codes`: the literal/length, distance and code-length codes
- `shrink.flate.deflate`: `compress`, `tokenise` and `BitWriter`

## What it does not do

- There is no flate decompressor: `decompress_bytes("flate", ...)` raises
  `EngineError`.
- The `--benchmark` flag is accepted but does nothing.
- Huffman compression of an empty file raises an error, as a tree needs at
  least one symbol.

## Running the tests

```
pip install .[test]
pytest
```