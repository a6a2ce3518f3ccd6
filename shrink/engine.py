"""Choose a compression algorithm and run it over files or byte strings."""

from __future__ import annotations

import os
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Optional, Union

from shrink.flate import deflate
from shrink.huffman import codec as huffman_codec
from shrink.lzss import decoder as lzss_decoder
from shrink.lzss import encoder as lzss_encoder

ENGINES = ("huffman", "lzss", "flate")
LZSS_MATCH_DISTANCE = 4096
LZSS_MATCH_LENGTH = 4096
DEFAULT_EXTENSION = ".shk"

PathLike = Union[str, "os.PathLike[str]"]


class EngineError(Exception):
    """Raised for an unknown algorithm or missing algorithm options."""


def compress_bytes(
    algorithm: str, data: bytes, options: Optional[Mapping[str, int]] = None
) -> bytes:
    """Compress ``data`` with ``algorithm``.

    ``flate`` needs ``options`` with the keys ``btype`` and ``bfinal``.
    """
    if algorithm not in ENGINES:
        raise EngineError("compression engine does not exist")
    if algorithm == "huffman":
        return huffman_codec.compress(data)
    if algorithm == "lzss":
        return lzss_encoder.compress(data, LZSS_MATCH_DISTANCE, LZSS_MATCH_LENGTH)
    if options is None or "btype" not in options or "bfinal" not in options:
        raise EngineError("arguments missing for flate")
    return deflate.compress(data, options["btype"], options["bfinal"])


def decompress_bytes(algorithm: str, data: bytes) -> bytes:
    """Decompress ``data`` that ``algorithm`` produced."""
    if algorithm not in ENGINES:
        raise EngineError("decompression engine does not exist")
    if algorithm == "huffman":
        return huffman_codec.decompress(data)
    if algorithm == "lzss":
        return lzss_decoder.decompress(data)
    raise EngineError(f"no decompression available for {algorithm}")


def decompressed_name(compressed_path: PathLike) -> str:
    """Name of the file a decompression writes: text before the first dot plus a suffix."""
    stem = os.fspath(compressed_path).split(".", 1)[0]
    return f"{stem}-decompressed.txt"


def compress_file(
    algorithm: str,
    path: PathLike,
    output_path: PathLike,
    options: Optional[Mapping[str, int]] = None,
) -> bytes:
    """Compress the file at ``path`` into ``output_path`` and return the compressed bytes."""
    data = Path(path).read_bytes()
    print("Compressing...")
    content = compress_bytes(algorithm, data, options)
    Path(output_path).write_bytes(content)
    ratio = len(content) / len(data) * 100 if data else float("nan")
    print(f"Original size (in bytes): {len(data)}")
    print(f"Compressed size (in bytes): {len(content)}")
    print(f"Compression ratio: {ratio:.2f}%")
    print(f"File `{os.fspath(path)}` has been compressed into the file `{os.fspath(output_path)}`")
    return content


def compress_files(
    algorithm: str,
    files: Iterable[PathLike],
    extension: str = DEFAULT_EXTENSION,
    options: Optional[Mapping[str, int]] = None,
) -> list[str]:
    """Compress each file next to itself with ``extension`` appended; return the outputs."""
    outputs = []
    for file in files:
        output = os.fspath(file) + extension
        compress_file(algorithm, file, output, options)
        outputs.append(output)
    return outputs


def decompress_file(algorithm: str, path: PathLike) -> str:
    """Decompress the file at ``path`` and return the name of the file written."""
    output = decompressed_name(path)
    data = Path(path).read_bytes()
    print("Decompressing...")
    content = decompress_bytes(algorithm, data)
    Path(output).write_bytes(content)
    print(
        f"File `{os.fspath(path)}` has been decompressed into File `{output}` "
        "into the current directory"
    )
    return output


def decompress_files(algorithm: str, files: Iterable[PathLike]) -> list[str]:
    """Decompress each file; return the names of the files written."""
    return [decompress_file(algorithm, file) for file in files]