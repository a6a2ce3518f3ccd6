"""Huffman file format: a frequency header, a separator, a padding byte and packed bits."""

from __future__ import annotations

from collections import Counter
from collections.abc import Mapping

from shrink.huffman.tree import HuffmanLeaf, HuffmanTree, build_tree, symbol_encodings

SEPARATOR = b"\\\n"
_NEWLINE_TOKEN = "\\n"
_FIELD_MARK = "|"


def bits_to_bytes(bits: str) -> bytes:
    """Pack a string of '0'/'1' into bytes, zero-padding on the left."""
    if not bits:
        return b""
    if set(bits) - {"0", "1"}:
        raise ValueError("bit string may only contain '0' and '1'")
    return int(bits, 2).to_bytes((len(bits) + 7) // 8, "big")


def encode_header(symbol_freq: Mapping[str, int]) -> str:
    """Write each symbol as ``<freq>|<symbol>``, a newline as ``<freq>|\\n``."""
    # The field mark as a symbol goes last: the header reader cannot tell a
    # multi-digit frequency from the symbol when the mark is followed by digits.
    entries = sorted(symbol_freq.items(), key=lambda item: item[0] == _FIELD_MARK)
    return "".join(
        f"{freq}|{_NEWLINE_TOKEN if symbol == chr(10) else symbol}" for symbol, freq in entries
    )


def parse_header(header: str) -> dict[str, int]:
    """Read the symbol frequencies back from a header."""
    symbol_freq: dict[str, int] = {}
    for i, char in enumerate(header):
        if char != _FIELD_MARK:
            continue
        if i == 0:
            raise ValueError("header starts with a field mark")
        if header[i - 1] == _FIELD_MARK:
            continue
        start = i - 1
        while (
            start > 0
            and header[start - 1].isdigit()
            and (start == 1 or header[start - 2] != _FIELD_MARK)
        ):
            start -= 1
        try:
            freq = int(header[start:i])
        except ValueError as exc:
            raise ValueError(f"invalid frequency in header: {header[start:i]!r}") from exc
        if i + 1 >= len(header):
            raise ValueError("header field has no symbol")
        if header[i + 1] == "\\" and header[i + 2 : i + 3] == "n":
            symbol_freq["\n"] = freq
        else:
            symbol_freq[header[i + 1]] = freq
    return symbol_freq


def compress(data: bytes) -> bytes:
    """Huffman-compress ``data`` (read as UTF-8 text)."""
    text = data.decode("utf-8", errors="replace")
    symbol_freq = Counter(text)
    tree = build_tree(symbol_freq)
    encodings = symbol_encodings(tree)
    bits = "".join(encodings[symbol] for symbol in text)
    padding = (8 - len(bits) % 8) % 8
    return (
        encode_header(symbol_freq).encode("utf-8")
        + SEPARATOR
        + bytes([padding])
        + bits_to_bytes(bits)
    )


def _decode(tree: HuffmanTree, body: bytes) -> str:
    if isinstance(tree, HuffmanLeaf):
        return tree.symbol
    offset = body[0] if body else 0
    bits = "".join(f"{byte:08b}" for byte in body[1:])[offset:]
    symbols = []
    node: HuffmanTree = tree
    for bit in bits:
        node = node.left if bit == "0" else node.right
        if isinstance(node, HuffmanLeaf):
            symbols.append(node.symbol)
            node = tree
    if node is not tree:
        raise ValueError("compressed data ends in the middle of a code")
    return "".join(symbols)


def decompress(data: bytes) -> bytes:
    """Reverse :func:`compress`."""
    header, separator, body = data.partition(SEPARATOR)
    if not separator:
        raise ValueError("compressed data has no header separator")
    tree = build_tree(parse_header(header.decode("utf-8", errors="replace")))
    return _decode(tree, body).encode("utf-8")