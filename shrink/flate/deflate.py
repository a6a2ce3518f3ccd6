"""Deflate-style block writer: LZ77 tokens coded with dynamic Huffman tables."""

from __future__ import annotations

from collections.abc import Iterable

from shrink.flate.codes import (
    END_OF_BLOCK,
    MAX_BACKWARD_DISTANCE,
    MAX_MATCH_LENGTH,
    MIN_MATCH_LENGTH,
    CodeLengthCode,
    DistanceCode,
    LitLengthCode,
    Token,
    TokenKind,
    distance_extra_bits,
    length_extra_bits,
    rle_extra_bits,
)
from shrink.lzss.encoder import find_matches
from shrink.lzss.symbols import Reference


class BitWriter:
    """Collects bit fields least significant bit first and packs them into bytes."""

    def __init__(self) -> None:
        self._output = bytearray()
        self._holder = 0
        self._count = 0

    def write(self, value: int, nbits: int) -> None:
        """Append the low ``nbits`` bits of ``value``."""
        if nbits < 0:
            raise ValueError("number of bits cannot be negative")
        if nbits == 0:
            return
        self._holder |= (value & ((1 << nbits) - 1)) << self._count
        self._count += nbits
        while self._count >= 8:
            self._output.append(self._holder & 0xFF)
            self._holder >>= 8
            self._count -= 8

    def flush_align(self) -> None:
        """Pad with zero bits up to the next byte boundary."""
        if self._count > 0:
            self.write(0, 8 - self._count)

    def getvalue(self) -> bytes:
        """Return the complete bytes written so far."""
        return bytes(self._output)


def tokenise(references: Iterable[Reference]) -> list[Token]:
    """Turn per-position references into literal and match tokens.

    Positions covered by a match are skipped. References shorter than the
    minimum match length become literals, one token per UTF-8 byte.
    """
    tokens: list[Token] = []
    to_skip = 0
    for ref in references:
        if to_skip > 0:
            to_skip -= 1
        elif not ref.is_ref or ref.size < MIN_MATCH_LENGTH:
            tokens.extend(
                Token(TokenKind.LITERAL, value=byte) for byte in ref.value[0].encode("utf-8")
            )
        else:
            if ref.size > ref.negative_offset:
                raise ValueError("token match overlapping with the reference")
            if ref.size > MAX_MATCH_LENGTH:
                raise ValueError(f"token match cannot be longer than {MAX_MATCH_LENGTH}")
            if ref.negative_offset > MAX_BACKWARD_DISTANCE:
                raise ValueError(
                    f"token match cannot be farther backward than {MAX_BACKWARD_DISTANCE}"
                )
            to_skip = ref.size - 1
            tokens.append(Token(TokenKind.MATCH, length=ref.size, distance=ref.negative_offset))
    return tokens


def compress(data: bytes, btype: int, bfinal: int) -> bytes:
    """Compress ``data`` (read as UTF-8 text) into a single dynamic-Huffman block."""
    if bfinal not in (0, 1):
        raise ValueError("bfinal must be 0 or 1")
    if not 0 <= btype <= 3:
        raise ValueError("btype must be between 0 and 3")

    content = data.decode("utf-8", errors="replace")
    tokens = tokenise(find_matches(content, MAX_BACKWARD_DISTANCE, MAX_MATCH_LENGTH))

    lit_length_code = LitLengthCode()
    lit_length_lengths = lit_length_code.encode(tokens)
    distance_code = DistanceCode()
    distance_lengths = distance_code.encode(tokens)
    code_length_code = CodeLengthCode()
    code_length_lengths = code_length_code.encode(lit_length_lengths + distance_lengths)

    writer = BitWriter()
    writer.write(bfinal, 1)
    writer.write(btype, 2)
    writer.write(len(lit_length_lengths) - 257, 5)
    writer.write(len(distance_lengths) - 1, 5)
    writer.write(len(code_length_lengths) - 4, 4)
    for length in code_length_lengths:
        writer.write(length, 3)

    for item in code_length_code.condensed:
        code = code_length_code.condensed_huffman[item.rle_code]
        writer.write(code.code, code.length)
        extra = rle_extra_bits(item.rle_code)
        if extra:
            writer.write(item.offset, extra)

    lit_table = lit_length_code.lit_length_huffman
    dist_table = distance_code.distance_huffman
    for token in tokens:
        if token.kind is TokenKind.LITERAL:
            code = lit_table[token.value]
            writer.write(code.code, code.length)
            continue
        code = lit_table[token.length_code]
        writer.write(code.code, code.length)
        extra = length_extra_bits(token.length_code)
        if extra:
            writer.write(token.length_offset, extra)
        code = dist_table[token.distance_code]
        writer.write(code.code, code.length)
        extra = distance_extra_bits(token.distance_code)
        if extra:
            writer.write(token.distance_offset, extra)

    end = lit_table[END_OF_BLOCK]
    writer.write(end.code, end.length)
    writer.flush_align()
    return writer.getvalue()