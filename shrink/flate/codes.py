"""Deflate alphabets: literal/length, distance and code-length codes with their Huffman tables."""

from __future__ import annotations

import enum
from bisect import bisect_right
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from itertools import groupby

from shrink.huffman.tree import CanonicalHuffmanCode, build_canonical_huffman_code

MAX_BACKWARD_DISTANCE = 32768
MIN_MATCH_LENGTH = 3
MAX_MATCH_LENGTH = 258
END_OF_BLOCK = 256
LIT_LENGTH_SYMBOLS = 286
DISTANCE_SYMBOLS = 30
CODE_LENGTH_SYMBOLS = 19
MAX_CODE_LENGTH = 15
# Code-length code lengths are stored in 3-bit fields.
MAX_CODE_LENGTH_CODE_LENGTH = 7

# Length code -> (extra bits, base length).
_LENGTH_TABLE: dict[int, tuple[int, int]] = {
    257: (0, 3), 258: (0, 4), 259: (0, 5), 260: (0, 6), 261: (0, 7),
    262: (0, 8), 263: (0, 9), 264: (0, 10), 265: (1, 11), 266: (1, 13),
    267: (1, 15), 268: (1, 17), 269: (2, 19), 270: (2, 23), 271: (2, 27),
    272: (2, 31), 273: (3, 35), 274: (3, 43), 275: (3, 51), 276: (3, 59),
    277: (4, 67), 278: (4, 83), 279: (4, 99), 280: (4, 115), 281: (5, 131),
    282: (5, 163), 283: (5, 195), 284: (5, 227), 285: (0, 258),
}
_LENGTH_CODES = sorted(_LENGTH_TABLE)
_LENGTH_BASES = [_LENGTH_TABLE[code][1] for code in _LENGTH_CODES]

# Distance code (index) -> (extra bits, base distance).
_DISTANCE_TABLE: tuple[tuple[int, int], ...] = (
    (0, 1), (0, 2), (0, 3), (0, 4), (1, 5), (1, 7), (2, 9), (2, 13),
    (3, 17), (3, 25), (4, 33), (4, 49), (5, 65), (5, 97), (6, 129),
    (6, 193), (7, 257), (7, 385), (8, 513), (8, 769), (9, 1025),
    (9, 1537), (10, 2049), (10, 3073), (11, 4097), (11, 6145),
    (12, 8193), (12, 12289), (13, 16385), (13, 24577),
)
_DISTANCE_BASES = [base for _, base in _DISTANCE_TABLE]

_RLE_EXTRA_BITS = {16: 2, 17: 3, 18: 7}

CODE_LENGTH_ORDER: tuple[int, ...] = (
    16, 17, 18, 0, 8, 7, 9, 6, 10, 5, 11, 4, 12, 3, 13, 2, 14, 1, 15,
)


class TokenKind(enum.Enum):
    """Whether a token is a literal byte or a back reference."""

    LITERAL = enum.auto()
    MATCH = enum.auto()


@dataclass
class Token:
    """A literal byte or a (length, distance) match, with its codes once encoded."""

    kind: TokenKind
    value: int = 0
    length: int = 0
    distance: int = 0
    distance_code: int = 0
    distance_offset: int = 0
    length_code: int = 0
    length_offset: int = 0


@dataclass(frozen=True)
class CondensedLength:
    """One run-length encoded code-length symbol and its extra-bits value."""

    rle_code: int
    offset: int = 0


def length_extra_bits(code: int) -> int:
    """Number of extra bits that follow a length code."""
    try:
        return _LENGTH_TABLE[code][0]
    except KeyError:
        raise ValueError(f"no such length code: {code}") from None


def distance_extra_bits(code: int) -> int:
    """Number of extra bits that follow a distance code."""
    if not 0 <= code < len(_DISTANCE_TABLE):
        raise ValueError(f"no such distance code: {code}")
    return _DISTANCE_TABLE[code][0]


def rle_extra_bits(code: int) -> int:
    """Number of extra bits that follow a code-length symbol."""
    if not 0 <= code < CODE_LENGTH_SYMBOLS:
        raise ValueError(f"no such code-length symbol: {code}")
    return _RLE_EXTRA_BITS.get(code, 0)


def find_length_boundary(
    items: Iterable[CanonicalHuffmanCode], threshold: int, limit: int
) -> list[int]:
    """Collect code lengths, keeping every entry up to ``threshold`` and non-zero ones after it.

    Raises ValueError when a length exceeds ``limit``.
    """
    lengths = []
    for index, item in enumerate(items):
        if item.length > limit:
            raise ValueError("length is too long for the huffman code")
        if index > threshold and item.length == 0:
            continue
        lengths.append(item.length)
    return lengths


@dataclass
class LitLengthCode:
    """The literal/length alphabet and its Huffman code."""

    lit_length_huffman: list[CanonicalHuffmanCode] = field(default_factory=list)

    def find_code(self, value: int) -> tuple[int, int]:
        """Return ``(length code, offset from its base)`` for a match length."""
        if not MIN_MATCH_LENGTH <= value <= MAX_MATCH_LENGTH:
            raise ValueError("value is out of range to have a match with RFC length code")
        index = bisect_right(_LENGTH_BASES, value) - 1
        return _LENGTH_CODES[index], value - _LENGTH_BASES[index]

    def encode(self, tokens: Sequence[Token]) -> list[int]:
        """Build the Huffman code for ``tokens`` and return its code lengths.

        Sets ``length_code`` and ``length_offset`` on every match token.
        """
        freq = [0] * LIT_LENGTH_SYMBOLS
        for token in tokens:
            if token.kind is TokenKind.LITERAL:
                freq[token.value] += 1
            else:
                token.length_code, token.length_offset = self.find_code(token.length)
                freq[token.length_code] += 1
        freq[END_OF_BLOCK] += 1
        codes = build_canonical_huffman_code(freq, MAX_CODE_LENGTH)
        self.lit_length_huffman = codes
        return find_length_boundary(codes, END_OF_BLOCK, MAX_CODE_LENGTH)


@dataclass
class DistanceCode:
    """The distance alphabet and its Huffman code."""

    distance_huffman: list[CanonicalHuffmanCode] = field(default_factory=list)

    def find_code(self, value: int) -> tuple[int, int]:
        """Return ``(distance code, offset from its base)`` for a match distance."""
        if not 1 <= value <= MAX_BACKWARD_DISTANCE:
            raise ValueError("value is out of range to have a match with RFC distance code")
        index = bisect_right(_DISTANCE_BASES, value) - 1
        return index, value - _DISTANCE_BASES[index]

    def encode(self, tokens: Sequence[Token]) -> list[int]:
        """Build the Huffman code for the match distances and return its code lengths.

        Sets ``distance_code`` and ``distance_offset`` on every match token.
        """
        freq = [0] * DISTANCE_SYMBOLS
        for token in tokens:
            if token.kind is TokenKind.MATCH:
                token.distance_code, token.distance_offset = self.find_code(token.distance)
                freq[token.distance_code] += 1
        codes = build_canonical_huffman_code(freq, MAX_CODE_LENGTH)
        self.distance_huffman = codes
        return find_length_boundary(codes, 0, MAX_CODE_LENGTH)


@dataclass
class CodeLengthCode:
    """Run-length encoding of code lengths and the Huffman code over its symbols."""

    condensed: list[CondensedLength] = field(default_factory=list)
    condensed_huffman: list[CanonicalHuffmanCode] = field(default_factory=list)

    def find_code(self, lengths: Iterable[int]) -> list[CondensedLength]:
        """Run-length encode ``lengths`` with symbols 16, 17 and 18, appending to ``condensed``."""
        out = self.condensed
        for length, run in groupby(lengths):
            if not 0 <= length <= MAX_CODE_LENGTH:
                raise ValueError(f"code length {length} cannot be run-length encoded")
            count = sum(1 for _ in run)
            if length == 0:
                full, rest = divmod(count, 138)
                out.extend([CondensedLength(18, 127)] * full)
                if rest < 3:
                    out.extend([CondensedLength(0, 0)] * rest)
                elif rest < 11:
                    out.append(CondensedLength(17, rest - 3))
                else:
                    out.append(CondensedLength(18, rest - 11))
            else:
                out.append(CondensedLength(length, 0))
                full, rest = divmod(count - 1, 6)
                out.extend([CondensedLength(16, 3)] * full)
                if rest < 3:
                    out.extend([CondensedLength(length, 0)] * rest)
                else:
                    out.append(CondensedLength(16, rest - 3))
        return out

    def encode(self, lengths: Iterable[int]) -> list[int]:
        """Build the code-length Huffman code and return its lengths in transmission order."""
        self.find_code(lengths)
        freq = [0] * CODE_LENGTH_SYMBOLS
        for item in self.condensed:
            freq[item.rle_code] += 1
        codes = build_canonical_huffman_code(freq, MAX_CODE_LENGTH_CODE_LENGTH)
        self.condensed_huffman = list(codes)
        ordered = [codes[symbol] for symbol in CODE_LENGTH_ORDER]
        return find_length_boundary(ordered, 3, MAX_CODE_LENGTH_CODE_LENGTH)