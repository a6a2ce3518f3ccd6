from fractions import Fraction

import pytest

from shrink.flate.codes import (
    CODE_LENGTH_ORDER,
    CodeLengthCode,
    CondensedLength,
    DistanceCode,
    LitLengthCode,
    Token,
    TokenKind,
    distance_extra_bits,
    find_length_boundary,
    length_extra_bits,
    rle_extra_bits,
)
from shrink.huffman.tree import CanonicalHuffmanCode


def _expand(condensed):
    out = []
    for item in condensed:
        if item.rle_code == 16:
            out.extend([out[-1]] * (item.offset + 3))
        elif item.rle_code == 17:
            out.extend([0] * (item.offset + 3))
        elif item.rle_code == 18:
            out.extend([0] * (item.offset + 11))
        else:
            out.append(item.rle_code)
    return out


def _kraft(lengths):
    return sum(Fraction(1, 2**length) for length in lengths)


def _prefix_free(codes):
    words = sorted(format(c.code, f"0{c.length}b") for c in codes if c.length)
    return all(not b.startswith(a) for a, b in zip(words, words[1:]))


def _tokens():
    return [
        Token(TokenKind.LITERAL, value=ord("a")),
        Token(TokenKind.LITERAL, value=ord("b")),
        Token(TokenKind.MATCH, length=12, distance=6),
    ]


@pytest.mark.parametrize(
    "value, expected",
    [(3, (257, 0)), (10, (264, 0)), (258, (285, 0)), (67, (277, 0))],
)
def test_length_find_code_pinned(value, expected):
    assert LitLengthCode().find_code(value) == expected


def test_length_find_code_covers_all_lengths():
    for value in range(3, 259):
        code, offset = LitLengthCode().find_code(value)
        assert 257 <= code <= 285
        assert 0 <= offset < 2 ** length_extra_bits(code) or (offset == 0)
        assert LitLengthCode().find_code(value - offset) == (code, 0)


@pytest.mark.parametrize("value", [0, 2, 259, 1000])
def test_length_find_code_out_of_range(value):
    with pytest.raises(ValueError):
        LitLengthCode().find_code(value)


@pytest.mark.parametrize("value, expected", [(1, (0, 0)), (4, (3, 0)), (5, (4, 0))])
def test_distance_find_code_pinned(value, expected):
    assert DistanceCode().find_code(value) == expected


def test_distance_find_code_covers_all_distances():
    for value in range(1, 32769):
        code, offset = DistanceCode().find_code(value)
        assert 0 <= code < 30
        assert 0 <= offset < 2 ** distance_extra_bits(code) or offset == 0
        assert DistanceCode().find_code(value - offset) == (code, 0)


@pytest.mark.parametrize("value", [0, -1, 32769])
def test_distance_find_code_out_of_range(value):
    with pytest.raises(ValueError):
        DistanceCode().find_code(value)


def test_extra_bits_tables():
    assert rle_extra_bits(16) == 2
    assert rle_extra_bits(17) == 3
    assert rle_extra_bits(18) == 7
    assert rle_extra_bits(5) == 0
    assert length_extra_bits(285) == 0
    assert distance_extra_bits(29) == 13


@pytest.mark.parametrize("call, code", [(length_extra_bits, 256), (distance_extra_bits, 30), (rle_extra_bits, 19)])
def test_extra_bits_unknown_code(call, code):
    with pytest.raises(ValueError):
        call(code)


def test_find_length_boundary_skips_zeros_after_threshold():
    items = [CanonicalHuffmanCode(0, 2), CanonicalHuffmanCode(0, 0), CanonicalHuffmanCode(1, 1)]
    assert find_length_boundary(items, 0, 15) == [2, 1]
    assert find_length_boundary(items, 1, 15) == [2, 0, 1]


def test_find_length_boundary_limit():
    with pytest.raises(ValueError):
        find_length_boundary([CanonicalHuffmanCode(0, 4)], 0, 3)


def test_lit_length_encode_sets_token_codes():
    tokens = _tokens()
    lengths = LitLengthCode().encode(tokens)
    assert tokens[2].length_code == 265
    assert tokens[2].length_offset == 1
    assert len(lengths) == 286


def test_lit_length_encode_builds_complete_prefix_code():
    code = LitLengthCode()
    lengths = code.encode(_tokens())
    assert _kraft(lengths) == 1
    assert max(lengths) <= 15
    assert _prefix_free(code.lit_length_huffman)
    assert lengths == [c.length for c in code.lit_length_huffman]


def test_lit_length_encode_rejects_long_match():
    with pytest.raises(ValueError):
        LitLengthCode().encode([Token(TokenKind.MATCH, length=300, distance=1)])


def test_distance_encode_sets_token_codes():
    tokens = _tokens()
    code = DistanceCode()
    lengths = code.encode(tokens)
    assert tokens[2].distance_code == 4
    assert tokens[2].distance_offset == 1
    assert len(lengths) == 30
    assert _kraft(lengths) == 1
    assert _prefix_free(code.distance_huffman)


def test_distance_encode_rejects_far_match():
    with pytest.raises(ValueError):
        DistanceCode().encode([Token(TokenKind.MATCH, length=3, distance=40000)])


def test_code_length_find_code_worked_example():
    assert CodeLengthCode().find_code([3] * 8) == [
        CondensedLength(3, 0),
        CondensedLength(16, 3),
        CondensedLength(3, 0),
    ]


def test_code_length_find_code_short_runs_stay_literal():
    assert CodeLengthCode().find_code([5, 5, 5]) == [CondensedLength(5, 0)] * 3


@pytest.mark.parametrize(
    "lengths",
    [
        [0] * 5,
        [0] * 140,
        [0] * 300,
        [0, 0, 4, 4, 4, 4, 4, 4, 4, 4, 4, 4, 4, 4, 1],
        [8] * 144 + [9] * 112 + [7] * 24 + [8] * 8,
        [1, 2, 3, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 2, 2],
        [],
    ],
)
def test_code_length_find_code_round_trip(lengths):
    condensed = CodeLengthCode().find_code(lengths)
    assert _expand(condensed) == lengths
    for item in condensed:
        assert 0 <= item.offset < 2 ** rle_extra_bits(item.rle_code) or item.offset == 0


def test_code_length_find_code_rejects_bad_length():
    with pytest.raises(ValueError):
        CodeLengthCode().find_code([16])


def test_code_length_encode_returns_transmission_order():
    code = CodeLengthCode()
    lengths = code.encode([3] * 8)
    assert lengths == [code.condensed_huffman[symbol].length for symbol in CODE_LENGTH_ORDER]
    assert _kraft(lengths) == 1
    assert max(lengths) <= 7
    assert code.condensed_huffman[3].length <= code.condensed_huffman[0].length
    assert _prefix_free(code.condensed_huffman)