import dataclasses

import pytest

from shrink.lzss.symbols import (
    CLOSING,
    ESCAPE,
    OPENING,
    SEPARATOR,
    Reference,
    is_conflicting,
)


@pytest.mark.parametrize("symbol", [OPENING, CLOSING, SEPARATOR, ESCAPE])
def test_markers_are_conflicting(symbol):
    assert is_conflicting(symbol) is True


@pytest.mark.parametrize("symbol", ["a", " ", "\n", "é", "|"])
def test_ordinary_symbols_are_not_conflicting(symbol):
    assert is_conflicting(symbol) is False


def test_reference_defaults_describe_a_literal():
    ref = Reference("x")
    assert ref.is_ref is False
    assert ref.negative_offset == 0
    assert ref.size == 0


def test_reference_equality_by_value():
    assert Reference("ab", True, 4, 2) == Reference("ab", True, 4, 2)
    assert Reference("ab", True, 4, 2) != Reference("ab", True, 3, 2)


def test_reference_is_immutable():
    ref = Reference("ab", True, 4, 2)
    with pytest.raises(dataclasses.FrozenInstanceError):
        ref.size = 3
    assert ref.size == 2
    assert ref == Reference("ab", True, 4, 2)