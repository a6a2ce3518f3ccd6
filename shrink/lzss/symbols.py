"""Markers of the LZSS text format and the reference record found by the matcher."""

from __future__ import annotations

from dataclasses import dataclass

OPENING = "<"
CLOSING = ">"
SEPARATOR = ","
ESCAPE = "\\"

CONFLICTING_LITERALS = frozenset({OPENING, CLOSING, SEPARATOR, ESCAPE})


@dataclass(frozen=True)
class Reference:
    """The longest earlier match for the text starting at one position.

    ``value`` is the matched text when ``is_ref`` is true, otherwise the single
    character at that position. ``negative_offset`` counts back from the position
    to the start of the match; ``size`` is the length of ``value``.
    """

    value: str
    is_ref: bool = False
    negative_offset: int = 0
    size: int = 0


def is_conflicting(symbol: str) -> bool:
    """Whether ``symbol`` collides with a format marker and must be escaped."""
    return symbol in CONFLICTING_LITERALS