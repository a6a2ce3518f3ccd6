"""LZSS decompression of the ``<offset,length>`` text stream."""

from __future__ import annotations

import re
from collections.abc import Sequence

from shrink.lzss.symbols import CLOSING, ESCAPE, OPENING, SEPARATOR, is_conflicting

_NUMBER = re.compile(r"[+-]?[0-9]+")


def _parse_number(field: Sequence[str]) -> int:
    text = "".join(field)
    if not _NUMBER.fullmatch(text):
        raise ValueError(f"invalid number in back reference: {text!r}")
    return int(text)


def count_escapes_in_reverse(content: Sequence[str], end_index: int) -> int:
    """Count the escape characters running backwards from ``end_index``."""
    count = 0
    for i in range(end_index, -1, -1):
        if content[i] != ESCAPE:
            break
        count += 1
    return count


def replace_reference(
    content: Sequence[str], reference_index: int, negative_offset: int, length: int
) -> str:
    """Return the text a reference at ``reference_index`` stands for."""
    start = reference_index - negative_offset
    end = start + length
    if start < 0 or length < 0 or end > len(content):
        raise ValueError(
            f"back reference <{negative_offset},{length}> at {reference_index} is out of range"
        )
    return "".join(content[start:end])


def decode_back_references(content: str) -> str:
    """Expand every unescaped ``<offset,length>`` reference; escapes are kept."""
    output: list[str] = []
    field: list[str] = []
    in_reference = False
    offset = 0
    reference_start = 0
    for i, char in enumerate(content):
        if not in_reference:
            if char == OPENING and count_escapes_in_reverse(content, i - 1) % 2 == 0:
                field = []
                reference_start = len(output)
                in_reference = True
            else:
                output.append(char)
        elif char == SEPARATOR:
            offset = _parse_number(field)
            field = []
        elif char == CLOSING:
            length = _parse_number(field)
            in_reference = False
            output.extend(replace_reference(output, reference_start, offset, length))
        else:
            field.append(char)
    return "".join(output)


def remove_escapes(content: str) -> str:
    """Drop the escape before each marker character; an unescaped marker is an error."""
    cleaned: list[str] = []
    i = len(content) - 1
    while i >= 0:
        char = content[i]
        if is_conflicting(char):
            if i == 0 or content[i - 1] != ESCAPE:
                raise ValueError(
                    "decompression failed due to conflicting literal not escaped "
                    "in the compressed input"
                )
            i -= 1
        cleaned.append(char)
        i -= 1
    return "".join(reversed(cleaned))


def decompress(data: bytes) -> bytes:
    """Reverse :func:`shrink.lzss.encoder.compress`."""
    content = data.decode("utf-8", errors="replace")
    return remove_escapes(decode_back_references(content)).encode("utf-8")