"""LZSS compression into a text stream of literals and ``<offset,length>`` references."""

from __future__ import annotations

from collections.abc import Sequence

from shrink.lzss.symbols import CLOSING, ESCAPE, OPENING, SEPARATOR, Reference, is_conflicting


def find_prefix(pattern: Sequence[str]) -> list[int]:
    """Return the KMP prefix function of ``pattern``."""
    pi = [0] * len(pattern)
    for i in range(1, len(pattern)):
        j = pi[i - 1]
        while j > 0 and pattern[i] != pattern[j]:
            j = pi[j - 1]
        if pattern[i] == pattern[j]:
            j += 1
        pi[i] = j
    return pi


def kmp(search_buffer: Sequence[str], pattern: Sequence[str]) -> tuple[int, int]:
    """Find the longest prefix of ``pattern`` inside ``search_buffer``.

    Returns ``(length, index)``, the earliest position reaching the best length;
    ``(0, 0)`` when not even the first character occurs.
    """
    if not pattern:
        return 0, 0
    pi = find_prefix(pattern)
    best = best_index = k = 0
    for i, char in enumerate(search_buffer):
        while k > 0 and char != pattern[k]:
            k = pi[k - 1]
        if char == pattern[k]:
            k += 1
        if best < k:
            best = k
            best_index = i - k + 1
            if k == len(pattern):
                break
    return best, best_index


def match_search_buffer(search_buffer: str, scan: str, following: str) -> Reference:
    """Match ``scan + following`` against the search buffer.

    Matches shorter than two characters give a literal reference for ``scan``.
    """
    pattern = scan + following
    matched_length, matched_at = kmp(search_buffer, pattern)
    if matched_length > 1:
        return Reference(
            value=pattern[:matched_length],
            is_ref=True,
            negative_offset=len(search_buffer) - matched_at,
            size=matched_length,
        )
    return Reference(value=scan, is_ref=False, size=len(scan))


def find_matches(content: str, match_distance: int, match_length: int) -> list[Reference]:
    """Find the best earlier match for every position of ``content``."""
    references = []
    for i, char in enumerate(content):
        search_start = max(0, i - match_distance)
        next_end = min(len(content), i + match_length)
        references.append(
            match_search_buffer(content[search_start:i], char, content[i + 1 : next_end])
        )
    return references


def escape_conflicting_symbols(content: str) -> str:
    """Put an escape character before every character that is a format marker."""
    return "".join(ESCAPE + char if is_conflicting(char) else char for char in content)


def encode_reference(negative_offset: int, length: int) -> str:
    """Write a back reference as ``<offset,length>``."""
    return f"{OPENING}{negative_offset}{SEPARATOR}{length}{CLOSING}"


def compress(data: bytes, match_distance: int, match_length: int) -> bytes:
    """LZSS-compress ``data`` (read as UTF-8 text).

    The match length never exceeds the match distance. A reference is written
    only where its text is shorter than the characters it replaces.
    """
    content = escape_conflicting_symbols(data.decode("utf-8", errors="replace"))
    match_length = min(match_length, match_distance)
    output: list[str] = []
    to_skip = 0
    for ref in find_matches(content, match_distance, match_length):
        if to_skip > 0:
            to_skip -= 1
        elif ref.is_ref:
            encoding = encode_reference(ref.negative_offset, ref.size)
            if len(encoding) < ref.size:
                output.append(encoding)
                to_skip = ref.size - 1
            else:
                output.append(ref.value[0])
        else:
            output.append(ref.value)
    return "".join(output).encode("utf-8")