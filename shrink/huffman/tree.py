"""Huffman tree construction and canonical Huffman code assignment."""

from __future__ import annotations

import heapq
from collections import Counter
from collections.abc import Hashable, Iterator, Mapping, Sequence
from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class HuffmanLeaf:
    """A leaf holding one symbol and its frequency."""

    freq: int
    id: int
    symbol: Hashable


@dataclass(frozen=True)
class HuffmanNode:
    """An inner node joining two subtrees."""

    freq: int
    id: int
    left: "HuffmanTree"
    right: "HuffmanTree"


HuffmanTree = Union[HuffmanLeaf, HuffmanNode]


@dataclass(frozen=True)
class CanonicalHuffmanCode:
    """A canonical code value and its bit length; length 0 means unused."""

    code: int = 0
    length: int = 0


def build_tree(symbol_freq: Mapping[Hashable, int]) -> HuffmanTree:
    """Build a Huffman tree; ties are broken by creation order, leaves by symbol order."""
    if not symbol_freq:
        raise ValueError("cannot build a Huffman tree without symbols")
    heap: list[tuple[int, int, HuffmanTree]] = []
    for ident, symbol in enumerate(sorted(symbol_freq)):
        heap.append((symbol_freq[symbol], ident, HuffmanLeaf(symbol_freq[symbol], ident, symbol)))
    heapq.heapify(heap)
    next_id = len(heap)
    while len(heap) > 1:
        _, _, first = heapq.heappop(heap)
        _, _, second = heapq.heappop(heap)
        node = HuffmanNode(first.freq + second.freq, next_id, first, second)
        heapq.heappush(heap, (node.freq, node.id, node))
        next_id += 1
    return heap[0][2]


def _walk_leaves(tree: HuffmanTree) -> Iterator[tuple[HuffmanLeaf, str]]:
    stack: list[tuple[HuffmanTree, str]] = [(tree, "")]
    while stack:
        node, prefix = stack.pop()
        if isinstance(node, HuffmanLeaf):
            yield node, prefix
        else:
            stack.append((node.right, prefix + "1"))
            stack.append((node.left, prefix + "0"))


def symbol_encodings(tree: HuffmanTree) -> dict[Hashable, str]:
    """Map every symbol to its code as a string of '0' (left) and '1' (right)."""
    return {leaf.symbol: prefix for leaf, prefix in _walk_leaves(tree)}


def build_canonical_huffman_code(
    symbol_freq: Sequence[int], length_limit: int
) -> list[CanonicalHuffmanCode]:
    """Assign canonical codes to symbols 0..n-1.

    Every symbol takes part in the tree, including those with frequency 0.
    Raises ValueError when a code would be longer than ``length_limit``.
    """
    tree = build_tree(dict(enumerate(symbol_freq)))
    lengths = [0] * len(symbol_freq)
    for leaf, prefix in _walk_leaves(tree):
        lengths[leaf.symbol] = len(prefix)
    max_length = max(lengths)
    if max_length > length_limit:
        raise ValueError("tree is longer than limit")

    length_counts = Counter(lengths)
    next_code = [0] * (max_length + 1)
    code = 0
    for bits in range(1, max_length + 1):
        code = (code + length_counts[bits - 1]) << 1
        next_code[bits] = code

    output = [CanonicalHuffmanCode()] * len(symbol_freq)
    for symbol in sorted(range(len(lengths)), key=lambda s: (lengths[s], s)):
        length = lengths[symbol]
        if length == 0:
            continue
        output[symbol] = CanonicalHuffmanCode(next_code[length], length)
        next_code[length] += 1
    return output