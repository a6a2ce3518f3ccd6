"""Deflate-style block encoding with dynamic Huffman codes (compression only)."""