"""Huffman, LZSS and deflate-style compression with a command-line front end."""

__version__ = "0.1.0"