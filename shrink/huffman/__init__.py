"""Huffman trees, canonical codes and the Huffman file codec."""