"""LZSS compression and decompression with textual back-references."""