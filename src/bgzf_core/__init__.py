"""BGZF Core - block layout, header codec and block inflate/deflate."""
from .header import validate, parse
from .blocks import inflate, deflate_block, deflate_blocks
from .protocol import BLOCK_MARKER, EOF_BLOCK, HEADER_LEN, MAX_BLOCK_SIZE, SCAN_WINDOW

__all__ = [
    "validate",
    "parse",
    "inflate",
    "deflate_block",
    "deflate_blocks",
    "BLOCK_MARKER",
    "EOF_BLOCK",
    "HEADER_LEN",
    "MAX_BLOCK_SIZE",
    "SCAN_WINDOW",
]
