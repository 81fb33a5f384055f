"""Block-level deflate/inflate.

``inflate`` is the decompression primitive used by the tailer. It must accept
truncated blocks and hand back whatever output is derivable from them.
``deflate_block`` writes blocks the way bgzip does and is used by the writer
simulator and the test suite.
"""
from __future__ import annotations

import struct
import zlib

from bgzf_core.protocol import (
    BLOCK_MARKER,
    HEADER_LEN,
    MAX_BLOCK_DATA,
    MAX_BLOCK_SIZE,
    TRAILER_FMT,
    TRAILER_LEN,
)

# zlib window bits for a gzip wrapper (handles the FEXTRA field itself)
GZIP_WBITS = 16 + zlib.MAX_WBITS


def inflate(data: bytes) -> tuple[bytes, bool]:
    """Decompress one (possibly truncated) block.

    Returns ``(output, ok)``. ``ok`` is False when the deflate stream did not
    reach its end or zlib rejected the data; ``output`` then holds the part that
    could be recovered. Never raises.
    """
    d = zlib.decompressobj(GZIP_WBITS)
    try:
        out = d.decompress(data)
    except zlib.error:
        return b"", False
    return out, d.eof


def deflate_block(data: bytes, level: int = 6) -> bytes:
    """Compress ``data`` into a single BGZF block."""
    comp = zlib.compressobj(level, zlib.DEFLATED, -zlib.MAX_WBITS)
    cdata = comp.compress(data) + comp.flush()
    bsize = HEADER_LEN + len(cdata) + TRAILER_LEN
    if bsize > MAX_BLOCK_SIZE:
        raise ValueError(f"Block too large: {bsize} bytes for {len(data)} bytes of input")
    header = BLOCK_MARKER + struct.pack("<H", bsize - 1)
    trailer = struct.pack(TRAILER_FMT, zlib.crc32(data) & 0xFFFFFFFF, len(data) & 0xFFFFFFFF)
    return header + cdata + trailer


def deflate_blocks(data: bytes, block_data: int = MAX_BLOCK_DATA, level: int = 6) -> bytes:
    """Split ``data`` into chunks of at most ``block_data`` bytes, one block each."""
    out = bytearray()
    for start in range(0, len(data), block_data):
        out += deflate_block(data[start:start + block_data], level)
    return bytes(out)
