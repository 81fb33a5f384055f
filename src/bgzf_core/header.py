"""BGZF block header validation and parsing."""
from __future__ import annotations

import struct

from bgzf_core.protocol import BLOCK_MARKER, HEADER_FMT, HEADER_LEN, MARKER_LEN


def validate(buf: bytes) -> bool:
    """True iff ``buf`` starts with the fixed 16-byte block marker."""
    return len(buf) >= MARKER_LEN and buf[:MARKER_LEN] == BLOCK_MARKER


def parse(buf: bytes) -> int:
    """Return the total block length (header + payload + trailer) from a header."""
    _, bsize = struct.unpack(HEADER_FMT, buf[:HEADER_LEN])
    return bsize + 1
