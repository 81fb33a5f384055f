"""Coarse backward scan for a block header near end-of-file."""
from __future__ import annotations

from typing import BinaryIO

from bgzf_core.header import validate
from bgzf_core.protocol import BLOCK_MARKER, HEADER_LEN, SCAN_WINDOW

from .errors import FormatError


def _scan_window(f: BinaryIO, start: int, stop: int, size: int) -> int | None:
    """Return the first header offset in ``[start, stop)``, or None.

    The read extends up to a header's length past ``stop`` so a header that
    begins just before the boundary can still be validated.
    """
    f.seek(start)
    buf = f.read(min(stop - start + HEADER_LEN - 1, size - start))
    lead = BLOCK_MARKER[:2]
    limit = min(stop - start, len(buf) - HEADER_LEN + 1)

    pos = buf.find(lead, 0, limit + 1)
    while 0 <= pos < limit:
        if validate(buf[pos:pos + HEADER_LEN]):
            return start + pos
        pos = buf.find(lead, pos + 1, limit + 1)
    return None


def locate_header(f: BinaryIO, size: int, end: int | None = None) -> int:
    """Find a block header close to (strictly before) ``end``.

    Steps backward one window at a time from ``end`` (default: ``size``) and
    returns the first header found in the most recent window. This is a
    proximity guarantee only: further blocks may follow the returned offset.
    """
    f.seek(0)
    if not validate(f.read(HEADER_LEN)):
        raise FormatError("no block header at offset 0")

    end = size if end is None else min(end, size)
    stop = end
    while True:
        offset = stop - SCAN_WINDOW if stop > SCAN_WINDOW else 0
        found = _scan_window(f, offset, stop, size)
        if found is not None:
            return found
        if offset == 0:
            raise FormatError(f"no block header found before offset {end}")
        stop = offset
