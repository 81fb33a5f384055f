"""Shared fixtures for building BGZF files on disk."""

from __future__ import annotations

import pytest

from bgzf_core.blocks import deflate_block
from bgzf_core.protocol import EOF_BLOCK


def lines(start: int, stop: int) -> bytes:
    return b"".join(b"line %d\n" % i for i in range(start, stop))


@pytest.fixture
def bgzf_file(tmp_path):
    """Factory: write payloads as consecutive blocks, return (path, header offsets)."""

    def make(payloads, eof=True, name="log.gz", level=6):
        path = tmp_path / name
        data = bytearray()
        offsets = []
        for payload in payloads:
            offsets.append(len(data))
            data += deflate_block(payload, level)
        if eof:
            offsets.append(len(data))
            data += EOF_BLOCK
        path.write_bytes(bytes(data))
        return path, offsets

    return make
