import random

import pytest

from bgzf_core.protocol import SCAN_WINDOW
from bgztail.engine import find_last_header, iter_blocks, walk_headers
from bgztail.errors import FormatError
from bgztail.locate import locate_header


def _random_payloads(count, seed, lo=50, hi=5000):
    rng = random.Random(seed)
    # Mix compressible text with random bytes so block sizes vary.
    payloads = []
    for i in range(count):
        n = rng.randint(lo, hi)
        if i % 2:
            payloads.append(rng.randbytes(n))
        else:
            payloads.append(b"row %d\n" % i * (n // 8 + 1))
    return payloads


@pytest.mark.parametrize("count", [1, 5, 1000])
def test_find_last_header(bgzf_file, count):
    path, offsets = bgzf_file(_random_payloads(count, seed=count), eof=False)
    size = path.stat().st_size
    assert size % SCAN_WINDOW != 0

    with open(path, "rb") as f:
        located = locate_header(f, size)
        scan = find_last_header(f, size)

    assert located in offsets
    assert located <= offsets[-1]
    assert scan.last == offsets[-1]
    assert scan.prev == (offsets[-2] if count > 1 else None)
    assert not scan.last_is_eof


@pytest.mark.parametrize("count", [1, 5, 1000])
def test_find_last_header_with_eof_marker(bgzf_file, count):
    path, offsets = bgzf_file(_random_payloads(count, seed=count + 7), eof=True)
    size = path.stat().st_size

    with open(path, "rb") as f:
        scan = find_last_header(f, size)

    assert scan.last == offsets[-1]
    assert scan.prev == offsets[-2]
    assert scan.last_is_eof


def test_blocks_larger_than_scan_window(bgzf_file):
    rng = random.Random(3)
    path, offsets = bgzf_file([rng.randbytes(60_000) for _ in range(4)], eof=False)
    size = path.stat().st_size
    assert size - offsets[-1] > SCAN_WINDOW

    with open(path, "rb") as f:
        assert locate_header(f, size) == offsets[-1]
        assert find_last_header(f, size).last == offsets[-1]


def test_locate_before_end(bgzf_file):
    path, offsets = bgzf_file(_random_payloads(200, seed=11), eof=True)
    size = path.stat().st_size

    with open(path, "rb") as f:
        for k in (1, 50, 199):
            found = locate_header(f, size, end=offsets[k])
            assert found in offsets
            assert found < offsets[k]
            assert offsets[k] - found <= 2 * SCAN_WINDOW


def test_walk_headers_from_located_offset_ignores_torn_tail(bgzf_file):
    path, offsets = bgzf_file(_random_payloads(20, seed=5), eof=False)
    data = path.read_bytes()
    torn = len(data) - 10
    path.write_bytes(data[:torn])

    with open(path, "rb") as f:
        scan = walk_headers(f, locate_header(f, torn), torn)
        blocks = list(iter_blocks(f, offsets[-2], torn))

    assert scan.last == offsets[-1]
    assert [off for off, _ in blocks] == offsets[-2:]
    assert len(blocks[-1][1]) == torn - offsets[-1]


def test_not_bgzf_is_rejected(tmp_path):
    path = tmp_path / "plain.gz"
    path.write_bytes(b"\x1f\x8b\x08\x00" + b"\x00" * 200_000)
    with open(path, "rb") as f:
        with pytest.raises(FormatError):
            locate_header(f, path.stat().st_size)


def test_bad_header_mid_walk_is_fatal(bgzf_file):
    path, offsets = bgzf_file([b"a\n" * 100, b"b\n" * 100, b"c\n" * 100], eof=False)
    data = bytearray(path.read_bytes())
    data[offsets[1] + 13] ^= 0x01
    path.write_bytes(bytes(data))

    with open(path, "rb") as f:
        with pytest.raises(FormatError):
            walk_headers(f, 0, len(data))
