"""Incremental BGZF decompression.

Two layers:

- a bounded forward walk over block headers (``iter_blocks``, ``walk_headers``)
  that turns the locator's proximity guess into the true last header;
- ``TailEngine``, the state machine that follows a possibly growing file and
  emits decompressed output strictly in file order.

The engine never blocks on a read: every read is sized from the budget of
bytes known to exist past the cursor. Suspension happens only through the
``sleep`` hook between polls.
"""
from __future__ import annotations

import enum
import sys
import time
from contextlib import ExitStack
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, Callable, Iterator, NamedTuple
from warnings import warn

from bgzf_core.blocks import inflate
from bgzf_core.header import parse, validate
from bgzf_core.protocol import EOF_BLOCK, HEADER_LEN

from .config import TailConfig
from .diff import common_prefix_len
from .errors import (
    DecodeFailureWarning,
    FormatError,
    NotFoundError,
    TailNotice,
    TruncationWarning,
)
from .locate import locate_header
from .report import report_warnings
from .watch import Change, FileWatcher
from .window import window_lines


class HeaderScan(NamedTuple):
    last: int | None
    prev: int | None
    last_is_eof: bool


def _block_length(header: bytes, offset: int) -> int:
    if not validate(header):
        raise FormatError(f"bad block header at offset {offset}")
    length = parse(header)
    if length < HEADER_LEN:
        raise FormatError(f"block at offset {offset} claims {length} bytes")
    return length


def iter_blocks(f: BinaryIO, start: int, end: int) -> Iterator[tuple[int, bytes]]:
    """Walk blocks forward from ``start``, yielding ``(offset, raw_block)``.

    The last block may be cut short at ``end``.
    """
    pos = start
    while end - pos >= HEADER_LEN:
        f.seek(pos)
        header = f.read(HEADER_LEN)
        length = _block_length(header, pos)
        yield pos, header + f.read(min(length, end - pos) - HEADER_LEN)
        pos += length


def walk_headers(f: BinaryIO, start: int, size: int) -> HeaderScan:
    """Follow headers from ``start`` until less than a header remains."""
    last = prev = None
    last_is_eof = False
    for offset, block in iter_blocks(f, start, size):
        prev, last = last, offset
        last_is_eof = block == EOF_BLOCK
    return HeaderScan(last, prev, last_is_eof)


def find_last_header(f: BinaryIO, size: int) -> HeaderScan:
    return walk_headers(f, locate_header(f, size), size)


class State(enum.Enum):
    EXPECTING_HEADER = "expecting_header"
    ACCUMULATING_PARTIAL = "accumulating_partial"


class Step(enum.Enum):
    PROGRESS = "progress"  # bytes consumed; poll again right away
    WAIT = "wait"  # caught up; sleep the short interval
    WAIT_LONG = "wait_long"  # file absent; sleep the long interval
    DONE = "done"


@dataclass
class Session:
    state: State = State.EXPECTING_HEADER
    cursor: int = 0
    budget: int = 0
    block_remaining: int = 0
    file_size: int = 0
    last_header: int | None = None
    prev_header: int | None = None
    block: bytearray = field(default_factory=bytearray)
    # Decoded output of the current block already handed to the output side
    shown: bytes = b""

    def reset(self) -> None:
        self.state = State.EXPECTING_HEADER
        self.cursor = 0
        self.budget = 0
        self.block_remaining = 0
        self.file_size = 0
        self.last_header = None
        self.prev_header = None
        self.block = bytearray()
        self.shown = b""


class TailEngine:
    """Follow a BGZF file and write its decompressed content to ``out``.

    Use as a context manager; the file handle is released on exit. ``step()``
    runs one poll-and-advance iteration for cooperative callers, ``run()``
    loops it and sleeps through the ``sleep`` hook.
    """

    def __init__(
        self,
        path: Path,
        config: TailConfig,
        out: BinaryIO,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.path = Path(path)
        self.config = config
        self.out = out
        self.sleep = sleep
        self.session = Session()
        self.watcher = FileWatcher(self.path)
        self.remaining = config.tail_lines

        self._stack = ExitStack()
        self._fh: BinaryIO | None = None
        self._started = False
        self._from_zero = False
        self._waiting = False
        self._consumed = 0
        self._pending: bytearray | None = None

    def __enter__(self) -> "TailEngine":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def close(self) -> None:
        self._stack.close()
        self._fh = None

    def run(self) -> None:
        while True:
            step = self.step()
            if step is Step.DONE:
                return
            if step is Step.WAIT:
                self.sleep(self.config.poll_interval)
            elif step is Step.WAIT_LONG:
                self.sleep(self.config.wait_interval)

    def step(self) -> Step:
        s = self.session
        poll = self.watcher.poll(s.cursor)

        if poll.change is Change.MISSING or (self._fh is None and not self._open()):
            if not self.config.follow:
                raise NotFoundError(str(self.path))
            self.close()
            if self._started:
                warn(f"{self.path} disappeared; restarting at offset 0 when it returns", TruncationWarning)
                self._restart()
            if not self._waiting:
                warn(f"waiting for {self.path}", TailNotice)
                self._waiting = True
            return Step.WAIT_LONG
        self._waiting = False

        if poll.change in (Change.TRUNCATED, Change.REPLACED):
            if self._started:
                warn(
                    f"{self.path} {poll.change.value} (size {poll.size}, offset {s.cursor}); "
                    "restarting at offset 0",
                    TruncationWarning,
                )
                self._restart()
            if poll.change is Change.REPLACED:
                self.close()
                if not self._open():
                    return Step.WAIT_LONG if self.config.follow else Step.DONE

        if poll.size < HEADER_LEN:
            return Step.WAIT if self.config.follow else Step.DONE

        if not self._started:
            self._start(poll.size)
        elif poll.size > s.file_size:
            s.budget += poll.size - s.file_size
            s.file_size = poll.size

        consumed = self._consumed
        finished = self._advance()
        self._flush_pending()

        if finished:
            return Step.DONE
        if not self.config.follow:
            if s.state is State.ACCUMULATING_PARTIAL:
                warn(
                    f"incomplete block at offset {s.last_header} "
                    f"({len(s.block)} of {len(s.block) + s.block_remaining} bytes)",
                    TailNotice,
                )
            return Step.DONE
        return Step.PROGRESS if self._consumed != consumed else Step.WAIT

    def _open(self) -> bool:
        try:
            self._fh = self._stack.enter_context(open(self.path, "rb"))
        except OSError:
            return False
        return True

    def _restart(self) -> None:
        self.session.reset()
        self._started = False
        self._from_zero = True
        self._pending = None

    def _start(self, size: int) -> None:
        s = self.session
        self._fh.seek(0)
        if not validate(self._fh.read(HEADER_LEN)):
            raise FormatError(f"{self.path}: no block header at offset 0")

        start = 0
        if self.remaining is not None:
            if not self._from_zero:
                start = self._find_start(size)
            self._pending = bytearray()

        s.reset()
        s.cursor = start
        s.file_size = size
        s.budget = size - start
        self._started = True
        warn(f"starting at offset {start} of {size}", TailNotice)

    def _find_start(self, size: int) -> int:
        """Pick the earliest block needed to show the last ``remaining`` lines.

        Looking back never crosses an EOF marker: the tail comes from the
        stream after the last mid-file marker, which a bounded run from
        offset 0 would not reach.
        """
        f = self._fh
        scan = find_last_header(f, size)
        start = scan.prev if scan.last_is_eof and scan.prev is not None else scan.last

        want = self.remaining
        lines = self._count_newlines(start, size) if want else 0
        # The first line in range may start in an earlier block, so ask for one more.
        while want and lines <= want and start > 0:
            earlier = locate_header(f, size, end=start)
            for offset, block in reversed(list(iter_blocks(f, earlier, start))):
                if block == EOF_BLOCK:
                    return start
                lines += inflate(block)[0].count(b"\n")
                start = offset
        return start

    def _count_newlines(self, begin: int, end: int) -> int:
        return sum(inflate(block)[0].count(b"\n") for _, block in iter_blocks(self._fh, begin, end))

    def _read(self, n: int) -> bytes:
        s = self.session
        self._fh.seek(s.cursor)
        data = self._fh.read(n)
        s.cursor += len(data)
        s.budget -= len(data)
        self._consumed += len(data)
        return data

    def _advance(self) -> bool:
        """Consume the read budget. True when the EOF marker ends a bounded run."""
        s = self.session
        while True:
            if s.state is State.EXPECTING_HEADER:
                if s.budget < HEADER_LEN:
                    return False
                offset = s.cursor
                header = self._read(HEADER_LEN)
                if len(header) < HEADER_LEN:
                    # Shrank under us; the next poll sees the truncation.
                    s.budget = 0
                    return False
                length = _block_length(header, offset)
                s.prev_header, s.last_header = s.last_header, offset
                s.block = bytearray(header)
                s.block_remaining = length - HEADER_LEN
                s.shown = b""
            elif not s.budget:
                return False

            chunk = self._read(min(s.budget, s.block_remaining))
            s.block += chunk
            s.block_remaining -= len(chunk)

            if s.block_remaining:
                s.state = State.ACCUMULATING_PARTIAL
                s.budget = 0
                if not self.config.suppress_incomplete_blocks:
                    out, _ = inflate(bytes(s.block))
                    if len(out) > len(s.shown):
                        self._reconcile(out)
                return False

            s.state = State.EXPECTING_HEADER
            data = bytes(s.block)
            out, ok = inflate(data)
            if ok:
                self._reconcile(out)
            else:
                warn(f"block at offset {s.last_header} failed to decompress", DecodeFailureWarning)
            s.block = bytearray()
            s.shown = b""

            if data == EOF_BLOCK:
                warn(f"EOF marker at offset {s.last_header}", TailNotice)
                if not self.config.follow:
                    return True

    def _reconcile(self, out: bytes) -> None:
        s = self.session
        fresh = out[common_prefix_len(s.shown, out):]
        s.shown = out
        self._emit(fresh)

    def _emit(self, data: bytes) -> None:
        if not data:
            return
        if self._pending is not None:
            self._pending += data
            return
        self._write(data)

    def _flush_pending(self) -> None:
        if self._pending is None:
            return
        data, self._pending = bytes(self._pending), None
        self._write(data)

    def _write(self, data: bytes) -> None:
        if self.remaining is not None:
            data, self.remaining = window_lines(data, self.remaining)
        if data:
            self.out.write(data)
            self.out.flush()


def tail_file(
    path: Path,
    config: TailConfig,
    out: BinaryIO | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> None:
    """Tail ``path`` until logical EOF (bounded) or forever (follow).

    Diagnostics go to stderr, filtered by ``config.verbosity``.
    """
    if out is None:
        out = sys.stdout.buffer
    with report_warnings(config), TailEngine(path, config, out, sleep=sleep) as engine:
        engine.run()
