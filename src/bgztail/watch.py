"""File growth polling."""
from __future__ import annotations

import enum
import os
from pathlib import Path
from typing import NamedTuple

from bgzf_core.protocol import HEADER_LEN


class Change(enum.Enum):
    MISSING = "missing"
    SMALL = "small"
    TRUNCATED = "truncated"
    REPLACED = "replaced"
    GREW = "grew"
    STALLED = "stalled"


class Poll(NamedTuple):
    change: Change
    size: int
    delta: int


class FileWatcher:
    """Stat a path on each poll and classify what happened since the last one.

    The watcher works on the path rather than an open handle so that a file
    replaced by rename, or removed and recreated, is noticed.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self.size = 0
        self.inode: int | None = None

    def forget(self) -> None:
        self.size = 0
        self.inode = None

    def poll(self, cursor: int) -> Poll:
        try:
            st = os.stat(self.path)
        except OSError:
            self.forget()
            return Poll(Change.MISSING, 0, 0)

        replaced = self.inode is not None and st.st_ino != self.inode
        delta = st.st_size - self.size
        self.size, self.inode = st.st_size, st.st_ino

        if replaced:
            return Poll(Change.REPLACED, st.st_size, delta)
        if st.st_size < cursor:
            return Poll(Change.TRUNCATED, st.st_size, delta)
        if st.st_size < HEADER_LEN:
            return Poll(Change.SMALL, st.st_size, delta)
        if delta > 0:
            return Poll(Change.GREW, st.st_size, delta)
        return Poll(Change.STALLED, st.st_size, delta)
