from __future__ import annotations


def _count_lines(text: bytes) -> int:
    n = text.count(b"\n")
    if text and not text.endswith(b"\n"):
        n += 1  # pending partial line
    return n


def window_lines(text: bytes, remaining: int | None) -> tuple[bytes, int | None]:
    """Bound output to the last ``remaining`` lines.

    Returns the bytes to emit and the new counter. ``None`` means unlimited:
    once the requested lines have been shown everything passes through.
    """
    if remaining is None:
        return text, None
    if remaining == 0:
        return b"", None

    count = _count_lines(text)
    if count < remaining:
        return text, remaining - count

    pos = 0
    for _ in range(count - remaining):
        pos = text.index(b"\n", pos) + 1
    return text[pos:], None
