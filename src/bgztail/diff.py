def common_prefix_len(a: bytes, b: bytes) -> int:
    """Index of the first differing byte, or the shorter length if one is a prefix."""
    n = min(len(a), len(b))
    if a[:n] == b[:n]:
        return n
    # Bisect on slice equality: a[:lo] == b[:lo] and a[:hi] != b[:hi].
    lo, hi = 0, n
    while hi - lo > 1:
        mid = (lo + hi) // 2
        if a[lo:mid] == b[lo:mid]:
            lo = mid
        else:
            hi = mid
    return lo
