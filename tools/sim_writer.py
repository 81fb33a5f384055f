import json
import os
import random
import time
from datetime import datetime, timedelta, timezone
from pathlib import Path

from bgzf_core.blocks import deflate_block
from bgzf_core.protocol import EOF_BLOCK

LEVELS = ["INFO", "INFO", "INFO", "WARN", "DEBUG"]
EVENTS = ["request", "cache_miss", "cache_hit", "retry", "flush"]


def get_timestamp(start_time: datetime, offset_seconds: float) -> str:
    t = start_time + timedelta(seconds=offset_seconds)
    return t.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def make_lines(count: int, seed: int = 0) -> list[bytes]:
    rng = random.Random(seed)
    start_time = datetime(2026, 1, 1, tzinfo=timezone.utc)
    lines = []
    for i in range(count):
        evt = {
            "seq": i,
            "ts": get_timestamp(start_time, i * 0.25),
            "lvl": rng.choice(LEVELS),
            "evt": rng.choice(EVENTS),
            "latency_ms": round(rng.uniform(0.1, 250.0), 2),
        }
        # Canonical serialization for the log
        line = json.dumps(evt, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
        lines.append(line.encode("utf-8") + b"\n")
    return lines


def write_log(
    out_file: str,
    lines: int = 200,
    per_block: int = 20,
    crash: bool = False,
    eof: bool = True,
    delay: float = 0.0,
) -> Path:
    """Write a BGZF log of JSON lines, ``per_block`` lines to a block.

    ``crash`` tears the last block in half and leaves out the EOF marker, the
    way a writer killed mid-flush leaves its file. ``delay`` sleeps between
    blocks so a follower can watch the file grow.
    """
    out = Path(out_file)
    out.parent.mkdir(parents=True, exist_ok=True)
    payload = make_lines(lines)
    blocks = [
        deflate_block(b"".join(payload[i:i + per_block]))
        for i in range(0, len(payload), per_block)
    ]

    with open(out, "wb") as f:
        for n, block in enumerate(blocks):
            if crash and n == len(blocks) - 1:
                block = block[: len(block) // 2]
            f.write(block)
            f.flush()  # Durability: one block visible at a time
            os.fsync(f.fileno())
            if delay:
                time.sleep(delay)
        if eof and not crash:
            f.write(EOF_BLOCK)

    print(f"GENERATED: {out} ({len(blocks)} blocks, crash={crash})")
    return out


if __name__ == "__main__":
    import sys

    # Usage:
    #   python tools/sim_writer.py OUT_FILE [--lines N] [--per-block K] [--delay S] [--crash] [--no-eof]

    args = [a for a in sys.argv[1:] if a]

    def pop_flag(arg_list: list[str], flag: str) -> tuple[bool, list[str]]:
        """Remove a boolean flag from an argv-style list."""
        if flag in arg_list:
            return True, [a for a in arg_list if a != flag]
        return False, arg_list

    def pop_value(arg_list: list[str], flag: str, default: str) -> tuple[str, list[str]]:
        """Remove ``flag VALUE`` from an argv-style list."""
        if flag not in arg_list:
            return default, arg_list
        i = arg_list.index(flag)
        if i + 1 >= len(arg_list):
            raise SystemExit(f"{flag} requires a value")
        return arg_list[i + 1], arg_list[:i] + arg_list[i + 2:]

    crash, args = pop_flag(args, "--crash")
    no_eof, args = pop_flag(args, "--no-eof")
    n_lines, args = pop_value(args, "--lines", "200")
    per_block, args = pop_value(args, "--per-block", "20")
    delay, args = pop_value(args, "--delay", "0")

    out = args[0] if len(args) > 0 else "simulated.log.gz"
    write_log(out, int(n_lines), int(per_block), crash=crash, eof=not no_eof, delay=float(delay))
