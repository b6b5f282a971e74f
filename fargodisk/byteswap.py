"""Reverse the byte order of every 8-byte word of a file of doubles."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Sequence

import numpy as np


def swap_doubles(data: bytes) -> bytes:
    """Reverse each complete 8-byte group; trailing bytes are kept as they are."""
    whole = len(data) // 8 * 8
    words = np.frombuffer(data[:whole], dtype=np.uint8).reshape(-1, 8)
    return words[:, ::-1].tobytes() + bytes(data[whole:])


def swap_file(path: str | Path) -> None:
    """Swap the byte order of the doubles in ``path``, rewriting it in place."""
    target = Path(path)
    target.write_bytes(swap_doubles(target.read_bytes()))


def main(argv: Sequence[str] | None = None) -> int:
    """Command-line entry point: swap one file given by name."""
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) != 1:
        print("Usage : byteswap filename", file=sys.stderr)
        return 1
    try:
        swap_file(args[0])
    except OSError:
        print(f"Can't open {args[0]}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())