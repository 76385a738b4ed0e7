# codec.py
# 81-character puzzle strings <-> 9x9 integer grids, plus a boxed text view.

from typing import List, Sequence

from .grid import SIZE

BLANK_SENTINELS = (".", "-")


def decode_grid(s: str) -> List[List[int]]:
    """Decode a row-major puzzle string; anything outside 1..9 becomes 0.

    Short strings are padded with blanks and extra characters are ignored,
    so decoding never raises.
    """
    grid = []
    for r in range(SIZE):
        row = []
        for c in range(SIZE):
            k = r * SIZE + c
            ch = s[k] if k < len(s) else ""
            row.append(int(ch) if ch in "123456789" and ch != "" else 0)
        grid.append(row)
    return grid


def encode_grid(g: Sequence[Sequence[int]], blank: str = ".") -> str:
    return "".join(str(g[r][c]) if g[r][c] else blank for r in range(SIZE) for c in range(SIZE))


def count_clues(g: Sequence[Sequence[int]]) -> int:
    return sum(1 for r in range(SIZE) for c in range(SIZE) if g[r][c])


def format_grid(g: Sequence[Sequence[int]]) -> str:
    lines = []
    for r in range(SIZE):
        if r % 3 == 0:
            lines.append("+-------+-------+-------+")
        row = []
        for c in range(SIZE):
            v = g[r][c]
            row.append(str(v) if v else ".")
            if c % 3 == 2:
                row.append("|")
        lines.append("| " + " ".join(row[:-1]) + " |")
    lines.append("+-------+-------+-------+")
    return "\n".join(lines)


__all__ = ["BLANK_SENTINELS", "count_clues", "decode_grid", "encode_grid", "format_grid"]
