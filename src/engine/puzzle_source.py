# puzzle_source.py
# In-repo puzzle-string source: build a full solution, then remove clues in
# symmetric pairs while the puzzle keeps a unique solution.

from typing import Dict, List, Optional, Tuple

import random
import time

from project_config import get_section

from .codec import encode_grid

DEFAULT_FULL_SOLUTION_TIME_LIMIT = float(get_section("puzzle_source.full_solution.time_limit", 1.5))
DEFAULT_REDUCE_TIME_BUDGET = float(get_section("puzzle_source.reduce.time_budget", 4.0))
DEFAULT_CLUES = {"easy": 40, "medium": 30, "hard": 25}


def clue_target(difficulty: str) -> int:
    """Prefilled clue count for *difficulty* (more clues is easier)."""
    clues = get_section("generator.clues", DEFAULT_CLUES)
    if difficulty not in DEFAULT_CLUES:
        raise ValueError(f"Unknown difficulty {difficulty!r}")
    return int(clues.get(difficulty, DEFAULT_CLUES[difficulty]))


def grid_copy(g: List[List[int]]) -> List[List[int]]:
    return [row[:] for row in g]

# ---------- Full solution ----------


def generate_full_solution(rng: random.Random, time_limit: float = DEFAULT_FULL_SOLUTION_TIME_LIMIT) -> List[List[int]]:
    start = time.monotonic()

    # candidates as a bitmask, digit d -> bit d-1
    FULL = (1 << 9) - 1

    grid = [[0]*9 for _ in range(9)]
    row_mask = [0]*9
    col_mask = [0]*9
    box_mask = [0]*9

    def bidx(r, c): return (r//3)*3 + c//3

    def cand_mask(r, c):
        used = row_mask[r] | col_mask[c] | box_mask[bidx(r, c)]
        return FULL & ~used

    def bits_to_list(bits):
        return [d for d in range(1, 10) if bits & (1 << (d-1))]

    # MRV: empty cell with the fewest candidates
    def select_cell():
        best = None
        best_count = 10
        rows = list(range(9)); cols = list(range(9))
        rng.shuffle(rows); rng.shuffle(cols)
        for r in rows:
            for c in cols:
                if grid[r][c] == 0:
                    m = cand_mask(r, c)
                    k = bin(m).count("1")
                    if k == 0:
                        return (r, c, 0)  # dead end
                    if k < best_count:
                        best = (r, c, m)
                        best_count = k
                        if k == 1:
                            return best
        return best

    def place(r, c, d):
        bit = 1 << (d-1)
        grid[r][c] = d
        row_mask[r] |= bit
        col_mask[c] |= bit
        box_mask[bidx(r, c)] |= bit

    def unplace(r, c, d):
        bit = 1 << (d-1)
        grid[r][c] = 0
        row_mask[r] &= ~bit
        col_mask[c] &= ~bit
        box_mask[bidx(r, c)] &= ~bit

    def solve():
        if time.monotonic() - start > time_limit:
            return False
        cell = select_cell()
        if cell is None:
            return True
        r, c, m = cell
        if m == 0:
            return False
        cand = bits_to_list(m)
        rng.shuffle(cand)
        for d in cand:
            place(r, c, d)
            if solve():
                return True
            unplace(r, c, d)
        return False

    if solve():
        return grid

    # Out of time: shuffled Latin pattern (still a valid grid).
    base = [[((r*3 + r//3 + c) % 9) + 1 for c in range(9)] for r in range(9)]

    bands = [0, 3, 6]; rng.shuffle(bands)
    rows = [b + i for b in bands for i in rng.sample(range(3), 3)]
    stacks = [0, 3, 6]; rng.shuffle(stacks)
    cols = [s + i for s in stacks for i in rng.sample(range(3), 3)]
    digits = list(range(1, 10)); rng.shuffle(digits)
    return [[digits[base[r][c] - 1] for c in cols] for r in rows]

# ---------- Uniqueness checker (count up to 2) ----------


def has_unique_solution(puzzle: List[List[int]], limit: int = 2) -> bool:
    rows_used = [set() for _ in range(9)]
    cols_used = [set() for _ in range(9)]
    boxes_used = [set() for _ in range(9)]
    g = grid_copy(puzzle)

    def box_idx(r, c): return (r//3)*3 + (c//3)

    empties = []
    for r in range(9):
        for c in range(9):
            v = g[r][c]
            if v == 0:
                empties.append((r, c))
            else:
                bi = box_idx(r, c)
                if v in rows_used[r] or v in cols_used[c] or v in boxes_used[bi]:
                    return False
                rows_used[r].add(v); cols_used[c].add(v); boxes_used[bi].add(v)

    def candidates(r, c):
        bi = box_idx(r, c)
        return [d for d in range(1, 10) if d not in rows_used[r] and d not in cols_used[c] and d not in boxes_used[bi]]

    solutions = 0

    def backtrack(remaining: List[Tuple[int, int]]) -> bool:
        nonlocal solutions
        if not remaining:
            solutions += 1
            return solutions >= limit
        # pick the most constrained remaining cell each step
        best_i, best_cand = 0, None
        for i, (r, c) in enumerate(remaining):
            cand = candidates(r, c)
            if best_cand is None or len(cand) < len(best_cand):
                best_i, best_cand = i, cand
                if len(cand) <= 1:
                    break
        if not best_cand:
            return False
        r, c = remaining[best_i]
        rest = remaining[:best_i] + remaining[best_i+1:]
        bi = box_idx(r, c)
        for d in best_cand:
            rows_used[r].add(d); cols_used[c].add(d); boxes_used[bi].add(d)
            stop = backtrack(rest)
            rows_used[r].remove(d); cols_used[c].remove(d); boxes_used[bi].remove(d)
            if stop:
                return True
        return False

    backtrack(empties)
    return solutions == 1

# ---------- Reducer ----------


def symmetric_pairs() -> List[Tuple[Tuple[int, int], Tuple[int, int]]]:
    pairs = []
    for r in range(9):
        for c in range(9):
            r2, c2 = 8 - r, 8 - c
            if (r, c) <= (r2, c2):
                pairs.append(((r, c), (r2, c2)))
    return pairs


def reduce_to_target(
    solution: List[List[int]],
    target_clues: int,
    rng: random.Random,
    time_budget: float = DEFAULT_REDUCE_TIME_BUDGET,
) -> List[List[int]]:
    """Blank symmetric pairs while uniqueness holds, down to *target_clues*."""
    puzzle = grid_copy(solution)
    pairs = symmetric_pairs()
    rng.shuffle(pairs)
    clues = 81
    t0 = time.monotonic()

    for ((r1, c1), (r2, c2)) in pairs:
        if clues <= target_clues or time.monotonic() - t0 > time_budget:
            break
        removed = 1 if (r1, c1) == (r2, c2) else 2
        if clues - removed < target_clues:
            continue

        saved1, saved2 = puzzle[r1][c1], puzzle[r2][c2]
        puzzle[r1][c1] = 0
        puzzle[r2][c2] = 0
        if has_unique_solution(puzzle):
            clues -= removed
        else:
            puzzle[r1][c1], puzzle[r2][c2] = saved1, saved2

    return puzzle

# ---------- Source ----------


class LocalPuzzleSource:
    """Puzzle-string source that needs no network or third-party generator."""

    def __init__(self, seed: Optional[int] = None) -> None:
        self._rng = random.Random(seed)

    def get_puzzle(self, difficulty: str) -> Dict[str, str]:
        target = clue_target(difficulty)
        solution = generate_full_solution(self._rng)
        puzzle = reduce_to_target(solution, target, self._rng)
        return {
            "puzzle": encode_grid(puzzle, blank="."),
            "solution": encode_grid(solution),
        }


__all__ = [
    "LocalPuzzleSource",
    "clue_target",
    "generate_full_solution",
    "has_unique_solution",
    "reduce_to_target",
    "symmetric_pairs",
]
