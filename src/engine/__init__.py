"""Sudoku puzzle engine: grid, validation, generation and play sessions."""

from __future__ import annotations

from .events import GameOver, MistakeOccurred, PuzzleSolved, SessionState, SolutionRevealed
from .generator import Difficulty, GeneratedPuzzle, generate
from .grid import Cell, Grid
from .session import GameTable, Session, format_time, new_game
from .validator import find_violations, is_complete_valid_solution
from .win_reporter import WinReporter

__all__ = [
    "Cell",
    "Difficulty",
    "GameOver",
    "GameTable",
    "GeneratedPuzzle",
    "Grid",
    "MistakeOccurred",
    "PuzzleSolved",
    "Session",
    "SessionState",
    "SolutionRevealed",
    "WinReporter",
    "find_violations",
    "format_time",
    "generate",
    "is_complete_valid_solution",
    "new_game",
]
