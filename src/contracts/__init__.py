"""Error taxonomy and payload contracts of the puzzle engine."""

from __future__ import annotations

from .errors import (
    InvalidPuzzlePayload,
    PuzzleEngineError,
    PuzzleGenerationExhausted,
    ValidationIssue,
)
from .validator import assert_puzzle_pair, validate

__all__ = [
    "InvalidPuzzlePayload",
    "PuzzleEngineError",
    "PuzzleGenerationExhausted",
    "ValidationIssue",
    "assert_puzzle_pair",
    "validate",
]
