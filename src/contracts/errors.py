"""Shared error types for the puzzle engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

SEVERITY_ERROR = "ERROR"


class PuzzleEngineError(RuntimeError):
    """Base class for engine failures."""


class PuzzleGenerationExhausted(PuzzleEngineError):
    """The bundled fallback pool failed validation.

    This is a build-time data defect, never a condition to retry.
    """

    def __init__(self, message: str, issues: List["ValidationIssue"] | None = None) -> None:
        super().__init__(message)
        self.issues = list(issues or [])


class InvalidPuzzlePayload(PuzzleEngineError):
    """A puzzle source returned something other than a puzzle/solution pair."""


@dataclass(frozen=True)
class ValidationIssue:
    """Single finding produced by a schema or pool check."""

    code: str
    msg: str
    path: str
    severity: str


def make_error(code: str, msg: str, path: str) -> ValidationIssue:
    """Construct an error-level :class:`ValidationIssue`."""

    return ValidationIssue(code=code, msg=msg, path=path, severity=SEVERITY_ERROR)


__all__ = [
    "SEVERITY_ERROR",
    "InvalidPuzzlePayload",
    "PuzzleEngineError",
    "PuzzleGenerationExhausted",
    "ValidationIssue",
    "make_error",
]
