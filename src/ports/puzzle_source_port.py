"""Contract for puzzle-string sources used by the generator."""

from __future__ import annotations

from typing import Any, Callable, Mapping, Protocol, Union, runtime_checkable

from contracts.validator import assert_puzzle_pair


@runtime_checkable
class PuzzleSource(Protocol):
    """Produces ``{"puzzle": str, "solution": str}`` for a difficulty.

    Strings are 81 characters, row-major, digits ``1``-``9`` with ``.`` or
    ``-`` for blanks.
    """

    def get_puzzle(self, difficulty: str) -> Mapping[str, str]:
        ...


SourceLike = Union[PuzzleSource, Callable[[str], Mapping[str, str]]]


def fetch_pair(source: SourceLike, difficulty: str) -> Mapping[str, str]:
    """Call *source* and check the shape of what it returned."""

    handler: Any = getattr(source, "get_puzzle", None)
    if handler is None:
        if not callable(source):
            raise TypeError("source must expose get_puzzle() or be callable")
        handler = source
    return assert_puzzle_pair(handler(difficulty))


__all__ = ["PuzzleSource", "SourceLike", "fetch_pair"]
