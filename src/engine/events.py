"""Events emitted synchronously by a play session."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict, Union


class SessionState(str, Enum):
    PLAYING = "playing"
    SOLVED = "solved"
    GAME_OVER = "game_over"
    REVEALED = "revealed"

    @property
    def is_terminal(self) -> bool:
        return self is not SessionState.PLAYING


@dataclass(frozen=True)
class MistakeOccurred:
    """A digit that disagrees with the solution was entered.

    Display layers show their transient "Incorrect" notice from this and own
    its dismissal.
    """

    row: int
    col: int
    digit: int
    mistake_count: int
    message: str = "Incorrect!"


@dataclass(frozen=True)
class GameOver:
    mistake_count: int
    elapsed_seconds: int


@dataclass(frozen=True)
class PuzzleSolved:
    elapsed_seconds: int


@dataclass(frozen=True)
class SolutionRevealed:
    previous_state: SessionState


Event = Union[MistakeOccurred, GameOver, PuzzleSolved, SolutionRevealed]


def event_to_dict(event: Event) -> Dict[str, Any]:
    payload = asdict(event)
    payload["event"] = type(event).__name__
    for key, value in payload.items():
        if isinstance(value, Enum):
            payload[key] = value.value
    return payload


__all__ = [
    "Event",
    "GameOver",
    "MistakeOccurred",
    "PuzzleSolved",
    "SessionState",
    "SolutionRevealed",
    "event_to_dict",
]
