"""Win-count collaborators shared by every game in the suite."""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Dict, Protocol, runtime_checkable

GAME_IDS = ("memory", "tictactoe", "sudoku")


@runtime_checkable
class StatsSink(Protocol):
    """Win counter.  ``record_win`` runs wherever the session's dispatcher puts
    it; with the default inline dispatch it must return quickly."""

    def record_win(self, game_id: str) -> None:
        ...

    def get_stats(self) -> Dict[str, int]:
        ...


def empty_stats() -> Dict[str, int]:
    return {game_id: 0 for game_id in GAME_IDS}


def _check_game_id(game_id: str) -> None:
    if game_id not in GAME_IDS:
        raise ValueError(f"Unknown game id {game_id!r}; expected one of {', '.join(GAME_IDS)}")


class InMemoryStats:
    """Process-local counts, handy for tests and the CLI."""

    def __init__(self) -> None:
        self._counts = empty_stats()

    def record_win(self, game_id: str) -> None:
        _check_game_id(game_id)
        self._counts[game_id] += 1

    def get_stats(self) -> Dict[str, int]:
        return dict(self._counts)

    def reset(self) -> None:
        self._counts = empty_stats()


class JsonFileStats:
    """Counts persisted to a small JSON object on disk.

    A missing or unreadable file reads as all-zero counts.  Writes replace the
    file atomically.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def _read(self) -> Dict[str, int]:
        stats = empty_stats()
        try:
            raw = json.loads(self.path.read_text("utf-8"))
        except (OSError, ValueError):
            return stats
        if isinstance(raw, dict):
            for game_id in GAME_IDS:
                value = raw.get(game_id)
                if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
                    stats[game_id] = value
        return stats

    def _write(self, stats: Dict[str, int]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=".stats-", suffix=".json", dir=self.path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(stats, handle, indent=2, sort_keys=True)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def record_win(self, game_id: str) -> None:
        _check_game_id(game_id)
        stats = self._read()
        stats[game_id] += 1
        self._write(stats)

    def get_stats(self) -> Dict[str, int]:
        return self._read()

    def reset(self) -> None:
        self._write(empty_stats())


__all__ = ["GAME_IDS", "InMemoryStats", "JsonFileStats", "StatsSink", "empty_stats"]
