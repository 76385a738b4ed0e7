"""Collaborator ports: puzzle-string sources and win-count sinks."""

from __future__ import annotations

from .puzzle_source_port import PuzzleSource, fetch_pair
from .stats_port import GAME_IDS, InMemoryStats, JsonFileStats, StatsSink

__all__ = [
    "GAME_IDS",
    "InMemoryStats",
    "JsonFileStats",
    "PuzzleSource",
    "StatsSink",
    "fetch_pair",
]
