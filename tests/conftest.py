from __future__ import annotations

import json

import pytest

import feature_flags
import project_config
from engine import log


@pytest.fixture(autouse=True)
def _isolated_event_log(tmp_path):
    log.configure(tmp_path / "logs")
    project_config.reload()
    feature_flags.reload()
    yield


@pytest.fixture
def logged_events(tmp_path):
    """Return a callable listing the JSONL events written during the test."""

    def read() -> list[dict]:
        events: list[dict] = []
        for path in sorted((tmp_path / "logs").glob("**/*.jsonl")):
            events.extend(json.loads(line) for line in path.read_text("utf-8").splitlines())
        return events

    return read
