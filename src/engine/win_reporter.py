"""Single-shot win notification to the stats collaborator."""

from __future__ import annotations

from typing import Callable, Optional

from ports.stats_port import StatsSink

from . import log

Dispatch = Callable[[Callable[[], None]], None]


def call_inline(job: Callable[[], None]) -> None:
    job()


class WinReporter:
    """Reports at most one win per session.

    The sink call is advisory: any exception it raises is logged and dropped,
    and the reporter still counts as having fired.  ``dispatch`` decides where
    the call runs; the default runs it inline, so sinks used that way must
    return quickly.  Pass e.g. an executor's ``submit`` to keep slow sinks off
    the input path.
    """

    def __init__(
        self,
        sink: Optional[StatsSink],
        game_id: str = "sudoku",
        dispatch: Optional[Dispatch] = None,
    ) -> None:
        self._sink = sink
        self.game_id = game_id
        self._dispatch = dispatch or call_inline
        self._fired = False

    @property
    def fired(self) -> bool:
        return self._fired

    def notify_win(self) -> bool:
        """Send the win; returns ``False`` if this reporter already fired."""
        if self._fired:
            return False
        self._fired = True
        if self._sink is None:
            return True
        try:
            self._dispatch(self._send)
        except Exception as exc:  # a dispatcher that refuses work is a sink failure too
            self._report_failure(exc)
        return True

    def _send(self) -> None:
        try:
            self._sink.record_win(self.game_id)
        except Exception as exc:  # sink failures never reach game state
            self._report_failure(exc)

    def _report_failure(self, exc: Exception) -> None:
        log.append_event({
            "type": "sudoku.win_report_failed.v1",
            "game_id": self.game_id,
            "error": repr(exc),
        })


__all__ = ["Dispatch", "WinReporter", "call_inline"]
