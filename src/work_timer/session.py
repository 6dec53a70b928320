"""Session engine: the live session state machine and its history."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from .models import HistoryEntry, Interval, Session, SessionState, sum_intervals
from .storage import SessionRepository, StorageResult
from .timefmt import fmt_date, now_ms, to_iso

logger = logging.getLogger(__name__)

Clock = Callable[[], int]


@dataclass(frozen=True, slots=True)
class ClearResult:
    cleared_date: str


class SessionStore:
    """Own the live ``current`` session and the ``history`` list.

    Every mutating operation persists synchronously through the repository.
    Save failures are logged by the repository and deliberately ignored here:
    the in-memory state stays authoritative until the next reload.
    """

    def __init__(
        self,
        repository: SessionRepository,
        *,
        clock: Clock = now_ms,
        current: Optional[Session] = None,
        history: Optional[list[HistoryEntry]] = None,
    ) -> None:
        self.repository = repository
        self.clock = clock
        self.current = current if current is not None else Session.idle()
        self.history: list[HistoryEntry] = list(history or [])

    @classmethod
    def load(cls, repository: SessionRepository, *, clock: Clock = now_ms) -> "SessionStore":
        current = repository.load_current().value
        history = repository.load_history().value
        store = cls(repository, clock=clock, current=current, history=history)
        logger.debug(
            "Loaded session in state %s with %d history entries.",
            store.current.state.value,
            len(store.history),
        )
        return store

    # -- queries -----------------------------------------------------------

    def today(self) -> str:
        return fmt_date(self.clock())

    def elapsed_ms(self) -> int:
        return sum_intervals(self.current.intervals, self.clock())

    def find_entry(self, entry_id: str) -> Optional[HistoryEntry]:
        for entry in self.history:
            if entry.from_iso == entry_id:
                return entry
        return None

    # -- lifecycle ---------------------------------------------------------

    def start_or_resume(self) -> Session:
        now = self.clock()
        state = self.current.state
        if state in (SessionState.IDLE, SessionState.STOPPED):
            self.current = Session(
                state=SessionState.RUNNING,
                started_at=now,
                day=fmt_date(now),
                intervals=[Interval(start=now)],
            )
            logger.debug("Started new session at %d.", now)
        elif state is SessionState.PAUSED:
            self.current.state = SessionState.RUNNING
            self.current.intervals.append(Interval(start=now))
            logger.debug("Resumed session at %d (interval %d).", now, len(self.current.intervals))
        self._save_current()
        return self.current

    def pause(self) -> Session:
        if self.current.state is not SessionState.RUNNING:
            return self.current
        self._close_last_interval(self.clock())
        self.current.state = SessionState.PAUSED
        logger.debug("Paused session with %d intervals.", len(self.current.intervals))
        self._save_current()
        return self.current

    def stop(self) -> Optional[HistoryEntry]:
        if self.current.state is SessionState.IDLE:
            return None
        if not self.current.intervals:
            logger.debug("Discarding %s session without intervals.", self.current.state.value)
            self._reset_current()
            return None

        now = self.clock()
        # Legacy paused/stopped records may still hold an open interval.
        self._close_last_interval(now)

        intervals = tuple(self.current.intervals)
        first, last = intervals[0], intervals[-1]
        entry = HistoryEntry(
            date=fmt_date(first.start),
            total_ms=sum_intervals(intervals, now),
            from_iso=to_iso(first.start),
            to_iso=to_iso(last.end if last.end is not None else now),
            intervals=intervals,
        )
        self.history.append(entry)
        self._save_history()
        logger.debug("Stopped session %s: %d ms.", entry.from_iso, entry.total_ms)

        self._reset_current()
        return entry

    def reset(self) -> None:
        logger.debug("Reset session (was %s).", self.current.state.value)
        self._reset_current()

    def clear_today(self) -> ClearResult:
        today = self.today()
        kept = [entry for entry in self.history if entry.date != today]
        logger.debug("Clearing %d history entries for %s.", len(self.history) - len(kept), today)
        self.history = kept
        self._save_history()

        # An active session counts as today's even when it started earlier.
        if self.current.day == today or self.current.state.is_active:
            self._reset_current()
        return ClearResult(cleared_date=today)

    def clear_all(self) -> None:
        logger.debug("Clearing all %d history entries.", len(self.history))
        self.history = []
        self._save_history()
        self._reset_current()

    # -- internals ---------------------------------------------------------

    def _close_last_interval(self, now: int) -> None:
        last = self.current.last_interval
        if last is not None and last.is_open:
            self.current.intervals[-1] = last.closed_at(now)

    def _reset_current(self) -> None:
        self.current = Session.idle()
        self._save_current()

    def _save_current(self) -> StorageResult[None]:
        return self.repository.save_current(self.current)

    def _save_history(self) -> StorageResult[None]:
        return self.repository.save_history(self.history)
