"""Domain models for tracked work time."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional


class SessionState(str, Enum):
    """Lifecycle state of the live session."""

    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    # Only found in legacy persisted data; starts a new session like IDLE.
    STOPPED = "stopped"

    @property
    def is_active(self) -> bool:
        return self in (SessionState.RUNNING, SessionState.PAUSED)


@dataclass(frozen=True, slots=True)
class Interval:
    """A contiguous span of work in epoch milliseconds.

    ``end`` is ``None`` while the span is still running.
    """

    start: int
    end: Optional[int] = None

    @property
    def is_open(self) -> bool:
        return self.end is None

    def duration_ms(self, now: int) -> int:
        return (self.end if self.end is not None else now) - self.start

    def closed_at(self, now: int) -> "Interval":
        return Interval(start=self.start, end=now)


def sum_intervals(intervals: Iterable[Interval], now: int) -> int:
    """Total milliseconds covered by ``intervals``, open ones ending at ``now``."""
    return sum(interval.duration_ms(now) for interval in intervals)


@dataclass(slots=True)
class Session:
    """The current, possibly in-progress, sequence of intervals."""

    state: SessionState = SessionState.IDLE
    started_at: Optional[int] = None
    day: Optional[str] = None
    intervals: list[Interval] = field(default_factory=list)

    @classmethod
    def idle(cls) -> "Session":
        return cls()

    @property
    def last_interval(self) -> Optional[Interval]:
        return self.intervals[-1] if self.intervals else None

    def is_consistent(self) -> bool:
        """Check the interval invariant for the current state."""
        open_count = sum(1 for interval in self.intervals if interval.is_open)
        if self.state is SessionState.RUNNING:
            last = self.last_interval
            return last is not None and last.is_open and open_count == 1
        if self.state is SessionState.PAUSED:
            return bool(self.intervals) and open_count == 0
        if self.state is SessionState.IDLE:
            return open_count == 0
        # Legacy stopped records may still hold their trailing open interval.
        return open_count == 0 or (open_count == 1 and self.last_interval.is_open)


@dataclass(frozen=True, slots=True)
class HistoryEntry:
    """An immutable record of one stopped session.

    ``from_iso`` doubles as the entry's identifier.
    """

    date: str
    total_ms: int
    from_iso: str
    to_iso: str
    intervals: tuple[Interval, ...] = ()

    @property
    def entry_id(self) -> str:
        return self.from_iso
