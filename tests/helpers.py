"""Test doubles and builders shared across the test modules."""

from __future__ import annotations

from typing import Optional

from work_timer.models import HistoryEntry, Interval
from work_timer.timefmt import fmt_date, to_iso

# 2024-01-02T09:00:00Z
JAN_2_9AM = 1_704_186_000_000
MINUTE = 60_000
HOUR = 60 * MINUTE
DAY = 24 * HOUR


class FakeClock:
    """Epoch-millisecond clock that only moves when told to."""

    def __init__(self, now: int = JAN_2_9AM) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> int:
        self.now += ms
        return self.now


class FailingStore:
    """Key-value store whose writes (and optionally reads) always fail."""

    def __init__(self, fail_reads: bool = False) -> None:
        self.fail_reads = fail_reads
        self.writes = 0

    def get(self, key: str) -> Optional[str]:
        if self.fail_reads:
            raise OSError("disk unavailable")
        return None

    def set(self, key: str, value: str) -> None:
        self.writes += 1
        raise OSError("quota exceeded")

    def clear(self, key: str) -> None:
        raise OSError("quota exceeded")


def make_entry(start: int, duration: int, date: Optional[str] = None) -> HistoryEntry:
    end = start + duration
    return HistoryEntry(
        date=date or fmt_date(start),
        total_ms=duration,
        from_iso=to_iso(start),
        to_iso=to_iso(end),
        intervals=(Interval(start=start, end=end),),
    )
