"""Text renderings of sessions and history for the console and the API."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import tzinfo
from typing import Callable, Iterable, Optional

from .history import HistoryPager, today_total
from .models import HistoryEntry, Interval
from .session import SessionStore
from .timefmt import fmt_day_month_year, fmt_hms, fmt_time, from_iso, human_duration

Translate = Callable[..., str]


@dataclass(frozen=True, slots=True)
class EntrySummary:
    """``display`` may be truncated; ``full`` is the copy/export form."""

    display: str
    full: str


@dataclass(frozen=True, slots=True)
class IntervalRow:
    index: int
    start: str
    end: str
    duration: str
    live: bool

    def render(self) -> str:
        marker = " •" if self.live else ""
        return f"  {self.index:02d}) {self.start}–{self.end}{marker}  {self.duration}"


def _interval_lines(intervals: Iterable[Interval], tz: Optional[tzinfo]) -> list[str]:
    lines = []
    for position, interval in enumerate(intervals, start=1):
        end = interval.end if interval.end is not None else interval.start
        lines.append(
            f"  {position:02d}) {fmt_time(interval.start, tz)}–{fmt_time(end, tz)}"
        )
    return lines


def summary_human(
    entry: HistoryEntry,
    t: Translate,
    limit: int = 5,
    tz: Optional[tzinfo] = None,
) -> EntrySummary:
    start_ms = from_iso(entry.from_iso)
    end_ms = from_iso(entry.to_iso)
    head = (
        t(
            "worked_head",
            {
                "date": fmt_day_month_year(start_ms, tz),
                "total": human_duration(entry.total_ms, t),
                "from": fmt_time(start_ms, tz),
                "to": fmt_time(end_ms, tz),
            },
        )
        + "\n\n"
        + t("intervals_title")
        + "\n"
    )
    lines = _interval_lines(entry.intervals, tz)
    full = head + "\n".join(lines)

    display = full
    if len(lines) > limit:
        rest = len(lines) - limit
        display = head + "\n".join(lines[:limit]) + f"\n\n  {t('more', rest)}"
    return EntrySummary(display=display, full=full)


def summary_string(entry: HistoryEntry, t: Translate, tz: Optional[tzinfo] = None) -> str:
    """Compact single-block summary with an HH:MM:SS total."""
    head = t(
        "worked_head",
        {
            "date": entry.date,
            "total": fmt_hms(entry.total_ms),
            "from": fmt_time(from_iso(entry.from_iso), tz),
            "to": fmt_time(from_iso(entry.to_iso), tz),
        },
    )
    return f"{head}\n{t('intervals_title')}\n" + "\n".join(_interval_lines(entry.intervals, tz))


def interval_rows(
    intervals: Iterable[Interval], now: int, tz: Optional[tzinfo] = None
) -> list[IntervalRow]:
    rows = []
    for position, interval in enumerate(intervals, start=1):
        end = interval.end if interval.end is not None else now
        rows.append(
            IntervalRow(
                index=position,
                start=fmt_time(interval.start, tz),
                end=fmt_time(end, tz),
                duration=fmt_hms(interval.duration_ms(now)),
                live=interval.is_open,
            )
        )
    return rows


class StatusPrinter:
    """Render human-readable status and history in the console."""

    def __init__(self, store: SessionStore, t: Translate, tz: Optional[tzinfo] = None) -> None:
        self.store = store
        self.t = t
        self.tz = tz

    def print_status(self) -> None:
        current = self.store.current
        print(f"{self.t(current.state.value)}  {fmt_hms(self.store.elapsed_ms())}")
        print(f"{self.t('intervals')}: {len(current.intervals)}")
        print(f"{self.t('today')}: {fmt_hms(today_total(self.store))}")
        rows = interval_rows(current.intervals, self.store.clock(), self.tz)
        if rows:
            print()
            for row in rows:
                print(row.render())

    def print_history(self, pager: HistoryPager) -> None:
        page = pager.current_page()
        if not page.total:
            print(self.t("history_empty"))
            return

        print(self.t("history_last", page.total))
        print("-" * 40)
        for entry in page.items:
            start_ms = from_iso(entry.from_iso)
            span = f"{fmt_time(start_ms, self.tz)}–{fmt_time(from_iso(entry.to_iso), self.tz)}"
            print(
                f"  {fmt_day_month_year(start_ms, self.tz)} ({span})  "
                f"{fmt_hms(entry.total_ms)}  [{entry.entry_id}]"
            )
        print(f"{page.index + 1}/{page.pages}")
