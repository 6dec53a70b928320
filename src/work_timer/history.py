"""Newest-first paging over the history list and per-day totals."""

from __future__ import annotations

import math
from dataclasses import dataclass

from .models import HistoryEntry
from .session import SessionStore


@dataclass(frozen=True, slots=True)
class HistoryPage:
    items: list[HistoryEntry]
    index: int
    pages: int
    total: int

    @property
    def has_prev(self) -> bool:
        return self.index > 0

    @property
    def has_next(self) -> bool:
        return self.index < self.pages - 1


def page_count(total: int, page_size: int) -> int:
    return max(1, math.ceil(total / page_size))


class HistoryPager:
    """Track a page index over ``store.history``, clamped to the valid range.

    The index is re-clamped on every read, so mutations of the history made
    through the store (stop, clear_today, clear_all) never leave it dangling.
    """

    def __init__(self, store: SessionStore, page_size: int, index: int = 0) -> None:
        self.store = store
        self.page_size = page_size
        self._index = max(0, index)
        self.clamp()

    @property
    def page_size(self) -> int:
        return self._page_size

    @page_size.setter
    def page_size(self, value: int) -> None:
        if not isinstance(value, int) or isinstance(value, bool) or value < 1:
            raise ValueError(f"page_size must be a positive integer, got {value!r}")
        self._page_size = value

    @property
    def total(self) -> int:
        return len(self.store.history)

    @property
    def pages(self) -> int:
        return page_count(self.total, self.page_size)

    @property
    def index(self) -> int:
        return self.clamp()

    def clamp(self) -> int:
        self._index = max(0, min(self._index, self.pages - 1))
        return self._index

    def go_to(self, index: int) -> int:
        self._index = index
        return self.clamp()

    def next(self) -> bool:
        """Advance one page; returns False at the last page."""
        if self.index >= self.pages - 1:
            return False
        self._index += 1
        return True

    def prev(self) -> bool:
        """Step back one page; returns False at the first page."""
        if self.index <= 0:
            return False
        self._index -= 1
        return True

    def current_page(self) -> HistoryPage:
        index = self.clamp()
        newest_first = list(reversed(self.store.history))
        start = index * self.page_size
        return HistoryPage(
            items=newest_first[start:start + self.page_size],
            index=index,
            pages=self.pages,
            total=len(newest_first),
        )


def daily_total(store: SessionStore, date: str) -> int:
    """Stopped time recorded on ``date`` plus the live session if it belongs there."""
    stopped = sum(entry.total_ms for entry in store.history if entry.date == date)
    live = store.elapsed_ms() if store.current.day == date else 0
    return stopped + live


def today_total(store: SessionStore) -> int:
    return daily_total(store, store.today())
