"""Tests for summaries, interval rows and the console printer."""

from datetime import timezone

import pytest

from helpers import HOUR, JAN_2_9AM, MINUTE, make_entry
from work_timer.history import HistoryPager
from work_timer.i18n import Translator
from work_timer.models import HistoryEntry, Interval
from work_timer.reporting import StatusPrinter, interval_rows, summary_human, summary_string
from work_timer.timefmt import to_iso

UTC = timezone.utc


@pytest.fixture
def seven_interval_entry() -> HistoryEntry:
    intervals = tuple(
        Interval(JAN_2_9AM + i * 15 * MINUTE, JAN_2_9AM + i * 15 * MINUTE + 10 * MINUTE)
        for i in range(7)
    )
    return HistoryEntry(
        date="2024-01-02",
        total_ms=70 * MINUTE,
        from_iso=to_iso(intervals[0].start),
        to_iso=to_iso(intervals[-1].end),
        intervals=intervals,
    )


def test_summary_human_truncates_display_only(seven_interval_entry) -> None:
    summary = summary_human(seven_interval_entry, Translator("en"), limit=5, tz=UTC)

    head = (
        "02.01.2024 — Worked 1 hour 10 minutes (from 09:00 to 10:40).\n"
        "\n"
        "Intervals:\n"
    )
    rows = [
        "  01) 09:00–09:10",
        "  02) 09:15–09:25",
        "  03) 09:30–09:40",
        "  04) 09:45–09:55",
        "  05) 10:00–10:10",
        "  06) 10:15–10:25",
        "  07) 10:30–10:40",
    ]
    assert summary.full == head + "\n".join(rows)
    assert summary.display == head + "\n".join(rows[:5]) + "\n\n  …2 more"


def test_summary_human_without_truncation_is_identical(seven_interval_entry) -> None:
    summary = summary_human(seven_interval_entry, Translator("en"), limit=7, tz=UTC)

    assert summary.display == summary.full


def test_summary_human_in_ukrainian(seven_interval_entry) -> None:
    summary = summary_human(seven_interval_entry, Translator("uk"), limit=6, tz=UTC)

    assert summary.display.startswith("02.01.2024 — Відпрацьовано 1 год 10 хв (з 09:00 до 10:40).")
    assert summary.display.endswith("…ще 1")


def test_summary_string_uses_clock_total(seven_interval_entry) -> None:
    text = summary_string(seven_interval_entry, Translator("en"), tz=UTC)

    lines = text.split("\n")
    assert lines[0] == "2024-01-02 — Worked 01:10:00 (from 09:00 to 10:40)."
    assert lines[1] == "Intervals:"
    assert len(lines) == 9


def test_interval_rows_mark_live_interval() -> None:
    intervals = [Interval(JAN_2_9AM, JAN_2_9AM + HOUR), Interval(JAN_2_9AM + 2 * HOUR)]
    now = JAN_2_9AM + 2 * HOUR + 90_000

    rows = interval_rows(intervals, now, tz=UTC)

    assert [row.live for row in rows] == [False, True]
    assert rows[0].render() == "  01) 09:00–10:00  01:00:00"
    assert rows[1].render() == "  02) 11:00–11:01 •  00:01:30"


def test_status_printer_outputs_state_and_today(store, clock, capsys) -> None:
    store.start_or_resume()
    clock.advance(5 * MINUTE)

    StatusPrinter(store, Translator("en"), tz=UTC).print_status()

    out = capsys.readouterr().out
    assert "Running  00:05:00" in out
    assert "Intervals: 1" in out
    assert "Today: 00:05:00" in out
    assert "01) 09:00–09:05 •" in out


def test_status_printer_history_page(store, clock, capsys) -> None:
    printer = StatusPrinter(store, Translator("en"), tz=UTC)
    printer.print_history(HistoryPager(store, page_size=2))
    assert capsys.readouterr().out.strip() == "No history yet"

    store.history.extend(make_entry(JAN_2_9AM + i * HOUR, MINUTE) for i in range(3))
    printer.print_history(HistoryPager(store, page_size=2))

    out = capsys.readouterr().out
    assert "History (3)" in out
    assert "02.01.2024 (11:00–11:01)  00:01:00  [2024-01-02T11:00:00.000Z]" in out
    assert "[2024-01-02T09:00:00.000Z]" not in out
    assert out.rstrip().endswith("1/2")
