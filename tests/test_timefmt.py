"""Tests for the formatting helpers."""

from datetime import timedelta, timezone

import pytest

from helpers import HOUR, JAN_2_9AM, MINUTE
from work_timer.i18n import Translator
from work_timer.timefmt import (
    fmt_date,
    fmt_day_month_year,
    fmt_hms,
    fmt_time,
    from_iso,
    human_duration,
    to_iso,
)


@pytest.mark.parametrize(
    ("ms", "expected"),
    [
        (0, "00:00:00"),
        (999, "00:00:00"),
        (61_000, "00:01:01"),
        (HOUR + 2 * MINUTE + 3_000, "01:02:03"),
        (30 * HOUR, "30:00:00"),
    ],
)
def test_fmt_hms(ms, expected) -> None:
    assert fmt_hms(ms) == expected


def test_fmt_time_and_day_respect_timezone() -> None:
    kyiv = timezone(timedelta(hours=2))

    assert fmt_time(JAN_2_9AM, timezone.utc) == "09:00"
    assert fmt_time(JAN_2_9AM, kyiv) == "11:00"
    assert fmt_day_month_year(JAN_2_9AM + 14 * HOUR, kyiv) == "03.01.2024"


def test_fmt_date_uses_utc_calendar() -> None:
    assert fmt_date(JAN_2_9AM) == "2024-01-02"
    assert fmt_date(JAN_2_9AM + 15 * HOUR) == "2024-01-03"


@pytest.mark.parametrize(
    ("ms", "text"),
    [
        (0, "1970-01-01T00:00:00.000Z"),
        (JAN_2_9AM + 5, "2024-01-02T09:00:00.005Z"),
        (JAN_2_9AM + 61_234, "2024-01-02T09:01:01.234Z"),
    ],
)
def test_iso_conversion(ms, text) -> None:
    assert to_iso(ms) == text
    assert from_iso(text) == ms


def test_from_iso_accepts_offsets() -> None:
    assert from_iso("2024-01-02T11:00:00+02:00") == JAN_2_9AM


@pytest.mark.parametrize(
    ("ms", "expected"),
    [
        (0, "0 s"),
        (45_000, "45 s"),
        (MINUTE, "1 minute"),
        (2 * MINUTE + 59_000, "2 minutes"),
        (HOUR, "1 hour"),
        (2 * HOUR + MINUTE, "2 hours 1 minute"),
    ],
)
def test_human_duration(ms, expected) -> None:
    assert human_duration(ms, Translator("en")) == expected
