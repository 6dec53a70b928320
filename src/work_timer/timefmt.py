"""Formatting helpers for durations, clock times and calendar dates."""

from __future__ import annotations

import time
from datetime import datetime, timezone, tzinfo
from typing import Callable, Optional

ISO_FMT = "%Y-%m-%dT%H:%M:%S"
DATE_FMT = "%Y-%m-%d"


def now_ms() -> int:
    """Return the current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


def _to_datetime(ms: int, tz: Optional[tzinfo] = None) -> datetime:
    if tz is None:
        # Naive local time, the way the dashboard renders clock times.
        return datetime.fromtimestamp(ms / 1000)
    return datetime.fromtimestamp(ms / 1000, tz=tz)


def fmt_hms(ms: int) -> str:
    """Format a millisecond duration as HH:MM:SS, hours not wrapped at 24."""
    total_seconds = max(0, int(ms)) // 1000
    hours, remainder = divmod(total_seconds, 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def fmt_time(ms: int, tz: Optional[tzinfo] = None) -> str:
    return _to_datetime(ms, tz).strftime("%H:%M")


def fmt_date(ms: int) -> str:
    """Calendar date of the UTC instant, as YYYY-MM-DD."""
    return datetime.fromtimestamp(ms / 1000, tz=timezone.utc).strftime(DATE_FMT)


def fmt_day_month_year(ms: int, tz: Optional[tzinfo] = None) -> str:
    return _to_datetime(ms, tz).strftime("%d.%m.%Y")


def to_iso(ms: int) -> str:
    """ISO-8601 UTC timestamp with millisecond precision, e.g. 2024-01-02T03:04:05.678Z."""
    moment = datetime.fromtimestamp(ms // 1000, tz=timezone.utc)
    return f"{moment.strftime(ISO_FMT)}.{ms % 1000:03d}Z"


def from_iso(value: str) -> int:
    """Parse an ISO-8601 timestamp back into epoch milliseconds."""
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    delta = parsed - datetime(1970, 1, 1, tzinfo=timezone.utc)
    return (delta.days * 86400 + delta.seconds) * 1000 + delta.microseconds // 1000


def human_duration(ms: int, t: Callable[..., str]) -> str:
    """Localized duration such as "1 hour 5 minutes".

    Seconds are only shown when the duration is under a minute.
    """
    total_seconds = max(0, int(ms)) // 1000
    hours, remainder = divmod(total_seconds, 3600)
    minutes, secs = divmod(remainder, 60)

    parts: list[str] = []
    if hours:
        parts.append(t("human_h", hours))
    if minutes:
        parts.append(t("human_m", minutes))
    if not hours and not minutes:
        parts.append(t("human_s", secs))
    return " ".join(parts)
