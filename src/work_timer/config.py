"""Configuration models and helpers for the work timer."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class TimerSettings:
    """Presentation policy for history paging and summaries."""

    # Narrow views list several entries; the wide layout shows one at a time.
    page_size: int = 4
    wide_page_size: int = 1
    interval_display_limit: int = 5
    # None defers to the language stored by a previous `lang` command.
    language: str | None = None

    def __post_init__(self) -> None:
        for name in ("page_size", "wide_page_size", "interval_display_limit"):
            value = getattr(self, name)
            if value < 1:
                raise ValueError(f"{name} must be at least 1, got {value}")

    @classmethod
    def from_options(
        cls,
        page_size: int | None = None,
        wide: bool = False,
        interval_limit: int | None = None,
        language: str | None = None,
    ) -> "TimerSettings":
        defaults = cls()
        if page_size is None:
            page_size = defaults.wide_page_size if wide else defaults.page_size
        return cls(
            page_size=page_size,
            interval_display_limit=(
                interval_limit if interval_limit is not None else defaults.interval_display_limit
            ),
            language=language,
        )
