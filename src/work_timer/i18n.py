"""Translation dictionaries and the ``t(key, params)`` lookup."""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Union

from .db import KeyValueStore

logger = logging.getLogger(__name__)

LANG_KEY = "worktimer.lang"
DEFAULT_LANG = "en"

Entry = Union[str, Callable[[Any], str]]


def _worked_head_en(p: dict) -> str:
    return f"{p['date']} — Worked {p['total']} (from {p['from']} to {p['to']})."


def _worked_head_uk(p: dict) -> str:
    return f"{p['date']} — Відпрацьовано {p['total']} (з {p['from']} до {p['to']})."


DICTIONARIES: dict[str, dict[str, Entry]] = {
    "en": {
        "idle": "Idle",
        "running": "Running",
        "paused": "Paused",
        "stopped": "Stopped",
        "play": "▶️ Play",
        "pause": "⏸️ Pause",
        "resume": "▶️ Resume",
        "stop": "■ Stop",
        "reset": "↺ Reset",
        "clearToday": "✖️ Clear today",
        "clearAll": "🗑 Clear all",
        "today": "Today",
        "intervals": "Intervals",
        "history_last": lambda n: f"History ({n})",
        "history_empty": "No history yet",
        "prev": "◀️ Prev",
        "next": "Next ▶️",
        "session_summary": "Session summary",
        "copy": "Copy",
        "close": "Close",
        "worked_head": _worked_head_en,
        "intervals_title": "Intervals:",
        "human_h": lambda n: f"{n} hour{'' if n == 1 else 's'}",
        "human_m": lambda n: f"{n} minute{'' if n == 1 else 's'}",
        "human_s": lambda n: f"{n} s",
        "more": lambda n: f"…{n} more",
        "confirm_clear_today": "Clear today's history and reset today's time?",
        "confirm_clear_all": "Delete ALL history and reset current session?",
    },
    "uk": {
        "idle": "Неактивно",
        "running": "Працюю",
        "paused": "Пауза",
        "stopped": "Зупинено",
        "play": "▶️ Старт",
        "pause": "⏸️ Пауза",
        "resume": "▶️ Продовжити",
        "stop": "■ Стоп",
        "reset": "↺ Скинути",
        "clearToday": "✖️ Очистити день",
        "clearAll": "🗑 Очистити все",
        "today": "Сьогодні",
        "intervals": "Інтервали",
        "history_last": lambda n: f"Історія ({n})",
        "history_empty": "Історія порожня",
        "prev": "◀️ Назад",
        "next": "Далі ▶️",
        "session_summary": "Підсумок сесії",
        "copy": "Копіювати",
        "close": "Закрити",
        "worked_head": _worked_head_uk,
        "intervals_title": "Інтервали:",
        "human_h": lambda n: f"{n} год",
        "human_m": lambda n: f"{n} хв",
        "human_s": lambda n: f"{n} с",
        "more": lambda n: f"…ще {n}",
        "confirm_clear_today": "Очистити історію за сьогодні і скинути час?",
        "confirm_clear_all": "Видалити ВСЮ історію та скинути поточну сесію?",
    },
}


def available_languages() -> list[str]:
    return sorted(DICTIONARIES)


class Translator:
    """Look up user-facing text in the active language.

    When a key-value store is given, the chosen language is read from and
    written back to it so it survives restarts.
    """

    def __init__(self, lang: Optional[str] = None, store: Optional[KeyValueStore] = None) -> None:
        self._store = store
        self._subscribers: list[Callable[[str], None]] = []
        if lang is None and store is not None:
            try:
                lang = store.get(LANG_KEY)
            except Exception:
                logger.warning("Failed to read stored language.", exc_info=True)
        self.lang = lang if lang in DICTIONARIES else DEFAULT_LANG

    def t(self, key: str, params: Any = None) -> str:
        value = DICTIONARIES[self.lang].get(key)
        if value is None:
            return key
        if callable(value):
            return value({} if params is None else params)
        return value

    __call__ = t

    def set_lang(self, code: str) -> bool:
        """Switch language; unknown codes are ignored and return False."""
        if code not in DICTIONARIES:
            return False
        self.lang = code
        if self._store is not None:
            try:
                self._store.set(LANG_KEY, code)
            except Exception:
                logger.warning("Failed to persist language '%s'.", code, exc_info=True)
        for callback in list(self._subscribers):
            callback(code)
        return True

    def on_change(self, callback: Callable[[str], None]) -> Callable[[], None]:
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe
