"""FastAPI application exposing the work timer as a local JSON API."""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, Optional

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from .config import TimerSettings
from .db import SqliteKeyValueStore
from .history import HistoryPager, daily_total, today_total
from .i18n import Translator
from .models import HistoryEntry, Interval, SessionState
from .paths import get_db_path
from .reporting import interval_rows, summary_human
from .session import SessionStore
from .storage import SessionRepository
from .timefmt import fmt_hms, now_ms

logger = logging.getLogger(__name__)


class IntervalPayload(BaseModel):
    start: int
    end: Optional[int] = None
    duration_ms: int


class EntryPayload(BaseModel):
    id: str
    date: str
    total_ms: int
    total: str
    from_iso: str
    to_iso: str
    intervals: list[IntervalPayload]


class StatusPayload(BaseModel):
    state: SessionState
    label: str
    started_at: Optional[int] = None
    day: Optional[str] = None
    elapsed_ms: int
    elapsed: str
    today: str
    today_ms: int
    intervals: list[IntervalPayload]
    interval_rows: list[str]


class HistoryPagePayload(BaseModel):
    title: str
    page: int
    pages: int
    page_size: int
    total: int
    has_prev: bool
    has_next: bool
    items: list[EntryPayload]


class SummaryPayload(BaseModel):
    entry: EntryPayload
    display: str
    full: str


class ClearPayload(BaseModel):
    cleared_date: Optional[str] = None
    history_total: int


class StoreRunner:
    """Serialize access to one ``SessionStore`` across request threads."""

    def __init__(self, store: SessionStore) -> None:
        self._store = store
        self._lock = threading.Lock()

    @contextmanager
    def locked(self) -> Iterator[SessionStore]:
        with self._lock:
            yield self._store


def create_app(
    *,
    db_path: Optional[Path] = None,
    settings: Optional[TimerSettings] = None,
    clock: Callable[[], int] = now_ms,
    store: Optional[SessionStore] = None,
) -> FastAPI:
    """Instantiate the FastAPI application.

    Pass ``store`` to serve an already-built session store (for example one
    backed by memory); otherwise the SQLite database at ``db_path`` is used.
    """
    resolved_settings = settings or TimerSettings()
    if store is None:
        resolved_db_path = Path(db_path or get_db_path())
        resolved_db_path.parent.mkdir(parents=True, exist_ok=True)
        kv_store = SqliteKeyValueStore(resolved_db_path)
        store = SessionStore.load(SessionRepository(kv_store), clock=clock)
        translator = Translator(resolved_settings.language, store=kv_store)
    else:
        resolved_db_path = None
        translator = Translator(resolved_settings.language)
    runner = StoreRunner(store)
    logger.info("Serving work timer state from %s.", resolved_db_path or "memory")

    app = FastAPI(title="Work Timer", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.db_path = resolved_db_path
    app.state.store_runner = runner
    app.state.translator = translator

    def status_payload(current_store: SessionStore) -> StatusPayload:
        current = current_store.current
        now = current_store.clock()
        elapsed = current_store.elapsed_ms()
        today_ms = today_total(current_store)
        return StatusPayload(
            state=current.state,
            label=translator.t(current.state.value),
            started_at=current.started_at,
            day=current.day,
            elapsed_ms=elapsed,
            elapsed=fmt_hms(elapsed),
            today=current_store.today(),
            today_ms=today_ms,
            intervals=[_interval_payload(it, now) for it in current.intervals],
            interval_rows=[row.render() for row in interval_rows(current.intervals, now)],
        )

    def summary_payload(entry: HistoryEntry, limit: int) -> SummaryPayload:
        summary = summary_human(entry, translator, limit=limit)
        return SummaryPayload(
            entry=_entry_payload(entry),
            display=summary.display,
            full=summary.full,
        )

    @app.get("/api/status")
    def status(request: Request) -> StatusPayload:
        with request.app.state.store_runner.locked() as current_store:
            return status_payload(current_store)

    @app.post("/api/start")
    def start(request: Request) -> StatusPayload:
        with request.app.state.store_runner.locked() as current_store:
            current_store.start_or_resume()
            return status_payload(current_store)

    @app.post("/api/pause")
    def pause(request: Request) -> StatusPayload:
        with request.app.state.store_runner.locked() as current_store:
            current_store.pause()
            return status_payload(current_store)

    @app.post("/api/toggle")
    def toggle(request: Request) -> StatusPayload:
        with request.app.state.store_runner.locked() as current_store:
            if current_store.current.state is SessionState.RUNNING:
                current_store.pause()
            else:
                current_store.start_or_resume()
            return status_payload(current_store)

    @app.post("/api/stop")
    def stop(request: Request) -> SummaryPayload:
        with request.app.state.store_runner.locked() as current_store:
            entry = current_store.stop()
        if entry is None:
            raise HTTPException(status_code=404, detail="No active session to stop")
        return summary_payload(entry, resolved_settings.interval_display_limit)

    @app.post("/api/reset")
    def reset(request: Request) -> StatusPayload:
        with request.app.state.store_runner.locked() as current_store:
            current_store.reset()
            return status_payload(current_store)

    @app.post("/api/clear-today")
    def clear_today(request: Request) -> ClearPayload:
        with request.app.state.store_runner.locked() as current_store:
            result = current_store.clear_today()
            return ClearPayload(
                cleared_date=result.cleared_date,
                history_total=len(current_store.history),
            )

    @app.post("/api/clear-all")
    def clear_all(request: Request) -> ClearPayload:
        with request.app.state.store_runner.locked() as current_store:
            current_store.clear_all()
            return ClearPayload(history_total=len(current_store.history))

    @app.get("/api/history")
    def history(
        request: Request,
        page: int = Query(default=1, description="Page number, newest first."),
        page_size: Optional[int] = Query(default=None, description="Entries per page."),
    ) -> HistoryPagePayload:
        size = page_size if page_size is not None else resolved_settings.page_size
        if size < 1:
            raise HTTPException(status_code=400, detail="page_size must be at least 1")
        with request.app.state.store_runner.locked() as current_store:
            pager = HistoryPager(current_store, size)
            pager.go_to(page - 1)
            current_page = pager.current_page()
        return HistoryPagePayload(
            title=translator.t("history_last", current_page.total),
            page=current_page.index + 1,
            pages=current_page.pages,
            page_size=size,
            total=current_page.total,
            has_prev=current_page.has_prev,
            has_next=current_page.has_next,
            items=[_entry_payload(entry) for entry in current_page.items],
        )

    @app.get("/api/history/{entry_id}")
    def history_entry(
        entry_id: str,
        request: Request,
        limit: Optional[int] = Query(default=None, description="Intervals shown before truncating."),
    ) -> SummaryPayload:
        with request.app.state.store_runner.locked() as current_store:
            entry = current_store.find_entry(entry_id)
        if entry is None:
            raise HTTPException(status_code=404, detail="Entry not found")
        resolved_limit = limit if limit is not None else resolved_settings.interval_display_limit
        if resolved_limit < 1:
            raise HTTPException(status_code=400, detail="limit must be at least 1")
        return summary_payload(entry, resolved_limit)

    @app.get("/api/totals")
    def totals(
        request: Request,
        date: Optional[str] = Query(
            default=None,
            description="Target date in YYYY-MM-DD format. Defaults to today.",
        ),
    ) -> Dict[str, Any]:
        with request.app.state.store_runner.locked() as current_store:
            target = _parse_date(date) if date else current_store.today()
            total_ms = daily_total(current_store, target)
            entries = sum(1 for entry in current_store.history if entry.date == target)
        return {
            "date": target,
            "total_ms": total_ms,
            "total": fmt_hms(total_ms),
            "entries": entries,
        }

    return app


def _parse_date(value: str) -> str:
    try:
        parsed = datetime.strptime(value, "%Y-%m-%d")
    except ValueError as exc:
        raise HTTPException(status_code=400, detail="Invalid date format") from exc
    return parsed.strftime("%Y-%m-%d")


def _interval_payload(interval: Interval, now: int) -> IntervalPayload:
    return IntervalPayload(
        start=interval.start,
        end=interval.end,
        duration_ms=interval.duration_ms(now),
    )


def _entry_payload(entry: HistoryEntry) -> EntryPayload:
    return EntryPayload(
        id=entry.entry_id,
        date=entry.date,
        total_ms=entry.total_ms,
        total=fmt_hms(entry.total_ms),
        from_iso=entry.from_iso,
        to_iso=entry.to_iso,
        intervals=[_interval_payload(it, it.start) for it in entry.intervals],
    )
