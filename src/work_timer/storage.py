"""Persistence adapter for the live session and the history list.

Both records are stored as JSON text in a :class:`~work_timer.db.KeyValueStore`.
Nothing here raises: loads fall back to defaults and failed saves are reported
through :class:`StorageResult` so callers decide what to ignore.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Generic, Literal, Optional, TypeVar

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictInt,
    StrictStr,
    TypeAdapter,
    ValidationError,
    field_validator,
)

from .db import KeyValueStore
from .models import HistoryEntry, Interval, Session, SessionState
from .timefmt import from_iso

logger = logging.getLogger(__name__)

CURRENT_KEY = "wt_current_v1"
HISTORY_KEY = "wt_history_v1"

T = TypeVar("T")


class StorageError(Exception):
    """A record could not be read, decoded or written."""

    def __init__(self, key: str, reason: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(f"{key}: {reason}")
        self.key = key
        self.reason = reason
        self.cause = cause


@dataclass(frozen=True, slots=True)
class StorageResult(Generic[T]):
    value: Optional[T] = None
    error: Optional[StorageError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class IntervalRecord(BaseModel):
    start: StrictInt
    end: Optional[StrictInt] = None

    model_config = ConfigDict(extra="ignore")


class ClosedIntervalRecord(BaseModel):
    start: StrictInt
    end: StrictInt

    model_config = ConfigDict(extra="ignore")


class CurrentRecord(BaseModel):
    state: Literal["idle", "running", "paused", "stopped"] = "idle"
    started_at: Optional[StrictInt] = Field(default=None, alias="startedAt")
    day: Optional[StrictStr] = None
    intervals: list[IntervalRecord] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class HistoryEntryRecord(BaseModel):
    date: StrictStr
    total_ms: StrictInt = Field(alias="totalMs")
    from_iso: StrictStr = Field(alias="from")
    to_iso: StrictStr = Field(alias="to")
    intervals: list[ClosedIntervalRecord] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @field_validator("from_iso", "to_iso")
    @classmethod
    def _check_timestamp(cls, value: str) -> str:
        # Summaries parse these back into clock times.
        from_iso(value)
        return value


_HISTORY_ADAPTER = TypeAdapter(list[HistoryEntryRecord])


def session_from_record(record: CurrentRecord) -> Session:
    return Session(
        state=SessionState(record.state),
        started_at=record.started_at,
        day=record.day,
        intervals=[Interval(start=it.start, end=it.end) for it in record.intervals],
    )


def session_to_record(session: Session) -> CurrentRecord:
    return CurrentRecord(
        state=session.state.value,
        started_at=session.started_at,
        day=session.day,
        intervals=[IntervalRecord(start=it.start, end=it.end) for it in session.intervals],
    )


def entry_from_record(record: HistoryEntryRecord) -> HistoryEntry:
    return HistoryEntry(
        date=record.date,
        total_ms=record.total_ms,
        from_iso=record.from_iso,
        to_iso=record.to_iso,
        intervals=tuple(Interval(start=it.start, end=it.end) for it in record.intervals),
    )


def entry_to_record(entry: HistoryEntry) -> HistoryEntryRecord:
    intervals = []
    for interval in entry.intervals:
        if interval.end is None:
            raise ValueError(f"History entry {entry.from_iso} holds an open interval")
        intervals.append(ClosedIntervalRecord(start=interval.start, end=interval.end))
    return HistoryEntryRecord(
        date=entry.date,
        total_ms=entry.total_ms,
        from_iso=entry.from_iso,
        to_iso=entry.to_iso,
        intervals=intervals,
    )


def _decode_current(text: str) -> Session:
    session = session_from_record(CurrentRecord.model_validate_json(text))
    if not session.is_consistent():
        raise ValueError(f"intervals do not match state '{session.state.value}'")
    return session


def _decode_history(text: str) -> list[HistoryEntry]:
    return [entry_from_record(record) for record in _HISTORY_ADAPTER.validate_json(text)]


def _encode_current(session: Session) -> str:
    return session_to_record(session).model_dump_json(by_alias=True, exclude_none=True)


def _encode_history(history: list[HistoryEntry]) -> str:
    records = [entry_to_record(entry) for entry in history]
    return _HISTORY_ADAPTER.dump_json(records, by_alias=True).decode("utf-8")


class SessionRepository:
    """Load and save the ``current`` and ``history`` records."""

    def __init__(self, store: KeyValueStore) -> None:
        self.store = store

    def load_current(self) -> StorageResult[Session]:
        return self._load(CURRENT_KEY, _decode_current, Session.idle)

    def save_current(self, session: Session) -> StorageResult[None]:
        return self._save(CURRENT_KEY, _encode_current, session)

    def load_history(self) -> StorageResult[list[HistoryEntry]]:
        return self._load(HISTORY_KEY, _decode_history, list)

    def save_history(self, history: list[HistoryEntry]) -> StorageResult[None]:
        return self._save(HISTORY_KEY, _encode_history, list(history))

    def _load(
        self,
        key: str,
        decode: Callable[[str], T],
        default: Callable[[], T],
    ) -> StorageResult[T]:
        try:
            raw = self.store.get(key)
        except Exception as exc:
            logger.warning("Failed to read '%s'; using defaults.", key, exc_info=True)
            return StorageResult(value=default(), error=StorageError(key, "read failed", exc))

        if not raw:
            return StorageResult(value=default())

        try:
            value = decode(raw)
        except (ValidationError, ValueError) as exc:
            logger.warning("Stored '%s' is malformed; using defaults: %s", key, exc)
            return StorageResult(value=default(), error=StorageError(key, "malformed data", exc))
        return StorageResult(value=value)

    def _save(self, key: str, encode: Callable[[T], str], value: T) -> StorageResult[None]:
        try:
            self.store.set(key, encode(value))
        except Exception as exc:
            logger.warning("Failed to save '%s'; keeping in-memory state only.", key, exc_info=True)
            return StorageResult(error=StorageError(key, "write failed", exc))
        return StorageResult()
