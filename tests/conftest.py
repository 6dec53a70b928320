from __future__ import annotations

import pytest

from helpers import FakeClock
from work_timer.db import MemoryKeyValueStore
from work_timer.session import SessionStore
from work_timer.storage import SessionRepository


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def kv_store() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture
def repository(kv_store: MemoryKeyValueStore) -> SessionRepository:
    return SessionRepository(kv_store)


@pytest.fixture
def store(repository: SessionRepository, clock: FakeClock) -> SessionStore:
    return SessionStore.load(repository, clock=clock)
