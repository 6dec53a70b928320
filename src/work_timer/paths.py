"""Where the work timer keeps its database."""

from __future__ import annotations

import os
from pathlib import Path

from platformdirs import user_data_path

APP_NAME = "WorkTimer"
DB_ENV_VAR = "WORK_TIMER_DB"
DB_FILENAME = "worktimer.sqlite3"


def _user_data_path() -> Path:
    return user_data_path(APP_NAME, appauthor=False, roaming=True)


def get_data_dir() -> Path:
    """Per-user application data directory, created on first use."""
    data_dir = _user_data_path()
    data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir


def get_db_path() -> Path:
    """Database location; ``WORK_TIMER_DB`` takes precedence when set."""
    override = os.environ.get(DB_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return get_data_dir() / DB_FILENAME
