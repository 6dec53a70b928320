"""Helpers to launch the local work timer API."""

from __future__ import annotations

import logging
import threading
import time
import webbrowser
from pathlib import Path
from typing import Optional

import uvicorn

from .config import TimerSettings
from .paths import get_db_path
from .webapp import create_app

logger = logging.getLogger(__name__)


def run_dashboard(
    *,
    host: str = "127.0.0.1",
    port: int = 8766,
    db_path: Optional[Path] = None,
    settings: Optional[TimerSettings] = None,
    open_browser: bool = True,
    log_level: str = "info",
) -> None:
    """Serve the API with uvicorn until interrupted.

    The timer state lives in one process, so uvicorn always runs a single
    worker.
    """
    resolved_db_path = db_path or get_db_path()
    app = create_app(db_path=resolved_db_path, settings=settings or TimerSettings())

    docs_url = f"http://{host}:{port}/docs"
    logger.info("Work timer API for %s at %s", resolved_db_path, docs_url)
    if open_browser:
        threading.Thread(
            target=_open_docs_after_delay, args=(docs_url,), daemon=True
        ).start()

    logging.getLogger("uvicorn.error").setLevel(log_level.upper())
    uvicorn.run(app, host=host, port=port, log_level=log_level, workers=1)


def _open_docs_after_delay(url: str, delay: float = 1.0) -> None:
    time.sleep(delay)
    try:
        webbrowser.open(url)
    except Exception:
        logger.exception("Failed to launch browser for %s", url)
