"""Command-line interface for the work timer."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import typer

from .config import TimerSettings
from .db import SqliteKeyValueStore
from .history import HistoryPager
from .i18n import Translator, available_languages
from .models import SessionState
from .paths import get_db_path
from .reporting import StatusPrinter, summary_human
from .session import SessionStore
from .storage import SessionRepository
from .timefmt import fmt_hms, now_ms

app = typer.Typer(help="Track work sessions as start/pause/stop intervals.")


@dataclass(slots=True)
class CliContext:
    db_path: Path
    language: Optional[str]

    def kv_store(self) -> SqliteKeyValueStore:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        return SqliteKeyValueStore(self.db_path)

    def open_store(self) -> SessionStore:
        return SessionStore.load(SessionRepository(self.kv_store()), clock=now_ms)

    def translator(self) -> Translator:
        return Translator(self.language, store=self.kv_store())


@app.callback(no_args_is_help=True)
def main(
    ctx: typer.Context,
    db_path: Optional[Path] = typer.Option(
        None,
        "--db",
        path_type=Path,
        help="Location of the work timer SQLite database.",
    ),
    lang: Optional[str] = typer.Option(
        None,
        "--lang",
        help="Language for this invocation (defaults to the stored choice).",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logs."),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    ctx.obj = CliContext(db_path=db_path or get_db_path(), language=lang)


def _echo_state(store: SessionStore, t: Translator) -> None:
    typer.echo(f"{t(store.current.state.value)}  {fmt_hms(store.elapsed_ms())}")


@app.command()
def start(ctx: typer.Context) -> None:
    """Start a new session, or resume a paused one."""
    store = ctx.obj.open_store()
    store.start_or_resume()
    _echo_state(store, ctx.obj.translator())


@app.command()
def pause(ctx: typer.Context) -> None:
    """Pause the running session."""
    store = ctx.obj.open_store()
    store.pause()
    _echo_state(store, ctx.obj.translator())


@app.command()
def toggle(ctx: typer.Context) -> None:
    """Pause when running, otherwise start or resume."""
    store = ctx.obj.open_store()
    if store.current.state is SessionState.RUNNING:
        store.pause()
    else:
        store.start_or_resume()
    _echo_state(store, ctx.obj.translator())


@app.command()
def stop(
    ctx: typer.Context,
    full: bool = typer.Option(False, "--full", help="Print every interval instead of a truncated list."),
) -> None:
    """Stop the session, save it to history and print its summary."""
    store = ctx.obj.open_store()
    entry = store.stop()
    if entry is None:
        typer.echo("No active session to stop.", err=True)
        raise typer.Exit(code=1)

    settings = TimerSettings.from_options()
    summary = summary_human(entry, ctx.obj.translator(), limit=settings.interval_display_limit)
    typer.echo(summary.full if full else summary.display)


@app.command()
def reset(ctx: typer.Context) -> None:
    """Discard the current session without saving it."""
    store = ctx.obj.open_store()
    store.reset()
    _echo_state(store, ctx.obj.translator())


@app.command()
def status(ctx: typer.Context) -> None:
    """Show the live session, its intervals and today's total."""
    store = ctx.obj.open_store()
    StatusPrinter(store, ctx.obj.translator()).print_status()


@app.command()
def history(
    ctx: typer.Context,
    page: int = typer.Option(1, "--page", "-p", min=1, help="Page number, newest first."),
    page_size: Optional[int] = typer.Option(None, "--page-size", min=1, help="Entries per page."),
    wide: bool = typer.Option(False, "--wide", help="Show one entry per page, like the wide layout."),
) -> None:
    """List completed sessions, newest first."""
    settings = TimerSettings.from_options(page_size=page_size, wide=wide)
    store = ctx.obj.open_store()
    pager = HistoryPager(store, settings.page_size)
    pager.go_to(page - 1)
    StatusPrinter(store, ctx.obj.translator()).print_history(pager)


@app.command()
def show(
    ctx: typer.Context,
    entry_id: str = typer.Argument(..., help="Entry id (its ISO start timestamp)."),
    full: bool = typer.Option(False, "--full", help="Print every interval instead of a truncated list."),
    limit: Optional[int] = typer.Option(None, "--limit", min=1, help="Intervals shown before truncating."),
) -> None:
    """Print the summary of one history entry."""
    store = ctx.obj.open_store()
    entry = store.find_entry(entry_id)
    if entry is None:
        typer.echo(f"No history entry with id {entry_id}.", err=True)
        raise typer.Exit(code=1)

    settings = TimerSettings.from_options(interval_limit=limit)
    summary = summary_human(entry, ctx.obj.translator(), limit=settings.interval_display_limit)
    typer.echo(summary.full if full else summary.display)


@app.command("clear-today")
def clear_today(
    ctx: typer.Context,
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt."),
) -> None:
    """Delete today's history and reset today's session."""
    t = ctx.obj.translator()
    if not yes:
        typer.confirm(t("confirm_clear_today"), abort=True)
    result = ctx.obj.open_store().clear_today()
    typer.echo(f"Cleared {result.cleared_date}.")


@app.command("clear-all")
def clear_all(
    ctx: typer.Context,
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt."),
) -> None:
    """Delete all history and reset the current session."""
    t = ctx.obj.translator()
    if not yes:
        typer.confirm(t("confirm_clear_all"), abort=True)
    ctx.obj.open_store().clear_all()
    typer.echo("Cleared all history.")


@app.command()
def lang(
    ctx: typer.Context,
    code: Optional[str] = typer.Argument(None, help="Language code to switch to."),
) -> None:
    """Show or change the interface language."""
    translator = ctx.obj.translator()
    if code is None:
        typer.echo(f"{translator.lang} ({', '.join(available_languages())})")
        return
    if not translator.set_lang(code):
        typer.echo(
            f"Unknown language '{code}'. Available: {', '.join(available_languages())}",
            err=True,
        )
        raise typer.Exit(code=1)
    typer.echo(code)


@app.command()
def web(
    ctx: typer.Context,
    host: str = typer.Option("127.0.0.1", "--host", help="Interface to bind the API."),
    port: int = typer.Option(
        8766, "--port", min=1, max=65535, help="TCP port for the API."
    ),
    page_size: Optional[int] = typer.Option(None, "--page-size", min=1, help="Default history page size."),
    open_browser: bool = typer.Option(
        True,
        "--open-browser/--no-open-browser",
        help="Automatically open the API docs in your default browser.",
    ),
) -> None:
    """Serve the local JSON API."""
    from .server_runner import run_dashboard

    settings = TimerSettings.from_options(page_size=page_size, language=ctx.obj.language)
    run_dashboard(
        host=host,
        port=port,
        db_path=ctx.obj.db_path,
        settings=settings,
        open_browser=open_browser,
    )
