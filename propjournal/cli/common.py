"""Helpers shared by CLI commands."""

from datetime import date
from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel

from propjournal.errors import PropJournalError

console = Console()


def get_config(ctx: click.Context) -> dict:
    """Load configuration, exiting with an error panel if it is unreadable."""
    from propjournal.config import load_config

    config_path = (ctx.obj or {}).get("config_path")
    try:
        return load_config(config_path)
    except PropJournalError as e:
        print_error(str(e))
        raise SystemExit(1)


def get_session(ctx: click.Context, user_id: Optional[str] = None):
    """Build and load a journal session for the configured or given user."""
    from propjournal.config import get_db_path, get_mirror_dir
    from propjournal.db import JournalMirror, JournalStore
    from propjournal.journal.session import JournalSession

    config = get_config(ctx)
    user_id = user_id or config["journal"].get("user_id")
    session = JournalSession(
        store=JournalStore(get_db_path(config)),
        mirror=JournalMirror(get_mirror_dir(config)),
        user_id=user_id,
    )
    session.load()
    return session


def parse_day(value: str) -> date:
    """Parse a YYYY-MM-DD argument."""
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise click.BadParameter(f"Invalid date: {value}. Use YYYY-MM-DD")


def print_error(message: str) -> None:
    console.print(Panel(
        f"[red]{message}[/red]",
        title="[bold red]Error[/bold red]",
        border_style="red",
    ))


def format_money(value: float) -> str:
    """Colored, signed currency string."""
    color = "green" if value >= 0 else "red"
    sign = "+" if value >= 0 else "-"
    return f"[{color}]{sign}${abs(value):,.2f}[/{color}]"


def save_or_exit(action, *args):
    """Run a session mutation, exiting with an error panel if the save fails."""
    from propjournal.errors import StoreError

    try:
        return action(*args)
    except StoreError as e:
        print_error(str(e))
        raise SystemExit(1)
