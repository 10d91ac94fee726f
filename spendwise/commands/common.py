"""Helpers shared by the CLI commands."""

import asyncio
import sys
from typing import NoReturn

from rich.console import Console

from spendwise.config import clear_session_data
from spendwise.dates import normalize_user_date
from spendwise.domain.models import Category, Expense, ExpenseFilters
from spendwise.errors import NotAuthenticatedError, RemoteValidationError, SyncError
from spendwise.state import (
    AppState,
    build_state,
    build_supabase_client,
    build_sync_client,
    renew_session,
    session_expired,
)
from spendwise.store.sync import SyncClient

console = Console()


def header_style(state: AppState) -> str:
    """Table header style for the current theme."""
    return "bold cyan" if state.theme == "dark" else "bold blue"


def fail(message: str) -> NoReturn:
    """Print an error and exit with status 1."""
    console.print(f"[red]{message}[/red]", style="bold")
    sys.exit(1)


def logged_in_state() -> AppState:
    """Build the app state, exiting if nobody is logged in.

    An expiring session is refreshed first. If the backend rejects the
    refresh, the saved session is dropped and the user must log in again.
    """
    state = build_state()
    session = state.session.session
    if session is None:
        fail("Not logged in. Run 'spendwise login EMAIL' first.")

    if session_expired(session):
        try:
            renew_session(state, build_supabase_client(state.config_path))
        except ValueError as e:
            fail(str(e))
        except (NotAuthenticatedError, RemoteValidationError) as e:
            state.session.clear()
            clear_session_data(state.config_path)
            fail(f"Session expired ({e}). Run 'spendwise login EMAIL' again.")
        except SyncError as e:
            fail(f"Could not refresh your session: {e}")
    return state


def sync_client_for(state: AppState) -> SyncClient:
    """Create a sync client, exiting if the backend is not configured."""
    try:
        return build_sync_client(state)
    except ValueError as e:
        fail(str(e))


def parse_filters(category: str | None, start: str | None, end: str | None) -> ExpenseFilters:
    """Build a filter set from raw command-line options.

    Raises:
        ValueError: If the category or a date is invalid.
    """
    return ExpenseFilters(
        category=Category.parse(category) if category else None,
        start_date=normalize_user_date(start) if start else None,
        end_date=normalize_user_date(end) if end else None,
    )


async def _load(client: SyncClient) -> bool:
    async with client:
        result = await client.load()
    if not result.ok:
        console.print(f"[red]Could not load expenses: {result.error}[/red]")
    return result.ok


def load_expenses(state: AppState) -> list[Expense]:
    """Fill the cache from the remote store and return its contents.

    Exits with status 1 if the expenses cannot be loaded.
    """
    client = sync_client_for(state)
    if not asyncio.run(_load(client)):
        sys.exit(1)
    return state.cache.snapshot()
