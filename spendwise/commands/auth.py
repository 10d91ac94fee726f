"""Authentication commands (login, signup, oauth, logout, whoami)."""

import logging

from spendwise.commands.common import console, fail
from spendwise.config import clear_session_data, save_session_data
from spendwise.errors import NotAuthenticatedError, RemoteValidationError, SyncError
from spendwise.state import build_state, build_supabase_client

logger = logging.getLogger(__name__)


def login_command(email: str, password: str) -> None:
    """Log in with email and password and remember the session."""
    state = build_state()
    try:
        client = build_supabase_client()
        session = client.sign_in_with_password(email, password)
    except ValueError as e:
        fail(str(e))
    except (NotAuthenticatedError, RemoteValidationError) as e:
        fail(f"Login failed: {e}")
    except SyncError as e:
        fail(f"Could not reach the server: {e}")

    state.session.set_session(session)
    save_session_data(session.to_dict())
    console.print(f"[green]✓[/green] Logged in as {session.email or email}")


def signup_command(email: str, password: str) -> None:
    """Create an account, logging in straight away if no confirmation is needed."""
    state = build_state()
    try:
        client = build_supabase_client()
        session = client.sign_up(email, password)
    except ValueError as e:
        fail(str(e))
    except SyncError as e:
        fail(f"Sign up failed: {e}")

    if session is None:
        console.print("[green]✓[/green] Account created. Check your email to confirm it, then log in.")
        return

    state.session.set_session(session)
    save_session_data(session.to_dict())
    console.print(f"[green]✓[/green] Account created and logged in as {session.email or email}")


def oauth_command(provider: str, redirect_to: str | None = None) -> None:
    """Print the browser URL that starts an OAuth login."""
    try:
        url = build_supabase_client().oauth_url(provider, redirect_to)
    except ValueError as e:
        fail(str(e))
    console.print(f"[cyan]Open this URL in your browser to sign in with {provider}:[/cyan]")
    console.print(url, soft_wrap=True)


def logout_command() -> None:
    """Log out locally and revoke the session on the server."""
    state = build_state()
    session = state.session.session
    if session is None:
        console.print("[yellow]Not logged in[/yellow]")
        return

    try:
        build_supabase_client().sign_out(session.access_token)
    except (ValueError, SyncError) as e:
        # The local session is dropped regardless
        logger.warning("Server-side sign out failed: %s", e)

    state.session.clear()
    clear_session_data()
    console.print("[green]✓[/green] Logged out")


def whoami_command() -> None:
    state = build_state()
    session = state.session.session
    if session is None:
        console.print("[yellow]Not logged in[/yellow]")
        return
    console.print(f"Logged in as [bold]{session.email or session.user_id}[/bold]")
    console.print(f"[dim]User id: {session.user_id}[/dim]")
