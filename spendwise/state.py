"""Application state container.

One AppState is built per CLI run and handed to the commands explicitly.
Commands read the cache and filters; only the SyncClient writes the cache
and only the auth commands and session renewal change the session.
"""

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path

from spendwise.config import (
    get_supabase_settings,
    get_theme,
    load_session_data,
    save_session_data,
    set_theme as save_theme,
)
from spendwise.domain.models import ExpenseFilters
from spendwise.errors import NotAuthenticatedError
from spendwise.integrations.supabase import SupabaseClient
from spendwise.session import AuthSession, SessionGate
from spendwise.store.cache import ExpenseCache
from spendwise.store.sync import SyncClient

logger = logging.getLogger(__name__)

# Refresh a little before the access token actually expires
SESSION_REFRESH_MARGIN_SECONDS = 60


@dataclass
class AppState:
    """Everything a command needs, passed by reference."""

    session: SessionGate
    cache: ExpenseCache = field(default_factory=ExpenseCache)
    filters: ExpenseFilters = field(default_factory=ExpenseFilters)
    theme: str = "light"
    config_path: Path | None = None

    def toggle_theme(self) -> str:
        """Flip between light and dark, persist it and return the new theme."""
        return self.set_theme("light" if self.theme == "dark" else "dark")

    def set_theme(self, theme: str) -> str:
        """Persist a theme preference.

        Raises:
            ValueError: If theme is not 'light' or 'dark'.
        """
        save_theme(theme, self.config_path)
        self.theme = theme
        return theme


def build_state(config_path: Path | None = None) -> AppState:
    """Build the state for one run from the config file."""
    session_data = load_session_data(config_path)
    session = AuthSession.from_dict(session_data) if session_data else None
    return AppState(
        session=SessionGate(session),
        theme=get_theme(config_path),
        config_path=config_path,
    )


def build_supabase_client(config_path: Path | None = None) -> SupabaseClient:
    """Create the backend client from config.

    Raises:
        ValueError: If the backend URL or anon key is not configured.
    """
    url, anon_key = get_supabase_settings(config_path)
    if not url or not anon_key:
        raise ValueError("Supabase URL and anon key are not configured. Run 'spendwise init' and edit the config.")
    return SupabaseClient(url, anon_key)


def build_sync_client(state: AppState) -> SyncClient:
    return SyncClient(build_supabase_client(state.config_path), state.session, state.cache)


def session_expired(session: AuthSession, now: float | None = None) -> bool:
    """Check whether the access token is expired or about to expire.

    Sessions without an expiry time never count as expired.
    """
    if session.expires_at is None:
        return False
    now = time.time() if now is None else now
    return session.expires_at - SESSION_REFRESH_MARGIN_SECONDS <= now


def renew_session(state: AppState, client: SupabaseClient) -> AuthSession:
    """Exchange the refresh token for a new session and persist it.

    Args:
        state: App state holding the current session.
        client: Backend client used for the token exchange.

    Returns:
        The new session, also set on state.session.

    Raises:
        NotAuthenticatedError: If nobody is logged in or there is no refresh token.
        SyncError: If the backend rejects the refresh or cannot be reached.
    """
    session = state.session.require()
    if not session.refresh_token:
        raise NotAuthenticatedError("Session expired and cannot be refreshed")

    renewed = client.refresh_session(session.refresh_token)
    save_session_data(renewed.to_dict(), state.config_path)
    state.session.set_session(renewed)
    logger.debug("Refreshed session for user %s", renewed.user_id)
    return renewed
