"""Supabase API interactions (auth + expenses table).

Talks to the GoTrue auth endpoints and the PostgREST table API over plain
HTTP. Row isolation per user is enforced server-side by row-level security.
"""

import logging
from typing import Any
from urllib.parse import urlencode

import requests

from spendwise.errors import NotAuthenticatedError, RemoteStoreError, RemoteValidationError
from spendwise.session import AuthSession

logger = logging.getLogger(__name__)

EXPENSES_TABLE = "expenses"
OAUTH_PROVIDERS = ("google", "github")


def _error_message(response: requests.Response) -> str:
    """Pull the most useful message out of an error response."""
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason or f"HTTP {response.status_code}"
    if isinstance(body, dict):
        for key in ("message", "msg", "error_description", "error"):
            if body.get(key):
                return str(body[key])
    return str(body)


def _raise_for_status(response: requests.Response) -> None:
    """Map an HTTP error status onto the sync error hierarchy.

    Raises:
        NotAuthenticatedError: On 401/403.
        RemoteValidationError: On other 4xx.
        RemoteStoreError: On 5xx.
    """
    status = response.status_code
    if status < 400:
        return
    message = _error_message(response)
    if status in (401, 403):
        raise NotAuthenticatedError(message)
    if status < 500:
        raise RemoteValidationError(message)
    raise RemoteStoreError(message)


def parse_auth_response(data: dict[str, Any]) -> AuthSession | None:
    """Build a session from a token/signup response.

    Returns:
        AuthSession, or None when the response carries no session
        (e.g. sign-up awaiting email confirmation).
    """
    if not data.get("access_token"):
        return None
    user = data.get("user") or {}
    return AuthSession(
        access_token=data["access_token"],
        refresh_token=data.get("refresh_token", ""),
        user_id=user["id"],
        email=user.get("email"),
        expires_at=data.get("expires_at"),
    )


class SupabaseClient:
    """Minimal client for one Supabase project."""

    def __init__(self, url: str, anon_key: str) -> None:
        self.url = url.rstrip("/")
        self.anon_key = anon_key

    def _headers(self, access_token: str | None = None) -> dict[str, str]:
        return {
            "apikey": self.anon_key,
            "Authorization": f"Bearer {access_token or self.anon_key}",
            "Accept": "application/json",
        }

    def _request(self, method: str, path: str, access_token: str | None = None, **kwargs: Any) -> requests.Response:
        """Send a request, converting transport failures to RemoteStoreError."""
        headers = self._headers(access_token)
        headers.update(kwargs.pop("headers", {}))
        url = f"{self.url}{path}"
        logger.debug("%s %s", method, url)
        try:
            response = requests.request(method, url, headers=headers, **kwargs)
        except requests.RequestException as e:
            raise RemoteStoreError(f"Could not reach {self.url}: {e}") from e
        _raise_for_status(response)
        return response

    # Auth

    def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        """Log in with email and password.

        Raises:
            NotAuthenticatedError: If the credentials are rejected.
        """
        response = self._request(
            "POST",
            "/auth/v1/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        session = parse_auth_response(response.json())
        if session is None:
            raise NotAuthenticatedError("Login response did not contain a session")
        return session

    def sign_up(self, email: str, password: str) -> AuthSession | None:
        """Create an account.

        Returns:
            AuthSession, or None if the project requires email confirmation first.
        """
        response = self._request("POST", "/auth/v1/signup", json={"email": email, "password": password})
        return parse_auth_response(response.json())

    def refresh_session(self, refresh_token: str) -> AuthSession:
        response = self._request(
            "POST",
            "/auth/v1/token",
            params={"grant_type": "refresh_token"},
            json={"refresh_token": refresh_token},
        )
        session = parse_auth_response(response.json())
        if session is None:
            raise NotAuthenticatedError("Refresh response did not contain a session")
        return session

    def sign_out(self, access_token: str) -> None:
        self._request("POST", "/auth/v1/logout", access_token)

    def oauth_url(self, provider: str, redirect_to: str | None = None) -> str:
        """Build the browser URL that starts an OAuth login.

        Raises:
            ValueError: If the provider is not supported.
        """
        if provider not in OAUTH_PROVIDERS:
            raise ValueError(f"Unsupported provider '{provider}'. Choose one of: {', '.join(OAUTH_PROVIDERS)}")
        params = {"provider": provider}
        if redirect_to:
            params["redirect_to"] = redirect_to
        return f"{self.url}/auth/v1/authorize?{urlencode(params)}"

    # Expenses table

    def insert_expense(self, session: AuthSession, row: dict[str, Any]) -> dict[str, Any]:
        """Insert one expense row and return the stored row.

        Args:
            session: Authenticated session.
            row: Column values; id and created_at are left to column defaults.

        Returns:
            The row as stored, including its server-assigned id.
        """
        payload = {"user_id": session.user_id, **row}
        response = self._request(
            "POST",
            f"/rest/v1/{EXPENSES_TABLE}",
            session.access_token,
            json=[payload],
            headers={"Prefer": "return=representation", "Content-Type": "application/json"},
        )
        rows = response.json()
        if not rows:
            raise RemoteStoreError("Insert returned no row")
        return rows[0]

    def select_expenses(self, session: AuthSession) -> list[dict[str, Any]]:
        """Fetch all of the user's expense rows, newest date first."""
        response = self._request(
            "GET",
            f"/rest/v1/{EXPENSES_TABLE}",
            session.access_token,
            params={"select": "*", "user_id": f"eq.{session.user_id}", "order": "date.desc"},
        )
        return response.json()

    def delete_expense(self, session: AuthSession, expense_id: str) -> None:
        self._request(
            "DELETE",
            f"/rest/v1/{EXPENSES_TABLE}",
            session.access_token,
            params={"id": f"eq.{expense_id}"},
        )

    def ping(self) -> bool:
        """Cheap reachability check against the REST endpoint.

        Returns:
            True if the server answered with a non-5xx status.
        """
        try:
            response = requests.head(f"{self.url}/rest/v1/", headers=self._headers())
        except requests.RequestException as e:
            logger.debug("Ping failed: %s", e)
            return False
        return response.status_code < 500
