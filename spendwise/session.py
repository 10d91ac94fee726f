"""Session gate: tracks the authenticated identity.

The identity provider is the source of truth; this module only remembers
the last session it handed us and tells subscribers when it changes.
"""

import logging
from collections.abc import Callable
from dataclasses import asdict, dataclass
from typing import Any

from spendwise.errors import NotAuthenticatedError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthSession:
    """Immutable authenticated session."""

    access_token: str
    refresh_token: str
    user_id: str
    email: str | None = None
    expires_at: int | None = None  # epoch seconds

    def to_dict(self) -> dict[str, Any]:
        return {key: value for key, value in asdict(self).items() if value is not None}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AuthSession":
        return cls(
            access_token=data["access_token"],
            refresh_token=data.get("refresh_token", ""),
            user_id=data["user_id"],
            email=data.get("email"),
            expires_at=data.get("expires_at"),
        )


SessionListener = Callable[[AuthSession | None], None]


class SessionGate:
    """Holds the current session and notifies listeners on change."""

    def __init__(self, session: AuthSession | None = None) -> None:
        self._session = session
        self._listeners: list[SessionListener] = []

    @property
    def session(self) -> AuthSession | None:
        return self._session

    @property
    def user_id(self) -> str | None:
        return self._session.user_id if self._session else None

    @property
    def is_authenticated(self) -> bool:
        return self._session is not None

    def require(self) -> AuthSession:
        """Get the current session.

        Raises:
            NotAuthenticatedError: If nobody is logged in.
        """
        if self._session is None:
            raise NotAuthenticatedError("User not authenticated")
        return self._session

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Register a listener for session changes.

        Returns:
            Function that removes the listener again.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def set_session(self, session: AuthSession | None) -> None:
        self._session = session
        logger.debug("Session changed: user=%s", session.user_id if session else None)
        for listener in list(self._listeners):
            listener(session)

    def clear(self) -> None:
        self.set_session(None)
