"""Exception types shared across spendwise."""


class SyncError(Exception):
    """A remote store operation failed."""


class NotAuthenticatedError(SyncError):
    """No authenticated user, or the backend rejected the credentials."""


class RemoteStoreError(SyncError):
    """Transport failure or server-side error talking to the remote store."""


class RemoteValidationError(SyncError):
    """The remote store rejected the request payload."""


class DuplicateExpenseError(ValueError):
    """An expense id is already present in the local cache."""


class AdvisorError(Exception):
    """The AI assistant could not produce an answer."""


class MissingApiKeyError(AdvisorError):
    """No AI API key has been supplied."""

    def __init__(self) -> None:
        super().__init__("API Key is missing")


class RateLimitError(AdvisorError):
    """The AI provider rejected the request with HTTP 429."""

    def __init__(self) -> None:
        super().__init__("Usage limit exceeded. Please wait 1 minute before trying again.")


class EmptyExportError(ValueError):
    """No expenses fall within the requested export period."""
