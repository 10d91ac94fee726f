"""Store layer - local expense cache and synchronisation with the remote store.

This module re-exports the public store types for easy importing.
"""

from spendwise.store.cache import ExpenseCache
from spendwise.store.sync import RemoteStore, SyncClient, SyncResult, expense_from_row

__all__ = [
    "ExpenseCache",
    "RemoteStore",
    "SyncClient",
    "SyncResult",
    "expense_from_row",
]
