"""Sync client: keeps the local cache in step with the remote store.

Mutations are applied to the cache first (optimistically) and then sent to
the remote store. A failed remote call rolls the local change back and is
reported as a failed SyncResult; remote errors never propagate to callers.

Blocking HTTP calls run in a worker thread via asyncio.to_thread, while
every cache mutation happens on the event loop between awaits. Two
mutations may be in flight at once; the cache needs no lock because no
coroutine can interleave with a synchronous cache step.
"""

import asyncio
import contextlib
import logging
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol, TypeVar

import pandas as pd

from spendwise.dates import epoch_millis, normalize_remote_date
from spendwise.domain.models import Category, Expense, IsoDate, Money, to_money
from spendwise.errors import RemoteStoreError, SyncError
from spendwise.session import AuthSession, SessionGate
from spendwise.store.cache import ExpenseCache

logger = logging.getLogger(__name__)

PROBE_INTERVAL_SECONDS = 30.0

T = TypeVar("T")


class RemoteStore(Protocol):
    """Remote per-user expenses table."""

    def insert_expense(self, session: AuthSession, row: dict[str, Any]) -> dict[str, Any]: ...

    def select_expenses(self, session: AuthSession) -> list[dict[str, Any]]: ...

    def delete_expense(self, session: AuthSession, expense_id: str) -> None: ...

    def ping(self) -> bool: ...


@dataclass(frozen=True)
class SyncResult:
    """Outcome of a sync operation."""

    ok: bool
    expense: Expense | None = None
    error: SyncError | None = None


def parse_created_at(raw: Any) -> int | None:
    """Convert a remote created_at value to epoch milliseconds."""
    if raw is None or raw == "":
        return None
    if isinstance(raw, (int, float)):
        return int(raw)
    try:
        return int(pd.to_datetime(raw, utc=True).timestamp() * 1000)
    except (ValueError, pd.errors.ParserError):
        return None


def expense_from_row(row: dict[str, Any], fallback: Expense | None = None) -> Expense:
    """Build an Expense from a remote row.

    The amount is coerced to Decimal, the date normalised to YYYY-MM-DD and
    unknown categories fall into Others. Missing columns are taken from
    fallback when given.

    Raises:
        ValueError: If a required column is missing or malformed.
    """

    def pick(key: str, default: Any = None) -> Any:
        value = row.get(key)
        return default if value is None else value

    expense_id = pick("id", fallback.id if fallback else None)
    amount = pick("amount", fallback.amount if fallback else None)
    date = pick("date", fallback.date if fallback else None)
    if expense_id is None or amount is None or date is None:
        raise ValueError(f"Incomplete expense row: {row!r}")

    category = pick("category", fallback.category if fallback else Category.OTHERS)
    created_at = parse_created_at(row.get("created_at"))
    if created_at is None:
        created_at = fallback.created_at if fallback else 0

    return Expense(
        id=str(expense_id),
        amount=to_money(amount),
        category=Category.coerce(category),
        date=normalize_remote_date(date),
        note=pick("note", fallback.note if fallback else None) or None,
        created_at=created_at,
    )


def new_optimistic_expense(amount: Money, category: Category, date: IsoDate, note: str | None = None) -> Expense:
    """Build a local expense with a temporary id and the current timestamp."""
    return Expense(
        id=str(uuid.uuid4()),
        amount=amount,
        category=category,
        date=date,
        note=note or None,
        created_at=epoch_millis(),
    )


class SyncClient:
    """Optimistic add/delete/load against a remote store."""

    def __init__(self, store: RemoteStore, session: SessionGate, cache: ExpenseCache) -> None:
        self.store = store
        self.session = session
        self.cache = cache
        self.online = True
        self._probe_task: asyncio.Task[None] | None = None
        # Optimistic ids whose insert is in flight, and those of them delete() removed
        self._pending_inserts: set[str] = set()
        self._deleted_pending: set[str] = set()
        self._unsubscribe = session.subscribe(self._on_session_change)

    async def __aenter__(self) -> "SyncClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    def _on_session_change(self, session: AuthSession | None) -> None:
        if session is None:
            self.cache.clear()
            self.stop_probe()

    async def _call(self, func: Callable[..., T], *args: Any) -> T:
        return await asyncio.to_thread(func, *args)

    async def load(self) -> SyncResult:
        """Replace the cache with the user's rows from the remote store.

        On failure the cache is left as it was.
        """
        try:
            session = self.session.require()
            rows = await self._call(self.store.select_expenses, session)
            expenses = [expense_from_row(row) for row in rows]
            self.cache.replace_all(expenses)
        except SyncError as e:
            logger.warning("Error fetching expenses: %s", e)
            return SyncResult(ok=False, error=e)
        except ValueError as e:
            logger.warning("Error fetching expenses: malformed data: %s", e)
            return SyncResult(ok=False, error=RemoteStoreError(str(e)))
        logger.debug("Loaded %d expenses", len(expenses))
        return SyncResult(ok=True)

    async def add(self, amount: Money, category: Category, date: IsoDate, note: str | None = None) -> SyncResult:
        """Add an expense optimistically, then persist it.

        On success the optimistic record is replaced by the stored one. On
        failure the optimistic record is removed again. If delete() removed
        the optimistic record while the insert was in flight, the stored row
        is deleted as well. A reload or logout in the meantime never deletes
        anything remotely.
        """
        optimistic = new_optimistic_expense(amount, category, date, note)
        self.cache.prepend(optimistic)
        self._pending_inserts.add(optimistic.id)

        try:
            session = self.session.require()
            row = await self._call(
                self.store.insert_expense,
                session,
                {
                    "amount": str(optimistic.amount),
                    "category": optimistic.category.value,
                    "date": optimistic.date,
                    "note": optimistic.note,
                },
            )
            saved = expense_from_row(row, fallback=optimistic)
        except (SyncError, ValueError) as e:
            error = e if isinstance(e, SyncError) else RemoteStoreError(str(e))
            logger.warning("Error adding expense: %s", error)
            self.cache.remove(optimistic.id)
            self._deleted_pending.discard(optimistic.id)
            return SyncResult(ok=False, error=error)
        finally:
            self._pending_inserts.discard(optimistic.id)

        if optimistic.id in self._deleted_pending:
            self._deleted_pending.discard(optimistic.id)
            return await self._discard_saved(session, saved)

        if self.cache.replace(optimistic.id, saved):
            return SyncResult(ok=True, expense=saved)

        # The cache was reloaded or cleared while the insert was in flight
        if self.session.user_id == session.user_id and saved.id not in self.cache:
            self.cache.prepend(saved)
        return SyncResult(ok=True, expense=saved)

    async def _discard_saved(self, session: AuthSession, saved: Expense) -> SyncResult:
        logger.info("Expense %s was deleted before it was saved, removing remote copy", saved.id)
        try:
            await self._call(self.store.delete_expense, session, saved.id)
        except SyncError as e:
            logger.warning("Error removing expense %s: %s", saved.id, e)
            return SyncResult(ok=False, error=e)
        return SyncResult(ok=True)

    async def delete(self, expense_id: str) -> SyncResult:
        """Delete an expense optimistically, then remotely.

        The remote delete is issued even if the id is not cached. On failure
        the removed record is put back where it was.
        """
        removed = self.cache.remove(expense_id)
        if removed is not None and expense_id in self._pending_inserts:
            self._deleted_pending.add(expense_id)

        try:
            session = self.session.require()
            await self._call(self.store.delete_expense, session, expense_id)
        except SyncError as e:
            logger.warning("Error deleting expense %s: %s", expense_id, e)
            self._deleted_pending.discard(expense_id)
            if removed is not None:
                self.cache.restore(*removed)
            return SyncResult(ok=False, error=e)

        return SyncResult(ok=True, expense=removed[0] if removed else None)

    async def probe(self) -> bool:
        """Check reachability once and record the result in `online`."""
        try:
            self.online = bool(await self._call(self.store.ping))
        except SyncError as e:
            logger.debug("Probe failed: %s", e)
            self.online = False
        return self.online

    async def _probe_loop(self, interval: float) -> None:
        while True:
            was_online = self.online
            if await self.probe() != was_online:
                logger.info("Connection status: %s", "online" if self.online else "offline")
            await asyncio.sleep(interval)

    def start_probe(self, interval: float = PROBE_INTERVAL_SECONDS) -> None:
        """Start periodic probing on the running event loop. No-op if already running."""
        if self._probe_task is not None and not self._probe_task.done():
            return
        self._probe_task = asyncio.create_task(self._probe_loop(interval))

    def stop_probe(self) -> None:
        task, self._probe_task = self._probe_task, None
        if task is not None:
            task.cancel()

    async def aclose(self) -> None:
        """Stop probing and detach from the session gate."""
        task, self._probe_task = self._probe_task, None
        if task is not None:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
        self._unsubscribe()
