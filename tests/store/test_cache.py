"""Tests for spendwise.store.cache."""

from decimal import Decimal

import pytest

from spendwise.domain.models import Category, Expense, IsoDate, Money
from spendwise.errors import DuplicateExpenseError
from spendwise.store.cache import ExpenseCache


def make_expense(expense_id: str, amount: int = 10) -> Expense:
    return Expense(
        id=expense_id,
        amount=Money(Decimal(amount)),
        category=Category.FOOD,
        date=IsoDate("2024-03-01"),
    )


class TestExpenseCache:
    """Tests for ExpenseCache."""

    def test_prepend_puts_newest_first(self) -> None:
        cache = ExpenseCache([make_expense("a")])

        cache.prepend(make_expense("b"))

        assert [expense.id for expense in cache] == ["b", "a"]

    def test_prepend_rejects_duplicate_id(self) -> None:
        cache = ExpenseCache([make_expense("a")])

        with pytest.raises(DuplicateExpenseError):
            cache.prepend(make_expense("a"))

    def test_replace_all_rejects_duplicate_ids(self) -> None:
        cache = ExpenseCache()

        with pytest.raises(DuplicateExpenseError):
            cache.replace_all([make_expense("a"), make_expense("a")])

    def test_remove_returns_expense_and_index(self) -> None:
        cache = ExpenseCache([make_expense("a"), make_expense("b"), make_expense("c")])

        removed = cache.remove("b")

        assert removed is not None
        assert removed[0].id == "b"
        assert removed[1] == 1
        assert "b" not in cache

    def test_remove_missing_is_none(self) -> None:
        cache = ExpenseCache([make_expense("a")])

        assert cache.remove("zzz") is None
        assert len(cache) == 1

    def test_restore_puts_expense_back_in_place(self) -> None:
        cache = ExpenseCache([make_expense("a"), make_expense("b"), make_expense("c")])
        removed = cache.remove("b")
        assert removed is not None

        cache.restore(*removed)

        assert [expense.id for expense in cache] == ["a", "b", "c"]

    def test_replace_swaps_id_in_place(self) -> None:
        cache = ExpenseCache([make_expense("tmp"), make_expense("old")])

        assert cache.replace("tmp", make_expense("server-1", amount=99))

        assert [expense.id for expense in cache] == ["server-1", "old"]
        assert cache.get("server-1") is not None
        assert cache.get("server-1").amount == Decimal(99)  # type: ignore[union-attr]

    def test_replace_missing_returns_false(self) -> None:
        cache = ExpenseCache([make_expense("a")])

        assert not cache.replace("tmp", make_expense("server-1"))
        assert "server-1" not in cache

    def test_replace_keeps_ids_unique(self) -> None:
        """Should drop another entry that already carries the new id."""
        cache = ExpenseCache([make_expense("tmp"), make_expense("server-1")])

        cache.replace("tmp", make_expense("server-1", amount=5))

        assert [expense.id for expense in cache] == ["server-1"]
        assert cache.snapshot()[0].amount == Decimal(5)

    def test_snapshot_is_a_copy(self) -> None:
        cache = ExpenseCache([make_expense("a")])

        snapshot = cache.snapshot()
        snapshot.clear()

        assert len(cache) == 1

    def test_clear(self) -> None:
        cache = ExpenseCache([make_expense("a")])

        cache.clear()

        assert len(cache) == 0
