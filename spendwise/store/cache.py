"""Local persistence cache: the in-memory expense list for one session."""

from collections.abc import Iterable, Iterator

from spendwise.domain.models import Expense
from spendwise.errors import DuplicateExpenseError


class ExpenseCache:
    """Ordered in-memory expense list with unique ids.

    Every method completes without awaiting, so under asyncio no other
    coroutine can observe a half-applied change.
    """

    def __init__(self, expenses: Iterable[Expense] = ()) -> None:
        self._expenses: list[Expense] = []
        self.replace_all(expenses)

    def __len__(self) -> int:
        return len(self._expenses)

    def __iter__(self) -> Iterator[Expense]:
        return iter(list(self._expenses))

    def __contains__(self, expense_id: object) -> bool:
        return any(expense.id == expense_id for expense in self._expenses)

    def contains(self, expense_id: str) -> bool:
        return expense_id in self

    def snapshot(self) -> list[Expense]:
        """Copy of the current contents, in order."""
        return list(self._expenses)

    def get(self, expense_id: str) -> Expense | None:
        return next((expense for expense in self._expenses if expense.id == expense_id), None)

    def index_of(self, expense_id: str) -> int | None:
        for index, expense in enumerate(self._expenses):
            if expense.id == expense_id:
                return index
        return None

    def replace_all(self, expenses: Iterable[Expense]) -> None:
        """Swap in a new list wholesale.

        Raises:
            DuplicateExpenseError: If the new list repeats an id.
        """
        incoming = list(expenses)
        seen: set[str] = set()
        for expense in incoming:
            if expense.id in seen:
                raise DuplicateExpenseError(f"Duplicate expense id '{expense.id}'")
            seen.add(expense.id)
        self._expenses = incoming

    def prepend(self, expense: Expense) -> None:
        """Insert an expense at the front.

        Raises:
            DuplicateExpenseError: If the id is already cached.
        """
        if expense.id in self:
            raise DuplicateExpenseError(f"Duplicate expense id '{expense.id}'")
        self._expenses.insert(0, expense)

    def restore(self, expense: Expense, index: int) -> None:
        """Put a previously removed expense back at its old position."""
        if expense.id in self:
            return
        self._expenses.insert(min(max(index, 0), len(self._expenses)), expense)

    def remove(self, expense_id: str) -> tuple[Expense, int] | None:
        """Remove an expense by id.

        Returns:
            Tuple of (removed expense, former index), or None if absent.
        """
        index = self.index_of(expense_id)
        if index is None:
            return None
        return self._expenses.pop(index), index

    def replace(self, expense_id: str, expense: Expense) -> bool:
        """Replace the expense with the given id in place.

        A replacement whose id collides with another cached expense drops
        that other entry, so ids stay unique.

        Returns:
            False if no expense with expense_id is cached.
        """
        index = self.index_of(expense_id)
        if index is None:
            return False
        self._expenses[index] = expense
        if expense.id != expense_id:
            self._expenses = [
                existing for i, existing in enumerate(self._expenses) if i == index or existing.id != expense.id
            ]
        return True

    def clear(self) -> None:
        self._expenses = []
