"""Pure functions for expense filtering and aggregation.

This module contains the functional core for the dashboard figures:
- No I/O operations (no network, no console, no files)
- No side effects
- Everything is recomputed from the expense list on each call
- Easy to test

All monetary amounts are Decimal (Money type).
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from decimal import Decimal

from spendwise.dates import today_iso, trailing_days
from spendwise.domain.models import Category, Expense, ExpenseFilters, IsoDate, Money

ZERO = Money(Decimal(0))


@dataclass(frozen=True)
class DailyTotal:
    """Immutable total for a single calendar day."""

    date: IsoDate
    total: Money


def matches_filters(expense: Expense, filters: ExpenseFilters) -> bool:
    """Check whether an expense passes every set filter.

    Date bounds are inclusive and compared as YYYY-MM-DD strings.
    """
    if filters.category is not None and expense.category != filters.category:
        return False
    if filters.start_date and expense.date < filters.start_date:
        return False
    if filters.end_date and expense.date > filters.end_date:
        return False
    return True


def filter_expenses(expenses: Iterable[Expense], filters: ExpenseFilters) -> list[Expense]:
    """Select the expenses matching a filter set.

    Args:
        expenses: Expenses to filter.
        filters: Filter set; unset fields match everything.

    Returns:
        New list in the original order. The input is not modified.
    """
    return [expense for expense in expenses if matches_filters(expense, filters)]


def get_total(expenses: Iterable[Expense]) -> Money:
    """Sum all amounts. Returns 0 for no expenses."""
    return Money(sum((expense.amount for expense in expenses), ZERO))


def get_category_total(expenses: Iterable[Expense], category: Category | str) -> Money:
    """Sum the amounts of one category.

    Args:
        expenses: Expenses to sum.
        category: Category member or raw name. An unknown name totals 0.

    Returns:
        Category total.
    """
    if not isinstance(category, Category):
        try:
            category = Category.parse(category)
        except ValueError:
            return ZERO
    return get_total(expense for expense in expenses if expense.category == category)


def get_day_total(expenses: Iterable[Expense], day: IsoDate) -> Money:
    """Sum the amounts dated on a given calendar day."""
    return get_total(expense for expense in expenses if expense.date == day)


def get_today_total(expenses: Iterable[Expense], today: IsoDate | None = None) -> Money:
    """Sum the amounts dated today.

    Args:
        expenses: Expenses to sum.
        today: Override for the current date. Defaults to the local calendar date.

    Returns:
        Today's total.
    """
    return get_day_total(expenses, today or today_iso())


def daily_totals(
    expenses: Sequence[Expense],
    today: IsoDate | None = None,
    days: int = 7,
) -> list[DailyTotal]:
    """Compute per-day totals for the trailing window ending today.

    Days without expenses are reported as 0, so the result always has
    exactly `days` entries, oldest first.
    """
    window = trailing_days(today or today_iso(), days)
    return [DailyTotal(date=day, total=get_day_total(expenses, day)) for day in window]


def category_breakdown(expenses: Iterable[Expense]) -> dict[Category, Money]:
    """Total per category, for every category in enum order."""
    totals: dict[Category, Money] = {category: ZERO for category in Category}
    for expense in expenses:
        if expense.category in totals:
            totals[expense.category] = Money(totals[expense.category] + expense.amount)
    return totals


def non_zero_breakdown(expenses: Iterable[Expense]) -> dict[Category, Money]:
    """Category totals with empty categories dropped."""
    return {category: total for category, total in category_breakdown(expenses).items() if total > 0}


def category_percentages(breakdown: dict[Category, Money]) -> dict[Category, float]:
    """Share of the overall total per category, in percent.

    Returns all zeros when the overall total is zero.
    """
    overall = sum(breakdown.values(), ZERO)
    if overall <= 0:
        return {category: 0.0 for category in breakdown}
    return {category: float(total / overall * 100) for category, total in breakdown.items()}


def calculate_histogram_bar_length(amount: Money, max_amount: Money, bar_width: int) -> int:
    """Calculate histogram bar length.

    Args:
        amount: Amount to display.
        max_amount: Maximum amount in dataset.
        bar_width: Maximum bar width in characters.

    Returns:
        Bar length in characters.
    """
    if max_amount <= 0:
        return 0
    return int(abs(amount) / max_amount * bar_width)
