"""Tests for spendwise.domain.aggregation pure functions."""

from decimal import Decimal

from spendwise.dates import today_iso
from spendwise.domain.aggregation import (
    calculate_histogram_bar_length,
    category_breakdown,
    category_percentages,
    daily_totals,
    filter_expenses,
    get_category_total,
    get_today_total,
    get_total,
    non_zero_breakdown,
)
from spendwise.domain.models import Category, Expense, ExpenseFilters, IsoDate, Money


def make_expense(
    expense_id: str,
    amount: str | int,
    category: Category = Category.FOOD,
    date: str = "2024-03-01",
    note: str | None = None,
) -> Expense:
    return Expense(
        id=expense_id,
        amount=Money(Decimal(str(amount))),
        category=category,
        date=IsoDate(date),
        note=note,
    )


def sample_expenses() -> list[Expense]:
    return [
        make_expense("1", 100, Category.FOOD, "2024-03-01"),
        make_expense("2", 50, Category.TRAVEL, "2024-03-02"),
        make_expense("3", "12.50", Category.FOOD, "2024-03-03"),
        make_expense("4", 999, Category.RENT, "2024-02-28"),
        make_expense("5", "0.10", Category.OTHERS, "2024-03-03"),
    ]


class TestFilterExpenses:
    """Tests for filter_expenses."""

    def test_empty_filters_match_everything(self) -> None:
        """Should return every expense when no filter is set."""
        expenses = sample_expenses()

        assert filter_expenses(expenses, ExpenseFilters()) == expenses

    def test_category_filter(self) -> None:
        """Should keep one record totalling 100 when filtering by Food."""
        expenses = [
            make_expense("a", 100, Category.FOOD, "2024-03-01"),
            make_expense("b", 50, Category.TRAVEL, "2024-03-02"),
        ]

        result = filter_expenses(expenses, ExpenseFilters(category=Category.FOOD))

        assert len(result) == 1
        assert get_total(result) == Decimal(100)

    def test_inclusive_date_range(self) -> None:
        """Should include both range boundaries."""
        expenses = [
            make_expense(str(day), amount, Category.OTHERS, f"2024-01-0{day}")
            for day, amount in zip(range(1, 6), [10, 20, 30, 40, 50])
        ]

        result = filter_expenses(
            expenses, ExpenseFilters(start_date=IsoDate("2024-01-02"), end_date=IsoDate("2024-01-04"))
        )

        assert [expense.amount for expense in result] == [Decimal(20), Decimal(30), Decimal(40)]
        assert get_total(result) == Decimal(90)

    def test_single_day_range(self) -> None:
        """Should return exactly the expenses on that day when start == end."""
        day = IsoDate("2024-03-03")

        result = filter_expenses(sample_expenses(), ExpenseFilters(start_date=day, end_date=day))

        assert {expense.id for expense in result} == {"3", "5"}

    def test_start_date_only(self) -> None:
        result = filter_expenses(sample_expenses(), ExpenseFilters(start_date=IsoDate("2024-03-02")))

        assert {expense.id for expense in result} == {"2", "3", "5"}

    def test_end_date_only(self) -> None:
        result = filter_expenses(sample_expenses(), ExpenseFilters(end_date=IsoDate("2024-03-01")))

        assert {expense.id for expense in result} == {"1", "4"}

    def test_combined_filters(self) -> None:
        """Should require every set filter to match."""
        filters = ExpenseFilters(category=Category.FOOD, start_date=IsoDate("2024-03-02"))

        result = filter_expenses(sample_expenses(), filters)

        assert [expense.id for expense in result] == ["3"]

    def test_idempotent(self) -> None:
        """Should give the same result when applied to its own output."""
        filters = ExpenseFilters(category=Category.FOOD, end_date=IsoDate("2024-03-02"))

        once = filter_expenses(sample_expenses(), filters)
        twice = filter_expenses(once, filters)

        assert once == twice

    def test_does_not_mutate_input(self) -> None:
        expenses = sample_expenses()
        original = list(expenses)

        result = filter_expenses(expenses, ExpenseFilters(category=Category.RENT))

        assert expenses == original
        assert result is not expenses


class TestTotals:
    """Tests for get_total and get_category_total."""

    def test_empty_totals_are_zero(self) -> None:
        assert get_total([]) == Decimal(0)
        assert get_category_total([], Category.FOOD) == Decimal(0)

    def test_total_is_exact(self) -> None:
        """Should not lose precision on decimal amounts."""
        expenses = [make_expense(str(i), "0.10") for i in range(10)]

        assert get_total(expenses) == Decimal("1.00")

    def test_category_total(self) -> None:
        assert get_category_total(sample_expenses(), Category.FOOD) == Decimal("112.50")

    def test_category_total_accepts_name(self) -> None:
        assert get_category_total(sample_expenses(), "travel") == Decimal(50)

    def test_unknown_category_name_totals_zero(self) -> None:
        """Should not raise on an unknown category name."""
        assert get_category_total(sample_expenses(), "Groceries") == Decimal(0)

    def test_category_totals_partition_total(self) -> None:
        """Category totals should add up to the overall total."""
        expenses = sample_expenses()

        by_category = sum((get_category_total(expenses, category) for category in Category), Decimal(0))

        assert by_category == get_total(expenses)


class TestTodayAndTrend:
    """Tests for get_today_total and daily_totals."""

    def test_today_total(self) -> None:
        result = get_today_total(sample_expenses(), today=IsoDate("2024-03-03"))

        assert result == Decimal("12.60")

    def test_today_total_defaults_to_local_date(self) -> None:
        expenses = [make_expense("t", 7, date=today_iso()), make_expense("y", 3, date="2000-01-01")]

        assert get_today_total(expenses) == Decimal(7)

    def test_trend_has_seven_entries_oldest_first(self) -> None:
        totals = daily_totals(sample_expenses(), today=IsoDate("2024-03-03"))

        assert len(totals) == 7
        assert [day.date for day in totals] == [
            "2024-02-26",
            "2024-02-27",
            "2024-02-28",
            "2024-02-29",
            "2024-03-01",
            "2024-03-02",
            "2024-03-03",
        ]

    def test_trend_zero_fills_empty_days(self) -> None:
        """Should report 0 for a day without expenses rather than omitting it."""
        totals = daily_totals(sample_expenses(), today=IsoDate("2024-03-03"))

        assert [day.total for day in totals] == [
            Decimal(0),
            Decimal(0),
            Decimal(999),
            Decimal(0),
            Decimal(100),
            Decimal(50),
            Decimal("12.60"),
        ]

    def test_trend_for_no_expenses(self) -> None:
        totals = daily_totals([], today=IsoDate("2024-03-03"))

        assert len(totals) == 7
        assert all(day.total == 0 for day in totals)


class TestBreakdown:
    """Tests for category breakdown helpers."""

    def test_breakdown_covers_all_categories_in_order(self) -> None:
        breakdown = category_breakdown(sample_expenses())

        assert list(breakdown) == list(Category)
        assert breakdown[Category.FOOD] == Decimal("112.50")
        assert breakdown[Category.HEALTH] == Decimal(0)

    def test_non_zero_breakdown_drops_empty(self) -> None:
        breakdown = non_zero_breakdown(sample_expenses())

        assert set(breakdown) == {Category.FOOD, Category.TRAVEL, Category.RENT, Category.OTHERS}

    def test_unknown_category_excluded_from_breakdown(self) -> None:
        """Should skip records whose category is not a known member."""
        odd = Expense(id="x", amount=Money(Decimal(5)), category="Groceries", date=IsoDate("2024-03-01"))  # type: ignore[arg-type]

        breakdown = category_breakdown([odd, make_expense("1", 10)])

        assert breakdown[Category.FOOD] == Decimal(10)
        assert sum(breakdown.values()) == Decimal(10)

    def test_percentages(self) -> None:
        breakdown = {Category.FOOD: Money(Decimal(75)), Category.TRAVEL: Money(Decimal(25))}

        assert category_percentages(breakdown) == {Category.FOOD: 75.0, Category.TRAVEL: 25.0}

    def test_percentages_of_nothing(self) -> None:
        """Should not divide by zero."""
        breakdown = category_breakdown([])

        assert all(value == 0.0 for value in category_percentages(breakdown).values())


class TestHistogram:
    """Tests for calculate_histogram_bar_length."""

    def test_full_bar(self) -> None:
        assert calculate_histogram_bar_length(Money(Decimal(50)), Money(Decimal(50)), 30) == 30

    def test_half_bar(self) -> None:
        assert calculate_histogram_bar_length(Money(Decimal(25)), Money(Decimal(50)), 30) == 15

    def test_zero_max(self) -> None:
        assert calculate_histogram_bar_length(Money(Decimal(0)), Money(Decimal(0)), 30) == 0
