"""Domain types for spendwise.

- Money: Decimal amount, currency-agnostic magnitude
- IsoDate: calendar date in YYYY-MM-DD format
- Category: closed set of spending classifications
- Expense: a single recorded spending event
- ExpenseFilters: optional category / date-range filter
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, NewType

# Amounts are Decimal so sums stay exact for currency magnitudes
Money = NewType("Money", Decimal)

# Dates are always YYYY-MM-DD, so string comparison is chronological
IsoDate = NewType("IsoDate", str)


class Category(str, Enum):
    """Spending category."""

    FOOD = "Food"
    TRAVEL = "Travel"
    SHOPPING = "Shopping"
    RENT = "Rent"
    ENTERTAINMENT = "Entertainment"
    HEALTH = "Health"
    EDUCATION = "Education"
    OTHERS = "Others"

    @classmethod
    def parse(cls, value: str) -> "Category":
        """Parse a category name case-insensitively.

        Args:
            value: Raw category name (e.g. "food", "Food").

        Returns:
            Matching Category.

        Raises:
            ValueError: If value is not one of the known categories.
        """
        needle = value.strip().lower()
        for member in cls:
            if member.value.lower() == needle:
                return member
        valid = ", ".join(member.value for member in cls)
        raise ValueError(f"Unknown category '{value}'. Choose one of: {valid}")

    @classmethod
    def coerce(cls, value: Any) -> "Category":
        """Parse a category from remote data, falling back to Others."""
        if isinstance(value, Category):
            return value
        try:
            return cls.parse(str(value))
        except ValueError:
            return cls.OTHERS

    @property
    def style(self) -> "CategoryStyle":
        return CATEGORY_STYLES[self]


@dataclass(frozen=True)
class CategoryStyle:
    """Display metadata for a category."""

    icon: str
    color: str


CATEGORY_STYLES: dict[Category, CategoryStyle] = {
    Category.FOOD: CategoryStyle(icon="🍴", color="#10b981"),
    Category.TRAVEL: CategoryStyle(icon="✈", color="#3b82f6"),
    Category.SHOPPING: CategoryStyle(icon="🛍", color="#ec4899"),
    Category.RENT: CategoryStyle(icon="🏠", color="#f59e0b"),
    Category.ENTERTAINMENT: CategoryStyle(icon="🎬", color="#8b5cf6"),
    Category.HEALTH: CategoryStyle(icon="♥", color="#ef4444"),
    Category.EDUCATION: CategoryStyle(icon="🎓", color="#06b6d4"),
    Category.OTHERS: CategoryStyle(icon="…", color="#6b7280"),
}


@dataclass(frozen=True)
class Expense:
    """Immutable expense record."""

    id: str
    amount: Money
    category: Category
    date: IsoDate
    note: str | None = None
    created_at: int = 0  # epoch milliseconds, ordering only


@dataclass(frozen=True)
class ExpenseFilters:
    """Immutable filter set. All fields unset matches every expense."""

    category: Category | None = None
    start_date: IsoDate | None = None
    end_date: IsoDate | None = None

    @property
    def is_empty(self) -> bool:
        return self.category is None and self.start_date is None and self.end_date is None


def to_money(value: Any) -> Money:
    """Convert a raw amount to Money without going through float arithmetic.

    Args:
        value: Number or numeric string.

    Returns:
        Decimal amount.

    Raises:
        ValueError: If value is not numeric.
    """
    if isinstance(value, Decimal):
        return Money(value)
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation as e:
        raise ValueError(f"Invalid amount '{value}'") from e
    if not amount.is_finite():
        raise ValueError(f"Invalid amount '{value}'")
    return Money(amount)


def validate_amount(value: Any) -> Money:
    """Parse a user-entered amount and require it to be positive.

    Raises:
        ValueError: If value is not numeric or not greater than zero.
    """
    amount = to_money(value)
    if amount <= 0:
        raise ValueError("Amount must be positive")
    return amount


def format_money(amount: Money, symbol: str = "₹") -> str:
    """Format an amount for display (e.g., "₹1,234.50")."""
    return f"{symbol}{amount:,.2f}"
