"""Domain models and types for spendwise.

This package contains the functional core:
- Pure functions with no side effects
- No I/O operations
- Easy to test
- Business logic separated from infrastructure
"""

from spendwise.domain.models import Category, Expense, ExpenseFilters, IsoDate, Money

__all__ = ["Category", "Expense", "ExpenseFilters", "IsoDate", "Money"]
