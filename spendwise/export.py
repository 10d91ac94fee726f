"""Spreadsheet export of expense history."""

import logging
from collections.abc import Sequence
from pathlib import Path

import pandas as pd

from spendwise.dates import month_range
from spendwise.domain.aggregation import filter_expenses
from spendwise.domain.models import Expense, ExpenseFilters, IsoDate
from spendwise.errors import EmptyExportError

logger = logging.getLogger(__name__)

EXPORT_COLUMNS = ["Date", "Category", "Amount", "Note"]
SHEET_NAME = "Expenses"


def export_filename(month: str | None = None, start: IsoDate | None = None, end: IsoDate | None = None) -> str:
    """Build the export file name.

    Args:
        month: Month in YYYY-MM format; takes precedence over start/end.
        start: First day of an explicit range.
        end: Last day of an explicit range.

    Returns:
        expenses_YYYY_MM.xlsx, expenses_START_to_END.xlsx or expenses_all.xlsx.
    """
    if month:
        year, month_num = month.split("-")
        return f"expenses_{year}_{month_num}.xlsx"
    if start or end:
        return f"expenses_{start or 'start'}_to_{end or 'end'}.xlsx"
    return "expenses_all.xlsx"


def expenses_for_month(expenses: Sequence[Expense], month: str) -> list[Expense]:
    """Select the expenses dated within a YYYY-MM month."""
    first, last, _ = month_range(month)
    return filter_expenses(expenses, ExpenseFilters(start_date=first, end_date=last))


def build_export_frame(expenses: Sequence[Expense]) -> pd.DataFrame:
    """Tabulate expenses with the Date/Category/Amount/Note columns."""
    rows = [
        {
            "Date": expense.date,
            "Category": expense.category.value,
            "Amount": float(expense.amount),
            "Note": expense.note or "",
        }
        for expense in expenses
    ]
    return pd.DataFrame(rows, columns=EXPORT_COLUMNS)


def write_export(expenses: Sequence[Expense], path: Path) -> Path:
    """Write expenses to an .xlsx workbook.

    Raises:
        EmptyExportError: If there is nothing to export.
    """
    if not expenses:
        raise EmptyExportError("No expenses found for this period")

    path.parent.mkdir(parents=True, exist_ok=True)
    frame = build_export_frame(expenses)
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        frame.to_excel(writer, index=False, sheet_name=SHEET_NAME)
    logger.debug("Exported %d expenses to %s", len(frame), path)
    return path
