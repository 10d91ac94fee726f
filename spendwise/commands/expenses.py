"""Expense commands (add, delete, list)."""

import asyncio

from rich.table import Table

from spendwise.commands.common import (
    console,
    fail,
    header_style,
    load_expenses,
    logged_in_state,
    parse_filters,
    sync_client_for,
)
from spendwise.dates import normalize_user_date, today_iso
from spendwise.domain.aggregation import filter_expenses, get_total
from spendwise.domain.models import Category, Expense, IsoDate, Money, format_money, validate_amount
from spendwise.store.sync import SyncClient, SyncResult


async def _add(client: SyncClient, amount: Money, category: Category, date: IsoDate, note: str | None) -> SyncResult:
    async with client:
        await client.load()
        return await client.add(amount, category, date, note)


async def _delete(client: SyncClient, expense_id: str) -> SyncResult:
    async with client:
        await client.load()
        return await client.delete(expense_id)


def add_command(amount: str, category: str, date: str | None = None, note: str | None = None) -> None:
    """Record an expense.

    Args:
        amount: Amount spent (must be positive).
        category: Category name (case-insensitive).
        date: Date of the expense (defaults to today).
        note: Optional free-text note.
    """
    try:
        parsed_amount = validate_amount(amount)
        parsed_category = Category.parse(category)
        parsed_date = normalize_user_date(date) if date else today_iso()
    except ValueError as e:
        fail(str(e))

    state = logged_in_state()
    client = sync_client_for(state)
    result = asyncio.run(_add(client, parsed_amount, parsed_category, parsed_date, note))

    if not result.ok:
        fail(f"Could not save expense: {result.error}")

    console.print("[green]✓[/green] Expense added:")
    console.print(f"  Date: {parsed_date}")
    console.print(f"  Category: {parsed_category.style.icon} {parsed_category.value}")
    console.print(f"  Amount: {format_money(parsed_amount)}")
    if note:
        console.print(f"  Note: {note}")
    if result.expense is not None:
        console.print(f"  [dim]ID: {result.expense.id}[/dim]")


def delete_command(expense_id: str) -> None:
    """Delete an expense by id."""
    state = logged_in_state()
    client = sync_client_for(state)
    result = asyncio.run(_delete(client, expense_id))

    if not result.ok:
        fail(f"Could not delete expense: {result.error}")

    if result.expense is None:
        console.print(f"[yellow]Expense {expense_id} was not in your list (delete sent anyway)[/yellow]")
        return

    expense = result.expense
    console.print(f"[green]✓[/green] Deleted {expense.date} {expense.category.value} {format_money(expense.amount)}")


def render_expense_table(expenses: list[Expense], title: str, style: str) -> Table:
    table = Table(title=title, header_style=style)
    table.add_column("Date", style="cyan")
    table.add_column("Category")
    table.add_column("Amount", justify="right")
    table.add_column("Note", style="white")
    table.add_column("ID", style="dim")

    for expense in expenses:
        color = expense.category.style.color
        table.add_row(
            expense.date,
            f"[{color}]{expense.category.style.icon} {expense.category.value}[/{color}]",
            format_money(expense.amount),
            expense.note or "",
            expense.id,
        )
    return table


def list_command(
    category: str | None = None,
    start: str | None = None,
    end: str | None = None,
    limit: int = 50,
    all: bool = False,
) -> None:
    """List expenses, newest first, optionally filtered."""
    try:
        filters = parse_filters(category, start, end)
    except ValueError as e:
        fail(str(e))

    state = logged_in_state()
    state.filters = filters
    expenses = filter_expenses(load_expenses(state), state.filters)

    if not expenses:
        console.print("[yellow]No expenses found[/yellow]")
        return

    shown = expenses if all else expenses[:limit]
    title = f"Expenses (showing {len(shown)} of {len(expenses)})"
    console.print(render_expense_table(shown, title, header_style(state)))
    console.print(f"[bold]Total:[/bold] {format_money(get_total(expenses))}")
