"""Report commands for viewing spending figures."""

from spendwise.commands.common import console, fail, load_expenses, logged_in_state, parse_filters
from spendwise.dates import short_day_label, today_iso
from spendwise.domain.aggregation import (
    ZERO,
    DailyTotal,
    calculate_histogram_bar_length,
    category_percentages,
    daily_totals,
    filter_expenses,
    get_today_total,
    get_total,
    non_zero_breakdown,
)
from spendwise.domain.models import Category, Money, format_money

BAR_WIDTH = 30


def render_breakdown(breakdown: dict[Category, Money], histogram: bool) -> None:
    """Render the per-category lines, largest first.

    Args:
        breakdown: Non-zero category totals.
        histogram: Whether to show histogram bars.
    """
    percentages = category_percentages(breakdown)
    max_amount = max(breakdown.values())

    for category, amount in sorted(breakdown.items(), key=lambda item: item[1], reverse=True):
        label = f"{category.style.icon} {category.value}"
        line = f"  {label:18} {format_money(amount):>14} {percentages[category]:5.1f}%"
        if histogram:
            bar = "█" * calculate_histogram_bar_length(amount, max_amount, BAR_WIDTH)
            color = category.style.color
            line += f"  [{color}]{bar}[/{color}]"
        console.print(line)


def stats_command(
    category: str | None = None,
    start: str | None = None,
    end: str | None = None,
    histogram: bool = True,
) -> None:
    """Show totals and the category breakdown for the filtered expenses."""
    try:
        filters = parse_filters(category, start, end)
    except ValueError as e:
        fail(str(e))

    state = logged_in_state()
    state.filters = filters
    expenses = filter_expenses(load_expenses(state), state.filters)

    console.print("\n[bold]Spending summary[/bold]")
    if not filters.is_empty:
        parts = []
        if filters.category:
            parts.append(filters.category.value)
        if filters.start_date or filters.end_date:
            parts.append(f"{filters.start_date or '…'} to {filters.end_date or '…'}")
        console.print(f"[dim]Filtered: {', '.join(parts)}[/dim]")

    console.print(f"  Total expenses:   [bold]{format_money(get_total(expenses))}[/bold]")
    console.print(f"  Today's expenses: [bold]{format_money(get_today_total(expenses))}[/bold]")
    console.print(f"  Transactions:     [bold]{len(expenses)}[/bold]")

    breakdown = non_zero_breakdown(expenses)
    if not breakdown:
        console.print("\n[yellow]No expenses found[/yellow]")
        return

    console.print("\n[bold cyan]By category:[/bold cyan]")
    render_breakdown(breakdown, histogram)


def render_trend(totals: list[DailyTotal]) -> None:
    max_amount = max((day.total for day in totals), default=ZERO)
    for day in totals:
        bar = "█" * calculate_histogram_bar_length(day.total, max_amount, BAR_WIDTH)
        console.print(f"  {short_day_label(day.date):8} {format_money(day.total):>14}  [green]{bar}[/green]")


def trend_command(category: str | None = None) -> None:
    """Show daily totals for the last 7 days."""
    try:
        filters = parse_filters(category, None, None)
    except ValueError as e:
        fail(str(e))

    state = logged_in_state()
    state.filters = filters
    expenses = filter_expenses(load_expenses(state), state.filters)

    totals = daily_totals(expenses, today_iso())
    console.print(f"\n[bold]Last 7 days[/bold] [dim](to {totals[-1].date})[/dim]")
    render_trend(totals)
    console.print(f"  {'Week total':8} {format_money(Money(sum((day.total for day in totals), ZERO))):>14}")
