"""Export command for writing expense history to a spreadsheet."""

from datetime import datetime
from pathlib import Path

from spendwise.commands.common import console, fail, load_expenses, logged_in_state, parse_filters
from spendwise.dates import month_range
from spendwise.domain.aggregation import filter_expenses, get_total
from spendwise.domain.models import format_money
from spendwise.errors import EmptyExportError
from spendwise.export import expenses_for_month, export_filename, write_export


def export_command(
    month: str | None = None,
    start: str | None = None,
    end: str | None = None,
    output_dir: str | None = None,
) -> None:
    """Export one month (default: current) or an explicit date range to .xlsx."""
    if month and (start or end):
        fail("Use either --month or --from/--to, not both")

    try:
        if start or end:
            filters = parse_filters(None, start, end)
        else:
            month = month or datetime.now().strftime("%Y-%m")
            _, _, label = month_range(month)
    except ValueError as e:
        fail(str(e))

    state = logged_in_state()
    expenses = load_expenses(state)

    if start or end:
        selected = filter_expenses(expenses, filters)
        filename = export_filename(start=filters.start_date, end=filters.end_date)
        label = f"{filters.start_date or 'start'} to {filters.end_date or 'end'}"
    else:
        assert month is not None, "month must be set when no range is given"
        selected = expenses_for_month(expenses, month)
        filename = export_filename(month=month)

    directory = Path(output_dir).expanduser() if output_dir else Path.cwd()

    try:
        path = write_export(selected, directory / filename)
    except EmptyExportError:
        console.print(f"[yellow]No expenses found for {label}[/yellow]")
        return
    except OSError as e:
        fail(f"Export failed: {e}")

    console.print(f"[green]✓[/green] Exported {len(selected)} expenses ({format_money(get_total(selected))})")
    console.print(f"[dim]{path}[/dim]")
