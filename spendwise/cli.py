"""CLI entry point for spendwise."""

import typer

from spendwise.commands.admin import init_command, status_command, theme_command
from spendwise.commands.advisor import apikey_command, ask_command, insights_command
from spendwise.commands.auth import login_command, logout_command, oauth_command, signup_command, whoami_command
from spendwise.commands.expenses import add_command, delete_command, list_command
from spendwise.commands.export import export_command
from spendwise.commands.report import stats_command, trend_command
from spendwise.log import configure_logging

app = typer.Typer(
    name="spendwise",
    help="SpendWise - track your expenses from the terminal",
    add_completion=False,
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """SpendWise - track your expenses from the terminal."""
    configure_logging(verbose)


@app.command(name="init")
def init(
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite existing config"),
) -> None:
    """Create the spendwise configuration file."""
    init_command(force)


@app.command()
def login(
    email: str,
    password: str = typer.Option(..., prompt=True, hide_input=True, help="Account password"),
) -> None:
    """Log in with your email and password."""
    login_command(email, password)


@app.command()
def signup(
    email: str,
    password: str = typer.Option(
        ..., prompt=True, hide_input=True, confirmation_prompt=True, help="Password for the new account"
    ),
) -> None:
    """Create a new account."""
    signup_command(email, password)


@app.command()
def oauth(
    provider: str = typer.Argument(..., help="OAuth provider (google or github)"),
    redirect_to: str = typer.Option(None, "--redirect-to", help="URL to return to after signing in"),
) -> None:
    """Print the browser link to sign in with an OAuth provider."""
    oauth_command(provider, redirect_to)


@app.command()
def logout() -> None:
    """Log out and forget the saved session."""
    logout_command()


@app.command()
def whoami() -> None:
    """Show who is logged in."""
    whoami_command()


@app.command()
def add(
    amount: str = typer.Argument(..., help="Amount spent"),
    category: str = typer.Argument(..., help="Food, Travel, Shopping, Rent, Entertainment, Health, Education or Others"),
    date: str = typer.Option(None, "--date", "-d", help="Date of the expense (default: today)"),
    note: str = typer.Option(None, "--note", "-n", help="Optional note"),
) -> None:
    """Record an expense."""
    add_command(amount, category, date, note)


@app.command()
def delete(expense_id: str = typer.Argument(..., help="Expense ID (from 'spendwise list')")) -> None:
    """Delete an expense."""
    delete_command(expense_id)


@app.command(name="list")
def list_expenses(
    category: str = typer.Option(None, "--category", "-c", help="Only this category"),
    start: str = typer.Option(None, "--from", help="Start date (inclusive)"),
    end: str = typer.Option(None, "--to", help="End date (inclusive)"),
    limit: int = typer.Option(50, help="Maximum expenses to show"),
    all: bool = typer.Option(False, "--all", "-a", help="Show all matching expenses"),
) -> None:
    """List your expenses, newest first."""
    list_command(category, start, end, limit, all)


@app.command()
def stats(
    category: str = typer.Option(None, "--category", "-c", help="Only this category"),
    start: str = typer.Option(None, "--from", help="Start date (inclusive)"),
    end: str = typer.Option(None, "--to", help="End date (inclusive)"),
    histogram: bool = typer.Option(True, help="Show histogram of your spending"),
) -> None:
    """Show totals and your spending by category."""
    stats_command(category, start, end, histogram)


@app.command()
def trend(
    category: str = typer.Option(None, "--category", "-c", help="Only this category"),
) -> None:
    """Show your daily spending over the last 7 days."""
    trend_command(category)


@app.command()
def export(
    month: str = typer.Option(None, "--month", help="Month to export (YYYY-MM, default: current)"),
    start: str = typer.Option(None, "--from", help="Start date of a custom range"),
    end: str = typer.Option(None, "--to", help="End date of a custom range"),
    output_dir: str = typer.Option(None, "--output", "-o", help="Directory to write to (default: current)"),
) -> None:
    """Export your expenses to an Excel file."""
    export_command(month, start, end, output_dir)


@app.command()
def ask(question: str = typer.Argument(..., help="Question about your spending")) -> None:
    """Ask the AI advisor about your spending."""
    ask_command(question)


@app.command()
def insights() -> None:
    """Get quick saving tips from the AI advisor."""
    insights_command()


@app.command()
def apikey(
    api_key: str = typer.Argument(None, help="Gemini API key to store locally"),
    clear: bool = typer.Option(False, "--clear", help="Remove the stored key"),
) -> None:
    """Store or check your AI API key."""
    apikey_command(api_key, clear)


@app.command()
def status() -> None:
    """Check the connection to the backend."""
    status_command()


@app.command()
def theme(
    value: str = typer.Argument(None, help="'light', 'dark' or 'toggle'"),
) -> None:
    """Show or change the colour theme."""
    theme_command(value)


if __name__ == "__main__":
    app()
