"""AI assistant commands (ask, insights, api key)."""

from rich.markdown import Markdown
from rich.panel import Panel

from spendwise.commands.common import console, fail, load_expenses, logged_in_state
from spendwise.config import get_ai_api_key, set_ai_api_key
from spendwise.errors import AdvisorError, MissingApiKeyError, RateLimitError
from spendwise.integrations.gemini import chat_with_advisor, generate_insights


def render_advisor_error(error: AdvisorError) -> None:
    """Print an assistant failure with a message matching its cause."""
    if isinstance(error, MissingApiKeyError):
        console.print("[yellow]No AI API key set.[/yellow]")
        console.print("[dim]Get a Gemini API key and store it with 'spendwise apikey YOUR_KEY'.[/dim]")
    elif isinstance(error, RateLimitError):
        console.print(f"[yellow]{error}[/yellow]")
    else:
        console.print(f"[red]Advisor error: {error}[/red]")


def ask_command(question: str) -> None:
    """Ask the assistant a question about your spending."""
    state = logged_in_state()
    api_key = get_ai_api_key(state.config_path) or ""
    expenses = load_expenses(state)

    with console.status("Thinking..."):
        try:
            answer = chat_with_advisor(question, expenses, api_key)
        except AdvisorError as e:
            render_advisor_error(e)
            raise SystemExit(1) from e

    console.print(Panel(Markdown(answer), title="SpendWise Advisor", border_style="cyan"))


def insights_command() -> None:
    """Get three quick saving tips from the assistant."""
    state = logged_in_state()
    api_key = get_ai_api_key(state.config_path) or ""
    expenses = load_expenses(state)

    with console.status("Analysing your spending..."):
        try:
            tips = generate_insights(expenses, api_key)
        except AdvisorError as e:
            render_advisor_error(e)
            raise SystemExit(1) from e

    console.print(Panel(Markdown(tips), title="AI Insights", border_style="magenta"))


def apikey_command(api_key: str | None = None, clear: bool = False) -> None:
    """Store, clear or show the status of the locally-held AI API key."""
    if clear:
        set_ai_api_key("")
        console.print("[green]✓[/green] AI API key removed")
        return

    if api_key:
        if not api_key.strip():
            fail("API key cannot be empty")
        set_ai_api_key(api_key.strip())
        console.print("[green]✓[/green] AI API key saved (stored locally, sent only to the AI provider)")
        return

    if get_ai_api_key():
        console.print("AI API key is [green]set[/green]")
    else:
        console.print("AI API key is [yellow]not set[/yellow]")
