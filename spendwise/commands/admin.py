"""Admin commands for init, connection status and theme."""

import asyncio
import sys

from spendwise.commands.common import console, fail, sync_client_for
from spendwise.config import create_default_config, get_config_path
from spendwise.state import AppState, build_state
from spendwise.store.sync import SyncClient


def init_command(force: bool = False) -> None:
    """Create the spendwise config file."""
    config_path = get_config_path()

    if config_path.exists() and not force:
        console.print("[red]Initialization failed:[/red]", style="bold")
        console.print(f"  Config already exists: {config_path}")
        console.print("\n[yellow]Use 'spendwise init --force' to overwrite[/yellow]")
        sys.exit(1)

    try:
        create_default_config(config_path)
    except OSError as e:
        fail(f"Filesystem error: {e}")

    console.print("[green]✓[/green] Config file created (permissions: 600)")
    console.print(f"[dim]Config: {config_path}[/dim]")
    console.print("\n[cyan]Next: add your Supabase URL and anon key to the [supabase] section,[/cyan]")
    console.print("[cyan]or set SPENDWISE_SUPABASE_URL and SPENDWISE_SUPABASE_ANON_KEY.[/cyan]")


async def _probe(client: SyncClient) -> bool:
    async with client:
        return await client.probe()


def status_command() -> None:
    """Check whether the backend is reachable and who is logged in."""
    state = build_state()
    client = sync_client_for(state)
    online = asyncio.run(_probe(client))

    if online:
        console.print("[green]● Online[/green]")
    else:
        console.print("[red]● Offline[/red]")

    if state.session.is_authenticated:
        session = state.session.session
        assert session is not None
        console.print(f"[dim]Logged in as {session.email or session.user_id}[/dim]")
    else:
        console.print("[dim]Not logged in[/dim]")


def theme_command(theme: str | None = None) -> None:
    """Show, set or toggle the theme preference."""
    state: AppState = build_state()

    if theme is None:
        console.print(f"Theme: [bold]{state.theme}[/bold]")
        return

    try:
        if theme == "toggle":
            new_theme = state.toggle_theme()
        else:
            new_theme = state.set_theme(theme)
    except ValueError as e:
        fail(str(e))
    except OSError as e:
        fail(f"Could not save theme: {e}")

    console.print(f"[green]✓[/green] Theme set to {new_theme}")
