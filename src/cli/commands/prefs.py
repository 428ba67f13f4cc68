"""Learning preference CLI commands."""

import click
from rich.console import Console
from rich.table import Table

from cli.utils import get_components

console = Console()


@click.group()
def prefs():
    """Stated learning preferences (study style, session length...)."""
    pass


@prefs.command("show")
@click.pass_obj
def prefs_show(obj):
    """List stored preferences."""
    c = get_components()
    preferences = c["queries"].get_preferences(obj["user_id"])

    if not preferences:
        console.print("No preferences set.")
        return

    table = Table(title="Learning Preferences")
    table.add_column("Key", style="cyan")
    table.add_column("Value")
    for key, value in preferences.items():
        table.add_row(key, value)
    console.print(table)


@prefs.command("set")
@click.argument("key")
@click.argument("value")
@click.pass_obj
def prefs_set(obj, key, value):
    """Set KEY to VALUE."""
    from habits import HabitStoreError

    c = get_components()
    try:
        c["store"].set_preference(obj["user_id"], key, value)
    except HabitStoreError as e:
        console.print(f"[red]Could not save preference:[/] {e}")
        raise SystemExit(1)
    console.print(f"[green]Saved {key}={value}[/]")
