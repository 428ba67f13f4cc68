"""AI insights CLI commands: suggestions, deadlines, schedule, chat."""

import json
from pathlib import Path

import click
from rich.console import Console
from rich.markdown import Markdown
from rich.table import Table

from cli.utils import get_components

console = Console()


def _load_tasks(path: str | None) -> list:
    """Read a JSON array of task objects."""
    from habits.models import Task

    if not path:
        return []
    try:
        raw = json.loads(Path(path).read_text())
    except (OSError, json.JSONDecodeError) as e:
        raise click.BadParameter(f"cannot read tasks from {path}: {e}", param_hint="--tasks")
    if not isinstance(raw, list):
        raise click.BadParameter("tasks file must hold a JSON array", param_hint="--tasks")
    try:
        return [Task.from_dict(t) for t in raw]
    except (KeyError, TypeError, ValueError) as e:
        raise click.BadParameter(f"invalid task entry: {e}", param_hint="--tasks")


def _engine():
    return get_components(with_insights=True)["insights"]


def _fail(e: Exception):
    console.print(f"[red]AI error:[/] {e}")
    raise SystemExit(1)


tasks_option = click.option(
    "--tasks", "tasks_file", type=click.Path(exists=True, dir_okay=False),
    default=None, help="JSON file with the current task list",
)


@click.group()
def insights():
    """Habit-personalized AI study insights."""
    pass


@insights.command("suggest")
@tasks_option
@click.pass_obj
def insights_suggest(obj, tasks_file):
    """Suggest 3-5 new study tasks."""
    from insights import InsightsError

    tasks = _load_tasks(tasks_file)
    try:
        suggestions = _engine().suggest_tasks(obj["user_id"], tasks)
    except InsightsError as e:
        _fail(e)

    if not suggestions:
        console.print("No suggestions returned.")
        return

    table = Table(title="Suggested Tasks")
    table.add_column("Title")
    table.add_column("Category", style="cyan")
    table.add_column("Priority", width=8)
    table.add_column("Minutes", justify="right", width=7)
    table.add_column("Description", style="dim")
    for s in suggestions:
        table.add_row(
            str(s.get("title", "")),
            str(s.get("category", "")),
            str(s.get("priority", "")),
            str(s.get("estimatedDuration", "")),
            str(s.get("description", ""))[:80],
        )
    console.print(table)


@insights.command("deadline")
@click.argument("title")
@click.option("--category", "-c", required=True)
@click.option("--priority", type=click.Choice(["Low", "Medium", "High"]), default="Medium")
@click.option("--description", default="")
@tasks_option
@click.pass_obj
def insights_deadline(obj, title, category, priority, description, tasks_file):
    """Predict a realistic deadline for a new task."""
    from insights import InsightsError

    task = {
        "title": title,
        "category": category,
        "priority": priority,
        "description": description,
    }
    try:
        result = _engine().predict_deadline(obj["user_id"], task, _load_tasks(tasks_file))
    except InsightsError as e:
        _fail(e)

    if "error" in result:
        console.print(f"[yellow]{result['error']}[/]")
        console.print(result.get("raw_response", ""), markup=False)
        return
    console.print(f"[bold]Suggested deadline:[/] {result['suggested_deadline']}")
    console.print(f"[bold]Confidence:[/] {result['confidence']}")
    console.print(result["reasoning"], markup=False)


@insights.command("schedule")
@tasks_option
@click.pass_obj
def insights_schedule(obj, tasks_file):
    """Build a 7-day study schedule for incomplete tasks."""
    from insights import InsightsError

    try:
        result = _engine().optimize_schedule(obj["user_id"], _load_tasks(tasks_file))
    except InsightsError as e:
        _fail(e)

    if "error" in result:
        console.print(f"[yellow]{result['error']}[/]")
        return

    table = Table(title="Study Schedule")
    table.add_column("Day", style="cyan")
    table.add_column("Tasks")
    for day in result["schedule"]:
        entries = day.get("sessions", []) if isinstance(day, dict) else []
        table.add_row(
            str(day.get("day", "")) if isinstance(day, dict) else str(day),
            "\n".join(
                f"{t.get('time', '')} {t.get('task', '')}".strip()
                for t in entries if isinstance(t, dict)
            ),
        )
    console.print(table)
    for tip in result["tips"]:
        console.print(f"  - {tip}")
    console.print(f"Total study hours: {result['total_study_hours']}")


@insights.command("chat")
@click.argument("message")
@click.pass_obj
def insights_chat(obj, message):
    """One-shot question to the study assistant."""
    from insights import InsightsError

    try:
        result = _engine().chat(obj["user_id"], message)
    except (InsightsError, ValueError) as e:
        _fail(e)

    console.print(Markdown(result["response"]))
    console.print(f"[dim]via {result['provider']}[/]")
