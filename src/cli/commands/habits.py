"""Habit CLI commands — record interactions, inspect learned habits."""

from datetime import datetime

import click
from rich.console import Console
from rich.table import Table

from cli.utils import get_components

console = Console()


def _task(task_id: str, category: str, deadline: str, priority: str, title: str | None):
    from habits.models import Task, parse_timestamp

    try:
        parsed = parse_timestamp(deadline)
    except ValueError:
        raise click.BadParameter(f"not an ISO date: {deadline}", param_hint="--deadline")
    return Task(
        id=task_id,
        title=title or task_id,
        category=category,
        deadline=parsed,
        priority=priority,
    )


def _task_options(func):
    func = click.option("--title", default=None, help="Task title")(func)
    func = click.option(
        "--priority",
        type=click.Choice(["Low", "Medium", "High"]),
        default="Medium",
        show_default=True,
    )(func)
    func = click.option("--deadline", required=True, help="ISO date or datetime")(func)
    func = click.option("--category", "-c", required=True, help="Task category")(func)
    func = click.argument("task_id")(func)
    return func


def _report(ok: bool, what: str):
    if ok:
        console.print(f"[green]Recorded {what}.[/]")
    else:
        console.print(f"[yellow]Could not record {what} (see logs).[/]")


@click.group()
def habits():
    """Habit learning (interactions and learned preferences)."""
    pass


@habits.command("complete")
@_task_options
@click.option("--at", "completed_at", default=None, help="Completion time (ISO), default now")
@click.pass_obj
def habits_complete(obj, task_id, category, deadline, priority, title, completed_at):
    """Record a task completion."""
    c = get_components()
    try:
        when = datetime.fromisoformat(completed_at) if completed_at else None
    except ValueError:
        raise click.BadParameter(f"not an ISO datetime: {completed_at}", param_hint="--at")
    ok = c["aggregator"].record_completion(
        obj["user_id"], _task(task_id, category, deadline, priority, title), when
    )
    _report(ok, "completion")


@habits.command("delay")
@_task_options
@click.option("--days", type=int, default=None, help="Days the deadline moves")
@click.option("--reason", default=None)
@click.pass_obj
def habits_delay(obj, task_id, category, deadline, priority, title, days, reason):
    """Record a task delay."""
    c = get_components()
    ok = c["aggregator"].record_delay(
        obj["user_id"],
        _task(task_id, category, deadline, priority, title),
        reason=reason,
        delay_days=days,
    )
    _report(ok, "delay")


@habits.command("skip")
@_task_options
@click.option("--reason", default=None)
@click.pass_obj
def habits_skip(obj, task_id, category, deadline, priority, title, reason):
    """Record a skipped task."""
    c = get_components()
    ok = c["aggregator"].record_skip(
        obj["user_id"], _task(task_id, category, deadline, priority, title), reason=reason
    )
    _report(ok, "skip")


@habits.command("create")
@_task_options
@click.option(
    "--source",
    type=click.Choice(["ai_suggestion", "manual_creation"]),
    default="manual_creation",
    show_default=True,
)
@click.pass_obj
def habits_create(obj, task_id, category, deadline, priority, title, source):
    """Record a task creation."""
    c = get_components()
    ok = c["aggregator"].record_creation(
        obj["user_id"], _task(task_id, category, deadline, priority, title), source=source
    )
    _report(ok, "creation")


@habits.command("feedback")
@click.argument("suggestion_id")
@click.option("--accept/--reject", "accepted", required=True)
@click.pass_obj
def habits_feedback(obj, suggestion_id, accepted):
    """Record accept/reject feedback on an AI suggestion."""
    c = get_components()
    ok = c["aggregator"].record_suggestion_feedback(obj["user_id"], suggestion_id, accepted)
    _report(ok, "suggestion feedback")


@habits.command("show")
@click.pass_obj
def habits_show(obj):
    """Show learned habits with confidence."""
    c = get_components()
    records = c["queries"].get_habits(obj["user_id"])

    if not records:
        console.print("Complete more tasks to build your learning profile!")
        return

    table = Table(title="Learned Habits")
    table.add_column("Habit")
    table.add_column("Confidence", justify="right")
    table.add_column("Data")
    table.add_column("Updated", style="dim", width=10)

    for h in records:
        table.add_row(
            h.habit_type.value.replace("_", " "),
            f"{h.confidence_score:.0%}",
            str(h.data.to_dict()),
            h.updated_at.isoformat()[:10],
        )

    console.print(table)


@habits.command("hours")
@click.option("--limit", "-n", type=int, default=None, help="Rows to show (config habits.top_n)")
@click.pass_obj
def habits_hours(obj, limit):
    """Most productive completion hours."""
    from habits.queries import format_hour

    c = get_components()
    n = c["config"].habits.top_n if limit is None else limit
    rows = c["queries"].get_top_hours(obj["user_id"], n)
    if not rows:
        console.print("No completion hours recorded yet.")
        return

    table = Table(title="Most Productive Hours")
    table.add_column("Hour")
    table.add_column("Tasks", justify="right")
    for r in rows:
        table.add_row(format_hour(r["hour"]), str(r["count"]))
    console.print(table)


@habits.command("categories")
@click.option("--limit", "-n", type=int, default=None, help="Rows to show (config habits.top_n)")
@click.pass_obj
def habits_categories(obj, limit):
    """Preferred task categories."""
    c = get_components()
    n = c["config"].habits.top_n if limit is None else limit
    rows = c["queries"].get_top_categories(obj["user_id"], n)
    if not rows:
        console.print("No categories recorded yet.")
        return

    table = Table(title="Preferred Categories")
    table.add_column("Category")
    table.add_column("Completed", justify="right")
    for r in rows:
        table.add_row(r["category"], str(r["count"]))
    console.print(table)


@habits.command("accuracy")
@click.pass_obj
def habits_accuracy(obj):
    """AI suggestion acceptance rate."""
    c = get_components()
    acc = c["queries"].get_suggestion_accuracy(obj["user_id"])
    console.print(f"Acceptance rate: {round(acc['accuracy'] * 100)}%")
    console.print(f"{acc['accepted']} accepted out of {acc['total']} suggestions")


@habits.command("insights")
@click.pass_obj
def habits_insights(obj):
    """Completion and on-time rates, recent activity."""
    c = get_components()
    data = c["queries"].get_learning_insights(obj["user_id"])
    if data is None:
        console.print("[yellow]No user selected.[/]")
        return

    console.print(f"Total interactions: {data['total_interactions']}")
    console.print(f"Completion rate: {data['completion_rate']:.0%}")
    console.print(f"On-time rate: {data['on_time_rate']:.0%}")
    console.print(f"Suggestion accuracy: {data['suggestion_accuracy']:.0%}")

    if data["recent_activity"]:
        table = Table(title="Recent Activity")
        table.add_column("When", style="cyan")
        table.add_column("Type")
        table.add_column("Task", style="dim")
        for a in data["recent_activity"]:
            table.add_row(a["created_at"][:16], a["interaction_type"], a["task_id"] or "-")
        console.print(table)

    strength = c["queries"].get_profile_strength(obj["user_id"])
    if strength:
        console.print("\n[bold]Learning profile strength:[/]")
        for s in strength:
            console.print(f"  {s['label']}: {s['percent']}%")


@habits.command("context")
@click.pass_obj
def habits_context(obj):
    """Print the personalization context sent to the AI."""
    c = get_components()
    console.print(c["context"].build_for_user(obj["user_id"]), markup=False)
