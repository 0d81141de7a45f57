"""Command line interface for HabitGrid."""

from __future__ import annotations

from contextlib import contextmanager
from datetime import date, datetime
from pathlib import Path
from typing import Iterator, Optional

import click

from .config import THEMES, BaseConfig
from .context import AppContext, create_app_context
from .logging_config import setup_logging
from .services import calendar
from .services.clipboard import (
    ClipboardError,
    FileClipboard,
    export_to_clipboard,
    import_from_clipboard,
)
from .services.collection import (
    HabitNotFoundError,
    create_habit,
    delete_habit,
    find_habit,
    habit_from_import,
    reorder_habits,
    toggle_completion,
)
from .services.export_csv import (
    NoHabitsError,
    export_all_habits_json,
    export_all_habits_payload,
    export_habit_json,
    export_habit_payload,
    write_export,
)
from .services.habits import habit_stats
from .services.importers import ImportStatus


@contextmanager
def _domain_errors() -> Iterator[None]:
    """Surface domain failures as CLI errors instead of tracebacks."""

    try:
        yield
    except (HabitNotFoundError, NoHabitsError, ClipboardError, IndexError, ValueError) as exc:
        message = exc.args[0] if exc.args else str(exc)
        raise click.ClickException(str(message)) from exc


def _today(ctx: click.Context) -> date:
    return calendar.current_date(ctx.meta.get("habitgrid.today"))


@click.group()
@click.option(
    "--today",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    default=None,
    hidden=True,
    help="Pin the reference date (YYYY-MM-DD).",
)
@click.pass_context
def cli(ctx: click.Context, today: Optional[datetime]) -> None:
    """Track habits, view streaks and move data in and out as CSV/JSON."""

    if ctx.obj is None:
        config = BaseConfig()
        setup_logging(config)
        ctx.obj = create_app_context(config)
    if today is not None:
        ctx.meta["habitgrid.today"] = today.date()


@cli.command("add")
@click.argument("name")
@click.option("--theme", type=click.Choice(THEMES), default=None, help="Colour tag.")
@click.pass_obj
def add_habit(app: AppContext, name: str, theme: Optional[str]) -> None:
    """Create a new habit."""

    with _domain_errors():
        habits = create_habit(app.habit_store.load_habits(), name, theme or app.config.DEFAULT_THEME)
        app.habit_store.save_habits(habits)
    click.echo(f"Added {habits[-1].name!r} ({habits[-1].id})")


@cli.command("list")
@click.pass_obj
def list_habits(app: AppContext) -> None:
    """List habits in display order."""

    habits = app.habit_store.load_habits()
    if not habits:
        click.echo("No habits yet.")
        return
    for habit in habits:
        done = sum(1 for flag in habit.completions.values() if flag)
        click.echo(f"{habit.order:>3}  {habit.id}  {habit.name}  [{habit.theme.value}]  {done} days")


@cli.command("stats")
@click.argument("habit_ref", required=False)
@click.pass_context
def show_stats(ctx: click.Context, habit_ref: Optional[str]) -> None:
    """Show streaks and completion rates."""

    app: AppContext = ctx.obj
    habits = app.habit_store.load_habits()
    with _domain_errors():
        selected = [find_habit(habits, habit_ref)] if habit_ref else habits
    today = _today(ctx)
    for habit in selected:
        stats = habit_stats(habit, today=today)
        click.echo(
            f"{stats.name}: current {stats.current_streak}, longest {stats.longest_streak}, "
            f"this week {stats.weekly_rate}%, overall {stats.overall_rate}%"
        )


@cli.command("toggle")
@click.argument("habit_ref")
@click.argument("day", required=False)
@click.pass_context
def toggle_day(ctx: click.Context, habit_ref: str, day: Optional[str]) -> None:
    """Mark or unmark a day (defaults to today)."""

    app: AppContext = ctx.obj
    key = day or calendar.day_key(_today(ctx))
    with _domain_errors():
        habits = app.habit_store.load_habits()
        habit = find_habit(habits, habit_ref)
        habits = toggle_completion(habits, habit.id, key)
        app.habit_store.save_habits(habits)
        updated = find_habit(habits, habit.id)
    state = "done" if updated.completions.get(key) else "not done"
    click.echo(f"{updated.name} on {key}: {state}")


@cli.command("grid")
@click.argument("habit_ref")
@click.option("--weeks", type=click.IntRange(min=1), default=8, show_default=True)
@click.pass_context
def show_grid(ctx: click.Context, habit_ref: str, weeks: int) -> None:
    """Print the most recent weeks of one habit, current week first."""

    app: AppContext = ctx.obj
    with _domain_errors():
        habit = find_habit(app.habit_store.load_habits(), habit_ref)
    today = _today(ctx)
    click.echo(f"{'Week':<17}" + " ".join(calendar.DAY_NAMES))
    for week in calendar.window(today, weeks):
        cells = []
        for day in week:
            if day > today:
                cells.append("   ")
            elif habit.completions.get(calendar.day_key(day)):
                cells.append(" x ")
            else:
                cells.append(" . ")
        click.echo(f"{calendar.week_label(week):<17}" + " ".join(cells))


@cli.command("export")
@click.argument("habit_ref", required=False)
@click.option("--all", "export_all", is_flag=True, help="Export every habit.")
@click.option("--json", "as_json", is_flag=True, help="Pure JSON instead of JSON+CSV.")
@click.option("--output", type=click.Path(dir_okay=False, path_type=Path), default=None)
@click.pass_context
def export_command(
    ctx: click.Context,
    habit_ref: Optional[str],
    export_all: bool,
    as_json: bool,
    output: Optional[Path],
) -> None:
    """Export one habit (or all) to the clipboard file or OUTPUT."""

    app: AppContext = ctx.obj
    habits = app.habit_store.load_habits()
    today = _today(ctx)
    with _domain_errors():
        if export_all:
            if as_json:
                payload = export_all_habits_json(habits)
            else:
                payload = export_all_habits_payload(habits, today=today)
        else:
            if not habit_ref:
                raise click.UsageError("Give a habit name/id or use --all.")
            habit = find_habit(habits, habit_ref)
            if as_json:
                payload = export_habit_json(habit)
            else:
                payload = export_habit_payload(habit, today=today)

        if output is not None:
            write_export(payload, output)
            click.echo(f"Export written: {output}")
        else:
            export_to_clipboard(app.clipboard, payload)
            click.echo("Export copied to clipboard.")


@cli.command("import")
@click.option("--format", "fmt", type=click.Choice(["csv", "json"]), default="csv", show_default=True)
@click.option("--input", "input_path", type=click.Path(dir_okay=False, path_type=Path), default=None)
@click.option("--theme", type=click.Choice(THEMES), default=None)
@click.pass_context
def import_command(
    ctx: click.Context, fmt: str, input_path: Optional[Path], theme: Optional[str]
) -> None:
    """Import a habit from the clipboard file or INPUT."""

    app: AppContext = ctx.obj
    source = FileClipboard(input_path) if input_path is not None else app.clipboard
    with _domain_errors():
        outcome = import_from_clipboard(
            source,
            fmt=fmt,  # type: ignore[arg-type]
            theme=theme or app.config.DEFAULT_THEME,
            today=_today(ctx),
        )
    if outcome.status is ImportStatus.FAILED or outcome.data is None:
        raise click.ClickException(outcome.message)
    if outcome.used_fallback:
        click.echo(f"Warning: {outcome.message}", err=True)

    habits = habit_from_import(app.habit_store.load_habits(), outcome.data)
    app.habit_store.save_habits(habits)
    click.echo(f"Imported {habits[-1].name!r} with {outcome.data.completed_days} completed days.")


@cli.command("reorder")
@click.argument("start", type=int)
@click.argument("end", type=int)
@click.pass_obj
def reorder_command(app: AppContext, start: int, end: int) -> None:
    """Move the habit at position START to position END."""

    with _domain_errors():
        habits = reorder_habits(app.habit_store.load_habits(), start, end)
        app.habit_store.save_habits(habits)
    click.echo(", ".join(h.name for h in habits))


@cli.command("delete")
@click.argument("habit_ref")
@click.confirmation_option(prompt="Delete this habit and its history?")
@click.pass_obj
def delete_command(app: AppContext, habit_ref: str) -> None:
    """Delete a habit."""

    with _domain_errors():
        habits = app.habit_store.load_habits()
        habit = find_habit(habits, habit_ref)
        app.habit_store.save_habits(delete_habit(habits, habit.id))
    click.echo(f"Deleted {habit.name!r}")


def main() -> None:
    cli(prog_name="habitgrid")


if __name__ == "__main__":  # pragma: no cover
    main()
