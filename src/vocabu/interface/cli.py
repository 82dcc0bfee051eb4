"""Vocabu CLI: root commands and subgroup registration."""

import json
import logging
import sys
from pathlib import Path
from typing import Annotated, Literal

import typer

from vocabu.application.utils.text import load_structured
from vocabu.domain.exceptions import ValidationError
from vocabu.infrastructure.export import (
    dump_package,
    history_to_csv,
    import_package,
    plan_to_csv,
)
from vocabu.interface._common import (
    _resolve_with_overrides,
    config_from_context,
    error_boundary,
    humanize_error,
    service_from_context,
)

# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="vocabu: vocabulary learning with spaced repetition.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s:%(name)s:%(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Register subgroups
# ---------------------------------------------------------------------------

from vocabu.interface.plan_commands import plan_app  # noqa: E402

app.add_typer(plan_app, name="plan")

learn_app = typer.Typer(help="Record results from learning exercises.", no_args_is_help=True)
app.add_typer(learn_app, name="learn")

config_app = typer.Typer(help="Manage vocabu configuration.")
app.add_typer(config_app, name="config")

# Shortcuts accepted at the review prompt.
_GRADE_KEYS = {
    "a": "again",
    "1": "again",
    "h": "hard",
    "2": "hard",
    "g": "good",
    "3": "good",
    "e": "easy",
    "4": "easy",
}


# ---------------------------------------------------------------------------
# Global callback
# ---------------------------------------------------------------------------


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity. Repeat for more detail."
        ),
    ] = 0,
    data_dir: Annotated[
        Path | None, typer.Option(help="Where progress is stored. Defaults to config.")
    ] = None,
):
    """Global settings for vocabu."""
    ctx.ensure_object(dict)
    ctx.obj["data_dir"] = data_dir
    # Each -v adds one level on top of the default of 1
    ctx.obj["verbose"] = 1 + verbose if verbose else None
    config = config_from_context(ctx)
    if config.verbose > 1:
        logging.getLogger().setLevel(logging.DEBUG)


# ---------------------------------------------------------------------------
# Review
# ---------------------------------------------------------------------------


@app.command()
def queue(
    ctx: typer.Context,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """Show the words due for review today."""
    service = service_from_context(ctx)
    due = service.get_due_queue()

    if json_output:
        typer.echo(json.dumps({"items": due.item_ids, "fallback": due.is_fallback}))
        return

    if not due.item_ids:
        typer.secho("Nothing to review. Load a plan first.", fg="yellow")
        return
    if due.is_fallback:
        typer.secho("Nothing due today. Upcoming words:", fg="yellow")
    else:
        typer.echo(f"Due today: {len(due)}")
    items = service.plan.items_by_id() if service.plan else {}
    for item_id in due:
        item = items.get(item_id)
        typer.echo(f"  {item.term if item else item_id}")


@app.command()
def review(ctx: typer.Context):
    """[bold green]Review[/bold green] today's words one card at a time."""
    config = config_from_context(ctx)
    service = service_from_context(ctx)

    with error_boundary(config):
        session = service.start_session()
        service.set_ui_step("review")

        learned = session.learn_summary
        if learned.applied:
            typer.echo(
                f"Schedule updated from exercises: {learned.applied} words "
                f"({learned.due_today} today, {learned.later} later)"
            )
        if session.finished:
            typer.secho("Nothing due today. Great time to rest.", fg="green")
            return
        if session.is_fallback:
            typer.secho("Nothing due today, here are some upcoming words.", fg="yellow")

        items = service.plan.items_by_id() if service.plan else {}
        while not session.finished:
            item_id = session.current
            item = items.get(item_id)
            label = item.term if item else item_id
            typer.secho(f"\n[{session.progress_label()}] {label}", bold=True)
            answer = typer.prompt("again / hard / good / easy (q to stop)").strip().lower()
            if answer in ("q", "quit"):
                break
            try:
                feedback = session.grade_current_card(item_id, _GRADE_KEYS.get(answer, answer))
            except ValidationError as e:
                typer.secho(str(e), fg="red")
                continue
            if item and item.translation:
                typer.echo(f"  = {item.translation}")
            typer.echo(f"  next review {feedback.new_due_date} (+{feedback.new_interval}d)")

        snapshot = service.get_progress_snapshot()
        service.set_ui_step("progress")
    typer.secho(
        f"\nReviewed {len(session.reviewed)}. Today: {snapshot.done}/{snapshot.target}",
        fg="green",
    )


@app.command()
def grade(
    ctx: typer.Context,
    item: Annotated[str, typer.Argument(help="Word id (usually the lowercased term).")],
    grade: Annotated[str, typer.Argument(help="again, hard, good or easy.")],
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """Grade a single word without an interactive session."""
    config = config_from_context(ctx)
    service = service_from_context(ctx)
    with error_boundary(config):
        feedback = service.grade_current_card(item, grade)

    if json_output:
        typer.echo(
            json.dumps(
                {
                    "item": feedback.item_id,
                    "grade": feedback.grade.value,
                    "newDueDate": feedback.new_due_date.isoformat(),
                    "newInterval": feedback.new_interval,
                }
            )
        )
    else:
        typer.echo(
            f"{feedback.item_id}: next review {feedback.new_due_date} "
            f"(+{feedback.new_interval}d)"
        )


@app.command()
def progress(
    ctx: typer.Context,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """Show today's progress and review totals."""
    service = service_from_context(ctx)
    snapshot = service.get_progress_snapshot()
    stats = service.history.stats(service.tracker.read_today().day)

    if json_output:
        typer.echo(
            json.dumps(
                {
                    "done": snapshot.done,
                    "target": snapshot.target,
                    "dueCount": snapshot.due_count,
                    "todayReviewCount": snapshot.today_review_count,
                    "totalReviewCount": snapshot.total_review_count,
                    "byGrade": stats.by_grade,
                }
            )
        )
        return

    typer.echo(f"Today: {snapshot.done}/{snapshot.target} words")
    typer.echo(f"Due now: {snapshot.due_count}")
    typer.echo(
        f"Reviews today: {snapshot.today_review_count}  Total: {snapshot.total_review_count}"
    )
    if stats.total_count:
        typer.echo("  " + "  ".join(f"{g}: {n}" for g, n in stats.by_grade.items()))


# ---------------------------------------------------------------------------
# Learn subgroup
# ---------------------------------------------------------------------------


@learn_app.command("record")
def learn_record(
    ctx: typer.Context,
    word: Annotated[str, typer.Argument(help="Practiced word.")],
    quality: Annotated[int, typer.Argument(help="0 (wrong), 3 (hard), 4 (good) or 5 (easy).")],
):
    """Record an exercise result; applied at the start of the next review."""
    config = config_from_context(ctx)
    service = service_from_context(ctx)
    with error_boundary(config):
        log = service.learn_log.record(word, quality)
    typer.echo(f"Recorded {word.strip().lower()} ({len(log.items)} words logged today)")


# ---------------------------------------------------------------------------
# Export / import / reset
# ---------------------------------------------------------------------------


@app.command("export")
def export_cmd(
    ctx: typer.Context,
    fmt: Annotated[
        Literal["json", "plan-csv", "history-csv"],
        typer.Option("--format", "-f", help="json package, plan CSV or review history CSV."),
    ] = "json",
    output: Annotated[
        Path | None, typer.Option("--output", "-o", help="Write to a file instead of stdout.")
    ] = None,
):
    """Export saved state."""
    service = service_from_context(ctx)

    if fmt == "json":
        content = json.dumps(dump_package(service.repo), indent=2, ensure_ascii=False)
    elif fmt == "plan-csv":
        if service.plan is None:
            typer.secho("No plan to export.", fg="yellow", err=True)
            raise typer.Exit(1)
        content = plan_to_csv(service.plan, service.scheduler.cards)
    else:
        content = history_to_csv(service.history.events)

    if output is None:
        typer.echo(content)
    else:
        output.write_text(content, encoding="utf-8")
        typer.secho(f"Exported to {output}", fg="green")


@app.command("import")
def import_cmd(
    ctx: typer.Context,
    path: Annotated[Path, typer.Argument(help="Package produced by 'vocabu export'.")],
):
    """Import a JSON export package, replacing the entities it contains."""
    config = config_from_context(ctx)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        typer.secho(f"Error: {humanize_error(e)}", fg="red", err=True)
        raise typer.Exit(2) from e

    service = service_from_context(ctx)
    with error_boundary(config):
        written = import_package(service.repo, load_structured(text))
    typer.secho(f"Imported: {', '.join(written) or 'nothing'}", fg="green")


@app.command()
def reset(
    ctx: typer.Context,
    force: Annotated[bool, typer.Option("--force", "-f", help="Skip confirmation.")] = False,
):
    """Delete all saved plans, cards, progress and history."""
    if not force and not typer.confirm("Delete all saved progress?", default=False):
        raise typer.Exit(1)
    ok = service_from_context(ctx).reset_all()
    if ok:
        typer.secho("All saved state cleared.", fg="yellow")
    else:
        typer.secho("Some state could not be removed. See the log above.", fg="red")
        raise typer.Exit(1)


# ---------------------------------------------------------------------------
# Config subgroup
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show(ctx: typer.Context):
    """Display final resolved configuration."""
    obj = ctx.obj or {}
    config = _resolve_with_overrides(data_dir=obj.get("data_dir"), verbose=obj.get("verbose"))
    d = {k: str(v) if isinstance(v, Path) else v for k, v in config.model_dump().items()}
    typer.echo(json.dumps(d, indent=2))
