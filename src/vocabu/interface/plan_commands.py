"""`vocabu plan` subgroup: load, build and inspect plans."""

import json
from pathlib import Path
from typing import Annotated, Literal

import typer

from vocabu.application.planning import build_plan, compute_recommendation
from vocabu.application.synchronizer import SyncResult
from vocabu.application.utils.text import load_structured, parse_word_list
from vocabu.domain.plan import Plan, Recommendation, VocabItem
from vocabu.interface._common import (
    config_from_context,
    error_boundary,
    humanize_error,
    service_from_context,
)

plan_app = typer.Typer(help="Create, load and inspect learning plans.", no_args_is_help=True)


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        typer.secho(f"Error: {humanize_error(e)}", fg="red", err=True)
        raise typer.Exit(2) from e


def _report(result: SyncResult) -> None:
    typer.secho(
        f"Plan applied: {len(result.pool)} words ({len(result.seeded)} new), "
        f"daily target {result.target}.",
        fg="green",
    )


@plan_app.command("load")
def load(
    ctx: typer.Context,
    path: Annotated[Path, typer.Argument(help="Plan file (YAML or JSON).")],
):
    """Load a plan file and merge its words into the review pool."""
    config = config_from_context(ctx)
    text = _read_text(path)
    with error_boundary(config):
        plan = Plan.parse(load_structured(text))
        result = service_from_context(ctx).apply_plan(plan)
    _report(result)


@plan_app.command("new")
def new(
    ctx: typer.Context,
    words: Annotated[
        Path | None,
        typer.Option(help="Word list, one 'term<TAB>translation' or 'term;translation' per line."),
    ] = None,
    text: Annotated[
        Path | None, typer.Option(help="Your own text; its most frequent words come first.")
    ] = None,
    context: Annotated[
        Literal["law", "travel", "it", "senior"], typer.Option(help="Learning context.")
    ] = "travel",
    style: Annotated[
        Literal["simple", "professional", "academic"], typer.Option(help="Example style.")
    ] = "simple",
    level: Annotated[
        Literal["A2", "B1", "B2"], typer.Option(help="Placement level.")
    ] = "B1",
    horizon: Annotated[int, typer.Option(help="Plan horizon in days.")] = 30,
    per_day: Annotated[
        int | None, typer.Option(help="Override the recommended words per day.")
    ] = None,
    comfort: Annotated[
        bool, typer.Option("--comfort", help="Comfort mode: gentler pace and intervals.")
    ] = False,
    name: Annotated[str | None, typer.Option(help="Plan name.")] = None,
):
    """Build a plan from a word list and/or your own text, then apply it."""
    if words is None and text is None:
        typer.secho("Provide --words and/or --text.", fg="red", err=True)
        raise typer.Exit(2)

    config = config_from_context(ctx)
    word_text = _read_text(words) if words else ""
    user_text = _read_text(text) if text else None

    with error_boundary(config):
        items = [
            VocabItem(term=term, translation=translation)
            for term, translation in parse_word_list(word_text)
        ]
        reco = compute_recommendation(level, horizon, comfort=comfort)
        if per_day is not None:
            n = max(0, per_day)
            reco = Recommendation(per_day=n, per_week=n * 7, total=n * horizon)
        plan = build_plan(
            items,
            reco,
            context=context,
            style=style,
            horizon=horizon,
            user_text=user_text,
            comfort_mode=comfort,
            name=name,
        )
        result = service_from_context(ctx).apply_plan(plan)
    _report(result)


@plan_app.command("show")
def show(
    ctx: typer.Context,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """Show the current plan."""
    service = service_from_context(ctx)
    plan = service.plan
    if plan is None:
        typer.secho("No plan yet. Run 'vocabu plan new' or 'vocabu plan load'.", fg="yellow")
        raise typer.Exit(1)

    if json_output:
        typer.echo(json.dumps(plan.to_dict(), indent=2, ensure_ascii=False))
        return

    reco = plan.recommendation
    title = plan.name or plan.created_at
    typer.echo(f"Plan: {title}  Context: {plan.context}  Style: {plan.style}")
    if reco:
        typer.echo(f"Pace: {reco.per_day}/day, {reco.per_week}/week, {reco.total} total")
    if plan.comfort_mode:
        typer.echo("Comfort mode: on")
    typer.echo(f"Today ({len(plan.today_set)}):")
    for item in plan.today_set:
        suffix = f" - {item.translation}" if item.translation else ""
        typer.echo(f"  {item.term}{suffix}")
    typer.echo(f"Pool: {len(plan.all_item_ids())} words")
