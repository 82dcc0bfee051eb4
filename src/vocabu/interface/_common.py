"""Helpers shared by the CLI command modules."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import typer

from vocabu.application.config import AppConfig, resolve_config
from vocabu.application.factory import get_learning_service
from vocabu.application.service import LearningService
from vocabu.domain.exceptions import NotFoundError, ValidationError, VocabuError

logger = logging.getLogger(__name__)


def _resolve_with_overrides(**overrides: Any) -> AppConfig:
    """Resolve config, letting non-None CLI values win."""
    return resolve_config({k: v for k, v in overrides.items() if v is not None})


def config_from_context(ctx: typer.Context) -> AppConfig:
    obj = ctx.obj or {}
    return _resolve_with_overrides(data_dir=obj.get("data_dir"), verbose=obj.get("verbose"))


def service_from_context(ctx: typer.Context) -> LearningService:
    return get_learning_service(config_from_context(ctx))


def humanize_error(e: Exception) -> str:
    """Turn an exception into a short message for the terminal."""
    if isinstance(e, NotFoundError):
        return f"Unknown word '{e.item_id}'. Load a plan that contains it first."
    if isinstance(e, OSError):
        name = getattr(e, "filename", None)
        return f"Cannot read {name}: {e.strerror}" if name else str(e)
    return str(e)


@contextmanager
def error_boundary(config: AppConfig) -> Iterator[None]:
    """
    Top-level handler for core errors raised by a command.

    Input errors are reported with exit code 2. Anything else from the core
    prints a generic notice and offers to wipe all saved state.
    """
    try:
        yield
    except (ValidationError, NotFoundError) as e:
        typer.secho(f"Error: {humanize_error(e)}", fg="red", err=True)
        raise typer.Exit(2) from e
    except VocabuError as e:
        logger.error(f"Unhandled error: {e}", exc_info=True)
        typer.secho(
            "Something went wrong. Your saved state may be damaged.", fg="red", err=True
        )
        typer.secho(str(e), err=True)
        if typer.confirm("Clear all saved progress and start fresh?", default=False):
            get_learning_service(config).reset_all()
            typer.secho("All saved state cleared.", fg="yellow")
        raise typer.Exit(1) from e
