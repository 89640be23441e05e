from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import typer

from covbadge._meta import logger
from covbadge.cli.exit_codes import EXIT_CONFIG
from covbadge.core.config import LOG_FORMAT
from covbadge.core.settings import Settings, load_settings
from covbadge.errors import ConfigError


@dataclass(slots=True)
class CliState:
    """Global options collected by the root callback."""

    config: Path | None = None
    quiet: bool = False
    verbose: bool = False


def configure_logging(*, quiet: bool, verbose: bool) -> None:
    """Configure logging based on *quiet*/*verbose*."""
    level = logging.ERROR if quiet else (logging.DEBUG if verbose else logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logger.debug("log level set to %s", logging.getLevelName(level))


def state_from(ctx: typer.Context) -> CliState:
    obj = ctx.find_object(CliState)
    return obj if obj is not None else CliState()


def settings_or_exit(ctx: typer.Context) -> Settings:
    state = state_from(ctx)
    try:
        return load_settings(state.config)
    except ConfigError as exc:
        typer.echo(f"ERROR: {exc}", err=True)
        raise typer.Exit(code=EXIT_CONFIG) from exc


def resolve_use_color(*, color: bool, no_color: bool, color_allowed: bool) -> bool:
    # CLI flags take precedence over the IO policy default.
    if no_color:
        return False
    if color:
        return True
    return color_allowed
