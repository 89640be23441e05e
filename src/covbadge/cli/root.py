from __future__ import annotations

from pathlib import Path  # noqa: TC003
from typing import Annotated

import typer
from typer.main import get_command

from covbadge._meta import __version__
from covbadge.cli import badge, pr
from covbadge.cli._shared import CliState, configure_logging


def create_app() -> typer.Typer:
    app = typer.Typer(help="SVG coverage badges and pull request badge artifacts.")

    @app.callback(invoke_without_command=True)
    def _root(
        ctx: typer.Context,
        *,
        version: Annotated[
            bool,
            typer.Option("--version", help="Show version and exit"),
        ] = False,
        config: Annotated[
            Path | None,
            typer.Option("--config", help="pyproject.toml to read [tool.covbadge] from."),
        ] = None,
        quiet: Annotated[
            bool,
            typer.Option("-q", "--quiet", help="Suppress INFO logs, emit only errors"),
        ] = False,
        verbose: Annotated[
            bool,
            typer.Option("-v", "--verbose", help="Emit diagnostic logging"),
        ] = False,
    ) -> None:
        if version:
            typer.echo(f"covbadge {__version__}")
            raise typer.Exit
        configure_logging(quiet=quiet, verbose=verbose)
        ctx.obj = CliState(config=config, quiet=quiet, verbose=verbose)
        if ctx.invoked_subcommand is None:
            typer.echo(ctx.get_help())

    badge.register(app)
    pr.register(app)

    return app


def main() -> None:
    app = create_app()
    get_command(app)()


# Click-compatible object for tooling that imports it
cli = get_command(create_app())

__all__ = ["cli", "create_app", "main"]
