from __future__ import annotations

from pathlib import Path  # noqa: TC003
from typing import Annotated

import typer

from covbadge.cli._shared import settings_or_exit
from covbadge.cli.exit_codes import EXIT_CONFIG, EXIT_OK
from covbadge.core.generator import BadgeGenerator, BadgeOptions
from covbadge.core.types import BadgeStyle
from covbadge.errors import ConfigError
from covbadge.io import write_bytes


def badge_cmd(
    ctx: typer.Context,
    percentage: Annotated[
        float,
        typer.Argument(help="Coverage percentage to display."),
    ],
    previous: Annotated[
        float | None,
        typer.Option("--previous", help="Previous coverage; renders a trend badge instead."),
    ] = None,
    style: Annotated[
        BadgeStyle | None,
        typer.Option("--style", help="Badge style.", case_sensitive=False),
    ] = None,
    label: Annotated[
        str | None,
        typer.Option("--label", help="Left-hand label text."),
    ] = None,
    logo: Annotated[
        str | None,
        typer.Option("--logo", help="Built-in logo name (go, github), URL or data URI."),
    ] = None,
    logo_color: Annotated[
        str | None,
        typer.Option("--logo-color", help="Colour applied to embedded SVG logos."),
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write the SVG to PATH (use '-' for stdout)."),
    ] = None,
) -> None:
    """Render a single coverage (or trend) badge."""
    settings = settings_or_exit(ctx)
    try:
        generator = BadgeGenerator(settings.badge_config())
    except ConfigError as exc:
        typer.echo(f"ERROR: {exc}", err=True)
        raise typer.Exit(code=EXIT_CONFIG) from exc

    options = BadgeOptions(
        style=style.value if style is not None else None,
        label=label,
        logo=logo,
        logo_color=logo_color,
    )
    if previous is None:
        data = generator.generate(percentage, options)
    else:
        data = generator.generate_trend_badge(percentage, previous, options)
    write_bytes(data, output)
    raise typer.Exit(code=EXIT_OK)


def register(app: typer.Typer) -> None:
    app.command("badge")(badge_cmd)


__all__ = ["register"]
