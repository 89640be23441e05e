from __future__ import annotations

import sys
from pathlib import Path  # noqa: TC003
from typing import TYPE_CHECKING, Annotated

import click.utils as click_utils
import typer

from covbadge.cli._shared import resolve_use_color, settings_or_exit
from covbadge.cli.exit_codes import (
    EXIT_CANTCREAT,
    EXIT_CONFIG,
    EXIT_DATAERR,
    EXIT_OK,
    EXIT_PARTIAL,
)
from covbadge.core.generator import BadgeGenerator
from covbadge.core.manager import PRBadgeManager
from covbadge.core.models import PRBadgeRequest
from covbadge.core.types import BadgeStyle, Trend
from covbadge.errors import ConfigError, OutputDirectoryError
from covbadge.io import write_output
from covbadge.output.json import format_result_json
from covbadge.output.table import format_result_table

if TYPE_CHECKING:
    from covbadge.core.models import PRBadgeResult

OwnerOpt = Annotated[str, typer.Option("--owner", help="Repository owner (GitHub user or org).")]
RepoOpt = Annotated[str, typer.Option("--repo", help="Repository name.")]
PROpt = Annotated[int, typer.Option("--pr", help="Pull request number.", min=1)]
OutputDirOpt = Annotated[
    Path | None,
    typer.Option("--output-dir", help="Badge root directory (overrides configuration)."),
]
JsonOpt = Annotated[bool, typer.Option("--json", help="Emit a JSON manifest instead of a table.")]
ColorOpt = Annotated[bool, typer.Option("--color", help="Force color output")]
NoColorOpt = Annotated[bool, typer.Option("--no-color", help="Disable color output")]


def _manager(ctx: typer.Context, output_dir: Path | None) -> PRBadgeManager:
    settings = settings_or_exit(ctx)
    overrides = {"output_base_path": str(output_dir)} if output_dir is not None else {}
    try:
        return PRBadgeManager(
            BadgeGenerator(settings.badge_config()),
            settings.pr_config(**overrides),
        )
    except ConfigError as exc:
        typer.echo(f"ERROR: {exc}", err=True)
        raise typer.Exit(code=EXIT_CONFIG) from exc


def _emit(result: PRBadgeResult, *, as_json: bool, color: bool, no_color: bool) -> None:
    if as_json:
        write_output(format_result_json(result), None)
        return
    is_tty = bool(getattr(sys.stdout, "isatty", lambda: False)())
    color_allowed = is_tty and not click_utils.should_strip_ansi(sys.stdout)
    use_color = resolve_use_color(color=color, no_color=no_color, color_allowed=color_allowed)
    write_output(format_result_table(result, color=use_color), None)


def generate_cmd(
    ctx: typer.Context,
    owner: OwnerOpt,
    repo: RepoOpt,
    pr: PROpt,
    coverage: Annotated[float, typer.Option("--coverage", help="Coverage of the PR head.")],
    base_coverage: Annotated[
        float,
        typer.Option("--base-coverage", help="Coverage of the base branch."),
    ] = 0.0,
    branch: Annotated[str, typer.Option("--branch", help="PR head branch.")] = "",
    commit: Annotated[str, typer.Option("--commit", help="PR head commit SHA.")] = "",
    grade: Annotated[str, typer.Option("--grade", help="Quality grade (A+ .. F).")] = "",
    trend: Annotated[
        Trend,
        typer.Option("--trend", help="Coverage trend direction.", case_sensitive=False),
    ] = Trend.STABLE,
    types: Annotated[
        list[str] | None,
        typer.Option("--type", "-t", help="Badge type to generate (repeatable)."),
    ] = None,
    styles: Annotated[
        list[BadgeStyle] | None,
        typer.Option("--style", "-s", help="Badge style (repeatable).", case_sensitive=False),
    ] = None,
    standard: Annotated[
        bool,
        typer.Option("--standard", help="Generate the standard badge set (ignores --type)."),
    ] = False,
    output_dir: OutputDirOpt = None,
    as_json: JsonOpt = False,
    color: ColorOpt = False,
    no_color: NoColorOpt = False,
) -> None:
    """Generate the badge matrix for a pull request."""
    manager = _manager(ctx, output_dir)
    try:
        request = PRBadgeRequest(
            owner=owner,
            repository=repo,
            pr_number=pr,
            coverage=coverage,
            base_coverage=base_coverage,
            branch=branch,
            commit_sha=commit,
            trend=trend,
            quality_grade=grade,
            types=tuple(types or ("coverage",)),
            styles=tuple(s.value for s in styles or ()),
        )
    except ValueError as exc:
        typer.echo(f"ERROR: {exc}", err=True)
        raise typer.Exit(code=EXIT_DATAERR) from exc

    try:
        if standard:
            result = manager.generate_standard_pr_badges(request)
        else:
            result = manager.generate_pr_badges(request)
    except OutputDirectoryError as exc:
        typer.echo(f"ERROR: {exc}", err=True)
        raise typer.Exit(code=EXIT_CANTCREAT) from exc

    _emit(result, as_json=as_json, color=color, no_color=no_color)
    raise typer.Exit(code=EXIT_OK if result.ok else EXIT_PARTIAL)


def cleanup_cmd(
    ctx: typer.Context,
    owner: OwnerOpt,
    repo: RepoOpt,
    pr: PROpt,
    output_dir: OutputDirOpt = None,
) -> None:
    """Delete every stored badge of a pull request."""
    manager = _manager(ctx, output_dir)
    removed = manager.cleanup_pr_badges(owner, repo, pr)
    typer.echo(f"Removed badges for PR #{pr}" if removed else f"No badges to remove for PR #{pr}")
    raise typer.Exit(code=EXIT_OK)


def info_cmd(
    ctx: typer.Context,
    owner: OwnerOpt,
    repo: RepoOpt,
    pr: PROpt,
    output_dir: OutputDirOpt = None,
    as_json: JsonOpt = False,
    color: ColorOpt = False,
    no_color: NoColorOpt = False,
) -> None:
    """List the badges stored for a pull request."""
    manager = _manager(ctx, output_dir)
    result = manager.get_pr_info(owner, repo, pr)
    _emit(result, as_json=as_json, color=color, no_color=no_color)
    raise typer.Exit(code=EXIT_OK)


def register(app: typer.Typer) -> None:
    pr_app = typer.Typer(help="Pull request badge matrix and lifecycle.")
    pr_app.command("generate")(generate_cmd)
    pr_app.command("cleanup")(cleanup_cmd)
    pr_app.command("info")(info_cmd)
    app.add_typer(pr_app, name="pr")


__all__ = ["register"]
