from __future__ import annotations

import sys
from io import StringIO
from typing import TYPE_CHECKING

from rich.console import Console
from rich.table import Table

if TYPE_CHECKING:
    from covbadge.core.models import PRBadgeResult


def _render_table(table: Table, *, color: bool) -> str:
    buf = StringIO()
    console = Console(
        file=buf,
        force_terminal=color,
        width=sys.maxsize,
        color_system="standard" if color else None,
        no_color=not color,
    )
    console.print(table)
    return buf.getvalue().rstrip()


def format_result_table(result: PRBadgeResult, *, color: bool = False) -> str:
    """Render the badges of *result* as a Rich table captured to text."""
    table = Table(show_header=True, header_style="bold", title=result.base_url)
    table.add_column("Type", justify="left")
    table.add_column("Style", justify="left")
    table.add_column("Size", justify="right")
    table.add_column("Width", justify="right")
    table.add_column("Height", justify="right")
    table.add_column("URL", justify="left")

    for info in result.all_badges():
        table.add_row(
            info.type,
            info.style,
            str(info.size),
            str(info.dimensions.width),
            str(info.dimensions.height),
            info.public_url,
        )

    lines = [_render_table(table, color=color), f"Total badges: {result.total_badges}"]
    lines.extend(f"ERROR: {err}" for err in result.errors)
    return "\n".join(lines)


__all__ = ["format_result_table"]
