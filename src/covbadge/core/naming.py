"""File naming patterns, their legacy inverse, and public URL construction."""

from __future__ import annotations

from typing import TYPE_CHECKING

from covbadge.core.types import BadgeType, NamingScheme

if TYPE_CHECKING:
    from collections.abc import Mapping

    from covbadge.core.models import PRBadgeRequest

SVG_SUFFIX = ".svg"
TIMESTAMP_FORMAT = "%Y%m%d-%H%M%S"
STRICT_SEPARATOR = "__"

DEFAULT_PATTERNS: Mapping[str, str] = {
    BadgeType.COVERAGE: "badge-coverage-{style}.svg",
    BadgeType.TREND: "badge-trend-{style}.svg",
    BadgeType.STATUS: "badge-status-{style}.svg",
    BadgeType.COMPARISON: "badge-comparison-{style}.svg",
    BadgeType.DIFF: "badge-diff-{style}.svg",
    BadgeType.QUALITY: "badge-quality-{style}.svg",
}

STRICT_PATTERNS: Mapping[str, str] = {
    badge_type: f"badge{STRICT_SEPARATOR}{{type}}{STRICT_SEPARATOR}{{style}}{SVG_SUFFIX}"
    for badge_type in BadgeType
}


def default_patterns(scheme: NamingScheme) -> dict[str, str]:
    source = STRICT_PATTERNS if scheme is NamingScheme.STRICT else DEFAULT_PATTERNS
    return dict(source)


def fallback_pattern(badge_type: str, scheme: NamingScheme) -> str:
    """Pattern used for a type that has no configured pattern."""
    if scheme is NamingScheme.STRICT:
        return f"badge{STRICT_SEPARATOR}{badge_type}{STRICT_SEPARATOR}{{style}}{SVG_SUFFIX}"
    return f"badge-{badge_type}-{{style}}{SVG_SUFFIX}"


def build_file_name(
    pattern: str,
    badge_type: str,
    style: str,
    request: PRBadgeRequest,
    *,
    include_timestamp: bool = False,
) -> str:
    """Expand the placeholders of *pattern*.

    ``{timestamp}`` is only expanded when *include_timestamp* is set; any
    placeholder that is not recognised is left as literal text.
    """
    name = pattern.replace("{style}", style)
    name = name.replace("{type}", str(badge_type))
    name = name.replace("{pr}", str(request.pr_number))
    name = name.replace("{branch}", request.branch)
    if include_timestamp:
        name = name.replace("{timestamp}", request.timestamp.strftime(TIMESTAMP_FORMAT))
    return name


def _parse_legacy(name: str) -> tuple[str, str] | None:
    # The dash is both the field separator and legal inside styles, so
    # "badge-coverage-flat-square" parses as ("coverage-flat", "square").
    parts = name.split("-")
    if len(parts) < 3 or not name.startswith("badge-"):
        return None
    return "-".join(parts[1:-1]), parts[-1]


def _parse_strict(name: str) -> tuple[str, str] | None:
    parts = name.split(STRICT_SEPARATOR)
    if len(parts) != 3 or parts[0] != "badge" or not parts[1] or not parts[2]:
        return None
    return parts[1], parts[2]


def parse_badge_file_name(
    file_name: str,
    scheme: NamingScheme = NamingScheme.LEGACY,
) -> tuple[str, str] | None:
    """Recover ``(type, style)`` from a badge file name, or ``None`` if it does not match."""
    name = file_name.removesuffix(SVG_SUFFIX)
    if scheme is NamingScheme.STRICT:
        return _parse_strict(name)
    return _parse_legacy(name)


def build_base_url(owner: str, repository: str, pr_number: int) -> str:
    return f"https://{owner}.github.io/{repository}/coverage/pr/{pr_number}"


def build_public_url(owner: str, repository: str, pr_number: int, file_name: str) -> str:
    return f"{build_base_url(owner, repository, pr_number)}/{file_name}"


__all__ = [
    "DEFAULT_PATTERNS",
    "STRICT_PATTERNS",
    "TIMESTAMP_FORMAT",
    "build_base_url",
    "build_file_name",
    "build_public_url",
    "default_patterns",
    "fallback_pattern",
    "parse_badge_file_name",
]
