"""Shared enumerations used across covbadge."""

from __future__ import annotations

from enum import StrEnum


class BadgeStyle(StrEnum):
    """Visual renderings supported by the SVG generator."""

    FLAT = "flat"
    FLAT_SQUARE = "flat-square"
    FOR_THE_BADGE = "for-the-badge"

    @classmethod
    def parse(cls, value: str) -> BadgeStyle | None:
        try:
            return cls(value)
        except ValueError:
            return None


class BadgeType(StrEnum):
    """Badge kinds produced for a pull request."""

    COVERAGE = "coverage"
    TREND = "trend"
    STATUS = "status"
    COMPARISON = "comparison"
    DIFF = "diff"
    QUALITY = "quality"


class Trend(StrEnum):
    """Direction of coverage change between two measurements."""

    UP = "up"
    DOWN = "down"
    STABLE = "stable"


class NamingScheme(StrEnum):
    """How badge file names encode ``(type, style)``.

    ``legacy`` joins everything with dashes and cannot be inverted when the
    style itself contains a dash. ``strict`` uses a reserved ``__`` separator.
    """

    LEGACY = "legacy"
    STRICT = "strict"


STANDARD_BADGE_TYPES: tuple[BadgeType, ...] = (
    BadgeType.COVERAGE,
    BadgeType.TREND,
    BadgeType.STATUS,
    BadgeType.COMPARISON,
)


__all__ = [
    "STANDARD_BADGE_TYPES",
    "BadgeStyle",
    "BadgeType",
    "NamingScheme",
    "Trend",
]
