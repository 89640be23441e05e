"""Centralised exception hierarchy for covbadge."""

from __future__ import annotations


class CovbadgeError(Exception):
    """Base class for all custom covbadge exceptions."""


class ConfigError(CovbadgeError):
    """Configuration values are missing, malformed or inconsistent."""


class BadgeError(CovbadgeError):
    """Base class for errors raised while producing a single badge."""


class BadgeCancelledError(BadgeError):
    """Rendering was cancelled before any output was produced."""

    def __init__(self) -> None:
        super().__init__("badge rendering cancelled")


class UnsupportedBadgeTypeError(BadgeError):
    """The requested badge type has no content builder."""

    def __init__(self, badge_type: str) -> None:
        super().__init__(f"unsupported badge type: {badge_type}")
        self.badge_type = badge_type


class BadgeArtifactError(BadgeError):
    """A single (type, style) artifact failed; the original error is the cause."""

    def __init__(self, badge_type: str, style: str, reason: BaseException) -> None:
        super().__init__(f"failed to generate {badge_type} badge in {style} style: {reason}")
        self.badge_type = badge_type
        self.style = style
        self.__cause__ = reason


class OutputDirectoryError(CovbadgeError):
    """The PR-scoped output location could not be created."""


__all__ = [
    "BadgeArtifactError",
    "BadgeCancelledError",
    "BadgeError",
    "ConfigError",
    "CovbadgeError",
    "OutputDirectoryError",
    "UnsupportedBadgeTypeError",
]
