"""Value types exchanged with the PR badge manager."""

from __future__ import annotations

import datetime
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

from covbadge.core.naming import default_patterns
from covbadge.core.types import BadgeStyle, BadgeType, NamingScheme, Trend
from covbadge.errors import ConfigError

if TYPE_CHECKING:
    from collections.abc import Mapping

    from covbadge.errors import BadgeArtifactError

METADATA_VERSION = "2.0"


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.UTC)


@dataclass(frozen=True, slots=True)
class Dimensions:
    width: int = 0
    height: int = 0


@dataclass(frozen=True, slots=True)
class Metadata:
    """Snapshot of the inputs a badge was generated from."""

    generated_at: datetime.datetime
    version: str = METADATA_VERSION
    coverage: float = 0.0
    base_coverage: float = 0.0
    change: float = 0.0
    quality_grade: str = ""
    pr_number: int = 0
    branch: str = ""
    commit_sha: str = ""


@dataclass(frozen=True, slots=True)
class Info:
    """One generated (or discovered) badge artifact."""

    type: str
    style: str
    file_path: str
    public_url: str
    size: int
    dimensions: Dimensions
    metadata: Metadata


@dataclass(frozen=True, slots=True)
class PRBadgeRequest:
    """Everything needed to produce the badges of one pull request.

    ``types`` may contain strings that are not a :class:`BadgeType`; those fail
    per artifact rather than up front. Listing the same type twice is rejected.
    """

    # Mapping fields cannot be hashed.
    __hash__ = None  # type: ignore[assignment]

    owner: str
    repository: str
    pr_number: int
    coverage: float
    base_coverage: float = 0.0
    branch: str = ""
    commit_sha: str = ""
    base_branch: str = ""
    trend: Trend = Trend.STABLE
    quality_grade: str = ""
    risk_level: str = ""
    types: tuple[str, ...] = ()
    styles: tuple[str, ...] = ()
    custom_labels: Mapping[str, str] = field(default_factory=dict)
    timestamp: datetime.datetime = field(default_factory=_utcnow)
    author: str = ""

    def __post_init__(self) -> None:
        types = tuple(self.types)
        duplicates = sorted({str(t) for t in types if types.count(t) > 1})
        if duplicates:
            msg = f"duplicate badge types requested: {', '.join(duplicates)}"
            raise ValueError(msg)
        object.__setattr__(self, "types", types)
        object.__setattr__(self, "styles", tuple(self.styles))
        object.__setattr__(self, "custom_labels", MappingProxyType(dict(self.custom_labels)))

    @property
    def change(self) -> float:
        return self.coverage - self.base_coverage

    def label_for(self, badge_type: str, default: str) -> str:
        return self.custom_labels.get(badge_type, default)


@dataclass(frozen=True, slots=True)
class PRBadgeResult:
    """Aggregate outcome of one generation or inventory call.

    ``errors`` holds per-artifact failures; a non-empty list does not make the
    other entries invalid.
    """

    # Mapping fields cannot be hashed.
    __hash__ = None  # type: ignore[assignment]

    base_url: str
    badges: Mapping[str, tuple[Info, ...]] = field(default_factory=dict)
    local_paths: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    public_urls: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    generated_at: datetime.datetime = field(default_factory=_utcnow)
    total_badges: int = 0
    errors: tuple[BadgeArtifactError, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.errors

    def all_badges(self) -> list[Info]:
        return [info for infos in self.badges.values() for info in infos]


@dataclass(slots=True)
class ResultBuilder:
    """Mutable accumulator turned into a :class:`PRBadgeResult` at the end of a call."""

    base_url: str
    generated_at: datetime.datetime = field(default_factory=_utcnow)
    _badges: dict[str, list[Info]] = field(default_factory=dict)
    _errors: list[BadgeArtifactError] = field(default_factory=list)

    def add(self, info: Info) -> None:
        self._badges.setdefault(info.type, []).append(info)

    def fail(self, error: BadgeArtifactError) -> None:
        self._errors.append(error)

    def build(self) -> PRBadgeResult:
        badges = {key: tuple(infos) for key, infos in self._badges.items()}
        return PRBadgeResult(
            base_url=self.base_url,
            badges=MappingProxyType(badges),
            local_paths=MappingProxyType(
                {key: tuple(i.file_path for i in infos) for key, infos in badges.items()}
            ),
            public_urls=MappingProxyType(
                {key: tuple(i.public_url for i in infos) for key, infos in badges.items()}
            ),
            generated_at=self.generated_at,
            total_badges=sum(len(infos) for infos in badges.values()),
            errors=tuple(self._errors),
        )


_ALL_STYLES: tuple[str, ...] = tuple(s.value for s in BadgeStyle)


@dataclass(frozen=True, slots=True)
class PRBadgeConfig:
    """Validated, immutable settings for :class:`~covbadge.core.manager.PRBadgeManager`.

    Fields
    ------
    output_base_path:
        Root of the artifact tree; badges land in ``{root}/pr/{number}``.
    patterns:
        File name pattern per badge type. Missing types get the scheme's
        default pattern.
    styles / default_style:
        Styles rendered when a request does not name its own. Every entry must
        be a known style.
    enable_cleanup / max_age / cleanup_on_merge:
        Only ``enable_cleanup`` is acted on. ``max_age`` and
        ``cleanup_on_merge`` are carried for callers; no age-based cleanup
        exists.
    naming:
        ``legacy`` keeps the historical dash-delimited names, ``strict`` uses
        an invertible encoding.
    """

    # Mapping fields cannot be hashed.
    __hash__ = None  # type: ignore[assignment]

    output_base_path: str = "./coverage-badges"
    create_directories: bool = True
    directory_permissions: int = 0o755
    file_permissions: int = 0o644
    patterns: Mapping[str, str] | None = None
    styles: tuple[str, ...] = _ALL_STYLES
    default_style: str = BadgeStyle.FLAT.value
    include_timestamp: bool = False
    include_branch: bool = True
    enable_cleanup: bool = True
    max_age: datetime.timedelta = datetime.timedelta(days=30)
    cleanup_on_merge: bool = True
    generate_multiple_styles: bool = True
    naming: NamingScheme = NamingScheme.LEGACY

    def __post_init__(self) -> None:
        try:
            naming = NamingScheme(self.naming)
        except ValueError as exc:
            msg = f"unknown naming scheme: {self.naming!r}"
            raise ConfigError(msg) from exc
        object.__setattr__(self, "naming", naming)

        styles = tuple(self.styles)
        unknown = [s for s in styles if BadgeStyle.parse(s) is None]
        if unknown:
            msg = f"unknown badge styles: {', '.join(unknown)}; expected one of {', '.join(_ALL_STYLES)}"
            raise ConfigError(msg)
        if len(set(styles)) != len(styles):
            msg = f"duplicate badge styles: {', '.join(styles)}"
            raise ConfigError(msg)
        if not styles:
            msg = "at least one badge style must be configured"
            raise ConfigError(msg)
        if BadgeStyle.parse(self.default_style) is None:
            msg = f"unknown default badge style: {self.default_style!r}"
            raise ConfigError(msg)
        object.__setattr__(self, "styles", styles)

        patterns = default_patterns(naming)
        for key, pattern in (self.patterns or {}).items():
            try:
                badge_type = BadgeType(key)
            except ValueError as exc:
                msg = f"pattern configured for unknown badge type: {key!r}"
                raise ConfigError(msg) from exc
            if not pattern:
                msg = f"empty file name pattern for {badge_type} badges"
                raise ConfigError(msg)
            patterns[badge_type] = pattern
        object.__setattr__(self, "patterns", MappingProxyType(patterns))

        for name in ("directory_permissions", "file_permissions"):
            mode = getattr(self, name)
            if not 0 <= mode <= 0o7777:
                msg = f"{name} must be a permission mode, got {mode!r}"
                raise ConfigError(msg)


__all__ = [
    "METADATA_VERSION",
    "Dimensions",
    "Info",
    "Metadata",
    "PRBadgeConfig",
    "PRBadgeRequest",
    "PRBadgeResult",
    "ResultBuilder",
]
