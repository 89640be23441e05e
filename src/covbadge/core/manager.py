"""Generation and lifecycle of the badge matrix for one pull request."""

from __future__ import annotations

import dataclasses
import datetime
from typing import TYPE_CHECKING

from defusedxml import ElementTree

from covbadge._meta import logger
from covbadge.core.generator import (
    BadgeContent,
    BadgeGenerator,
    BadgeOptions,
    trend_message,
    utf8_length,
)
from covbadge.core.grading import (
    DIFF_MAGNITUDE_POLICY,
    NEGATIVE_COLOR,
    NEUTRAL_COLOR,
    POSITIVE_COLOR,
    QUALITY_POLICY,
    STATUS_POLICY,
    grade_color,
)
from covbadge.core.models import (
    Dimensions,
    Info,
    Metadata,
    PRBadgeConfig,
    PRBadgeRequest,
    PRBadgeResult,
    ResultBuilder,
)
from covbadge.core.naming import (
    build_base_url,
    build_file_name,
    build_public_url,
    fallback_pattern,
    parse_badge_file_name,
)
from covbadge.core.store import FilesystemStore
from covbadge.core.types import STANDARD_BADGE_TYPES, BadgeStyle, BadgeType
from covbadge.errors import (
    BadgeArtifactError,
    BadgeError,
    OutputDirectoryError,
    UnsupportedBadgeTypeError,
)

if TYPE_CHECKING:
    from collections.abc import Callable
    from threading import Event

    from covbadge.core.store import ArtifactStore, StoredArtifact

COMPARISON_THRESHOLD = 0.1
DIFF_SIGN_THRESHOLD = 0.5


@dataclasses.dataclass(frozen=True, slots=True)
class _Rendered:
    label: str
    message: str
    data: bytes


class PRBadgeManager:
    """Render, store and inventory the badges of pull requests."""

    def __init__(
        self,
        generator: BadgeGenerator | None = None,
        config: PRBadgeConfig | None = None,
        store: ArtifactStore | None = None,
    ) -> None:
        self.generator = generator or BadgeGenerator()
        self.config = config or PRBadgeConfig()
        self.store: ArtifactStore = store or FilesystemStore(
            self.config.output_base_path,
            dir_mode=self.config.directory_permissions,
            file_mode=self.config.file_permissions,
            create_directories=self.config.create_directories,
        )
        self._builders: dict[str, Callable[[PRBadgeRequest, str, str, Event | None], _Rendered]] = {
            BadgeType.COVERAGE: self._coverage_badge,
            BadgeType.TREND: self._trend_badge,
            BadgeType.STATUS: self._status_badge,
            BadgeType.COMPARISON: self._comparison_badge,
            BadgeType.DIFF: self._diff_badge,
            BadgeType.QUALITY: self._quality_badge,
        }

    # ------------------------------------------------------------------ #
    # generation                                                          #
    # ------------------------------------------------------------------ #

    def resolve_styles(self, request: PRBadgeRequest) -> tuple[str, ...]:
        if request.styles:
            return request.styles
        if self.config.generate_multiple_styles:
            return self.config.styles
        return (self.config.default_style,)

    def generate_pr_badges(
        self,
        request: PRBadgeRequest,
        *,
        cancel: Event | None = None,
    ) -> PRBadgeResult:
        """Generate every requested ``(type, style)`` badge for a pull request.

        Only a failure to prepare the PR output location raises
        (:class:`OutputDirectoryError`). Failures of individual badges are
        collected in ``result.errors`` and the remaining badges still run.
        """
        builder = ResultBuilder(
            base_url=build_base_url(request.owner, request.repository, request.pr_number)
        )
        try:
            self.store.prepare(request.pr_number)
        except OSError as exc:
            msg = f"failed to create output directory: {exc}"
            raise OutputDirectoryError(msg) from exc

        styles = self.resolve_styles(request)
        logger.info(
            "generating %d badge type(s) x %d style(s) for PR #%d",
            len(request.types),
            len(styles),
            request.pr_number,
        )
        for badge_type in request.types:
            for style in styles:
                try:
                    info = self.generate_single_badge(request, badge_type, style, cancel=cancel)
                except (BadgeError, OSError, UnicodeError) as exc:
                    error = BadgeArtifactError(str(badge_type), style, exc)
                    logger.warning("%s", error)
                    builder.fail(error)
                    continue
                builder.add(info)

        result = builder.build()
        logger.info(
            "generated %d badge(s) for PR #%d with %d error(s)",
            result.total_badges,
            request.pr_number,
            len(result.errors),
        )
        return result

    def generate_standard_pr_badges(
        self,
        request: PRBadgeRequest,
        *,
        cancel: Event | None = None,
    ) -> PRBadgeResult:
        """Generate coverage, trend, status and comparison badges, plus quality when graded."""
        types: tuple[str, ...] = STANDARD_BADGE_TYPES
        if request.quality_grade:
            types = (*types, BadgeType.QUALITY)
        return self.generate_pr_badges(dataclasses.replace(request, types=types), cancel=cancel)

    def generate_single_badge(
        self,
        request: PRBadgeRequest,
        badge_type: str,
        style: str,
        *,
        cancel: Event | None = None,
    ) -> Info:
        content_builder = self._builders.get(badge_type)
        if content_builder is None:
            raise UnsupportedBadgeTypeError(str(badge_type))

        rendered = content_builder(request, style, request.label_for(badge_type, str(badge_type)), cancel)

        file_name = self.build_file_name(badge_type, style, request)
        stored = self.store.write(request.pr_number, file_name, rendered.data)
        logger.debug("wrote %s (%d bytes)", stored.location, stored.size)

        return Info(
            type=str(badge_type),
            style=style,
            file_path=stored.location,
            public_url=build_public_url(request.owner, request.repository, request.pr_number, file_name),
            size=stored.size,
            dimensions=self.calculate_dimensions(rendered.label, rendered.message, style),
            metadata=Metadata(
                generated_at=datetime.datetime.now(datetime.UTC),
                coverage=request.coverage,
                base_coverage=request.base_coverage,
                change=request.change,
                quality_grade=request.quality_grade,
                pr_number=request.pr_number,
                branch=request.branch,
                commit_sha=request.commit_sha,
            ),
        )

    # ------------------------------------------------------------------ #
    # content builders                                                    #
    # ------------------------------------------------------------------ #

    def _coverage_badge(
        self, request: PRBadgeRequest, style: str, label: str, cancel: Event | None
    ) -> _Rendered:
        data = self.generator.generate(
            request.coverage, BadgeOptions(style=style, label=label), cancel=cancel
        )
        return _Rendered(label, f"{request.coverage:.1f}%", data)

    def _trend_badge(
        self, request: PRBadgeRequest, style: str, label: str, cancel: Event | None
    ) -> _Rendered:
        data = self.generator.generate_trend_badge(
            request.coverage,
            request.base_coverage,
            BadgeOptions(style=style, label=label),
            cancel=cancel,
        )
        message, _color = trend_message(request.change)
        return _Rendered(label, message, data)

    def _status_badge(
        self, request: PRBadgeRequest, style: str, label: str, cancel: Event | None
    ) -> _Rendered:
        band = STATUS_POLICY.grade(request.coverage)
        content = BadgeContent(
            label=label,
            message=band.name,
            color=band.color,
            style=style,
            aria_label=f"Coverage status: {band.name}",
        )
        return self._render(content, cancel)

    def _comparison_badge(
        self, request: PRBadgeRequest, style: str, label: str, cancel: Event | None
    ) -> _Rendered:
        diff = request.change
        if diff > COMPARISON_THRESHOLD:
            message, color = f"+{diff:.1f}%", POSITIVE_COLOR
        elif diff < -COMPARISON_THRESHOLD:
            message, color = f"{diff:.1f}%", NEGATIVE_COLOR
        else:
            message, color = "±0.0%", NEUTRAL_COLOR
        content = BadgeContent(
            label=label,
            message=message,
            color=color,
            style=style,
            aria_label=f"Coverage comparison: {message}",
        )
        return self._render(content, cancel)

    def _diff_badge(
        self, request: PRBadgeRequest, style: str, label: str, cancel: Event | None
    ) -> _Rendered:
        diff = request.change
        band = DIFF_MAGNITUDE_POLICY.grade(abs(diff))
        message, color = band.name, band.color
        if abs(diff) >= DIFF_SIGN_THRESHOLD:
            if diff > 0:
                message, color = f"+{message}", POSITIVE_COLOR
            else:
                message, color = f"-{message}", NEGATIVE_COLOR
        content = BadgeContent(
            label=label,
            message=message,
            color=color,
            style=style,
            aria_label=f"Coverage change: {message}",
        )
        return self._render(content, cancel)

    def _quality_badge(
        self, request: PRBadgeRequest, style: str, label: str, cancel: Event | None
    ) -> _Rendered:
        grade = request.quality_grade or QUALITY_POLICY.grade(request.coverage).name
        content = BadgeContent(
            label=label,
            message=grade,
            color=grade_color(grade),
            style=style,
            aria_label=f"Coverage quality grade: {grade}",
        )
        return self._render(content, cancel)

    def _render(self, content: BadgeContent, cancel: Event | None) -> _Rendered:
        return _Rendered(content.label, content.message, self.generator.render(content, cancel=cancel))

    # ------------------------------------------------------------------ #
    # naming & geometry                                                   #
    # ------------------------------------------------------------------ #

    def build_file_name(self, badge_type: str, style: str, request: PRBadgeRequest) -> str:
        patterns = self.config.patterns or {}
        pattern = patterns.get(badge_type) or fallback_pattern(str(badge_type), self.config.naming)
        return build_file_name(
            pattern,
            badge_type,
            style,
            request,
            include_timestamp=self.config.include_timestamp,
        )

    def parse_badge_file_name(self, file_name: str) -> tuple[str, str] | None:
        return parse_badge_file_name(file_name, self.config.naming)

    @staticmethod
    def calculate_dimensions(label: str, message: str, style: str) -> Dimensions:
        """Rough badge size recorded in :class:`Info`.

        Counts UTF-8 bytes like the renderer, but coarser than its layout;
        callers needing exact pixels should read the SVG.
        """
        height = 28 if style == BadgeStyle.FOR_THE_BADGE else 20
        return Dimensions(width=utf8_length(label) * 6 + utf8_length(message) * 6 + 20, height=height)

    # ------------------------------------------------------------------ #
    # lifecycle                                                           #
    # ------------------------------------------------------------------ #

    def cleanup_pr_badges(self, owner: str, repository: str, pr_number: int) -> bool:
        """Remove every stored badge of a PR.

        Returns ``True`` when something was deleted. A disabled cleanup or a PR
        without artifacts is a no-op, not an error.
        """
        if not self.config.enable_cleanup:
            logger.info("cleanup disabled, keeping badges of %s/%s#%d", owner, repository, pr_number)
            return False
        removed = self.store.remove(pr_number)
        if not removed:
            logger.debug("no badges stored for %s/%s#%d", owner, repository, pr_number)
        return removed

    def get_pr_info(self, owner: str, repository: str, pr_number: int) -> PRBadgeResult:
        """Rebuild the badge inventory of a PR from stored file names.

        Files whose names do not parse are skipped silently.
        """
        builder = ResultBuilder(base_url=build_base_url(owner, repository, pr_number))
        for artifact in self.store.list(pr_number):
            parsed = self.parse_badge_file_name(artifact.name)
            if parsed is None:
                continue
            badge_type, style = parsed
            builder.add(
                Info(
                    type=badge_type,
                    style=style,
                    file_path=artifact.location,
                    public_url=build_public_url(owner, repository, pr_number, artifact.name),
                    size=artifact.size,
                    dimensions=self._read_dimensions(pr_number, artifact),
                    metadata=Metadata(generated_at=artifact.modified, pr_number=pr_number),
                )
            )
        return builder.build()

    def _read_dimensions(self, pr_number: int, artifact: StoredArtifact) -> Dimensions:
        try:
            root = ElementTree.fromstring(self.store.read(pr_number, artifact.name))
            return Dimensions(width=int(root.get("width", 0)), height=int(root.get("height", 0)))
        except (OSError, ElementTree.ParseError, ValueError) as exc:
            logger.debug("could not read dimensions of %s: %s", artifact.location, exc)
            return Dimensions()


__all__ = ["PRBadgeManager"]
