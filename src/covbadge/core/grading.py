"""Grading policies mapping a number to a named colour band.

Two independent palettes exist: the generator palette driven by
:class:`ThresholdConfig`, and the fixed PR-badge policies (status, diff
magnitude, quality grade).
"""

from __future__ import annotations

from dataclasses import dataclass

NEUTRAL_COLOR = "#8b949e"


@dataclass(frozen=True, slots=True)
class Band:
    """One cut point of a grading policy."""

    minimum: float
    name: str
    color: str


@dataclass(frozen=True, slots=True)
class GradingPolicy:
    """Ordered bands plus a fallback for values below every cut point.

    Fields
    ------
    bands:
        Bands in descending order of ``minimum``. The first band whose
        minimum is ``<=`` the value wins.
    fallback_name / fallback_color:
        Band used when no cut point matches.
    """

    bands: tuple[Band, ...]
    fallback_name: str
    fallback_color: str

    def __post_init__(self) -> None:
        minima = [band.minimum for band in self.bands]
        if any(a < b for a, b in zip(minima, minima[1:], strict=False)):
            msg = f"grading bands must be in descending order, got {minima}"
            raise ValueError(msg)

    @property
    def fallback(self) -> Band:
        return Band(float("-inf"), self.fallback_name, self.fallback_color)

    def grade(self, value: float) -> Band:
        for band in self.bands:
            if value >= band.minimum:
                return band
        return self.fallback

    def rank(self, value: float) -> int:
        """Return the band index for *value* (0 is best, ``len(bands)`` is the fallback)."""
        for idx, band in enumerate(self.bands):
            if value >= band.minimum:
                return idx
        return len(self.bands)


@dataclass(frozen=True, slots=True)
class ThresholdConfig:
    """Cut points for the generator palette over ``[0, 100]``."""

    excellent: float = 95.0
    good: float = 85.0
    acceptable: float = 75.0
    low: float = 60.0

    def __post_init__(self) -> None:
        cuts = (self.excellent, self.good, self.acceptable, self.low)
        if any(a < b for a, b in zip(cuts, cuts[1:], strict=False)):
            msg = (
                "thresholds must satisfy excellent >= good >= acceptable >= low, "
                f"got {cuts}"
            )
            raise ValueError(msg)

    def policy(self) -> GradingPolicy:
        return GradingPolicy(
            bands=(
                Band(self.excellent, "excellent", GENERATOR_COLORS["excellent"]),
                Band(self.good, "good", GENERATOR_COLORS["good"]),
                Band(self.acceptable, "acceptable", GENERATOR_COLORS["acceptable"]),
                Band(self.low, "low", GENERATOR_COLORS["low"]),
            ),
            fallback_name="poor",
            fallback_color=GENERATOR_COLORS["poor"],
        )


GENERATOR_COLORS: dict[str, str] = {
    "excellent": "#28a745",
    "good": "#3fb950",
    "acceptable": "#ffc107",
    "low": "#fd7e14",
    "poor": "#dc3545",
}


def color_by_name(name: str) -> str:
    """Return the generator palette colour for a band name, neutral gray if unknown."""
    return GENERATOR_COLORS.get(name, NEUTRAL_COLOR)


STATUS_POLICY = GradingPolicy(
    bands=(
        Band(90.0, "excellent", "#3fb950"),
        Band(80.0, "good", "#7c3aed"),
        Band(70.0, "fair", "#d29922"),
        Band(60.0, "poor", "#fb8500"),
    ),
    fallback_name="critical",
    fallback_color="#f85149",
)

# Graded on the absolute change between head and base coverage.
DIFF_MAGNITUDE_POLICY = GradingPolicy(
    bands=(
        Band(5.0, "major", "#f85149"),
        Band(2.0, "moderate", "#fb8500"),
        Band(0.5, "minor", "#d29922"),
    ),
    fallback_name="stable",
    fallback_color="#3fb950",
)

QUALITY_POLICY = GradingPolicy(
    bands=(
        Band(95.0, "A+", "#3fb950"),
        Band(90.0, "A", "#3fb950"),
        Band(85.0, "B+", "#7c3aed"),
        Band(80.0, "B", "#7c3aed"),
        Band(70.0, "C", "#d29922"),
        Band(60.0, "D", "#fb8500"),
    ),
    fallback_name="F",
    fallback_color="#f85149",
)

GRADE_COLORS: dict[str, str] = {
    "A+": "#3fb950",
    "A": "#3fb950",
    "B+": "#7c3aed",
    "B": "#7c3aed",
    "C": "#d29922",
    "D": "#fb8500",
    "F": "#f85149",
}

POSITIVE_COLOR = "#3fb950"
NEGATIVE_COLOR = "#f85149"


def grade_color(grade: str) -> str:
    return GRADE_COLORS.get(grade, NEUTRAL_COLOR)


__all__ = [
    "DIFF_MAGNITUDE_POLICY",
    "GENERATOR_COLORS",
    "GRADE_COLORS",
    "NEGATIVE_COLOR",
    "NEUTRAL_COLOR",
    "POSITIVE_COLOR",
    "QUALITY_POLICY",
    "STATUS_POLICY",
    "Band",
    "GradingPolicy",
    "ThresholdConfig",
    "color_by_name",
    "grade_color",
]
