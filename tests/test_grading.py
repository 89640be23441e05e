from __future__ import annotations

import pytest

from covbadge.core.grading import (
    DIFF_MAGNITUDE_POLICY,
    NEUTRAL_COLOR,
    QUALITY_POLICY,
    STATUS_POLICY,
    Band,
    GradingPolicy,
    ThresholdConfig,
    color_by_name,
    grade_color,
)


@pytest.mark.parametrize(
    ("percentage", "expected"),
    [
        (100.0, "#28a745"),
        (95.0, "#28a745"),
        (94.9, "#3fb950"),
        (85.0, "#3fb950"),
        (80.0, "#ffc107"),
        (75.0, "#ffc107"),
        (60.0, "#fd7e14"),
        (59.9, "#dc3545"),
        (0.0, "#dc3545"),
    ],
)
def test_default_generator_bands(percentage: float, expected: str) -> None:
    assert ThresholdConfig().policy().grade(percentage).color == expected


def test_custom_thresholds_shift_bands() -> None:
    policy = ThresholdConfig(excellent=90, good=80, acceptable=70, low=50).policy()
    assert policy.grade(91).name == "excellent"
    assert policy.grade(55).name == "low"
    assert policy.grade(49).name == "poor"


def test_threshold_config_rejects_unordered_cut_points() -> None:
    with pytest.raises(ValueError, match="excellent >= good"):
        ThresholdConfig(excellent=80, good=90)


def test_grading_policy_rejects_ascending_bands() -> None:
    with pytest.raises(ValueError, match="descending"):
        GradingPolicy(bands=(Band(10, "a", "#000"), Band(20, "b", "#111")), fallback_name="c", fallback_color="#222")


@pytest.mark.parametrize(
    "policy",
    [ThresholdConfig().policy(), STATUS_POLICY, QUALITY_POLICY, DIFF_MAGNITUDE_POLICY],
)
def test_band_rank_is_monotonic(policy: GradingPolicy) -> None:
    values = [step / 2 for step in range(201)]
    ranks = [policy.rank(v) for v in values]
    assert all(later <= earlier for earlier, later in zip(ranks, ranks[1:], strict=False))


def test_every_percentage_maps_to_exactly_one_band() -> None:
    policy = ThresholdConfig().policy()
    names = {b.name for b in policy.bands} | {policy.fallback_name}
    for step in range(1001):
        assert policy.grade(step / 10).name in names


@pytest.mark.parametrize(
    ("coverage", "name", "color"),
    [
        (92.0, "excellent", "#3fb950"),
        (85.0, "good", "#7c3aed"),
        (75.0, "fair", "#d29922"),
        (65.0, "poor", "#fb8500"),
        (50.0, "critical", "#f85149"),
    ],
)
def test_status_policy(coverage: float, name: str, color: str) -> None:
    band = STATUS_POLICY.grade(coverage)
    assert (band.name, band.color) == (name, color)


@pytest.mark.parametrize(
    ("coverage", "grade"),
    [(96, "A+"), (90, "A"), (87, "B+"), (80, "B"), (72, "C"), (60, "D"), (10, "F")],
)
def test_quality_policy(coverage: float, grade: str) -> None:
    assert QUALITY_POLICY.grade(coverage).name == grade


def test_palettes_stay_distinct() -> None:
    # "good" is green in the generator palette but purple for status badges.
    assert color_by_name("good") == "#3fb950"
    assert STATUS_POLICY.grade(85).color == "#7c3aed"
    assert color_by_name("nonsense") == NEUTRAL_COLOR
    assert grade_color("Z") == NEUTRAL_COLOR
