from __future__ import annotations

import threading
from collections.abc import Callable
from pathlib import Path

import pytest

from covbadge.core.manager import PRBadgeManager
from covbadge.core.models import PRBadgeConfig, PRBadgeRequest
from covbadge.core.store import MemoryStore, StoredArtifact
from covbadge.errors import (
    BadgeArtifactError,
    BadgeCancelledError,
    ConfigError,
    OutputDirectoryError,
    UnsupportedBadgeTypeError,
)

ManagerFactory = Callable[..., PRBadgeManager]
RequestFactory = Callable[..., PRBadgeRequest]


def test_full_matrix_is_written(make_manager: ManagerFactory, make_request: RequestFactory, pr_dir: Path) -> None:
    request = make_request(
        types=("coverage", "trend", "status", "comparison"),
        styles=("flat", "flat-square"),
    )
    result = make_manager().generate_pr_badges(request)

    assert result.ok
    assert result.total_badges == 8
    assert sorted(p.name for p in pr_dir.iterdir()) == sorted(
        f"badge-{t}-{s}.svg"
        for t in ("coverage", "trend", "status", "comparison")
        for s in ("flat", "flat-square")
    )
    assert result.base_url == "https://test-owner.github.io/test-repo/coverage/pr/42"
    assert result.public_urls["coverage"] == (
        f"{result.base_url}/badge-coverage-flat.svg",
        f"{result.base_url}/badge-coverage-flat-square.svg",
    )
    assert result.local_paths["trend"][0] == str(pr_dir / "badge-trend-flat.svg")


def test_total_matches_badges_and_errors_are_disjoint(
    make_manager: ManagerFactory, make_request: RequestFactory
) -> None:
    request = make_request(types=("coverage", "bogus", "quality"), styles=("flat", "for-the-badge"))
    result = make_manager().generate_pr_badges(request)

    assert result.total_badges == len(result.all_badges()) == 4
    assert len(result.errors) == 2
    succeeded = {(i.type, i.style) for i in result.all_badges()}
    failed = {(e.badge_type, e.style) for e in result.errors}
    assert not succeeded & failed


def test_unsupported_type_fails_alone(make_manager: ManagerFactory, make_request: RequestFactory, pr_dir: Path) -> None:
    result = make_manager().generate_pr_badges(make_request(types=("coverage", "bogus")))

    assert result.total_badges == 1
    assert len(result.errors) == 1
    error = result.errors[0]
    assert isinstance(error, BadgeArtifactError)
    assert isinstance(error.__cause__, UnsupportedBadgeTypeError)
    assert "unsupported badge type: bogus" in str(error)
    assert [p.name for p in pr_dir.iterdir()] == ["badge-coverage-flat.svg"]


def test_generation_is_idempotent(make_request: RequestFactory, tmp_path: Path) -> None:
    request = make_request(types=("coverage", "trend", "status"), styles=("flat", "for-the-badge"))
    first = PRBadgeManager(config=PRBadgeConfig(output_base_path=str(tmp_path / "one")))
    second = PRBadgeManager(config=PRBadgeConfig(output_base_path=str(tmp_path / "two")))
    first.generate_pr_badges(request)
    second.generate_pr_badges(request)
    first.generate_pr_badges(request)

    one = tmp_path / "one" / "pr" / "42"
    two = tmp_path / "two" / "pr" / "42"
    names = sorted(p.name for p in one.iterdir())
    assert names == sorted(p.name for p in two.iterdir())
    for name in names:
        assert (one / name).read_bytes() == (two / name).read_bytes()


def test_unwritable_output_directory_raises(make_request: RequestFactory, tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    manager = PRBadgeManager(config=PRBadgeConfig(output_base_path=str(blocker)))
    with pytest.raises(OutputDirectoryError, match="failed to create output directory"):
        manager.generate_pr_badges(make_request())


def test_cancelled_generation_reports_every_artifact(
    make_manager: ManagerFactory, make_request: RequestFactory, pr_dir: Path
) -> None:
    cancel = threading.Event()
    cancel.set()
    result = make_manager().generate_pr_badges(
        make_request(types=("coverage", "status"), styles=("flat",)), cancel=cancel
    )
    assert result.total_badges == 0
    assert len(result.errors) == 2
    assert all(isinstance(e.__cause__, BadgeCancelledError) for e in result.errors)
    assert list(pr_dir.iterdir()) == []


def test_styles_default_to_config(make_manager: ManagerFactory, make_request: RequestFactory) -> None:
    request = make_request(styles=())
    assert make_manager().resolve_styles(request) == ("flat", "flat-square", "for-the-badge")
    single = make_manager(generate_multiple_styles=False, default_style="flat-square")
    assert single.resolve_styles(request) == ("flat-square",)
    assert make_manager().generate_pr_badges(request).total_badges == 3


@pytest.mark.parametrize(
    ("coverage", "message", "color"),
    [(92.0, "excellent", "#3fb950"), (85.0, "good", "#7c3aed"), (50.0, "critical", "#f85149")],
)
def test_status_badge(
    make_manager: ManagerFactory,
    make_request: RequestFactory,
    pr_dir: Path,
    coverage: float,
    message: str,
    color: str,
) -> None:
    make_manager().generate_pr_badges(make_request(coverage=coverage, types=("status",)))
    svg = (pr_dir / "badge-status-flat.svg").read_text()
    assert f">{message}<" in svg
    assert color in svg
    assert ">status<" in svg


@pytest.mark.parametrize(
    ("coverage", "base", "message"),
    [(85.0, 80.0, "+5.0%"), (80.0, 85.0, "-5.0%"), (80.05, 80.0, "±0.0%")],
)
def test_comparison_badge(
    make_manager: ManagerFactory,
    make_request: RequestFactory,
    pr_dir: Path,
    coverage: float,
    base: float,
    message: str,
) -> None:
    make_manager().generate_pr_badges(make_request(coverage=coverage, base_coverage=base, types=("comparison",)))
    assert f">{message}<" in (pr_dir / "badge-comparison-flat.svg").read_text()


@pytest.mark.parametrize(
    ("coverage", "base", "message"),
    [(86.0, 80.0, "+major"), (80.0, 83.0, "-moderate"), (81.0, 80.0, "+minor"), (80.2, 80.0, "stable")],
)
def test_diff_badge(
    make_manager: ManagerFactory,
    make_request: RequestFactory,
    pr_dir: Path,
    coverage: float,
    base: float,
    message: str,
) -> None:
    make_manager().generate_pr_badges(make_request(coverage=coverage, base_coverage=base, types=("diff",)))
    assert f">{message}<" in (pr_dir / "badge-diff-flat.svg").read_text()


@pytest.mark.parametrize(
    ("grade", "coverage", "message"),
    [("B", 50.0, "B"), ("", 96.0, "A+"), ("", 55.0, "F")],
)
def test_quality_badge(
    make_manager: ManagerFactory,
    make_request: RequestFactory,
    pr_dir: Path,
    grade: str,
    coverage: float,
    message: str,
) -> None:
    request = make_request(coverage=coverage, quality_grade=grade, types=("quality",))
    make_manager().generate_pr_badges(request)
    assert f">{message}<" in (pr_dir / "badge-quality-flat.svg").read_text()


def test_custom_labels(make_manager: ManagerFactory, make_request: RequestFactory, pr_dir: Path) -> None:
    request = make_request(types=("coverage", "trend"), custom_labels={"coverage": "cov"})
    make_manager().generate_pr_badges(request)
    assert ">cov<" in (pr_dir / "badge-coverage-flat.svg").read_text()
    assert ">trend<" in (pr_dir / "badge-trend-flat.svg").read_text()


def test_info_records_request_metadata(make_manager: ManagerFactory, make_request: RequestFactory) -> None:
    request = make_request(quality_grade="A", commit_sha="deadbeef", base_coverage=80.0)
    info = make_manager().generate_pr_badges(request).badges["coverage"][0]
    assert info.type == "coverage"
    assert info.style == "flat"
    assert info.size > 0
    assert info.dimensions.height == 20
    assert info.dimensions.width == len("coverage") * 6 + len("85.5%") * 6 + 20
    assert info.metadata.version == "2.0"
    assert info.metadata.change == pytest.approx(5.5)
    assert info.metadata.commit_sha == "deadbeef"
    assert info.metadata.pr_number == 42


def test_standard_badges(make_manager: ManagerFactory, make_request: RequestFactory) -> None:
    manager = make_manager()
    request = make_request(types=("diff",))
    result = manager.generate_standard_pr_badges(request)
    assert set(result.badges) == {"coverage", "trend", "status", "comparison"}
    assert request.types == ("diff",)

    graded = manager.generate_standard_pr_badges(make_request(quality_grade="A"))
    assert "quality" in graded.badges


def test_calculate_dimensions() -> None:
    dims = PRBadgeManager.calculate_dimensions("coverage", "85.5%", "flat")
    assert (dims.width, dims.height) == (98, 20)
    # "±" is two bytes in UTF-8.
    assert PRBadgeManager.calculate_dimensions("comparison", "±0.0%", "flat").width == 116
    assert PRBadgeManager.calculate_dimensions("a", "b", "for-the-badge").height == 28


def test_custom_pattern_and_timestamp(make_manager: ManagerFactory, make_request: RequestFactory) -> None:
    manager = make_manager(patterns={"coverage": "{type}-{branch}-{timestamp}.svg"}, include_timestamp=True)
    name = manager.build_file_name("coverage", "flat", make_request(branch="dev"))
    assert name == "coverage-dev-20231225-103045.svg"
    assert manager.build_file_name("trend", "flat", make_request()) == "badge-trend-flat.svg"


def test_cleanup_removes_pr_directory(make_manager: ManagerFactory, make_request: RequestFactory, pr_dir: Path) -> None:
    manager = make_manager()
    manager.generate_pr_badges(make_request())
    assert manager.cleanup_pr_badges("test-owner", "test-repo", 42) is True
    assert not pr_dir.exists()
    assert manager.cleanup_pr_badges("test-owner", "test-repo", 42) is False


def test_cleanup_of_unknown_pr_is_noop(make_manager: ManagerFactory, tmp_path: Path) -> None:
    assert make_manager().cleanup_pr_badges("o", "r", 999) is False
    assert not (tmp_path / "badges").exists()


def test_cleanup_disabled_keeps_badges(make_manager: ManagerFactory, make_request: RequestFactory, pr_dir: Path) -> None:
    manager = make_manager(enable_cleanup=False)
    manager.generate_pr_badges(make_request())
    assert manager.cleanup_pr_badges("test-owner", "test-repo", 42) is False
    assert pr_dir.is_dir()


def test_get_pr_info_rebuilds_inventory(make_manager: ManagerFactory, make_request: RequestFactory, pr_dir: Path) -> None:
    manager = make_manager()
    manager.generate_pr_badges(make_request(types=("coverage",), styles=("flat",)))
    manager.generate_pr_badges(make_request(types=("status",), styles=("flat-square",)))
    (pr_dir / "notes.txt").write_text("ignored")
    (pr_dir / "random.svg").write_text("<svg/>")

    info = manager.get_pr_info("test-owner", "test-repo", 42)
    assert info.total_badges == 2
    coverage = info.badges["coverage"][0]
    assert coverage.style == "flat"
    assert (coverage.dimensions.width, coverage.dimensions.height) == (113, 20)
    assert coverage.public_url.endswith("/pr/42/badge-coverage-flat.svg")
    # Legacy names cannot tell a dashed style from the type.
    assert info.badges["status-flat"][0].style == "square"


def test_get_pr_info_with_strict_naming(make_manager: ManagerFactory, make_request: RequestFactory) -> None:
    manager = make_manager(naming="strict")
    manager.generate_pr_badges(make_request(types=("status", "trend"), styles=("flat-square", "for-the-badge")))
    info = manager.get_pr_info("test-owner", "test-repo", 42)
    assert info.total_badges == 4
    assert {b.style for b in info.badges["status"]} == {"flat-square", "for-the-badge"}


def test_get_pr_info_for_unknown_pr(make_manager: ManagerFactory) -> None:
    info = make_manager().get_pr_info("o", "r", 7)
    assert info.total_badges == 0
    assert info.base_url == "https://o.github.io/r/coverage/pr/7"


def test_memory_store_backs_manager(make_request: RequestFactory) -> None:
    manager = PRBadgeManager(store=MemoryStore())
    result = manager.generate_pr_badges(make_request(types=("coverage", "trend")))
    assert result.total_badges == 2
    assert result.local_paths["coverage"] == ("memory://coverage-badges/pr/42/badge-coverage-flat.svg",)
    assert manager.get_pr_info("test-owner", "test-repo", 42).total_badges == 2
    assert manager.cleanup_pr_badges("test-owner", "test-repo", 42) is True


def test_duplicate_types_are_rejected(make_request: RequestFactory) -> None:
    with pytest.raises(ValueError, match="duplicate badge types"):
        make_request(types=("coverage", "coverage"))


@pytest.mark.parametrize(
    ("kwargs", "match"),
    [
        ({"styles": ("flat", "plastic")}, "unknown badge styles"),
        ({"styles": ("flat", "flat")}, "duplicate badge styles"),
        ({"styles": ()}, "at least one"),
        ({"default_style": "plastic"}, "unknown default badge style"),
        ({"patterns": {"nope": "x.svg"}}, "unknown badge type"),
        ({"patterns": {"coverage": ""}}, "empty file name pattern"),
        ({"naming": "fancy"}, "unknown naming scheme"),
        ({"file_permissions": 0o17777}, "file_permissions"),
    ],
)
def test_config_validation(kwargs: dict[str, object], match: str) -> None:
    with pytest.raises(ConfigError, match=match):
        PRBadgeConfig(**kwargs)


class _CancelAfterFirstWrite(MemoryStore):
    def __init__(self, cancel: threading.Event) -> None:
        super().__init__()
        self.cancel = cancel

    def write(self, pr_number: int, file_name: str, data: bytes) -> StoredArtifact:
        stored = super().write(pr_number, file_name, data)
        self.cancel.set()
        return stored


def test_cancellation_mid_batch_keeps_completed_badges(make_request: RequestFactory) -> None:
    cancel = threading.Event()
    store = _CancelAfterFirstWrite(cancel)
    manager = PRBadgeManager(store=store)
    result = manager.generate_pr_badges(make_request(types=("coverage", "trend", "status")), cancel=cancel)

    assert result.total_badges == 1
    assert list(result.badges) == ["coverage"]
    assert [(e.badge_type, e.style) for e in result.errors] == [("trend", "flat"), ("status", "flat")]
    assert all(isinstance(e.__cause__, BadgeCancelledError) for e in result.errors)
    assert [a.name for a in store.list(42)] == ["badge-coverage-flat.svg"]


def test_surrogate_label_does_not_abort_batch(
    make_manager: ManagerFactory, make_request: RequestFactory, pr_dir: Path
) -> None:
    request = make_request(types=("coverage", "trend"), custom_labels={"coverage": "cov\udcff"})
    result = make_manager().generate_pr_badges(request)

    assert result.ok
    assert result.total_badges == 2
    assert ">cov?<" in (pr_dir / "badge-coverage-flat.svg").read_text(encoding="utf-8")


class _UnencodableTrendStore(MemoryStore):
    def write(self, pr_number: int, file_name: str, data: bytes) -> StoredArtifact:
        if "trend" in file_name:
            raise UnicodeEncodeError("utf-8", file_name, 0, 1, "surrogates not allowed")
        return super().write(pr_number, file_name, data)


def test_unicode_errors_fail_per_artifact(make_request: RequestFactory) -> None:
    manager = PRBadgeManager(store=_UnencodableTrendStore())
    result = manager.generate_pr_badges(make_request(types=("coverage", "trend", "status")))

    assert result.total_badges == 2
    assert len(result.errors) == 1
    assert result.errors[0].badge_type == "trend"
    assert isinstance(result.errors[0].__cause__, UnicodeEncodeError)


def test_value_types_with_mappings_are_unhashable(make_request: RequestFactory) -> None:
    with pytest.raises(TypeError, match="unhashable"):
        hash(make_request())
    with pytest.raises(TypeError, match="unhashable"):
        hash(PRBadgeConfig())
    assert make_request() == make_request()
