from __future__ import annotations

import datetime
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from covbadge.core.manager import PRBadgeManager
from covbadge.core.models import PRBadgeConfig, PRBadgeRequest

FIXED_TIMESTAMP = datetime.datetime(2023, 12, 25, 10, 30, 45, tzinfo=datetime.UTC)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Return a Click CLI runner for invoking the command-line interface."""
    return CliRunner()


@pytest.fixture
def make_request() -> Callable[..., PRBadgeRequest]:
    def build(**overrides: Any) -> PRBadgeRequest:
        values: dict[str, Any] = {
            "owner": "test-owner",
            "repository": "test-repo",
            "pr_number": 42,
            "coverage": 85.5,
            "base_coverage": 80.0,
            "branch": "feature",
            "commit_sha": "abc123",
            "types": ("coverage",),
            "styles": ("flat",),
            "timestamp": FIXED_TIMESTAMP,
        }
        values.update(overrides)
        return PRBadgeRequest(**values)

    return build


@pytest.fixture
def make_manager(tmp_path: Path) -> Callable[..., PRBadgeManager]:
    def build(**config: Any) -> PRBadgeManager:
        config.setdefault("output_base_path", str(tmp_path / "badges"))
        return PRBadgeManager(config=PRBadgeConfig(**config))

    return build


@pytest.fixture
def pr_dir(tmp_path: Path) -> Path:
    return tmp_path / "badges" / "pr" / "42"
