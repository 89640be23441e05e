from __future__ import annotations

import json
from collections.abc import Callable

import pytest
from jsonschema import validate

from covbadge.core.config import get_schema
from covbadge.core.manager import PRBadgeManager
from covbadge.core.models import PRBadgeRequest, PRBadgeResult
from covbadge.core.store import MemoryStore
from covbadge.output import format_result_json, format_result_table, result_to_dict


@pytest.fixture
def partial_result(make_request: Callable[..., PRBadgeRequest]) -> PRBadgeResult:
    manager = PRBadgeManager(store=MemoryStore())
    return manager.generate_pr_badges(make_request(types=("coverage", "bogus"), styles=("flat", "flat-square")))


def test_manifest_matches_schema(partial_result: PRBadgeResult) -> None:
    payload = result_to_dict(partial_result)
    validate(payload, get_schema())
    assert payload["total_badges"] == 2
    assert payload["tool"]["name"] == "covbadge"
    assert {b["style"] for b in payload["badges"]} == {"flat", "flat-square"}
    assert [e["type"] for e in payload["errors"]] == ["bogus", "bogus"]


def test_json_output_is_stable(partial_result: PRBadgeResult) -> None:
    text = format_result_json(partial_result)
    assert json.loads(text) == result_to_dict(partial_result)
    assert text == format_result_json(partial_result)


def test_table_output(partial_result: PRBadgeResult) -> None:
    text = format_result_table(partial_result)
    assert "badge-coverage-flat-square.svg" in text
    assert "Total badges: 2" in text
    assert text.count("ERROR: failed to generate bogus badge") == 2
    assert "\x1b[" not in text


def test_table_output_with_color(partial_result: PRBadgeResult) -> None:
    assert "\x1b[" in format_result_table(partial_result, color=True)
