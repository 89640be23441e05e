"""Central configuration constants for ``covbadge``."""

from __future__ import annotations

import json
from functools import cache
from importlib import resources

# Default logging format used by the CLI entry point.
LOG_FORMAT = "%(levelname)s: %(message)s"

ENV_PREFIX = "COVBADGE_"
PYPROJECT_TABLE = "covbadge"


@cache
def get_schema() -> dict[str, object]:
    """Load and cache the JSON schema for badge manifests."""
    return json.loads(
        resources.files("covbadge.data").joinpath("schema.json").read_text(encoding="utf-8")
    )


__all__ = ["ENV_PREFIX", "LOG_FORMAT", "PYPROJECT_TABLE", "get_schema"]
