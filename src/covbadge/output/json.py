from __future__ import annotations

import dataclasses
import json
from typing import TYPE_CHECKING, Any

from jsonschema import validate

from covbadge._meta import __version__
from covbadge.core.config import get_schema

if TYPE_CHECKING:
    from covbadge.core.models import Info, PRBadgeResult

SCHEMA_VERSION = 1


def _badge(info: Info) -> dict[str, Any]:
    metadata = dataclasses.asdict(info.metadata)
    metadata["generated_at"] = info.metadata.generated_at.isoformat()
    return {
        "type": info.type,
        "style": info.style,
        "file_path": info.file_path,
        "public_url": info.public_url,
        "size": info.size,
        "dimensions": dataclasses.asdict(info.dimensions),
        "metadata": metadata,
    }


def result_to_dict(result: PRBadgeResult) -> dict[str, Any]:
    """Return the JSON-ready manifest of *result*, validated against the packaged schema."""
    payload: dict[str, Any] = {
        "schema_version": SCHEMA_VERSION,
        "tool": {"name": "covbadge", "version": __version__},
        "base_url": result.base_url,
        "generated_at": result.generated_at.isoformat(),
        "total_badges": result.total_badges,
        "badges": [_badge(info) for info in result.all_badges()],
        "errors": [
            {"type": err.badge_type, "style": err.style, "message": str(err)}
            for err in result.errors
        ],
    }
    validate(payload, get_schema())
    return payload


def format_result_json(result: PRBadgeResult) -> str:
    return json.dumps(result_to_dict(result), indent=2, sort_keys=True, ensure_ascii=False)
