"""Settings discovery from ``pyproject.toml`` and ``COVBADGE_*`` environment variables."""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import TYPE_CHECKING, Any

from covbadge._meta import logger
from covbadge.core.config import ENV_PREFIX, PYPROJECT_TABLE
from covbadge.core.generator import BadgeConfig
from covbadge.core.grading import ThresholdConfig
from covbadge.core.models import PRBadgeConfig
from covbadge.core.types import BadgeStyle, NamingScheme
from covbadge.errors import ConfigError

if TYPE_CHECKING:
    from collections.abc import Mapping

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


@dataclass(frozen=True, slots=True)
class Settings:
    """Resolved user configuration.

    Precedence (lowest to highest): built-in defaults, ``[tool.covbadge]`` in
    ``pyproject.toml``, ``COVBADGE_*`` environment variables.
    """

    # Mapping fields cannot be hashed.
    __hash__ = None  # type: ignore[assignment]

    style: str = BadgeStyle.FLAT.value
    label: str = "coverage"
    logo: str = ""
    logo_color: str = "white"
    output_dir: str = "./coverage-badges"
    styles: tuple[str, ...] = tuple(s.value for s in BadgeStyle)
    default_style: str = BadgeStyle.FLAT.value
    naming: str = NamingScheme.LEGACY.value
    include_timestamp: bool = False
    enable_cleanup: bool = True
    multiple_styles: bool = True
    thresholds: ThresholdConfig = field(default_factory=ThresholdConfig)
    patterns: Mapping[str, str] = field(default_factory=dict)

    def badge_config(self) -> BadgeConfig:
        if BadgeStyle.parse(self.style) is None:
            msg = f"invalid badge style: {self.style!r}"
            raise ConfigError(msg)
        return BadgeConfig(
            style=self.style,
            label=self.label,
            logo=self.logo,
            logo_color=self.logo_color,
            thresholds=self.thresholds,
        )

    def pr_config(self, **overrides: Any) -> PRBadgeConfig:
        values: dict[str, Any] = {
            "output_base_path": self.output_dir,
            "styles": self.styles,
            "default_style": self.default_style,
            "naming": self.naming,
            "include_timestamp": self.include_timestamp,
            "enable_cleanup": self.enable_cleanup,
            "generate_multiple_styles": self.multiple_styles,
            "patterns": dict(self.patterns) or None,
        }
        values.update(overrides)
        return PRBadgeConfig(**values)


def _parse_bool(value: object, key: str) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    msg = f"invalid boolean for {key}: {value!r}"
    raise ConfigError(msg)


def _parse_float(value: object, key: str) -> float:
    try:
        return float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        msg = f"invalid number for {key}: {value!r}"
        raise ConfigError(msg) from exc


def _parse_list(value: object, key: str) -> tuple[str, ...]:
    if isinstance(value, str):
        return tuple(part.strip() for part in value.split(",") if part.strip())
    if isinstance(value, (list, tuple)):
        return tuple(str(part) for part in value)
    msg = f"expected a list for {key}, got {value!r}"
    raise ConfigError(msg)


_STRING_KEYS = ("style", "label", "logo", "logo_color", "output_dir", "default_style", "naming")
_BOOL_KEYS = ("include_timestamp", "enable_cleanup", "multiple_styles")
_THRESHOLD_KEYS = tuple(f.name for f in fields(ThresholdConfig))


def _apply(settings: Settings, raw: Mapping[str, Any], *, source: str) -> Settings:
    updates: dict[str, Any] = {}
    for key in _STRING_KEYS:
        if key in raw:
            updates[key] = str(raw[key])
    for key in _BOOL_KEYS:
        if key in raw:
            updates[key] = _parse_bool(raw[key], f"{source}:{key}")
    if "styles" in raw:
        updates["styles"] = _parse_list(raw["styles"], f"{source}:styles")

    thresholds = raw.get("thresholds", {})
    if not isinstance(thresholds, dict):
        msg = f"{source}:thresholds must be a table"
        raise ConfigError(msg)
    cuts = {
        key: _parse_float(thresholds[key], f"{source}:thresholds.{key}")
        for key in _THRESHOLD_KEYS
        if key in thresholds
    }
    if cuts:
        try:
            updates["thresholds"] = replace(settings.thresholds, **cuts)
        except ValueError as exc:
            raise ConfigError(str(exc)) from exc

    patterns = raw.get("patterns", {})
    if not isinstance(patterns, dict):
        msg = f"{source}:patterns must be a table"
        raise ConfigError(msg)
    if patterns:
        updates["patterns"] = {**settings.patterns, **{str(k): str(v) for k, v in patterns.items()}}

    return replace(settings, **updates)


def _read_pyproject(pyproject: Path) -> dict[str, Any]:
    try:
        with pyproject.open("rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning("Failed to parse %s: %s", pyproject, e)
        return {}
    table = data.get("tool", {}).get(PYPROJECT_TABLE, {})
    if not isinstance(table, dict):
        msg = f"[tool.{PYPROJECT_TABLE}] in {pyproject} must be a table"
        raise ConfigError(msg)
    if table:
        logger.info("Using badge settings from %s", pyproject)
    return table


def _read_env(env: Mapping[str, str]) -> dict[str, Any]:
    raw: dict[str, Any] = {}
    for key in (*_STRING_KEYS, *_BOOL_KEYS, "styles"):
        name = f"{ENV_PREFIX}{key.upper()}"
        if name in env:
            raw[key] = env[name]
    thresholds = {
        key: env[f"{ENV_PREFIX}THRESHOLD_{key.upper()}"]
        for key in _THRESHOLD_KEYS
        if f"{ENV_PREFIX}THRESHOLD_{key.upper()}" in env
    }
    if thresholds:
        raw["thresholds"] = thresholds
    return raw


def load_settings(
    pyproject: Path | None = None,
    env: Mapping[str, str] | None = None,
) -> Settings:
    """Resolve :class:`Settings` from *pyproject* and *env*.

    *pyproject* defaults to ``./pyproject.toml`` and is optional; *env*
    defaults to :data:`os.environ`.
    """
    settings = Settings()
    path = pyproject if pyproject is not None else Path("./pyproject.toml").resolve()
    if path.exists():
        settings = _apply(settings, _read_pyproject(path), source=str(path))
    elif pyproject is not None:
        msg = f"configuration file not found: {pyproject}"
        raise ConfigError(msg)
    settings = _apply(settings, _read_env(os.environ if env is None else env), source="env")
    logger.debug("resolved settings: %s", settings)
    return settings


__all__ = ["Settings", "load_settings"]
