"""Shields.io-style SVG badge rendering."""

from __future__ import annotations

import math
from dataclasses import dataclass, field, fields, replace
from html import escape
from typing import TYPE_CHECKING

from covbadge._meta import logger
from covbadge.core.grading import NEUTRAL_COLOR, ThresholdConfig, color_by_name
from covbadge.core.logos import apply_logo_color, resolve_logo
from covbadge.core.models import Dimensions
from covbadge.core.types import BadgeStyle
from covbadge.errors import BadgeCancelledError

if TYPE_CHECKING:
    from threading import Event

# Average glyph advance for 11px Verdana.
CHAR_WIDTH = 6.5
LOGO_WIDTH = 16
# Horizontal padding, including the extra room in the message section.
PADDING = 28
HEIGHT = 20
FOR_THE_BADGE_HEIGHT = HEIGHT + 8

TREND_THRESHOLD = 0.1

_FLAT_TEMPLATE = """\
<svg xmlns="http://www.w3.org/2000/svg" xmlns:xlink="http://www.w3.org/1999/xlink" \
width="{width}" height="{height}" role="img" aria-label="{aria}">
  <title>{aria}</title>
  <linearGradient id="s" x2="0" y2="100%">
    <stop offset="0" stop-color="#bbb" stop-opacity=".1"/>
    <stop offset="1" stop-opacity=".1"/>
  </linearGradient>
  <clipPath id="r">
    <rect width="{width}" height="{height}" rx="3" fill="#fff"/>
  </clipPath>
  <g clip-path="url(#r)">
    <rect width="{rect_x}" height="{height}" fill="#555"/>
    <rect x="{rect_x}" width="{rect_width}" height="{height}" fill="{color}"/>
    <rect width="{width}" height="{height}" fill="url(#s)"/>
  </g>
  <g fill="#fff" text-anchor="middle" font-family="Verdana,Geneva,DejaVu Sans,sans-serif" \
text-rendering="geometricPrecision" font-size="11">
    {logo}
    <text aria-hidden="true" x="{label_x}" y="15" fill="#010101" fill-opacity=".3">{label}</text>
    <text x="{label_x}" y="14">{label}</text>
    <text aria-hidden="true" x="{message_x}" y="15" fill="#010101" fill-opacity=".3">{message}</text>
    <text x="{message_x}" y="14">{message}</text>
  </g>
</svg>"""

_FLAT_SQUARE_TEMPLATE = """\
<svg xmlns="http://www.w3.org/2000/svg" xmlns:xlink="http://www.w3.org/1999/xlink" \
width="{width}" height="{height}" role="img" aria-label="{aria}">
  <title>{aria}</title>
  <g shape-rendering="crispEdges">
    <rect width="{rect_x}" height="{height}" fill="#555"/>
    <rect x="{rect_x}" width="{rect_width}" height="{height}" fill="{color}"/>
  </g>
  <g fill="#fff" text-anchor="middle" font-family="Verdana,Geneva,DejaVu Sans,sans-serif" \
text-rendering="geometricPrecision" font-size="11">
    {logo}
    <text x="{label_x}" y="15">{label}</text>
    <text x="{message_x}" y="15">{message}</text>
  </g>
</svg>"""

_FOR_THE_BADGE_TEMPLATE = """\
<svg xmlns="http://www.w3.org/2000/svg" xmlns:xlink="http://www.w3.org/1999/xlink" \
width="{width}" height="{height}" role="img" aria-label="{aria}">
  <title>{aria}</title>
  <g shape-rendering="crispEdges">
    <rect width="{rect_x}" height="{height}" fill="#555"/>
    <rect x="{rect_x}" width="{rect_width}" height="{height}" fill="{color}"/>
  </g>
  <g fill="#fff" text-anchor="middle" font-family="Verdana,Geneva,DejaVu Sans,sans-serif" \
text-rendering="geometricPrecision" font-size="11" font-weight="bold">
    {logo}
    <text x="{label_x}" y="19">{label}</text>
    <text x="{message_x}" y="19">{message}</text>
  </g>
</svg>"""

_LOGO_TEMPLATE = '<image x="5" y="{y}" width="{size}" height="{size}" xlink:href="{href}"/>'


@dataclass(frozen=True, slots=True)
class BadgeConfig:
    """Per-generator defaults."""

    style: str = BadgeStyle.FLAT.value
    label: str = "coverage"
    logo: str = ""
    logo_color: str = "white"
    thresholds: ThresholdConfig = field(default_factory=ThresholdConfig)


@dataclass(frozen=True, slots=True)
class BadgeOptions:
    """Per-call overrides; ``None`` keeps the generator default."""

    style: str | None = None
    label: str | None = None
    logo: str | None = None
    logo_color: str | None = None


@dataclass(frozen=True, slots=True)
class BadgeContent:
    """Everything that determines the rendered bytes of one badge."""

    label: str
    message: str
    color: str
    style: str = BadgeStyle.FLAT.value
    logo: str = ""
    logo_color: str = ""
    aria_label: str = ""


def sanitize_text(text: str) -> str:
    """Replace code points UTF-8 cannot encode, such as lone surrogates, with ``?``."""
    return text.encode("utf-8", "replace").decode("utf-8")


def utf8_length(text: str) -> int:
    return len(text.encode("utf-8", "replace"))


def text_width(text: str) -> int:
    """Approximate rendered width of *text* in pixels.

    Measured on the UTF-8 byte length, so arrows and other multi-byte glyphs
    take proportionally more room.
    """
    return math.ceil(utf8_length(text) * CHAR_WIDTH)


def _sanitized(content: BadgeContent) -> BadgeContent:
    return replace(content, **{f.name: sanitize_text(getattr(content, f.name)) for f in fields(content)})


@dataclass(frozen=True, slots=True)
class _Layout:
    label_width: int
    message_width: int
    logo_width: int
    width: int
    height: int

    @property
    def label_x(self) -> int:
        return self.logo_width + self.label_width // 2 + 6

    @property
    def message_x(self) -> int:
        return self.logo_width + self.label_width + self.message_width // 2 + 16

    @property
    def rect_x(self) -> int:
        return self.logo_width + self.label_width + 8

    @property
    def rect_width(self) -> int:
        return self.message_width + 20


def _layout(content: BadgeContent) -> _Layout:
    label_width = text_width(content.label)
    message_width = text_width(content.message)
    logo_width = LOGO_WIDTH if content.logo else 0
    height = FOR_THE_BADGE_HEIGHT if content.style == BadgeStyle.FOR_THE_BADGE else HEIGHT
    return _Layout(
        label_width=label_width,
        message_width=message_width,
        logo_width=logo_width,
        width=label_width + message_width + logo_width + PADDING,
        height=height,
    )


def measure(content: BadgeContent) -> Dimensions:
    """Return the pixel dimensions :meth:`BadgeGenerator.render` will produce."""
    layout = _layout(_sanitized(content))
    return Dimensions(width=layout.width, height=layout.height)


def trend_message(diff: float) -> tuple[str, str]:
    """Return the trend badge message and colour for a coverage change."""
    if diff > TREND_THRESHOLD:
        return f"↑ +{diff:.1f}%", color_by_name("excellent")
    if diff < -TREND_THRESHOLD:
        return f"↓ {diff:.1f}%", color_by_name("low")
    return "→ stable", NEUTRAL_COLOR


class BadgeGenerator:
    """Render coverage and trend badges as SVG bytes."""

    def __init__(self, config: BadgeConfig | None = None) -> None:
        self._config = config or BadgeConfig()
        self._policy = self._config.thresholds.policy()

    @property
    def config(self) -> BadgeConfig:
        return self._config

    def color_for_percentage(self, percentage: float) -> str:
        return self._policy.grade(percentage).color

    def generate(
        self,
        percentage: float,
        options: BadgeOptions | None = None,
        *,
        cancel: Event | None = None,
    ) -> bytes:
        """Render a coverage badge showing *percentage* to one decimal place."""
        opts = options or BadgeOptions()
        cfg = self._config
        logo_color = cfg.logo_color if opts.logo_color is None else opts.logo_color
        content = BadgeContent(
            label=cfg.label if opts.label is None else opts.label,
            message=f"{percentage:.1f}%",
            color=self.color_for_percentage(percentage),
            style=cfg.style if opts.style is None else opts.style,
            logo=resolve_logo(cfg.logo if opts.logo is None else opts.logo),
            logo_color=logo_color,
            aria_label=f"Code coverage: {percentage:.1f} percent",
        )
        return self.render(content, cancel=cancel)

    def generate_trend_badge(
        self,
        current: float,
        previous: float,
        options: BadgeOptions | None = None,
        *,
        cancel: Event | None = None,
    ) -> bytes:
        """Render a badge describing the change from *previous* to *current*."""
        opts = options or BadgeOptions()
        message, color = trend_message(current - previous)

        content = BadgeContent(
            label="trend" if opts.label is None else opts.label,
            message=message,
            color=color,
            style=self._config.style if opts.style is None else opts.style,
            logo=resolve_logo(opts.logo or ""),
            logo_color=opts.logo_color or "",
            aria_label=f"Coverage trend: {message}",
        )
        return self.render(content, cancel=cancel)

    def render(self, content: BadgeContent, *, cancel: Event | None = None) -> bytes:
        """Render *content*; unknown styles fall back to ``flat``."""
        if cancel is not None and cancel.is_set():
            raise BadgeCancelledError

        content = _sanitized(content)
        layout = _layout(content)
        style = BadgeStyle.parse(content.style)
        if style is None:
            logger.debug("unknown badge style %r, rendering as flat", content.style)
            style = BadgeStyle.FLAT

        label, message = content.label, content.message
        if style is BadgeStyle.FLAT_SQUARE:
            template = _FLAT_SQUARE_TEMPLATE
        elif style is BadgeStyle.FOR_THE_BADGE:
            template = _FOR_THE_BADGE_TEMPLATE
            label, message = label.upper(), message.upper()
        else:
            template = _FLAT_TEMPLATE

        svg = template.format(
            width=layout.width,
            height=layout.height,
            aria=escape(content.aria_label),
            rect_x=layout.rect_x,
            rect_width=layout.rect_width,
            color=escape(content.color),
            logo=self._logo_element(content, style),
            label_x=layout.label_x,
            message_x=layout.message_x,
            label=escape(label),
            message=escape(message),
        )
        return svg.encode("utf-8")

    @staticmethod
    def _logo_element(content: BadgeContent, style: BadgeStyle) -> str:
        if not content.logo:
            return ""
        href = apply_logo_color(content.logo, content.logo_color)
        if style is BadgeStyle.FOR_THE_BADGE:
            return _LOGO_TEMPLATE.format(y=6, size=16, href=escape(href))
        return _LOGO_TEMPLATE.format(y=3, size=14, href=escape(href))


__all__ = [
    "BadgeConfig",
    "BadgeContent",
    "BadgeGenerator",
    "BadgeOptions",
    "measure",
    "sanitize_text",
    "text_width",
    "utf8_length",
    "trend_message",
]
