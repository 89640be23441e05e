"""Logo name resolution and recolouring for embedded SVG data URIs."""

from __future__ import annotations

import base64
import binascii
import re

from covbadge._meta import logger

SVG_DATA_URI_PREFIX = "data:image/svg+xml;base64,"

_GO_LOGO = (
    SVG_DATA_URI_PREFIX
    + "PHN2ZyB4bWxucz0iaHR0cDovL3d3dy53My5vcmcvMjAwMC9zdmciIHZpZXdCb3g9IjAgMCAyNCAyNCIgZmlsbD0iY3VycmVudENvbG9yIj48cGF0aCBkPSJNMS44IDEwLjFjLS4xIDAtLjEgMC0uMS0uMWwuMi0uMy4xLS4xaDRsLjEuMS0uMi4zLS4xLjF6bS0xLjcgMWMtLjEgMC0uMSAwLS4xLS4xbC4yLS4zLjEtLjFoNS4xbC4xLjEtLjEuMy0uMS4xem0yLjcgMWMtLjEgMC0uMSAwLS4xLS4xbC4yLS4zLjEtLjFoMi4ybC4xLjF2LjNsLS4xLjF6bTExLjktMi4yYy0uNy4yLTEuMi4zLTEuOS41LS4yIDAtLjIuMS0uNC0uMS0uMi0uMy0uNC0uNC0uOC0uNi0xLjEtLjUtMi4xLS40LTMuMS4zLTEuMi44LTEuOCAxLjktMS44IDMuMyAwIDEuNCAxIDIuNiAyLjQgMi44IDEuMi4yIDIuMi0uMyAzLTEuMi4yLS4yLjMtLjQuNS0uN0g5LjRjLS40IDAtLjUtLjItLjQtLjUuMy0uNi43LTEuNiAxLTIuMS4xLS4xLjItLjMuNC0uM2g2LjRjMCAuNSAwIC45LS4xIDEuNC0uMiAxLjItLjcgMi40LTEuNCAzLjQtMS4yIDEuNi0yLjggMi42LTQuOCAyLjktMS43LjItMy4yLS4xLTQuNi0xLjEtMS4zLS45LTItMi4yLTIuMi0zLjctLjItMS45LjMtMy41IDEuNC01IDEuMi0xLjYgMi44LTIuNiA0LjgtMyAxLjYtLjMgMy4yLS4xIDQuNi44LjkuNiAxLjYgMS40IDIgMi40LjEuMiAwIC4yLS4yLjN6Ii8+PC9zdmc+"
)

_GITHUB_LOGO = (
    SVG_DATA_URI_PREFIX
    + "PHN2ZyB4bWxucz0iaHR0cDovL3d3dy53My5vcmcvMjAwMC9zdmciIHZpZXdCb3g9IjAgMCAyNCAyNCIgZmlsbD0iY3VycmVudENvbG9yIj48cGF0aCBkPSJNMTIgLjNhMTIgMTIgMCAwIDAtMy44IDIzLjRjLjYuMS44LS4zLjgtLjZ2LTIuMmMtMy4zLjctNC0xLjQtNC0xLjQtLjYtMS40LTEuNC0xLjgtMS40LTEuOC0xLS43LjEtLjcuMS0uNyAxLjIuMSAxLjggMS4yIDEuOCAxLjIgMSAxLjggMi44IDEuMyAzLjUgMSAwLS44LjQtMS4zLjctMS42LTIuNy0uMy01LjUtMS4zLTUuNS02IDAtMS4yLjUtMi4zIDEuMy0zLjEtLjItLjQtLjYtMS42IDAtMy4yIDAgMCAxLS4zIDMuNCAxLjJhMTEuNSAxMS41IDAgMCAxIDYgMGMyLjMtMS41IDMuMy0xLjIgMy4zLTEuMi42IDEuNi4yIDIuOC4xIDMuMi44LjggMS4zIDEuOSAxLjMgMy4yIDAgNC42LTIuOCA1LjYtNS41IDUuOS41LjQuOSAxIC45IDIuMnYzLjNjMCAuMy4xLjcuOC42QTEyIDEyIDAgMCAwIDEyIC4zIi8+PC9zdmc+"
)

BUILTIN_LOGOS: dict[str, str] = {
    "go": _GO_LOGO,
    "github": _GITHUB_LOGO,
}

_FILL_ATTR = re.compile(r'fill="[^"]*"')
_BLACK_FILLS = ('fill="#000000"', 'fill="#000"', 'fill="black"')


def resolve_logo(logo: str) -> str:
    """Return an <image> href for *logo*, or "" for no logo.

    Built-in names are case-insensitive. URLs and data URIs pass through
    unchanged. Anything else resolves to no logo.
    """
    if not logo:
        return ""
    builtin = BUILTIN_LOGOS.get(logo.lower())
    if builtin is not None:
        return builtin
    if logo.startswith(("http", "data:")):
        return logo
    logger.debug("unknown logo %r, rendering without logo", logo)
    return ""


def apply_svg_color(svg: str, color: str) -> str:
    """Recolour an SVG document so its glyphs render in *color*."""
    recoloured = svg.replace("currentColor", color)
    target = f'fill="{color}"'
    if 'fill="' not in recoloured:
        end = recoloured.find(">")
        if end == -1:
            return recoloured
        return f"{recoloured[:end]} {target}{recoloured[end:]}"

    for black in _BLACK_FILLS:
        recoloured = recoloured.replace(black, target)
    if 'fill="#' in recoloured and target not in recoloured:
        recoloured = _FILL_ATTR.sub(target, recoloured, count=1)
    return recoloured


def apply_logo_color(logo_uri: str, color: str) -> str:
    """Recolour a base64 SVG data URI; other URIs are returned as-is."""
    if not color or not logo_uri.startswith(SVG_DATA_URI_PREFIX):
        return logo_uri
    payload = logo_uri.removeprefix(SVG_DATA_URI_PREFIX)
    try:
        svg = base64.b64decode(payload, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        logger.debug("logo data URI is not valid base64 SVG, leaving colour untouched")
        return logo_uri
    encoded = base64.b64encode(apply_svg_color(svg, color).encode("utf-8")).decode("ascii")
    return SVG_DATA_URI_PREFIX + encoded


__all__ = [
    "BUILTIN_LOGOS",
    "SVG_DATA_URI_PREFIX",
    "apply_logo_color",
    "apply_svg_color",
    "resolve_logo",
]
