from __future__ import annotations

from pathlib import Path


def write_output(text: str, destination: Path | None) -> None:
    """Write output to stdout or a file (PATH or '-' for stdout)."""
    if destination is None or destination == Path("-"):
        print(text)
        return
    destination.parent.mkdir(parents=True, exist_ok=True)
    destination.write_text(text, encoding="utf-8")


def write_bytes(data: bytes, destination: Path | None) -> None:
    """Write binary output, e.g. an SVG badge, to a file or stdout."""
    if destination is None or destination == Path("-"):
        print(data.decode("utf-8"))
        return
    destination.parent.mkdir(parents=True, exist_ok=True)
    destination.write_bytes(data)
