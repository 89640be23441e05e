"""Artifact storage keyed by ``(pr_number, filename)``."""

from __future__ import annotations

import datetime
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from covbadge._meta import logger

SVG_GLOB = "*.svg"


def pr_key(pr_number: int) -> str:
    """Relative location of a PR's artifacts, shared by every store."""
    return f"pr/{pr_number}"


@dataclass(frozen=True, slots=True)
class StoredArtifact:
    name: str
    location: str
    size: int
    modified: datetime.datetime


class ArtifactStore(Protocol):
    """Persistence used by the PR badge manager."""

    def prepare(self, pr_number: int) -> None:
        """Make the PR location ready for writes; raise ``OSError`` on failure."""
        ...

    def write(self, pr_number: int, file_name: str, data: bytes) -> StoredArtifact: ...

    def read(self, pr_number: int, file_name: str) -> bytes: ...

    def list(self, pr_number: int) -> list[StoredArtifact]:
        """Return the stored SVG artifacts for a PR, empty if it has none."""
        ...

    def remove(self, pr_number: int) -> bool:
        """Delete everything stored for a PR; return whether anything existed."""
        ...

    def location(self, pr_number: int, file_name: str) -> str: ...


class FilesystemStore:
    """Store badges under ``{base_path}/pr/{number}/``."""

    def __init__(
        self,
        base_path: str | Path,
        *,
        dir_mode: int = 0o755,
        file_mode: int = 0o644,
        create_directories: bool = True,
    ) -> None:
        self.base_path = Path(base_path)
        self.dir_mode = dir_mode
        self.file_mode = file_mode
        self.create_directories = create_directories

    def directory(self, pr_number: int) -> Path:
        return self.base_path / pr_key(pr_number)

    def location(self, pr_number: int, file_name: str) -> str:
        return str(self.directory(pr_number) / file_name)

    def prepare(self, pr_number: int) -> None:
        if not self.create_directories:
            return
        directory = self.directory(pr_number)
        directory.mkdir(mode=self.dir_mode, parents=True, exist_ok=True)
        logger.debug("prepared badge directory %s", directory)

    def write(self, pr_number: int, file_name: str, data: bytes) -> StoredArtifact:
        path = self.directory(pr_number) / file_name
        path.write_bytes(data)
        path.chmod(self.file_mode)
        return self._describe(path)

    def read(self, pr_number: int, file_name: str) -> bytes:
        return (self.directory(pr_number) / file_name).read_bytes()

    def list(self, pr_number: int) -> list[StoredArtifact]:
        directory = self.directory(pr_number)
        if not directory.is_dir():
            return []
        return [self._describe(p) for p in sorted(directory.glob(SVG_GLOB)) if p.is_file()]

    def remove(self, pr_number: int) -> bool:
        directory = self.directory(pr_number)
        if not directory.exists():
            return False
        shutil.rmtree(directory)
        logger.info("removed badge directory %s", directory)
        return True

    @staticmethod
    def _describe(path: Path) -> StoredArtifact:
        stat = path.stat()
        return StoredArtifact(
            name=path.name,
            location=str(path),
            size=stat.st_size,
            modified=datetime.datetime.fromtimestamp(stat.st_mtime, tz=datetime.UTC),
        )


class MemoryStore:
    """In-memory store, useful for tests and dry runs."""

    def __init__(self, root: str = "memory://coverage-badges") -> None:
        self.root = root.rstrip("/")
        self._files: dict[int, dict[str, tuple[bytes, datetime.datetime]]] = {}

    def location(self, pr_number: int, file_name: str) -> str:
        return f"{self.root}/{pr_key(pr_number)}/{file_name}"

    def prepare(self, pr_number: int) -> None:
        self._files.setdefault(pr_number, {})

    def write(self, pr_number: int, file_name: str, data: bytes) -> StoredArtifact:
        files = self._files.setdefault(pr_number, {})
        files[file_name] = (bytes(data), datetime.datetime.now(datetime.UTC))
        return self._describe(pr_number, file_name)

    def read(self, pr_number: int, file_name: str) -> bytes:
        try:
            return self._files[pr_number][file_name][0]
        except KeyError as exc:
            raise FileNotFoundError(self.location(pr_number, file_name)) from exc

    def list(self, pr_number: int) -> list[StoredArtifact]:
        names = sorted(n for n in self._files.get(pr_number, {}) if n.endswith(".svg"))
        return [self._describe(pr_number, n) for n in names]

    def remove(self, pr_number: int) -> bool:
        return self._files.pop(pr_number, None) is not None

    def _describe(self, pr_number: int, file_name: str) -> StoredArtifact:
        data, modified = self._files[pr_number][file_name]
        return StoredArtifact(
            name=file_name,
            location=self.location(pr_number, file_name),
            size=len(data),
            modified=modified,
        )


__all__ = [
    "ArtifactStore",
    "FilesystemStore",
    "MemoryStore",
    "StoredArtifact",
    "pr_key",
]
