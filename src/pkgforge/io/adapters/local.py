"""Local filesystem-backed template source and writer."""

from __future__ import annotations

from importlib import resources
from pathlib import Path

from ...errors import TemplateNotFoundError, WriteError
from ..interfaces import FileWriter, TemplateSource


def _ensure_directory(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


class LocalTemplateSource(TemplateSource):
    """Serve templates from a directory on disk.

    Listings are sorted so that the order in which files are generated does
    not depend on the filesystem.
    """

    def __init__(self, root: Path | str):
        self._root = Path(root)

    @property
    def root(self) -> Path:
        """Directory backing this source."""

        return self._root

    def glob(self, pattern: str) -> list[str]:
        return sorted(path.relative_to(self._root).as_posix() for path in self._root.glob(pattern))

    def exists(self, path: str) -> bool:
        return (self._root / path).exists()

    def is_file(self, path: str) -> bool:
        return (self._root / path).is_file()

    def read_text(self, path: str) -> str:
        return self._file(path).read_text(encoding="utf-8")

    def read_bytes(self, path: str) -> bytes:
        return self._file(path).read_bytes()

    def _file(self, path: str) -> Path:
        candidate = self._root / path
        if not candidate.is_file():
            raise TemplateNotFoundError(path)
        return candidate


class LocalFileWriter(FileWriter):
    """Write rendered files to the local filesystem."""

    def ensure_directory(self, path: Path) -> None:
        try:
            _ensure_directory(path)
        except OSError as exc:
            raise WriteError(str(path), exc.strerror or str(exc)) from exc

    def write_text(self, path: Path, content: str) -> None:
        try:
            # newline="" keeps the line endings of the template untouched.
            with path.open("w", encoding="utf-8", newline="") as handle:
                handle.write(content)
        except OSError as exc:
            raise WriteError(str(path), exc.strerror or str(exc)) from exc

    def write_bytes(self, path: Path, content: bytes) -> None:
        try:
            path.write_bytes(content)
        except OSError as exc:
            raise WriteError(str(path), exc.strerror or str(exc)) from exc


def bundled_templates() -> LocalTemplateSource:
    """Return a source serving the template library shipped with the package."""

    return LocalTemplateSource(Path(str(resources.files("pkgforge") / "templates")))


__all__ = [
    "LocalFileWriter",
    "LocalTemplateSource",
    "bundled_templates",
]
