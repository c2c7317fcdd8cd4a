"""Abstract interfaces for the generator's filesystem collaborators."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path


class TemplateSource(ABC):
    """Read-only access to a template library.

    Paths are POSIX strings relative to the library root.
    """

    @abstractmethod
    def glob(self, pattern: str) -> list[str]:
        """Return the files and directories matching ``pattern``."""

    @abstractmethod
    def exists(self, path: str) -> bool:
        """Whether ``path`` names a file or directory of the library."""

    @abstractmethod
    def is_file(self, path: str) -> bool:
        """Whether ``path`` names a regular file."""

    @abstractmethod
    def read_text(self, path: str) -> str:
        """Return the UTF-8 content of ``path``.

        Raises :class:`~pkgforge.errors.TemplateNotFoundError` when the file is
        missing and :class:`UnicodeDecodeError` when it is not text.
        """

    @abstractmethod
    def read_bytes(self, path: str) -> bytes:
        """Return the raw content of ``path``."""


class FileWriter(ABC):
    """Destination of the rendered files."""

    @abstractmethod
    def ensure_directory(self, path: Path) -> None:
        """Create ``path`` and its parents; a no-op when it already exists."""

    @abstractmethod
    def write_text(self, path: Path, content: str) -> None:
        """Write ``content`` to ``path`` as UTF-8 text."""

    @abstractmethod
    def write_bytes(self, path: Path, content: bytes) -> None:
        """Write ``content`` to ``path`` verbatim."""


__all__ = ["FileWriter", "TemplateSource"]
