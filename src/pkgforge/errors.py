"""Custom exception types raised while generating a package."""

from __future__ import annotations

__all__ = [
    "DuplicateOutputError",
    "GeneratorError",
    "InvalidNameError",
    "TemplateNotFoundError",
    "TemplateRenderError",
    "VersionLookupError",
    "WriteError",
]


class GeneratorError(RuntimeError):
    """Base class for every failure reported by the generator."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


class VersionLookupError(GeneratorError):
    """Raised when the registry cannot provide a package version."""

    def __init__(self, package: str, reason: str) -> None:
        super().__init__(f"cannot resolve the version of '{package}': {reason}")
        self.package = package


class TemplateNotFoundError(GeneratorError):
    """Raised when an expected template path is missing from the template source."""

    def __init__(self, path: str) -> None:
        super().__init__(f"template not found: {path}")
        self.path = path


class TemplateRenderError(GeneratorError):
    """Raised when a template is malformed or references a missing variable."""


class WriteError(GeneratorError):
    """Raised when a rendered file cannot be written to disk."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"cannot write '{path}': {reason}")
        self.path = path


class InvalidNameError(GeneratorError, ValueError):
    """Raised when a package or plugin name does not satisfy the naming rules."""


class DuplicateOutputError(GeneratorError):
    """Raised when two templates of a run map onto the same destination path."""

    def __init__(self, path: str, source_path: str) -> None:
        super().__init__(f"'{source_path}' maps onto '{path}', which another template already produced")
        self.path = path
        self.source_path = source_path
