"""Concrete I/O adapter implementations."""

from .local import LocalFileWriter, LocalTemplateSource, bundled_templates

__all__ = [
    "LocalFileWriter",
    "LocalTemplateSource",
    "bundled_templates",
]
