"""I/O interfaces and records for the generator."""

from .interfaces import FileWriter, TemplateSource
from .schema import OutputFile, SourceCategory, TemplateFile

__all__ = [
    "FileWriter",
    "OutputFile",
    "SourceCategory",
    "TemplateFile",
    "TemplateSource",
]
