"""Generator of CKEditor 5 plugin packages.

The package resolves the versions of the CKEditor 5 dependencies, then
selects, renders and writes a template library into a new package
directory. The pieces are usable programmatically and through the command
line interface.
"""

from __future__ import annotations

from .config import (
    FormattedName,
    FormattedNames,
    GenerationOptions,
    LegacyMode,
    PackageManager,
    ProgrammingLanguage,
    format_name,
)
from .errors import (
    GeneratorError,
    InvalidNameError,
    TemplateNotFoundError,
    TemplateRenderError,
    VersionLookupError,
    WriteError,
)
from .scaffold import PackageScaffolder
from .template import TemplateRenderer
from .versions import VersionResolver

__all__ = [
    "FormattedName",
    "FormattedNames",
    "GenerationOptions",
    "GeneratorError",
    "InvalidNameError",
    "LegacyMode",
    "PackageManager",
    "PackageScaffolder",
    "ProgrammingLanguage",
    "TemplateNotFoundError",
    "TemplateRenderError",
    "TemplateRenderer",
    "VersionLookupError",
    "VersionResolver",
    "WriteError",
    "format_name",
]

__version__ = "0.1.0"
