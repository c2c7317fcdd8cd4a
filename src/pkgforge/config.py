"""Generation options shared by the scaffolder and the CLI."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any, Dict, Mapping

from pydantic import BaseModel, ConfigDict, Field

from .errors import InvalidNameError
from .naming import (
    package_stem,
    to_camel_case,
    to_lower_case_merged,
    to_pascal_case,
    to_spaced_out,
    validate_package_name,
    validate_plugin_name,
)

__all__ = [
    "FormattedName",
    "FormattedNames",
    "GenerationOptions",
    "LegacyMode",
    "PackageManager",
    "ProgrammingLanguage",
    "format_name",
]


class ProgrammingLanguage(str, Enum):
    """Source language of the generated package."""

    JAVASCRIPT = "js"
    TYPESCRIPT = "ts"


class LegacyMode(str, Enum):
    """Whether the generated package also supports the legacy installation methods."""

    STANDARD = "standard"
    LEGACY = "legacy"


class PackageManager(str, Enum):
    """Package manager used in the scripts of the generated manifest."""

    NPM = "npm"
    YARN = "yarn"
    PNPM = "pnpm"


class FormattedName(BaseModel):
    """A single name spelled in every form the templates need."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    raw: str = Field(..., description="Name as provided or derived, untouched.")
    spaced_out: str = Field(..., description="Words separated by spaces, first one capitalised.")
    camel_case: str = Field(..., description="camelCase form.")
    pascal_case: str = Field(..., description="PascalCase form.")
    lower_case_merged: str = Field(..., description="All words lowercased and merged.")


class FormattedNames(BaseModel):
    """Formatted names of the package and of its default plugin class."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    package: FormattedName
    plugin: FormattedName


def format_name(raw: str) -> FormattedName:
    """Build a :class:`FormattedName` from ``raw``."""

    return FormattedName(
        raw=raw,
        spaced_out=to_spaced_out(raw),
        camel_case=to_camel_case(raw),
        pascal_case=to_pascal_case(raw),
        lower_case_merged=to_lower_case_merged(raw),
    )


class GenerationOptions(BaseModel):
    """Everything the scaffolder needs to generate one package.

    Attributes
    ----------
    package_name:
        Full npm name of the new package, for example
        ``@foo/ckeditor5-featurename``.
    programming_language:
        Selects the JavaScript or TypeScript template set.
    legacy_mode:
        Selects the template set supporting the legacy installation methods.
    formatted_names:
        Names of the package and of its default plugin in every casing.
    package_manager:
        Used only inside script strings of the rendered manifest.
    directory_path:
        Root directory receiving the generated files.
    package_versions:
        Version map produced by :class:`pkgforge.versions.VersionResolver`.
    dll_configuration:
        Opaque settings forwarded to the templates as they are.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    package_name: str
    programming_language: ProgrammingLanguage = ProgrammingLanguage.JAVASCRIPT
    legacy_mode: LegacyMode = LegacyMode.STANDARD
    formatted_names: FormattedNames
    package_manager: PackageManager = PackageManager.NPM
    directory_path: Path
    package_versions: Dict[str, str] = Field(default_factory=dict)
    dll_configuration: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def create(
        cls,
        package_name: str,
        directory_path: str | Path,
        *,
        package_versions: Mapping[str, str] | None = None,
        programming_language: ProgrammingLanguage | str = ProgrammingLanguage.JAVASCRIPT,
        legacy_mode: LegacyMode | bool = LegacyMode.STANDARD,
        plugin_name: str | None = None,
        global_name: str | None = None,
        package_manager: PackageManager | str = PackageManager.NPM,
    ) -> "GenerationOptions":
        """Validate the names and derive every other option from them.

        Parameters
        ----------
        package_name:
            npm name of the new package; must pass
            :func:`pkgforge.naming.validate_package_name`.
        directory_path:
            Destination root of the generated package.
        package_versions:
            Resolved dependency versions.
        plugin_name:
            Class name of the default plugin. Defaults to the PascalCase form
            of the package name without its ``ckeditor5-`` prefix.
        global_name:
            Name of the global variable exposing the DLL build. Defaults to
            the plugin name.
        """

        error = validate_package_name(package_name)
        if error:
            raise InvalidNameError(error)

        package = format_name(package_stem(package_name))
        plugin = format_name(plugin_name or package.pascal_case)
        error = validate_plugin_name(plugin.raw)
        if error:
            raise InvalidNameError(error)

        if isinstance(legacy_mode, bool):
            legacy_mode = LegacyMode.LEGACY if legacy_mode else LegacyMode.STANDARD

        return cls(
            package_name=package_name,
            programming_language=ProgrammingLanguage(programming_language),
            legacy_mode=LegacyMode(legacy_mode),
            formatted_names=FormattedNames(package=package, plugin=plugin),
            package_manager=PackageManager(package_manager),
            directory_path=Path(directory_path),
            package_versions=dict(package_versions or {}),
            dll_configuration={
                "library": global_name or plugin.pascal_case,
                "file_name": f"{package.lower_case_merged}.js",
            },
        )

    @property
    def legacy(self) -> bool:
        return self.legacy_mode is LegacyMode.LEGACY

    def context(self) -> dict[str, Any]:
        """Return the variables exposed to the templates."""

        context = self.model_dump(mode="json")
        context["directory_path"] = self.directory_path
        context["legacy"] = self.legacy
        return context
