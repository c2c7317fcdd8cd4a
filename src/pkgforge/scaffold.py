"""Selection, path mapping and rendering of the template library."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path, PurePosixPath
from typing import Callable, Iterator

from .config import GenerationOptions, LegacyMode, ProgrammingLanguage
from .errors import DuplicateOutputError, TemplateNotFoundError
from .io.interfaces import FileWriter, TemplateSource
from .io.schema import OutputFile, SourceCategory, TemplateFile
from .logger import LoggingProgressLogger, ProgressLogger
from .template import TemplateRenderer, TextRenderer

__all__ = [
    "BINARY_SUFFIXES",
    "PLACEHOLDER",
    "PackageScaffolder",
    "TemplateLayout",
    "layout_for",
]


LOGGER = logging.getLogger(__name__)

PLACEHOLDER = "_PLACEHOLDER_"
TEXT_SUFFIX = ".txt"
SOURCE_DIRECTORY = "src"

BINARY_SUFFIXES = frozenset(
    {
        ".png", ".jpg", ".jpeg", ".gif", ".ico", ".webp",
        ".woff", ".woff2", ".ttf", ".otf", ".eot",
        ".zip", ".gz", ".tgz", ".pdf",
    }
)


@dataclass(frozen=True, slots=True)
class TemplateLayout:
    """Directories of the template library used for one kind of package."""

    template_dir: str
    common_dir: str = "common"


_LAYOUTS: dict[tuple[ProgrammingLanguage, LegacyMode], TemplateLayout] = {
    (ProgrammingLanguage.JAVASCRIPT, LegacyMode.STANDARD): TemplateLayout("js"),
    (ProgrammingLanguage.JAVASCRIPT, LegacyMode.LEGACY): TemplateLayout("js-legacy"),
    (ProgrammingLanguage.TYPESCRIPT, LegacyMode.STANDARD): TemplateLayout("ts"),
    (ProgrammingLanguage.TYPESCRIPT, LegacyMode.LEGACY): TemplateLayout("ts-legacy"),
}


def layout_for(language: ProgrammingLanguage, legacy_mode: LegacyMode) -> TemplateLayout:
    return _LAYOUTS[(ProgrammingLanguage(language), LegacyMode(legacy_mode))]


def _strip_leading_segment(source_path: str) -> PurePosixPath:
    parts = PurePosixPath(source_path).parts
    return PurePosixPath(*parts[1:])


def _replace_placeholder(part: str, replacement: str) -> str:
    if part == PLACEHOLDER or part.startswith(PLACEHOLDER + "."):
        return replacement + part[len(PLACEHOLDER):]
    return part


def _strip_text_suffix(name: str) -> str:
    suffixes = PurePosixPath(name).suffixes
    if len(suffixes) >= 2 and suffixes[-1] == TEXT_SUFFIX:
        return name[: -len(TEXT_SUFFIX)]
    return name


class PackageScaffolder:
    """Generate a package from a template library.

    The library holds a ``common`` directory shared by every package and one
    directory per (language, legacy mode) combination, each mirroring the
    tree of the generated package. Files are listed, rendered and written one
    by one; a failure stops the run and leaves the files already written in
    place. Two templates mapping onto the same destination raise
    :class:`DuplicateOutputError` before the second one is written.

    ``strict`` selects the missing policy of the default renderer. A custom
    ``renderer`` carries its own policy, so passing both is rejected.
    """

    def __init__(
        self,
        source: TemplateSource,
        writer: FileWriter,
        *,
        renderer: TextRenderer | None = None,
        logger: ProgressLogger | None = None,
        clock: Callable[[], datetime] | None = None,
        strict: bool = False,
    ) -> None:
        if renderer is not None and strict:
            raise ValueError("strict applies to the default renderer only, configure the custom renderer instead")

        self.source = source
        self.writer = writer
        self.renderer = renderer or TemplateRenderer(missing="error" if strict else "empty")
        self.logger = logger or LoggingProgressLogger()
        self.clock = clock or datetime.now

    def select(self, options: GenerationOptions) -> list[TemplateFile]:
        """Return the templates used for ``options``: common files first."""

        layout = layout_for(options.programming_language, options.legacy_mode)
        return [
            *self._collect(layout.common_dir, SourceCategory.COMMON),
            *self._collect(layout.template_dir, SourceCategory.VARIANT),
        ]

    def destination_for(self, template: TemplateFile, options: GenerationOptions) -> Path:
        """Map ``template`` onto its path inside ``options.directory_path``."""

        parts = list(template.relative_path.parts)
        if parts and parts[0] == SOURCE_DIRECTORY:
            name = options.formatted_names.plugin.lower_case_merged
            parts = [SOURCE_DIRECTORY, *(_replace_placeholder(part, name) for part in parts[1:])]
        if parts:
            parts[-1] = _strip_text_suffix(parts[-1])

        return Path(options.directory_path).joinpath(*parts)

    def build(self, options: GenerationOptions) -> list[OutputFile]:
        """Render every selected template without writing anything."""

        return list(self._iter_output_files(options))

    def render(self, options: GenerationOptions) -> list[OutputFile]:
        """Render every selected template and write it under the destination root."""

        self.logger.process("Copying files...")

        written: list[OutputFile] = []
        for output in self._iter_output_files(options):
            self.writer.ensure_directory(output.destination.parent)
            if isinstance(output.content, bytes):
                self.writer.write_bytes(output.destination, output.content)
            else:
                self.writer.write_text(output.destination, output.content)
            self.logger.verbose_info(str(output.destination))
            written.append(output)

        return written

    def _collect(self, directory: str, category: SourceCategory) -> list[TemplateFile]:
        if not self.source.exists(directory):
            raise TemplateNotFoundError(directory)

        return [
            TemplateFile(
                category=category,
                source_path=path,
                relative_path=_strip_leading_segment(path),
            )
            for path in self.source.glob(f"{directory}/**/*")
            if self.source.is_file(path)
        ]

    def _iter_output_files(self, options: GenerationOptions) -> Iterator[OutputFile]:
        context = options.context()
        context["now"] = self.clock()

        produced: set[Path] = set()
        for template in self.select(options):
            destination = self.destination_for(template, options)
            if destination in produced:
                raise DuplicateOutputError(str(destination), template.source_path)
            produced.add(destination)

            yield OutputFile(
                destination=destination,
                content=self._render_content(template, context),
                source=template,
            )

    def _render_content(self, template: TemplateFile, context: dict) -> str | bytes:
        if template.relative_path.suffix.lower() in BINARY_SUFFIXES:
            return self.source.read_bytes(template.source_path)

        try:
            text = self.source.read_text(template.source_path)
        except UnicodeDecodeError:
            LOGGER.debug("copying %s verbatim, it is not UTF-8 text", template.source_path)
            return self.source.read_bytes(template.source_path)

        return self.renderer.render_string(text, context)
