"""Records passed between the template source, the scaffolder and the writer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path, PurePosixPath
from typing import Union


class SourceCategory(str, Enum):
    """Where a template file was collected from."""

    COMMON = "common"
    VARIANT = "variant"


@dataclass(frozen=True, slots=True)
class TemplateFile:
    """A template selected for the current run.

    ``source_path`` is relative to the template root and keeps its leading
    directory (``js/src/index.js``); ``relative_path`` has it stripped
    (``src/index.js``). The content is read only when the file is rendered.
    """

    category: SourceCategory
    source_path: str
    relative_path: PurePosixPath


@dataclass(frozen=True, slots=True)
class OutputFile:
    """A rendered file and the place it is written to."""

    destination: Path
    content: Union[str, bytes]
    source: TemplateFile

    @property
    def is_binary(self) -> bool:
        return isinstance(self.content, bytes)


__all__ = [
    "OutputFile",
    "SourceCategory",
    "TemplateFile",
]
