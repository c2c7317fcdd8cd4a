from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
for entry in (SRC, ROOT):
    if str(entry) not in sys.path:
        sys.path.insert(0, str(entry))

from pkgforge.config import GenerationOptions  # noqa: E402
from tests.fixtures.memory_io import RecordingLogger, RecordingWriter  # noqa: E402


@pytest.fixture()
def options() -> GenerationOptions:
    """Options mirroring a package generated for ``@foo/ckeditor5-featurename``."""

    return GenerationOptions.create(
        "@foo/ckeditor5-featurename",
        "directory/path/foo",
        plugin_name="BarBaz",
        package_manager="yarn",
        package_versions={
            "ckeditor5_dev_build_tools": "40.0.0",
            "ckeditor5": "30.0.0",
            "package_tools": "25.0.0",
        },
    )


@pytest.fixture()
def writer() -> RecordingWriter:
    return RecordingWriter()


@pytest.fixture()
def logger() -> RecordingLogger:
    return RecordingLogger()


@pytest.fixture(autouse=True)
def restore_pkgforge_logger():
    from pkgforge.logger import LOGGER

    handlers, level, propagate = list(LOGGER.handlers), LOGGER.level, LOGGER.propagate
    yield
    LOGGER.handlers[:] = handlers
    LOGGER.setLevel(level)
    LOGGER.propagate = propagate
