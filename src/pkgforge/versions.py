"""Resolution of the dependency versions written into the generated manifest."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path, PurePath
from typing import Callable, Mapping

from .errors import VersionLookupError
from .logger import LoggingProgressLogger, ProgressLogger

__all__ = [
    "PACKAGE_TOOLS",
    "REGISTRY_PACKAGES",
    "VersionLookup",
    "VersionResolver",
    "default_package_tools_path",
    "npm_view_version",
]


LOGGER = logging.getLogger(__name__)

VersionLookup = Callable[[str], str]

#: Symbolic keys exposed to templates mapped to the npm packages they track.
REGISTRY_PACKAGES: Mapping[str, str] = {
    "ckeditor5": "ckeditor5",
    "ckeditor5_premium_features": "ckeditor5-premium-features",
    "ckeditor5_inspector": "@ckeditor/ckeditor5-inspector",
    "ckeditor5_dev_build_tools": "@ckeditor/ckeditor5-dev-build-tools",
    "eslint_config_ckeditor5": "eslint-config-ckeditor5",
    "stylelint_config_ckeditor5": "stylelint-config-ckeditor5",
}

PACKAGE_TOOLS = "@ckeditor/ckeditor5-package-tools"
PACKAGE_TOOLS_DIRECTORY = "ckeditor5-package-tools"
NPM_TIMEOUT = 60


def npm_view_version(package: str) -> str:
    """Return the latest version of ``package`` published on npm."""

    try:
        result = subprocess.run(
            ["npm", "view", package, "version"],
            capture_output=True,
            check=True,
            text=True,
            timeout=NPM_TIMEOUT,
        )
    except FileNotFoundError as exc:
        raise VersionLookupError(package, "the 'npm' executable is not available") from exc
    except subprocess.TimeoutExpired as exc:
        raise VersionLookupError(package, f"npm did not answer within {NPM_TIMEOUT}s") from exc
    except subprocess.CalledProcessError as exc:
        reason = (exc.stderr or "").strip() or f"npm exited with status {exc.returncode}"
        raise VersionLookupError(package, reason) from exc

    return result.stdout.strip()


def default_package_tools_path() -> Path:
    """Locate the package tools checkout living next to this repository."""

    return (Path(__file__).parent / ".." / ".." / ".." / PACKAGE_TOOLS_DIRECTORY).resolve()


class VersionResolver:
    """Collect the versions of every package referenced by the templates.

    ``lookup`` is asked for the latest published version of an npm package.
    In development mode the package tools are not fetched from the registry
    but referenced through a ``file:`` path to a local checkout instead.
    """

    def __init__(
        self,
        lookup: VersionLookup = npm_view_version,
        *,
        logger: ProgressLogger | None = None,
        package_tools_path: PurePath | None = None,
    ) -> None:
        self._lookup = lookup
        self._logger = logger or LoggingProgressLogger()
        self._package_tools_path = package_tools_path

    def resolve(self, dev_mode: bool = False) -> dict[str, str]:
        """Return a fresh version map; nothing is cached between calls."""

        self._logger.process("Collecting the latest CKEditor 5 packages versions...")

        versions = {key: self._fetch(package) for key, package in REGISTRY_PACKAGES.items()}

        if dev_mode:
            versions["package_tools"] = self._local_package_tools()
        else:
            versions["package_tools"] = "^" + self._fetch(PACKAGE_TOOLS)

        return versions

    def _fetch(self, package: str) -> str:
        version = self._lookup(package).strip()
        if not version:
            raise VersionLookupError(package, "the registry returned an empty version")
        LOGGER.debug("resolved %s@%s", package, version)
        return version

    def _local_package_tools(self) -> str:
        path = self._package_tools_path or default_package_tools_path()
        # package.json only accepts forward slashes, Windows included.
        return "file:" + path.as_posix()
