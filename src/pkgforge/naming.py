"""Name validation and case conversion used by the generator."""

from __future__ import annotations

import re
import unicodedata
from typing import Iterable

__all__ = [
    "PACKAGE_PREFIX",
    "package_stem",
    "split_words",
    "to_camel_case",
    "to_lower_case_merged",
    "to_pascal_case",
    "to_spaced_out",
    "unscoped_name",
    "validate_package_name",
    "validate_plugin_name",
]


PACKAGE_PREFIX = "ckeditor5-"
MAX_PACKAGE_NAME_LENGTH = 214

_SCOPE_PATTERN = re.compile(r"^@[a-z0-9][a-z0-9._~-]*$")
_URL_SAFE_PATTERN = re.compile(r"^[a-z0-9_.~-]+$")
_PLUGIN_NAME_PATTERN = re.compile(r"^[a-zA-Z][a-zA-Z0-9]*$")
_WORD_PATTERN = re.compile(r"[A-Z]+(?![a-z])|[A-Z]?[a-z]+|[0-9]+")


def unscoped_name(package_name: str) -> str:
    """Return ``package_name`` without its ``@scope/`` part."""

    if package_name.startswith("@") and "/" in package_name:
        return package_name.split("/", 1)[1]
    return package_name


def package_stem(package_name: str) -> str:
    """Return the feature part of a package name.

    ``@foo/ckeditor5-featurename`` becomes ``featurename``.
    """

    name = unscoped_name(package_name)
    if name.startswith(PACKAGE_PREFIX):
        name = name[len(PACKAGE_PREFIX):]
    return name


def validate_package_name(package_name: str) -> str | None:
    """Return an error message when ``package_name`` is not acceptable, else ``None``.

    The name has to be a valid npm package name and its unscoped part has to
    start with ``ckeditor5-``.
    """

    if not package_name:
        return "The package name must not be empty."

    if len(package_name) > MAX_PACKAGE_NAME_LENGTH:
        return f"The package name cannot be longer than {MAX_PACKAGE_NAME_LENGTH} characters."

    if package_name != package_name.lower():
        return "The package name must not contain uppercase letters."

    if package_name.startswith("@"):
        scope, separator, name = package_name.partition("/")
        if not separator or not _SCOPE_PATTERN.match(scope):
            return "The scope of the package name is invalid. Expected the '@scope/name' format."
    else:
        name = package_name

    if name.startswith((".", "_")):
        return "The package name cannot start with a period or an underscore."

    if not _URL_SAFE_PATTERN.match(name):
        return "The package name can contain only URL-safe characters."

    if not name.startswith(PACKAGE_PREFIX) or len(name) == len(PACKAGE_PREFIX):
        return f"The package name must start with the '{PACKAGE_PREFIX}' prefix followed by a feature name."

    return None


def validate_plugin_name(plugin_name: str) -> str | None:
    """Return an error message when ``plugin_name`` is not a valid class name, else ``None``."""

    if not _PLUGIN_NAME_PATTERN.match(plugin_name):
        return "The plugin name can contain only letters and digits and must start with a letter."
    return None


def split_words(value: str | Iterable[str]) -> list[str]:
    """Split ``value`` into words on separators and case boundaries.

    ``"BarBaz"``, ``"bar-baz"`` and ``"bar baz"`` all give ``["Bar", "Baz"]``
    modulo the original casing.
    """

    if not isinstance(value, str):
        value = " ".join(str(part) for part in value)

    text = unicodedata.normalize("NFKD", value)
    text = text.encode("ascii", "ignore").decode("ascii")
    return _WORD_PATTERN.findall(text)


def to_spaced_out(value: str) -> str:
    words = [word.lower() for word in split_words(value)]
    if not words:
        return ""
    words[0] = words[0].capitalize()
    return " ".join(words)


def to_camel_case(value: str) -> str:
    words = split_words(value)
    if not words:
        return ""
    head, *tail = words
    return head.lower() + "".join(word.capitalize() for word in tail)


def to_pascal_case(value: str) -> str:
    return "".join(word.capitalize() for word in split_words(value))


def to_lower_case_merged(value: str) -> str:
    return "".join(word.lower() for word in split_words(value))
