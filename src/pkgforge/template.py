"""Lightweight string templating used to render the template library."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Mapping, MutableMapping, Protocol

from .errors import TemplateNotFoundError, TemplateRenderError
from .naming import to_camel_case, to_lower_case_merged, to_pascal_case, to_spaced_out

__all__ = [
    "MISSING_POLICIES",
    "TemplateRenderer",
    "TextRenderer",
]


OPEN_TAG = "{{"
CLOSE_TAG = "}}"
MISSING_POLICIES = frozenset({"keep", "empty", "error"})

_PATH_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(?:\.[A-Za-z_][A-Za-z0-9_]*)*$")
_FILTER_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class TextRenderer(Protocol):
    """Minimal interface the scaffolder needs from a template engine."""

    def render_string(self, template: str, context: Mapping[str, Any]) -> str:
        ...


def _resolve_value(context: Mapping[str, Any], dotted_path: str) -> Any:
    value: Any = context
    for segment in dotted_path.split("."):
        if isinstance(value, Mapping):
            if segment not in value:
                raise KeyError(segment)
            value = value[segment]
            continue
        if hasattr(value, segment):
            value = getattr(value, segment)
            if callable(value):
                value = value()
            continue
        raise KeyError(segment)
    return value


def _apply_filter(value: Any, filter_name: str, filters: Mapping[str, Callable[[Any], Any]]) -> Any:
    try:
        filter_func = filters[filter_name]
    except KeyError as exc:
        raise TemplateRenderError(f"unknown filter '{filter_name}'") from exc

    return filter_func(value)


def _line_number(template: str, offset: int) -> int:
    return template.count("\n", 0, offset) + 1


def _parse_expression(expression: str, template: str, offset: int) -> tuple[str, list[str]]:
    parts = [part.strip() for part in expression.split("|")]
    line = _line_number(template, offset)

    if not parts[0]:
        raise TemplateRenderError(f"empty placeholder on line {line}")
    key, *filters = parts
    if not _PATH_PATTERN.match(key):
        raise TemplateRenderError(f"invalid variable '{key}' on line {line}")
    for filter_name in filters:
        if not _FILTER_PATTERN.match(filter_name):
            raise TemplateRenderError(f"invalid filter '{filter_name}' on line {line}")
    return key, filters


@dataclass(slots=True)
class TemplateRenderer:
    """Render templates with ``{{ placeholder|filters }}`` expressions.

    Placeholders hold a dotted path into the context followed by optional
    filters. Mapping keys and attributes are both resolved, and zero-argument
    callables met along the path are called, so ``{{ now.year }}`` works with
    a :class:`~datetime.datetime` in the context.
    """

    filters: MutableMapping[str, Callable[[Any], Any]] = field(default_factory=dict)
    missing: str = "keep"

    def __post_init__(self) -> None:
        if self.missing not in MISSING_POLICIES:
            raise ValueError("missing must be 'keep', 'empty', or 'error'")
        if not self.filters:
            self.filters.update(
                {
                    "upper": lambda value: str(value).upper(),
                    "lower": lambda value: str(value).lower(),
                    "title": lambda value: str(value).title(),
                    "strip": lambda value: str(value).strip(),
                    "repr": lambda value: repr(value),
                    "json": lambda value: json.dumps(value, ensure_ascii=False),
                    "camel": lambda value: to_camel_case(str(value)),
                    "pascal": lambda value: to_pascal_case(str(value)),
                    "spaced": lambda value: to_spaced_out(str(value)),
                    "merged": lambda value: to_lower_case_merged(str(value)),
                }
            )

    def render_string(
        self,
        template: str,
        context: Mapping[str, Any],
        *,
        missing: str | None = None,
    ) -> str:
        """Render ``template`` using ``context``.

        Parameters
        ----------
        template:
            The template string to evaluate.
        context:
            Mapping providing values for placeholders.
        missing:
            Controls what happens when a placeholder cannot be resolved. The
            supported policies are ``"keep"`` (return the placeholder unchanged),
            ``"empty"`` (replace with an empty string) and ``"error"`` (raise
            :class:`TemplateRenderError`). Defaults to :attr:`missing`.

        Raises
        ------
        TemplateRenderError
            When a placeholder is not terminated, is empty, names an unknown
            filter, or cannot be resolved under the ``"error"`` policy.
        """

        policy = self.missing if missing is None else missing
        if policy not in MISSING_POLICIES:
            raise ValueError("missing must be 'keep', 'empty', or 'error'")

        chunks: list[str] = []
        position = 0
        while True:
            start = template.find(OPEN_TAG, position)
            if start == -1:
                chunks.append(template[position:])
                break

            end = template.find(CLOSE_TAG, start + len(OPEN_TAG))
            if end == -1:
                line = _line_number(template, start)
                raise TemplateRenderError(f"unterminated placeholder on line {line}")

            expression = template[start + len(OPEN_TAG):end]
            if OPEN_TAG in expression:
                line = _line_number(template, start)
                raise TemplateRenderError(f"nested placeholder on line {line}")

            chunks.append(template[position:start])
            original = template[start:end + len(CLOSE_TAG)]
            chunks.append(self._substitute(expression, original, context, policy, template, start))
            position = end + len(CLOSE_TAG)

        return "".join(chunks)

    def _substitute(
        self,
        expression: str,
        original: str,
        context: Mapping[str, Any],
        policy: str,
        template: str,
        offset: int,
    ) -> str:
        key, filters = _parse_expression(expression, template, offset)
        try:
            value = _resolve_value(context, key)
        except KeyError:
            if policy == "keep":
                return original
            if policy == "empty":
                return ""
            raise TemplateRenderError(
                f"missing value for '{key}' on line {_line_number(template, offset)}"
            ) from None

        for filter_name in filters:
            value = _apply_filter(value, filter_name, self.filters)

        return str(value)

    def render_file(
        self,
        template_path: str | Path,
        context: Mapping[str, Any],
        *,
        target: str | Path | None = None,
        encoding: str = "utf-8",
        missing: str | None = None,
    ) -> str:
        """Render ``template_path`` and optionally write the result to ``target``."""

        template_path = Path(template_path)
        if not template_path.is_file():
            raise TemplateNotFoundError(str(template_path))

        text = template_path.read_text(encoding=encoding)
        rendered = self.render_string(text, context, missing=missing)

        if target is not None:
            target_path = Path(target)
            target_path.parent.mkdir(parents=True, exist_ok=True)
            target_path.write_text(rendered, encoding=encoding)

        return rendered
