"""Command line interface for the package generator."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Iterable, Sequence

from .config import GenerationOptions, PackageManager, ProgrammingLanguage
from .errors import GeneratorError
from .io.adapters.local import LocalFileWriter, LocalTemplateSource, bundled_templates
from .logger import LoggingProgressLogger, configure_logging
from .naming import unscoped_name, validate_package_name, validate_plugin_name
from .scaffold import PackageScaffolder
from .template import MISSING_POLICIES, TemplateRenderer
from .versions import VersionResolver, npm_view_version


def _parse_key_value_pairs(pairs: Iterable[str]) -> dict[str, str]:
    context: dict[str, str] = {}
    for pair in pairs:
        if "=" not in pair:
            raise argparse.ArgumentTypeError(
                f"invalid key/value pair '{pair}'. Expected KEY=VALUE syntax."
            )
        key, value = pair.split("=", 1)
        key = key.strip()
        if not key:
            raise argparse.ArgumentTypeError("keys must not be empty")
        context[key] = value
    return context


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate CKEditor 5 plugin packages")
    subparsers = parser.add_subparsers(dest="command", required=True)

    init_parser = subparsers.add_parser("init", help="create a new package")
    init_parser.add_argument("package_name", help="npm name of the package, e.g. @scope/ckeditor5-feature")
    init_parser.add_argument(
        "-d",
        "--directory",
        type=Path,
        default=Path.cwd(),
        help="Directory in which the package directory is created",
    )
    init_parser.add_argument(
        "--lang",
        choices=[language.value for language in ProgrammingLanguage],
        default=ProgrammingLanguage.JAVASCRIPT.value,
        help="Programming language of the package",
    )
    init_parser.add_argument(
        "--legacy",
        action="store_true",
        help="Also support the legacy installation methods",
    )
    init_parser.add_argument("--plugin-name", help="Class name of the default plugin")
    init_parser.add_argument("--global-name", help="Global variable exposing the DLL build")
    init_parser.add_argument(
        "--package-manager",
        choices=[manager.value for manager in PackageManager],
        default=PackageManager.NPM.value,
        help="Package manager used by the generated scripts",
    )
    init_parser.add_argument(
        "--dev",
        action="store_true",
        help="Link the package tools from a local checkout instead of npm",
    )
    init_parser.add_argument(
        "--templates",
        type=Path,
        help="Use this template library instead of the bundled one",
    )
    init_parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail on template variables that cannot be resolved",
    )
    init_parser.add_argument(
        "-f",
        "--force",
        action="store_true",
        help="Generate into an existing, non-empty directory",
    )
    init_parser.add_argument("-v", "--verbose", action="store_true", help="Print every created file")

    render_parser = subparsers.add_parser(
        "render", help="render a single template file with moustache style placeholders"
    )
    render_parser.add_argument("template", type=Path, help="Path to the template file")
    render_parser.add_argument(
        "-c",
        "--context",
        metavar="KEY=VALUE",
        action="append",
        default=[],
        help="Values exposed to the template renderer",
    )
    render_parser.add_argument(
        "-o",
        "--output",
        type=Path,
        help="Write the rendered template to this path instead of stdout",
    )
    render_parser.add_argument(
        "--missing",
        choices=sorted(MISSING_POLICIES),
        default="keep",
        help="Behaviour when a placeholder cannot be resolved",
    )

    return parser


def _fail(message: str) -> int:
    sys.stderr.write(f"error: {message}\n")
    return 1


def _handle_init(args: argparse.Namespace) -> int:
    configure_logging(args.verbose)

    error = validate_package_name(args.package_name)
    if error is None and args.plugin_name:
        error = validate_plugin_name(args.plugin_name)
    if error:
        return _fail(error)

    target = args.directory / unscoped_name(args.package_name)
    if target.is_dir() and any(target.iterdir()) and not args.force:
        return _fail(f"{target} already exists and is not empty")

    logger = LoggingProgressLogger()
    source = LocalTemplateSource(args.templates) if args.templates else bundled_templates()

    try:
        versions = VersionResolver(npm_view_version, logger=logger).resolve(args.dev)
        options = GenerationOptions.create(
            args.package_name,
            target,
            package_versions=versions,
            programming_language=args.lang,
            legacy_mode=args.legacy,
            plugin_name=args.plugin_name,
            global_name=args.global_name,
            package_manager=args.package_manager,
        )
        scaffolder = PackageScaffolder(source, LocalFileWriter(), logger=logger, strict=args.strict)
        scaffolder.render(options)
    except GeneratorError as exc:
        return _fail(str(exc))

    manager = options.package_manager.value
    print(f"Package created at {target}")
    print()
    print("Next steps:")
    print(f"  cd {target}")
    print(f"  {manager} install")
    print(f"  {manager} run start")
    return 0


def _handle_render(args: argparse.Namespace) -> int:
    renderer = TemplateRenderer()
    try:
        context = _parse_key_value_pairs(args.context)
    except argparse.ArgumentTypeError as exc:
        return _fail(str(exc))

    try:
        rendered = renderer.render_file(args.template, context, missing=args.missing)
    except GeneratorError as exc:
        return _fail(str(exc))
    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(rendered, encoding="utf-8")
    else:
        sys.stdout.write(rendered)
        if not rendered.endswith("\n"):
            sys.stdout.write("\n")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command == "init":
        return _handle_init(args)
    if args.command == "render":
        return _handle_render(args)
    parser.error("no command provided")
    return 2


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
