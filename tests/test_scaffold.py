from __future__ import annotations

import json
from pathlib import Path

import pytest

from pkgforge.config import GenerationOptions, LegacyMode, PackageManager, ProgrammingLanguage
from pkgforge.errors import DuplicateOutputError, TemplateNotFoundError, TemplateRenderError, WriteError
from pkgforge.io.schema import SourceCategory
from pkgforge.scaffold import PackageScaffolder, layout_for
from pkgforge.template import TemplateRenderer
from tests.fixtures.memory_io import FIXED_NOW, MemoryTemplateSource, RecordingLogger, RecordingWriter

PACKAGE_JSON = {
    "name": "{{ package_name }}",
    "license": "MIT",
    "dependencies": {
        "ckeditor5": ">={{ package_versions.ckeditor5 }}",
    },
    "devDependencies": {
        "@ckeditor/ckeditor5-dev-build-tools": "{{ package_versions.ckeditor5_dev_build_tools }}",
        "@ckeditor/ckeditor5-inspector": ">={{ package_versions.ckeditor5_inspector }}",
        "@ckeditor/ckeditor5-package-tools": "{{ package_versions.package_tools }}",
        "eslint": "^7.32.0",
        "eslint-config-ckeditor5": ">={{ package_versions.eslint_config_ckeditor5 }}",
    },
    "scripts": {
        "dll:build": "ckeditor5-package-tools dll:build",
        "prepare": "{{ package_manager }} run dll:build",
        "prepublishOnly": "{{ package_manager }} run dll:build",
    },
}

CONTEXTS_JSON = json.dumps(
    {"My plugin": "Content for a tooltip is displayed when a user hovers the CKEditor 5 icon."},
    indent=2,
)


def expected_package_json(package_manager: str) -> str:
    return json.dumps(
        {
            "name": "@foo/ckeditor5-featurename",
            "license": "MIT",
            "dependencies": {
                "ckeditor5": ">=30.0.0",
            },
            "devDependencies": {
                "@ckeditor/ckeditor5-dev-build-tools": "40.0.0",
                "@ckeditor/ckeditor5-inspector": ">=",
                "@ckeditor/ckeditor5-package-tools": "25.0.0",
                "eslint": "^7.32.0",
                "eslint-config-ckeditor5": ">=",
            },
            "scripts": {
                "dll:build": "ckeditor5-package-tools dll:build",
                "prepare": f"{package_manager} run dll:build",
                "prepublishOnly": f"{package_manager} run dll:build",
            },
        },
        indent=2,
    )


def template_library(**extra: str | bytes) -> MemoryTemplateSource:
    files: dict[str, str | bytes] = {
        "common/LICENSE.md": "Copyright (c) {{ now.year }}. All rights reserved.\n",
        "common/lang/contexts.json": CONTEXTS_JSON,
        "js/package.json": json.dumps(PACKAGE_JSON, indent=2),
        "js/src/index.js": "/* JS CODE */",
        "ts/package.json": json.dumps(PACKAGE_JSON, indent=2),
        "ts/src/index.ts": "/* TS CODE */",
    }
    files.update(extra)
    return MemoryTemplateSource(
        files,
        listings={
            # Legacy listings are aliased onto the standard template sets.
            "js-legacy/**/*": ["js/package.json", "js/src", "js/src/index.js"],
            "ts-legacy/**/*": ["ts/package.json", "ts/src", "ts/src/index.ts"],
        },
    )


def make_scaffolder(
    source: MemoryTemplateSource,
    writer: RecordingWriter,
    logger: RecordingLogger,
    **kwargs,
) -> PackageScaffolder:
    return PackageScaffolder(source, writer, logger=logger, clock=lambda: FIXED_NOW, **kwargs)


def with_changes(options: GenerationOptions, **changes) -> GenerationOptions:
    return options.model_copy(update=changes)


def written_paths(writer: RecordingWriter) -> list[str]:
    return [path.as_posix() for path in writer.paths]


def test_layout_table_covers_every_combination():
    assert layout_for(ProgrammingLanguage.JAVASCRIPT, LegacyMode.STANDARD).template_dir == "js"
    assert layout_for(ProgrammingLanguage.JAVASCRIPT, LegacyMode.LEGACY).template_dir == "js-legacy"
    assert layout_for(ProgrammingLanguage.TYPESCRIPT, LegacyMode.STANDARD).template_dir == "ts"
    assert layout_for(ProgrammingLanguage.TYPESCRIPT, LegacyMode.LEGACY).template_dir == "ts-legacy"
    assert layout_for("js", "standard").common_dir == "common"


def test_logs_the_process(options, writer, logger):
    make_scaffolder(template_library(), writer, logger).render(options)

    assert logger.processes == ["Copying files..."]
    assert logger.details == written_paths(writer)


def test_creates_files_for_javascript(options, writer, logger):
    make_scaffolder(template_library(), writer, logger).render(options)

    assert written_paths(writer) == [
        "directory/path/foo/LICENSE.md",
        "directory/path/foo/lang/contexts.json",
        "directory/path/foo/package.json",
        "directory/path/foo/src/index.js",
    ]
    assert writer.content_of("directory/path/foo/LICENSE.md") == "Copyright (c) 1984. All rights reserved.\n"
    assert writer.content_of("directory/path/foo/lang/contexts.json") == "\n".join(
        [
            "{",
            '  "My plugin": "Content for a tooltip is displayed when a user hovers the CKEditor 5 icon."',
            "}",
        ]
    )
    assert writer.content_of("directory/path/foo/package.json") == expected_package_json("yarn")
    assert writer.content_of("directory/path/foo/src/index.js") == "/* JS CODE */"


def test_creates_files_for_typescript(options, writer, logger):
    options = with_changes(options, programming_language=ProgrammingLanguage.TYPESCRIPT)

    make_scaffolder(template_library(), writer, logger).render(options)

    assert written_paths(writer) == [
        "directory/path/foo/LICENSE.md",
        "directory/path/foo/lang/contexts.json",
        "directory/path/foo/package.json",
        "directory/path/foo/src/index.ts",
    ]
    assert writer.content_of("directory/path/foo/package.json") == expected_package_json("yarn")
    assert writer.content_of("directory/path/foo/src/index.ts") == "/* TS CODE */"


@pytest.mark.parametrize("language, entry", [("js", "src/index.js"), ("ts", "src/index.ts")])
def test_legacy_mode_uses_the_legacy_listing(options, writer, logger, language, entry):
    options = with_changes(
        options,
        programming_language=ProgrammingLanguage(language),
        legacy_mode=LegacyMode.LEGACY,
    )
    source = template_library()

    make_scaffolder(source, writer, logger).render(options)

    assert written_paths(writer) == [
        "directory/path/foo/LICENSE.md",
        "directory/path/foo/lang/contexts.json",
        "directory/path/foo/package.json",
        f"directory/path/foo/{entry}",
    ]
    assert source.patterns == ["common/**/*", f"{language}-legacy/**/*"]


def test_replaces_placeholder_filenames(options, writer, logger):
    source = template_library(**{"js/src/_PLACEHOLDER_.js": "/* PLACEHOLDER JS CODE */"})

    make_scaffolder(source, writer, logger).render(options)

    assert len(writer.writes) == 5
    assert written_paths(writer)[4] == "directory/path/foo/src/barbaz.js"
    assert writer.writes[4][1] == "/* PLACEHOLDER JS CODE */"


def test_placeholder_is_replaced_only_inside_src(options, writer, logger):
    source = template_library(**{"js/tests/_PLACEHOLDER_.js": "// test"})

    make_scaffolder(source, writer, logger).render(options)

    assert written_paths(writer)[-1] == "directory/path/foo/tests/_PLACEHOLDER_.js"


def test_placeholder_directory_inside_src(options, writer, logger):
    source = template_library(**{"js/src/_PLACEHOLDER_/_PLACEHOLDER_editing.js": "// editing"})

    make_scaffolder(source, writer, logger).render(options)

    # Only whole tokens are replaced, not prefixes of longer names.
    assert written_paths(writer)[-1] == "directory/path/foo/src/barbaz/_PLACEHOLDER_editing.js"


def test_removes_txt_extension_from_filenames(options, writer, logger):
    source = template_library(**{"js/src/foo.js.txt": "/* JS CODE IN TXT FILE */"})

    make_scaffolder(source, writer, logger).render(options)

    assert len(writer.writes) == 5
    assert written_paths(writer)[4] == "directory/path/foo/src/foo.js"
    assert writer.writes[4][1] == "/* JS CODE IN TXT FILE */"


def test_keeps_plain_txt_files(options, writer, logger):
    source = template_library(**{"js/notes.txt": "notes"})

    make_scaffolder(source, writer, logger).render(options)

    assert "directory/path/foo/notes.txt" in written_paths(writer)


def test_placeholder_and_txt_extension_combine(options, writer, logger):
    source = template_library(**{"js/src/_PLACEHOLDER_.js.txt": "// plugin"})

    make_scaffolder(source, writer, logger).render(options)

    assert written_paths(writer)[-1] == "directory/path/foo/src/barbaz.js"


@pytest.mark.parametrize(
    "directory",
    ["directory/common/foo", "directory/js/foo", "directory/ts/foo", "directory/Projects/foo", "ts", "common"],
)
@pytest.mark.parametrize("legacy_mode", [LegacyMode.STANDARD, LegacyMode.LEGACY])
def test_destination_roots_colliding_with_template_directories(options, writer, logger, directory, legacy_mode):
    options = with_changes(options, directory_path=Path(directory), legacy_mode=legacy_mode)

    make_scaffolder(template_library(), writer, logger).render(options)

    assert written_paths(writer) == [
        f"{directory}/LICENSE.md",
        f"{directory}/lang/contexts.json",
        f"{directory}/package.json",
        f"{directory}/src/index.js",
    ]


def test_works_with_npm_instead_of_yarn(options, writer, logger):
    options = with_changes(options, package_manager=PackageManager.NPM)

    make_scaffolder(template_library(), writer, logger).render(options)

    rendered = json.loads(writer.content_of("directory/path/foo/package.json"))
    assert rendered["scripts"]["prepare"] == "npm run dll:build"
    assert rendered["devDependencies"]["@ckeditor/ckeditor5-inspector"] == ">="


def test_end_to_end_order_for_javascript(options, writer, logger):
    options = with_changes(options, directory_path=Path("out/pkg"))

    outputs = make_scaffolder(template_library(), writer, logger).render(options)

    assert written_paths(writer) == [
        "out/pkg/LICENSE.md",
        "out/pkg/lang/contexts.json",
        "out/pkg/package.json",
        "out/pkg/src/index.js",
    ]
    assert [output.source.category for output in outputs] == [
        SourceCategory.COMMON,
        SourceCategory.COMMON,
        SourceCategory.VARIANT,
        SourceCategory.VARIANT,
    ]
    assert writer.directories == [Path("out/pkg"), Path("out/pkg/lang"), Path("out/pkg/src")]


def test_directories_are_skipped(options, logger):
    source = template_library()
    selected = PackageScaffolder(source, RecordingWriter(), logger=logger).select(options)

    assert [template.source_path for template in selected] == [
        "common/LICENSE.md",
        "common/lang/contexts.json",
        "js/package.json",
        "js/src/index.js",
    ]
    assert "common/lang" in source.glob("common/**/*")


def test_build_renders_without_writing(options, writer, logger):
    outputs = make_scaffolder(template_library(), writer, logger).build(options)

    assert writer.writes == []
    assert logger.processes == []
    assert [output.destination for output in outputs] == [
        Path("directory/path/foo/LICENSE.md"),
        Path("directory/path/foo/lang/contexts.json"),
        Path("directory/path/foo/package.json"),
        Path("directory/path/foo/src/index.js"),
    ]


def test_identical_inputs_give_identical_output(options, logger):
    first, second = RecordingWriter(), RecordingWriter()

    make_scaffolder(template_library(), first, logger).render(options)
    make_scaffolder(template_library(), second, logger).render(options)

    assert first.writes == second.writes


def test_binary_files_are_copied_verbatim(options, writer, logger):
    icon = b"\x89PNG\r\n\x1a\n{{ not a placeholder"
    blob = b"\xff\xfe{{ raw"
    source = template_library(**{"js/theme/icons/icon.png": icon, "js/data.bin": blob})

    outputs = make_scaffolder(source, writer, logger).render(options)

    assert writer.content_of("directory/path/foo/theme/icons/icon.png") == icon
    assert writer.content_of("directory/path/foo/data.bin") == blob
    assert sum(output.is_binary for output in outputs) == 2


def test_missing_variable_in_strict_mode_raises(options, writer, logger):
    with pytest.raises(TemplateRenderError, match="ckeditor5_inspector"):
        make_scaffolder(template_library(), writer, logger, strict=True).render(options)

    # Files written before the failure stay written.
    assert written_paths(writer) == [
        "directory/path/foo/LICENSE.md",
        "directory/path/foo/lang/contexts.json",
    ]


def test_malformed_template_aborts_the_run(options, writer, logger):
    source = template_library(**{"common/lang/contexts.json": "{{ broken"})

    with pytest.raises(TemplateRenderError, match="unterminated"):
        make_scaffolder(source, writer, logger).render(options)

    assert written_paths(writer) == ["directory/path/foo/LICENSE.md"]


def test_write_errors_propagate_untouched(options, logger):
    writer = RecordingWriter(fail_on=Path("directory/path/foo/package.json"))

    with pytest.raises(WriteError, match="disk full"):
        make_scaffolder(template_library(), writer, logger).render(options)

    assert written_paths(writer) == [
        "directory/path/foo/LICENSE.md",
        "directory/path/foo/lang/contexts.json",
    ]
    assert logger.details == written_paths(writer)


def test_missing_variant_directory_raises(options, writer, logger):
    source = MemoryTemplateSource({"common/LICENSE.md": "license"})

    with pytest.raises(TemplateNotFoundError, match="js"):
        make_scaffolder(source, writer, logger).render(options)

    assert writer.writes == []


def test_listed_template_missing_from_source_raises(options, writer, logger):
    class VanishingSource(MemoryTemplateSource):
        def is_file(self, path: str) -> bool:
            return path == "js/src/ghost.js" or super().is_file(path)

    source = VanishingSource(
        {"common/LICENSE.md": "license", "js/package.json": "{}"},
        listings={"js/**/*": ["js/package.json", "js/src/ghost.js"]},
    )

    with pytest.raises(TemplateNotFoundError, match="ghost"):
        make_scaffolder(source, writer, logger).render(options)

    assert written_paths(writer) == [
        "directory/path/foo/LICENSE.md",
        "directory/path/foo/package.json",
    ]


def test_default_renderer_is_pluggable(options, writer, logger):
    class UpperRenderer:
        def render_string(self, template, context):
            return template.upper()

    source = MemoryTemplateSource({"common/a.txt": "abc", "js/b.js": "def"})

    make_scaffolder(source, writer, logger, renderer=UpperRenderer()).render(options)

    assert [content for _, content in writer.writes] == ["ABC", "DEF"]


def test_now_is_captured_once_per_run(options, writer, logger):
    calls = []

    def clock():
        calls.append(1)
        return FIXED_NOW

    source = MemoryTemplateSource(
        {"common/a.txt": "{{ now.year }}", "common/b.txt": "{{ now.year }}", "js/c.js": "{{ now.year }}"}
    )
    PackageScaffolder(source, writer, logger=logger, clock=clock).render(options)

    assert len(calls) == 1
    assert [content for _, content in writer.writes] == ["1984", "1984", "1984"]


def test_common_and_variant_files_must_not_share_a_destination(options, writer, logger):
    source = template_library(**{"common/package.json": "{}"})

    with pytest.raises(DuplicateOutputError) as excinfo:
        make_scaffolder(source, writer, logger).render(options)

    assert excinfo.value.source_path == "js/package.json"
    assert written_paths(writer) == [
        "directory/path/foo/LICENSE.md",
        "directory/path/foo/lang/contexts.json",
        "directory/path/foo/package.json",
    ]
    assert writer.content_of("directory/path/foo/package.json") == "{}"


def test_txt_template_must_not_shadow_a_sibling(options, writer, logger):
    source = template_library(**{"js/src/foo.js": "// plain", "js/src/foo.js.txt": "// from txt"})

    with pytest.raises(DuplicateOutputError, match="src/foo.js"):
        make_scaffolder(source, writer, logger).build(options)


def test_strict_mode_is_rejected_with_a_custom_renderer(writer, logger):
    with pytest.raises(ValueError):
        make_scaffolder(template_library(), writer, logger, renderer=TemplateRenderer(), strict=True)
