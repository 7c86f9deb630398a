"""Tests for scriptlinker.linking.extractor."""

from __future__ import annotations

from pathlib import Path

from scriptlinker.linking import BREAKPOINT_STATEMENT, ContentExtractor, ExtractionMode, LinkerOptions
from scriptlinker.linking.assembler import file_banner
from scriptlinker.models import Breakpoint, ExtractedFile
from tests._fixtures.project_builder import SAMPLE_PROJECT, ProjectBuilder


def _body(extracted: ExtractedFile, path, root) -> list[str]:
    banner = file_banner(path, root) + "\n"
    assert extracted.content.startswith(banner)
    return extracted.content[len(banner):].splitlines()


def test_entry_point_mode_strips_namespace_and_class_wrapper(project_builder: ProjectBuilder) -> None:
    project_builder.write(SAMPLE_PROJECT)
    project = project_builder.project_info("Core/GameScript.cs")
    path = project_builder.path("Core/GameScript.cs")

    extracted = ContentExtractor(project).extract(path, ExtractionMode.ENTRY_POINT)

    assert extracted.namespace == "App.Core"
    assert extracted.using_namespaces == {"System", "App.Weapons", "App.Core"}
    assert extracted.class_name == "GameScript"
    assert extracted.is_partial is True
    assert extracted.is_entry_point is True
    assert _body(extracted, path, project.project_dir) == [
        "",
        "        public void OnStartup()",
        "        {",
        "            Rifle.Fire();",
        "        }",
    ]


def test_support_mode_keeps_class_wrapper(project_builder: ProjectBuilder) -> None:
    project_builder.write(SAMPLE_PROJECT)
    project = project_builder.project_info("Core/GameScript.cs")
    path = project_builder.path("Weapons/Rifle.cs")

    extracted = ContentExtractor(project).extract(path)

    assert extracted.namespace == "App.Weapons"
    assert extracted.using_namespaces == {"System", "App.Utils", "App.Weapons"}
    assert extracted.class_name == "Rifle"
    assert extracted.is_entry_point is False
    assert _body(extracted, path, project.project_dir) == [
        "    public static class Rifle",
        "    {",
        "        public static void Fire()",
        "        {",
        '            Log.Write("bang"); // {',
        "        }",
        "    }",
    ]


def test_support_mode_reroutes_partial_entry_fragment(project_builder: ProjectBuilder) -> None:
    project_builder.write(SAMPLE_PROJECT)
    project = project_builder.project_info("Core/GameScript.cs")
    extractor = ContentExtractor(project)
    entry = extractor.extract(project.entry_point, ExtractionMode.ENTRY_POINT)
    path = project_builder.path("Core/GameScript.Events.cs")

    extracted = extractor.extract(path, ExtractionMode.SUPPORT, entry=entry)

    assert extracted.namespace == "App.Core"
    assert extracted.class_name == "GameScript"
    assert _body(extracted, path, project.project_dir) == [
        "",
        "        public void OnPlayerDeath()",
        "        {",
        "        }",
    ]
    assert "base(null)" not in extracted.content


def test_support_mode_drops_unrelated_entry_point_class(project_builder: ProjectBuilder) -> None:
    project_builder.write(SAMPLE_PROJECT)
    project = project_builder.project_info("Core/GameScript.cs")
    extractor = ContentExtractor(project)
    entry = extractor.extract(project.entry_point, ExtractionMode.ENTRY_POINT)

    extracted = extractor.extract(
        project_builder.path("Weapons/RivalScript.cs"), ExtractionMode.SUPPORT, entry=entry
    )

    assert extracted == ExtractedFile()


def test_non_partial_fragment_with_same_name_is_dropped(project_builder: ProjectBuilder) -> None:
    project_builder.write(SAMPLE_PROJECT)
    project_builder.write(
        {
            "Core/Copy.cs": """
                namespace App.Core
                {
                    public class GameScript : GameScriptInterface
                    {
                    }
                }
            """
        }
    )
    project = project_builder.project_info("Core/GameScript.cs")
    extractor = ContentExtractor(project)
    entry = extractor.extract(project.entry_point, ExtractionMode.ENTRY_POINT)

    extracted = extractor.extract(project_builder.path("Core/Copy.cs"), entry=entry)

    assert extracted.content == ""
    assert extracted.namespace == ""


def test_constructor_line_is_dropped_but_scan_continues(project_builder: ProjectBuilder) -> None:
    project_builder.write(
        {
            "Helper.cs": """
                namespace App.Core
                {
                    public class Helper
                    {
                        public GameScript() : base(null) { }
                        public int Value;
                    }
                }
            """
        }
    )
    project = project_builder.project_info("Helper.cs")

    extracted = ContentExtractor(project).extract(project_builder.path("Helper.cs"))

    assert "base(null)" not in extracted.content
    assert "        public int Value;" in extracted.content.splitlines()
    assert extracted.content.rstrip("\n").endswith("    }")


def test_breakpoint_statement_follows_the_requested_line(project_builder: ProjectBuilder) -> None:
    project_builder.write(SAMPLE_PROJECT)
    project = project_builder.project_info(
        "Core/GameScript.cs",
        breakpoints=[("Core/GameScript.cs", 12), ("Core/GameScript.cs", 8)],
    )
    path = project_builder.path("Core/GameScript.cs")

    extracted = ContentExtractor(project).extract(path, ExtractionMode.ENTRY_POINT)

    body = _body(extracted, path, project.project_dir)
    assert body.count(BREAKPOINT_STATEMENT) == 1
    index = body.index(BREAKPOINT_STATEMENT)
    assert body[index - 1] == "            Rifle.Fire();"


def test_relative_breakpoint_paths_resolve_against_project(project_builder: ProjectBuilder) -> None:
    project_builder.write(SAMPLE_PROJECT)
    project = project_builder.project_info("Core/GameScript.cs")
    project.breakpoints.append(Breakpoint(file=Path("Weapons/Rifle.cs"), line=10))
    path = project_builder.path("Weapons/Rifle.cs")

    extracted = ContentExtractor(project).extract(path)

    body = _body(extracted, path, project.project_dir)
    assert body[body.index(BREAKPOINT_STATEMENT) - 1] == '            Log.Write("bang"); // {'


def test_breakpoints_are_ignored_when_injection_disabled(project_builder: ProjectBuilder) -> None:
    project_builder.write(SAMPLE_PROJECT)
    project = project_builder.project_info(
        "Core/GameScript.cs", breakpoints=[("Core/GameScript.cs", 12)]
    )

    extracted = ContentExtractor(project, LinkerOptions(inject_breakpoints=False)).extract(
        project.entry_point, ExtractionMode.ENTRY_POINT
    )

    assert BREAKPOINT_STATEMENT not in extracted.content


def test_brace_in_block_comment_shifts_depth(project_builder: ProjectBuilder) -> None:
    project_builder.write(
        {
            "Script.cs": """
                namespace App.Core
                {
                    public class GameScript : GameScriptInterface
                    {
                        /* { */
                        public int X;
                    }
                }
            """
        }
    )
    project = project_builder.project_info("Script.cs")
    path = project_builder.path("Script.cs")

    extracted = ContentExtractor(project).extract(path, ExtractionMode.ENTRY_POINT)

    # The class closing brace leaks into the body because the comment opened a block.
    assert _body(extracted, path, project.project_dir) == [
        "        /* { */",
        "        public int X;",
        "    }",
    ]


def test_missing_file_yields_empty_extraction(project_builder: ProjectBuilder) -> None:
    project = project_builder.project_info("Core/GameScript.cs")
    extractor = ContentExtractor(project)

    assert extractor.extract(project_builder.path("Nope.cs")) == ExtractedFile()
    assert extractor.probe_namespace(project_builder.path("Nope.cs")) == ""


def test_namespace_lookup_reads_single_declaration(project_builder: ProjectBuilder) -> None:
    project_builder.write(SAMPLE_PROJECT)
    project = project_builder.project_info("Core/GameScript.cs")

    extractor = ContentExtractor(project)

    assert extractor.probe_namespace(project_builder.path("Weapons/Rifle.cs")) == "App.Weapons"


def test_custom_reader_is_used(project_builder: ProjectBuilder) -> None:
    project = project_builder.project_info("Virtual.cs")
    sources = {
        project_builder.path("Virtual.cs"): [
            "namespace App.Virtual",
            "{",
            "    class Thing",
            "    {",
            "    }",
            "}",
        ]
    }

    def reader(path):
        try:
            return sources[path]
        except KeyError:
            raise FileNotFoundError(path) from None

    extracted = ContentExtractor(project, reader=reader).extract(project_builder.path("Virtual.cs"))

    assert extracted.namespace == "App.Virtual"
    assert extracted.content.endswith("    class Thing\n    {\n    }\n")


def test_namespace_lookup_matches_extract_for_multiple_namespaces(
    project_builder: ProjectBuilder,
) -> None:
    project_builder.write(
        {
            "Mixed.cs": """
                namespace App.Old
                {
                    class Legacy
                    {
                        namespace App.Nested
                    }
                }
                namespace App.New
                {
                    class Fresh
                    {
                    }
                }
            """
        }
    )
    project = project_builder.project_info("Mixed.cs")
    extractor = ContentExtractor(project)
    path = project_builder.path("Mixed.cs")

    assert extractor.probe_namespace(path) == "App.New"
    assert extractor.extract(path).namespace == "App.New"


def test_unreadable_file_yields_empty_extraction(project_builder: ProjectBuilder) -> None:
    project_builder.write(SAMPLE_PROJECT)
    project = project_builder.project_info("Core/GameScript.cs")

    def reader(path):
        raise PermissionError(13, "Permission denied", str(path))

    extractor = ContentExtractor(project, reader=reader)
    path = project_builder.path("Weapons/Rifle.cs")

    assert extractor.extract(path) == ExtractedFile()
    assert extractor.probe_namespace(path) == ""
    assert ContentExtractor(project).probe_namespace(project_builder.path("Weapons")) == ""
