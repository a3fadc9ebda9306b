"""Integration tests for the scriptport command line interface."""

import json
import logging
from pathlib import Path

import pytest
import yaml

from scriptport.models import Scene
from scriptport.project import ProjectBundle, dump_project, load_project

pytestmark = pytest.mark.integration

WIDE = {"COLUMNS": "200"}


@pytest.fixture(autouse=True)
def restore_root_handlers():
    """Drop handlers bound to the runner's streams by --verbose/--debug."""
    root_logger = logging.getLogger()
    original_handlers = root_logger.handlers.copy()
    original_level = root_logger.level
    yield
    for handler in root_logger.handlers.copy():
        root_logger.removeHandler(handler)
    for handler in original_handlers:
        root_logger.addHandler(handler)
    root_logger.setLevel(original_level)


@pytest.fixture
def project_file(tmp_path: Path) -> Path:
    """A project bundle with two scenes on disk."""
    bundle = ProjectBundle.from_scenes(
        [
            Scene(
                "scene-1",
                1,
                "INT. COFFEE SHOP",
                "COFFEE SHOP",
                "MORNING",
                "Rain.\n### JOHN\n> Is it open?",
            ),
            Scene(
                "scene-2",
                2,
                "EXT. 公園",
                "公園",
                "夜",
                "小明，男，25歲\n他坐下。\n### 小明\n> 好冷。",
                "catalyst",
            ),
        ],
        title="The Last Cup",
        author="Jane Doe",
    )
    path = tmp_path / "project.json"
    dump_project(bundle, path)
    return path


@pytest.fixture
def text_pair(tmp_path: Path) -> tuple[Path, Path]:
    """An original and a revised text file."""
    original = tmp_path / "original.txt"
    revised = tmp_path / "revised.txt"
    original.write_text("a\nb\nc", encoding="utf-8")
    revised.write_text("a\nB\nc\nd", encoding="utf-8")
    return original, revised


class TestVersion:
    """Test the version command."""

    def test_version(self, cli_invoke):
        """Test the plain version line."""
        cli_invoke("version").assert_success().assert_contains("ScriptPort v0.1.0")

    def test_version_json(self, cli_invoke):
        """Test the JSON version payload."""
        data = cli_invoke("version", "--json").assert_success().parse_json()
        assert data["name"] == "ScriptPort"
        assert data["version"] == "0.1.0"


class TestParseCommand:
    """Test the parse command."""

    def test_parse_json(self, cli_invoke, sample_file):
        """Test the bundle is printed as JSON."""
        data = cli_invoke("parse", sample_file, "--json").assert_success().parse_json()
        assert data["scriptData"]["title"] == "draft"
        assert [s["location"] for s in data["scenes"]] == ["COFFEE SHOP", "CITY PARK"]
        assert "### JOHN (quietly)" in data["scenes"][0]["content"]

    def test_parse_to_file(self, cli_invoke, sample_file, tmp_path):
        """Test writing the bundle with a custom title."""
        output = tmp_path / "project.json"
        result = cli_invoke(
            "parse", sample_file, "--output", output, "--title", "The Last Cup"
        )
        result.assert_success().assert_contains("Wrote 2 scenes")
        bundle = load_project(output)
        assert bundle.script_data.title == "The Last Cup"
        assert [s.number for s in bundle.scenes] == [1, 2]

    def test_parse_start_number(self, cli_invoke, sample_file):
        """Test numbering can start later."""
        result = cli_invoke("parse", sample_file, "--json", "--start-number", "5")
        numbers = [s["number"] for s in result.assert_success().parse_json()["scenes"]]
        assert numbers == [5, 6]

    def test_parse_table(self, cli_invoke, sample_file):
        """Test the scene table."""
        result = cli_invoke("parse", sample_file, env=WIDE)
        result.assert_success().assert_contains("COFFEE SHOP", "CITY PARK")

    def test_parse_no_scenes(self, cli_invoke, tmp_path):
        """Test text without headings reports no scenes."""
        path = tmp_path / "notes.txt"
        path.write_text("Just notes.\n", encoding="utf-8")
        cli_invoke("parse", path).assert_success().assert_contains("No scenes found")

    def test_parse_missing_file(self, cli_invoke, tmp_path):
        """Test a missing input file fails cleanly."""
        result = cli_invoke("parse", tmp_path / "missing.txt")
        result.assert_failure(exit_code=1).assert_contains("File not found")


class TestExportCommand:
    """Test the export command."""

    def test_export_dialect_a(self, cli_invoke, project_file):
        """Test the Hollywood layout on stdout."""
        result = cli_invoke("export", project_file).assert_success()
        result.assert_contains(
            "THE LAST CUP",
            "Written by",
            "FADE IN:",
            "INT. COFFEE SHOP - MORNING",
            "EXT. 公園 - 夜",
            "THE END",
        )
        assert result.stdout.index("公園") < result.stdout.index("COFFEE SHOP -")

    def test_export_dialect_b(self, cli_invoke, project_file):
        """Test the chapter layout."""
        result = cli_invoke("export", project_file, "--dialect", "b").assert_success()
        result.assert_contains("=== 催化劑 ===", "=== 其他場次 ===", "EXT. 公園 -- 夜")
        result.assert_not_contains("Written by")

    def test_export_taiwan(self, cli_invoke, project_file):
        """Test the Taiwan layout."""
        result = cli_invoke("export", project_file, "--dialect", "taiwan")
        result.assert_success().assert_contains(
            "【催化劑】",
            "場次 2　公園　夜",
            "人物：",
            "　小明，男，25歲",
            "△他坐下。",
            "小明：好冷。",
        )

    def test_export_to_file(self, cli_invoke, project_file, tmp_path):
        """Test writing the export to a file."""
        output = tmp_path / "script.txt"
        cli_invoke("export", project_file, "-o", output).assert_success()
        assert "FADE OUT." in output.read_text(encoding="utf-8")

    def test_unknown_dialect(self, cli_invoke, project_file):
        """Test an unsupported dialect fails with a hint."""
        result = cli_invoke("export", project_file, "--dialect", "C")
        result.assert_failure(exit_code=1).assert_contains("Unknown dialect: C")

    def test_invalid_project(self, cli_invoke, tmp_path):
        """Test a corrupt bundle fails cleanly."""
        path = tmp_path / "broken.json"
        path.write_text("{", encoding="utf-8")
        result = cli_invoke("export", path)
        result.assert_failure(exit_code=1).assert_contains("not valid JSON")


class TestDiffAndMerge:
    """Test the diff and merge commands."""

    def test_diff_json(self, cli_invoke, text_pair):
        """Test records and summary as JSON."""
        data = cli_invoke("diff", *text_pair, "--json").assert_success().parse_json()
        assert data["summary"] == {
            "unchanged": 2,
            "modified": 1,
            "deleted": 0,
            "added": 1,
        }
        assert data["records"][1]["original"] == "b"
        assert data["records"][1]["revised"] == "B"

    def test_diff_aligned(self, cli_invoke, tmp_path):
        """Test the aligned strategy detects an insertion."""
        original = tmp_path / "o.txt"
        revised = tmp_path / "r.txt"
        original.write_text("a\nb", encoding="utf-8")
        revised.write_text("x\na\nb", encoding="utf-8")
        result = cli_invoke(
            "diff", original, revised, "--strategy", "aligned", "--json"
        )
        types = [r["type"] for r in result.assert_success().parse_json()["records"]]
        assert types == ["added", "unchanged", "unchanged"]

    def test_diff_table(self, cli_invoke, text_pair):
        """Test the table view and summary line."""
        result = cli_invoke("diff", *text_pair, "--changes-only", env=WIDE)
        result.assert_success().assert_contains("modified", "added", "2 unchanged")

    def test_diff_unknown_strategy(self, cli_invoke, text_pair):
        """Test an unknown strategy fails."""
        result = cli_invoke("diff", *text_pair, "--strategy", "myers")
        result.assert_failure(exit_code=1).assert_contains("Unknown diff strategy")

    def test_merge_defaults(self, cli_invoke, text_pair):
        """Test the default merge keeps originals and additions."""
        result = cli_invoke("merge", *text_pair).assert_success()
        assert result.stdout == "a\nb\nc\nd\n"

    def test_merge_take_revised(self, cli_invoke, text_pair):
        """Test accepting one revision by index."""
        result = cli_invoke("merge", *text_pair, "--take-revised", "1")
        assert result.assert_success().stdout == "a\nB\nc\nd\n"

    def test_merge_all_revised(self, cli_invoke, text_pair, tmp_path):
        """Test accepting every revision into a file."""
        output = tmp_path / "merged.txt"
        cli_invoke("merge", *text_pair, "--all-revised", "-o", output).assert_success()
        assert output.read_text(encoding="utf-8") == "a\nB\nc\nd\n"

    def test_merge_missing_file(self, cli_invoke, text_pair, tmp_path):
        """Test a missing revision fails cleanly."""
        result = cli_invoke("merge", text_pair[0], tmp_path / "gone.txt")
        result.assert_failure(exit_code=1)


class TestExtractAndGroup:
    """Test the extract and group commands."""

    def test_extract_all(self, cli_invoke, project_file):
        """Test every scene is extracted."""
        data = cli_invoke("extract", project_file).assert_success().parse_json()
        assert [item["number"] for item in data] == [1, 2]
        assert data[1]["characters"] == ["小明，男，25歲"]
        assert data[1]["actions"][0]["dialogue"] == [
            {"character": "小明", "text": "好冷。"}
        ]

    def test_extract_one_scene(self, cli_invoke, project_file):
        """Test extracting a single scene."""
        data = cli_invoke("extract", project_file, "--scene", "1").parse_json()
        assert len(data) == 1
        assert data[0]["actions"][0]["action"] == "Rain."

    def test_extract_unknown_scene(self, cli_invoke, project_file):
        """Test a missing scene number fails with a JSON error."""
        result = cli_invoke("extract", project_file, "--scene", "9")
        result.assert_failure(exit_code=1)
        assert result.parse_json()["error"].startswith("Scene 9 not found")

    def test_group(self, cli_invoke, project_file):
        """Test the location report."""
        result = cli_invoke("group", project_file, "coffee").assert_success()
        result.assert_contains("搜尋關鍵字: coffee", "地點: COFFEE SHOP (1 個場景)")

    def test_group_no_match(self, cli_invoke, project_file):
        """Test a term with no matching location."""
        result = cli_invoke("group", project_file, "海邊").assert_success()
        result.assert_contains("No scenes found")

    def test_group_json(self, cli_invoke, project_file):
        """Test the JSON report lists the matching scenes."""
        data = cli_invoke("group", project_file, "coffee", "--json").parse_json()
        assert data["searchTerm"] == "coffee"
        assert data["totalScenes"] == 1
        assert data["groups"][0]["location"] == "COFFEE SHOP"
        assert data["allScenes"][0]["groupLocation"] == "COFFEE SHOP"

    def test_group_json_to_file(self, cli_invoke, project_file, tmp_path):
        """Test the JSON report can be written to a file."""
        output = tmp_path / "groups.json"
        result = cli_invoke("group", project_file, "公園", "--json", "-o", output)
        result.assert_success()
        data = json.loads(output.read_text(encoding="utf-8"))
        assert [g["sceneCount"] for g in data["groups"]] == [1]


class TestGlobalOptions:
    """Test options handled by the main callback."""

    def test_config_file_changes_heuristics(self, cli_invoke, project_file, tmp_path):
        """Test a config file feeds the exporter's keyword table."""
        config = tmp_path / "scriptport.yaml"
        config.write_text(yaml.safe_dump({"outdoor_keywords": ["COFFEE"]}))
        result = cli_invoke("--config", config, "export", project_file)
        result.assert_success().assert_contains("EXT. COFFEE SHOP - MORNING")

    def test_missing_config_file(self, cli_invoke, project_file, tmp_path):
        """Test a missing config file fails before the command runs."""
        result = cli_invoke("--config", tmp_path / "nope.yaml", "export", project_file)
        result.assert_failure(exit_code=1).assert_contains("not found")

    @pytest.mark.parametrize("flag", ["--verbose", "--debug"])
    def test_logging_flags(self, cli_invoke, project_file, flag):
        """Test verbosity flags do not change command output."""
        result = cli_invoke(flag, "export", project_file)
        result.assert_success().assert_contains("INT. COFFEE SHOP - MORNING")
