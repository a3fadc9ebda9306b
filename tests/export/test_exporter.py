"""Tests for the dialect exporter."""

import pytest

from scriptport.config import ScriptPortSettings
from scriptport.exceptions import ValidationError
from scriptport.export import DialectExporter, SceneTypeClassifier, export_screenplay
from scriptport.export.dialects import CHAPTERED, HOLLYWOOD, get_profile
from scriptport.models import DEFAULT_BEAT_SHEET, Dialect, Scene, ScriptInfo
from scriptport.parser import ScreenplayParser

T = "\t"


@pytest.fixture
def exporter(settings) -> DialectExporter:
    """Exporter with default heuristics."""
    return DialectExporter(settings)


@pytest.fixture
def coffee_scene() -> Scene:
    """A scene with action, a cue with parenthetical and two lines."""
    return Scene(
        "s1",
        1,
        title="INT. COFFEE SHOP",
        location="COFFEE SHOP",
        day_night="MORNING",
        content="Someone walks in.\n### JOHN (quietly)\n> Hello.\n> Bye.",
    )


class TestRenderScene:
    """Test per-scene rendering."""

    def test_dialect_a_layout(self, exporter, coffee_scene):
        """Test indentation and block layout for dialect A."""
        text = exporter.render_scene(coffee_scene, HOLLYWOOD)
        assert text == (
            "INT. COFFEE SHOP - MORNING\n"
            "\n"
            f"{T}Someone walks in.\n"
            "\n"
            f"{T * 10}JOHN\n"
            f"{T * 9}(quietly)\n"
            f"{T * 8}Hello.\n"
            f"{T * 8}Bye."
        )

    def test_dialect_b_layout(self, exporter, coffee_scene):
        """Test dialect B uses its own indents and heading separator."""
        text = exporter.render_scene(coffee_scene, CHAPTERED)
        lines = text.split("\n")
        assert lines[0] == "INT. COFFEE SHOP -- MORNING"
        assert "Someone walks in." in lines
        assert f"{T * 12}JOHN" in lines
        assert f"{T * 10}(quietly)" in lines
        assert f"{T * 9}Hello." in lines

    def test_cue_is_uppercased(self, exporter):
        """Test speaker names are rendered in capitals."""
        scene = Scene("s", 1, location="ROOM", content="### john\n> hi")
        assert f"{T * 10}JOHN" in exporter.render_scene(scene, HOLLYWOOD)

    def test_orphan_dialogue_renders_without_speaker(self, exporter):
        """Test a dialogue line with no cue does not raise."""
        scene = Scene("s", 1, location="ROOM", content="> Lost line.")
        text = exporter.render_scene(scene, HOLLYWOOD)
        assert text == f"INT. ROOM - DAY\n\n{T * 8}Lost line."

    def test_empty_scene_renders_heading(self, exporter):
        """Test a scene with no content still gets its heading."""
        scene = Scene("s", 1, location="ROOM", day_night="NIGHT")
        assert exporter.render_scene(scene, HOLLYWOOD) == "INT. ROOM - NIGHT"

    def test_missing_location_uses_title(self, exporter):
        """Test the heading falls back to the title, then a placeholder."""
        titled = Scene("s", 1, title="Lobby")
        bare = Scene("s", 2)
        assert exporter.render_scene(titled, HOLLYWOOD) == "INT. LOBBY - DAY"
        assert exporter.render_scene(bare, HOLLYWOOD) == "INT. LOCATION - DAY"

    def test_typed_title_keeps_its_scene_type(self, exporter):
        """Test an INT./EXT. title is not prefixed a second time."""
        outdoor = Scene("1", 1, title="EXT. PARK", content="x")
        indoor = Scene("2", 2, title="int. city park", day_night="NIGHT")
        text = exporter.render_scene(outdoor, HOLLYWOOD)
        assert text.split("\n")[0] == "EXT. PARK - DAY"
        assert "EXT. EXT." not in text
        assert exporter.render_scene(indoor, CHAPTERED) == "INT. CITY PARK -- NIGHT"

    def test_typed_title_reparses_to_bare_location(self, exporter, settings):
        """Test the heading from a typed title parses back to the place."""
        scene = Scene("1", 1, title="EXT. PARK", content="Birds.")
        reparsed = ScreenplayParser(settings).parse(
            exporter.render_scene(scene, HOLLYWOOD)
        )
        assert [(s.location, s.title) for s in reparsed] == [("PARK", "EXT. PARK")]

    def test_embedded_heading_replaces_synthesized_one(self, exporter):
        """Test a leading INT./EXT. line is used as the heading."""
        scene = Scene(
            "s", 1, location="ROOM", content="ext. garden - dusk\nBirds sing."
        )
        text = exporter.render_scene(scene, HOLLYWOOD)
        assert text.split("\n")[0] == "EXT. GARDEN - DUSK"
        assert "INT. ROOM" not in text

    def test_embedded_hash_heading_is_completed(self, exporter):
        """Test a '##' heading gets a type prefix and time of day."""
        scene = Scene(
            "s", 1, location="ROOM", day_night="NIGHT", content="Dark.\n## 後院"
        )
        text = exporter.render_scene(scene, HOLLYWOOD)
        assert text.split("\n")[0] == "INT. ROOM - NIGHT"
        assert text.split("\n")[-1] == "INT. 後院 - NIGHT"

    def test_action_after_dialogue_starts_new_block(self, exporter):
        """Test blocks are separated by blank lines."""
        scene = Scene("s", 1, location="ROOM", content="### JOHN\n> Hi.\nHe sits.")
        blocks = exporter.render_scene(scene, HOLLYWOOD).split("\n\n")
        assert blocks == [
            "INT. ROOM - DAY",
            f"{T * 10}JOHN\n{T * 8}Hi.",
            f"{T}He sits.",
        ]


class TestSceneTypeClassifier:
    """Test the INT./EXT. keyword heuristic."""

    @pytest.mark.parametrize(
        ("location", "expected"),
        [
            ("CITY PARK", "EXT."),
            ("city park", "EXT."),
            ("PARKING GARAGE", "INT."),
            ("MAIN STREET", "EXT."),
            ("公園旁", "EXT."),
            ("學校操場外", "EXT."),
            ("客廳", "INT."),
            ("", "INT."),
        ],
    )
    def test_default_keywords(self, settings, location, expected):
        """Test the built-in keyword table."""
        classifier = SceneTypeClassifier(settings.outdoor_keywords)
        assert classifier.classify(location) == expected

    def test_custom_keywords(self):
        """Test the table can be replaced through settings."""
        exporter = DialectExporter(ScriptPortSettings(outdoor_keywords=["DECK"]))
        scene = Scene("s", 1, location="SHIP DECK")
        assert exporter.render_scene(scene, HOLLYWOOD).startswith("EXT.")

    def test_empty_keyword_table(self):
        """Test an empty table always answers INT."""
        assert SceneTypeClassifier([]).classify("CITY PARK") == "INT."


class TestExport:
    """Test full document export."""

    def test_envelope_dialect_a(self, exporter, coffee_scene):
        """Test title block, credit line and closing sentinels."""
        info = ScriptInfo(title="The Last Cup", author="Jane Doe")
        text = exporter.export([coffee_scene], dialect=Dialect.A, info=info)
        lines = text.split("\n")
        assert f"{T * 8}THE LAST CUP" in lines
        assert f"{T * 8}Written by" in lines
        assert f"{T * 8}Jane Doe" in lines
        assert lines.index("FADE IN:") < lines.index("INT. COFFEE SHOP - MORNING")
        assert text.endswith("FADE OUT.\n\n\nTHE END\n")

    def test_envelope_dialect_b(self, exporter, coffee_scene):
        """Test dialect B prints a logline and chapters but no credit."""
        info = ScriptInfo(title="The Last Cup", core_idea="A shop closes.", author="J")
        text = exporter.export([coffee_scene], dialect="B", info=info)
        lines = text.split("\n")
        assert f"{T * 13}THE LAST CUP" in lines
        assert f"{T * 17}A shop closes." in lines
        assert "Written by" not in text
        assert f"{T * 11}=== 其他場次 ===" in lines

    def test_untitled_placeholder(self, exporter):
        """Test a missing title renders a placeholder."""
        assert "UNTITLED" in exporter.export([], dialect="A")

    def test_scenes_in_narrative_order(self, exporter, beat_scenes):
        """Test beat groups are contiguous and ordered."""
        text = exporter.export(beat_scenes, DEFAULT_BEAT_SHEET, Dialect.A)
        positions = [
            text.index(marker)
            for marker in ["Coffee.", "Traffic.", "Typing.", "Alarm.", "Wind."]
        ]
        assert positions == sorted(positions)

    def test_chapter_headings_follow_beats(self, exporter, beat_scenes):
        """Test dialect B opens each group with its beat label."""
        text = exporter.export(beat_scenes, DEFAULT_BEAT_SHEET, Dialect.B)
        chapters = [line.strip() for line in text.split("\n") if "===" in line]
        assert chapters == ["=== 開場畫面 ===", "=== 催化劑 ===", "=== 其他場次 ==="]

    def test_dialect_a_has_no_chapters(self, exporter, beat_scenes):
        """Test dialect A never prints chapter headings."""
        assert "===" not in exporter.export(beat_scenes, DEFAULT_BEAT_SHEET, "A")

    def test_unknown_dialect(self, exporter, coffee_scene):
        """Test an unsupported dialect is a validation error."""
        with pytest.raises(ValidationError) as exc_info:
            exporter.export([coffee_scene], dialect="C")
        assert "Unknown dialect" in str(exc_info.value)

    def test_get_profile_accepts_lowercase(self):
        """Test dialect names are case-insensitive."""
        assert get_profile("b") is CHAPTERED
        assert get_profile(Dialect.A) is HOLLYWOOD

    def test_does_not_mutate_scenes(self, exporter, beat_scenes):
        """Test exporting leaves the input untouched."""
        before = [s.to_dict() for s in beat_scenes]
        exporter.export(beat_scenes, DEFAULT_BEAT_SHEET, "B")
        assert [s.to_dict() for s in beat_scenes] == before

    def test_module_level_export(self, coffee_scene):
        """Test the convenience function."""
        assert "JOHN" in export_screenplay([coffee_scene])
