"""Tests for beat-sheet grouping."""

from scriptport.export import group_scenes_by_beat, narrative_order
from scriptport.models import DEFAULT_BEAT_SHEET, BeatDef, Scene


class TestGroupScenesByBeat:
    """Test partitioning scenes by beat."""

    def test_groups_follow_beat_order(self, beat_scenes):
        """Test groups appear in beat-sheet order with unclassified last."""
        groups = group_scenes_by_beat(beat_scenes, DEFAULT_BEAT_SHEET)
        assert [g.beat.id if g.beat else None for g in groups] == [
            "opening",
            "catalyst",
            None,
        ]
        assert groups[-1].is_unclassified

    def test_scenes_sorted_by_number_within_group(self, beat_scenes):
        """Test each group is internally ordered by scene number."""
        groups = group_scenes_by_beat(beat_scenes, DEFAULT_BEAT_SHEET)
        assert [s.number for s in groups[0].scenes] == [1, 4]
        assert [s.number for s in groups[-1].scenes] == [2, 5]

    def test_unknown_beat_id_is_unclassified(self, beat_scenes):
        """Test a beat id missing from the sheet falls into the trailing group."""
        groups = group_scenes_by_beat(beat_scenes, DEFAULT_BEAT_SHEET)
        assert "s2" in [s.id for s in groups[-1].scenes]

    def test_custom_beat_order(self):
        """Test the caller's beat order is respected."""
        beats = [BeatDef("b", "Second"), BeatDef("a", "First")]
        scenes = [Scene("x", 1, beat_id="a"), Scene("y", 2, beat_id="b")]
        groups = group_scenes_by_beat(scenes, beats)
        assert [g.beat.id for g in groups] == ["b", "a"]

    def test_empty_input(self):
        """Test no scenes yields no groups."""
        assert group_scenes_by_beat([], DEFAULT_BEAT_SHEET) == []

    def test_all_unassigned_keeps_chronological_order(self):
        """Test scenes without beats come out sorted by number."""
        scenes = [Scene("c", 3), Scene("a", 1), Scene("b", 2)]
        assert [s.id for s in narrative_order(scenes, DEFAULT_BEAT_SHEET)] == [
            "a",
            "b",
            "c",
        ]

    def test_narrative_order(self, beat_scenes):
        """Test flattening groups gives the full narrative order."""
        ordered = narrative_order(beat_scenes, DEFAULT_BEAT_SHEET)
        assert [s.id for s in ordered] == ["s1", "s4", "s3", "s2", "s5"]


class TestDefaultBeatSheet:
    """Test the built-in beat sheet."""

    def test_has_fifteen_unique_beats(self):
        """Test the sheet has fifteen distinct ids."""
        ids = [beat.id for beat in DEFAULT_BEAT_SHEET]
        assert len(ids) == 15
        assert len(set(ids)) == 15
        assert ids[0] == "opening"
        assert ids[-1] == "final"
