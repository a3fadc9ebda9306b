"""Beat-sheet grouping of scenes into narrative order."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from scriptport.models import BeatDef, Scene


@dataclass
class BeatGroup:
    """Scenes assigned to one beat, or the unclassified tail when beat is None."""

    beat: BeatDef | None
    scenes: list[Scene] = field(default_factory=list)

    @property
    def is_unclassified(self) -> bool:
        """True for the trailing group of scenes without a known beat."""
        return self.beat is None


def group_scenes_by_beat(
    scenes: Iterable[Scene], beat_order: Sequence[BeatDef]
) -> list[BeatGroup]:
    """Partition scenes by beat in beat-sheet order.

    Scenes inside every group are sorted by ``number``. Scenes whose
    ``beat_id`` is unset or not part of ``beat_order`` form a trailing
    unclassified group. Empty groups are omitted.

    Args:
        scenes: Scenes in any order
        beat_order: The ordered beat sheet

    Returns:
        Non-empty groups, beat groups first, unclassified last
    """
    by_beat: dict[str, list[Scene]] = {beat.id: [] for beat in beat_order}
    unclassified: list[Scene] = []
    for scene in scenes:
        if scene.beat_id is not None and scene.beat_id in by_beat:
            by_beat[scene.beat_id].append(scene)
        else:
            unclassified.append(scene)

    groups = [
        BeatGroup(beat, sorted(by_beat[beat.id], key=lambda s: s.number))
        for beat in beat_order
        if by_beat[beat.id]
    ]
    if unclassified:
        groups.append(BeatGroup(None, sorted(unclassified, key=lambda s: s.number)))
    return groups


def narrative_order(
    scenes: Iterable[Scene], beat_order: Sequence[BeatDef]
) -> list[Scene]:
    """Flatten the beat grouping into a single ordered scene list."""
    return [
        scene
        for group in group_scenes_by_beat(scenes, beat_order)
        for scene in group.scenes
    ]
