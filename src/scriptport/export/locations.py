"""Group scenes that share a location and summarize them as text or JSON."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from scriptport.models import Scene


@dataclass
class LocationGroup:
    """Scenes whose location matched a search term."""

    location: str
    scenes: list[Scene] = field(default_factory=list)


def group_scenes_by_location(scenes: Iterable[Scene], term: str) -> list[LocationGroup]:
    """Group scenes whose location contains ``term`` (case-insensitive).

    Groups are keyed by the scene's own location text, ordered by size
    (largest first) and then by name; scenes inside a group are sorted by
    number. A blank term matches nothing.
    """
    needle = term.strip().lower()
    if not needle:
        return []

    groups: dict[str, LocationGroup] = {}
    seen: set[str] = set()
    for scene in scenes:
        location = scene.location.strip()
        if not location or needle not in location.lower() or scene.id in seen:
            continue
        seen.add(scene.id)
        groups.setdefault(location, LocationGroup(location)).scenes.append(scene)

    for group in groups.values():
        group.scenes.sort(key=lambda s: s.number)
    return sorted(groups.values(), key=lambda g: (-len(g.scenes), g.location))


def format_location_report(
    groups: Sequence[LocationGroup],
    term: str,
    generated_at: datetime | None = None,
) -> str:
    """Render location groups as a plain-text report."""
    generated_at = generated_at or datetime.now()
    total = sum(len(group.scenes) for group in groups)
    lines = [
        "場景統整結果",
        f"搜尋關鍵字: {term}",
        f"匯出日期: {generated_at:%Y-%m-%d %H:%M:%S}",
        f"總場景數: {total}",
        "=" * 50,
        "",
    ]
    for group in groups:
        lines.append(f"地點: {group.location} ({len(group.scenes)} 個場景)")
        lines.append("-" * 50)
        for index, scene in enumerate(group.scenes):
            heading = f"場次 {scene.number}"
            if scene.title:
                heading += f" - {scene.title}"
            lines += ["", heading, f"地點: {scene.location}"]
            if scene.content:
                lines += ["內容:", scene.content]
            if index < len(group.scenes) - 1:
                lines += ["", "-" * 30]
        lines += ["", ""]
    return "\n".join(lines)


def location_report_to_dict(
    groups: Sequence[LocationGroup],
    term: str,
    generated_at: datetime | None = None,
) -> dict[str, Any]:
    """Convert location groups to the JSON export shape.

    ``allScenes`` flattens every group into one list sorted by number, each
    scene tagged with the ``groupLocation`` it was collected under.
    """
    generated_at = generated_at or datetime.now(UTC)
    all_scenes = sorted(
        (
            {**scene.to_dict(), "groupLocation": group.location}
            for group in groups
            for scene in group.scenes
        ),
        key=lambda item: item["number"],
    )
    return {
        "searchTerm": term,
        "exportDate": generated_at.isoformat(),
        "totalScenes": len(all_scenes),
        "groups": [
            {
                "location": group.location,
                "sceneCount": len(group.scenes),
                "scenes": [scene.to_dict() for scene in group.scenes],
            }
            for group in groups
        ],
        "allScenes": all_scenes,
    }
