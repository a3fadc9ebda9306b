"""Data models shared by the parser, exporters and diff engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Dialect(str, Enum):
    """Supported screenplay text conventions."""

    A = "A"  # Hollywood spec layout
    B = "B"  # Chapter-style layout grouped under beat headings


class DiffType(str, Enum):
    """Classification of an aligned line pair."""

    UNCHANGED = "unchanged"
    MODIFIED = "modified"
    DELETED = "deleted"
    ADDED = "added"


class Selection(str, Enum):
    """Which side of a diff record survives a merge."""

    ORIGINAL = "original"
    REVISED = "revised"


@dataclass
class Scene:
    """Represents a scene in a screenplay project.

    ``content`` always holds canonical markup: ``###`` character cues,
    ``>`` dialogue lines and plain action lines.
    """

    id: str
    number: int
    title: str = ""
    location: str = ""
    day_night: str = ""
    content: str = ""
    beat_id: str | None = None

    def __post_init__(self) -> None:
        self.number = max(int(self.number), 0)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the camelCase JSON shape used by project bundles."""
        return {
            "id": self.id,
            "number": self.number,
            "title": self.title,
            "location": self.location,
            "dayNight": self.day_night,
            "content": self.content,
            "beatId": self.beat_id,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Scene:
        """Build a scene from its JSON shape, tolerating missing keys."""
        number = data.get("number") or 0
        scene_id = data.get("id")
        return cls(
            id=str(scene_id) if scene_id is not None else f"scene-{number}",
            number=int(number),
            title=data.get("title") or "",
            location=data.get("location") or "",
            day_night=data.get("dayNight") or "",
            content=data.get("content") or "",
            beat_id=data.get("beatId") or None,
        )


@dataclass(frozen=True)
class BeatDef:
    """One slot of the ordered narrative beat sheet."""

    id: str
    label: str
    description: str = ""


DEFAULT_BEAT_SHEET: tuple[BeatDef, ...] = (
    BeatDef("opening", "開場畫面", "第一印象，設定故事基調"),
    BeatDef("theme", "主題陳述", "故事要傳達的核心訊息"),
    BeatDef("setup", "設定", "介紹主角和世界觀"),
    BeatDef("catalyst", "催化劑", "改變一切的關鍵事件"),
    BeatDef("debate", "辯論", "主角猶豫是否接受挑戰"),
    BeatDef("break1", "進入第二幕", "主角做出決定，故事轉向"),
    BeatDef("bstory", "B故事", "次要情節線，通常與主題相關"),
    BeatDef("fun", "樂趣與遊戲", "承諾的前提開始展現"),
    BeatDef("midpoint", "中點", "重大轉折，真假勝利或失敗"),
    BeatDef("badguys", "壞人逼近", "壓力增加，主角面臨更大挑戰"),
    BeatDef("allislost", "全盤皆輸", "最黑暗的時刻"),
    BeatDef("darksoul", "靈魂暗夜", "主角反思，找到解決之道"),
    BeatDef("break2", "進入第三幕", "主角重新出發，帶著新認知"),
    BeatDef("finale", "結局", "最終對決與解決"),
    BeatDef("final", "最終畫面", "與開場呼應，展現轉變"),
)


@dataclass
class DiffRecord:
    """One aligned line pair produced by the line diff engine."""

    index: int
    type: DiffType
    original: str = ""
    revised: str = ""
    selected: Selection = Selection.ORIGINAL

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-friendly dictionary."""
        return {
            "index": self.index,
            "type": self.type.value,
            "original": self.original,
            "revised": self.revised,
            "selected": self.selected.value,
        }


@dataclass
class ScriptInfo:
    """Title-page metadata used by the export envelopes."""

    title: str = ""
    core_idea: str = ""
    author: str = ""
    version: str = "1.0"
    extra: dict[str, Any] = field(default_factory=dict)
