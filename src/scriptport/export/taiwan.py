"""Structured extraction and rendering for the Taiwan screenplay format.

The Taiwan layout needs more than the line grammar gives: a scene
description, a list of character introductions and ordered blocks of action
followed by the dialogue that answers it. ``TaiwanContentExtractor`` recovers
that shape from canonical markup using a few positional heuristics and
``TaiwanFormatter`` renders it.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any

from scriptport.config import ScriptPortSettings, get_logger, get_settings
from scriptport.export.beats import group_scenes_by_beat
from scriptport.models import DEFAULT_BEAT_SHEET, BeatDef, Scene, ScriptInfo
from scriptport.parser.markup import CUE_PREFIX, DIALOGUE_PREFIX, split_parenthetical

logger = get_logger(__name__)

INTRO_PATTERN = re.compile(
    r"^(?P<name>[^，,\s]{1,10})\s*[，,]\s*(?P<gender>男|女)\s*[，,]\s*(?P<age>[^，,]+)"
)
INLINE_DIALOGUE_PATTERN = re.compile(r"^(?P<name>[^：\s，,。]{1,12})：\s*(?P<text>.+)$")
ACTION_MARKER = "△"
# Field labels of the Taiwan layout look like "Name：text" but are not speech
FIELD_LABELS = frozenset({"描述", "人物", "場景", "地點", "時間", "場次"})


@dataclass
class DialogueEntry:
    """One spoken line."""

    character: str
    text: str

    def to_dict(self) -> dict[str, str]:
        return {"character": self.character, "text": self.text}


@dataclass
class ActionBlock:
    """A run of action lines and the dialogue that follows it."""

    action: str = ""
    dialogue: list[DialogueEntry] = field(default_factory=list)

    def add_action(self, text: str) -> None:
        self.action = f"{self.action}\n{text}" if self.action else text

    def to_dict(self) -> dict[str, Any]:
        return {
            "action": self.action,
            "dialogue": [entry.to_dict() for entry in self.dialogue],
        }


@dataclass
class StructuredContent:
    """Scene content decomposed for the Taiwan layout."""

    description: str = ""
    characters: list[str] = field(default_factory=list)
    actions: list[ActionBlock] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "description": self.description,
            "characters": list(self.characters),
            "actions": [block.to_dict() for block in self.actions],
        }


@dataclass
class _ExtractionState:
    result: StructuredContent = field(default_factory=StructuredContent)
    speaker: str = ""
    block: ActionBlock | None = None
    block_has_dialogue: bool = False

    def add_dialogue(self, character: str, text: str) -> None:
        if self.block is None:
            self.block = ActionBlock()
            self.result.actions.append(self.block)
        self.block.dialogue.append(DialogueEntry(character, text))
        self.block_has_dialogue = True

    def add_action(self, text: str) -> None:
        # Dialogue closes the open block; the next action starts a fresh one
        if self.block is None or self.block_has_dialogue:
            self.block = ActionBlock()
            self.result.actions.append(self.block)
            self.block_has_dialogue = False
        self.block.add_action(text)


class TaiwanContentExtractor:
    """Decompose canonical markup into description, characters and actions."""

    def __init__(self, settings: ScriptPortSettings | None = None) -> None:
        settings = settings or get_settings()
        self.intro_window = settings.intro_window
        self.description_min_length = settings.description_min_length
        self.residence_keywords = tuple(settings.residence_keywords)

    def is_introduction(self, line: str, position: int) -> bool:
        """``名字，男，25歲`` near the top of a scene introduces a character."""
        return position < self.intro_window and INTRO_PATTERN.match(line) is not None

    def is_description(self, line: str, position: int) -> bool:
        """A long line near the top that names a dwelling or building."""
        return (
            position < self.intro_window
            and len(line) > self.description_min_length
            and any(keyword in line for keyword in self.residence_keywords)
        )

    def extract_structured(self, content: str) -> StructuredContent:
        """Decompose one scene's markup.

        Args:
            content: Canonical markup of a scene

        Returns:
            The structured decomposition
        """
        state = _ExtractionState()
        lines = [line.strip() for line in (content or "").splitlines()]
        for position, line in enumerate(line for line in lines if line):
            if line.startswith(CUE_PREFIX):
                state.speaker, _ = split_parenthetical(line[len(CUE_PREFIX) :])
                continue

            if line.startswith(DIALOGUE_PREFIX):
                state.add_dialogue(state.speaker, line[len(DIALOGUE_PREFIX) :].strip())
                continue

            inline = INLINE_DIALOGUE_PATTERN.match(line)
            if inline and inline.group("name") not in FIELD_LABELS:
                state.add_dialogue(inline.group("name"), inline.group("text").strip())
                continue

            if self.is_introduction(line, position):
                state.result.characters.append(line)
                continue

            if not state.result.description and self.is_description(line, position):
                state.result.description = line
                continue

            state.add_action(line.removeprefix(ACTION_MARKER).strip())

        return state.result


class TaiwanFormatter:
    """Render scenes in the Taiwan screenplay layout."""

    def __init__(self, settings: ScriptPortSettings | None = None) -> None:
        settings = settings or get_settings()
        self.extractor = TaiwanContentExtractor(settings)
        self.default_day_night = settings.default_day_night

    def render_scene(self, scene: Scene) -> str:
        """Render a single scene with its header line."""
        day_night = scene.day_night or self.default_day_night
        location = scene.location or scene.title
        lines = [f"場次 {scene.number}　{location}　{day_night}"]

        structured = self.extractor.extract_structured(scene.content)
        if structured.description:
            lines.append(f"描述：{structured.description}")
        if structured.characters:
            lines.append("人物：")
            lines.extend(f"　{intro}" for intro in structured.characters)
        for block in structured.actions:
            lines.extend(
                f"{ACTION_MARKER}{action}" for action in block.action.splitlines()
            )
            for entry in block.dialogue:
                lines.append(
                    f"{entry.character}：{entry.text}" if entry.character else entry.text
                )
        return "\n".join(lines)

    def render(
        self,
        scenes: Iterable[Scene],
        beat_order: Sequence[BeatDef] = DEFAULT_BEAT_SHEET,
        info: ScriptInfo | None = None,
    ) -> str:
        """Render scenes in narrative order under beat headings."""
        sections = []
        if info and info.title:
            sections.append(info.title)
        groups = group_scenes_by_beat(scenes, beat_order)
        for group in groups:
            label = group.beat.label if group.beat else "其他場次"
            sections.append(f"【{label}】")
            sections.extend(self.render_scene(scene) for scene in group.scenes)

        logger.debug("Rendered Taiwan layout", groups=len(groups))
        return "\n\n".join(sections) + "\n"


def extract_structured(
    content: str, settings: ScriptPortSettings | None = None
) -> StructuredContent:
    """Decompose scene markup with an extractor built from ``settings``."""
    return TaiwanContentExtractor(settings).extract_structured(content)
