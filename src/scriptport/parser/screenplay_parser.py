"""Parse loosely formatted screenplay text into scenes of canonical markup.

The parser is a single forward pass driven by a prioritized list of line
rules. Each rule sees the current line plus an explicit ``ParserContext``
that carries all state for one call, so a parser instance can be shared
between threads.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from scriptport.config import ScriptPortSettings, get_logger, get_settings
from scriptport.models import Scene
from scriptport.parser.markup import cue_line, dialogue_line

logger = get_logger(__name__)

SCENE_HEADING_PATTERN = re.compile(
    r"^(?P<type>INT\.|EXT\.)\s+(?P<location>.+?)\s*[-–—]+\s*(?P<time>[^-–—]+)$",
    re.IGNORECASE,
)
SEPARATOR_PATTERN = re.compile(r"^[-=#]+$")
CAPTIONED_SEPARATOR_PATTERN = re.compile(r"^[-=]{3,}\s.*\s[-=]{3,}$")
CUE_SHAPE_PATTERN = re.compile(
    r"^(?P<name>[A-Z][A-Z &'.\-]*?)(?:\s*\((?P<note>[^()]*)\))?$"
)
PARENTHETICAL_PATTERN = re.compile(r"^\((?P<text>.+)\)$")
CONTINUATION_PREFIX = "- "


@dataclass
class OpenScene:
    """A scene still receiving markup lines."""

    scene: Scene
    lines: list[str] = field(default_factory=list)


@dataclass
class ParserContext:
    """All mutable state of a single parse call."""

    lines: Sequence[str]
    position: int = 0
    next_number: int = 1
    scenes: list[Scene] = field(default_factory=list)
    current: OpenScene | None = None
    in_dialogue: bool = False
    pending: list[str] = field(default_factory=list)
    cue_index: int | None = None

    def emit(self, markup: str) -> None:
        """Append a markup line to the open scene, dropping preamble lines."""
        if self.current is not None:
            self.current.lines.append(markup)

    def flush_dialogue(self) -> None:
        """Emit buffered dialogue lines as ``>`` markup."""
        for text in self.pending:
            self.emit(dialogue_line(text))
        self.pending = []

    def end_dialogue(self) -> None:
        """Flush buffered dialogue and leave dialogue mode."""
        self.flush_dialogue()
        self.in_dialogue = False
        self.cue_index = None

    def close_scene(self) -> None:
        """Flush dialogue and move the open scene to the output list."""
        self.end_dialogue()
        if self.current is not None:
            self.current.scene.content = "\n".join(self.current.lines)
            self.scenes.append(self.current.scene)
            self.current = None


@dataclass(frozen=True)
class CueShape:
    """Shape test for character cue candidates."""

    min_length: int = 2
    max_length: int = 50

    def speaker(self, line: str) -> str | None:
        """Return the speaker name when the line is cue-shaped."""
        if not self.min_length < len(line) < self.max_length:
            return None
        match = CUE_SHAPE_PATTERN.match(line)
        if not match:
            return None
        name = match.group("name").strip()
        # Periods reject abbreviations such as "MR. SMITH" along with headings
        if "." in name or len(name) < 2:
            return None
        return name

    def matches(self, line: str) -> bool:
        """Return True when the line looks like a character cue."""
        return self.speaker(line) is not None


class LineRule:
    """Base class for a prioritized line classification rule."""

    name = "rule"

    def matches(self, ctx: ParserContext, line: str) -> bool:
        """Return True when this rule claims the line."""
        raise NotImplementedError

    def apply(self, ctx: ParserContext, line: str) -> None:
        """Update the context for a claimed line."""
        raise NotImplementedError


class SceneHeadingRule(LineRule):
    """``INT./EXT. LOCATION - TIME`` starts a new scene."""

    name = "scene_heading"

    def matches(self, ctx: ParserContext, line: str) -> bool:
        return SCENE_HEADING_PATTERN.match(line) is not None

    def apply(self, ctx: ParserContext, line: str) -> None:
        match = SCENE_HEADING_PATTERN.match(line)
        if match is None:
            return
        ctx.close_scene()

        scene_type = match.group("type").upper()
        location = match.group("location").strip()
        number = ctx.next_number
        ctx.next_number += 1
        ctx.current = OpenScene(
            scene=Scene(
                id=f"scene-{number}",
                number=number,
                title=f"{scene_type} {location}",
                location=location,
                day_night=match.group("time").strip(),
            )
        )
        logger.debug("Scene opened", number=number, location=location)


class NoiseRule(LineRule):
    """Blank lines, separator rules and sentinel tokens."""

    name = "noise"

    def __init__(self, sentinel_patterns: Iterable[str]) -> None:
        self.sentinels = tuple(
            re.compile(pattern, re.IGNORECASE) for pattern in sentinel_patterns
        )

    def is_noise(self, line: str) -> bool:
        """Return True for lines that carry no screenplay content."""
        if not line:
            return True
        if SEPARATOR_PATTERN.match(line) or CAPTIONED_SEPARATOR_PATTERN.match(line):
            return True
        return any(pattern.search(line) for pattern in self.sentinels)

    def matches(self, ctx: ParserContext, line: str) -> bool:
        return self.is_noise(line)

    def apply(self, ctx: ParserContext, line: str) -> None:
        # A cue separated from its first line by a blank keeps dialogue open
        if ctx.in_dialogue and ctx.pending:
            ctx.end_dialogue()


class CharacterCueRule(LineRule):
    """Capitalized short line confirmed by a bounded lookahead."""

    name = "character_cue"

    def __init__(
        self,
        shape: CueShape,
        lookahead: int,
        heading_rule: SceneHeadingRule,
        noise_rule: NoiseRule,
    ) -> None:
        self.shape = shape
        self.lookahead = lookahead
        self.heading_rule = heading_rule
        self.noise_rule = noise_rule

    def confirmed(self, ctx: ParserContext) -> bool:
        """Look at the next non-blank lines for something that is not a cue."""
        inspected = 0
        for upcoming in ctx.lines[ctx.position + 1 :]:
            if not upcoming:
                continue
            inspected += 1
            if inspected > self.lookahead:
                break
            if self.shape.matches(upcoming):
                return False
            if self.heading_rule.matches(ctx, upcoming) or self.noise_rule.is_noise(
                upcoming
            ):
                continue
            return True
        return False

    def matches(self, ctx: ParserContext, line: str) -> bool:
        if not self.shape.matches(line):
            return False
        if self.confirmed(ctx):
            return True
        logger.debug("Cue candidate rejected by lookahead", line=line)
        return False

    def apply(self, ctx: ParserContext, line: str) -> None:
        speaker = self.shape.speaker(line)
        if speaker is None:
            return
        ctx.flush_dialogue()
        ctx.emit(cue_line(speaker))
        ctx.cue_index = len(ctx.current.lines) - 1 if ctx.current else None
        ctx.in_dialogue = True


class ParentheticalRule(LineRule):
    """``(direction)`` inside dialogue is merged onto the cue line."""

    name = "parenthetical"

    def matches(self, ctx: ParserContext, line: str) -> bool:
        return ctx.in_dialogue and PARENTHETICAL_PATTERN.match(line) is not None

    def apply(self, ctx: ParserContext, line: str) -> None:
        match = PARENTHETICAL_PATTERN.match(line)
        if match is None or ctx.current is None or ctx.cue_index is None:
            return
        ctx.current.lines[ctx.cue_index] += f" ({match.group('text')})"


class ContinuationRule(LineRule):
    """``- text`` inside dialogue continues the previous dialogue line."""

    name = "continuation"

    def matches(self, ctx: ParserContext, line: str) -> bool:
        return ctx.in_dialogue and line.startswith(CONTINUATION_PREFIX)

    def apply(self, ctx: ParserContext, line: str) -> None:
        text = line[len(CONTINUATION_PREFIX) :].strip()
        if ctx.pending:
            ctx.pending[-1] = f"{ctx.pending[-1]} {text}"
        else:
            ctx.pending.append(text)


class DefaultRule(LineRule):
    """Dialogue while a cue is open, otherwise action."""

    name = "default"

    def matches(self, ctx: ParserContext, line: str) -> bool:
        return True

    def apply(self, ctx: ParserContext, line: str) -> None:
        if ctx.in_dialogue:
            ctx.pending.append(line)
        else:
            ctx.emit(line)


class ScreenplayParser:
    """Turn plain screenplay text into scenes holding canonical markup."""

    def __init__(self, settings: ScriptPortSettings | None = None) -> None:
        """Initialize the parser from heuristic settings.

        Args:
            settings: Settings carrying the heuristic tables. Uses the global
                settings when omitted.
        """
        settings = settings or get_settings()
        heading = SceneHeadingRule()
        noise = NoiseRule(settings.sentinel_patterns)
        shape = CueShape(settings.cue_min_length, settings.cue_max_length)
        self.rules: tuple[LineRule, ...] = (
            heading,
            noise,
            CharacterCueRule(shape, settings.cue_lookahead, heading, noise),
            ParentheticalRule(),
            ContinuationRule(),
            DefaultRule(),
        )

    def parse(self, raw_text: str, start_number: int = 1) -> list[Scene]:
        """Parse screenplay text into scenes.

        Never raises. Text before the first scene heading is discarded.

        Args:
            raw_text: Screenplay text in the INT./EXT. convention
            start_number: Number assigned to the first scene

        Returns:
            Scenes in source order, numbered densely from ``start_number``
        """
        if not isinstance(raw_text, str):
            logger.debug("Ignoring non-text parser input", type=type(raw_text).__name__)
            return []

        ctx = ParserContext(
            lines=[line.strip() for line in raw_text.splitlines()],
            next_number=max(start_number, 1),
        )
        for position, line in enumerate(ctx.lines):
            ctx.position = position
            for rule in self.rules:
                if rule.matches(ctx, line):
                    rule.apply(ctx, line)
                    break
        ctx.close_scene()

        logger.debug("Parsed screenplay text", scenes=len(ctx.scenes))
        return ctx.scenes


def parse(raw_text: str, settings: ScriptPortSettings | None = None) -> list[Scene]:
    """Parse screenplay text with a parser built from ``settings``."""
    return ScreenplayParser(settings).parse(raw_text)
