"""Render scenes of canonical markup into dialect screenplay text."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from scriptport.config import ScriptPortSettings, get_logger, get_settings
from scriptport.export.beats import BeatGroup, group_scenes_by_beat
from scriptport.export.dialects import DialectProfile, SceneTypeClassifier, get_profile
from scriptport.models import DEFAULT_BEAT_SHEET, BeatDef, Dialect, Scene, ScriptInfo
from scriptport.parser.markup import (
    HEADING_TYPE_PATTERN,
    MarkupKind,
    MarkupLine,
    iter_markup,
)

logger = get_logger(__name__)

UNTITLED = "UNTITLED"


class DialectExporter:
    """Render scenes to the plain text of a screenplay dialect.

    The traversal is shared between dialects; a ``DialectProfile`` supplies
    indentation, heading format and the title envelope.
    """

    def __init__(self, settings: ScriptPortSettings | None = None) -> None:
        """Initialize the exporter.

        Args:
            settings: Settings carrying the outdoor keyword table and the
                default time of day. Uses the global settings when omitted.
        """
        settings = settings or get_settings()
        self.classifier = SceneTypeClassifier(settings.outdoor_keywords)
        self.default_day_night = settings.default_day_night

    def export(
        self,
        scenes: Iterable[Scene],
        beat_order: Sequence[BeatDef] = DEFAULT_BEAT_SHEET,
        dialect: Dialect | str = Dialect.A,
        info: ScriptInfo | None = None,
    ) -> str:
        """Render scenes in narrative order.

        Args:
            scenes: Scenes to render
            beat_order: Ordered beat sheet used for grouping
            dialect: Target dialect
            info: Title page metadata

        Returns:
            Dialect text ending with a newline

        Raises:
            ValidationError: If the dialect is unknown
        """
        profile = get_profile(dialect)
        groups = group_scenes_by_beat(scenes, beat_order)

        sections = [self.title_block(info or ScriptInfo(), profile)]
        for group in groups:
            if profile.show_chapters:
                sections.append(self.chapter_heading(group, profile))
            sections.extend(self.render_scene(scene, profile) for scene in group.scenes)
        sections.append("FADE OUT.\n\n\nTHE END")

        logger.debug(
            "Exported scenes",
            dialect=profile.dialect.value,
            groups=len(groups),
            scenes=sum(len(group.scenes) for group in groups),
        )
        return "\n\n\n".join(sections) + "\n"

    def title_block(self, info: ScriptInfo, profile: DialectProfile) -> str:
        """Render the title page and the opening ``FADE IN:``."""
        title = (info.title or UNTITLED).upper()
        lines = ["", "", profile.indent(profile.title_indent, title)]
        if info.core_idea:
            lines += ["", profile.indent(profile.logline_indent, info.core_idea)]
        if profile.credit_line and info.author:
            lines += [
                "",
                profile.indent(profile.title_indent, profile.credit_line),
                "",
                profile.indent(profile.title_indent, info.author),
            ]
        lines += ["", "", "FADE IN:"]
        return "\n".join(lines)

    def chapter_heading(self, group: BeatGroup, profile: DialectProfile) -> str:
        """Render the chapter title that opens a beat group."""
        label = group.beat.label if group.beat else profile.unclassified_label
        return profile.indent(profile.chapter_indent, f"=== {label.upper()} ===")

    def scene_heading(self, scene: Scene, profile: DialectProfile) -> str:
        """Synthesize ``INT./EXT. LOCATION - TIME`` from scene fields."""
        if scene.location:
            return self.format_heading(scene.location.upper(), scene, profile)

        place = (scene.title or "").strip().upper()
        typed = HEADING_TYPE_PATTERN.match(place)
        if typed:
            # Titles look like "EXT. PARK"; their type wins over the keyword guess
            place = place[typed.end() :].strip()
            return self.format_heading(
                place or "LOCATION", scene, profile, scene_type=typed.group(1)
            )
        return self.format_heading(place or "LOCATION", scene, profile)

    def format_heading(
        self,
        place: str,
        scene: Scene,
        profile: DialectProfile,
        scene_type: str | None = None,
    ) -> str:
        """Prefix a place with its scene type and append the time.

        The type is guessed from the place when not given.
        """
        day_night = (scene.day_night or self.default_day_night).upper()
        scene_type = scene_type or self.classifier.classify(place)
        return f"{scene_type} {place}{profile.heading_separator}{day_night}"

    def render_scene(self, scene: Scene, profile: DialectProfile) -> str:
        """Render one scene's markup as dialect text."""
        markup = list(iter_markup(scene.content))
        blocks: list[list[str]] = []

        embedded = (
            bool(markup)
            and markup[0].kind == MarkupKind.HEADING
            and HEADING_TYPE_PATTERN.match(markup[0].text) is not None
        )
        if not embedded:
            blocks.append([self.scene_heading(scene, profile)])

        block: list[str] = []
        in_dialogue = False
        for line in markup:
            if line.kind == MarkupKind.CUE:
                if block:
                    blocks.append(block)
                block = self._cue_lines(line, profile)
                in_dialogue = True
            elif line.kind == MarkupKind.DIALOGUE:
                if not in_dialogue and block:
                    blocks.append(block)
                    block = []
                # A dialogue line without a cue renders with no speaker
                block.append(profile.indent(profile.dialogue_indent, line.text))
                in_dialogue = True
            else:
                if block:
                    blocks.append(block)
                block = []
                in_dialogue = False
                blocks.append([self._standalone_line(line, scene, profile)])
        if block:
            blocks.append(block)

        return "\n\n".join("\n".join(lines) for lines in blocks)

    def _cue_lines(self, line: MarkupLine, profile: DialectProfile) -> list[str]:
        lines = [profile.indent(profile.cue_indent, line.text.upper())]
        if line.parenthetical:
            lines.append(
                profile.indent(profile.parenthetical_indent, f"({line.parenthetical})")
            )
        return lines

    def _standalone_line(
        self, line: MarkupLine, scene: Scene, profile: DialectProfile
    ) -> str:
        if line.kind == MarkupKind.HEADING:
            heading = line.text.upper()
            if HEADING_TYPE_PATTERN.match(heading):
                return heading
            return self.format_heading(heading, scene, profile)
        return profile.indent(profile.action_indent, line.text)


def export_screenplay(
    scenes: Iterable[Scene],
    beat_order: Sequence[BeatDef] = DEFAULT_BEAT_SHEET,
    dialect: Dialect | str = Dialect.A,
    info: ScriptInfo | None = None,
    settings: ScriptPortSettings | None = None,
) -> str:
    """Render scenes with an exporter built from ``settings``."""
    return DialectExporter(settings).export(scenes, beat_order, dialect, info)
