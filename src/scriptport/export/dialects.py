"""Dialect profiles and the INT./EXT. heading heuristic."""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass

from scriptport.exceptions import ValidationError
from scriptport.models import Dialect


@dataclass(frozen=True)
class DialectProfile:
    """Layout constants of one screenplay text convention.

    Indents are counted in ``indent_unit`` steps.
    """

    dialect: Dialect
    cue_indent: int
    parenthetical_indent: int
    dialogue_indent: int
    action_indent: int
    title_indent: int
    logline_indent: int
    chapter_indent: int
    heading_separator: str = " - "
    show_chapters: bool = False
    credit_line: str | None = None
    unclassified_label: str = "其他場次"
    indent_unit: str = "\t"

    def indent(self, steps: int, text: str) -> str:
        """Prefix text with the given number of indent steps."""
        return f"{self.indent_unit * steps}{text}"


HOLLYWOOD = DialectProfile(
    dialect=Dialect.A,
    cue_indent=10,
    parenthetical_indent=9,
    dialogue_indent=8,
    action_indent=1,
    title_indent=8,
    logline_indent=6,
    chapter_indent=0,
    credit_line="Written by",
)

CHAPTERED = DialectProfile(
    dialect=Dialect.B,
    cue_indent=12,
    parenthetical_indent=10,
    dialogue_indent=9,
    action_indent=0,
    title_indent=13,
    logline_indent=17,
    chapter_indent=11,
    heading_separator=" -- ",
    show_chapters=True,
)

PROFILES: dict[Dialect, DialectProfile] = {
    Dialect.A: HOLLYWOOD,
    Dialect.B: CHAPTERED,
}


def get_profile(dialect: Dialect | str) -> DialectProfile:
    """Look up the layout profile for a dialect name.

    Raises:
        ValidationError: If the dialect is not supported
    """
    try:
        key = dialect if isinstance(dialect, Dialect) else Dialect(str(dialect).upper())
    except ValueError as e:
        raise ValidationError(
            message=f"Unknown dialect: {dialect}",
            hint=f"Use one of: {', '.join(d.value for d in Dialect)}",
            details={"dialect": dialect},
        ) from e
    return PROFILES[key]


class SceneTypeClassifier:
    """Guess INT. or EXT. for a location from a table of outdoor keywords.

    The guess always commits to an answer and may be wrong.
    """

    def __init__(self, outdoor_keywords: Iterable[str]) -> None:
        patterns = []
        for keyword in outdoor_keywords:
            escaped = re.escape(keyword)
            # CJK text has no word boundaries, so only Latin keywords get \b
            patterns.append(rf"\b{escaped}\b" if keyword.isascii() else escaped)
        self._pattern = (
            re.compile("|".join(patterns), re.IGNORECASE) if patterns else None
        )

    def is_exterior(self, location: str) -> bool:
        """Return True when the location names an outdoor place."""
        return bool(self._pattern and self._pattern.search(location))

    def classify(self, location: str) -> str:
        """Return ``"EXT."`` for outdoor locations, otherwise ``"INT."``."""
        return "EXT." if self.is_exterior(location) else "INT."
