"""Canonical scene markup shared by the parser and every exporter.

The grammar is line oriented with no nesting:

* ``### NAME`` starts a character cue, optionally followed by a parenthetical
  merged onto the same line (``### NAME (quietly)``).
* ``> text`` is a dialogue line spoken by the most recent cue.
* ``## text`` or a line opening with ``INT.``/``EXT.`` is an embedded heading.
* Any other non-blank line is action. Blank lines carry no structure.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum

CUE_PREFIX = "###"
DIALOGUE_PREFIX = ">"
HEADING_PREFIX = "##"

HEADING_TYPE_PATTERN = re.compile(r"^(INT\.|EXT\.)", re.IGNORECASE)
TRAILING_PARENTHETICAL = re.compile(r"\s*\(([^)]*)\)\s*$")


class MarkupKind(str, Enum):
    """Structural role of a canonical markup line."""

    CUE = "cue"
    DIALOGUE = "dialogue"
    HEADING = "heading"
    ACTION = "action"


@dataclass(frozen=True)
class MarkupLine:
    """A classified, non-blank canonical markup line."""

    kind: MarkupKind
    text: str
    parenthetical: str | None = None


def split_parenthetical(name: str) -> tuple[str, str | None]:
    """Split ``"NAME (note)"`` into ``("NAME", "note")``."""
    match = TRAILING_PARENTHETICAL.search(name)
    if not match:
        return name.strip(), None
    return name[: match.start()].strip(), match.group(1).strip()


def classify_line(line: str) -> MarkupLine | None:
    """Classify one markup line, returning None for blank lines."""
    stripped = line.strip()
    if not stripped:
        return None

    if stripped.startswith(CUE_PREFIX):
        speaker, parenthetical = split_parenthetical(stripped[len(CUE_PREFIX) :])
        return MarkupLine(MarkupKind.CUE, speaker, parenthetical)

    if stripped.startswith(DIALOGUE_PREFIX):
        return MarkupLine(MarkupKind.DIALOGUE, stripped[len(DIALOGUE_PREFIX) :].strip())

    if stripped.startswith(HEADING_PREFIX):
        return MarkupLine(MarkupKind.HEADING, stripped[len(HEADING_PREFIX) :].strip())

    if HEADING_TYPE_PATTERN.match(stripped):
        return MarkupLine(MarkupKind.HEADING, stripped)

    return MarkupLine(MarkupKind.ACTION, stripped)


def iter_markup(content: str) -> Iterator[MarkupLine]:
    """Yield classified lines of a scene's canonical markup, skipping blanks."""
    for line in content.splitlines():
        classified = classify_line(line)
        if classified is not None:
            yield classified


def cue_line(speaker: str) -> str:
    """Render a character cue markup line."""
    return f"{CUE_PREFIX} {speaker}"


def dialogue_line(text: str) -> str:
    """Render a dialogue markup line."""
    return f"{DIALOGUE_PREFIX} {text}"
