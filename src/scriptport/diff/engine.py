"""Line-level diff and merge between a text and its revision.

The default ``positional`` strategy walks both line lists with two
synchronized cursors and pairs differing lines by position, so one inserted
line turns every later pair into ``modified``. The ``aligned`` strategy
keeps the same record contract but aligns equal runs first.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Callable, Mapping, Sequence
from difflib import SequenceMatcher

from scriptport.config import get_logger
from scriptport.exceptions import ValidationError, require_text
from scriptport.models import DiffRecord, DiffType, Selection

logger = get_logger(__name__)

POSITIONAL = "positional"
ALIGNED = "aligned"

# "polished" is how revision selections were stored by earlier project files
SELECTION_ALIASES = {
    "original": Selection.ORIGINAL,
    "revised": Selection.REVISED,
    "polished": Selection.REVISED,
}


class _RecordBuilder:
    def __init__(self) -> None:
        self.records: list[DiffRecord] = []

    def add(self, kind: DiffType, original: str = "", revised: str = "") -> None:
        selected = Selection.REVISED if kind == DiffType.ADDED else Selection.ORIGINAL
        self.records.append(
            DiffRecord(len(self.records), kind, original, revised, selected)
        )


def _positional(original: Sequence[str], revised: Sequence[str]) -> list[DiffRecord]:
    builder = _RecordBuilder()
    orig_idx = 0
    rev_idx = 0
    while orig_idx < len(original) or rev_idx < len(revised):
        has_original = orig_idx < len(original)
        has_revised = rev_idx < len(revised)
        if has_original and has_revised:
            orig_line = original[orig_idx]
            rev_line = revised[rev_idx]
            kind = DiffType.UNCHANGED if orig_line == rev_line else DiffType.MODIFIED
            builder.add(kind, orig_line, rev_line)
            orig_idx += 1
            rev_idx += 1
        elif has_original:
            builder.add(DiffType.DELETED, original=original[orig_idx])
            orig_idx += 1
        else:
            builder.add(DiffType.ADDED, revised=revised[rev_idx])
            rev_idx += 1
    return builder.records


def _aligned(original: Sequence[str], revised: Sequence[str]) -> list[DiffRecord]:
    builder = _RecordBuilder()
    matcher = SequenceMatcher(a=original, b=revised, autojunk=False)
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            for line in original[i1:i2]:
                builder.add(DiffType.UNCHANGED, line, line)
        elif tag == "delete":
            for line in original[i1:i2]:
                builder.add(DiffType.DELETED, original=line)
        elif tag == "insert":
            for line in revised[j1:j2]:
                builder.add(DiffType.ADDED, revised=line)
        else:
            old, new = original[i1:i2], revised[j1:j2]
            paired = min(len(old), len(new))
            for orig_line, rev_line in zip(old[:paired], new[:paired], strict=True):
                builder.add(DiffType.MODIFIED, orig_line, rev_line)
            for line in old[paired:]:
                builder.add(DiffType.DELETED, original=line)
            for line in new[paired:]:
                builder.add(DiffType.ADDED, revised=line)
    return builder.records


STRATEGIES: dict[str, Callable[[Sequence[str], Sequence[str]], list[DiffRecord]]] = {
    POSITIONAL: _positional,
    ALIGNED: _aligned,
}


def diff(original: str, revised: str, strategy: str = POSITIONAL) -> list[DiffRecord]:
    """Compare two texts line by line.

    Args:
        original: The text as written
        revised: The revised text
        strategy: ``"positional"`` or ``"aligned"``

    Returns:
        Ordered diff records; ``index`` equals the record's position

    Raises:
        ValidationError: If an input is not a string or the strategy is unknown
    """
    require_text(original, "original")
    require_text(revised, "revised")
    try:
        compare = STRATEGIES[strategy]
    except KeyError as e:
        raise ValidationError(
            message=f"Unknown diff strategy: {strategy}",
            hint=f"Use one of: {', '.join(STRATEGIES)}",
            details={"strategy": strategy},
        ) from e

    records = compare(original.split("\n"), revised.split("\n"))
    logger.debug("Computed line diff", strategy=strategy, **diff_summary(records))
    return records


def _coerce_selection(index: int, value: Selection | str) -> Selection:
    if isinstance(value, Selection):
        return value
    try:
        return SELECTION_ALIASES[str(value).lower()]
    except KeyError as e:
        raise ValidationError(
            message=f"Invalid selection for record {index}: {value!r}",
            hint="Use 'original' or 'revised'",
            details={"index": index, "selection": value},
        ) from e


def merge(
    records: Sequence[DiffRecord],
    overrides: Mapping[int, Selection | str] | None = None,
) -> str:
    """Build the merged text from diff records and the caller's choices.

    Each record contributes the line on its selected side. A side that does
    not exist for the record (the revised side of a deleted line, the
    original side of an added line) contributes nothing. Overrides keyed by
    indices that no record has are ignored.

    Args:
        records: Records from :func:`diff`
        overrides: Selection per record index, taking precedence over the
            record's default ``selected``

    Returns:
        The merged text

    Raises:
        ValidationError: If an override is not a known selection
    """
    choices = {
        index: _coerce_selection(index, value)
        for index, value in (overrides or {}).items()
    }
    lines: list[str] = []
    for record in records:
        selected = choices.get(record.index, record.selected)
        if selected == Selection.REVISED:
            if record.type != DiffType.DELETED:
                lines.append(record.revised)
        elif record.type != DiffType.ADDED:
            lines.append(record.original)
    return "\n".join(lines)


def diff_summary(records: Sequence[DiffRecord]) -> dict[str, int]:
    """Count records per diff type, including zero counts."""
    counts = Counter(record.type for record in records)
    return {kind.value: counts.get(kind, 0) for kind in DiffType}


class LineDiffEngine:
    """Object wrapper around :func:`diff` and :func:`merge`."""

    def __init__(self, strategy: str = POSITIONAL) -> None:
        if strategy not in STRATEGIES:
            raise ValidationError(
                message=f"Unknown diff strategy: {strategy}",
                hint=f"Use one of: {', '.join(STRATEGIES)}",
                details={"strategy": strategy},
            )
        self.strategy = strategy

    def diff(self, original: str, revised: str) -> list[DiffRecord]:
        return diff(original, revised, self.strategy)

    def merge(
        self,
        records: Sequence[DiffRecord],
        overrides: Mapping[int, Selection | str] | None = None,
    ) -> str:
        return merge(records, overrides)
