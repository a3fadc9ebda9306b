"""Rich tables for scenes and diff records."""

from __future__ import annotations

from collections.abc import Sequence

from rich.table import Table
from rich.text import Text

from scriptport.models import DiffRecord, DiffType, Scene

_DIFF_STYLES = {
    DiffType.UNCHANGED: "dim",
    DiffType.MODIFIED: "yellow",
    DiffType.DELETED: "red",
    DiffType.ADDED: "green",
}


def _preview(content: str, width: int = 40) -> str:
    first = next((line for line in content.splitlines() if line.strip()), "")
    return first if len(first) <= width else first[: width - 1] + "…"


def scenes_table(scenes: Sequence[Scene], title: str = "Scenes") -> Table:
    """Build a table with one row per scene."""
    table = Table(title=title, show_lines=False)
    table.add_column("#", style="cyan", justify="right")
    table.add_column("Location", style="green")
    table.add_column("Time", style="yellow")
    table.add_column("Lines", justify="right")
    table.add_column("Opening", no_wrap=False)

    for scene in scenes:
        lines = [line for line in scene.content.splitlines() if line.strip()]
        table.add_row(
            str(scene.number),
            Text(scene.location or "-"),
            Text(scene.day_night or "-"),
            str(len(lines)),
            Text(_preview(scene.content)),
        )
    return table


def diff_table(records: Sequence[DiffRecord], show_unchanged: bool = True) -> Table:
    """Build a table with one row per diff record."""
    table = Table(title="Line Diff", show_lines=False)
    table.add_column("Index", justify="right", style="cyan")
    table.add_column("Type")
    table.add_column("Original", no_wrap=False)
    table.add_column("Revised", no_wrap=False)

    for record in records:
        if not show_unchanged and record.type == DiffType.UNCHANGED:
            continue
        style = _DIFF_STYLES[record.type]
        table.add_row(
            str(record.index),
            Text(record.type.value, style=style),
            Text(record.original),
            Text(record.revised),
        )
    return table
