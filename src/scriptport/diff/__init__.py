"""Line diff and merge between human-written and revised text."""

from __future__ import annotations

from .engine import ALIGNED, POSITIONAL, LineDiffEngine, diff, diff_summary, merge

__all__ = [
    "ALIGNED",
    "POSITIONAL",
    "LineDiffEngine",
    "diff",
    "diff_summary",
    "merge",
]
