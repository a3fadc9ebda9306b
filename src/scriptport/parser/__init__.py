"""Screenplay text parser and canonical markup grammar."""

from __future__ import annotations

from .markup import MarkupKind, MarkupLine, classify_line, iter_markup
from .screenplay_parser import ScreenplayParser, parse

__all__ = [
    "MarkupKind",
    "MarkupLine",
    "ScreenplayParser",
    "classify_line",
    "iter_markup",
    "parse",
]
