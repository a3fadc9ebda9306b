"""ScriptPort: screenplay text interchange.

Parses plain screenplay text into scenes of canonical markup, renders those
scenes back out in two screenplay dialects and the Taiwan layout, and merges
a text with its revision line by line.
"""

from scriptport.diff import LineDiffEngine, diff, merge
from scriptport.exceptions import ScriptPortError
from scriptport.export import (
    DialectExporter,
    TaiwanContentExtractor,
    TaiwanFormatter,
    extract_structured,
)
from scriptport.models import (
    DEFAULT_BEAT_SHEET,
    BeatDef,
    Dialect,
    DiffRecord,
    DiffType,
    Scene,
    ScriptInfo,
    Selection,
)
from scriptport.parser import ScreenplayParser, parse

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_BEAT_SHEET",
    "BeatDef",
    "Dialect",
    "DialectExporter",
    "DiffRecord",
    "DiffType",
    "LineDiffEngine",
    "Scene",
    "ScreenplayParser",
    "ScriptInfo",
    "ScriptPortError",
    "Selection",
    "TaiwanContentExtractor",
    "TaiwanFormatter",
    "__version__",
    "diff",
    "extract_structured",
    "merge",
    "parse",
]
