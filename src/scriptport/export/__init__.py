"""Exporters that render scenes into screenplay dialect text."""

from __future__ import annotations

from .beats import BeatGroup, group_scenes_by_beat, narrative_order
from .dialects import DialectProfile, SceneTypeClassifier, get_profile
from .exporter import DialectExporter, export_screenplay
from .locations import (
    LocationGroup,
    format_location_report,
    group_scenes_by_location,
    location_report_to_dict,
)
from .taiwan import (
    StructuredContent,
    TaiwanContentExtractor,
    TaiwanFormatter,
    extract_structured,
)

__all__ = [
    "BeatGroup",
    "DialectExporter",
    "DialectProfile",
    "LocationGroup",
    "SceneTypeClassifier",
    "StructuredContent",
    "TaiwanContentExtractor",
    "TaiwanFormatter",
    "export_screenplay",
    "extract_structured",
    "format_location_report",
    "get_profile",
    "group_scenes_by_beat",
    "group_scenes_by_location",
    "location_report_to_dict",
    "narrative_order",
]
