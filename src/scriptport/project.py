"""Project bundle import and export.

A bundle is the JSON document exchanged with the project manager::

    {"scriptData": {...}, "outline": {...}, "scenes": [...],
     "exportDate": "...", "version": "1.0"}
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from scriptport.config import get_logger
from scriptport.exceptions import ProjectFormatError, ScriptPortFileNotFoundError
from scriptport.models import DEFAULT_BEAT_SHEET, Scene, ScriptInfo

logger = get_logger(__name__)

BUNDLE_VERSION = "1.0"
_SCRIPT_INFO_KEYS = {"title", "coreIdea", "author", "version"}


def empty_outline() -> dict[str, str]:
    """Return an outline with an empty entry for every beat."""
    return {beat.id: "" for beat in DEFAULT_BEAT_SHEET}


@dataclass
class ProjectBundle:
    """A screenplay project: title metadata, beat outline and scenes."""

    script_data: ScriptInfo = field(default_factory=ScriptInfo)
    outline: dict[str, str] = field(default_factory=empty_outline)
    scenes: list[Scene] = field(default_factory=list)
    export_date: str = ""
    version: str = BUNDLE_VERSION

    @classmethod
    def from_scenes(
        cls,
        scenes: list[Scene],
        title: str = "",
        author: str = "",
        core_idea: str = "",
    ) -> ProjectBundle:
        """Wrap freshly parsed scenes in a bundle with an empty outline."""
        return cls(
            script_data=ScriptInfo(title=title, core_idea=core_idea, author=author),
            scenes=list(scenes),
        )


def bundle_from_dict(data: Any) -> ProjectBundle:
    """Build a bundle from its decoded JSON document.

    Raises:
        ProjectFormatError: If the document does not have the bundle shape
    """
    if not isinstance(data, dict):
        raise ProjectFormatError(
            message="Project bundle must be a JSON object",
            details={"received_type": type(data).__name__},
        )

    raw_scenes = data.get("scenes") or []
    if not isinstance(raw_scenes, list) or not all(
        isinstance(item, dict) for item in raw_scenes
    ):
        raise ProjectFormatError(
            message="Project bundle 'scenes' must be a list of objects",
            hint="Each scene needs at least 'number' and 'content'",
        )

    script_data = data.get("scriptData") or {}
    outline = data.get("outline") or {}
    if not isinstance(script_data, dict) or not isinstance(outline, dict):
        raise ProjectFormatError(
            message="Project bundle 'scriptData' and 'outline' must be objects",
        )

    try:
        scenes = [Scene.from_dict(item) for item in raw_scenes]
    except (TypeError, ValueError) as e:
        raise ProjectFormatError(
            message="Project bundle contains an invalid scene",
            hint="Scene 'number' must be an integer",
            details={"error": str(e)},
        ) from e

    info = ScriptInfo(
        title=script_data.get("title") or "",
        core_idea=script_data.get("coreIdea") or "",
        author=script_data.get("author") or "",
        version=str(script_data.get("version") or BUNDLE_VERSION),
        extra={k: v for k, v in script_data.items() if k not in _SCRIPT_INFO_KEYS},
    )
    return ProjectBundle(
        script_data=info,
        outline={**empty_outline(), **{str(k): str(v) for k, v in outline.items()}},
        scenes=scenes,
        export_date=str(data.get("exportDate") or ""),
        version=str(data.get("version") or BUNDLE_VERSION),
    )


def bundle_to_dict(bundle: ProjectBundle) -> dict[str, Any]:
    """Convert a bundle to its JSON document shape."""
    info = bundle.script_data
    return {
        "scriptData": {
            **info.extra,
            "title": info.title,
            "coreIdea": info.core_idea,
            "author": info.author,
            "version": info.version,
        },
        "outline": dict(bundle.outline),
        "scenes": [scene.to_dict() for scene in bundle.scenes],
        "exportDate": bundle.export_date or datetime.now(UTC).isoformat(),
        "version": bundle.version,
    }


def load_project(path: Path) -> ProjectBundle:
    """Read a project bundle from a JSON file.

    Raises:
        ScriptPortFileNotFoundError: If the file does not exist
        ProjectFormatError: If the file is not a valid bundle
    """
    if not path.exists():
        raise ScriptPortFileNotFoundError(
            message=f"Project file not found: {path}",
            hint="Create one with 'scriptport parse SCRIPT --output project.json'",
            details={"path": str(path)},
        )
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ProjectFormatError(
            message=f"Project file is not valid JSON: {path}",
            details={"line": e.lineno, "column": e.colno, "error": e.msg},
        ) from e

    bundle = bundle_from_dict(data)
    logger.debug("Loaded project", path=str(path), scenes=len(bundle.scenes))
    return bundle


def dump_project(bundle: ProjectBundle, path: Path) -> None:
    """Write a project bundle as pretty-printed UTF-8 JSON."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(bundle_to_dict(bundle), ensure_ascii=False, indent=2) + "\n",
        encoding="utf-8",
    )
    logger.info("Wrote project", path=str(path), scenes=len(bundle.scenes))
