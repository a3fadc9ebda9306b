"""Print the Taiwan structured extraction of project scenes."""

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from scriptport.cli.formatters import JsonFormatter
from scriptport.cli.utils import CLIHandler
from scriptport.config import get_settings
from scriptport.exceptions import ScriptPortError, ValidationError
from scriptport.export import TaiwanContentExtractor
from scriptport.project import load_project

console = Console()


def extract_command(
    project: Annotated[Path, typer.Argument(help="Project bundle (JSON)")],
    scene: Annotated[
        int | None,
        typer.Option("--scene", "-n", help="Only extract this scene number"),
    ] = None,
) -> None:
    """Extract description, characters and action blocks as JSON."""
    handler = CLIHandler(console)
    try:
        bundle = load_project(project)
        scenes = bundle.scenes
        if scene is not None:
            scenes = [item for item in scenes if item.number == scene]
            if not scenes:
                raise ValidationError(
                    message=f"Scene {scene} not found in {project}",
                    details={"available": [item.number for item in bundle.scenes]},
                )

        extractor = TaiwanContentExtractor(get_settings())
        payload = [
            {
                "number": item.number,
                "location": item.location,
                **extractor.extract_structured(item.content).to_dict(),
            }
            for item in scenes
        ]
        print(JsonFormatter().format(payload))

    except (ScriptPortError, OSError) as e:
        handler.handle_error(e, json_output=True)
