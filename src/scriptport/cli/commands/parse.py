"""Parse screenplay text into a project bundle."""

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from scriptport.cli.formatters import JsonFormatter, scenes_table
from scriptport.cli.utils import CLIHandler, read_text_file
from scriptport.config import get_logger, get_settings
from scriptport.exceptions import ScriptPortError
from scriptport.parser import ScreenplayParser
from scriptport.project import ProjectBundle, bundle_to_dict, dump_project

logger = get_logger(__name__)
console = Console()


def parse_command(
    input_file: Annotated[
        Path, typer.Argument(help="Screenplay text file (INT./EXT. convention)")
    ],
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write the project bundle to this file"),
    ] = None,
    title: Annotated[
        str, typer.Option("--title", "-t", help="Script title for the bundle")
    ] = "",
    author: Annotated[str, typer.Option("--author", help="Script author")] = "",
    start_number: Annotated[
        int, typer.Option("--start-number", min=1, help="Number of the first scene")
    ] = 1,
    json_output: Annotated[
        bool, typer.Option("--json", help="Print the bundle as JSON")
    ] = False,
) -> None:
    """Parse a screenplay into scenes of canonical markup.

    Without --output or --json the scenes are listed as a table.
    """
    handler = CLIHandler(console)
    try:
        text = read_text_file(input_file)
        scenes = ScreenplayParser(get_settings()).parse(text, start_number)
        bundle = ProjectBundle.from_scenes(
            scenes, title=title or input_file.stem, author=author
        )

        if output:
            dump_project(bundle, output)
        if json_output:
            print(JsonFormatter().format(bundle_to_dict(bundle)))
            return

        if output:
            handler.handle_success(f"Wrote {len(scenes)} scenes to {output}")
        elif scenes:
            console.print(scenes_table(scenes, title=bundle.script_data.title))
        else:
            console.print("[yellow]No scenes found.[/yellow]")

    except (ScriptPortError, OSError) as e:
        handler.handle_error(e, json_output)
