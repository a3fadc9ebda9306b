"""Group project scenes by location."""

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from scriptport.cli.formatters import JsonFormatter
from scriptport.cli.utils import CLIHandler, write_or_echo
from scriptport.exceptions import ScriptPortError
from scriptport.export import (
    format_location_report,
    group_scenes_by_location,
    location_report_to_dict,
)
from scriptport.project import load_project

console = Console()


def group_command(
    project: Annotated[Path, typer.Argument(help="Project bundle (JSON)")],
    term: Annotated[str, typer.Argument(help="Location search term")],
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write the report to this file"),
    ] = None,
    json_output: Annotated[
        bool, typer.Option("--json", help="Output the groups as JSON")
    ] = False,
) -> None:
    """Collect the scenes whose location contains TERM into a report."""
    handler = CLIHandler(console)
    try:
        bundle = load_project(project)
        groups = group_scenes_by_location(bundle.scenes, term)

        if json_output:
            payload = JsonFormatter().format(location_report_to_dict(groups, term))
            write_or_echo(payload + "\n", output)
            return

        if not groups:
            console.print(
                f"No scenes found at a location matching '{term}'.",
                style="yellow",
                markup=False,
            )
            return
        write_or_echo(format_location_report(groups, term), output)

    except (ScriptPortError, OSError) as e:
        handler.handle_error(e, json_output)
