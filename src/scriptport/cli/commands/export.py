"""Render a project bundle as dialect screenplay text."""

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from scriptport.cli.utils import CLIHandler, write_or_echo
from scriptport.config import get_logger, get_settings
from scriptport.exceptions import ScriptPortError
from scriptport.export import DialectExporter, TaiwanFormatter
from scriptport.project import load_project

logger = get_logger(__name__)
console = Console()

TAIWAN = "taiwan"


def export_command(
    project: Annotated[Path, typer.Argument(help="Project bundle (JSON)")],
    dialect: Annotated[
        str,
        typer.Option("--dialect", "-d", help="Output format: A, B or taiwan"),
    ] = "A",
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write to this file instead of stdout"),
    ] = None,
) -> None:
    """Export a project bundle to screenplay text.

    Dialect A is the Hollywood spec layout, dialect B the chapter-style
    layout and taiwan the regional layout with scene descriptions and
    character introductions.
    """
    handler = CLIHandler(console)
    try:
        bundle = load_project(project)
        settings = get_settings()
        if dialect.strip().lower() == TAIWAN:
            text = TaiwanFormatter(settings).render(
                bundle.scenes, info=bundle.script_data
            )
        else:
            text = DialectExporter(settings).export(
                bundle.scenes, dialect=dialect.strip().upper(), info=bundle.script_data
            )
        write_or_echo(text, output)
        if output:
            logger.info("Exported project", dialect=dialect, output=str(output))

    except (ScriptPortError, OSError) as e:
        handler.handle_error(e)
