"""Main CLI entry point."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Any

import typer
from rich.console import Console

from scriptport import __version__
from scriptport.cli.commands import (
    diff_command,
    export_command,
    extract_command,
    group_command,
    merge_command,
    parse_command,
)
from scriptport.cli.formatters import JsonFormatter
from scriptport.cli.utils import CLIHandler
from scriptport.config import (
    configure_logging,
    get_logger,
    get_settings_for_cli,
    set_settings,
)
from scriptport.exceptions import ScriptPortError

logger = get_logger(__name__)
console = Console()

app = typer.Typer(
    name="scriptport",
    help="Screenplay text interchange: parse, export, extract and merge",
    pretty_exceptions_enable=False,
    add_completion=False,
    rich_markup_mode="rich",
)

app.command(name="parse")(parse_command)
app.command(name="export")(export_command)
app.command(name="diff")(diff_command)
app.command(name="merge")(merge_command)
app.command(name="extract")(extract_command)
app.command(name="group")(group_command)


@app.command()
def version(
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Show ScriptPort version."""
    version_info = {
        "name": "ScriptPort",
        "version": __version__,
        "description": "Screenplay text interchange engine",
    }

    if json_output:
        print(JsonFormatter().format(version_info))
    else:
        console.print(f"ScriptPort v{version_info['version']}")


@app.callback()
def main_callback(
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to configuration file (YAML, TOML, or JSON)",
            envvar="SCRIPTPORT_CONFIG",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose logging (INFO level)"),
    ] = False,
    debug: Annotated[
        bool,
        typer.Option("--debug", help="Enable debug logging", envvar="SCRIPTPORT_DEBUG"),
    ] = False,
) -> None:
    """Configure global options."""
    overrides: dict[str, Any] = {}
    if debug:
        overrides = {"debug": True, "log_level": "DEBUG"}
    elif verbose:
        overrides = {"log_level": "INFO"}

    if not (config or overrides):
        return

    try:
        settings = get_settings_for_cli(config_file=config, cli_overrides=overrides)
    except (ScriptPortError, OSError, ValueError) as e:
        CLIHandler(console).handle_error(e)
        return

    set_settings(settings)
    configure_logging(settings)
    if config:
        logger.debug("Loaded configuration", config_file=str(config))
    if debug:
        logger.debug("Debug mode enabled")
    elif verbose:
        logger.info("Verbose mode enabled")


def main() -> None:
    """Main CLI entry point."""
    app()


if __name__ == "__main__":
    main()
