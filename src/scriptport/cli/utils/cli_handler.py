"""Unified CLI handler for standardized error handling and output."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import typer
from rich.console import Console

from scriptport.cli.formatters.json_formatter import JsonFormatter
from scriptport.config import get_logger
from scriptport.exceptions import ScriptPortError, ScriptPortFileNotFoundError

logger = get_logger(__name__)


class CLIHandler:
    """Unified handler for CLI commands."""

    def __init__(self, console: Console | None = None) -> None:
        """Initialize CLI handler.

        Args:
            console: Rich console for output
        """
        self.console = console or Console()
        self.json_formatter = JsonFormatter()

    def handle_error(
        self, error: Exception, json_output: bool = False, exit_code: int = 1
    ) -> None:
        """Display an error consistently and exit.

        Args:
            error: Exception to handle
            json_output: Whether to output JSON
            exit_code: Exit code to use

        Raises:
            typer.Exit: Always
        """
        logger.error(
            "Command failed", error=str(error), error_type=type(error).__name__
        )

        if json_output:
            print(self.json_formatter.format_error_response(error, exit_code))
        elif isinstance(error, ScriptPortError):
            self.console.print(
                error.format_error(), style="red", markup=False, soft_wrap=True
            )
        else:
            self.console.print(
                f"Error: {error}", style="red", markup=False, soft_wrap=True
            )

        raise typer.Exit(exit_code)

    def handle_success(
        self, message: str, data: Any = None, json_output: bool = False
    ) -> None:
        """Handle success responses consistently.

        Args:
            message: Success message
            data: Optional data to include
            json_output: Whether to output JSON
        """
        if json_output:
            print(self.json_formatter.format_success(message, data))
        else:
            self.console.print(message, style="green", markup=False, soft_wrap=True)


def read_text_file(path: Path) -> str:
    """Read a UTF-8 text file given on the command line.

    Raises:
        ScriptPortFileNotFoundError: If the file does not exist
    """
    if not path.is_file():
        raise ScriptPortFileNotFoundError(
            message=f"File not found: {path}",
            hint="Check the path and try again",
            details={"path": str(path)},
        )
    return path.read_text(encoding="utf-8")


def write_or_echo(text: str, output: Path | None) -> None:
    """Write text to ``output`` or print it to stdout."""
    if output is None:
        typer.echo(text, nl=not text.endswith("\n"))
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text, encoding="utf-8")
