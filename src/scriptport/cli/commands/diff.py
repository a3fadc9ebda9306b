"""Compare and merge a text with its revision."""

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from scriptport.cli.formatters import JsonFormatter, diff_table
from scriptport.cli.utils import CLIHandler, read_text_file, write_or_echo
from scriptport.config import get_logger
from scriptport.diff import POSITIONAL, diff, diff_summary, merge
from scriptport.exceptions import ScriptPortError
from scriptport.models import Selection

logger = get_logger(__name__)
console = Console()

OriginalArg = Annotated[Path, typer.Argument(help="Original text file")]
RevisedArg = Annotated[Path, typer.Argument(help="Revised text file")]
StrategyOption = Annotated[
    str,
    typer.Option("--strategy", "-s", help="Line pairing: positional or aligned"),
]


def diff_command(
    original: OriginalArg,
    revised: RevisedArg,
    strategy: StrategyOption = POSITIONAL,
    changes_only: Annotated[
        bool, typer.Option("--changes-only", help="Hide unchanged lines")
    ] = False,
    json_output: Annotated[
        bool, typer.Option("--json", help="Output records as JSON")
    ] = False,
) -> None:
    """Show a line-by-line diff between two texts."""
    handler = CLIHandler(console)
    try:
        records = diff(read_text_file(original), read_text_file(revised), strategy)
        summary = diff_summary(records)

        if json_output:
            print(
                JsonFormatter().format(
                    {
                        "summary": summary,
                        "records": [record.to_dict() for record in records],
                    }
                )
            )
            return

        console.print(diff_table(records, show_unchanged=not changes_only))
        console.print(
            ", ".join(f"{count} {kind}" for kind, count in summary.items()),
            style="bold",
            markup=False,
        )

    except (ScriptPortError, OSError) as e:
        handler.handle_error(e, json_output)


def merge_command(
    original: OriginalArg,
    revised: RevisedArg,
    take_revised: Annotated[
        list[int] | None,
        typer.Option(
            "--take-revised",
            "-r",
            help="Record index whose revised line is kept (repeatable)",
        ),
    ] = None,
    all_revised: Annotated[
        bool, typer.Option("--all-revised", help="Keep every revised line")
    ] = False,
    strategy: StrategyOption = POSITIONAL,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write to this file instead of stdout"),
    ] = None,
) -> None:
    """Merge two texts, keeping the original unless told otherwise.

    Added lines are kept by default. Use --take-revised with the indices
    shown by 'scriptport diff' to accept individual revisions.
    """
    handler = CLIHandler(console)
    try:
        records = diff(read_text_file(original), read_text_file(revised), strategy)
        if all_revised:
            overrides = {record.index: Selection.REVISED for record in records}
        else:
            overrides = {index: Selection.REVISED for index in take_revised or []}

        merged = merge(records, overrides)
        logger.debug("Merged texts", overrides=len(overrides), records=len(records))
        write_or_echo(merged if merged.endswith("\n") else merged + "\n", output)

    except (ScriptPortError, OSError) as e:
        handler.handle_error(e)
