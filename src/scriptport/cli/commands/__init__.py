"""ScriptPort CLI commands."""

from __future__ import annotations

from scriptport.cli.commands.diff import diff_command, merge_command
from scriptport.cli.commands.export import export_command
from scriptport.cli.commands.extract import extract_command
from scriptport.cli.commands.group import group_command
from scriptport.cli.commands.parse import parse_command

__all__ = [
    "diff_command",
    "export_command",
    "extract_command",
    "group_command",
    "merge_command",
    "parse_command",
]
