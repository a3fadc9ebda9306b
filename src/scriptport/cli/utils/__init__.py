"""CLI utility helpers."""

from scriptport.cli.utils.cli_handler import CLIHandler, read_text_file, write_or_echo

__all__ = ["CLIHandler", "read_text_file", "write_or_echo"]
