"""Output formatters for CLI commands."""

from scriptport.cli.formatters.json_formatter import JsonFormatter
from scriptport.cli.formatters.table_formatter import diff_table, scenes_table

__all__ = ["JsonFormatter", "diff_table", "scenes_table"]
