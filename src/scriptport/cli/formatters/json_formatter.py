"""JSON output formatter for CLI."""

from __future__ import annotations

import json
from typing import Any


class JsonFormatter:
    """Generic JSON formatter for CLI output.

    Non-ASCII text is written as-is so Chinese scene content stays readable.
    """

    def format(self, data: Any) -> str:
        """Format data as JSON.

        Args:
            data: Data to format

        Returns:
            JSON string
        """
        if hasattr(data, "to_dict"):
            data = data.to_dict()
        elif isinstance(data, list | tuple):
            data = [
                item.to_dict() if hasattr(item, "to_dict") else item for item in data
            ]
        elif not isinstance(data, dict):
            data = {"value": data}
        return json.dumps(data, default=str, ensure_ascii=False, indent=2)

    def format_success(self, message: str, data: Any = None) -> str:
        """Format a success response."""
        response: dict[str, Any] = {"success": True, "message": message}
        if data is not None:
            response["data"] = data
        return json.dumps(response, default=str, ensure_ascii=False, indent=2)

    def format_error_response(self, error: str | Exception, code: int = 1) -> str:
        """Format an error response.

        Args:
            error: Error message or exception
            code: Exit code reported to the caller

        Returns:
            JSON string
        """
        response: dict[str, Any] = {"success": False, "code": code}
        message = getattr(error, "message", None)
        if message is not None:
            response["error"] = message
            if getattr(error, "hint", None):
                response["hint"] = error.hint  # type: ignore[union-attr]
        else:
            response["error"] = str(error)
        return json.dumps(response, default=str, ensure_ascii=False, indent=2)
