"""Custom exception hierarchy for ScriptPort with helpful error messages."""

from __future__ import annotations

from typing import Any


class ScriptPortError(Exception):
    """Base exception with helpful formatting for all ScriptPort errors.

    Provides structured error messages with hints and details to help users
    understand and fix problems.
    """

    def __init__(
        self,
        message: str,
        hint: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize exception with structured error information.

        Args:
            message: Primary error message describing what went wrong
            hint: Optional hint suggesting how to fix the problem
            details: Optional dictionary with additional debugging information
        """
        self.message = message
        self.hint = hint
        self.details = details
        super().__init__(self.format_error())

    def format_error(self) -> str:
        """Format the error message with hint and details.

        Returns:
            Formatted error string with all available information
        """
        output = f"Error: {self.message}"
        if self.hint:
            output += f"\nHint: {self.hint}"
        if self.details:
            details_str = "\n".join(
                f"  {key}: {value}" for key, value in self.details.items()
            )
            output += f"\nDetails:\n{details_str}"
        return output


class ConfigurationError(ScriptPortError):
    """Configuration errors including invalid settings and missing config files."""

    pass


class ValidationError(ScriptPortError):
    """Input validation errors with details about what was expected."""

    pass


class ProjectFormatError(ScriptPortError):
    """Project bundle errors including malformed JSON and wrong structure."""

    pass


class ScriptPortFileNotFoundError(ScriptPortError):
    """File not found errors with helpful path information."""

    pass


def check_config_keys(config: dict[str, Any]) -> None:
    """Check for common configuration mistakes.

    Args:
        config: Configuration dictionary to validate

    Raises:
        ConfigurationError: With hints about correct configuration keys
    """
    wrong_keys = {
        "keywords": "outdoor_keywords",
        "lookahead": "cue_lookahead",
        "sentinels": "sentinel_patterns",
    }

    for wrong, correct in wrong_keys.items():
        if wrong in config:
            raise ConfigurationError(
                message=f"Invalid configuration key '{wrong}'",
                hint=f"Use '{correct}' instead of '{wrong}'",
                details={
                    "found_keys": list(config.keys()),
                    "invalid_key": wrong,
                    "correct_key": correct,
                },
            )


def require_text(value: Any, field_name: str) -> str:
    """Ensure a value handed across the engine boundary is a string.

    Args:
        value: Value to check
        field_name: Name used in the error message

    Returns:
        The value unchanged

    Raises:
        ValidationError: If the value is not a string
    """
    if not isinstance(value, str):
        raise ValidationError(
            message=f"{field_name} must be a string",
            hint="Read the file contents before passing them in",
            details={"field": field_name, "received_type": type(value).__name__},
        )
    return value
