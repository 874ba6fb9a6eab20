"""Custom exceptions for the ingredient engine."""
from typing import Any


class ConfigurationError(Exception):
    """Raised when engine configuration cannot be loaded or is invalid."""

    def __init__(self, field: str, value: Any, reason: str):
        """Initialize exception with the offending setting.

        Args:
            field: Which setting failed validation
            value: The invalid value
            reason: Why it failed
        """
        self.field = field
        self.value = value
        self.reason = reason
        message = f"Invalid configuration for '{field}': {reason}"
        if value is not None:
            message += f" (value: {value})"
        super().__init__(message)
