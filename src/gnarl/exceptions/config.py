"""Configuration exceptions: invalid values and conflicting options."""

from typing import Any

from .base import GnarlError


class ConfigurationError(GnarlError):
    """Base class for configuration-related errors."""

    pass


class InvalidConfigError(ConfigurationError):
    """Raised when configuration values are invalid."""

    def __init__(self, key: str, value: Any, reason: str):
        super().__init__(
            f"Invalid configuration for {key}: {value}",
            details={"key": key, "value": str(value), "reason": reason},
        )
        self.key = key
        self.value = value
        self.reason = reason


class ConflictingOptionsError(ConfigurationError):
    """Raised when options that exclude each other are combined."""

    def __init__(self, first: str, second: str):
        super().__init__(
            f"Options {first} and {second} cannot be used together",
            details={"first": first, "second": second},
        )
        self.first = first
        self.second = second
