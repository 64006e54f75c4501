"""Exceptions raised by the matching engine."""


class ConfigurationError(ValueError):
    """Raised when an index or resolver is built with invalid settings."""
