"""Exceptions raised by the Gong MCP server."""


class GongMCPError(Exception):
    """Base exception for Gong MCP errors."""


class ConfigurationError(GongMCPError):
    """Raised when required configuration is missing."""


class GongAPIError(GongMCPError):
    """Raised when a request to the Gong API fails."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class UserNotFoundError(GongMCPError):
    """Raised when no Gong user matches the configured full name."""
