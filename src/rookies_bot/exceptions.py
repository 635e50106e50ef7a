"""Custom exceptions for rookies-bot."""

from __future__ import annotations


class RookiesBotError(Exception):
    """Base exception for all rookies-bot errors."""


class ConfigError(RookiesBotError):
    """Raised when a config file cannot be read or parsed."""


class SimGridError(RookiesBotError):
    """Base exception for SimGrid API errors."""


class SimGridConnectionError(SimGridError):
    """Raised when the client cannot connect to the SimGrid API."""


class SimGridTimeoutError(SimGridError):
    """Raised when a request to the SimGrid API times out."""


class SimGridAPIError(SimGridError):
    """Raised when the SimGrid API returns an error response (4xx/5xx)."""

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(f"HTTP {status_code}: {message}")


class SimGridValidationError(SimGridError):
    """Raised when SimGrid response data fails model validation."""


class UnknownDriverError(RookiesBotError):
    """Raised when a driver or car number cannot be matched to a registered driver."""


class ChatError(RookiesBotError):
    """Raised when a Discord operation fails."""


class BriefingError(RookiesBotError):
    """Raised when a briefing doc or penalty tracker cannot be generated."""
