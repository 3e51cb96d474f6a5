from __future__ import annotations

from typing import Any, Dict, Optional


class XIQError(Exception):
    # Base error for everything raised by the inventory pipeline.
    # `details` is free-form context (device id, url, status) kept for logs and summaries.

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class AuthError(XIQError):
    """Bad or expired credentials. Fatal for the run."""


class ApiError(XIQError):
    """Transport failure or unexpected response from the XIQ API."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.status_code = status_code
        details = dict(details or {})
        if status_code is not None:
            details["status"] = status_code
        super().__init__(message, details)


class FormatError(XIQError):
    """A MAC address or CLI line could not be normalized."""


class PersistenceError(XIQError):
    """The device store failed to write or read."""


class ConfigError(XIQError):
    """Required settings are missing or invalid."""
