"""Custom exceptions for the remote ticket gateway."""

from __future__ import annotations


class GatewayError(Exception):
    """Base exception for gateway errors."""


class TransportError(GatewayError):
    """A call to the helpdesk failed.

    Attributes:
        status_code: HTTP status of the failed response, or None when no
            response was received.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code

    def __str__(self) -> str:
        base = super().__str__()
        if self.status_code is None:
            return base
        return f"{base} (HTTP {self.status_code})"


class DecodeError(GatewayError):
    """A helpdesk response could not be decoded."""
