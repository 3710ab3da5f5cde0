"""Exceptions raised by :mod:`fx_cbr`."""

from __future__ import annotations


class CbrError(Exception):
    """Base class for every failure surfaced by the client."""


class ConfigurationError(CbrError, ValueError):
    """Raised when a client option receives an invalid value."""


class TransportError(CbrError):
    """Raised when the HTTP exchange itself fails."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class CancelledError(TransportError):
    """Raised when the caller cancelled the fetch context."""


class DeadlineExceededError(CancelledError):
    """Raised when the fetch context deadline elapsed before completion."""


class DecodeError(CbrError, ValueError):
    """Raised for malformed XML, unknown charsets and failed field coercions."""


__all__ = [
    "CbrError",
    "ConfigurationError",
    "TransportError",
    "CancelledError",
    "DeadlineExceededError",
    "DecodeError",
]
