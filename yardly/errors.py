"""Error taxonomy surfaced to API callers."""

from __future__ import annotations


class YardlyError(Exception):
    """Base error rendered as ``{"error": message}`` with ``status_code``."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(YardlyError):
    """Missing or malformed input."""

    status_code = 400


class InvalidDuration(ValidationError):
    """Booking span does not cover at least one hour."""


class NotFound(YardlyError):
    status_code = 404


class Unauthenticated(YardlyError):
    status_code = 401


class UpstreamFailure(YardlyError):
    """Data store, payment, calendar or mapping call failed."""

    status_code = 500
