"""
wiserheat_lib/errors.py

Typed errors for the Wiser client.

The refresh and command paths never raise these for transport problems; they
report a TransportOutcome instead. Exceptions are reserved for callers that need
a direct answer (config validation) and for body parsing.
"""

from __future__ import annotations


class WiserError(Exception):
    """Base exception for the Wiser client."""


class WiserConnectionError(WiserError):
    """The heat hub could not be reached or answered with an error status."""

    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class WiserTimeoutError(WiserConnectionError):
    """The heat hub did not answer before the request deadline."""


class WiserAuthError(WiserError):
    """The heat hub rejected the shared secret (HTTP 401)."""


class WiserParseError(WiserError):
    """A response body could not be turned into domain records."""
