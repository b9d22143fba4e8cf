"""
Error types raised by the Wasabi RPC client.
"""

from __future__ import annotations

import enum

UNAUTHORIZED_MESSAGE = "Unauthorized. Credentials needed."


class ErrorKind(str, enum.Enum):
    UNAUTHORIZED = "unauthorized"
    REMOTE = "remote"
    TRANSPORT = "transport"


class WasabiRPCError(Exception):
    """Base exception for RPC problems."""

    kind: ErrorKind


class UnauthorizedError(WasabiRPCError):
    """Raised when the daemon answers 401."""

    kind = ErrorKind.UNAUTHORIZED
    status = 401

    def __init__(self, message: str = UNAUTHORIZED_MESSAGE):
        super().__init__(message)
        self.message = message


class RemoteError(WasabiRPCError):
    """Raised for any other non-success HTTP status."""

    kind = ErrorKind.REMOTE

    def __init__(self, status: int, reason: str):
        super().__init__(f"RPC HTTP error {status}: {reason}")
        self.status = status
        self.reason = reason


class TransportError(WasabiRPCError):
    """Raised by the HTTP transport when the daemon cannot be reached."""

    kind = ErrorKind.TRANSPORT


class ConfigError(Exception):
    """Raised when configuration loading fails."""
