"""Client for the Wasabi wallet JSON-RPC interface."""

from .client import WasabiAPI, basic_auth_header, build_envelope, make_api
from .config import WasabiConfig, load_config, make_config
from .errors import (
    ConfigError,
    ErrorKind,
    RemoteError,
    TransportError,
    UnauthorizedError,
    WasabiRPCError,
)
from .logging import console_logger, setup_logging
from .transport import HTTPResponse, HTTPTransport

__all__ = [
    "ConfigError",
    "ErrorKind",
    "HTTPResponse",
    "HTTPTransport",
    "RemoteError",
    "TransportError",
    "UnauthorizedError",
    "WasabiAPI",
    "WasabiConfig",
    "WasabiRPCError",
    "basic_auth_header",
    "build_envelope",
    "console_logger",
    "load_config",
    "make_api",
    "make_config",
    "setup_logging",
]
