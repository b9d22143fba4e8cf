"""
Logging helpers for the Wasabi RPC tools.
"""

from __future__ import annotations

import json
import logging
import sys
import time
from collections.abc import Callable
from typing import IO, Any


class UTCFormatter(logging.Formatter):
    """Formatter that renders timestamps in UTC ISO-8601."""

    converter = time.gmtime

    def __init__(self) -> None:
        super().__init__(
            fmt="%(asctime)sZ %(levelname)s %(name)s %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )


def setup_logging(*, level: int = logging.INFO, stream: IO[str] | None = None) -> logging.Logger:
    """Configure the ``wasapi`` logger with a single stream sink."""

    root = logging.getLogger("wasapi")
    root.setLevel(level)
    root.handlers.clear()

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(UTCFormatter())
    root.addHandler(handler)

    root.debug("Logging configured at level %s", logging.getLevelName(level))
    return root


def render(message: Any) -> str:
    if isinstance(message, str):
        return message
    return json.dumps(message, indent=2, default=str)


def console_logger(logger: logging.Logger | None = None) -> Callable[[Any], None]:
    """Return a sink that timestamps and serializes whatever it is given."""

    target = logger or logging.getLogger("wasapi.console")

    def _sink(message: Any) -> None:
        target.info("%s", render(message))

    return _sink
