"""
Configuration helpers for the Wasabi RPC client.

``make_config`` fills in defaults for every connection, auth and logging
setting and spreads an extension map over the result last. ``load_config``
feeds it from a JSON file and environment variables prefixed with
``WASAPI_``.
"""

from __future__ import annotations

import json
import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, fields
from pathlib import Path
from types import MappingProxyType
from typing import Any

from .errors import ConfigError

DEFAULT_HOST = "http://127.0.0.1"
DEFAULT_PORT = 37128
ENV_PREFIX = "WASAPI_"


def _silent(_message: Any) -> None:
    return None


def _safe_sink(sink: Callable[[Any], None] | None) -> Callable[[Any], None]:
    return sink if sink else _silent


@dataclass(frozen=True, slots=True)
class WasabiConfig:
    jsonrpc: str = "2.0"
    request_id: str = "1"
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    username: str = ""
    password: str = ""
    verbose: bool = False
    logger: Callable[[Any], None] = _silent
    extra: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "logger", _safe_sink(self.logger))
        object.__setattr__(self, "extra", MappingProxyType(dict(self.extra)))

    @property
    def url(self) -> str:
        return f"{self.host}:{self.port}"

    def get(self, key: str, default: Any = None) -> Any:
        if key in FIELD_NAMES:
            return getattr(self, key)
        return self.extra.get(key, default)

    def to_dict(self) -> dict[str, Any]:
        data = {name: getattr(self, name) for name in FIELD_NAMES if name != "logger"}
        data.update(self.extra)
        return data


FIELD_NAMES = tuple(f.name for f in fields(WasabiConfig) if f.name != "extra")


def make_config(
    *,
    jsonrpc: str = "2.0",
    request_id: str = "1",
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
    username: str = "",
    password: str = "",
    verbose: bool = False,
    logger: Callable[[Any], None] | None = None,
    kwargs: Mapping[str, Any] | None = None,
) -> WasabiConfig:
    """Build a complete configuration.

    Keys in ``kwargs`` are applied after the named arguments, so a key that
    names a field wins over the argument of the same name. Other keys are
    kept in ``WasabiConfig.extra``.
    """

    values: dict[str, Any] = {
        "jsonrpc": jsonrpc,
        "request_id": request_id,
        "host": host,
        "port": port,
        "username": username,
        "password": password,
        "verbose": verbose,
        "logger": logger,
    }
    extra: dict[str, Any] = {}
    for key, value in (kwargs or {}).items():
        if key in FIELD_NAMES:
            values[key] = value
        else:
            extra[key] = value
    return WasabiConfig(**values, extra=extra)


def load_config_file(path: Path | str) -> dict[str, Any]:
    cfg_path = Path(path).expanduser()
    if not cfg_path.exists():
        raise ConfigError(f"Config file {cfg_path} not found")
    try:
        data = json.loads(cfg_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Config file {cfg_path} is not valid JSON") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {cfg_path} must contain a JSON object")
    return data


def load_config(
    path: Path | str | None = None,
    *,
    overrides: Mapping[str, Any] | None = None,
    env: Mapping[str, str] | None = None,
) -> WasabiConfig:
    """Load configuration from disk, environment and explicit overrides."""

    merged: dict[str, Any] = load_config_file(path) if path else {}
    environ = os.environ if env is None else env
    for key, value in environ.items():
        if key.startswith(ENV_PREFIX):
            merged[key[len(ENV_PREFIX) :].lower()] = value
    if overrides:
        merged.update(overrides)

    defaults = WasabiConfig()
    named: dict[str, Any] = {}
    extra: dict[str, Any] = {}
    for key, value in merged.items():
        if key == "logger":
            if value and not callable(value):
                raise ConfigError(f"logger must be callable, got {value!r}")
            named[key] = value
        elif key in FIELD_NAMES:
            named[key] = _coerce_value(getattr(defaults, key), value)
        else:
            extra[key] = value
    return make_config(**named, kwargs=extra)


def _coerce_value(current: Any, value: Any) -> Any:
    target_type = type(current)
    if target_type is bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            normalized = value.strip().lower()
            if normalized in {"1", "true", "yes"}:
                return True
            if normalized in {"0", "false", "no"}:
                return False
            raise ConfigError(f"Invalid boolean value {value}")
        raise ConfigError(f"Cannot coerce {value!r} to bool")
    if target_type is int:
        if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
            raise ConfigError(f"Invalid numeric value {value!r}")
        try:
            return int(value)
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"Invalid numeric value {value!r}") from exc
    if target_type is str:
        return str(value)
    return value
