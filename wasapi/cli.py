#!/usr/bin/env python3
"""Command line entrypoints for the Wasabi RPC client."""

from __future__ import annotations

import argparse
import inspect
import json
import logging
import sys
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any

from .client import WasabiAPI, resolve_operation
from .config import WasabiConfig, load_config
from .errors import ConfigError, WasabiRPCError
from .logging import console_logger, setup_logging
from .transport import HTTPTransport


def add_connection_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--config", type=Path, help="Path to client config JSON (optional)")
    parser.add_argument("-j", "--jsonrpc", help="JSON-RPC version. Defaults to 2.0")
    parser.add_argument("-i", "--id", dest="request_id", help="Request id. Defaults to 1")
    parser.add_argument("-o", "--host", help="Host of the RPC instance, including scheme. Defaults to http://127.0.0.1")
    parser.add_argument("-p", "--port", type=int, help="Port of the RPC instance. Defaults to 37128")
    parser.add_argument("-u", "--user", dest="username", help="RPC username")
    parser.add_argument("-P", "--password", help="RPC password; enables Basic auth")
    parser.add_argument("-v", "--verbose", action="store_true", help="Turn on verbose output, for debugging")
    parser.add_argument("--timeout", type=float, default=15.0)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generic API for the Wasabi wallet RPC")
    parser.add_argument("method", help="Operation name, e.g. get_status or getStatus")
    parser.add_argument("args", nargs="?", default="[]", help="JSON array of arguments")
    add_connection_args(parser)
    return parser


def build_status_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Gets the status of Wasabi. Note: RPC must be set up and running on the Wasabi Wallet instance."
    )
    add_connection_args(parser)
    return parser


def build_config(args: argparse.Namespace, sink: Callable[[Any], None]) -> WasabiConfig:
    overrides: dict[str, Any] = {
        key: getattr(args, key)
        for key in ("jsonrpc", "request_id", "host", "port", "username", "password")
        if getattr(args, key) is not None
    }
    if args.verbose:
        overrides["verbose"] = True
    overrides["logger"] = sink
    return load_config(args.config, overrides=overrides)


def _prepare(args: argparse.Namespace) -> WasabiAPI:
    logger = setup_logging(level=logging.DEBUG if args.verbose else logging.INFO)
    sink = console_logger(logger)
    config = build_config(args, sink)
    if config.verbose:
        shown = config.to_dict()
        if shown["password"]:
            shown["password"] = "********"
        sink("VERBOSE: Config")
        sink(shown)
    return WasabiAPI(HTTPTransport(timeout=args.timeout), config)


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    operation = resolve_operation(args.method)
    if operation is None:
        parser.error(f"Unknown method {args.method}")
    try:
        params = json.loads(args.args)
    except json.JSONDecodeError:
        parser.error("args must be a JSON array")
    if not isinstance(params, list):
        parser.error("args must be a JSON array")

    try:
        api = _prepare(args)
    except ConfigError as exc:
        print(f"Config error: {exc}", file=sys.stderr)
        return 1
    sink = api.config.logger
    if api.config.verbose:
        sink(f"Method: {operation}")
        sink(f"Args: {params}")

    try:
        inspect.signature(getattr(api, operation)).bind(*params)
    except TypeError as exc:
        parser.error(f"Bad arguments for {args.method}: {exc}")

    try:
        result = api.call(operation, *params)
    except WasabiRPCError as exc:
        print(f"RPC error: {exc}", file=sys.stderr)
        return 1
    except ValueError as exc:
        print(f"RPC error: invalid response body: {exc}", file=sys.stderr)
        return 1
    if operation != "stop":
        if api.config.verbose:
            sink("Result:")
        print(json.dumps(result, indent=2, default=str))
    return 0


def status_main(argv: Sequence[str] | None = None) -> int:
    args = build_status_parser().parse_args(argv)
    try:
        api = _prepare(args)
    except ConfigError as exc:
        print(f"Config error: {exc}", file=sys.stderr)
        return 1
    try:
        result = api.get_status()
    except WasabiRPCError as exc:
        print(f"RPC error: {exc}", file=sys.stderr)
        return 1
    except ValueError as exc:
        print(f"RPC error: invalid response body: {exc}", file=sys.stderr)
        return 1
    print(json.dumps(result, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
