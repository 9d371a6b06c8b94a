#!/usr/bin/env python3
"""
CLI tool for sending records to LogFlake.

Usage:
    logflake --app-id my-app log "deploy finished" --level info --param version=1.4.2
    logflake --app-id my-app perf nightly-import 5230
    logflake --config logflake.yaml log "hello"
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any

from .client import LogFlake
from .config import ClientConfig
from .errors import ConfigurationError
from .models import LogLevel


def print_json(data: Any, indent: int = 2) -> None:
    """Print JSON to stdout."""
    print(json.dumps(data, indent=indent, default=str))


def parse_params(pairs: list[str]) -> dict[str, str]:
    """Parse key=value pairs."""
    params = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise argparse.ArgumentTypeError(f"expected key=value, got {pair!r}")
        params[key] = value
    return params


def build_config(args) -> ClientConfig:
    config = ClientConfig.from_yaml(args.config) if args.config else ClientConfig()
    if args.app_id:
        config.app_id = args.app_id
    if args.endpoint:
        config.endpoint = args.endpoint
    if args.hostname:
        config.hostname = args.hostname
    return config


def cmd_log(client: LogFlake, args) -> None:
    client.send_log(
        args.content,
        parse_params(args.param) or None,
        level=LogLevel[args.level.upper()],
        correlation=args.correlation,
    )


def cmd_perf(client: LogFlake, args) -> None:
    client.send_performance(args.label, args.duration)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="logflake",
        description="Send logs and performance samples to LogFlake",
    )
    parser.add_argument("--app-id", help="Application id (or LOGFLAKE_APP_ID)")
    parser.add_argument("--endpoint", help="Ingestion endpoint (or LOGFLAKE_ENDPOINT)")
    parser.add_argument("--hostname", help="Hostname reported with logs")
    parser.add_argument("--config", help="YAML config file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    log_parser = subparsers.add_parser("log", help="Send a log entry")
    log_parser.add_argument("content", help="Log message")
    log_parser.add_argument(
        "--level",
        default="info",
        choices=[level.name.lower() for level in LogLevel],
    )
    log_parser.add_argument("--correlation", help="Correlation id")
    log_parser.add_argument("--param", action="append", default=[], help="key=value parameter")
    log_parser.set_defaults(func=cmd_log)

    perf_parser = subparsers.add_parser("perf", help="Send a performance sample")
    perf_parser.add_argument("label", help="Operation label")
    perf_parser.add_argument("duration", type=int, help="Duration in milliseconds")
    perf_parser.set_defaults(func=cmd_perf)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = build_config(args)
        if not config.enabled:
            print_json({"enabled": False, "sent": 0})
            return 0
        client = LogFlake.from_config(config)
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    try:
        args.func(client, args)
    except argparse.ArgumentTypeError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    finally:
        client.shutdown()

    stats = client.stats
    print_json(stats)
    return 0 if stats["dropped"] == 0 else 1


if __name__ == "__main__":
    sys.exit(main())
