from __future__ import annotations

import argparse
import re
from dataclasses import dataclass
from typing import List, Optional
from urllib.parse import urlsplit

from .exceptions import ConfigError

MIN_INTERVAL_MS = 100
MAX_INTERVAL_MS = 2**31 - 1
DEFAULT_LOG_FILE = "netmon.log"

EXIT_BAD_ARG_COUNT = 1
EXIT_BAD_ARG_VALUE = 2

_INT_RE = re.compile(r"^\s*[+-]?\d+\s*$")


@dataclass
class AgentConfig:
    """
    Startup configuration. Set once, read only afterwards.

    endpoint
      Absolute URI whose host is pinged every cycle.

    interval_ms
      Wait between cycles in milliseconds, at least 100.

    log_file, rotate_daily
      Where the record log goes and whether it rolls over at midnight.
    """

    endpoint: str
    interval_ms: int
    log_file: str = DEFAULT_LOG_FILE
    rotate_daily: bool = False

    @property
    def host(self) -> str:
        return urlsplit(self.endpoint).hostname or ""

    @property
    def interval_seconds(self) -> float:
        return self.interval_ms / 1000.0


def validate_endpoint(text: str) -> str:
    try:
        parts = urlsplit(text)
        host = parts.hostname
        # Accessing port validates it.
        _ = parts.port
    except ValueError as exc:
        raise ConfigError(f"Invalid URI '{text}'.", EXIT_BAD_ARG_VALUE) from exc

    if not parts.scheme or not host:
        raise ConfigError(f"Invalid URI '{text}'.", EXIT_BAD_ARG_VALUE)
    return text


def validate_interval(text: str) -> int:
    if not _INT_RE.match(text):
        raise ConfigError(f"Invalid delay '{text}'.", EXIT_BAD_ARG_VALUE)

    value = int(text)
    if value < MIN_INTERVAL_MS or value > MAX_INTERVAL_MS:
        raise ConfigError(f"Invalid delay '{text}'.", EXIT_BAD_ARG_VALUE)
    return value


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str):
        raise ConfigError(message, EXIT_BAD_ARG_COUNT)


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="netmon",
        add_help=False,
        description="Sample link availability, latency and interface traffic on a fixed interval.",
    )
    parser.add_argument("args", nargs="*", metavar="ENDPOINT INTERVAL_MS")
    parser.add_argument("--log-file", default=DEFAULT_LOG_FILE, help="Record log path (default netmon.log).")
    parser.add_argument("--rotate-daily", action="store_true", help="Start a new log file at midnight.")
    return parser


def parse_args(argv: Optional[List[str]] = None) -> AgentConfig:
    """
    Validate the command line.

    Raises ConfigError with exit_code 1 for a wrong argument count and
    exit_code 2 for a malformed endpoint or interval.
    """
    ns = build_parser().parse_args(argv)
    positional = ns.args

    if len(positional) != 2:
        raise ConfigError(f"Invalid number of arguments ({len(positional)}).", EXIT_BAD_ARG_COUNT)

    endpoint = validate_endpoint(positional[0])
    interval_ms = validate_interval(positional[1])

    return AgentConfig(
        endpoint=endpoint,
        interval_ms=interval_ms,
        log_file=ns.log_file,
        rotate_daily=bool(ns.rotate_daily),
    )
