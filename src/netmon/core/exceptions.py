"""
Exception hierarchy for the agent.

Only startup problems are raised. Per cycle failures are reported as
records and never escape a probe.
"""

from __future__ import annotations


class NetMonError(Exception):
    """Base class for every error raised by netmon."""

    exit_code = 3


class ConfigError(NetMonError):
    """Invalid command line arguments."""

    def __init__(self, message: str, exit_code: int = 2):
        super().__init__(message)
        self.exit_code = exit_code


class ResolutionError(NetMonError):
    """The latency endpoint host did not resolve to any address."""


class ProbeLoadError(NetMonError):
    """A probe import path could not be loaded or registered."""
