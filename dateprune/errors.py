"""
Exception hierarchy for dateprune.

Configuration problems are fatal and surface before any destructive action.
Parse and deletion problems are per-entry and never abort a run.
"""

from __future__ import annotations


class DatePruneError(Exception):
    """Base class for all dateprune errors."""


class ConfigurationError(DatePruneError):
    """Invalid source directory, retention span, name pattern or timestamp format."""


class SnapshotParseError(DatePruneError):
    """A directory name matched the snapshot pattern but its timestamp did not parse."""

    def __init__(self, name: str, timestamp_format: str, reason: str = ""):
        self.name = name
        self.timestamp_format = timestamp_format
        message = f"Cannot parse snapshot name '{name}' with format '{timestamp_format}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class DeletionError(DatePruneError):
    """A deletion target fell outside the bounds the executor is allowed to touch."""
