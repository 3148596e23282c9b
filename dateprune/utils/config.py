"""
Environment configuration for dateprune.

Every setting has a named default and a DATEPRUNE_* environment variable.
Command-line flags override both.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from dateprune.errors import ConfigurationError
from dateprune.retention.policy import DEFAULT_POLICY, RetentionPolicy
from dateprune.snapshots import DEFAULT_PATTERN, DEFAULT_TIMESTAMP_FORMAT, SnapshotNaming

_TRUE_VALUES = ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got '{raw}'") from exc


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in _TRUE_VALUES


@dataclass
class Config:
    """Resolved settings for a cleanup run."""

    source_dir: str | None = None
    keep_hours: int = DEFAULT_POLICY.keep_hours
    keep_days: int = DEFAULT_POLICY.keep_days
    keep_weeks: int = DEFAULT_POLICY.keep_weeks
    keep_months: int = DEFAULT_POLICY.keep_months
    keep_years: int = DEFAULT_POLICY.keep_years
    pattern: str = DEFAULT_PATTERN
    timestamp_format: str = DEFAULT_TIMESTAMP_FORMAT
    dry_run: bool = False

    @classmethod
    def from_env(cls) -> "Config":
        """
        Build a Config from DATEPRUNE_* environment variables.

        Raises:
            ConfigurationError: If a numeric variable is not an integer
        """
        return cls(
            source_dir=os.getenv("DATEPRUNE_SOURCE_DIR") or None,
            keep_hours=_env_int("DATEPRUNE_KEEP_HOURS", DEFAULT_POLICY.keep_hours),
            keep_days=_env_int("DATEPRUNE_KEEP_DAYS", DEFAULT_POLICY.keep_days),
            keep_weeks=_env_int("DATEPRUNE_KEEP_WEEKS", DEFAULT_POLICY.keep_weeks),
            keep_months=_env_int("DATEPRUNE_KEEP_MONTHS", DEFAULT_POLICY.keep_months),
            keep_years=_env_int("DATEPRUNE_KEEP_YEARS", DEFAULT_POLICY.keep_years),
            pattern=os.getenv("DATEPRUNE_PATTERN") or DEFAULT_PATTERN,
            timestamp_format=os.getenv("DATEPRUNE_TIMESTAMP_FORMAT") or DEFAULT_TIMESTAMP_FORMAT,
            dry_run=_env_bool("DATEPRUNE_DRY_RUN", False),
        )

    def policy(self) -> RetentionPolicy:
        """Retention spans as a validated policy."""
        return RetentionPolicy(
            keep_hours=self.keep_hours,
            keep_days=self.keep_days,
            keep_weeks=self.keep_weeks,
            keep_months=self.keep_months,
            keep_years=self.keep_years,
        )

    def naming(self) -> SnapshotNaming:
        """Snapshot naming contract as a validated object."""
        return SnapshotNaming(pattern=self.pattern, timestamp_format=self.timestamp_format)
