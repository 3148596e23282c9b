"""
Retention policy for timestamp-named snapshots.

Defines the five retention tiers, the calendar arithmetic for their windows and
the bucket keys used to keep one snapshot per period.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from dateutil.relativedelta import relativedelta

from dateprune.errors import ConfigurationError


class RetentionTier(Enum):
    """Retention tiers, in the order they are applied."""

    HOURLY = "hourly"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"

    @property
    def unit(self) -> str:
        """relativedelta keyword for one unit of this tier."""
        return _UNITS[self]

    def cutoff(self, anchor: datetime, span: int) -> datetime:
        """
        Earliest excluded timestamp of this tier's window.

        Months and years follow calendar arithmetic: Mar 31 minus one month is
        Feb 28 (or 29), never a fixed 30-day step.

        Spans reaching before year 1 clamp to datetime.min, so the window
        covers all history.

        Args:
            anchor: Timestamp of the most recent snapshot
            span: Number of units to look back

        Returns:
            anchor minus span units
        """
        try:
            return anchor - relativedelta(**{self.unit: span})
        except (OverflowError, ValueError):
            return datetime.min

    def bucket(self, timestamp: datetime) -> tuple[int, ...]:
        """Coarsen a timestamp to this tier's period key."""
        if self is RetentionTier.HOURLY:
            return (timestamp.year, timestamp.month, timestamp.day, timestamp.hour)
        elif self is RetentionTier.DAILY:
            return (timestamp.year, timestamp.month, timestamp.day)
        elif self is RetentionTier.WEEKLY:
            iso = timestamp.isocalendar()
            return (iso[0], iso[1])
        elif self is RetentionTier.MONTHLY:
            return (timestamp.year, timestamp.month)
        else:
            return (timestamp.year,)


_UNITS = {
    RetentionTier.HOURLY: "hours",
    RetentionTier.DAILY: "days",
    RetentionTier.WEEKLY: "weeks",
    RetentionTier.MONTHLY: "months",
    RetentionTier.YEARLY: "years",
}

TIER_ORDER = (
    RetentionTier.HOURLY,
    RetentionTier.DAILY,
    RetentionTier.WEEKLY,
    RetentionTier.MONTHLY,
    RetentionTier.YEARLY,
)


@dataclass(frozen=True)
class RetentionPolicy:
    """
    How far back each tier looks from the most recent snapshot.

    A span of 0 disables that tier; the most recent snapshot is kept regardless.
    """

    keep_hours: int = 24
    keep_days: int = 7
    keep_weeks: int = 4
    keep_months: int = 12
    keep_years: int = 10

    def __post_init__(self) -> None:
        """Validate spans after initialization."""
        for tier in TIER_ORDER:
            span = self.span_for(tier)
            if isinstance(span, bool) or not isinstance(span, int):
                raise ConfigurationError(f"keep_{tier.unit} must be an integer, got {span!r}")
            if span < 0:
                raise ConfigurationError(f"keep_{tier.unit} must be non-negative, got {span}")

    def span_for(self, tier: RetentionTier) -> int:
        """Get the span configured for a tier."""
        return getattr(self, f"keep_{tier.unit}")

    def tiers(self) -> list[tuple[RetentionTier, int]]:
        """Tiers paired with their spans, in application order."""
        return [(tier, self.span_for(tier)) for tier in TIER_ORDER]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {f"keep_{tier.unit}": span for tier, span in self.tiers()}


DEFAULT_POLICY = RetentionPolicy()
