"""
Tiered snapshot selection.

Walks snapshots newest first through the hourly, daily, weekly, monthly and
yearly windows, keeping the newest snapshot of every period inside each window.
All windows are measured back from the most recent snapshot rather than the
current time, so a stalled producer never causes everything to be deleted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from loguru import logger

from dateprune.retention.policy import DEFAULT_POLICY, RetentionPolicy, RetentionTier
from dateprune.snapshots import Snapshot, order_snapshots

# Reason recorded when no tier had a window and only the newest snapshot survives
ANCHOR_REASON = "anchor"


@dataclass
class TierReport:
    """Outcome of one tier's scan."""

    tier: RetentionTier
    span: int
    cutoff: datetime
    scanned: int = 0
    retained: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "tier": self.tier.value,
            "span": self.span,
            "cutoff": self.cutoff.isoformat(),
            "scanned": self.scanned,
            "retained": self.retained,
        }


@dataclass(frozen=True)
class SnapshotDecision:
    """Keep or remove verdict for one snapshot."""

    snapshot: Snapshot
    keep: bool
    reason: str | None = None  # tier value or ANCHOR_REASON when kept

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.snapshot.name,
            "timestamp": self.snapshot.timestamp.isoformat(),
            "keep": self.keep,
            "reason": self.reason,
        }


@dataclass
class RetentionPlan:
    """
    Full selection result for one run.

    Attributes:
        anchor: Timestamp of the most recent snapshot (None when there are none)
        decisions: One decision per snapshot, most recent first
        tiers: One report per tier, in application order
    """

    anchor: datetime | None
    decisions: list[SnapshotDecision] = field(default_factory=list)
    tiers: list[TierReport] = field(default_factory=list)

    @property
    def kept(self) -> list[Snapshot]:
        return [d.snapshot for d in self.decisions if d.keep]

    @property
    def removed(self) -> list[Snapshot]:
        return [d.snapshot for d in self.decisions if not d.keep]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "anchor": self.anchor.isoformat() if self.anchor else None,
            "kept": len(self.kept),
            "removed": len(self.removed),
            "tiers": [t.to_dict() for t in self.tiers],
            "decisions": [d.to_dict() for d in self.decisions],
        }


class RetentionEngine:
    """
    Applies a RetentionPolicy to a set of snapshots.

    The engine never touches the filesystem; it only decides. Deletion is left
    to SnapshotCleanupJob.
    """

    def __init__(self, policy: RetentionPolicy | None = None):
        """
        Initialize the retention engine.

        Args:
            policy: Retention spans (defaults to DEFAULT_POLICY)
        """
        self._policy = policy or DEFAULT_POLICY

    @property
    def policy(self) -> RetentionPolicy:
        return self._policy

    def select(self, snapshots: list[Snapshot]) -> RetentionPlan:
        """
        Decide which snapshots to keep.

        Tiers share a single cursor over the newest-first list, so every
        snapshot is scanned by at most one tier. Each tier compares against the
        snapshot most recently kept by any tier, re-bucketed at its own
        granularity, so windows join without gaps or double counting.

        Args:
            snapshots: Candidate snapshots in any order

        Returns:
            RetentionPlan with a decision for every snapshot
        """
        ordered = order_snapshots(snapshots)
        if not ordered:
            logger.info("No snapshots to process")
            return RetentionPlan(anchor=None)

        anchor = ordered[0].timestamp
        count = len(ordered)
        logger.info(f"Sorting through {count} snapshots, anchor {anchor:%Y-%m-%d %H:%M:%S}")

        # Indexes rather than names: colliding names must not collapse into one entry
        retained: dict[int, str] = {}
        reports = []
        cursor = 0
        last_kept: Snapshot | None = None

        for tier, span in self._policy.tiers():
            cutoff = tier.cutoff(anchor, span)
            report = TierReport(tier=tier, span=span, cutoff=cutoff)
            logger.info(
                f"Keeping last {span} {tier.unit}: cutoff {cutoff.isoformat(sep=' ')}"
            )

            last_bucket = tier.bucket(last_kept.timestamp) if last_kept else None
            while cursor < count and ordered[cursor].timestamp > cutoff:
                snapshot = ordered[cursor]
                bucket = tier.bucket(snapshot.timestamp)
                if bucket != last_bucket:
                    retained[cursor] = tier.value
                    last_bucket = bucket
                    last_kept = snapshot
                    report.retained += 1
                    logger.info(f"  keeping {snapshot.name} ({tier.value})")
                else:
                    logger.info(
                        f"  removing {snapshot.name} (same {tier.value} period as {last_kept.name})"
                    )
                report.scanned += 1
                cursor += 1

            reports.append(report)

        if 0 not in retained:
            # No tier reached past the anchor: the newest snapshot still survives
            retained[0] = ANCHOR_REASON
            logger.info(f"  keeping {ordered[0].name} ({ANCHOR_REASON})")

        for index in range(cursor, count):
            if index not in retained:
                logger.info(f"  removing {ordered[index].name} (outside every window)")

        decisions = [
            SnapshotDecision(snapshot=snapshot, keep=i in retained, reason=retained.get(i))
            for i, snapshot in enumerate(ordered)
        ]
        plan = RetentionPlan(anchor=anchor, decisions=decisions, tiers=reports)
        logger.info(f"Plan: keeping {len(plan.kept)}, removing {len(plan.removed)}")
        return plan
