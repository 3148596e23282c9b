"""
Generational snapshot retention for dateprune.

Keeps one snapshot per hour, day, week, month and year within windows counted
back from the most recent snapshot, and deletes the rest.

Usage:
    from dateprune.retention import RetentionPolicy, SnapshotCleanupJob

    policy = RetentionPolicy(keep_hours=24, keep_days=7)
    job = SnapshotCleanupJob("/var/backups/mysql", policy=policy, dry_run=True)
    result = job.run()
"""

from dateprune.retention.policy import DEFAULT_POLICY, RetentionPolicy, RetentionTier
from dateprune.retention.engine import RetentionEngine, RetentionPlan, TierReport
from dateprune.retention.cleanup import CleanupResult, SnapshotCleanupJob, delete_snapshots

__all__ = [
    "DEFAULT_POLICY",
    "RetentionPolicy",
    "RetentionTier",
    "RetentionEngine",
    "RetentionPlan",
    "TierReport",
    "CleanupResult",
    "SnapshotCleanupJob",
    "delete_snapshots",
]
