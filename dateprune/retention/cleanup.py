"""
Snapshot cleanup job.

Enumerates snapshots, applies the retention engine and deletes every snapshot
no tier kept. Includes a dry-run mode and per-entry failure collection so one
stubborn directory never blocks the rest of the batch.
"""

from __future__ import annotations

import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from loguru import logger

from dateprune.errors import DeletionError
from dateprune.retention.engine import RetentionEngine, RetentionPlan
from dateprune.retention.policy import RetentionPolicy
from dateprune.snapshots import Snapshot, SnapshotNaming, list_snapshots, resolve_source_dir
from dateprune.utils.timing import RunTimings


@dataclass(frozen=True)
class DeletionFailure:
    """A snapshot that could not be removed."""

    name: str
    path: str
    error: str

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "path": self.path, "error": self.error}


@dataclass
class CleanupResult:
    """
    Result of a cleanup run.

    Attributes:
        source_dir: Directory that was cleaned
        dry_run: Whether this was a dry run
        snapshots_found: Number of snapshots enumerated
        snapshots_kept: Number of snapshots retained by the policy
        snapshots_deleted: Number of directories actually removed
        already_absent: Deletion targets that had vanished before removal
        errors: Per-entry deletion failures
        timings: Seconds spent enumerating, selecting and deleting
    """

    source_dir: str
    dry_run: bool
    snapshots_found: int = 0
    snapshots_kept: int = 0
    snapshots_deleted: int = 0
    already_absent: int = 0
    errors: list[DeletionFailure] = field(default_factory=list)
    timings: RunTimings = field(default_factory=RunTimings)

    @property
    def duration_seconds(self) -> float:
        """Time taken for the run."""
        return self.timings.total_seconds

    @property
    def success(self) -> bool:
        """Check if every deletion succeeded."""
        return len(self.errors) == 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "source_dir": self.source_dir,
            "dry_run": self.dry_run,
            "snapshots_found": self.snapshots_found,
            "snapshots_kept": self.snapshots_kept,
            "snapshots_deleted": self.snapshots_deleted,
            "already_absent": self.already_absent,
            "duration_seconds": self.duration_seconds,
            "errors": [e.to_dict() for e in self.errors],
            "timings": self.timings.to_dict(),
        }


def _check_deletable(snapshot: Snapshot, source_dir: Path, naming: SnapshotNaming) -> None:
    """
    Refuse anything that is not a pattern-matching direct child of source_dir.

    Raises:
        DeletionError: If the path lies outside those bounds
    """
    if snapshot.path.parent.resolve() != source_dir.resolve():
        raise DeletionError(f"{snapshot.path} is not a direct child of {source_dir}")
    if snapshot.path.name != snapshot.name or not naming.matches(snapshot.name):
        raise DeletionError(f"{snapshot.path} does not match pattern '{naming.pattern}'")


def delete_snapshots(
    snapshots: list[Snapshot],
    source_dir: Path | str,
    naming: SnapshotNaming | None = None,
    result: CleanupResult | None = None,
) -> CleanupResult:
    """
    Recursively remove snapshot directories, best effort.

    Missing targets count as already deleted, so re-running over the same set
    is harmless. Any other failure is recorded and the batch continues.

    Args:
        snapshots: Snapshots to remove
        source_dir: Directory the snapshots were enumerated from
        naming: Naming contract used during enumeration
        result: Result to accumulate into (a fresh one is created if omitted)

    Returns:
        CleanupResult with deletion counts and failures
    """
    source = Path(source_dir)
    naming = naming or SnapshotNaming()
    if result is None:
        result = CleanupResult(source_dir=str(source), dry_run=False)

    for snapshot in snapshots:
        logger.info(f"Deleting {snapshot.path}")
        try:
            _check_deletable(snapshot, source, naming)
            shutil.rmtree(snapshot.path)
        except FileNotFoundError:
            result.already_absent += 1
            logger.warning(f"Already absent: {snapshot.path}")
            continue
        except (DeletionError, OSError) as e:
            result.errors.append(
                DeletionFailure(name=snapshot.name, path=str(snapshot.path), error=str(e))
            )
            logger.error(f"Failed to delete {snapshot.path}: {e}")
            continue

        result.snapshots_deleted += 1
        logger.info(f"Deleted {snapshot.path}")

    return result


class SnapshotCleanupJob:
    """
    Prunes one directory of timestamp-named snapshots.

    All keep/remove decisions are logged before anything is deleted, so a run
    can be audited from its log alone.
    """

    def __init__(
        self,
        source_dir: Path | str,
        policy: RetentionPolicy | None = None,
        naming: SnapshotNaming | None = None,
        dry_run: bool = False,
    ):
        """
        Initialize the cleanup job.

        Args:
            source_dir: Directory holding the snapshots
            policy: Retention spans (defaults to DEFAULT_POLICY)
            naming: Snapshot naming contract (defaults to SnapshotNaming())
            dry_run: If True, only report what would be deleted

        Raises:
            ConfigurationError: If source_dir is missing or not a directory
        """
        self._source_dir = resolve_source_dir(source_dir)
        self._naming = naming or SnapshotNaming()
        self._engine = RetentionEngine(policy)
        self._dry_run = dry_run

    @property
    def source_dir(self) -> Path:
        return self._source_dir

    def plan(self) -> RetentionPlan:
        """Enumerate snapshots and decide which to keep, without deleting."""
        snapshots = list_snapshots(self._source_dir, self._naming)
        return self._engine.select(snapshots)

    def run(self) -> CleanupResult:
        """
        Run the cleanup: enumerate, select, then delete.

        Returns:
            CleanupResult with operation details
        """
        logger.info(f"Running snapshot cleanup in {self._source_dir} (dry_run={self._dry_run})")
        result = CleanupResult(source_dir=str(self._source_dir), dry_run=self._dry_run)
        timings = result.timings

        with timings.phase("enumerate"):
            snapshots = list_snapshots(self._source_dir, self._naming)
        with timings.phase("select"):
            plan = self._engine.select(snapshots)
        result.snapshots_found = len(plan.decisions)
        result.snapshots_kept = len(plan.kept)

        if self._dry_run:
            for snapshot in plan.removed:
                logger.info(f"Dry run: would delete {snapshot.path}")
        else:
            with timings.phase("delete"):
                delete_snapshots(plan.removed, self._source_dir, self._naming, result)

        timings.log()

        logger.info(
            f"Cleanup complete: found={result.snapshots_found}, kept={result.snapshots_kept}, "
            f"deleted={result.snapshots_deleted}, errors={len(result.errors)}"
        )
        return result
