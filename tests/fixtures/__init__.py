"""Test fixtures and snapshot builders."""

from tests.fixtures.snapshots import make_snapshot, make_snapshots, snapshot_name

__all__ = [
    "make_snapshot",
    "make_snapshots",
    "snapshot_name",
]
