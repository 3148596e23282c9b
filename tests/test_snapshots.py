"""
Tests for snapshot enumeration and ordering.

Tests cover:
- SnapshotNaming pattern matching and timestamp parsing
- list_snapshots() filtering, ordering and source validation
- Skipping entries whose names match but do not decode
"""

from datetime import datetime

import pytest

from dateprune.errors import ConfigurationError, SnapshotParseError
from dateprune.snapshots import Snapshot, SnapshotNaming, list_snapshots, order_snapshots
from tests.fixtures import make_snapshot


class TestSnapshotNaming:
    """Tests for the naming contract."""

    def test_default_pattern(self):
        """Only eight digits, a dash and six digits match."""
        naming = SnapshotNaming()

        assert naming.matches("20240610-120000")
        assert not naming.matches("20240610-1200")
        assert not naming.matches("20240610_120000")
        assert not naming.matches("backup-20240610-120000")
        assert not naming.matches("20240610-120000.old")
        assert not naming.matches("20240610-120000\n")

    def test_parse(self):
        """Names decode with the default format."""
        assert SnapshotNaming().parse("20240610-123456") == datetime(2024, 6, 10, 12, 34, 56)

    def test_parse_invalid_date(self):
        """A matching name with an impossible date raises SnapshotParseError."""
        with pytest.raises(SnapshotParseError, match="20241399-120000"):
            SnapshotNaming().parse("20241399-120000")

    def test_custom_format(self):
        """Pattern and format are pluggable."""
        naming = SnapshotNaming(pattern=r"^backup_\d{8}_\d{6}$", timestamp_format="backup_%Y%m%d_%H%M%S")

        assert naming.matches("backup_20240610_120000")
        assert naming.parse("backup_20240610_120000") == datetime(2024, 6, 10, 12)

    def test_invalid_pattern(self):
        """An uncompilable pattern is a configuration error."""
        with pytest.raises(ConfigurationError, match="Invalid snapshot pattern"):
            SnapshotNaming(pattern="[0-9")

    def test_empty_format(self):
        """An empty timestamp format is a configuration error."""
        with pytest.raises(ConfigurationError):
            SnapshotNaming(timestamp_format="")


class TestOrdering:
    """Tests for order_snapshots()."""

    def test_descending(self):
        """Most recent first."""
        older = make_snapshot(datetime(2023, 1, 1))
        newer = make_snapshot(datetime(2024, 1, 1))
        middle = make_snapshot(datetime(2023, 6, 1))

        assert order_snapshots([older, newer, middle]) == [newer, middle, older]


class TestListSnapshots:
    """Tests for list_snapshots()."""

    def test_lists_matching_directories(self, snapshot_dir):
        """Only matching directories are enumerated, newest first."""
        source = snapshot_dir(
            [datetime(2024, 6, 9, 12), datetime(2024, 6, 10, 12), datetime(2024, 6, 8, 12)],
            extra_entries=["lost+found", "latest", "20240610-1200"],
        )
        (source / "20240611-120000").write_text("a file, not a directory")

        snapshots = list_snapshots(source)

        assert [s.name for s in snapshots] == [
            "20240610-120000",
            "20240609-120000",
            "20240608-120000",
        ]
        assert all(isinstance(s, Snapshot) for s in snapshots)
        assert snapshots[0].path == source / "20240610-120000"
        assert snapshots[0].timestamp == datetime(2024, 6, 10, 12)

    def test_empty_directory(self, snapshot_dir):
        """No matches gives an empty list."""
        source = snapshot_dir([], extra_entries=["notes"])

        assert list_snapshots(source) == []

    def test_skips_unparseable(self, snapshot_dir, caplog):
        """Matching names that do not decode are skipped with a warning."""
        source = snapshot_dir([datetime(2024, 6, 10, 12)], extra_entries=["20241399-120000"])

        snapshots = list_snapshots(source)

        assert [s.name for s in snapshots] == ["20240610-120000"]
        assert "Skipping 20241399-120000" in caplog.text

    def test_skips_symlinks(self, snapshot_dir, tmp_path):
        """Symlinked directories are never candidates."""
        source = snapshot_dir([datetime(2024, 6, 10, 12)])
        elsewhere = tmp_path / "elsewhere"
        elsewhere.mkdir()
        (source / "20240609-120000").symlink_to(elsewhere, target_is_directory=True)

        assert [s.name for s in list_snapshots(source)] == ["20240610-120000"]

    def test_missing_source(self, tmp_path):
        """A missing source directory is a configuration error."""
        with pytest.raises(ConfigurationError, match="does not exist"):
            list_snapshots(tmp_path / "missing")

    def test_source_is_file(self, tmp_path):
        """A file as source is a configuration error."""
        path = tmp_path / "file"
        path.write_text("x")

        with pytest.raises(ConfigurationError, match="not a directory"):
            list_snapshots(path)

    def test_source_required(self):
        """An empty source path is a configuration error."""
        with pytest.raises(ConfigurationError, match="required"):
            list_snapshots("")
