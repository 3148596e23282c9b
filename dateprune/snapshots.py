"""
Snapshot discovery and ordering.

A snapshot is a direct child directory of the source directory whose name
matches the configured pattern and decodes to a timestamp. Everything else in
the source directory is ignored and never becomes a deletion candidate.

Usage:
    from dateprune.snapshots import SnapshotNaming, list_snapshots

    snapshots = list_snapshots("/var/backups/mysql", SnapshotNaming())
    newest = snapshots[0]
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from loguru import logger

from dateprune.errors import ConfigurationError, SnapshotParseError

DEFAULT_PATTERN = r"^[0-9]{8}-[0-9]{6}$"
DEFAULT_TIMESTAMP_FORMAT = "%Y%m%d-%H%M%S"


@dataclass(frozen=True)
class SnapshotNaming:
    """
    Naming contract for snapshot directories.

    Attributes:
        pattern: Regular expression a basename must match in full
        timestamp_format: strptime format that decodes a matching basename
    """

    pattern: str = DEFAULT_PATTERN
    timestamp_format: str = DEFAULT_TIMESTAMP_FORMAT
    _regex: re.Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        """Compile the pattern and reject unusable settings."""
        try:
            regex = re.compile(self.pattern)
        except re.error as e:
            raise ConfigurationError(f"Invalid snapshot pattern '{self.pattern}': {e}") from e
        if not self.timestamp_format:
            raise ConfigurationError("Timestamp format must not be empty")
        object.__setattr__(self, "_regex", regex)

    def matches(self, name: str) -> bool:
        """Check whether a basename matches the snapshot pattern exactly."""
        return self._regex.fullmatch(name) is not None

    def parse(self, name: str) -> datetime:
        """
        Decode a basename into its capture timestamp.

        Args:
            name: Directory basename

        Returns:
            Naive datetime encoded in the name

        Raises:
            SnapshotParseError: If the name does not decode with timestamp_format
        """
        try:
            return datetime.strptime(name, self.timestamp_format)
        except ValueError as e:
            raise SnapshotParseError(name, self.timestamp_format, str(e)) from e


@dataclass(frozen=True)
class Snapshot:
    """One timestamp-named snapshot directory."""

    name: str
    path: Path
    timestamp: datetime

    @classmethod
    def from_path(cls, path: Path, naming: SnapshotNaming) -> "Snapshot":
        """Build a snapshot from a directory path, decoding its basename."""
        path = Path(path)
        return cls(name=path.name, path=path, timestamp=naming.parse(path.name))

    @property
    def sort_key(self) -> tuple[datetime, str]:
        return (self.timestamp, self.name)


def order_snapshots(snapshots: list[Snapshot]) -> list[Snapshot]:
    """
    Sort snapshots most recent first.

    Identical timestamps are ordered by name, lexically larger first.
    """
    return sorted(snapshots, key=lambda s: s.sort_key, reverse=True)


def resolve_source_dir(source_dir: Path | str | None) -> Path:
    """
    Validate the source directory.

    Raises:
        ConfigurationError: If no path was given, or it is not an existing directory
    """
    if source_dir is None or str(source_dir).strip() == "":
        raise ConfigurationError("Source directory is required")
    path = Path(source_dir).expanduser()
    if not path.exists():
        raise ConfigurationError(f"Source directory does not exist: {path}")
    if not path.is_dir():
        raise ConfigurationError(f"Source path is not a directory: {path}")
    return path


def list_snapshots(
    source_dir: Path | str,
    naming: SnapshotNaming | None = None,
) -> list[Snapshot]:
    """
    Enumerate snapshot directories under source_dir, most recent first.

    Entries that are not directories, are symlinks, or do not match the naming
    pattern are ignored. Entries that match the pattern but fail to decode are
    skipped with a warning; they are neither retained nor deleted.

    Args:
        source_dir: Directory holding the snapshots
        naming: Naming contract (default: SnapshotNaming())

    Returns:
        Snapshots sorted descending by timestamp

    Raises:
        ConfigurationError: If source_dir is missing or not a directory
    """
    source = resolve_source_dir(source_dir)
    naming = naming or SnapshotNaming()

    snapshots = []
    for item in source.iterdir():
        if not naming.matches(item.name):
            logger.debug(f"Ignoring non-snapshot entry: {item.name}")
            continue
        if item.is_symlink() or not item.is_dir():
            logger.debug(f"Ignoring non-directory entry: {item.name}")
            continue

        try:
            snapshots.append(Snapshot.from_path(item, naming))
        except SnapshotParseError as e:
            logger.warning(f"Skipping {item.name}: {e}")

    logger.info(f"Found {len(snapshots)} snapshots in {source}")
    return order_snapshots(snapshots)
