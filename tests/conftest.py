"""
Shared fixtures for dateprune tests.
"""

import contextlib
import sys

import pytest
from loguru import logger

from tests.fixtures.snapshots import snapshot_name


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch):
    """Keep DATEPRUNE_* variables from the outer shell out of tests."""
    for name in (
        "DATEPRUNE_SOURCE_DIR",
        "DATEPRUNE_KEEP_HOURS",
        "DATEPRUNE_KEEP_DAYS",
        "DATEPRUNE_KEEP_WEEKS",
        "DATEPRUNE_KEEP_MONTHS",
        "DATEPRUNE_KEEP_YEARS",
        "DATEPRUNE_PATTERN",
        "DATEPRUNE_TIMESTAMP_FORMAT",
        "DATEPRUNE_DRY_RUN",
    ):
        monkeypatch.delenv(name, raising=False)

    yield

    # The CLI replaces loguru sinks; put the default one back
    logger.remove()
    logger.add(sys.stderr)


@pytest.fixture
def caplog(caplog):
    """Route loguru records into pytest's caplog."""
    handler_id = logger.add(caplog.handler, format="{message}", level=0)
    yield caplog
    with contextlib.suppress(ValueError):
        logger.remove(handler_id)


@pytest.fixture
def snapshot_dir(tmp_path):
    """
    Factory creating snapshot directories under a temporary source directory.

    Usage:
        source = snapshot_dir([datetime(2024, 6, 10, 12), ...])
    """
    source = tmp_path / "backups"
    source.mkdir()

    def _create(timestamps, extra_entries=()):
        for ts in timestamps:
            path = source / snapshot_name(ts)
            path.mkdir()
            (path / "dump.sql").write_text(f"-- dump taken {ts.isoformat()}\n")
            (path / "grants").mkdir()
            (path / "grants" / "users.sql").write_text("GRANT USAGE ON *.* TO 'backup'@'localhost';\n")
        for name in extra_entries:
            (source / name).mkdir()
        return source

    return _create
