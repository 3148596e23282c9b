"""
Phase timing for cleanup runs.

A run is split into enumerate, select and delete phases. Each phase's wall
time lands in RunTimings, which travels with the CleanupResult into --json.
"""

from __future__ import annotations

import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Generator

from loguru import logger


@dataclass
class RunTimings:
    """Seconds spent in each phase of a cleanup run, in the order phases ran."""

    phases: dict[str, float] = field(default_factory=dict)

    @property
    def total_seconds(self) -> float:
        return sum(self.phases.values())

    @contextmanager
    def phase(self, name: str) -> Generator[None, None, None]:
        """
        Time one phase of the run.

        Usage:
            timings = RunTimings()
            with timings.phase("select"):
                plan = engine.select(snapshots)

        Re-entering a phase adds to its time. The time is recorded even when
        the phase raises.
        """
        start = time.perf_counter()
        try:
            yield
        finally:
            elapsed = time.perf_counter() - start
            self.phases[name] = self.phases.get(name, 0.0) + elapsed

    def log(self) -> None:
        """Log the total and each phase's share at debug level."""
        total = self.total_seconds
        logger.debug(f"Cleanup timing: {total:.3f}s")
        for name, seconds in self.phases.items():
            pct = (seconds / total * 100) if total > 0 else 0
            logger.debug(f"  - {name}: {seconds:.3f}s ({pct:.1f}%)")

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "total_seconds": self.total_seconds,
            **{f"{name}_seconds": seconds for name, seconds in self.phases.items()},
        }
