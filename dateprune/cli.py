"""
Command-line interface for snapshot pruning.

Usage:
    python -m dateprune /var/backups/mysql
    python -m dateprune /var/backups/mysql --keep-hours 48 --keep-years 5
    python -m dateprune /var/backups/mysql --dry-run
    python -m dateprune /var/backups/mysql --list --json
"""

from __future__ import annotations

import argparse
import dataclasses
import json
import sys
from enum import IntEnum

from loguru import logger

from dateprune.errors import ConfigurationError
from dateprune.retention.cleanup import SnapshotCleanupJob
from dateprune.retention.engine import RetentionPlan
from dateprune.retention.policy import DEFAULT_POLICY
from dateprune.snapshots import DEFAULT_PATTERN, DEFAULT_TIMESTAMP_FORMAT
from dateprune.utils.config import Config
from dateprune.utils.startup import fail_fast_startup


class ExitCode(IntEnum):
    """Process exit statuses."""

    OK = 0
    DELETION_FAILED = 1
    CONFIGURATION_ERROR = 10


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dateprune",
        description="Prune timestamp-named snapshot directories with a "
        "grandfather-father-son retention schedule",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Windows are counted back from the most recent snapshot, not from now, so
snapshots are never all deleted just because no new one arrived.

Examples:
  Prune with the default schedule (24h, 7d, 4w, 12m, 10y):
    python -m dateprune /var/backups/mysql

  Show what would happen:
    python -m dateprune /var/backups/mysql --list
""",
    )

    parser.add_argument(
        "source_dir",
        nargs="?",
        help="Directory containing the snapshot directories (or DATEPRUNE_SOURCE_DIR)",
    )

    # Retention spans
    parser.add_argument(
        "--keep-hours",
        type=int,
        help=f"Hours of hourly snapshots to keep (default: {DEFAULT_POLICY.keep_hours})",
    )
    parser.add_argument(
        "--keep-days",
        type=int,
        help=f"Days of daily snapshots to keep (default: {DEFAULT_POLICY.keep_days})",
    )
    parser.add_argument(
        "--keep-weeks",
        type=int,
        help=f"Weeks of weekly snapshots to keep (default: {DEFAULT_POLICY.keep_weeks})",
    )
    parser.add_argument(
        "--keep-months",
        type=int,
        help=f"Months of monthly snapshots to keep (default: {DEFAULT_POLICY.keep_months})",
    )
    parser.add_argument(
        "--keep-years",
        type=int,
        help=f"Years of yearly snapshots to keep (default: {DEFAULT_POLICY.keep_years})",
    )

    # Naming
    parser.add_argument(
        "--pattern",
        help=f"Regular expression snapshot names must match (default: {DEFAULT_PATTERN})",
    )
    parser.add_argument(
        "--timestamp-format",
        help=f"strptime format of snapshot names (default: {DEFAULT_TIMESTAMP_FORMAT})",
    )

    # Actions
    parser.add_argument(
        "--dry-run",
        action="store_true",
        default=None,
        help="Log decisions but delete nothing",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="Print the keep/remove plan and exit without deleting",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the result (or plan) as JSON on stdout",
    )

    # Logging
    parser.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Suppress output except errors",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Include debug output",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Emit log records as JSON lines on stderr",
    )

    return parser


def _configure_logging(args: argparse.Namespace) -> None:
    if args.quiet:
        level = "ERROR"
    elif args.verbose:
        level = "DEBUG"
    else:
        level = "INFO"

    logger.remove()
    logger.add(sys.stderr, level=level, serialize=args.json_logs)


def _resolve_config(args: argparse.Namespace) -> Config:
    """Environment settings with command-line overrides applied."""
    overrides = {
        name: getattr(args, name)
        for name in (
            "source_dir",
            "keep_hours",
            "keep_days",
            "keep_weeks",
            "keep_months",
            "keep_years",
            "pattern",
            "timestamp_format",
            "dry_run",
        )
        if getattr(args, name) is not None
    }
    return dataclasses.replace(Config.from_env(), **overrides)


def _print_plan(plan: RetentionPlan, as_json: bool) -> None:
    if as_json:
        print(json.dumps(plan.to_dict(), indent=2))
        return

    if not plan.decisions:
        print("No snapshots found")
        return

    print(f"Anchor: {plan.anchor:%Y-%m-%d %H:%M:%S}")
    for report in plan.tiers:
        print(
            f"  {report.tier.value:<8} cutoff {report.cutoff.isoformat(sep=' ')}  "
            f"scanned {report.scanned}, kept {report.retained}"
        )
    print(f"\n{len(plan.kept)} kept, {len(plan.removed)} to remove:\n")
    for decision in plan.decisions:
        verdict = f"keep   ({decision.reason})" if decision.keep else "remove"
        print(f"  {decision.snapshot.name}  {verdict}")


def main(argv: list[str] | None = None) -> int:
    """
    CLI entry point for snapshot pruning.

    Returns:
        Exit code (0 on success, 1 if any deletion failed, 10 on configuration errors)
    """
    parser = _build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args)

    try:
        config = _resolve_config(args)
        fail_fast_startup(config)
        job = SnapshotCleanupJob(
            config.source_dir,
            policy=config.policy(),
            naming=config.naming(),
            dry_run=config.dry_run,
        )

        if args.list:
            _print_plan(job.plan(), args.json)
            return ExitCode.OK

        result = job.run()

    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        print(f"Error: {e}", file=sys.stderr)
        if not args.source_dir and "Source directory is required" in str(e):
            parser.print_usage(sys.stderr)
        return ExitCode.CONFIGURATION_ERROR

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    elif not args.quiet:
        action = "Would delete" if result.dry_run else "Deleted"
        removable = result.snapshots_found - result.snapshots_kept
        count = removable if result.dry_run else result.snapshots_deleted
        print(f"Snapshots: {result.snapshots_found}, kept: {result.snapshots_kept}")
        print(f"{action}: {count}")

    if not result.success:
        print(f"Failed to delete {len(result.errors)} snapshots:", file=sys.stderr)
        for failure in result.errors:
            print(f"  {failure.name}: {failure.error}", file=sys.stderr)
        return ExitCode.DELETION_FAILED

    return ExitCode.OK


if __name__ == "__main__":
    sys.exit(main())
