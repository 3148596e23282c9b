"""Startup validation for dateprune.

Provides fail-fast validation of the run configuration before anything is
enumerated or deleted.
"""

from __future__ import annotations

from loguru import logger

from dateprune.errors import ConfigurationError
from dateprune.snapshots import resolve_source_dir
from dateprune.utils.config import Config


def validate_startup(config: Config) -> list[str]:
    """
    Validate the run configuration.

    Args:
        config: Settings to check

    Returns:
        List of error messages. Empty if all valid.
    """
    errors = []

    try:
        resolve_source_dir(config.source_dir)
    except ConfigurationError as e:
        errors.append(str(e))

    for check in (config.policy, config.naming):
        try:
            check()
        except ConfigurationError as e:
            errors.append(str(e))

    return errors


def fail_fast_startup(config: Config) -> None:
    """
    Validate startup and raise if invalid.

    Call this at entry points before building a cleanup job.

    Raises:
        ConfigurationError: If any setting is unusable.
    """
    errors = validate_startup(config)
    if errors:
        error_msg = "Startup validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        logger.error(error_msg)
        raise ConfigurationError(error_msg)

    logger.debug("Startup validation passed")
