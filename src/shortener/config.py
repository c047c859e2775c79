"""Configuration utilities for SHORTENER.

This module centralizes small helpers and constants related to application configuration.
Values come from the environment; the CLI layers its own options on top.
"""

import os
from pathlib import Path

from platformdirs import user_data_dir

APP_NAME = "shortener"  # pragma: no mutate
SNAPSHOT_PATH_ENV = "SHORTENER_SNAPSHOT_PATH"  # pragma: no mutate
SNAPSHOT_INTERVAL_ENV = "SHORTENER_SNAPSHOT_INTERVAL"  # pragma: no mutate
LOCK_TIMEOUT_ENV = "SHORTENER_LOCK_TIMEOUT"  # pragma: no mutate
SNAPSHOT_FILENAME = "snapshot.json"  # pragma: no mutate
DEFAULT_SNAPSHOT_INTERVAL = 300.0
DEFAULT_LOCK_TIMEOUT = 30.0


class InvalidSnapshotIntervalError(ValueError):
    """Raised when SHORTENER_SNAPSHOT_INTERVAL is not a positive number."""


def default_snapshot_path() -> Path:
    """Return the per-user default snapshot location."""
    return Path(user_data_dir(APP_NAME, appauthor=False)) / SNAPSHOT_FILENAME


def get_snapshot_path() -> Path:
    """Get the snapshot file path.

    Returns:
        The value of `SHORTENER_SNAPSHOT_PATH`, or the per-user default.
    """
    if path := os.environ.get(SNAPSHOT_PATH_ENV):
        return Path(path)
    return default_snapshot_path()


def get_snapshot_interval() -> float:
    """Get the number of seconds between periodic snapshots.

    Returns:
        The value of `SHORTENER_SNAPSHOT_INTERVAL`, or 300 seconds.

    Raises:
        InvalidSnapshotIntervalError: If the value is not a positive number.
    """
    if not (raw := os.environ.get(SNAPSHOT_INTERVAL_ENV)):
        return DEFAULT_SNAPSHOT_INTERVAL
    try:
        interval = float(raw)
    except ValueError as e:
        raise InvalidSnapshotIntervalError(
            f"{SNAPSHOT_INTERVAL_ENV} must be a number of seconds, got {raw!r}"
        ) from e
    if interval <= 0:
        raise InvalidSnapshotIntervalError(
            f"{SNAPSHOT_INTERVAL_ENV} must be > 0, got {raw!r}"
        )
    return interval
