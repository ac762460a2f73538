"""Datetime utilities for consistent timestamp handling.

Snapshot ids, metadata and the generated config header all take their
timestamps from here so tests can freeze a single clock.
"""

from datetime import datetime

from zsh_migrator.constants import SNAPSHOT_TIMESTAMP_FORMAT


def get_current_datetime_local_iso() -> str:
    """Get current datetime in local timezone as ISO format string.

    Returns:
        ISO 8601 formatted datetime string with local timezone offset.
        Example: "2026-02-04T14:02:04.556063+03:00"

    """
    return datetime.now().astimezone().isoformat()


def get_current_datetime_local() -> datetime:
    """Get current datetime in local timezone."""
    return datetime.now().astimezone()


def format_snapshot_timestamp(moment: datetime) -> str:
    """Format a datetime for embedding in a snapshot id.

    Args:
        moment: Point in time to format

    Returns:
        Timestamp like "20261018_142501"

    """
    return moment.strftime(SNAPSHOT_TIMESTAMP_FORMAT)


def parse_snapshot_timestamp(value: str) -> datetime | None:
    """Parse a snapshot id timestamp, returning None when malformed."""
    try:
        return datetime.strptime(value, SNAPSHOT_TIMESTAMP_FORMAT)  # noqa: DTZ007
    except ValueError:
        return None
