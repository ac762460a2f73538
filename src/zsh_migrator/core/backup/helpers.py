"""Helper functions for snapshot ids, stored paths and item copying."""

import re
import shutil
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from zsh_migrator.constants import (
    ITEM_KIND_DIR,
    ITEM_KIND_FILE,
    SNAPSHOT_HOME_PREFIX,
    SNAPSHOT_ROOT_PREFIX,
)
from zsh_migrator.domain.types import BackupItem
from zsh_migrator.logger import get_logger
from zsh_migrator.utils.datetime_utils import parse_snapshot_timestamp

logger = get_logger(__name__)

SNAPSHOT_ID_RE = re.compile(
    r"^(?P<name>[A-Za-z0-9][A-Za-z0-9._-]*?)_(?P<ts>\d{8}_\d{6})(?:-(?P<seq>\d+))?$"
)
SNAPSHOT_NAME_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")


@dataclass(frozen=True, slots=True)
class SnapshotId:
    """Parsed parts of a snapshot directory name."""

    name: str
    timestamp: datetime
    sequence: int

    @property
    def sort_key(self) -> tuple[datetime, int]:
        """Chronological ordering key."""
        return self.timestamp, self.sequence


def parse_snapshot_id(value: str) -> SnapshotId | None:
    """Split ``name_YYYYmmdd_HHMMSS[-N]`` into its parts.

    Returns:
        SnapshotId, or None for names that are not snapshot directories

    """
    match = SNAPSHOT_ID_RE.match(value)
    if not match:
        return None
    timestamp = parse_snapshot_timestamp(match.group("ts"))
    if timestamp is None:
        return None
    return SnapshotId(
        name=match.group("name"),
        timestamp=timestamp,
        sequence=int(match.group("seq") or 1),
    )


def is_valid_snapshot_name(name: str) -> bool:
    """Whether ``name`` may prefix a snapshot id."""
    return bool(SNAPSHOT_NAME_RE.match(name))


def stored_relative_path(source: Path, home: Path) -> Path:
    """Location of ``source`` inside a snapshot's files directory.

    Paths under ``home`` are stored below ``home/``, everything else below
    ``root/`` so two tracked items can never collide.
    """
    try:
        return Path(SNAPSHOT_HOME_PREFIX) / source.relative_to(home)
    except ValueError:
        return Path(SNAPSHOT_ROOT_PREFIX) / source.relative_to(source.anchor)


def directory_size(path: Path) -> int:
    """Total size in bytes of regular files below ``path``."""
    total = 0
    for entry in path.rglob("*"):
        if entry.is_file() and not entry.is_symlink():
            total += entry.stat().st_size
    return total


def copy_item(source: Path, destination: Path) -> BackupItem:
    """Copy a tracked file or directory and describe it.

    Args:
        source: Live path being snapshotted
        destination: Target path inside the staging directory

    Returns:
        BackupItem for the manifest

    Raises:
        OSError: If the copy fails

    """
    destination.parent.mkdir(parents=True, exist_ok=True)
    stat = source.stat()
    if source.is_dir():
        shutil.copytree(source, destination, symlinks=True)
        kind = ITEM_KIND_DIR
        size = directory_size(destination)
    else:
        shutil.copy2(source, destination)
        kind = ITEM_KIND_FILE
        size = stat.st_size

    logger.debug("Copied %s (%s, %d bytes)", source, kind, size)
    return BackupItem(
        kind=kind,  # type: ignore[arg-type]
        source_path=source,
        size_bytes=size,
        mtime=int(stat.st_mtime),
    )


def format_size(size_bytes: int) -> str:
    """Human readable size, e.g. "1.5 MB"."""
    size = float(size_bytes)
    for unit in ("B", "KB", "MB", "GB"):
        if size < 1024 or unit == "GB":
            return f"{size:.0f} {unit}" if unit == "B" else f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} GB"
