"""Snapshot metadata and manifest files.

``metadata.json`` records who made the snapshot and with which tool
versions; ``manifest.txt`` lists every backed-up item as a
``kind|path|size|mtime`` record. Both are written once while a snapshot is
staged and only read afterwards.
"""

import getpass
import os
import platform
import shutil
import subprocess
import tempfile
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import orjson

from zsh_migrator import __version__
from zsh_migrator.constants import (
    ITEM_KIND_DIR,
    ITEM_KIND_FILE,
    SNAPSHOT_MANIFEST_FILENAME,
    SNAPSHOT_MANIFEST_SEPARATOR,
    SNAPSHOT_METADATA_FILENAME,
    SNAPSHOT_TMP_PREFIX,
    SNAPSHOT_TMP_SUFFIX,
    VERSION_PROBE_TIMEOUT,
)
from zsh_migrator.domain.types import BackupItem
from zsh_migrator.exceptions import IntegrityError
from zsh_migrator.logger import get_logger

logger = get_logger(__name__)

REQUIRED_METADATA_KEYS: tuple[str, ...] = (
    "backup_name",
    "created_at",
    "items_backed_up",
)


class SnapshotMetadata:
    """Reads and writes ``metadata.json`` of one snapshot directory."""

    def __init__(self, snapshot_dir: Path) -> None:
        """Initialize metadata manager.

        Args:
            snapshot_dir: Snapshot (or staging) directory

        """
        self.snapshot_dir = snapshot_dir
        self.metadata_file = snapshot_dir / SNAPSHOT_METADATA_FILENAME

    def load(self) -> dict[str, Any]:
        """Load metadata from file.

        Returns:
            Metadata dictionary

        Raises:
            IntegrityError: If the file is missing, unreadable, not a JSON
                object, or lacks required keys

        """
        target = self.snapshot_dir.name
        try:
            with self.metadata_file.open("rb") as f:
                data = orjson.loads(f.read())
        except FileNotFoundError as e:
            msg = "metadata file is missing"
            raise IntegrityError(msg, target) from e
        except (orjson.JSONDecodeError, OSError) as e:
            msg = f"metadata file is unreadable: {e}"
            raise IntegrityError(msg, target) from e

        if not isinstance(data, dict):
            msg = "metadata is not a JSON object"
            raise IntegrityError(msg, target)

        missing = [key for key in REQUIRED_METADATA_KEYS if key not in data]
        if missing:
            msg = f"metadata lacks keys: {', '.join(missing)}"
            raise IntegrityError(msg, target)
        return data

    def save(self, metadata: dict[str, Any]) -> None:
        """Save metadata to file atomically.

        Args:
            metadata: Metadata dictionary to save

        """
        self.snapshot_dir.mkdir(parents=True, exist_ok=True)

        with tempfile.NamedTemporaryFile(
            mode="wb",
            dir=self.snapshot_dir,
            prefix=SNAPSHOT_TMP_PREFIX,
            suffix=SNAPSHOT_TMP_SUFFIX,
            delete=False,
        ) as tmp_file:
            tmp_file.write(
                orjson.dumps(
                    metadata,
                    option=orjson.OPT_INDENT_2 | orjson.OPT_SORT_KEYS,
                )
            )
            tmp_file.flush()
            temp_path = Path(tmp_file.name)

        temp_path.replace(self.metadata_file)
        logger.debug("Saved metadata to %s", self.metadata_file)


def write_manifest(
    snapshot_dir: Path, items: Iterable[BackupItem], header: Iterable[str]
) -> Path:
    """Write ``manifest.txt`` for a staged snapshot.

    Args:
        snapshot_dir: Snapshot (or staging) directory
        items: Items copied into the snapshot
        header: Lines written as ``#`` comments before the records

    Returns:
        Path of the written manifest

    """
    manifest_file = snapshot_dir / SNAPSHOT_MANIFEST_FILENAME
    sep = SNAPSHOT_MANIFEST_SEPARATOR
    lines = [f"# {line}" for line in header]
    lines.extend(
        f"{item.kind}{sep}{item.source_path}{sep}{item.size_bytes}{sep}"
        f"{item.mtime}"
        for item in items
    )
    manifest_file.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return manifest_file


def parse_manifest_line(line: str, target: str = "") -> BackupItem:
    """Parse one ``kind|path|size|mtime`` record.

    Paths may themselves contain the separator, so the kind is split off
    the front and size/mtime off the back.

    Raises:
        IntegrityError: If the record is malformed

    """
    sep = SNAPSHOT_MANIFEST_SEPARATOR
    kind, _, rest = line.partition(sep)
    parts = rest.rsplit(sep, 2)
    if kind not in (ITEM_KIND_FILE, ITEM_KIND_DIR) or len(parts) != 3:  # noqa: PLR2004
        msg = f"malformed manifest record: {line!r}"
        raise IntegrityError(msg, target or None)

    path_str, size_str, mtime_str = parts
    path = Path(path_str)
    if not path.is_absolute():
        msg = f"manifest path is not absolute: {path_str!r}"
        raise IntegrityError(msg, target or None)
    try:
        size = int(size_str)
        mtime = int(mtime_str)
    except ValueError as e:
        msg = f"manifest size/mtime not numeric: {line!r}"
        raise IntegrityError(msg, target or None) from e

    return BackupItem(
        kind=kind,  # type: ignore[arg-type]
        source_path=path,
        size_bytes=size,
        mtime=mtime,
    )


def read_manifest(snapshot_dir: Path) -> list[BackupItem]:
    """Read all records from a snapshot's manifest.

    Raises:
        IntegrityError: If the manifest is missing or malformed

    """
    manifest_file = snapshot_dir / SNAPSHOT_MANIFEST_FILENAME
    target = snapshot_dir.name
    try:
        text = manifest_file.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        msg = "manifest file is missing"
        raise IntegrityError(msg, target) from e
    except OSError as e:
        msg = f"manifest file is unreadable: {e}"
        raise IntegrityError(msg, target) from e

    return [
        parse_manifest_line(line, target)
        for line in text.splitlines()
        if line.strip() and not line.startswith("#")
    ]


def probe_version(binary: str) -> str:
    """First line of ``<binary> --version`` or "not installed"."""
    path = shutil.which(binary)
    if path is None:
        return "not installed"
    try:
        result = subprocess.run(  # noqa: S603
            [path, "--version"],
            capture_output=True,
            text=True,
            timeout=VERSION_PROBE_TIMEOUT,
            check=False,
        )
    except (OSError, subprocess.TimeoutExpired):
        return "unknown"
    output = result.stdout.strip() or result.stderr.strip()
    return output.splitlines()[0] if output else "unknown"


def probe_tool_versions() -> dict[str, str]:
    """Versions of the shells/tools a snapshot is taken around."""
    return {
        "zsh_version": probe_version("zsh"),
        "starship_version": probe_version("starship"),
    }


def current_user() -> str:
    """Login name of the snapshot creator."""
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return os.environ.get("USER", "unknown")


def system_info() -> dict[str, str]:
    """Host details recorded in metadata."""
    return {
        "created_by": current_user(),
        "hostname": platform.node() or "unknown",
        "os_version": platform.platform(),
        "tool_version": __version__,
    }
