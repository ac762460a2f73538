"""BackupManager for creating and managing configuration snapshots.

This module provides the main service for:
- Creating timestamped snapshots of the tracked shell configuration
- Listing, validating and describing snapshots
- Restoring a snapshot behind a mandatory safety snapshot
- Cleaning up and deleting old snapshots
"""

import shutil
from collections.abc import Callable, Iterable
from datetime import datetime, timedelta
from pathlib import Path
from typing import TYPE_CHECKING, Any

from zsh_migrator.constants import (
    SAFETY_SNAPSHOT_NAME,
    SNAPSHOT_FILES_DIRNAME,
    SNAPSHOT_LOCK_FILENAME,
    SNAPSHOT_STAGING_SUFFIX,
)
from zsh_migrator.core.backup.helpers import (
    SnapshotId,
    copy_item,
    format_size,
    is_valid_snapshot_name,
    parse_snapshot_id,
    stored_relative_path,
)
from zsh_migrator.core.backup.metadata import (
    SnapshotMetadata,
    probe_tool_versions,
    read_manifest,
    system_info,
    write_manifest,
)
from zsh_migrator.core.backup.restore import restore_items
from zsh_migrator.core.locking import LockManager
from zsh_migrator.domain.types import (
    BackupItem,
    BackupStats,
    CleanupReport,
    RestoreReport,
    SnapshotSummary,
)
from zsh_migrator.exceptions import (
    BackupIOError,
    IntegrityError,
    NotFoundError,
)
from zsh_migrator.logger import get_logger
from zsh_migrator.utils.datetime_utils import (
    format_snapshot_timestamp,
    get_current_datetime_local,
)

if TYPE_CHECKING:
    from zsh_migrator.domain.types import MigratorSettings

logger = get_logger(__name__)

VersionProbe = Callable[[], dict[str, str]]
Confirm = Callable[[str], bool]


def prompt_confirm(snapshot_id: str) -> bool:
    """Ask on stdin whether a snapshot may be deleted."""
    try:
        answer = input(f"Delete snapshot {snapshot_id}? [y/N]: ")
    except EOFError:
        return False
    return answer.strip().lower() in ("y", "yes")


class BackupManager:
    """Create, inspect, restore and prune configuration snapshots.

    Snapshots live in ``base_dir`` as ``<name>_<YYYYmmdd_HHMMSS>``
    directories holding ``metadata.json``, ``manifest.txt`` and a
    ``files/`` tree. A snapshot is written once and never modified after
    it has been moved into place.
    """

    def __init__(
        self,
        base_dir: Path,
        tracked_items: Iterable[Path],
        home: Path | None = None,
        lock_path: Path | None = None,
        version_probe: VersionProbe | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize backup manager.

        Args:
            base_dir: Directory holding all snapshots
            tracked_items: Files and directories captured by each snapshot
            home: Home directory used for stored path mapping
            lock_path: Lock file; defaults to ``<base_dir>/.lock``
            version_probe: Returns tool versions for metadata
            clock: Source of the current local time

        """
        self.base_dir = base_dir
        self.tracked_items = tuple(tracked_items)
        self.home = home if home is not None else Path.home()
        self.lock = LockManager(
            lock_path or base_dir / SNAPSHOT_LOCK_FILENAME
        )
        self.version_probe = version_probe or probe_tool_versions
        self.clock = clock or get_current_datetime_local

    @classmethod
    def create_default(cls, settings: "MigratorSettings") -> "BackupManager":
        """Create BackupManager from loaded settings.

        Args:
            settings: Loaded settings dictionary

        Returns:
            Configured BackupManager instance

        """
        return cls(
            base_dir=settings["directory"]["backup"],
            tracked_items=settings["backup"]["tracked_items"],
        )

    def create_snapshot(self, name: str, description: str = "") -> str:
        """Snapshot all existing tracked items.

        Args:
            name: Snapshot name prefix, e.g. "migration"
            description: Free text stored in metadata

        Returns:
            The new snapshot id

        Raises:
            LockError: If another instance holds the lock
            BackupIOError: If copying or writing fails; nothing is left
                behind in the backup directory

        """
        with self.lock:
            return self._create_unlocked(name, description)

    def _next_snapshot_id(self, name: str) -> str:
        stamp = format_snapshot_timestamp(self.clock())
        snapshot_id = f"{name}_{stamp}"
        sequence = 2
        while (self.base_dir / snapshot_id).exists():
            snapshot_id = f"{name}_{stamp}-{sequence}"
            sequence += 1
        return snapshot_id

    def _create_unlocked(self, name: str, description: str) -> str:
        """Create a snapshot; the caller must hold the lock."""
        if not is_valid_snapshot_name(name):
            msg = "name may only contain letters, digits, '.', '_' and '-'"
            raise BackupIOError(msg, name, "no snapshot created")

        try:
            self.base_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            msg = f"cannot create backup directory: {e}"
            raise BackupIOError(msg, str(self.base_dir)) from e

        snapshot_id = self._next_snapshot_id(name)
        staging = self.base_dir / f".{snapshot_id}{SNAPSHOT_STAGING_SUFFIX}"
        final = self.base_dir / snapshot_id

        try:
            items = self._stage_items(staging)
            self._write_metadata(staging, snapshot_id, name, description, items)
            staging.rename(final)
        except OSError as e:
            shutil.rmtree(staging, ignore_errors=True)
            shutil.rmtree(final, ignore_errors=True)
            logger.exception("Snapshot %s failed", snapshot_id)
            msg = f"could not write snapshot: {e}"
            raise BackupIOError(
                msg, snapshot_id, "partial snapshot removed"
            ) from e

        if not self.validate_snapshot(snapshot_id):
            shutil.rmtree(final, ignore_errors=True)
            msg = "snapshot failed its self-check"
            raise BackupIOError(msg, snapshot_id, "partial snapshot removed")

        logger.info(
            "📦 Snapshot created: %s (%d items)", snapshot_id, len(items)
        )
        return snapshot_id

    def _stage_items(self, staging: Path) -> list[BackupItem]:
        files_dir = staging / SNAPSHOT_FILES_DIRNAME
        files_dir.mkdir(parents=True)
        items: list[BackupItem] = []
        for source in self.tracked_items:
            if not source.exists():
                if source.is_symlink():
                    logger.warning(
                        "Skipping tracked item %s: symlink target is missing",
                        source,
                    )
                else:
                    logger.debug("Skipping missing tracked item %s", source)
                continue
            destination = files_dir / stored_relative_path(source, self.home)
            items.append(copy_item(source, destination))
        return items

    def _write_metadata(
        self,
        staging: Path,
        snapshot_id: str,
        name: str,
        description: str,
        items: list[BackupItem],
    ) -> None:
        created_at = self.clock().isoformat()
        total_size = sum(item.size_bytes for item in items)
        metadata: dict[str, Any] = {
            "backup_name": name,
            "snapshot_id": snapshot_id,
            "description": description,
            "created_at": created_at,
            "home_dir": str(self.home),
            "backup_size": total_size,
            "items_backed_up": len(items),
        }
        metadata.update(system_info())
        metadata.update(self.version_probe())
        SnapshotMetadata(staging).save(metadata)

        write_manifest(
            staging,
            items,
            header=(
                f"zsh-migrator snapshot {snapshot_id}",
                f"Created: {created_at}",
                "Format: kind|path|size|mtime",
            ),
        )

    def _snapshot_ids(self) -> list[tuple[SnapshotId, str]]:
        if not self.base_dir.is_dir():
            return []
        found: list[tuple[SnapshotId, str]] = []
        for entry in self.base_dir.iterdir():
            if entry.name.startswith(".") or not entry.is_dir():
                continue
            parsed = parse_snapshot_id(entry.name)
            if parsed is not None:
                found.append((parsed, entry.name))
        found.sort(key=lambda pair: pair[0].sort_key)
        return found

    def _require(self, snapshot_id: str) -> Path:
        path = self.base_dir / snapshot_id
        if (
            snapshot_id.startswith(".")
            or "/" in snapshot_id
            or parse_snapshot_id(snapshot_id) is None
            or not path.is_dir()
        ):
            msg = "no such snapshot"
            raise NotFoundError(msg, snapshot_id, "no files touched")
        return path

    def _summary(self, parsed: SnapshotId, snapshot_id: str) -> SnapshotSummary:
        path = self.base_dir / snapshot_id
        try:
            metadata = SnapshotMetadata(path).load()
        except IntegrityError:
            metadata = {}
        return SnapshotSummary(
            snapshot_id=snapshot_id,
            name=str(metadata.get("backup_name", parsed.name)),
            created_at=str(
                metadata.get("created_at", parsed.timestamp.isoformat())
            ),
            path=path,
            items=int(metadata.get("items_backed_up", 0)),
            size_bytes=int(metadata.get("backup_size", 0)),
            valid=self.validate_snapshot(snapshot_id),
        )

    def list_snapshots(self) -> list[SnapshotSummary]:
        """All snapshots, oldest first."""
        return [
            self._summary(parsed, snapshot_id)
            for parsed, snapshot_id in self._snapshot_ids()
        ]

    def validate_snapshot(self, snapshot_id: str) -> bool:
        """Structural check of one snapshot.

        Returns:
            True if the directory, metadata and manifest are all sound

        """
        path = self.base_dir / snapshot_id
        if not path.is_dir():
            logger.debug("Snapshot %s: directory missing", snapshot_id)
            return False
        try:
            metadata = SnapshotMetadata(path).load()
            items = read_manifest(path)
        except IntegrityError as e:
            logger.debug("Snapshot %s invalid: %s", snapshot_id, e)
            return False

        if metadata.get("items_backed_up") != len(items):
            logger.debug(
                "Snapshot %s: metadata counts %s items, manifest has %d",
                snapshot_id,
                metadata.get("items_backed_up"),
                len(items),
            )
            return False
        return True

    def validate_all(self) -> dict[str, bool]:
        """Validation result for every snapshot, keyed by id."""
        return {
            snapshot_id: self.validate_snapshot(snapshot_id)
            for _, snapshot_id in self._snapshot_ids()
        }

    def get_snapshot_info(self, snapshot_id: str) -> dict[str, Any]:
        """Metadata plus parsed manifest items of one snapshot.

        Raises:
            NotFoundError: If the snapshot does not exist
            IntegrityError: If metadata or manifest cannot be read

        """
        path = self._require(snapshot_id)
        info = SnapshotMetadata(path).load()
        info["items"] = read_manifest(path)
        info["valid"] = self.validate_snapshot(snapshot_id)
        return info

    def latest_snapshot(
        self, *, exclude_safety: bool = True
    ) -> SnapshotSummary | None:
        """Most recent snapshot, skipping pre-restore safety ones."""
        for parsed, snapshot_id in reversed(self._snapshot_ids()):
            if exclude_safety and parsed.name == SAFETY_SNAPSHOT_NAME:
                continue
            return self._summary(parsed, snapshot_id)
        return None

    def get_stats(self) -> BackupStats:
        """Aggregate numbers over all snapshots."""
        snapshots = self.list_snapshots()
        return BackupStats(
            total=len(snapshots),
            valid=sum(1 for snap in snapshots if snap.valid),
            size_bytes=sum(snap.size_bytes for snap in snapshots),
            oldest=snapshots[0].snapshot_id if snapshots else None,
            newest=snapshots[-1].snapshot_id if snapshots else None,
        )

    def restore_snapshot(self, snapshot_id: str) -> RestoreReport:
        """Restore a snapshot's items to their original paths.

        A ``pre_restore_safety`` snapshot of the current state is always
        taken first.

        Args:
            snapshot_id: Snapshot to restore

        Returns:
            RestoreReport with restored and failed counts

        Raises:
            NotFoundError: If the snapshot does not exist
            IntegrityError: If the snapshot fails validation
            BackupIOError: If the safety snapshot cannot be created
            LockError: If another instance holds the lock

        """
        path = self._require(snapshot_id)
        with self.lock:
            if not self.validate_snapshot(snapshot_id):
                msg = "snapshot failed validation, refusing to restore"
                raise IntegrityError(msg, snapshot_id, "no files touched")

            metadata = SnapshotMetadata(path).load()
            items = read_manifest(path)
            home = Path(metadata.get("home_dir", str(self.home)))

            logger.info("🛡️  Creating safety snapshot before restore")
            safety_id = self._create_unlocked(
                SAFETY_SNAPSHOT_NAME, f"Safety snapshot before {snapshot_id}"
            )

            restored, failed = restore_items(path, items, home)

        if failed:
            logger.warning(
                "Restored %d of %d items from %s",
                restored,
                len(items),
                snapshot_id,
            )
        else:
            logger.info(
                "✅ Restored %d items from %s", restored, snapshot_id
            )
        return RestoreReport(
            snapshot_id=snapshot_id,
            safety_snapshot_id=safety_id,
            restored=restored,
            failed=len(failed),
            failed_paths=tuple(failed),
        )

    def cleanup_older_than(
        self, days: int, *, dry_run: bool = False
    ) -> CleanupReport:
        """Delete snapshots whose directory mtime is older than ``days``.

        Args:
            days: Retention period in days
            dry_run: Only report candidates

        Returns:
            CleanupReport listing candidate ids

        """
        cutoff = (self.clock() - timedelta(days=days)).timestamp()
        with self.lock:
            candidates = [
                snapshot_id
                for _, snapshot_id in self._snapshot_ids()
                if (self.base_dir / snapshot_id).stat().st_mtime < cutoff
            ]
            if dry_run:
                for snapshot_id in candidates:
                    logger.info("Would delete %s", snapshot_id)
                return CleanupReport(tuple(candidates), 0, dry_run=True)

            deleted = 0
            for snapshot_id in candidates:
                try:
                    shutil.rmtree(self.base_dir / snapshot_id)
                except OSError as e:
                    logger.warning("Failed to delete %s: %s", snapshot_id, e)
                    continue
                logger.debug("Deleted old snapshot %s", snapshot_id)
                deleted += 1

        logger.info(
            "🧹 Removed %d snapshots older than %d days", deleted, days
        )
        return CleanupReport(tuple(candidates), deleted, dry_run=False)

    def delete_snapshot(
        self,
        snapshot_id: str,
        *,
        force: bool = False,
        confirm: Confirm | None = None,
    ) -> bool:
        """Delete one snapshot.

        Args:
            snapshot_id: Snapshot to delete
            force: Skip confirmation
            confirm: Confirmation callback; prompts on stdin by default

        Returns:
            True if deleted, False if the confirmation was declined

        Raises:
            NotFoundError: If the snapshot does not exist
            BackupIOError: If the directory cannot be removed

        """
        path = self._require(snapshot_id)
        if not force and not (confirm or prompt_confirm)(snapshot_id):
            logger.info("Deletion of %s cancelled", snapshot_id)
            return False

        with self.lock:
            try:
                shutil.rmtree(path)
            except OSError as e:
                msg = f"could not delete snapshot: {e}"
                raise BackupIOError(msg, snapshot_id) from e

        logger.info("🗑️  Deleted snapshot %s", snapshot_id)
        return True

    @staticmethod
    def describe_size(size_bytes: int) -> str:
        """Human readable snapshot size."""
        return format_size(size_bytes)
