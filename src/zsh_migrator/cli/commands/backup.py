"""Backup command coordinator.

Thin coordinator that delegates to BackupManager and displays results.
"""

from argparse import Namespace

from zsh_migrator.constants import (
    EXIT_BACKUP_ERROR,
    EXIT_SUCCESS,
    MANUAL_SNAPSHOT_NAME,
)
from zsh_migrator.core.backup.helpers import format_size
from zsh_migrator.logger import get_logger

from .base import BaseCommandHandler
from .rollback import report_restore

logger = get_logger(__name__)


class BackupHandler(BaseCommandHandler):
    """Thin coordinator for backup command."""

    def execute(self, args: Namespace) -> int:
        """Execute the backup command."""
        actions = {
            "create": self._create,
            "list": self._list,
            "info": self._info,
            "validate": self._validate,
            "restore": self._restore,
            "delete": self._delete,
            "cleanup": self._cleanup,
            "stats": self._stats,
        }
        return actions[args.backup_action](args)

    def _create(self, args: Namespace) -> int:
        """Create snapshot."""
        name = args.name or MANUAL_SNAPSHOT_NAME
        logger.info("Creating snapshot %s...", name)
        self.backup_manager.create_snapshot(name, args.description)
        return EXIT_SUCCESS

    def _list(self, args: Namespace) -> int:  # noqa: ARG002
        """List snapshots, oldest first."""
        snapshots = self.backup_manager.list_snapshots()
        if not snapshots:
            logger.info(
                "No snapshots found in %s", self.backup_manager.base_dir
            )
            return EXIT_SUCCESS

        logger.info("📦 Snapshots (%d):", len(snapshots))
        for snap in snapshots:
            logger.info(
                "  %s %s  %d items, %s",
                "✅" if snap.valid else "❌",
                snap.snapshot_id,
                snap.items,
                format_size(snap.size_bytes),
            )
        return EXIT_SUCCESS

    def _info(self, args: Namespace) -> int:
        """Show metadata and manifest of one snapshot."""
        info = self.backup_manager.get_snapshot_info(args.snapshot_id)
        logger.info("📋 Snapshot %s", args.snapshot_id)
        for key in (
            "backup_name",
            "description",
            "created_at",
            "created_by",
            "hostname",
            "os_version",
            "zsh_version",
            "starship_version",
            "tool_version",
        ):
            if info.get(key):
                logger.info("  %-17s %s", f"{key}:", info[key])
        logger.info(
            "  %-17s %s",
            "backup_size:",
            format_size(info.get("backup_size", 0)),
        )
        logger.info("  %-17s %s", "valid:", "yes" if info["valid"] else "no")
        logger.info("  Items:")
        for item in info["items"]:
            logger.info(
                "    [%s] %s (%s)",
                item.kind,
                item.source_path,
                format_size(item.size_bytes),
            )
        return EXIT_SUCCESS

    def _validate(self, args: Namespace) -> int:
        """Validate one or all snapshots."""
        if args.snapshot_id:
            results = {
                args.snapshot_id: self.backup_manager.validate_snapshot(
                    args.snapshot_id
                )
            }
        else:
            results = self.backup_manager.validate_all()

        if not results:
            logger.info("No snapshots to validate")
            return EXIT_SUCCESS

        for snapshot_id, valid in results.items():
            logger.info("%s %s", "✅" if valid else "❌", snapshot_id)
        if all(results.values()):
            return EXIT_SUCCESS
        invalid = sum(1 for valid in results.values() if not valid)
        logger.error("❌ %d invalid snapshot(s)", invalid)
        return EXIT_BACKUP_ERROR

    def _restore(self, args: Namespace) -> int:
        """Restore a snapshot."""
        logger.info("🔄 Restoring %s...", args.snapshot_id)
        report = self.backup_manager.restore_snapshot(args.snapshot_id)
        return report_restore(report)

    def _delete(self, args: Namespace) -> int:
        """Delete a snapshot after confirmation."""
        self.backup_manager.delete_snapshot(args.snapshot_id, force=args.force)
        return EXIT_SUCCESS

    def _cleanup(self, args: Namespace) -> int:
        """Delete snapshots past the retention period."""
        days = (
            args.days
            if args.days is not None
            else self.settings["backup"]["retention_days"]
        )
        report = self.backup_manager.cleanup_older_than(
            days, dry_run=args.dry_run
        )
        if report.dry_run:
            logger.info(
                "%d snapshot(s) older than %d days would be deleted",
                report.count,
                days,
            )
        return EXIT_SUCCESS

    def _stats(self, args: Namespace) -> int:  # noqa: ARG002
        """Show aggregate snapshot numbers."""
        stats = self.backup_manager.get_stats()
        logger.info("📊 Snapshot statistics")
        logger.info("  Total:  %d (%d valid)", stats.total, stats.valid)
        logger.info("  Size:   %s", format_size(stats.size_bytes))
        if stats.oldest:
            logger.info("  Oldest: %s", stats.oldest)
            logger.info("  Newest: %s", stats.newest)
        return EXIT_SUCCESS
