"""Rollback command handler."""

from argparse import Namespace

from zsh_migrator.constants import EXIT_SUCCESS
from zsh_migrator.domain.types import RestoreReport
from zsh_migrator.exceptions import RestoreError
from zsh_migrator.logger import get_logger

from .base import BaseCommandHandler

logger = get_logger(__name__)


def report_restore(report: RestoreReport) -> int:
    """Log a restore outcome, raising RestoreError on partial failure."""
    logger.info("🛡️  Safety snapshot: %s", report.safety_snapshot_id)
    if report.failed:
        for path in report.failed_paths:
            logger.error("❌ Not restored: %s", path)
        msg = f"{report.failed} item(s) could not be restored"
        raise RestoreError(
            msg,
            report.snapshot_id,
            f"previous state kept in {report.safety_snapshot_id}",
        )
    logger.info(
        "✅ Restored %d items from %s", report.restored, report.snapshot_id
    )
    return EXIT_SUCCESS


class RollbackHandler(BaseCommandHandler):
    """Undoes a migration by restoring a snapshot."""

    def execute(self, args: Namespace) -> int:
        """Execute the rollback command."""
        report = self.orchestrator.rollback(args.snapshot)
        return report_restore(report)
