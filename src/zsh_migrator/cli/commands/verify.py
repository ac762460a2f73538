"""Verify command handler."""

from argparse import Namespace

from zsh_migrator.constants import EXIT_SUCCESS, EXIT_VALIDATION_ERROR
from zsh_migrator.logger import get_logger

from .base import BaseCommandHandler

logger = get_logger(__name__)


class VerifyHandler(BaseCommandHandler):
    """Runs post-migration health checks."""

    def execute(self, args: Namespace) -> int:  # noqa: ARG002
        """Execute the verify command."""
        report = self.orchestrator.verify()
        for check in report.checks:
            mark = "✅" if check.passed else "❌"
            if check.detail and not check.passed:
                logger.info("%s %s: %s", mark, check.name, check.detail)
            else:
                logger.info("%s %s", mark, check.name)

        logger.info("Passed %.0f%% of checks", report.pass_ratio * 100)
        if not report.passed:
            logger.error("❌ Verification failed")
            return EXIT_VALIDATION_ERROR
        logger.info("✅ Verification passed")
        return EXIT_SUCCESS
