"""Status command handler."""

from argparse import Namespace

from zsh_migrator.constants import EXIT_SUCCESS
from zsh_migrator.logger import get_logger

from .base import BaseCommandHandler

logger = get_logger(__name__)


def _mark(value: bool) -> str:  # noqa: FBT001
    return "✅" if value else "❌"


class StatusHandler(BaseCommandHandler):
    """Shows what the current shell setup looks like."""

    def execute(self, args: Namespace) -> int:  # noqa: ARG002
        """Execute the status command."""
        status = self.orchestrator.status()
        logger.info("zsh-migrator status")
        logger.info(
            "  %s .zshrc present (%s)",
            _mark(status.zshrc_exists),
            self.orchestrator.zshrc_path,
        )
        logger.info(
            "  %s oh-my-zsh installed", _mark(status.oh_my_zsh_installed)
        )
        logger.info(
            "  %s Starship initialized in .zshrc",
            _mark(status.starship_initialized),
        )
        logger.info(
            "  %s starship.toml present",
            _mark(status.starship_config_exists),
        )
        logger.info("  Snapshots: %d", status.snapshot_count)
        if status.latest_snapshot:
            logger.info("  Latest snapshot: %s", status.latest_snapshot)
        return EXIT_SUCCESS
