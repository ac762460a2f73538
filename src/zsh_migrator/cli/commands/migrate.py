"""Migrate command handler."""

from argparse import Namespace

from zsh_migrator.constants import EXIT_INVALID_ARGUMENT, EXIT_SUCCESS
from zsh_migrator.domain.features import (
    apply_overrides,
    default_flags,
    split_feature_ids,
)
from zsh_migrator.logger import get_logger

from .base import BaseCommandHandler

logger = get_logger(__name__)


class MigrateHandler(BaseCommandHandler):
    """Builds the flag selection and runs the migration."""

    def execute(self, args: Namespace) -> int:
        """Execute the migrate command."""
        auto = self.settings["migration"]["auto_mode"] and not args.no_auto
        flags, unknown = apply_overrides(
            default_flags(auto=auto),
            enable=split_feature_ids(args.enable),
            disable=split_feature_ids(args.disable),
        )
        if unknown:
            logger.error("❌ Unknown feature id(s): %s", ", ".join(unknown))
            return EXIT_INVALID_ARGUMENT

        logger.info("🚀 Migrating %s", self.orchestrator.zshrc_path)
        report = self.orchestrator.migrate(
            flags, dry_run=args.dry_run, skip_tools=args.skip_tools
        )

        if report.dry_run:
            logger.info("")
            logger.info("----- %s -----", report.shell_path)
            logger.info("%s", report.shell_content.rstrip("\n"))
            logger.info("----- %s -----", report.structured_path)
            logger.info("%s", report.structured_content.rstrip("\n"))
            logger.info("")

        logger.info(
            "Migrated %d aliases, %d exports and %d functions "
            "with %d features enabled",
            report.aliases,
            report.exports,
            report.functions,
            report.enabled_features,
        )
        if report.warnings:
            logger.warning(
                "⚠️  %d parse warnings, see above", report.warnings
            )
        if report.snapshot_id:
            logger.info("📦 Previous setup saved as %s", report.snapshot_id)
            logger.info("Run 'exec zsh' to load the new configuration")
        return EXIT_SUCCESS
