"""CLI argument parser for zsh-migrator.

Handles parsing of command-line arguments and provides a clean
interface for defining CLI commands and their options.
"""

import argparse
from argparse import Namespace
from collections.abc import Sequence

from zsh_migrator.domain.features import Feature


class CLIParser:
    """Command-line argument parser for zsh-migrator."""

    def parse_args(self, argv: Sequence[str] | None = None) -> Namespace:
        """Parse command-line arguments.

        Args:
            argv: Arguments to parse; ``sys.argv[1:]`` when None

        Returns:
            Namespace: Parsed arguments namespace.

        """
        parser = self.build_parser()
        return parser.parse_args(argv)

    def build_parser(self) -> argparse.ArgumentParser:
        """Create the fully populated argument parser."""
        parser = self._create_main_parser()
        self._add_global_options(parser)
        self._add_subcommands(parser)
        return parser

    def _create_main_parser(self) -> argparse.ArgumentParser:
        """Create the main argument parser."""
        return argparse.ArgumentParser(
            prog="zsh-migrator",
            description=(
                "Migrate from oh-my-zsh to a standalone zshrc + Starship"
            ),
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
  # Preview the generated configuration
  %(prog)s migrate --dry-run

  # Migrate without the battery and time prompt modules
  %(prog)s migrate --disable battery,time

  # Undo the last migration
  %(prog)s rollback

  # Check the result
  %(prog)s status
  %(prog)s verify

  # Snapshot management
  %(prog)s backup list
  %(prog)s backup restore migration_20261018_142501
  %(prog)s backup cleanup --days 14 --dry-run
            """,
        )

    def _add_global_options(self, parser: argparse.ArgumentParser) -> None:
        """Add --version and --verbose to the main parser.

        Args:
            parser (argparse.ArgumentParser): The main parser to add
                options to.

        """
        parser.add_argument(
            "--version",
            action="store_true",
            help="Show zsh-migrator version and exit",
        )
        parser.add_argument(
            "--verbose",
            action="store_true",
            help="Show debug output on the console",
        )

    def _add_subcommands(self, parser: argparse.ArgumentParser) -> None:
        """Add all subcommands to the parser."""
        subparsers = parser.add_subparsers(
            dest="command", help="Available commands"
        )

        self._add_migrate_command(subparsers)
        self._add_rollback_command(subparsers)
        self._add_status_command(subparsers)
        self._add_verify_command(subparsers)
        self._add_backup_command(subparsers)

    def _add_migrate_command(self, subparsers) -> None:
        """Add migrate command parser."""
        feature_ids = ", ".join(feature.value for feature in Feature)
        migrate_parser = subparsers.add_parser(
            "migrate",
            help="Replace oh-my-zsh with a generated zshrc and starship.toml",
            epilog=f"Feature ids: {feature_ids}",
        )
        migrate_parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Show the generated files without snapshotting or writing",
        )
        migrate_parser.add_argument(
            "--skip-tools",
            action="store_true",
            help="Do not generate aliases for eza, bat, fd, rg or fzf",
        )
        migrate_parser.add_argument(
            "--enable",
            action="append",
            metavar="IDS",
            help="Comma-separated feature ids to switch on",
        )
        migrate_parser.add_argument(
            "--disable",
            action="append",
            metavar="IDS",
            help="Comma-separated feature ids to switch off",
        )
        migrate_parser.add_argument(
            "--no-auto",
            action="store_true",
            help="Start with every feature off and opt in with --enable",
        )

    def _add_rollback_command(self, subparsers) -> None:
        """Add rollback command parser."""
        rollback_parser = subparsers.add_parser(
            "rollback",
            help="Restore the configuration from before a migration",
        )
        rollback_parser.add_argument(
            "--snapshot",
            metavar="ID",
            help="Snapshot to restore (default: latest non-safety snapshot)",
        )

    def _add_status_command(self, subparsers) -> None:
        """Add status command parser."""
        subparsers.add_parser(
            "status", help="Show the current shell setup and snapshots"
        )

    def _add_verify_command(self, subparsers) -> None:
        """Add verify command parser."""
        subparsers.add_parser(
            "verify", help="Run post-migration health checks"
        )

    def _add_backup_command(self, subparsers) -> None:
        """Add backup command parser with its nested actions."""
        backup_parser = subparsers.add_parser(
            "backup",
            help="Manage configuration snapshots",
        )
        actions = backup_parser.add_subparsers(
            dest="backup_action", required=True, help="Snapshot actions"
        )

        create_parser = actions.add_parser("create", help="Take a snapshot")
        create_parser.add_argument(
            "--name", default=None, help="Snapshot name prefix"
        )
        create_parser.add_argument(
            "--description", default="", help="Free text stored in metadata"
        )

        actions.add_parser("list", help="List snapshots")

        info_parser = actions.add_parser("info", help="Show snapshot details")
        info_parser.add_argument("snapshot_id", metavar="ID")

        validate_parser = actions.add_parser(
            "validate", help="Check snapshot structure"
        )
        validate_parser.add_argument(
            "snapshot_id",
            metavar="ID",
            nargs="?",
            help="Snapshot to check (default: all)",
        )

        restore_parser = actions.add_parser(
            "restore", help="Restore a snapshot"
        )
        restore_parser.add_argument("snapshot_id", metavar="ID")

        delete_parser = actions.add_parser("delete", help="Delete a snapshot")
        delete_parser.add_argument("snapshot_id", metavar="ID")
        delete_parser.add_argument(
            "--force", action="store_true", help="Do not ask for confirmation"
        )

        cleanup_parser = actions.add_parser(
            "cleanup", help="Delete snapshots older than the retention period"
        )
        cleanup_parser.add_argument(
            "--days",
            type=int,
            default=None,
            help="Retention in days (default: retention_days setting)",
        )
        cleanup_parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Only list what would be deleted",
        )

        actions.add_parser("stats", help="Show snapshot statistics")
