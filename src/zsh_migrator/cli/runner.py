"""CLI runner for zsh-migrator.

Orchestrates the execution of CLI commands by routing parsed
arguments to the appropriate command handlers, and maps every
ZshMigratorError to its exit code.
"""

from argparse import Namespace
from collections.abc import Sequence

from zsh_migrator import __version__
from zsh_migrator.cli.commands import (
    BackupHandler,
    BaseCommandHandler,
    MigrateHandler,
    RollbackHandler,
    StatusHandler,
    VerifyHandler,
)
from zsh_migrator.cli.parser import CLIParser
from zsh_migrator.config import SettingsManager
from zsh_migrator.constants import (
    EXIT_INTERRUPTED,
    EXIT_INVALID_ARGUMENT,
    EXIT_SUCCESS,
)
from zsh_migrator.core.backup import BackupManager
from zsh_migrator.core.generator import SyntaxChecker
from zsh_migrator.core.system import SystemValidator
from zsh_migrator.core.workflows.migration import MigrationOrchestrator
from zsh_migrator.domain.types import MigratorSettings
from zsh_migrator.exceptions import ZshMigratorError
from zsh_migrator.logger import (
    flush_all_handlers,
    get_logger,
    set_console_level,
    update_logger_from_config,
)

logger = get_logger(__name__)


class CLIRunner:
    """CLI command runner and orchestrator."""

    def __init__(
        self,
        settings_manager: SettingsManager | None = None,
        checker: SyntaxChecker | None = None,
        system_validator: SystemValidator | None = None,
    ) -> None:
        """Initialize CLI runner.

        Args:
            settings_manager: Settings source (default config dir if None)
            checker: Shell syntax oracle passed to the orchestrator
            system_validator: Host checks passed to the orchestrator

        """
        self.settings_manager = settings_manager or SettingsManager()
        self.checker = checker
        self.system_validator = system_validator
        self.command_handlers: dict[str, BaseCommandHandler] = {}

    def _init_command_handlers(self, settings: MigratorSettings) -> None:
        """Create handlers sharing one backup manager and orchestrator."""
        backup_manager = BackupManager.create_default(settings)
        orchestrator = MigrationOrchestrator(
            settings,
            backup_manager=backup_manager,
            checker=self.checker,
            system_validator=self.system_validator,
        )
        deps = (settings, backup_manager, orchestrator)
        self.command_handlers = {
            "migrate": MigrateHandler(*deps),
            "rollback": RollbackHandler(*deps),
            "status": StatusHandler(*deps),
            "verify": VerifyHandler(*deps),
            "backup": BackupHandler(*deps),
        }

    def run(self, argv: Sequence[str] | None = None) -> int:
        """Run the CLI application.

        Parses arguments, handles global flags, validates commands,
        and routes to the appropriate handler.

        Args:
            argv: Arguments to parse; ``sys.argv[1:]`` when None

        Returns:
            Process exit code

        """
        args = CLIParser().parse_args(argv)

        if args.version:
            print(__version__)
            return EXIT_SUCCESS

        if not args.command:
            logger.error("❌ No command specified. Use --help.")
            return EXIT_INVALID_ARGUMENT

        try:
            settings = self.settings_manager.load_settings()
            update_logger_from_config(settings)
            if args.verbose:
                set_console_level("DEBUG")
            self._init_command_handlers(settings)
            return self._execute_command(args)
        except KeyboardInterrupt:
            logger.info("\n⏹️  Operation cancelled by user")
            return EXIT_INTERRUPTED
        except ZshMigratorError as e:
            logger.error("❌ %s", e)
            return e.exit_code
        finally:
            flush_all_handlers()

    def _execute_command(self, args: Namespace) -> int:
        """Execute the specified command with the appropriate handler."""
        handler = self.command_handlers.get(args.command)
        if handler is None:
            logger.error("❌ Unknown command: %s", args.command)
            return EXIT_INVALID_ARGUMENT
        logger.debug("Running command %s", args.command)
        return handler.execute(args)
