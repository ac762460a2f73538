"""Base command handler for zsh-migrator CLI commands.

This module provides the abstract base class that all command handlers
inherit from, ensuring consistent interface and shared functionality
across commands.
"""

from abc import ABC, abstractmethod
from argparse import Namespace

from zsh_migrator.core.backup import BackupManager
from zsh_migrator.core.workflows.migration import MigrationOrchestrator
from zsh_migrator.domain.types import MigratorSettings
from zsh_migrator.logger import get_logger

logger = get_logger(__name__)


class BaseCommandHandler(ABC):
    """Abstract base class for all command handlers.

    Usage:
        settings = SettingsManager().load_settings()
        backup = BackupManager.create_default(settings)
        orchestrator = MigrationOrchestrator(settings, backup_manager=backup)

        handler = ConcreteHandler(settings, backup, orchestrator)
        exit_code = handler.execute(args)

    Note:
        CLIRunner acts as the composition root, creating and injecting
        all dependencies.
    """

    def __init__(
        self,
        settings: MigratorSettings,
        backup_manager: BackupManager,
        orchestrator: MigrationOrchestrator,
    ) -> None:
        """Initialize the command handler with shared dependencies.

        Args:
            settings: Loaded settings
            backup_manager: Snapshot service
            orchestrator: Migration workflow

        """
        self.settings = settings
        self.backup_manager = backup_manager
        self.orchestrator = orchestrator

    @abstractmethod
    def execute(self, args: Namespace) -> int:
        """Execute the command.

        Args:
            args: Parsed command-line arguments

        Returns:
            Process exit code

        Raises:
            ZshMigratorError: Mapped to an exit code by CLIRunner

        """
