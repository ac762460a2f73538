"""Command handlers for zsh-migrator CLI.

This module contains all command handler implementations that provide
the core functionality for each CLI command.
"""

from .backup import BackupHandler
from .base import BaseCommandHandler
from .migrate import MigrateHandler
from .rollback import RollbackHandler
from .status import StatusHandler
from .verify import VerifyHandler

__all__ = [
    "BackupHandler",
    "BaseCommandHandler",
    "MigrateHandler",
    "RollbackHandler",
    "StatusHandler",
    "VerifyHandler",
]
