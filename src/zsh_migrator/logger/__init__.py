"""Logging utilities for zsh-migrator.

Architecture:
    Application → QueueHandler → Queue → QueueListener Thread
                                              ↓
                                    Console + File Handlers

Usage:
    >>> from zsh_migrator.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.info("Restoring %s", snapshot_id)  # Use %-style formatting

Rules:
    1. Always use: logger = get_logger(__name__)
    2. Never call logging.basicConfig()
    3. Handlers live only on the root 'zsh_migrator' logger
    4. Never use f-strings in log calls
"""

from typing import TYPE_CHECKING

from zsh_migrator.logger.config import (
    update_logger_from_config as _update_config,
)
from zsh_migrator.logger.formatters import (
    ColoredConsoleFormatter,
    HybridConsoleFormatter,
    SimpleConsoleFormatter,
)
from zsh_migrator.logger.handlers import LoggingSetupError
from zsh_migrator.logger.logger import (
    clear_logger_state,
    flush_all_handlers,
    get_logger,
    set_console_level,
    setup_logging,
)
from zsh_migrator.logger.state import _state, get_state

if TYPE_CHECKING:
    from zsh_migrator.domain.types import MigratorSettings

__all__ = [
    "ColoredConsoleFormatter",
    "HybridConsoleFormatter",
    "LoggingSetupError",
    "SimpleConsoleFormatter",
    "_state",  # For testing only
    "clear_logger_state",
    "flush_all_handlers",
    "get_logger",
    "set_console_level",
    "setup_logging",
    "update_logger_from_config",
]


def update_logger_from_config(
    settings: "MigratorSettings | None" = None,
) -> None:
    """Apply settings.conf log levels to the running handlers."""
    _update_config(get_state(), settings)
