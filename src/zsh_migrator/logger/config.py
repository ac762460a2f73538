"""Loading and applying log settings.

Bootstrap values come from constants and the environment; settings.conf
levels are applied afterwards by ``update_logger_from_config`` because the
config package itself logs while it loads.
"""

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING

from zsh_migrator.constants import (
    CONFIG_DIR_NAME,
    DEFAULT_CONFIG_SUBDIR,
    DEFAULT_CONSOLE_LOG_LEVEL,
    DEFAULT_LOG_LEVEL,
    LOG_DIR_ENV_VAR,
    LOG_FILE_NAME,
)
from zsh_migrator.exceptions import ZshMigratorError

if TYPE_CHECKING:
    from zsh_migrator.domain.types import MigratorSettings
    from zsh_migrator.logger.state import _LoggerState


def load_log_settings() -> tuple[str, str, Path]:
    """Load default console level, file level, and file path.

    Environment Variable Override:
        ZSH_MIGRATOR_LOG_DIR: Overrides the log directory. The test suite
        sets it so test runs never write into the user's config directory.

    Returns:
        Tuple of (console_level, file_level, log_path)

    """
    env_log_dir = os.getenv(LOG_DIR_ENV_VAR)
    if env_log_dir:
        log_path = Path(env_log_dir).expanduser() / LOG_FILE_NAME
    else:
        log_path = (
            Path.home()
            / CONFIG_DIR_NAME
            / DEFAULT_CONFIG_SUBDIR
            / "logs"
            / LOG_FILE_NAME
        )

    return DEFAULT_CONSOLE_LOG_LEVEL, DEFAULT_LOG_LEVEL, log_path


def apply_levels(
    state: "_LoggerState", console_level: str, file_level: str
) -> None:
    """Set handler levels on the running QueueListener.

    Args:
        state: Logger state object
        console_level: Level name for the console handler
        file_level: Level name for the rotating file handler

    """
    if state.queue_listener is None:
        return

    for handler in state.queue_listener.handlers:
        if isinstance(handler, RotatingFileHandler):
            handler.setLevel(getattr(logging, file_level, logging.INFO))
        elif isinstance(handler, logging.StreamHandler):
            handler.setLevel(getattr(logging, console_level, logging.INFO))


def update_logger_from_config(
    state: "_LoggerState", settings: "MigratorSettings | None" = None
) -> None:
    """Apply log levels from settings.conf to the live handlers.

    Errors while loading settings leave the bootstrap levels in place; the
    settings loader reports its own problems.

    Args:
        state: Logger state object (from logger.state module)
        settings: Already loaded settings; read from disk when None

    """
    if settings is not None:
        apply_levels(
            state, settings["console_log_level"], settings["log_level"]
        )
        state.config_applied = True
        return

    try:
        # Import here to avoid circular dependency
        from zsh_migrator.config import SettingsManager  # noqa: PLC0415

        settings = SettingsManager().load_settings()
    except (
        ImportError,
        KeyError,
        AttributeError,
        OSError,
        ZshMigratorError,
    ):
        return

    apply_levels(state, settings["console_log_level"], settings["log_level"])
    state.config_applied = True
