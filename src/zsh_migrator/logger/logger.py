"""Public logging API.

- setup_logging(): wire the root logger once and return a named logger
- get_logger(): convenience wrapper used by every module
- set_console_level(): runtime override used by ``--verbose``
- flush_all_handlers(): wait for queued records to hit their handlers
- clear_logger_state(): reset everything between tests
"""

import atexit
import contextlib
import logging
import time
from pathlib import Path

from zsh_migrator.constants import ROOT_LOGGER_NAME
from zsh_migrator.logger.config import load_log_settings
from zsh_migrator.logger.handlers import setup_root_logger
from zsh_migrator.logger.state import get_state


def flush_all_handlers() -> None:
    """Flush all handlers in the QueueListener to ensure writes complete.

    QueueListener does not use task_done(), so the queue is polled until it
    drains (bounded by a timeout) before each handler is flushed.
    """
    state = get_state()
    if state.queue_listener is not None and state.log_queue is not None:
        timeout = 5.0
        start_time = time.time()
        while not state.log_queue.empty():
            if time.time() - start_time > timeout:
                break
            time.sleep(0.01)

        # Give the listener thread time to hand the last record over
        time.sleep(0.1)

        for handler in state.queue_listener.handlers:
            with contextlib.suppress(OSError, ValueError):
                handler.flush()


def _cleanup_logging() -> None:
    """Stop the QueueListener on interpreter exit."""
    state = get_state()
    if state.queue_listener is not None:
        flush_all_handlers()
        state.queue_listener.stop()
        state.queue_listener = None


atexit.register(_cleanup_logging)


def setup_logging(
    name: str = ROOT_LOGGER_NAME,
    console_level: str | None = None,
    file_level: str | None = None,
    log_file: Path | None = None,
    enable_file_logging: bool = True,  # noqa: FBT001, FBT002
) -> logging.Logger:
    """Configure logging once and return the requested logger.

    Logger Hierarchy:
        - Root logger: "zsh_migrator" (QueueHandler → Queue → Listener)
        - Child loggers: "zsh_migrator.core.parser", ... (propagate to root)

    Args:
        name: Logger name, typically __name__ for module-level loggers
        console_level: Console log level ("DEBUG", "INFO", "WARNING")
        file_level: File log level ("DEBUG", "INFO")
        log_file: Path to log file
            (default: ~/.config/zsh-migrator/logs/zsh-migrator.log)
        enable_file_logging: Whether to enable file logging

    Returns:
        Logger instance (singleton per name via logging.getLogger)

    Raises:
        LoggingSetupError: If file logging setup fails

    """
    state = get_state()
    with state.lock:
        if not state.root_initialized:
            if console_level is None or file_level is None or log_file is None:
                cfg_console, cfg_file, cfg_path = load_log_settings()
                console_level = console_level or cfg_console
                file_level = file_level or cfg_file
                log_file = log_file or cfg_path

            setup_root_logger(
                state,
                console_level,
                file_level,
                log_file,
                enable_file_logging,
            )

    return logging.getLogger(name)


def get_logger(
    name: str = ROOT_LOGGER_NAME,
    enable_file_logging: bool = True,  # noqa: FBT001, FBT002
) -> logging.Logger:
    """Get or create a logger.

    Use __name__ as the logger name for proper hierarchical logging:
        >>> logger = get_logger(__name__)
        >>> logger.info("Parsed %d aliases", len(aliases))

    Args:
        name: Logger name, typically __name__ for module loggers
        enable_file_logging: Whether to enable file logging (default: True)

    Returns:
        Configured logger instance (singleton per name)

    """
    return setup_logging(name=name, enable_file_logging=enable_file_logging)


def set_console_level(level: str) -> None:
    """Override the console handler level, leaving the file level as is."""
    state = get_state()
    if state.queue_listener is None:
        return
    for handler in state.queue_listener.handlers:
        if isinstance(handler, logging.StreamHandler) and not isinstance(
            handler, logging.FileHandler
        ):
            handler.setLevel(getattr(logging, level, logging.INFO))


def clear_logger_state() -> None:
    """Clear global logger state for testing purposes.

    Stops the QueueListener, closes handlers, resets the state flags and
    removes zsh_migrator loggers from the logging manager.

    Warning:
        Intended for tests only.

    """
    state = get_state()
    with state.lock:
        if state.queue_listener is not None:
            flush_all_handlers()
            state.queue_listener.stop()
            state.queue_listener = None

        state.log_queue = None
        state.root_initialized = False
        state.config_applied = False

        for logger_name in list(logging.Logger.manager.loggerDict.keys()):
            if logger_name.startswith(("test-", ROOT_LOGGER_NAME)):
                log_instance = logging.getLogger(logger_name)
                for handler in log_instance.handlers[:]:
                    handler.close()
                    log_instance.removeHandler(handler)
                if logger_name in logging.Logger.manager.loggerDict:
                    del logging.Logger.manager.loggerDict[logger_name]


__all__ = [
    "clear_logger_state",
    "flush_all_handlers",
    "get_logger",
    "set_console_level",
    "setup_logging",
]
