"""Logging formatters for console output.

- ColoredConsoleFormatter: ANSI colored level names
- SimpleConsoleFormatter: message only
- HybridConsoleFormatter: message only for INFO, colored structure otherwise

Command handlers report progress through ``logger.info``, so INFO lines must
look like plain terminal output while warnings keep their context.
"""

import logging

from zsh_migrator.constants import LOG_COLORS


class ColoredConsoleFormatter(logging.Formatter):
    """Console formatter that colors the level name."""

    def format(self, record: logging.LogRecord) -> str:
        """Format the record with a colored level name.

        The record's levelname is swapped only for the duration of the call
        so other handlers sharing the record see the plain name.

        Args:
            record: The log record to format

        Returns:
            Formatted log message with ANSI color codes for the level name

        """
        if record.levelname in LOG_COLORS:
            color = LOG_COLORS[record.levelname]
            reset = LOG_COLORS["RESET"]
            original_levelname = record.levelname
            record.levelname = f"{color}{original_levelname}{reset}"
            try:
                return super().format(record)
            finally:
                record.levelname = original_levelname

        return super().format(record)


class SimpleConsoleFormatter(logging.Formatter):
    """Formatter that shows only the message content."""

    def format(self, record: logging.LogRecord) -> str:
        """Return the rendered message without metadata."""
        return record.getMessage()


class HybridConsoleFormatter(logging.Formatter):
    """Simple format for INFO, colored structured format for other levels.

    Example Output:
        INFO:     "📦 Snapshot created: migration_20261018_101500"
        WARNING:  "10:15:00 - zsh_migrator.core.parser - WARNING - ..."

    """

    def __init__(
        self,
        fmt: str | None = None,
        datefmt: str | None = None,
    ) -> None:
        """Initialize hybrid formatter.

        Args:
            fmt: Format string for structured messages
            datefmt: Date format string for timestamps

        """
        super().__init__(fmt, datefmt)
        self._simple_formatter = SimpleConsoleFormatter()
        self._colored_formatter = ColoredConsoleFormatter(fmt, datefmt)

    def format(self, record: logging.LogRecord) -> str:
        """Pick the simple or structured formatter by level."""
        if record.levelno == logging.INFO:
            return self._simple_formatter.format(record)
        return self._colored_formatter.format(record)
