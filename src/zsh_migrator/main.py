"""Main CLI entry point for zsh-migrator.

This module provides the minimal entry point for the command-line
interface, delegating all functionality to specialized command
handlers and CLI components.
"""

import sys

from zsh_migrator.cli import CLIRunner
from zsh_migrator.logger import get_logger

logger = get_logger(__name__)


def main() -> None:
    """Run the CLI application and exit with its status code."""
    logger.debug("CLI started")
    sys.exit(CLIRunner().run())


if __name__ == "__main__":
    main()
