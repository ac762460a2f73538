"""Command-line interface for zsh-migrator."""

from zsh_migrator.cli.parser import CLIParser
from zsh_migrator.cli.runner import CLIRunner

__all__ = ["CLIParser", "CLIRunner"]
