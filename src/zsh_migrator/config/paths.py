"""Path constants and utilities for zsh-migrator configuration.

This module centralizes all path management for the application,
making it easy to reference and override paths consistently.
"""

from pathlib import Path

from zsh_migrator.constants import (
    CONFIG_DIR_NAME,
    DEFAULT_CONFIG_SUBDIR,
)


class Paths:
    """Application paths and directory structure."""

    # Base directories
    HOME_DIR = Path.home()
    CONFIG_DIR = HOME_DIR / CONFIG_DIR_NAME / DEFAULT_CONFIG_SUBDIR

    @classmethod
    def expand_path(cls, path_str: str) -> Path:
        """Expand and resolve path with ~ and relative path support.

        Args:
            path_str: Path string to expand (e.g., "~/.zshrc" or "./relative")

        Returns:
            Expanded and resolved Path object

        Example:
            >>> Paths.expand_path("~/.zshrc")
            Path('/home/user/.zshrc')
        """
        return Path(path_str).expanduser().resolve(strict=False)
