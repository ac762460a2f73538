"""Configuration management for zsh-migrator.

Public API:
    SettingsManager: Load and save settings.conf
    Paths: Default file and directory locations
"""

from zsh_migrator.config.paths import Paths
from zsh_migrator.config.settings import SettingsManager

__all__ = ["Paths", "SettingsManager"]
