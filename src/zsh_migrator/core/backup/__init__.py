"""Snapshot creation, validation, restore and cleanup."""

from zsh_migrator.core.backup.service import BackupManager

__all__ = ["BackupManager"]
