"""Upgrade of settings.conf files written by older releases.

The migration process:
1. Compare the file's config_version with the current one
2. Copy the old file to ``settings.conf.<timestamp>.backup``
3. Merge in keys the old file lacks, keeping every user value
4. Bump config_version; the caller rewrites the file
"""

import configparser
import shutil
from pathlib import Path

from packaging.version import InvalidVersion, Version

from zsh_migrator.constants import (
    CONFIG_BACKUP_SUFFIX_TEMPLATE,
    CONFIG_BACKUP_TIMESTAMP_FORMAT,
    CONFIG_FALLBACK_OLD_VERSION,
    CONFIG_VERSION,
    KEY_CONFIG_VERSION,
    SECTION_DEFAULT,
)
from zsh_migrator.exceptions import ConfigurationError
from zsh_migrator.logger import get_logger
from zsh_migrator.utils.datetime_utils import get_current_datetime_local

logger = get_logger(__name__)


def parse_config_version(value: str) -> Version:
    """Parse a config_version, treating garbage as the oldest version."""
    try:
        return Version(value)
    except InvalidVersion:
        logger.warning(
            "Invalid config_version %r, treating as %s",
            value,
            CONFIG_FALLBACK_OLD_VERSION,
        )
        return Version(CONFIG_FALLBACK_OLD_VERSION)


class SettingsMigration:
    """Brings an old settings file up to the current format."""

    def __init__(self, settings_file: Path) -> None:
        """Initialize migration handler.

        Args:
            settings_file: Settings file path

        """
        self.settings_file = settings_file

    def needs_migration(self, user_config: configparser.ConfigParser) -> bool:
        """Check if the loaded file predates the current format."""
        current = user_config.get(
            SECTION_DEFAULT,
            KEY_CONFIG_VERSION,
            fallback=CONFIG_FALLBACK_OLD_VERSION,
        )
        return parse_config_version(current) < Version(CONFIG_VERSION)

    def migrate(
        self,
        user_config: configparser.ConfigParser,
        defaults: dict[str, str | dict[str, str]],
    ) -> list[str]:
        """Merge missing keys into ``user_config`` and bump its version.

        Args:
            user_config: Parsed user settings, modified in place
            defaults: Default values as raw INI strings

        Returns:
            ``section.key`` names that were added

        Raises:
            ConfigurationError: If the backup copy cannot be written

        """
        old_version = user_config.get(
            SECTION_DEFAULT,
            KEY_CONFIG_VERSION,
            fallback=CONFIG_FALLBACK_OLD_VERSION,
        )
        logger.info(
            "Migrating settings from %s to %s", old_version, CONFIG_VERSION
        )
        backup = self.create_backup()

        added = self._merge_missing_fields(user_config, defaults)
        user_config.set(SECTION_DEFAULT, KEY_CONFIG_VERSION, CONFIG_VERSION)

        if added:
            logger.info("Added settings: %s", ", ".join(added))
        logger.info("Previous settings saved to %s", backup)
        return added

    def create_backup(self) -> Path:
        """Copy the settings file next to itself with a timestamp suffix.

        Returns:
            Path to backup file

        """
        timestamp = get_current_datetime_local().strftime(
            CONFIG_BACKUP_TIMESTAMP_FORMAT
        )
        backup = self.settings_file.with_name(
            self.settings_file.name
            + CONFIG_BACKUP_SUFFIX_TEMPLATE.format(timestamp=timestamp)
        )
        try:
            shutil.copy2(self.settings_file, backup)
        except OSError as e:
            msg = f"cannot back up settings before migration: {e}"
            raise ConfigurationError(
                msg, str(self.settings_file), "settings file unchanged"
            ) from e
        return backup

    @staticmethod
    def _merge_missing_fields(
        user_config: configparser.ConfigParser,
        defaults: dict[str, str | dict[str, str]],
    ) -> list[str]:
        added: list[str] = []
        for key, value in defaults.items():
            if isinstance(value, dict):
                if not user_config.has_section(key):
                    user_config.add_section(key)
                for subkey, subvalue in value.items():
                    if not user_config.has_option(key, subkey):
                        user_config.set(key, subkey, subvalue)
                        added.append(f"{key}.{subkey}")
            elif key != KEY_CONFIG_VERSION and not user_config.has_option(
                SECTION_DEFAULT, key
            ):
                user_config.set(SECTION_DEFAULT, key, value)
                added.append(f"{SECTION_DEFAULT}.{key}")
        return added
