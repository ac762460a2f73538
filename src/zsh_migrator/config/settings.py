"""Settings manager for the settings.conf INI file."""

import configparser
from pathlib import Path

from zsh_migrator.config.migration import SettingsMigration
from zsh_migrator.config.parser import (
    ConfigCommentManager,
    new_config_parser,
)
from zsh_migrator.config.paths import Paths
from zsh_migrator.constants import (
    CONFIG_FILE_NAME,
    CONFIG_VERSION,
    DEFAULT_AUTO_MODE,
    DEFAULT_CONSOLE_LOG_LEVEL,
    DEFAULT_LOG_LEVEL,
    DEFAULT_RETENTION_DAYS,
    DEFAULT_SYNTAX_CHECK_TIMEOUT,
    DEFAULT_TRACKED_ITEMS,
    DEFAULT_ZSH_PLUGINS_DIR,
    DIRECTORY_KEYS,
    KEY_AUTO_MODE,
    KEY_CONFIG_VERSION,
    KEY_CONSOLE_LOG_LEVEL,
    KEY_LOG_LEVEL,
    KEY_RETENTION_DAYS,
    KEY_SYNTAX_CHECK_TIMEOUT,
    KEY_TRACKED_ITEMS,
    SECTION_BACKUP,
    SECTION_DEFAULT,
    SECTION_DIRECTORY,
    SECTION_MIGRATION,
)
from zsh_migrator.domain.types import (
    BackupSettings,
    DirectorySettings,
    MigrationSettings,
    MigratorSettings,
)
from zsh_migrator.exceptions import ConfigurationError
from zsh_migrator.logger import get_logger

logger = get_logger(__name__)

# Type alias for raw INI config dictionary
RawConfigDict = dict[str, str | dict[str, str]]

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class SettingsManager:
    """Loads and saves settings.conf."""

    def __init__(self, config_dir: Path | None = None) -> None:
        """Initialize settings manager.

        Args:
            config_dir: Configuration directory path
                (defaults to Paths.CONFIG_DIR)

        """
        self.config_dir = config_dir or Paths.CONFIG_DIR
        self.settings_file = self.config_dir / CONFIG_FILE_NAME
        self.migration = SettingsMigration(self.settings_file)

    def get_default_settings(self) -> RawConfigDict:
        """Get default settings as raw INI strings.

        Returns:
            Default configuration dictionary

        """
        return {
            KEY_CONFIG_VERSION: CONFIG_VERSION,
            KEY_LOG_LEVEL: DEFAULT_LOG_LEVEL,
            KEY_CONSOLE_LOG_LEVEL: DEFAULT_CONSOLE_LOG_LEVEL,
            SECTION_BACKUP: {
                KEY_RETENTION_DAYS: str(DEFAULT_RETENTION_DAYS),
                KEY_TRACKED_ITEMS: ", ".join(DEFAULT_TRACKED_ITEMS),
            },
            SECTION_MIGRATION: {
                KEY_AUTO_MODE: str(DEFAULT_AUTO_MODE).lower(),
                KEY_SYNTAX_CHECK_TIMEOUT: str(DEFAULT_SYNTAX_CHECK_TIMEOUT),
            },
            SECTION_DIRECTORY: {
                "backup": str(self.config_dir / "backups"),
                "logs": str(self.config_dir / "logs"),
                "zshrc": "~/.zshrc",
                "starship_config": "~/.config/starship.toml",
                "zsh_plugins": DEFAULT_ZSH_PLUGINS_DIR,
            },
        }

    def _create_config_from_defaults(
        self, defaults: RawConfigDict
    ) -> configparser.ConfigParser:
        """Create ConfigParser from defaults dictionary."""
        config = new_config_parser()

        flat_defaults = {
            key: value
            for key, value in defaults.items()
            if not isinstance(value, dict)
        }
        config.read_dict({SECTION_DEFAULT: flat_defaults})

        for key, value in defaults.items():
            if isinstance(value, dict):
                config.add_section(key)
                for subkey, subvalue in value.items():
                    config.set(key, subkey, subvalue)

        return config

    def load_settings(self) -> MigratorSettings:
        """Load settings, creating or migrating the file as needed.

        Returns:
            Typed settings

        Raises:
            ConfigurationError: If the file cannot be parsed or holds
                invalid values

        """
        defaults = self.get_default_settings()
        config = self._create_config_from_defaults(defaults)

        if not self.settings_file.exists():
            settings = self._convert_to_settings(config)
            self.save_settings(settings)
            logger.debug("Created default settings at %s", self.settings_file)
            return settings

        user_config = new_config_parser()
        try:
            user_config.read(self.settings_file, encoding="utf-8")
        except (configparser.Error, UnicodeDecodeError) as e:
            msg = f"cannot parse settings file: {e}"
            raise ConfigurationError(
                msg, str(self.settings_file), "settings file unchanged"
            ) from e

        if self.migration.needs_migration(user_config):
            self.migration.migrate(user_config, defaults)
            self.save_settings(self._convert_to_settings(user_config))

        config.read_dict(
            {
                section: {
                    key: value
                    for key, value in user_config.items(section, raw=True)
                    if not user_config.has_option(SECTION_DEFAULT, key)
                }
                for section in user_config.sections()
            }
        )
        config.read_dict({SECTION_DEFAULT: dict(user_config.defaults())})
        return self._convert_to_settings(config)

    def save_settings(self, settings: MigratorSettings) -> None:
        """Save settings to INI file with user-friendly comments.

        Args:
            settings: Settings to save

        """
        comment_manager = ConfigCommentManager()
        section_comments = comment_manager.get_section_comments()
        key_comments = comment_manager.get_key_comments()

        sections: dict[str, dict[str, str]] = {
            SECTION_DEFAULT: {
                KEY_CONFIG_VERSION: settings["config_version"],
                KEY_LOG_LEVEL: settings["log_level"],
                KEY_CONSOLE_LOG_LEVEL: settings["console_log_level"],
            },
            SECTION_BACKUP: {
                KEY_RETENTION_DAYS: str(settings["backup"]["retention_days"]),
                KEY_TRACKED_ITEMS: ", ".join(
                    str(path) for path in settings["backup"]["tracked_items"]
                ),
            },
            SECTION_MIGRATION: {
                KEY_AUTO_MODE: str(settings["migration"]["auto_mode"]).lower(),
                KEY_SYNTAX_CHECK_TIMEOUT: str(
                    settings["migration"]["syntax_check_timeout"]
                ),
            },
            SECTION_DIRECTORY: {
                key: str(value)
                for key, value in settings["directory"].items()
            },
        }

        self.config_dir.mkdir(parents=True, exist_ok=True)
        with self.settings_file.open("w", encoding="utf-8") as f:
            f.write(comment_manager.get_file_header())
            for section, values in sections.items():
                f.write(section_comments[section])
                f.write(f"[{section}]\n")
                for key, value in values.items():
                    inline_comment = key_comments[section].get(key, "")
                    if inline_comment:
                        f.write(f"{key} = {value}  {inline_comment}\n")
                    else:
                        f.write(f"{key} = {value}\n")

    def _get_int(
        self, config: configparser.ConfigParser, section: str, key: str
    ) -> int:
        raw = config.get(section, key)
        try:
            value = int(raw)
        except ValueError as e:
            msg = f"[{section}] {key} must be an integer, got {raw!r}"
            raise ConfigurationError(msg, str(self.settings_file)) from e
        if value < 0:
            msg = f"[{section}] {key} must not be negative"
            raise ConfigurationError(msg, str(self.settings_file))
        return value

    def _get_level(self, config: configparser.ConfigParser, key: str) -> str:
        level = config.get(SECTION_DEFAULT, key).upper()
        if level not in VALID_LOG_LEVELS:
            logger.warning("Unknown %s %r, using INFO", key, level)
            return "INFO"
        return level

    def _convert_to_settings(
        self, config: configparser.ConfigParser
    ) -> MigratorSettings:
        """Convert a populated parser to typed settings.

        Raises:
            ConfigurationError: If a value has the wrong type

        """
        try:
            auto_mode = config.getboolean(SECTION_MIGRATION, KEY_AUTO_MODE)
        except ValueError as e:
            msg = f"[{SECTION_MIGRATION}] {KEY_AUTO_MODE} must be true/false"
            raise ConfigurationError(msg, str(self.settings_file)) from e

        tracked_raw = config.get(SECTION_BACKUP, KEY_TRACKED_ITEMS)
        tracked_items = [
            Paths.expand_path(item.strip())
            for item in tracked_raw.split(",")
            if item.strip()
        ]

        directory_values = {
            key: config.get(SECTION_DIRECTORY, key) for key in DIRECTORY_KEYS
        }

        return MigratorSettings(
            config_version=config.get(SECTION_DEFAULT, KEY_CONFIG_VERSION),
            log_level=self._get_level(config, KEY_LOG_LEVEL),
            console_log_level=self._get_level(config, KEY_CONSOLE_LOG_LEVEL),
            backup=BackupSettings(
                retention_days=self._get_int(
                    config, SECTION_BACKUP, KEY_RETENTION_DAYS
                ),
                tracked_items=tracked_items,
            ),
            migration=MigrationSettings(
                auto_mode=auto_mode,
                syntax_check_timeout=self._get_int(
                    config, SECTION_MIGRATION, KEY_SYNTAX_CHECK_TIMEOUT
                ),
            ),
            directory=DirectorySettings(
                backup=Paths.expand_path(directory_values["backup"]),
                logs=Paths.expand_path(directory_values["logs"]),
                zshrc=Paths.expand_path(directory_values["zshrc"]),
                starship_config=Paths.expand_path(
                    directory_values["starship_config"]
                ),
                zsh_plugins=directory_values["zsh_plugins"],
            ),
        )
