"""Centralized constants module for zsh-migrator.

This module serves as the single source of truth for all shared constants
across the zsh-migrator codebase. Constants are organized by logical
categories and use typing.Final annotations to ensure immutability.

Usage:
    from zsh_migrator.constants import CONFIG_VERSION
"""

from typing import Final

# =============================================================================
# Configuration Constants
# =============================================================================

# Configuration version - single source of truth for config versioning
CONFIG_VERSION: Final[str] = "1.1.0"

# Configuration directory and file names
CONFIG_FILE_NAME: Final[str] = "settings.conf"
CONFIG_DIR_NAME: Final[str] = ".config"
DEFAULT_CONFIG_SUBDIR: Final[str] = "zsh-migrator"

# Configuration defaults
DEFAULT_LOG_LEVEL: Final[str] = "INFO"
DEFAULT_CONSOLE_LOG_LEVEL: Final[str] = "INFO"
DEFAULT_RETENTION_DAYS: Final[int] = 30
DEFAULT_AUTO_MODE: Final[bool] = True
DEFAULT_SYNTAX_CHECK_TIMEOUT: Final[int] = 30

# Items snapshotted before any destructive write
DEFAULT_TRACKED_ITEMS: Final[tuple[str, ...]] = (
    "~/.zshrc",
    "~/.oh-my-zsh",
    "~/.config/starship.toml",
    "~/.zsh_history",
    "~/.zsh_sessions",
)

# Date/time formats used in config headers and saved timestamps
ISO_DATETIME_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

# Config section and key names
SECTION_DEFAULT: Final[str] = "DEFAULT"
SECTION_BACKUP: Final[str] = "backup"
SECTION_MIGRATION: Final[str] = "migration"
SECTION_DIRECTORY: Final[str] = "directory"

KEY_CONFIG_VERSION: Final[str] = "config_version"
KEY_LOG_LEVEL: Final[str] = "log_level"
KEY_CONSOLE_LOG_LEVEL: Final[str] = "console_log_level"
KEY_RETENTION_DAYS: Final[str] = "retention_days"
KEY_TRACKED_ITEMS: Final[str] = "tracked_items"
KEY_AUTO_MODE: Final[str] = "auto_mode"
KEY_SYNTAX_CHECK_TIMEOUT: Final[str] = "syntax_check_timeout"

# Known directory keys expected in the directory section
DIRECTORY_KEYS: Final[tuple[str, ...]] = (
    "backup",
    "logs",
    "zshrc",
    "starship_config",
    "zsh_plugins",
)

# =============================================================================
# Configuration migration constants
# =============================================================================

CONFIG_BACKUP_TIMESTAMP_FORMAT: Final[str] = "%Y%m%d_%H%M%S"
CONFIG_BACKUP_SUFFIX_TEMPLATE: Final[str] = ".{timestamp}.backup"
CONFIG_FALLBACK_OLD_VERSION: Final[str] = "0.0.0"

# =============================================================================
# Logging Constants
# =============================================================================

LOG_ROTATION_THRESHOLD_BYTES: Final[int] = 1024 * 1024  # 1 MB
LOG_BACKUP_COUNT: Final[int] = 3
LOG_FILE_NAME: Final[str] = "zsh-migrator.log"
LOG_DIR_ENV_VAR: Final[str] = "ZSH_MIGRATOR_LOG_DIR"
ROOT_LOGGER_NAME: Final[str] = "zsh_migrator"

LOG_CONSOLE_FORMAT: Final[str] = (
    "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
LOG_CONSOLE_DATE_FORMAT: Final[str] = "%H:%M:%S"
LOG_FILE_FORMAT: Final[str] = (
    "%(asctime)s - %(name)s - %(levelname)s - "
    "%(funcName)s:%(lineno)d - %(message)s"
)
LOG_FILE_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

LOG_COLORS: Final[dict[str, str]] = {
    "DEBUG": "\033[36m",  # Cyan
    "INFO": "\033[32m",  # Green
    "WARNING": "\033[33m",  # Yellow
    "ERROR": "\033[31m",  # Red
    "CRITICAL": "\033[35m",  # Magenta
    "RESET": "\033[0m",
}

# =============================================================================
# Backup / snapshot constants
# =============================================================================

SNAPSHOT_TIMESTAMP_FORMAT: Final[str] = "%Y%m%d_%H%M%S"
SNAPSHOT_METADATA_FILENAME: Final[str] = "metadata.json"
SNAPSHOT_MANIFEST_FILENAME: Final[str] = "manifest.txt"
SNAPSHOT_FILES_DIRNAME: Final[str] = "files"
SNAPSHOT_HOME_PREFIX: Final[str] = "home"
SNAPSHOT_ROOT_PREFIX: Final[str] = "root"
SNAPSHOT_STAGING_SUFFIX: Final[str] = ".partial"
SNAPSHOT_LOCK_FILENAME: Final[str] = ".lock"
SNAPSHOT_TMP_PREFIX: Final[str] = ".tmp_"
SNAPSHOT_TMP_SUFFIX: Final[str] = ".tmp"
SNAPSHOT_MANIFEST_SEPARATOR: Final[str] = "|"

MIGRATION_SNAPSHOT_NAME: Final[str] = "migration"
SAFETY_SNAPSHOT_NAME: Final[str] = "pre_restore_safety"
MANUAL_SNAPSHOT_NAME: Final[str] = "manual"

ITEM_KIND_FILE: Final[str] = "file"
ITEM_KIND_DIR: Final[str] = "dir"

# Seconds allowed for "<tool> --version" probes recorded in metadata
VERSION_PROBE_TIMEOUT: Final[int] = 5

# =============================================================================
# Pre-migration system checks
# =============================================================================

MIN_ZSH_VERSION: Final[str] = "5.0"
# Free space required on the home filesystem before a snapshot is taken
MIN_FREE_SPACE_MB: Final[int] = 100
# Markers of rc files known to break once oh-my-zsh is gone
BROKEN_RC_MARKERS: Final[tuple[str, ...]] = ("omz_urlencode", "iconv")

# =============================================================================
# Generated document constants
# =============================================================================

GENERATED_TIMESTAMP_PREFIX: Final[str] = "# Generated: "
PROMPT_INIT_LINE: Final[str] = 'eval "$(starship init zsh)"'
USER_SECTION_TITLE: Final[str] = "User configuration (migrated)"
DEFAULT_ZSH_PLUGINS_DIR: Final[str] = "$HOME/.oh-my-zsh/custom/plugins"
STARSHIP_SCHEMA_URL: Final[str] = "https://starship.rs/config-schema.json"
SHELL_TMP_PREFIX: Final[str] = ".zshrc."
SHELL_TMP_SUFFIX: Final[str] = ".new"

# Post-migration verification passes at this share of checks
VERIFY_PASS_RATIO: Final[float] = 0.8

# =============================================================================
# Exit codes
# =============================================================================

EXIT_SUCCESS: Final[int] = 0
EXIT_GENERAL_ERROR: Final[int] = 1
EXIT_INVALID_ARGUMENT: Final[int] = 2
EXIT_FILE_NOT_FOUND: Final[int] = 3
EXIT_CONFIGURATION_ERROR: Final[int] = 9
EXIT_VALIDATION_ERROR: Final[int] = 11
EXIT_BACKUP_ERROR: Final[int] = 12
EXIT_ROLLBACK_ERROR: Final[int] = 13
EXIT_INTERRUPTED: Final[int] = 130
