"""INI parser utilities for zsh-migrator configuration.

This module provides helper classes for parsing INI configuration files
with support for inline comments and user-friendly documentation.
"""

import configparser
from datetime import datetime
from typing import Any

from zsh_migrator.constants import (
    CONFIG_VERSION,
    ISO_DATETIME_FORMAT,
    KEY_CONFIG_VERSION,
    KEY_TRACKED_ITEMS,
    SECTION_BACKUP,
    SECTION_DEFAULT,
    SECTION_DIRECTORY,
    SECTION_MIGRATION,
)


def _strip_inline_comment(value: str) -> str:
    """Strip inline comments from configuration values.

    Args:
        value: Configuration value that may contain inline comment

    Returns:
        Value with inline comment removed (anything after '  #')
    """
    if "  #" in value:
        return value.split("  #")[0].strip()
    return value


def new_config_parser() -> "CommentAwareConfigParser":
    """ConfigParser configured the way settings.conf is written."""
    return CommentAwareConfigParser(
        inline_comment_prefixes=("#", ";"),
        interpolation=None,
    )


class CommentAwareConfigParser(configparser.ConfigParser):
    """ConfigParser that strips inline comments when reading values."""

    def get(  # type: ignore[override]
        self,
        section: str,
        option: str,
        **kwargs: Any,  # noqa: ANN401
    ) -> str:
        """Get a configuration value with inline comments stripped."""
        value = super().get(section, option, **kwargs)
        if value is None:
            return value
        return _strip_inline_comment(value)


class ConfigCommentManager:
    """Manages configuration file comments for user-friendly documentation."""

    @staticmethod
    def get_file_header() -> str:
        """Generate file header comment with description and timestamp.

        Returns:
            Header comment string for the configuration file
        """
        timestamp = datetime.now().astimezone().strftime(ISO_DATETIME_FORMAT)
        return f"""# zsh-migrator Configuration
# Settings for migrating from oh-my-zsh to a standalone zshrc + Starship.
# You can modify these values to customize the behavior of the tool.
#
# Last updated: {timestamp}
# Configuration version: {CONFIG_VERSION}

"""

    @staticmethod
    def get_section_comments() -> dict[str, str]:
        """Get comments for each configuration section.

        Returns:
            Dictionary mapping section names to their comment strings
        """
        return {
            SECTION_DEFAULT: """# ========================================
# MAIN CONFIGURATION
# ========================================
# config_version: Version of configuration format (DO NOT EDIT)
# log_level: Detail level for log files (DEBUG, INFO, WARNING, ERROR)
# console_log_level: Console output detail level (DEBUG, INFO, etc.)

""",
            SECTION_BACKUP: """
# ========================================
# SNAPSHOTS
# ========================================
# retention_days: Age after which 'backup cleanup' removes snapshots
# tracked_items: Comma-separated files/directories captured by snapshots

""",
            SECTION_MIGRATION: """
# ========================================
# MIGRATION
# ========================================
# auto_mode: Enable every feature unless disabled on the command line
# syntax_check_timeout: Seconds allowed for 'zsh -n' on the new zshrc

""",
            SECTION_DIRECTORY: """
# ========================================
# PATHS
# ========================================
# Use absolute paths or paths starting with ~ for home directory.
#
# backup: Snapshot storage
# logs: Log files location
# zshrc: Shell config that is read and replaced
# starship_config: Prompt config written by the migration
# zsh_plugins: Plugin directory exported to the generated zshrc
#              (kept verbatim so $HOME stays unexpanded)

""",
        }

    @staticmethod
    def get_key_comments() -> dict[str, dict[str, str]]:
        """Get inline comments for specific configuration keys.

        Returns:
            Nested dictionary mapping section -> key -> comment
        """
        return {
            SECTION_DEFAULT: {
                KEY_CONFIG_VERSION: "# DO NOT MODIFY - Config format version",
            },
            SECTION_BACKUP: {
                KEY_TRACKED_ITEMS: "# comma-separated",
            },
            SECTION_MIGRATION: {},
            SECTION_DIRECTORY: {},
        }
