"""Tests for settings file upgrades."""

from pathlib import Path

import pytest
from packaging.version import Version

from zsh_migrator.config.migration import (
    SettingsMigration,
    parse_config_version,
)
from zsh_migrator.config.parser import new_config_parser
from zsh_migrator.constants import CONFIG_VERSION
from zsh_migrator.exceptions import ConfigurationError

DEFAULTS = {
    "config_version": CONFIG_VERSION,
    "log_level": "INFO",
    "backup": {"retention_days": "30", "tracked_items": "~/.zshrc"},
}


def _parser(text: str):
    parser = new_config_parser()
    parser.read_string(text)
    return parser


@pytest.mark.parametrize(
    ("value", "expected"),
    [("1.0.0", "1.0.0"), ("2.1", "2.1"), ("garbage", "0.0.0")],
)
def test_parse_config_version(value: str, expected: str) -> None:
    """Invalid versions count as the oldest."""
    assert parse_config_version(value) == Version(expected)


def test_needs_migration(tmp_path: Path) -> None:
    """Missing or older versions need migrating."""
    migration = SettingsMigration(tmp_path / "settings.conf")

    assert migration.needs_migration(_parser("[backup]\n"))
    assert migration.needs_migration(
        _parser("[DEFAULT]\nconfig_version = 1.0.0\n")
    )
    assert not migration.needs_migration(
        _parser(f"[DEFAULT]\nconfig_version = {CONFIG_VERSION}\n")
    )


def test_migrate_adds_missing_keys_only(tmp_path: Path) -> None:
    """User values are kept and only absent keys are added."""
    settings_file = tmp_path / "settings.conf"
    settings_file.write_text("[backup]\nretention_days = 5\n")
    config = _parser(settings_file.read_text())

    added = SettingsMigration(settings_file).migrate(config, DEFAULTS)

    assert config.get("backup", "retention_days") == "5"
    assert config.get("backup", "tracked_items") == "~/.zshrc"
    assert config.get("DEFAULT", "config_version") == CONFIG_VERSION
    assert sorted(added) == ["DEFAULT.log_level", "backup.tracked_items"]


def test_backup_failure_raises(tmp_path: Path) -> None:
    """A settings file that cannot be copied aborts the migration."""
    migration = SettingsMigration(tmp_path / "missing" / "settings.conf")

    with pytest.raises(ConfigurationError):
        migration.create_backup()
