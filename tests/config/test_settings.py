"""Tests for SettingsManager."""

from pathlib import Path

import pytest

from zsh_migrator.config import SettingsManager
from zsh_migrator.config.parser import _strip_inline_comment, new_config_parser
from zsh_migrator.constants import CONFIG_VERSION
from zsh_migrator.exceptions import ConfigurationError


@pytest.fixture
def manager(tmp_path: Path, fake_home: Path) -> SettingsManager:
    """Settings manager writing into a temp config directory."""
    return SettingsManager(config_dir=tmp_path / "config")


def _write(manager: SettingsManager, text: str) -> None:
    manager.config_dir.mkdir(parents=True, exist_ok=True)
    manager.settings_file.write_text(text, encoding="utf-8")


def test_missing_file_creates_defaults(
    manager: SettingsManager, fake_home: Path
) -> None:
    """First load writes a commented default file."""
    settings = manager.load_settings()

    assert manager.settings_file.exists()
    text = manager.settings_file.read_text(encoding="utf-8")
    assert text.startswith("# zsh-migrator Configuration")
    assert "[backup]" in text
    assert "DO NOT MODIFY" in text

    assert settings["config_version"] == CONFIG_VERSION
    assert settings["backup"]["retention_days"] == 30
    assert settings["migration"]["auto_mode"] is True
    assert settings["directory"]["zshrc"] == fake_home / ".zshrc"
    assert settings["directory"]["backup"] == manager.config_dir / "backups"
    assert settings["directory"]["zsh_plugins"] == (
        "$HOME/.oh-my-zsh/custom/plugins"
    )
    assert fake_home / ".oh-my-zsh" in settings["backup"]["tracked_items"]


def test_defaults_survive_reload(manager: SettingsManager) -> None:
    """A written default file loads back to the same values."""
    first = manager.load_settings()
    second = manager.load_settings()

    assert first == second


def test_user_values_override_defaults(
    manager: SettingsManager, fake_home: Path
) -> None:
    """Values in the file win; missing keys fall back to defaults."""
    _write(
        manager,
        f"""\
[DEFAULT]
config_version = {CONFIG_VERSION}
log_level = debug

[backup]
retention_days = 7  # one week
tracked_items = ~/.zshrc, ~/.zprofile

[migration]
auto_mode = false

[directory]
zshrc = ~/dotfiles/zshrc
""",
    )

    settings = manager.load_settings()

    assert settings["log_level"] == "DEBUG"
    assert settings["backup"]["retention_days"] == 7
    assert settings["backup"]["tracked_items"] == [
        fake_home / ".zshrc",
        fake_home / ".zprofile",
    ]
    assert settings["migration"]["auto_mode"] is False
    assert settings["migration"]["syntax_check_timeout"] == 30
    assert settings["directory"]["zshrc"] == fake_home / "dotfiles" / "zshrc"
    assert settings["directory"]["starship_config"] == (
        fake_home / ".config" / "starship.toml"
    )


def test_old_version_is_migrated(manager: SettingsManager) -> None:
    """Old files are backed up, completed and rewritten."""
    _write(
        manager,
        """\
[DEFAULT]
config_version = 1.0.0

[backup]
retention_days = 9
""",
    )

    settings = manager.load_settings()

    assert settings["config_version"] == CONFIG_VERSION
    assert settings["backup"]["retention_days"] == 9
    backups = list(manager.config_dir.glob("settings.conf.*.backup"))
    assert len(backups) == 1
    assert "config_version = 1.0.0" in backups[0].read_text(encoding="utf-8")
    rewritten = manager.settings_file.read_text(encoding="utf-8")
    assert f"config_version = {CONFIG_VERSION}" in rewritten
    assert "syntax_check_timeout" in rewritten


def test_current_version_not_migrated(manager: SettingsManager) -> None:
    """No backup copy is made for an up to date file."""
    manager.load_settings()
    manager.load_settings()

    assert not list(manager.config_dir.glob("*.backup"))


@pytest.mark.parametrize(
    ("section", "line"),
    [
        ("backup", "retention_days = soon"),
        ("backup", "retention_days = -1"),
        ("migration", "syntax_check_timeout = 1.5"),
        ("migration", "auto_mode = maybe"),
    ],
)
def test_invalid_values_rejected(
    manager: SettingsManager, section: str, line: str
) -> None:
    """Wrongly typed values raise ConfigurationError."""
    _write(
        manager,
        f"[DEFAULT]\nconfig_version = {CONFIG_VERSION}\n\n[{section}]\n{line}\n",
    )

    with pytest.raises(ConfigurationError):
        manager.load_settings()


def test_unparseable_file_rejected(manager: SettingsManager) -> None:
    """A file without section headers is a ConfigurationError."""
    _write(manager, "retention_days = 3\n")

    with pytest.raises(ConfigurationError) as exc_info:
        manager.load_settings()

    assert "settings file unchanged" in str(exc_info.value)
    assert manager.settings_file.read_text() == "retention_days = 3\n"


def test_unknown_log_level_falls_back(
    manager: SettingsManager, caplog: pytest.LogCaptureFixture
) -> None:
    """An unknown level is replaced with INFO and reported."""
    _write(
        manager,
        f"[DEFAULT]\nconfig_version = {CONFIG_VERSION}\nlog_level = LOUD\n",
    )

    settings = manager.load_settings()

    assert settings["log_level"] == "INFO"
    assert "LOUD" in caplog.text


def test_strip_inline_comment() -> None:
    """Only a double-space hash starts an inline comment."""
    assert _strip_inline_comment("7  # days") == "7"
    assert _strip_inline_comment("a#b") == "a#b"


def test_parser_keeps_percent_signs() -> None:
    """Interpolation is off so shell-like values load verbatim."""
    parser = new_config_parser()
    parser.read_string("[directory]\nzsh_plugins = %HOME%/plugins\n")

    assert parser.get("directory", "zsh_plugins") == "%HOME%/plugins"
