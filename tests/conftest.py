"""Pytest configuration and fixtures for zsh-migrator tests."""

import logging
import os
import tempfile

import pytest

# Must be set before zsh_migrator is imported so the rotating file handler
# never writes into the real ~/.config/zsh-migrator/logs.
os.environ.setdefault(
    "ZSH_MIGRATOR_LOG_DIR", tempfile.mkdtemp(prefix="zsh-migrator-logs-")
)


@pytest.fixture(autouse=True)
def enable_log_propagation():
    """Enable log propagation for all loggers during tests.

    This allows pytest's caplog fixture to capture logs from all loggers,
    even those created with propagate=False in production code.
    """
    original_propagation = {}
    for name in list(logging.Logger.manager.loggerDict.keys()):
        if name.startswith("zsh_migrator"):
            logger = logging.getLogger(name)
            original_propagation[name] = logger.propagate
            logger.propagate = True

    yield

    for name, propagate_value in original_propagation.items():
        logger = logging.getLogger(name)
        logger.propagate = propagate_value


@pytest.fixture
def fake_home(tmp_path, monkeypatch):
    """Empty home directory exported as $HOME."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    return home


@pytest.fixture
def settings(fake_home):
    """Settings pointing every path into the fake home."""
    from zsh_migrator.domain.types import (
        BackupSettings,
        DirectorySettings,
        MigrationSettings,
        MigratorSettings,
    )

    config_dir = fake_home / ".config" / "zsh-migrator"
    return MigratorSettings(
        config_version="1.1.0",
        log_level="INFO",
        console_log_level="WARNING",
        backup=BackupSettings(
            retention_days=30,
            tracked_items=[
                fake_home / ".zshrc",
                fake_home / ".config" / "starship.toml",
            ],
        ),
        migration=MigrationSettings(auto_mode=True, syntax_check_timeout=5),
        directory=DirectorySettings(
            backup=config_dir / "backups",
            logs=config_dir / "logs",
            zshrc=fake_home / ".zshrc",
            starship_config=fake_home / ".config" / "starship.toml",
            zsh_plugins="$HOME/.oh-my-zsh/custom/plugins",
        ),
    )


@pytest.fixture
def host_ok():
    """System validator that sees zsh 5.9, plenty of space and UTF-8."""
    from zsh_migrator.core.system import SystemValidator

    return SystemValidator(
        which=lambda _name: "/usr/bin/zsh",
        zsh_version=lambda: "zsh 5.9 (x86_64-pc-linux-gnu)",
        disk_usage=lambda _path: (10**12, 0, 10**12),
        environ={"SHELL": "/usr/bin/zsh", "LANG": "en_US.UTF-8"},
    )
