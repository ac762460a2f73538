"""Fixtures for snapshot tests."""

from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest

from zsh_migrator.core.backup import BackupManager

START = datetime(2026, 10, 18, 14, 25, 1, tzinfo=UTC)


class FakeClock:
    """Settable clock so snapshot ids are predictable."""

    def __init__(self, now: datetime = START) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def clock() -> FakeClock:
    """Clock frozen at a known instant."""
    return FakeClock()


@pytest.fixture
def home(tmp_path: Path) -> Path:
    """Home directory with a .zshrc and a .p10k.zsh."""
    home_dir = tmp_path / "home"
    home_dir.mkdir()
    (home_dir / ".zshrc").write_text("source $ZSH/oh-my-zsh.sh\n")
    (home_dir / ".p10k.zsh").write_text("typeset -g POWERLEVEL9K_MODE=nerd\n")
    return home_dir


@pytest.fixture
def tracked(home: Path) -> list[Path]:
    """Tracked items; the starship config does not exist yet."""
    return [
        home / ".zshrc",
        home / ".p10k.zsh",
        home / ".config" / "starship.toml",
    ]


@pytest.fixture
def manager(
    tmp_path: Path, home: Path, tracked: list[Path], clock: FakeClock
) -> BackupManager:
    """BackupManager over a temp home with a fake version probe."""
    return BackupManager(
        base_dir=tmp_path / "backups",
        tracked_items=tracked,
        home=home,
        version_probe=lambda: {
            "zsh_version": "zsh 5.9",
            "starship_version": "starship 1.20.1",
        },
        clock=clock,
    )
