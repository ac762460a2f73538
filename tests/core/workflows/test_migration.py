"""Tests for MigrationOrchestrator."""

import stat
from pathlib import Path

import pytest
import toml

from zsh_migrator.constants import PROMPT_INIT_LINE
from zsh_migrator.core.system import SystemValidator
from zsh_migrator.core.workflows.migration import (
    MigrationOrchestrator,
    last_meaningful_line,
)
from zsh_migrator.domain.features import Feature, default_flags
from zsh_migrator.exceptions import NotFoundError, ValidationError

OMZ_RC = """\
export ZSH="$HOME/.oh-my-zsh"
ZSH_THEME="powerlevel10k/powerlevel10k"
plugins=(git docker)
source $ZSH/oh-my-zsh.sh

alias ll='ls -la'
export EDITOR=vim
greet() {
  echo "hi"
}
"""


@pytest.fixture
def zshrc(fake_home: Path) -> Path:
    """An oh-my-zsh style rc file."""
    path = fake_home / ".zshrc"
    path.write_text(OMZ_RC, encoding="utf-8")
    return path


@pytest.fixture
def orchestrator(
    settings, fake_home: Path, host_ok
) -> MigrationOrchestrator:
    """Orchestrator with an accepting syntax check and no tools."""
    return MigrationOrchestrator(
        settings,
        system_validator=host_ok,
        checker=lambda _path: True,
        tool_detector=dict,
        oh_my_zsh_dir=fake_home / ".oh-my-zsh",
    )


def test_dry_run_writes_nothing(
    orchestrator: MigrationOrchestrator, zshrc: Path
) -> None:
    """A dry run reports the documents but leaves disk untouched."""
    report = orchestrator.migrate(default_flags(), dry_run=True)

    assert report.dry_run
    assert report.snapshot_id is None
    assert (report.aliases, report.exports, report.functions) == (1, 2, 1)
    assert PROMPT_INIT_LINE in report.shell_content
    assert "format" in toml.loads(report.structured_content)
    assert zshrc.read_text(encoding="utf-8") == OMZ_RC
    assert not orchestrator.starship_path.exists()
    assert not orchestrator.backup.base_dir.exists()


def test_migrate_snapshots_then_writes(
    orchestrator: MigrationOrchestrator, zshrc: Path
) -> None:
    """A real run snapshots the old rc and writes both documents."""
    report = orchestrator.migrate(default_flags())

    assert report.snapshot_id is not None
    assert report.snapshot_id.startswith("migration_")
    stored = (
        orchestrator.backup.base_dir
        / report.snapshot_id
        / "files"
        / "home"
        / ".zshrc"
    )
    assert stored.read_text(encoding="utf-8") == OMZ_RC

    new_rc = zshrc.read_text(encoding="utf-8")
    assert "oh-my-zsh.sh" not in new_rc
    assert "alias ll='ls -la'" in new_rc
    assert last_meaningful_line(new_rc) == PROMPT_INIT_LINE
    toml.loads(orchestrator.starship_path.read_text(encoding="utf-8"))


def test_failed_syntax_check_keeps_live_rc(
    settings, zshrc: Path, fake_home: Path, host_ok
) -> None:
    """The snapshot exists but the rc and prompt config are unchanged."""
    orchestrator = MigrationOrchestrator(
        settings,
        checker=lambda _path: False,
        tool_detector=dict,
        system_validator=host_ok,
    )

    with pytest.raises(ValidationError):
        orchestrator.migrate(default_flags())

    assert zshrc.read_text(encoding="utf-8") == OMZ_RC
    assert not orchestrator.starship_path.exists()
    assert len(orchestrator.backup.list_snapshots()) == 1


def test_failed_host_check_takes_no_snapshot(
    settings, zshrc: Path, fake_home: Path
) -> None:
    """A host without zsh is refused before anything is snapshotted."""
    orchestrator = MigrationOrchestrator(
        settings,
        checker=lambda _path: True,
        tool_detector=dict,
        system_validator=SystemValidator(
            which=lambda _name: None,
            disk_usage=lambda _path: (10**12, 0, 10**12),
            environ={"SHELL": "/bin/zsh", "LANG": "en_US.UTF-8"},
        ),
        oh_my_zsh_dir=fake_home / ".oh-my-zsh",
    )

    with pytest.raises(ValidationError, match="zsh is not installed"):
        orchestrator.migrate(default_flags())

    assert zshrc.read_text(encoding="utf-8") == OMZ_RC
    assert orchestrator.backup.list_snapshots() == []


def test_validate_system_reports_without_raising(
    orchestrator: MigrationOrchestrator,
) -> None:
    """The pre-flight check can be run on its own."""
    report = orchestrator.validate_system()

    assert report.passed


def _reject_prompt_config(doc):
    raise ValidationError("disk full", str(doc.path), "unchanged")


def test_prompt_config_failure_restores_rc(
    orchestrator: MigrationOrchestrator,
    zshrc: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """The replaced rc is put back when starship.toml cannot be written."""
    zshrc.chmod(0o640)
    monkeypatch.setattr(
        "zsh_migrator.core.workflows.migration.commit_structured_document",
        _reject_prompt_config,
    )

    with pytest.raises(ValidationError) as exc_info:
        orchestrator.migrate(default_flags())

    assert zshrc.read_text(encoding="utf-8") == OMZ_RC
    assert stat.S_IMODE(zshrc.stat().st_mode) == 0o640
    assert not orchestrator.starship_path.exists()
    assert ".zshrc restored" in str(exc_info.value)
    [snapshot] = orchestrator.backup.list_snapshots()
    assert snapshot.snapshot_id in str(exc_info.value)
    leftovers = sorted(p.name for p in zshrc.parent.iterdir())
    assert not [name for name in leftovers if name.startswith(".zshrc.")]


def test_prompt_config_failure_removes_new_rc(
    orchestrator: MigrationOrchestrator, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Without a previous rc the freshly written one is removed again."""
    monkeypatch.setattr(
        "zsh_migrator.core.workflows.migration.commit_structured_document",
        _reject_prompt_config,
    )

    with pytest.raises(ValidationError, match="restored"):
        orchestrator.migrate(default_flags())

    assert not orchestrator.zshrc_path.exists()


def test_missing_rc_migrates_empty_config(
    orchestrator: MigrationOrchestrator,
) -> None:
    """Without a .zshrc only the base configuration is produced."""
    report = orchestrator.migrate(default_flags(), dry_run=True)

    assert (report.aliases, report.exports, report.functions) == (0, 0, 0)
    assert "function mkcd()" in report.shell_content


def test_disabled_prerequisite_drops_children(
    orchestrator: MigrationOrchestrator, zshrc: Path
) -> None:
    """Turning off right_format removes time and battery from the prompt."""
    flags = default_flags()
    flags[Feature.RIGHT_FORMAT] = False

    report = orchestrator.migrate(flags, dry_run=True)
    parsed = toml.loads(report.structured_content)

    assert "right_format" not in parsed
    assert "time" not in parsed
    assert "battery" not in parsed


def test_skip_tools_ignores_detector(
    settings, zshrc: Path, host_ok
) -> None:
    """Tool aliases are omitted when tools are skipped."""
    orchestrator = MigrationOrchestrator(
        settings,
        checker=lambda _path: True,
        tool_detector=lambda: {"bat": True, "eza": True},
        system_validator=host_ok,
    )

    with_tools = orchestrator.migrate(default_flags(), dry_run=True)
    without = orchestrator.migrate(
        default_flags(), dry_run=True, skip_tools=True
    )

    assert "alias cat='bat --paging=never'" in with_tools.shell_content
    assert "bat --paging" not in without.shell_content


def test_rollback_restores_latest_migration(
    orchestrator: MigrationOrchestrator, zshrc: Path
) -> None:
    """Rollback brings back the pre-migration rc behind a safety snapshot."""
    orchestrator.migrate(default_flags())

    report = orchestrator.rollback()

    assert zshrc.read_text(encoding="utf-8") == OMZ_RC
    assert report.safety_snapshot_id.startswith("pre_restore_safety")
    assert report.failed == 0


def test_rollback_without_snapshot(
    orchestrator: MigrationOrchestrator, zshrc: Path
) -> None:
    """Nothing to roll back to is a NotFoundError."""
    with pytest.raises(NotFoundError):
        orchestrator.rollback()

    assert zshrc.read_text(encoding="utf-8") == OMZ_RC


def test_status_before_and_after(
    orchestrator: MigrationOrchestrator, zshrc: Path, fake_home: Path
) -> None:
    """Status reflects the rc, prompt config and snapshots."""
    (fake_home / ".oh-my-zsh").mkdir()

    before = orchestrator.status()
    orchestrator.migrate(default_flags())
    after = orchestrator.status()

    assert before.zshrc_exists
    assert before.oh_my_zsh_installed
    assert not before.starship_initialized
    assert before.snapshot_count == 0
    assert after.starship_initialized
    assert after.starship_config_exists
    assert after.snapshot_count == 1
    assert after.latest_snapshot.startswith("migration_")


def test_verify_after_migration_passes(
    orchestrator: MigrationOrchestrator, zshrc: Path
) -> None:
    """All checks pass on a freshly migrated setup."""
    orchestrator.migrate(default_flags())

    report = orchestrator.verify()

    assert report.passed
    assert report.pass_ratio == 1.0
    assert len(report.checks) == 5


def test_verify_before_migration_fails(
    orchestrator: MigrationOrchestrator, zshrc: Path
) -> None:
    """An untouched oh-my-zsh rc fails verification."""
    report = orchestrator.verify()

    failed = {check.name for check in report.checks if not check.passed}
    assert not report.passed
    assert "oh-my-zsh not sourced" in failed
    assert "starship init is last" in failed


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("a\nb\n", "b"),
        ("a\n# comment\n\n", "a"),
        ("", ""),
    ],
)
def test_last_meaningful_line(text: str, expected: str) -> None:
    """Trailing blanks and comments are skipped."""
    assert last_meaningful_line(text) == expected
