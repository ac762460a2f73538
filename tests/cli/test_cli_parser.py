"""Tests for CLIParser."""

import pytest

from zsh_migrator.cli.parser import CLIParser


@pytest.fixture
def parser() -> CLIParser:
    """CLI parser instance."""
    return CLIParser()


def test_migrate_options(parser: CLIParser) -> None:
    """Repeated --enable/--disable values are collected."""
    args = parser.parse_args(
        [
            "migrate",
            "--dry-run",
            "--skip-tools",
            "--enable",
            "git,docker",
            "--enable",
            "time",
            "--disable",
            "battery",
            "--no-auto",
        ]
    )

    assert args.command == "migrate"
    assert args.dry_run and args.skip_tools and args.no_auto
    assert args.enable == ["git,docker", "time"]
    assert args.disable == ["battery"]


def test_migrate_defaults(parser: CLIParser) -> None:
    """Without options nothing is overridden."""
    args = parser.parse_args(["migrate"])

    assert args.enable is None
    assert args.disable is None
    assert not args.dry_run


def test_rollback_snapshot(parser: CLIParser) -> None:
    """Rollback takes an optional snapshot id."""
    assert parser.parse_args(["rollback"]).snapshot is None
    args = parser.parse_args(["rollback", "--snapshot", "migration_x"])
    assert args.snapshot == "migration_x"


@pytest.mark.parametrize(
    ("argv", "action", "attrs"),
    [
        (["backup", "create"], "create", {"name": None, "description": ""}),
        (["backup", "list"], "list", {}),
        (["backup", "info", "id1"], "info", {"snapshot_id": "id1"}),
        (["backup", "validate"], "validate", {"snapshot_id": None}),
        (["backup", "restore", "id1"], "restore", {"snapshot_id": "id1"}),
        (
            ["backup", "delete", "id1", "--force"],
            "delete",
            {"snapshot_id": "id1", "force": True},
        ),
        (
            ["backup", "cleanup", "--days", "7", "--dry-run"],
            "cleanup",
            {"days": 7, "dry_run": True},
        ),
        (["backup", "stats"], "stats", {}),
    ],
)
def test_backup_actions(
    parser: CLIParser, argv: list[str], action: str, attrs: dict
) -> None:
    """Every backup action parses its arguments."""
    args = parser.parse_args(argv)

    assert args.command == "backup"
    assert args.backup_action == action
    for key, value in attrs.items():
        assert getattr(args, key) == value


def test_backup_requires_action(parser: CLIParser) -> None:
    """A bare 'backup' is a usage error."""
    with pytest.raises(SystemExit) as exc_info:
        parser.parse_args(["backup"])

    assert exc_info.value.code == 2


def test_global_flags(parser: CLIParser) -> None:
    """--version and --verbose sit before the command."""
    args = parser.parse_args(["--verbose", "status"])

    assert args.verbose
    assert not args.version
    assert parser.parse_args(["--version"]).command is None
