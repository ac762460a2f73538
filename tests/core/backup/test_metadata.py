"""Tests for snapshot metadata and manifest files."""

from pathlib import Path

import orjson
import pytest

from zsh_migrator.core.backup.helpers import (
    parse_snapshot_id,
    stored_relative_path,
)
from zsh_migrator.core.backup.metadata import (
    SnapshotMetadata,
    parse_manifest_line,
    read_manifest,
    write_manifest,
)
from zsh_migrator.domain.types import BackupItem
from zsh_migrator.exceptions import IntegrityError


def test_metadata_save_and_load(tmp_path: Path) -> None:
    """Saved metadata loads back with sorted, indented JSON on disk."""
    meta = SnapshotMetadata(tmp_path)
    meta.save(
        {"items_backed_up": 1, "backup_name": "manual", "created_at": "now"}
    )

    raw = (tmp_path / "metadata.json").read_text()
    assert raw.index("backup_name") < raw.index("items_backed_up")
    assert meta.load()["items_backed_up"] == 1
    assert [p.name for p in tmp_path.iterdir()] == ["metadata.json"]


@pytest.mark.parametrize(
    "content",
    [b"{not json", b"[1, 2]", orjson.dumps({"backup_name": "x"})],
)
def test_metadata_load_rejects_bad_content(
    tmp_path: Path, content: bytes
) -> None:
    """Broken, non-object or incomplete metadata is an IntegrityError."""
    (tmp_path / "metadata.json").write_bytes(content)

    with pytest.raises(IntegrityError):
        SnapshotMetadata(tmp_path).load()


def test_metadata_load_missing_file(tmp_path: Path) -> None:
    """A missing file is an IntegrityError naming the snapshot."""
    with pytest.raises(IntegrityError, match="missing"):
        SnapshotMetadata(tmp_path).load()


def test_manifest_written_with_header(tmp_path: Path) -> None:
    """Header lines are comments and records follow in order."""
    items = [
        BackupItem("file", Path("/home/u/.zshrc"), 12, 1700000000),
        BackupItem("dir", Path("/home/u/.zsh"), 40, 1700000001),
    ]

    write_manifest(tmp_path, items, header=("snapshot x", "Format: k"))

    lines = (tmp_path / "manifest.txt").read_text().splitlines()
    assert lines[:2] == ["# snapshot x", "# Format: k"]
    assert lines[2] == "file|/home/u/.zshrc|12|1700000000"
    assert read_manifest(tmp_path) == items


def test_manifest_path_with_separator() -> None:
    """Paths containing the separator survive parsing."""
    item = parse_manifest_line("file|/home/u/odd|name|5|7")

    assert item.source_path == Path("/home/u/odd|name")
    assert (item.size_bytes, item.mtime) == (5, 7)


@pytest.mark.parametrize(
    "line",
    [
        "link|/home/u/.zshrc|1|2",
        "file|/home/u/.zshrc|1",
        "file|relative/.zshrc|1|2",
        "file|/home/u/.zshrc|big|2",
    ],
)
def test_malformed_manifest_lines(line: str) -> None:
    """Unknown kinds, short records, relative paths and bad numbers."""
    with pytest.raises(IntegrityError):
        parse_manifest_line(line)


def test_read_manifest_missing(tmp_path: Path) -> None:
    """A missing manifest is an IntegrityError."""
    with pytest.raises(IntegrityError):
        read_manifest(tmp_path)


def test_parse_snapshot_id() -> None:
    """Ids split into name, timestamp and sequence."""
    parsed = parse_snapshot_id("pre_restore_safety_20261018_142501-3")

    assert parsed is not None
    assert parsed.name == "pre_restore_safety"
    assert parsed.sequence == 3
    assert parsed.timestamp.year == 2026
    assert parse_snapshot_id("migration_20261018_142501").sequence == 1
    assert parse_snapshot_id("notes") is None
    assert parse_snapshot_id("x_20261399_999999") is None


def test_stored_relative_path() -> None:
    """Home paths go below home/, others below root/."""
    home = Path("/home/u")

    assert stored_relative_path(home / ".zshrc", home) == Path("home/.zshrc")
    assert stored_relative_path(Path("/etc/zshrc"), home) == Path(
        "root/etc/zshrc"
    )
