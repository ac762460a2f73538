"""Shared data types for zsh-migrator.

Parser entries, generated documents and snapshot records are frozen
dataclasses; settings loaded from settings.conf are TypedDicts.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal, TypedDict

ItemKind = Literal["file", "dir"]


# =============================================================================
# Parser results
# =============================================================================


@dataclass(frozen=True, slots=True)
class AliasEntry:
    """One user alias line."""

    name: str
    raw_line: str


@dataclass(frozen=True, slots=True)
class ExportEntry:
    """One user export line."""

    name: str
    raw_line: str


@dataclass(frozen=True, slots=True)
class FunctionDefinition:
    """A complete shell function as it appeared in the source.

    Attributes:
        name: Function name without ``function`` keyword or ``()``
        body: Verbatim source lines joined with newlines
        start_line: 1-based line of the declaration
        end_line: 1-based line holding the closing brace

    """

    name: str
    body: str
    start_line: int
    end_line: int


@dataclass(frozen=True, slots=True)
class ParseWarning:
    """Recoverable problem found while scanning shell source."""

    line: int
    name: str
    message: str


@dataclass(frozen=True, slots=True)
class ParseResult:
    """Everything extracted from one rc file."""

    aliases: tuple[AliasEntry, ...] = ()
    exports: tuple[ExportEntry, ...] = ()
    functions: tuple[FunctionDefinition, ...] = ()
    warnings: tuple[ParseWarning, ...] = ()


# =============================================================================
# Generated documents
# =============================================================================


@dataclass(frozen=True, slots=True)
class GeneratedDocument:
    """Rendered document held in memory until it is committed."""

    path: Path
    content: str
    validated: bool = False


@dataclass(frozen=True, slots=True)
class GenerationResult:
    """Shell rc and prompt config rendered from one set of inputs."""

    shell_doc: GeneratedDocument
    structured_doc: GeneratedDocument


@dataclass(frozen=True, slots=True)
class DuplicateKeyConflict:
    """A repeated key suppressed while rendering a TOML table."""

    table: str
    key: str
    kept: object
    dropped: object


# =============================================================================
# Snapshots
# =============================================================================


@dataclass(frozen=True, slots=True)
class BackupItem:
    """One tracked file or directory recorded in a snapshot manifest."""

    kind: ItemKind
    source_path: Path
    size_bytes: int
    mtime: int


@dataclass(frozen=True, slots=True)
class SnapshotSummary:
    """Listing entry for one snapshot directory."""

    snapshot_id: str
    name: str
    created_at: str
    path: Path
    items: int
    size_bytes: int
    valid: bool


@dataclass(frozen=True, slots=True)
class RestoreReport:
    """Outcome of restoring a snapshot."""

    snapshot_id: str
    safety_snapshot_id: str
    restored: int
    failed: int
    failed_paths: tuple[Path, ...] = ()


@dataclass(frozen=True, slots=True)
class CleanupReport:
    """Snapshots selected by age-based retention."""

    candidates: tuple[str, ...]
    deleted: int
    dry_run: bool

    @property
    def count(self) -> int:
        """Number of snapshots deleted, or that would be in a dry run."""
        return len(self.candidates)


@dataclass(frozen=True, slots=True)
class BackupStats:
    """Aggregate numbers across all snapshots."""

    total: int
    valid: int
    size_bytes: int
    oldest: str | None
    newest: str | None


# =============================================================================
# Workflow reports
# =============================================================================


@dataclass(frozen=True, slots=True)
class MigrationReport:
    """Outcome of a migration run."""

    aliases: int
    exports: int
    functions: int
    warnings: int
    enabled_features: int
    snapshot_id: str | None
    shell_path: Path
    structured_path: Path
    dry_run: bool
    shell_content: str = ""
    structured_content: str = ""


@dataclass(frozen=True, slots=True)
class StatusReport:
    """Current state of the user's shell setup."""

    zshrc_exists: bool
    oh_my_zsh_installed: bool
    starship_initialized: bool
    starship_config_exists: bool
    snapshot_count: int
    latest_snapshot: str | None


@dataclass(frozen=True, slots=True)
class VerificationCheck:
    """One post-migration check."""

    name: str
    passed: bool
    detail: str = ""


@dataclass(frozen=True, slots=True)
class VerificationReport:
    """All post-migration checks and the overall verdict."""

    checks: tuple[VerificationCheck, ...] = field(default_factory=tuple)
    pass_ratio: float = 0.0
    passed: bool = False


@dataclass(frozen=True, slots=True)
class SystemReport:
    """Outcome of the pre-migration host checks."""

    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()

    @property
    def passed(self) -> bool:
        """True when nothing blocks a migration."""
        return not self.errors


# =============================================================================
# Settings
# =============================================================================


class BackupSettings(TypedDict):
    """Backup section of settings.conf."""

    retention_days: int
    tracked_items: list[Path]


class MigrationSettings(TypedDict):
    """Migration section of settings.conf."""

    auto_mode: bool
    syntax_check_timeout: int


class DirectorySettings(TypedDict):
    """Directory section of settings.conf."""

    backup: Path
    logs: Path
    zshrc: Path
    starship_config: Path
    zsh_plugins: str


class MigratorSettings(TypedDict):
    """Full settings loaded from settings.conf."""

    config_version: str
    log_level: str
    console_log_level: str
    backup: BackupSettings
    migration: MigrationSettings
    directory: DirectorySettings
