"""Migration workflow: parse, resolve, generate, snapshot and commit.

The orchestrator owns the order of operations. Nothing live is touched
until a migration snapshot exists, and each document is committed
atomically on its own.
"""

import re
import shutil
from collections.abc import Callable, Mapping
from pathlib import Path

import toml

from zsh_migrator.constants import (
    MIGRATION_SNAPSHOT_NAME,
    PROMPT_INIT_LINE,
    VERIFY_PASS_RATIO,
)
from zsh_migrator.core.backup import BackupManager
from zsh_migrator.core.generator import (
    ConfigGenerator,
    SyntaxChecker,
    ZshSyntaxChecker,
    commit_shell_document,
    commit_structured_document,
)
from zsh_migrator.core.parser import ShellConfigParser
from zsh_migrator.core.resolver import find_unknown_references, resolve
from zsh_migrator.core.system import SystemValidator
from zsh_migrator.core.tools import detect_tools, no_tools
from zsh_migrator.domain.features import Feature
from zsh_migrator.domain.types import (
    MigrationReport,
    MigratorSettings,
    RestoreReport,
    StatusReport,
    SystemReport,
    VerificationCheck,
    VerificationReport,
)
from zsh_migrator.exceptions import (
    ConfigurationError,
    NotFoundError,
    ValidationError,
)
from zsh_migrator.logger import get_logger

logger = get_logger(__name__)

OH_MY_ZSH_SOURCE_RE = re.compile(r"^\s*(source|\.)\s+\S*oh-my-zsh\.sh\b")

ToolDetector = Callable[[], dict[str, bool]]


def last_meaningful_line(text: str) -> str:
    """Last line that is neither blank nor a comment."""
    for line in reversed(text.splitlines()):
        stripped = line.strip()
        if stripped and not stripped.startswith("#"):
            return stripped
    return ""


class MigrationOrchestrator:
    """Runs migrate, rollback, status and verify against one home setup."""

    def __init__(
        self,
        settings: MigratorSettings,
        backup_manager: BackupManager | None = None,
        checker: SyntaxChecker | None = None,
        tool_detector: ToolDetector = detect_tools,
        parser: ShellConfigParser | None = None,
        oh_my_zsh_dir: Path | None = None,
        system_validator: SystemValidator | None = None,
    ) -> None:
        """Initialize orchestrator.

        Args:
            settings: Loaded settings
            backup_manager: Snapshot service (built from settings if None)
            checker: Shell syntax oracle (``zsh -n`` if None)
            tool_detector: Returns optional tool presence
            parser: Shell config parser
            oh_my_zsh_dir: oh-my-zsh install checked by ``status``
            system_validator: Host checks run before a migration

        """
        directory = settings["directory"]
        self.settings = settings
        self.zshrc_path: Path = directory["zshrc"]
        self.starship_path: Path = directory["starship_config"]
        self.backup = backup_manager or BackupManager.create_default(settings)
        self.checker = checker or ZshSyntaxChecker(
            timeout=settings["migration"]["syntax_check_timeout"]
        )
        self.tool_detector = tool_detector
        self.parser = parser or ShellConfigParser()
        self.generator = ConfigGenerator(
            self.zshrc_path,
            self.starship_path,
            plugins_dir=directory["zsh_plugins"],
        )
        self.oh_my_zsh_dir = oh_my_zsh_dir or Path.home() / ".oh-my-zsh"
        self.system_validator = system_validator or SystemValidator()

    def _read_zshrc(self) -> str:
        if not self.zshrc_path.exists():
            logger.warning(
                "%s not found, migrating an empty configuration",
                self.zshrc_path,
            )
            return ""
        try:
            return self.zshrc_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            msg = f"cannot read shell config: {e}"
            raise ConfigurationError(
                msg, str(self.zshrc_path), "no files touched"
            ) from e

    def migrate(
        self,
        flags: Mapping[Feature, bool],
        *,
        dry_run: bool = False,
        skip_tools: bool = False,
    ) -> MigrationReport:
        """Replace the oh-my-zsh setup with generated configs.

        Args:
            flags: Requested feature flags before resolution
            dry_run: Generate and report without snapshotting or writing
            skip_tools: Treat every optional tool as absent

        Returns:
            MigrationReport with counts, snapshot id and target paths

        Raises:
            ConfigurationError: If the rc file cannot be read
            ValidationError: If the host check fails or a generated
                document is rejected; a replaced rc file is put back when
                the prompt config cannot be written
            BackupIOError: If the pre-migration snapshot fails
            LockError: If another instance holds the backup lock

        """
        parsed = self.parser.parse(self._read_zshrc())
        logger.info(
            "🔍 Found %d aliases, %d exports, %d functions",
            len(parsed.aliases),
            len(parsed.exports),
            len(parsed.functions),
        )

        for feature in find_unknown_references(flags):
            logger.warning(
                "Feature rule references unselected flag: %s", feature.value
            )
        resolved = resolve(flags)
        for feature, enabled in flags.items():
            if enabled and not resolved[feature]:
                logger.info(
                    "Disabled %s: its prerequisites are off", feature.value
                )

        tools = no_tools() if skip_tools else self.tool_detector()
        result = self.generator.generate(resolved, parsed, tools)
        enabled_count = sum(1 for enabled in resolved.values() if enabled)

        if dry_run:
            logger.info("Dry run: no snapshot taken, no files written")
            return MigrationReport(
                aliases=len(parsed.aliases),
                exports=len(parsed.exports),
                functions=len(parsed.functions),
                warnings=len(parsed.warnings),
                enabled_features=enabled_count,
                snapshot_id=None,
                shell_path=self.zshrc_path,
                structured_path=self.starship_path,
                dry_run=True,
                shell_content=result.shell_doc.content,
                structured_content=result.structured_doc.content,
            )

        self.validate_system(raise_on_error=True)
        snapshot_id = self.backup.create_snapshot(
            MIGRATION_SNAPSHOT_NAME, "Before migration to zshrc + Starship"
        )
        previous_shell = (
            self.zshrc_path.read_bytes() if self.zshrc_path.is_file() else None
        )
        commit_shell_document(result.shell_doc, self.checker)
        logger.info("✅ Wrote %s", self.zshrc_path)
        try:
            commit_structured_document(result.structured_doc)
        except ValidationError as e:
            raise self._undo_shell_commit(previous_shell, snapshot_id, e) from e
        logger.info("✅ Wrote %s", self.starship_path)

        return MigrationReport(
            aliases=len(parsed.aliases),
            exports=len(parsed.exports),
            functions=len(parsed.functions),
            warnings=len(parsed.warnings),
            enabled_features=enabled_count,
            snapshot_id=snapshot_id,
            shell_path=self.zshrc_path,
            structured_path=self.starship_path,
            dry_run=False,
        )

    def validate_system(self, *, raise_on_error: bool = False) -> SystemReport:
        """Check the host before anything is snapshotted or written.

        Args:
            raise_on_error: Raise instead of returning a failed report

        Returns:
            SystemReport with blocking errors and warnings

        Raises:
            ValidationError: If ``raise_on_error`` and a check failed

        """
        report = self.system_validator.validate(
            self.zshrc_path,
            self.starship_path,
            self.backup.base_dir,
            self.oh_my_zsh_dir,
        )
        if raise_on_error and not report.passed:
            msg = "system check failed: " + "; ".join(report.errors)
            raise ValidationError(msg, unaffected="no snapshot taken")
        return report

    def _undo_shell_commit(
        self,
        previous: bytes | None,
        snapshot_id: str,
        error: ValidationError,
    ) -> ValidationError:
        """Put the replaced rc file back after the prompt config failed.

        Returns:
            The error to raise, naming what was left untouched
        """
        restore_path = self.zshrc_path.with_name(
            f"{self.zshrc_path.name}.restore"
        )
        try:
            if previous is None:
                self.zshrc_path.unlink(missing_ok=True)
            else:
                restore_path.write_bytes(previous)
                shutil.copymode(self.zshrc_path, restore_path)
                restore_path.replace(self.zshrc_path)
        except OSError as restore_error:
            restore_path.unlink(missing_ok=True)
            logger.error(
                "Could not put back %s: %s; roll back with snapshot %s",
                self.zshrc_path,
                restore_error,
                snapshot_id,
            )
            return ValidationError(
                error.message,
                error.target,
                f"{self.zshrc_path.name} NOT restored, "
                f"run 'rollback --snapshot {snapshot_id}'",
            )

        logger.warning(
            "Prompt config not written; restored previous %s",
            self.zshrc_path.name,
        )
        return ValidationError(
            error.message,
            error.target,
            f"{self.zshrc_path.name} restored, {self.starship_path.name} "
            f"unchanged, snapshot {snapshot_id} kept",
        )

    def rollback(self, snapshot_id: str | None = None) -> RestoreReport:
        """Restore the given snapshot, or the latest non-safety one.

        Raises:
            NotFoundError: If no snapshot exists to roll back to

        """
        if snapshot_id is None:
            latest = self.backup.latest_snapshot(exclude_safety=True)
            if latest is None:
                msg = "no snapshot available to roll back to"
                raise NotFoundError(msg, unaffected="no files touched")
            snapshot_id = latest.snapshot_id
        logger.info("⏪ Rolling back to %s", snapshot_id)
        return self.backup.restore_snapshot(snapshot_id)

    def status(self) -> StatusReport:
        """Describe the current shell setup and snapshot store."""
        text = ""
        if self.zshrc_path.is_file():
            text = self.zshrc_path.read_text(encoding="utf-8", errors="replace")
        latest = self.backup.latest_snapshot(exclude_safety=False)
        return StatusReport(
            zshrc_exists=self.zshrc_path.is_file(),
            oh_my_zsh_installed=self.oh_my_zsh_dir.is_dir(),
            starship_initialized=PROMPT_INIT_LINE in text,
            starship_config_exists=self.starship_path.is_file(),
            snapshot_count=len(self.backup.list_snapshots()),
            latest_snapshot=latest.snapshot_id if latest else None,
        )

    def _check_starship_config(self) -> VerificationCheck:
        name = "starship.toml parses"
        if not self.starship_path.is_file():
            return VerificationCheck(name, passed=False, detail="missing")
        try:
            toml.loads(self.starship_path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, toml.TomlDecodeError) as e:
            return VerificationCheck(name, passed=False, detail=str(e))
        return VerificationCheck(name, passed=True)

    def verify(self) -> VerificationReport:
        """Post-migration health checks.

        Returns:
            VerificationReport; passed when at least 80% of checks pass

        """
        exists = self.zshrc_path.is_file()
        text = (
            self.zshrc_path.read_text(encoding="utf-8", errors="replace")
            if exists
            else ""
        )
        omz_lines = [
            line for line in text.splitlines() if OH_MY_ZSH_SOURCE_RE.match(line)
        ]
        latest = self.backup.latest_snapshot(exclude_safety=True)

        checks = (
            VerificationCheck(
                ".zshrc exists", exists, str(self.zshrc_path)
            ),
            VerificationCheck(
                "starship init is last",
                last_meaningful_line(text) == PROMPT_INIT_LINE,
            ),
            self._check_starship_config(),
            VerificationCheck(
                "oh-my-zsh not sourced",
                not omz_lines,
                omz_lines[0].strip() if omz_lines else "",
            ),
            VerificationCheck(
                "snapshot available",
                latest is not None,
                latest.snapshot_id if latest else "",
            ),
        )

        passed_count = sum(1 for check in checks if check.passed)
        ratio = passed_count / len(checks)
        for check in checks:
            mark = "✅" if check.passed else "❌"
            if check.detail:
                logger.debug("%s %s (%s)", mark, check.name, check.detail)
            else:
                logger.debug("%s %s", mark, check.name)
        return VerificationReport(
            checks=checks,
            pass_ratio=ratio,
            passed=ratio >= VERIFY_PASS_RATIO,
        )
