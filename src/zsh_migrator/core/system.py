"""Pre-migration checks of the host.

Errors block a migration before any snapshot is taken; warnings are
reported and the migration goes ahead.
"""

import os
import re
import shutil
from collections.abc import Callable, Mapping
from pathlib import Path

from packaging.version import InvalidVersion, Version

from zsh_migrator.constants import (
    BROKEN_RC_MARKERS,
    MIN_FREE_SPACE_MB,
    MIN_ZSH_VERSION,
)
from zsh_migrator.core.backup.metadata import probe_version
from zsh_migrator.domain.types import SystemReport
from zsh_migrator.logger import get_logger

logger = get_logger(__name__)

_VERSION_RE = re.compile(r"(\d+\.\d+(?:\.\d+)?)")


def nearest_existing(path: Path) -> Path:
    """``path`` or its closest ancestor that exists."""
    for candidate in (path, *path.parents):
        if candidate.exists():
            return candidate
    return Path(path.anchor or "/")


def is_creatable_dir(path: Path) -> bool:
    """Whether ``path`` is, or can be created as, a writable directory."""
    existing = nearest_existing(path)
    return existing.is_dir() and os.access(existing, os.W_OK | os.X_OK)


class SystemValidator:
    """Checks zsh, file access and free space ahead of a migration."""

    def __init__(
        self,
        which: Callable[[str], str | None] = shutil.which,
        zsh_version: Callable[[], str] = lambda: probe_version("zsh"),
        disk_usage: Callable[[Path], tuple[int, int, int]] = shutil.disk_usage,
        environ: Mapping[str, str] | None = None,
        min_free_mb: int = MIN_FREE_SPACE_MB,
    ) -> None:
        """Initialize validator.

        Args:
            which: Executable lookup, ``shutil.which`` by default
            zsh_version: Returns the first line of ``zsh --version``
            disk_usage: Returns ``(total, used, free)`` bytes for a path
            environ: Environment used for the shell and locale checks
            min_free_mb: Free megabytes required next to the rc file

        """
        self.which = which
        self.zsh_version = zsh_version
        self.disk_usage = disk_usage
        self.environ = os.environ if environ is None else environ
        self.min_free_mb = min_free_mb

    def _check_zsh(self, errors: list[str], warnings: list[str]) -> None:
        if self.which("zsh") is None:
            errors.append("zsh is not installed or not on PATH")
            return

        output = self.zsh_version()
        match = _VERSION_RE.search(output)
        if match is None:
            warnings.append(f"could not determine zsh version from {output!r}")
            return
        try:
            version = Version(match.group(1))
        except InvalidVersion:
            warnings.append(f"unrecognised zsh version {match.group(1)!r}")
            return
        if version < Version(MIN_ZSH_VERSION):
            errors.append(
                f"zsh {version} is older than the required {MIN_ZSH_VERSION}"
            )

    def _check_access(
        self,
        zshrc: Path,
        targets: Mapping[str, Path],
        errors: list[str],
    ) -> None:
        if zshrc.exists() and not os.access(zshrc, os.R_OK):
            errors.append(f"{zshrc} is not readable")
        for label, directory in targets.items():
            if not is_creatable_dir(directory):
                errors.append(f"{label} directory {directory} is not writable")

    def _check_disk_space(self, path: Path, errors: list[str]) -> None:
        existing = nearest_existing(path)
        try:
            free_mb = self.disk_usage(existing)[2] // (1024 * 1024)
        except OSError as e:
            logger.warning("Cannot read free space of %s: %s", existing, e)
            return
        if free_mb < self.min_free_mb:
            errors.append(
                f"only {free_mb} MB free on {existing}, "
                f"{self.min_free_mb} MB required"
            )

    def _detect_common_issues(
        self, zshrc: Path, oh_my_zsh_dir: Path, warnings: list[str]
    ) -> None:
        if not oh_my_zsh_dir.is_dir():
            warnings.append(
                f"oh-my-zsh not found at {oh_my_zsh_dir}; "
                "migrating a plain zsh setup"
            )
        shell = self.environ.get("SHELL", "")
        if shell and not shell.endswith("/zsh"):
            warnings.append(f"login shell is {shell}, not zsh")
        locale = self.environ.get("LC_ALL") or self.environ.get("LANG", "")
        if "UTF-8" not in locale.upper():
            warnings.append("locale is not UTF-8; prompt symbols may break")
        if zshrc.is_file() and os.access(zshrc, os.R_OK):
            text = zshrc.read_text(encoding="utf-8", errors="replace")
            found = [marker for marker in BROKEN_RC_MARKERS if marker in text]
            if found:
                warnings.append(
                    f"{zshrc.name} references {', '.join(found)}, "
                    "which oh-my-zsh provided"
                )

    def validate(
        self,
        zshrc: Path,
        starship_config: Path,
        backup_dir: Path,
        oh_my_zsh_dir: Path,
    ) -> SystemReport:
        """Run every check and collect errors and warnings.

        Args:
            zshrc: Live rc file to be replaced
            starship_config: Prompt config to be written
            backup_dir: Snapshot store
            oh_my_zsh_dir: oh-my-zsh install being migrated away from

        Returns:
            SystemReport; ``passed`` is False if any error was found

        """
        errors: list[str] = []
        warnings: list[str] = []

        self._check_zsh(errors, warnings)
        self._check_access(
            zshrc,
            {
                ".zshrc": zshrc.parent,
                "starship config": starship_config.parent,
                "backup": backup_dir,
            },
            errors,
        )
        self._check_disk_space(zshrc.parent, errors)
        self._detect_common_issues(zshrc, oh_my_zsh_dir, warnings)

        for message in warnings:
            logger.warning("⚠️  %s", message)
        for message in errors:
            logger.error("❌ %s", message)
        return SystemReport(errors=tuple(errors), warnings=tuple(warnings))
