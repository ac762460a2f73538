"""Exception classes for zsh-migrator operations.

Every error names the artifact it left untouched so the user knows what is
safe to retry.
"""

from zsh_migrator.constants import (
    EXIT_BACKUP_ERROR,
    EXIT_CONFIGURATION_ERROR,
    EXIT_FILE_NOT_FOUND,
    EXIT_GENERAL_ERROR,
    EXIT_ROLLBACK_ERROR,
    EXIT_VALIDATION_ERROR,
)


class ZshMigratorError(Exception):
    """Base exception for zsh-migrator operations."""

    error_prefix: str = "Operation failed"
    exit_code: int = EXIT_GENERAL_ERROR

    def __init__(
        self,
        message: str,
        target: str | None = None,
        unaffected: str | None = None,
    ) -> None:
        """Initialize error with message and optional target.

        Args:
            message: Error message describing the failure.
            target: Optional name of the target that failed.
            unaffected: Optional note naming what was left untouched,
                e.g. "live .zshrc unchanged".

        """
        super().__init__(message)
        self.message = message
        self.target = target
        self.unaffected = unaffected

    def __str__(self) -> str:
        """Return formatted error message."""
        if self.target:
            text = f"{self.error_prefix} for '{self.target}': {self.message}"
        else:
            text = f"{self.error_prefix}: {self.message}"
        if self.unaffected:
            text = f"{text} ({self.unaffected})"
        return text


class ValidationError(ZshMigratorError):
    """Raised when a generated document fails validation."""

    error_prefix = "Validation failed"
    exit_code = EXIT_VALIDATION_ERROR


class BackupIOError(ZshMigratorError):
    """Raised when a snapshot cannot be created or copied."""

    error_prefix = "Backup failed"
    exit_code = EXIT_BACKUP_ERROR


class IntegrityError(ZshMigratorError):
    """Raised when a snapshot is structurally broken."""

    error_prefix = "Snapshot integrity check failed"
    exit_code = EXIT_BACKUP_ERROR


class NotFoundError(ZshMigratorError):
    """Raised when a referenced snapshot does not exist."""

    error_prefix = "Not found"
    exit_code = EXIT_FILE_NOT_FOUND


class RestoreError(ZshMigratorError):
    """Raised when a restore completed with failed items."""

    error_prefix = "Restore incomplete"
    exit_code = EXIT_ROLLBACK_ERROR


class ConfigurationError(ZshMigratorError):
    """Raised when settings or input files cannot be read."""

    error_prefix = "Configuration error"
    exit_code = EXIT_CONFIGURATION_ERROR


class LockError(ZshMigratorError):
    """Raised when the snapshot lock is held by another process."""

    error_prefix = "Lock unavailable"

    def __init__(
        self,
        message: str,
        cause: BaseException | None = None,
        unaffected: str | None = None,
    ) -> None:
        """Initialize lock error.

        Args:
            message: Error message describing the failure.
            cause: Underlying OS error, if any.
            unaffected: Optional note naming what was left untouched.

        """
        super().__init__(message, unaffected=unaffected)
        self.cause = cause
