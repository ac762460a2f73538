"""Tests for the exception hierarchy and exit codes."""

import pytest

from zsh_migrator.constants import (
    EXIT_BACKUP_ERROR,
    EXIT_CONFIGURATION_ERROR,
    EXIT_FILE_NOT_FOUND,
    EXIT_GENERAL_ERROR,
    EXIT_ROLLBACK_ERROR,
    EXIT_VALIDATION_ERROR,
)
from zsh_migrator.exceptions import (
    BackupIOError,
    ConfigurationError,
    IntegrityError,
    LockError,
    NotFoundError,
    RestoreError,
    ValidationError,
    ZshMigratorError,
)


@pytest.mark.parametrize(
    ("error_cls", "exit_code"),
    [
        (ValidationError, EXIT_VALIDATION_ERROR),
        (BackupIOError, EXIT_BACKUP_ERROR),
        (IntegrityError, EXIT_BACKUP_ERROR),
        (NotFoundError, EXIT_FILE_NOT_FOUND),
        (RestoreError, EXIT_ROLLBACK_ERROR),
        (ConfigurationError, EXIT_CONFIGURATION_ERROR),
    ],
)
def test_exit_codes(error_cls: type[ZshMigratorError], exit_code: int) -> None:
    """Each error class carries the exit code of its failure class."""
    assert error_cls("boom").exit_code == exit_code
    assert issubclass(error_cls, ZshMigratorError)


def test_str_includes_target_and_unaffected() -> None:
    """The message names the target and what was left untouched."""
    error = ValidationError(
        "syntax check failed", "/home/u/.zshrc", "live .zshrc unchanged"
    )

    assert str(error) == (
        "Validation failed for '/home/u/.zshrc': syntax check failed "
        "(live .zshrc unchanged)"
    )


def test_str_without_optional_parts() -> None:
    """Without target and unaffected note only prefix and message show."""
    assert str(NotFoundError("no such snapshot")) == (
        "Not found: no such snapshot"
    )


def test_lock_error_keeps_cause() -> None:
    """LockError records the underlying OS error."""
    cause = BlockingIOError("busy")
    error = LockError("Another instance", cause=cause)

    assert error.cause is cause
    assert error.exit_code == EXIT_GENERAL_ERROR
