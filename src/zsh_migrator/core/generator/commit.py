"""Atomic commit of generated documents.

Both documents are written to a temporary file beside the live one and
moved over it with ``Path.replace``. The shell document must additionally
pass a syntax check first; on failure the temporary file is removed and the
live file is left exactly as it was.
"""

import shutil
import subprocess
import tempfile
from collections.abc import Callable
from pathlib import Path

from zsh_migrator.constants import (
    DEFAULT_SYNTAX_CHECK_TIMEOUT,
    SHELL_TMP_PREFIX,
    SHELL_TMP_SUFFIX,
)
from zsh_migrator.domain.types import GeneratedDocument
from zsh_migrator.exceptions import ValidationError
from zsh_migrator.logger import get_logger

logger = get_logger(__name__)

SyntaxChecker = Callable[[Path], bool]


class ZshSyntaxChecker:
    """Pass/fail oracle running ``zsh -n`` on a file."""

    def __init__(
        self,
        zsh_binary: str = "zsh",
        timeout: int = DEFAULT_SYNTAX_CHECK_TIMEOUT,
    ) -> None:
        """Initialize checker.

        Args:
            zsh_binary: Name or path of the zsh executable
            timeout: Seconds before the check counts as failed

        """
        self.zsh_binary = zsh_binary
        self.timeout = timeout

    def __call__(self, path: Path) -> bool:
        """Return True if zsh parses ``path`` without errors."""
        zsh = shutil.which(self.zsh_binary)
        if zsh is None:
            logger.error("Cannot check syntax: %s not found", self.zsh_binary)
            return False

        try:
            result = subprocess.run(  # noqa: S603
                [zsh, "-n", str(path)],
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            logger.error("Syntax check of %s did not complete: %s", path, e)
            return False

        if result.returncode != 0:
            logger.error(
                "zsh -n rejected generated config: %s",
                result.stderr.strip() or f"exit {result.returncode}",
            )
            return False
        return True


def _write_temp(target: Path, content: str, prefix: str, suffix: str) -> Path:
    """Write ``content`` to a new temp file in ``target``'s directory.

    The temp file is removed again if any step after its creation fails.
    """
    target.parent.mkdir(parents=True, exist_ok=True)
    temp_path: Path | None = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            dir=target.parent,
            prefix=prefix,
            suffix=suffix,
            delete=False,
        ) as tmp_file:
            temp_path = Path(tmp_file.name)
            tmp_file.write(content)
            tmp_file.flush()

        if target.exists():
            shutil.copymode(target, temp_path)
    except BaseException:
        if temp_path is not None:
            temp_path.unlink(missing_ok=True)
        raise
    return temp_path


def commit_shell_document(
    doc: GeneratedDocument, checker: SyntaxChecker
) -> GeneratedDocument:
    """Validate the shell document and atomically replace the live file.

    Args:
        doc: Rendered shell document
        checker: Syntax oracle called with the temporary file path

    Returns:
        The document marked as validated

    Raises:
        ValidationError: If writing fails or the syntax check rejects it;
            the live file is untouched either way

    """
    unaffected = f"live {doc.path.name} unchanged"
    try:
        temp_path = _write_temp(
            doc.path, doc.content, SHELL_TMP_PREFIX, SHELL_TMP_SUFFIX
        )
    except OSError as e:
        msg = f"could not write temporary file: {e}"
        raise ValidationError(msg, str(doc.path), unaffected) from e

    replaced = False
    try:
        if not checker(temp_path):
            msg = "generated shell config failed the syntax check"
            raise ValidationError(msg, str(doc.path), unaffected)
        try:
            temp_path.replace(doc.path)
        except OSError as e:
            msg = f"could not replace live file: {e}"
            raise ValidationError(msg, str(doc.path), unaffected) from e
        replaced = True
    finally:
        if not replaced:
            temp_path.unlink(missing_ok=True)

    logger.debug("Committed %s", doc.path)
    return GeneratedDocument(doc.path, doc.content, validated=True)


def commit_structured_document(doc: GeneratedDocument) -> GeneratedDocument:
    """Atomically write an already validated prompt config.

    Raises:
        ValidationError: If the document was never validated or cannot be
            written; the live file is untouched either way

    """
    unaffected = f"live {doc.path.name} unchanged"
    if not doc.validated:
        msg = "refusing to write a document that was not validated"
        raise ValidationError(msg, str(doc.path), unaffected)

    try:
        temp_path = _write_temp(
            doc.path, doc.content, f".{doc.path.name}.", SHELL_TMP_SUFFIX
        )
    except OSError as e:
        msg = f"could not write prompt config: {e}"
        raise ValidationError(msg, str(doc.path), unaffected) from e

    try:
        temp_path.replace(doc.path)
    except OSError as e:
        temp_path.unlink(missing_ok=True)
        msg = f"could not write prompt config: {e}"
        raise ValidationError(msg, str(doc.path), unaffected) from e

    logger.debug("Committed %s", doc.path)
    return doc
