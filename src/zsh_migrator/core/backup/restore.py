"""Copy snapshot items back to their live locations.

Each item is first copied to a temporary sibling of its destination and
then moved into place, so an interrupted restore never leaves a half
written file at a live path. The snapshot directory is only read.
"""

import shutil
import tempfile
from collections.abc import Iterable
from pathlib import Path

from zsh_migrator.constants import (
    ITEM_KIND_DIR,
    SNAPSHOT_FILES_DIRNAME,
    SNAPSHOT_TMP_SUFFIX,
)
from zsh_migrator.core.backup.helpers import stored_relative_path
from zsh_migrator.domain.types import BackupItem
from zsh_migrator.logger import get_logger

logger = get_logger(__name__)


def _restore_file(stored: Path, destination: Path) -> None:
    """Replace ``destination`` with ``stored`` via a temporary copy."""
    with tempfile.NamedTemporaryFile(
        dir=destination.parent,
        prefix=f".{destination.name}_",
        suffix=SNAPSHOT_TMP_SUFFIX,
        delete=False,
    ) as tmp_file:
        temp_path = Path(tmp_file.name)

    try:
        shutil.copy2(stored, temp_path)
        if destination.is_dir() and not destination.is_symlink():
            shutil.rmtree(destination)
        temp_path.replace(destination)
    except OSError:
        temp_path.unlink(missing_ok=True)
        raise


def _restore_directory(stored: Path, destination: Path) -> None:
    """Swap ``destination`` for a fresh copy of ``stored``."""
    staging = Path(
        tempfile.mkdtemp(
            dir=destination.parent,
            prefix=f".{destination.name}_",
            suffix=SNAPSHOT_TMP_SUFFIX,
        )
    )
    incoming = staging / "incoming"
    outgoing = staging / "outgoing"
    try:
        shutil.copytree(stored, incoming, symlinks=True)
        if destination.is_symlink() or destination.is_file():
            destination.unlink()
        elif destination.exists():
            destination.rename(outgoing)
        incoming.rename(destination)
    except OSError:
        if outgoing.exists() and not destination.exists():
            outgoing.rename(destination)
        raise
    finally:
        shutil.rmtree(staging, ignore_errors=True)


def restore_items(
    snapshot_dir: Path, items: Iterable[BackupItem], home: Path
) -> tuple[int, list[Path]]:
    """Restore every manifest item from a snapshot.

    Args:
        snapshot_dir: Validated snapshot directory
        items: Manifest records to restore
        home: Home directory the snapshot's ``home/`` prefix refers to

    Returns:
        Tuple of (restored count, paths that failed)

    """
    files_dir = snapshot_dir / SNAPSHOT_FILES_DIRNAME
    restored = 0
    failed: list[Path] = []

    for item in items:
        destination = item.source_path
        stored = files_dir / stored_relative_path(destination, home)
        if not stored.exists() and not stored.is_symlink():
            logger.error("Stored copy missing for %s", destination)
            failed.append(destination)
            continue

        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            if item.kind == ITEM_KIND_DIR:
                _restore_directory(stored, destination)
            else:
                _restore_file(stored, destination)
        except OSError as e:
            logger.error("Failed to restore %s: %s", destination, e)
            failed.append(destination)
            continue

        logger.debug("Restored %s", destination)
        restored += 1

    return restored, failed
