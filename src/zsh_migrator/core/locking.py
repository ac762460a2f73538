"""Process-level locking utilities using fcntl.flock.

Snapshot creation, restore and deletion run under an exclusive lock on a
file in the backup base directory so two runs against the same home
directory cannot interleave.
"""

from __future__ import annotations

import fcntl
import os
from pathlib import (
    Path,  # noqa: TC003 - Path used at runtime for file operations
)
from typing import IO, TYPE_CHECKING, Self

from zsh_migrator.exceptions import LockError

if TYPE_CHECKING:
    import types


class LockManager:
    """Context manager holding a non-blocking exclusive ``flock``.

    The lock file receives the holder's PID for diagnostics. Contention
    fails fast with LockError instead of waiting.

    Example:
        >>> with LockManager(Path("~/.config/zsh-migrator/backups/.lock")):
        ...     pass

    """

    def __init__(self, lock_path: Path) -> None:
        """Initialize LockManager with lock file path.

        Args:
            lock_path: Path to the lock file to be created/used.

        """
        self._lock_path = lock_path
        self._lock_file: IO[str] | None = None

    @property
    def held(self) -> bool:
        """Whether this instance currently holds the lock."""
        return self._lock_file is not None

    def acquire(self) -> None:
        """Take the lock.

        Raises:
            LockError: If another process holds it, or the lock file
                cannot be opened.

        """
        self._lock_path.parent.mkdir(parents=True, exist_ok=True)

        lock_file = None
        try:
            lock_file = self._lock_path.open("a+", encoding="utf-8")
            fcntl.flock(lock_file.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
            lock_file.seek(0)
            lock_file.truncate()
            lock_file.write(f"{os.getpid()}\n")
            lock_file.flush()
            self._lock_file = lock_file
        except BlockingIOError as e:
            if lock_file is not None:
                lock_file.close()
            msg = "Another zsh-migrator instance is already running"
            raise LockError(msg, cause=e, unaffected="no files touched") from e
        except OSError as e:
            if lock_file is not None:
                lock_file.close()
            msg = f"Failed to acquire lock: {e}"
            raise LockError(msg, cause=e, unaffected="no files touched") from e

    def release(self) -> None:
        """Release the lock; safe to call when not held."""
        if self._lock_file is not None:
            self._lock_file.close()
            self._lock_file = None

    def __enter__(self) -> Self:
        """Acquire lock when entering context."""
        self.acquire()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: types.TracebackType | None,
    ) -> None:
        """Release lock when exiting context."""
        self.release()
