"""Detection of optional command-line tools used by generated aliases."""

import shutil
from collections.abc import Callable, Iterable

from zsh_migrator.logger import get_logger

logger = get_logger(__name__)

TOOL_BINARIES: tuple[str, ...] = ("eza", "bat", "fd", "rg", "fzf")


def detect_tools(
    binaries: Iterable[str] = TOOL_BINARIES,
    which: Callable[[str], str | None] = shutil.which,
) -> dict[str, bool]:
    """Report which tools are on PATH.

    Args:
        binaries: Executable names to look up
        which: Lookup function, ``shutil.which`` by default

    Returns:
        Mapping of executable name to presence

    """
    found = {binary: which(binary) is not None for binary in binaries}
    logger.debug(
        "Tool presence: %s",
        ", ".join(f"{name}={state}" for name, state in found.items()),
    )
    return found


def no_tools(binaries: Iterable[str] = TOOL_BINARIES) -> dict[str, bool]:
    """Presence map with every tool absent, used by ``--skip-tools``."""
    return dict.fromkeys(binaries, False)
