"""Logger state management module.

Holds the process-wide singleton that records whether the root
``zsh_migrator`` logger has been wired to its QueueListener.
"""

import threading
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import queue
    from logging.handlers import QueueListener


class _LoggerState:
    """Container for logger state (avoids module-level mutable globals).

    Attributes:
        lock: Thread lock for singleton initialization
        root_initialized: Whether root logger has been set up
        config_applied: Whether settings.conf levels have been applied
        queue_listener: Background thread draining the log queue
        log_queue: Queue shared by all zsh_migrator loggers

    """

    def __init__(self) -> None:
        """Initialize logger state."""
        self.lock = threading.Lock()
        self.root_initialized = False
        self.config_applied = False
        self.queue_listener: QueueListener | None = None
        self.log_queue: queue.Queue | None = None


_state = _LoggerState()


def get_state() -> _LoggerState:
    """Get the global logger state singleton."""
    return _state
