"""Process-wide guard allowing one active session at a time.

Evaluation runs against process-global state (``__main__``, imported
modules), so two sessions looping at once would step on each other.
Conflicting starts fail immediately instead of waiting.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager

from burrow.core.errors import ReentrancyError

logger = logging.getLogger(__name__)


class CriticalSection:
    """Non-blocking binary guard.

    Example:
        >>> guard = CriticalSection()
        >>> guard.enter()
        True
        >>> guard.enter()
        False
        >>> guard.exit()
        >>> guard.active
        False
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()

    @property
    def active(self) -> bool:
        return self._lock.locked()

    def enter(self) -> bool:
        """Claim the guard. Returns False if it is already held."""
        acquired = self._lock.acquire(blocking=False)
        if not acquired:
            logger.debug("critical_section_busy")
        return acquired

    def exit(self) -> None:
        """Release the guard. Safe to call when it is not held."""
        if self._lock.locked():
            self._lock.release()

    @contextmanager
    def hold(self) -> Iterator[None]:
        """Hold the guard for the duration of a ``with`` block.

        Raises:
            ReentrancyError: If the guard is already held.
        """
        if not self.enter():
            raise ReentrancyError("a burrow session is already active")
        try:
            yield
        finally:
            self.exit()


# Shared by every session in the process unless one is injected
CRITICAL_SECTION = CriticalSection()
