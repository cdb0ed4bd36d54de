"""Error types raised by burrow itself.

Errors raised by user code are never wrapped in these: they are caught
as ``Exception`` and recorded as ``Errored`` results. Anything deriving
from ``BaseException`` but not ``Exception`` (``SystemExit``,
``KeyboardInterrupt``) is left to propagate.
"""

from __future__ import annotations


class BurrowError(Exception):
    """Base class for burrow errors."""


class CommandError(BurrowError):
    """A command was used incorrectly. Shown to the user as ``Error: <message>``."""


class ReentrancyError(BurrowError):
    """A session is already active in this process."""
