"""Startup (rc) script loading.

Startup scripts run once per process, in the top-level context, before
the first session starts reading input. A script that raises is
reported and skipped; it never stops the other scripts or the session.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from burrow.core.evaluator import Evaluator
    from burrow.core.io import OutputSink

logger = logging.getLogger(__name__)


@dataclass
class RCState:
    """Process-wide "rc files already loaded" flag."""

    loaded: bool = False

    def mark_loaded(self) -> None:
        self.loaded = True

    def reset(self) -> None:
        self.loaded = False


# Shared by every session in the process unless one is injected
RC_STATE = RCState()


def resolve_rc_path(path: str) -> Path | None:
    """Expand ``path``, or return None if it cannot be resolved.

    Paths starting with ``~`` need a home directory from the environment;
    without one the file is skipped.
    """
    if path.startswith("~"):
        if not (os.environ.get("HOME") or os.environ.get("USERPROFILE")):
            return None
        expanded = os.path.expanduser(path)
        if expanded.startswith("~"):
            return None
        path = expanded
    try:
        return Path(path).resolve()
    except (OSError, RuntimeError):
        return None


class RCLoader:
    """Runs startup scripts with per-file failure isolation.

    Args:
        evaluator: Evaluator whose top-level context the scripts run in.
        output: Where failure diagnostics are written.
        state: Process-wide loaded flag.
    """

    def __init__(self, evaluator: Evaluator, output: OutputSink, state: RCState = RC_STATE) -> None:
        self.evaluator = evaluator
        self.output = output
        self.state = state

    def load(self, paths: Sequence[str]) -> list[Path]:
        """Run each existing file in ``paths`` once per process.

        Returns:
            The files that were executed (including ones that raised).
            Empty when loading already happened in this process.
        """
        if self.state.loaded:
            logger.debug("rc_skip: already loaded")
            return []

        executed: list[Path] = []
        seen: set[Path] = set()
        for path in paths:
            resolved = resolve_rc_path(path)
            if resolved is None:
                logger.debug("rc_skip: unresolvable path=%s", path)
                continue
            if resolved in seen or not resolved.is_file():
                continue
            seen.add(resolved)
            self._run(path, resolved)
            executed.append(resolved)

        self.state.mark_loaded()
        return executed

    def _run(self, path: str, resolved: Path) -> None:
        context = self.evaluator.create_top_level_context()
        try:
            source = resolved.read_text()
            self.evaluator.evaluate(context, source, filename=str(resolved))
            logger.debug("rc_loaded: path=%s", resolved)
        except Exception as e:
            logger.debug("rc_failed: path=%s error=%r", resolved, e)
            self.output.write(f"Error loading {path}: {e}")
