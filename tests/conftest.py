"""Pytest configuration and fixtures."""

from __future__ import annotations

import io
import types

import pytest

from burrow.core.config import Config
from burrow.core.critical_section import CriticalSection
from burrow.core.evaluator import PythonEvaluator
from burrow.core.io import LineInput, StreamOutput
from burrow.core.rc import RCState
from burrow.core.session import Session


@pytest.fixture(autouse=True)
def _enable_burrow(monkeypatch):
    """Tests never run with the global disable switch set."""
    monkeypatch.delenv("DISABLE_BURROW", raising=False)


@pytest.fixture
def main_module():
    """Stand-in for ``__main__`` so tests do not touch pytest's own."""
    return types.ModuleType("__main__")


@pytest.fixture
def evaluator(main_module):
    return PythonEvaluator(main_module=main_module)


@pytest.fixture
def out():
    """Buffer receiving everything sessions write."""
    return io.StringIO()


@pytest.fixture
def make_session(evaluator, out):
    """Factory for sessions reading the given lines.

    Each session gets its own critical section and rc flag, and rc
    loading is off unless a config is passed.
    """

    def factory(*lines: str, **kwargs) -> Session:
        kwargs.setdefault("config", Config(should_load_rc=False))
        kwargs.setdefault("critical_section", CriticalSection())
        kwargs.setdefault("rc_state", RCState())
        kwargs.setdefault("input", LineInput(lines))
        return Session(
            evaluator=evaluator,
            output=StreamOutput(out),
            **kwargs,
        )

    return factory


@pytest.fixture
def repl_eval(make_session):
    """Run lines through a fresh session and return its last result."""

    def run(*lines: str, **kwargs):
        session = make_session(*lines, "exit-all", **kwargs)
        session.run()
        return session.last_result

    return run
