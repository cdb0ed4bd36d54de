"""Input, output and formatting seams.

The session talks to the outside world only through these protocols.
Plain implementations live here; terminal ones (prompt_toolkit, rich)
live in ``burrow.frontends.cli.terminal``.
"""

from __future__ import annotations

import sys
from collections.abc import Iterable
from typing import IO, Any, Protocol, runtime_checkable

from burrow.core.results import Errored


@runtime_checkable
class InputSource(Protocol):
    """Supplies lines of input."""

    def next_line(self, prompt: str) -> str | None:
        """Return the next line (without trailing newline), or None when exhausted."""
        ...


@runtime_checkable
class OutputSink(Protocol):
    """Receives text to show the user."""

    def write(self, text: str) -> None: ...


@runtime_checkable
class Printer(Protocol):
    """Turns results into text."""

    def format_value(self, value: Any) -> str: ...

    def format_error(self, result: Errored) -> str: ...


# =============================================================================
# Inputs
# =============================================================================


class LineInput:
    """Feeds a fixed sequence of lines, then reports exhaustion.

    Example:
        >>> source = LineInput(["x = 1", "exit-all"])
        >>> source.next_line("> ")
        'x = 1'
    """

    def __init__(self, lines: Iterable[str]) -> None:
        self._lines = iter(lines)

    def next_line(self, prompt: str) -> str | None:
        return next(self._lines, None)


class StreamInput:
    """Reads lines from a file-like object."""

    def __init__(self, stream: IO[str] | None = None, echo: IO[str] | None = None) -> None:
        self.stream = stream if stream is not None else sys.stdin
        self.echo = echo

    def next_line(self, prompt: str) -> str | None:
        if self.echo is not None:
            self.echo.write(prompt)
            self.echo.flush()
        line = self.stream.readline()
        if not line:
            return None
        return line.rstrip("\r\n")


class ChainedInput:
    """Reads from each source in turn until all are exhausted."""

    def __init__(self, *sources: InputSource) -> None:
        self._sources = list(sources)

    def next_line(self, prompt: str) -> str | None:
        while self._sources:
            line = self._sources[0].next_line(prompt)
            if line is not None:
                return line
            self._sources.pop(0)
        return None


# =============================================================================
# Outputs
# =============================================================================


class StreamOutput:
    """Writes each message as a line on a file-like object."""

    def __init__(self, stream: IO[str] | None = None) -> None:
        self.stream = stream if stream is not None else sys.stdout

    def write(self, text: str) -> None:
        self.stream.write(text if text.endswith("\n") else text + "\n")
        self.stream.flush()


class PlainPrinter:
    """``=> repr(value)`` for values, ``Type: message`` for errors."""

    def format_value(self, value: Any) -> str:
        return f"=> {value!r}"

    def format_error(self, result: Errored) -> str:
        error = result.error
        message = str(error)
        name = type(error).__name__
        return f"{name}: {message}" if message else name
