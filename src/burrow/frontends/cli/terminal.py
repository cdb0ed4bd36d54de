"""Terminal I/O for interactive sessions.

PromptInput reads lines with prompt_toolkit (line editing, in-memory
history). ConsoleOutput and RichPrinter render results with rich.
"""

from __future__ import annotations

from typing import Any

from prompt_toolkit import PromptSession
from prompt_toolkit.history import InMemoryHistory
from rich.console import Console
from rich.pretty import pretty_repr
from rich.theme import Theme

from burrow.core.io import PlainPrinter
from burrow.core.results import Errored, ErrorKind


def create_theme(
    *,
    result: str = "default",
    error: str = "bold red",
    diagnostic: str = "bold yellow",
) -> Theme:
    """Create the console theme used for session output."""
    return Theme(
        {
            "result": result,
            "error": error,
            "diagnostic": diagnostic,
        }
    )


DEFAULT_THEME = create_theme()

# Prefixes of messages written by the engine itself rather than by results
_ERROR_PREFIXES = ("Error", "ERROR")


class PromptInput:
    """InputSource backed by a prompt_toolkit PromptSession.

    Ctrl-D (EOFError) is reported as exhausted input. Ctrl-C
    (KeyboardInterrupt) propagates to the session, which discards the
    pending buffer.
    """

    def __init__(self, prompt_session: PromptSession[str] | None = None) -> None:
        self._prompt_session = prompt_session or PromptSession(history=InMemoryHistory())

    def next_line(self, prompt: str) -> str | None:
        try:
            return self._prompt_session.prompt(prompt)
        except EOFError:
            return None


class ConsoleOutput:
    """OutputSink writing through a rich Console.

    Args:
        console: Console to print to. Created with the default theme
            when omitted.
        color: Highlight output. When False the console is built with
            ``no_color`` and nothing is highlighted.
    """

    def __init__(self, console: Console | None = None, color: bool = True) -> None:
        self.color = color
        if console is None:
            console = Console(theme=DEFAULT_THEME, no_color=not color)
        else:
            console.push_theme(DEFAULT_THEME)
        self.console = console

    def write(self, text: str) -> None:
        style = "diagnostic" if text.startswith(_ERROR_PREFIXES) else None
        self.console.print(
            text,
            style=style,
            markup=False,
            highlight=self.color and style is None,
            soft_wrap=True,
        )


class RichPrinter(PlainPrinter):
    """Pretty-prints values with ``rich.pretty``.

    Long containers are wrapped to ``max_width`` columns and truncated
    after ``max_length`` items.
    """

    def __init__(self, max_width: int = 100, max_length: int | None = 100) -> None:
        self.max_width = max_width
        self.max_length = max_length

    def format_value(self, value: Any) -> str:
        try:
            text = pretty_repr(value, max_width=self.max_width, max_length=self.max_length)
        except Exception:
            text = f"<unprintable {type(value).__name__} object>"
        return f"=> {text}"

    def format_error(self, result: Errored) -> str:
        text = super().format_error(result)
        if result.kind is ErrorKind.SYNTAX and isinstance(result.error, SyntaxError):
            error = result.error
            if error.text and error.offset:
                line = error.text.rstrip("\n")
                caret = " " * (error.offset - 1) + "^"
                text = f"{text}\n  {line}\n  {caret}"
        return text
