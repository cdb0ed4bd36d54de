"""Command registry and dispatch.

Commands are REPL instructions (``cd``, ``exit``, ``ls``...) that run
instead of being evaluated. This module provides:
- Command: a registered action plus how input is matched against it
- CommandRegistry: name -> Command mapping, last registration wins
- CommandContext: what an action receives when it runs
- Rewrite: returned by an action to have other source evaluated instead
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from burrow.core.errors import CommandError

if TYPE_CHECKING:
    from burrow.core.context import EvalContext
    from burrow.core.session import Session


@dataclass(frozen=True)
class Rewrite:
    """Evaluate ``source`` in place of the command line."""

    source: str


@dataclass
class CommandContext:
    """All state a command action can work with.

    Attributes:
        session: Session running the command.
        command: The matched command.
        arg_text: Raw text captured after the command name.
        line: Full input line that matched.
    """

    session: Session
    command: Command
    arg_text: str
    line: str

    @property
    def context(self) -> EvalContext:
        """Current evaluation context."""
        return self.session.context_stack.top

    @property
    def args(self) -> list[str]:
        return self.arg_text.split()

    def write(self, text: str) -> None:
        self.session.output.write(text)

    def evaluate(self, source: str) -> Any:
        """Evaluate ``source`` in the current context without recording it."""
        with self.session.specials(self.context):
            return self.session.evaluator.evaluate(self.context, source)


# Type alias for command actions
CommandAction = Callable[[CommandContext], Any]


@dataclass
class Command:
    """A registered command.

    Attributes:
        name: Registry key.
        action: Callable receiving a CommandContext.
        description: One-line help text.
        keep_retval: Publish the action's return value as the last result.
        pattern: Compiled pattern when the command is not matched by name.
    """

    name: str
    action: CommandAction
    description: str = ""
    keep_retval: bool = False
    pattern: re.Pattern[str] | None = field(default=None, repr=False)

    def match(self, line: str) -> str | None:
        """Return the argument text if ``line`` invokes this command."""
        text = line.strip()
        if self.pattern is not None:
            found = self.pattern.match(text)
            if found is None:
                return None
            return (found.group(1) or "") if found.re.groups else text[found.end() :]
        if text == self.name:
            return ""
        if text.startswith(self.name) and text[len(self.name)].isspace():
            return text[len(self.name) :].strip()
        return None


@dataclass(frozen=True)
class CommandMatch:
    """Result of a successful registry lookup."""

    command: Command
    arg_text: str


class CommandRegistry:
    """Mutable name -> Command mapping.

    Registering a name that already exists replaces the old command, so
    commands can be redefined while a session runs.

    Example:
        >>> registry = CommandRegistry()
        >>> @registry.command("++", keep_retval=True)
        ... def increment(ctx):
        ...     return int(ctx.arg_text) + 1
        >>> registry.find("++ 86").arg_text
        '86'
    """

    def __init__(self) -> None:
        self._commands: dict[str, Command] = {}

    def register(
        self,
        name: str,
        action: CommandAction,
        *,
        description: str = "",
        keep_retval: bool = False,
        pattern: str | re.Pattern[str] | None = None,
    ) -> Command:
        if not name or any(ch.isspace() for ch in name):
            raise ValueError(f"Invalid command name: {name!r}")
        if isinstance(pattern, str):
            pattern = re.compile(pattern)
        command = Command(
            name=name,
            action=action,
            description=description or (action.__doc__ or "").strip().split("\n")[0],
            keep_retval=keep_retval,
            pattern=pattern,
        )
        self._commands[name] = command
        return command

    def command(
        self,
        name: str,
        *,
        description: str = "",
        keep_retval: bool = False,
        pattern: str | re.Pattern[str] | None = None,
    ) -> Callable[[CommandAction], CommandAction]:
        """Decorator form of ``register``."""

        def decorator(action: CommandAction) -> CommandAction:
            self.register(
                name,
                action,
                description=description,
                keep_retval=keep_retval,
                pattern=pattern,
            )
            return action

        return decorator

    def alias(self, new_name: str, existing: str) -> Command:
        """Register ``new_name`` as another name for ``existing``."""
        command = self.get(existing)
        return self.register(
            new_name,
            command.action,
            description=f"Alias for `{existing}`",
            keep_retval=command.keep_retval,
        )

    def unregister(self, name: str) -> None:
        if name not in self._commands:
            raise CommandError(f"No such command: {name}")
        del self._commands[name]

    def get(self, name: str) -> Command:
        try:
            return self._commands[name]
        except KeyError:
            raise CommandError(f"No such command: {name}") from None

    def find(self, line: str) -> CommandMatch | None:
        """Look up the command invoked by ``line``.

        Returns None when nothing matches. ``line`` is never modified.
        Longer names are tried first so ``exit-all`` wins over ``exit``.
        """
        for command in sorted(self._commands.values(), key=lambda c: len(c.name), reverse=True):
            arg_text = command.match(line)
            if arg_text is not None:
                return CommandMatch(command=command, arg_text=arg_text)
        return None

    def names(self) -> list[str]:
        return sorted(self._commands)

    def copy(self) -> CommandRegistry:
        registry = CommandRegistry()
        registry._commands = dict(self._commands)
        return registry

    def __contains__(self, name: object) -> bool:
        return name in self._commands

    def __iter__(self) -> Iterator[Command]:
        return iter(list(self._commands.values()))

    def __len__(self) -> int:
        return len(self._commands)
