"""Evaluation contexts and the nesting stack.

An EvalContext is "where code runs": a target object plus the globals
and locals used to execute code against it. Contexts are created by the
evaluator (see ``PythonEvaluator.context_for``) and compared by identity.

ContextStack holds the chain of contexts entered with ``cd``. The last
element is the current context; the first is the one the session was
started with.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

# Names a session binds in the current context while code runs in it
SPECIAL_NAMES = ("_", "_ex_", "_in_", "_out_", "_burrow_")


@dataclass(eq=False)
class EvalContext:
    """Target object plus the namespaces code is executed in.

    Attributes:
        target: Object the context is bound to (available as ``self``
            for non-module targets).
        globals: Globals mapping passed to ``exec``/``eval``.
        locals: Locals mapping passed to ``exec``/``eval``. May be the
            same dict as ``globals`` (top level, modules).
        name: Display name used in prompts and ``nesting`` output.
        top_level: True for the process's top-level context.
    """

    target: Any
    globals: dict[str, Any]
    locals: dict[str, Any] = field(repr=False)
    name: str = ""
    top_level: bool = False

    def __repr__(self) -> str:
        return f"EvalContext(name={self.name!r}, top_level={self.top_level})"


class ContextStack:
    """Ordered chain of EvalContexts; ``top`` is the current one."""

    def __init__(self, initial: EvalContext | None = None) -> None:
        self._contexts: list[EvalContext] = []
        if initial is not None:
            self._contexts.append(initial)

    @property
    def top(self) -> EvalContext:
        """The current context.

        Raises:
            IndexError: If the stack is empty.
        """
        if not self._contexts:
            raise IndexError("context stack is empty")
        return self._contexts[-1]

    @property
    def bottom(self) -> EvalContext:
        if not self._contexts:
            raise IndexError("context stack is empty")
        return self._contexts[0]

    @property
    def depth(self) -> int:
        """Nesting level: 0 at the starting context, -1 when empty."""
        return len(self._contexts) - 1

    def push(self, context: EvalContext) -> EvalContext:
        self._contexts.append(context)
        return context

    def pop(self) -> EvalContext:
        """Remove and return the current context.

        Popping the last context leaves the stack empty; the owning
        session treats that as the end of the session.
        """
        if not self._contexts:
            raise IndexError("pop from empty context stack")
        return self._contexts.pop()

    def unwind(self) -> None:
        """Pop everything above the bottom context."""
        del self._contexts[1:]

    def reset(self, initial: EvalContext) -> None:
        """Replace the whole chain with a single context."""
        self._contexts = [initial]

    def clear(self) -> None:
        self._contexts.clear()

    def __len__(self) -> int:
        return len(self._contexts)

    def __bool__(self) -> bool:
        return bool(self._contexts)

    def __iter__(self) -> Iterator[EvalContext]:
        return iter(list(self._contexts))

    def __getitem__(self, index: int) -> EvalContext:
        return self._contexts[index]

    def __repr__(self) -> str:
        names = " > ".join(context.name for context in self._contexts)
        return f"ContextStack({names})"
