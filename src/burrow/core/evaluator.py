"""Host-language evaluator.

The session engine never runs code itself; it goes through an object
implementing the ``Evaluator`` protocol. ``PythonEvaluator`` is the
in-process implementation used by default.
"""

from __future__ import annotations

import ast
import builtins
import io
import logging
import reprlib
import sys
import tokenize
import types
from code import compile_command
from typing import Any, Protocol, runtime_checkable

from burrow.core.context import EvalContext

logger = logging.getLogger(__name__)

DEFAULT_FILENAME = "<burrow>"

# Tokens that never count as the "last significant" token of an input
_INSIGNIFICANT_TOKENS = {
    tokenize.COMMENT,
    tokenize.NL,
    tokenize.NEWLINE,
    tokenize.INDENT,
    tokenize.DEDENT,
    tokenize.ENDMARKER,
}

_label_repr = reprlib.Repr()
_label_repr.maxstring = 30
_label_repr.maxother = 30


@runtime_checkable
class Evaluator(Protocol):
    """What the session needs from the host language."""

    def create_top_level_context(self) -> EvalContext: ...

    def context_for(self, target: Any, parent: EvalContext | None = None) -> EvalContext: ...

    def evaluate(
        self, context: EvalContext, source: str, filename: str = DEFAULT_FILENAME
    ) -> Any: ...

    def is_complete(self, buffer: str) -> bool: ...

    def is_suppressed(self, source: str) -> bool: ...

    def context_label(self, context: EvalContext) -> str: ...


class PythonEvaluator:
    """Evaluates Python source against EvalContexts.

    Example:
        >>> evaluator = PythonEvaluator()
        >>> top = evaluator.create_top_level_context()
        >>> evaluator.evaluate(top, "x = 40")
        40
        >>> evaluator.evaluate(top, "x + 2")
        42
    """

    def __init__(self, main_module: types.ModuleType | None = None) -> None:
        self._main_module = main_module
        self._top_level: EvalContext | None = None

    @property
    def main_module(self) -> types.ModuleType:
        if self._main_module is None:
            self._main_module = sys.modules["__main__"]
        return self._main_module

    # =========================================================================
    # Contexts
    # =========================================================================

    def create_top_level_context(self) -> EvalContext:
        """Return the context bound to ``__main__``. Always the same object."""
        if self._top_level is None:
            namespace = self.main_module.__dict__
            namespace.setdefault("__builtins__", builtins)
            self._top_level = EvalContext(
                target=self.main_module,
                globals=namespace,
                locals=namespace,
                name="main",
                top_level=True,
            )
        return self._top_level

    def context_for(self, target: Any, parent: EvalContext | None = None) -> EvalContext:
        """Build a context for ``target``.

        Modules execute in their own ``__dict__``. Any other object gets
        fresh locals holding only ``self`` on top of the parent's globals.
        Targets are compared by identity so objects with a broken
        ``__eq__`` are fine.
        """
        if target is self.main_module:
            return self.create_top_level_context()

        if isinstance(target, types.ModuleType):
            namespace = target.__dict__
            context = EvalContext(target=target, globals=namespace, locals=namespace)
        else:
            base = parent if parent is not None else self.create_top_level_context()
            context = EvalContext(target=target, globals=base.globals, locals={"self": target})
        context.name = self.context_label(context)
        logger.debug("context_created: name=%s", context.name)
        return context

    def context_label(self, context: EvalContext) -> str:
        if context.top_level:
            return "main"
        if context.name:
            return context.name
        target = context.target
        if isinstance(target, types.ModuleType):
            return target.__name__
        if isinstance(target, type):
            return target.__name__
        try:
            return _label_repr.repr(target)
        except Exception:
            return f"<{type(target).__name__} object>"

    # =========================================================================
    # Parsing
    # =========================================================================

    def is_complete(self, buffer: str) -> bool:
        """Whether ``buffer`` forms a complete unit of input.

        Invalid code counts as complete so that the SyntaxError is
        reported by ``evaluate`` instead of waiting for more input.
        """
        try:
            return compile_command(buffer, DEFAULT_FILENAME, "single") is not None
        except (SyntaxError, ValueError, OverflowError):
            return True

    def is_suppressed(self, source: str) -> bool:
        """Whether the last significant token of ``source`` is ``;``."""
        last = None
        try:
            for token in tokenize.generate_tokens(io.StringIO(source).readline):
                if token.type not in _INSIGNIFICANT_TOKENS:
                    last = token
        except (tokenize.TokenError, SyntaxError):
            return source.rstrip().endswith(";")
        return last is not None and last.type == tokenize.OP and last.string == ";"

    # =========================================================================
    # Evaluation
    # =========================================================================

    def evaluate(
        self, context: EvalContext, source: str, filename: str = DEFAULT_FILENAME
    ) -> Any:
        """Run ``source`` in ``context`` and return its value.

        The value is the last expression statement's value, or the new
        value of a name assigned by a trailing assignment, or None.

        Raises:
            Whatever the code raises, including SyntaxError.
        """
        tree = ast.parse(source, filename, mode="exec")
        if not tree.body:
            return None

        last = tree.body[-1]
        if isinstance(last, ast.Expr):
            self._exec(tree.body[:-1], context, filename)
            expression = ast.Expression(body=last.value)
            code = compile(expression, filename, "eval")
            return eval(code, context.globals, context.locals)

        self._exec(tree.body, context, filename)
        name = _assigned_name(last)
        if name is None:
            return None
        if name in context.locals:
            return context.locals[name]
        return context.globals.get(name)

    def _exec(self, body: list[ast.stmt], context: EvalContext, filename: str) -> None:
        if not body:
            return
        module = ast.Module(body=body, type_ignores=[])
        exec(compile(module, filename, "exec"), context.globals, context.locals)


def _assigned_name(statement: ast.stmt) -> str | None:
    """Name bound by a trailing ``x = ...``, ``x += ...`` or ``x: T = ...``."""
    if isinstance(statement, ast.Assign):
        target = statement.targets[-1]
    elif isinstance(statement, (ast.AugAssign, ast.AnnAssign)):
        if isinstance(statement, ast.AnnAssign) and statement.value is None:
            return None
        target = statement.target
    else:
        return None
    return target.id if isinstance(target, ast.Name) else None
