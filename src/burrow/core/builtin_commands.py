"""Built-in commands.

Each handler receives a CommandContext. Navigation commands change the
session's context stack; the rest only print.
"""

from __future__ import annotations

from typing import Any

from burrow.core.commands import CommandContext, CommandRegistry
from burrow.core.context import SPECIAL_NAMES
from burrow.core.errors import CommandError

# =============================================================================
# Navigation
# =============================================================================


def cmd_cd(ctx: CommandContext) -> None:
    """Move into an object (`cd ..` to go back, `cd /` for the start)."""
    arg = ctx.arg_text.strip()
    session = ctx.session

    if arg in ("", "/"):
        session.context_stack.unwind()
        return
    if arg == "..":
        session.pop_context()
        return

    target = ctx.evaluate(arg)
    evaluator = session.evaluator
    session.push_context(evaluator.context_for(target, parent=ctx.context))


def _exit_value(ctx: CommandContext) -> Any:
    return ctx.evaluate(ctx.arg_text) if ctx.arg_text.strip() else None


def cmd_exit(ctx: CommandContext) -> None:
    """Leave the current context; leaving the last one ends the session."""
    ctx.session.pop_context(_exit_value(ctx))


def cmd_exit_all(ctx: CommandContext) -> None:
    """End the session regardless of nesting."""
    ctx.session.exit_all(_exit_value(ctx))


def cmd_exit_program(ctx: CommandContext) -> None:
    """Exit the whole process."""
    raise SystemExit(_exit_value(ctx) or 0)


# =============================================================================
# Introspection
# =============================================================================


def cmd_nesting(ctx: CommandContext) -> None:
    """Show the chain of contexts."""
    lines = ["Nesting status:", "--"]
    for level, context in enumerate(ctx.session.context_stack):
        suffix = " (burrow top level)" if level == 0 else ""
        lines.append(f"{level}. {context.name}{suffix}")
    ctx.write("\n".join(lines))


def cmd_ls(ctx: CommandContext) -> None:
    """List names in the current context (`-l` for locals only)."""
    args = ctx.args
    unknown = [arg for arg in args if arg != "-l"]
    if unknown:
        raise CommandError(f"ls: unknown option {unknown[0]}")

    context = ctx.context
    names = {
        name
        for name in context.locals
        if not name.startswith("__") and name not in SPECIAL_NAMES
    }
    if "-l" not in args and not context.top_level:
        names.update(name for name in dir(context.target) if not name.startswith("_"))

    if names:
        ctx.write("  ".join(sorted(names)))


def cmd_hist(ctx: CommandContext) -> None:
    """Show input history (`hist N` for the last N entries)."""
    entries = ctx.session.input_history.numbered()
    if ctx.arg_text:
        try:
            count = int(ctx.arg_text)
        except ValueError:
            raise CommandError(f"hist: expected a number, got {ctx.arg_text!r}") from None
        entries = entries[-count:] if count > 0 else []

    if not entries:
        ctx.write("No history")
        return
    width = len(str(entries[-1][0]))
    for number, source in entries:
        first, *rest = source.rstrip("\n").split("\n")
        ctx.write(f"{number:>{width}}: {first}")
        for line in rest:
            ctx.write(f"{'':>{width}}  {line}")


def cmd_help(ctx: CommandContext) -> None:
    """Show available commands."""
    commands = list(ctx.session.commands)
    width = max((len(command.name) for command in commands), default=0)
    lines = ["Commands:"]
    for command in sorted(commands, key=lambda c: c.name):
        lines.append(f"  {command.name:<{width}}  {command.description}")
    ctx.write("\n".join(lines))


# =============================================================================
# Command Registry
# =============================================================================


def default_commands() -> CommandRegistry:
    """Build a fresh registry holding the built-in commands."""
    registry = CommandRegistry()
    registry.register("cd", cmd_cd)
    registry.register("exit", cmd_exit)
    registry.alias("quit", "exit")
    registry.register("exit-all", cmd_exit_all)
    registry.alias("!!@", "exit-all")
    registry.register("exit-program", cmd_exit_program)
    registry.alias("!!!", "exit-program")
    registry.register("nesting", cmd_nesting)
    registry.register("ls", cmd_ls)
    registry.register("hist", cmd_hist)
    registry.register("help", cmd_help)
    return registry
