"""burrow - attach an interactive Python session to a running program.

Start a session anywhere and inspect or change live state:

    >>> import burrow
    >>> burrow.here()          # in the caller's frame
    >>> burrow.start(obj)      # inside an object, with `self` bound

Inside a session:
    cd <expr>     Move into the value of <expr>
    exit          Leave the current object (the last exit ends the session)
    exit-all      End the session from any depth
    nesting       Show where you are
    _ _in_ _out_  Last result, input history, output history

Layers:
    core/       Session engine (contexts, histories, commands, evaluator)
    frontends/  Terminal front end (prompt_toolkit input, rich output, CLI)

Set DISABLE_BURROW=1 to turn every session start into a no-op.
"""

from burrow.core import (
    Command,
    CommandContext,
    CommandError,
    CommandRegistry,
    Config,
    CriticalSection,
    Errored,
    EvalContext,
    HistoryArray,
    PythonEvaluator,
    RCState,
    Rewrite,
    Session,
    Value,
    default_commands,
    here,
    start,
)

__version__ = "0.1.0"

__all__ = [
    "Command",
    "CommandContext",
    "CommandError",
    "CommandRegistry",
    "Config",
    "CriticalSection",
    "Errored",
    "EvalContext",
    "HistoryArray",
    "PythonEvaluator",
    "RCState",
    "Rewrite",
    "Session",
    "Value",
    "default_commands",
    "here",
    "start",
    "__version__",
]
