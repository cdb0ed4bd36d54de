"""Session engine: contexts, histories, commands and the REPL loop."""

from burrow.core.builtin_commands import default_commands
from burrow.core.commands import (
    Command,
    CommandContext,
    CommandMatch,
    CommandRegistry,
    Rewrite,
)
from burrow.core.config import Config
from burrow.core.context import SPECIAL_NAMES, ContextStack, EvalContext
from burrow.core.critical_section import CRITICAL_SECTION, CriticalSection
from burrow.core.errors import BurrowError, CommandError, ReentrancyError
from burrow.core.evaluator import Evaluator, PythonEvaluator
from burrow.core.history import HistoryArray
from burrow.core.io import (
    ChainedInput,
    InputSource,
    LineInput,
    OutputSink,
    PlainPrinter,
    Printer,
    StreamInput,
    StreamOutput,
)
from burrow.core.rc import RC_STATE, RCLoader, RCState
from burrow.core.results import Errored, ErrorKind, EvalResult, Value
from burrow.core.session import Session, SessionState, here, start

__all__ = [
    "BurrowError",
    "ChainedInput",
    "CRITICAL_SECTION",
    "Command",
    "CommandContext",
    "CommandError",
    "CommandMatch",
    "CommandRegistry",
    "Config",
    "ContextStack",
    "CriticalSection",
    "ErrorKind",
    "Errored",
    "EvalContext",
    "EvalResult",
    "Evaluator",
    "HistoryArray",
    "InputSource",
    "LineInput",
    "OutputSink",
    "PlainPrinter",
    "Printer",
    "PythonEvaluator",
    "RCLoader",
    "RCState",
    "RC_STATE",
    "SPECIAL_NAMES",
    "ReentrancyError",
    "Rewrite",
    "Session",
    "SessionState",
    "StreamInput",
    "StreamOutput",
    "Value",
    "default_commands",
    "here",
    "start",
]
