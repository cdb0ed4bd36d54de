"""Session - one read-eval-print loop over a stack of contexts.

A session:
- Reads lines from its InputSource until a complete unit is buffered
- Runs a matching command instead of evaluating, when there is one
- Evaluates everything else against the current context
- Records inputs and results in bounded histories and keeps the last result
- Writes results to its OutputSink unless the input ends with ``;``

Example:
    >>> from burrow.core.io import LineInput
    >>> session = Session(input=LineInput(["x = 2", "x + 40", "exit-all"]))
    >>> session.run()
    => 2
    => 42
    >>> session.last_result
    42
"""

from __future__ import annotations

import logging
import sys
import traceback
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any

from burrow.core.builtin_commands import default_commands
from burrow.core.commands import CommandContext, CommandMatch, CommandRegistry, Rewrite
from burrow.core.config import Config
from burrow.core.context import SPECIAL_NAMES, ContextStack, EvalContext
from burrow.core.critical_section import CRITICAL_SECTION, CriticalSection
from burrow.core.errors import CommandError
from burrow.core.evaluator import Evaluator, PythonEvaluator
from burrow.core.history import HistoryArray
from burrow.core.io import InputSource, OutputSink, PlainPrinter, Printer, StreamInput, StreamOutput
from burrow.core.rc import RC_STATE, RCLoader, RCState
from burrow.core.results import Errored, EvalResult, Value

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """Where the session is in its read-eval-print cycle."""

    CREATED = auto()
    STARTING = auto()
    READING = auto()
    CLASSIFYING = auto()
    EXECUTING_COMMAND = auto()
    EVALUATING = auto()
    PUBLISHING = auto()
    EXITED = auto()


ExceptionHandler = Callable[[OutputSink, Errored, "Session"], None]


def default_exception_handler(output: OutputSink, result: Errored, session: Session) -> None:
    """Write the formatted error to the session output."""
    output.write(session.printer.format_error(result))


@dataclass
class Session:
    """Interactive session over a stack of evaluation contexts.

    Attributes:
        target: Object to start in. None means the top-level context.
        context: Ready-made starting context; overrides ``target``.
        config: Session settings.
        evaluator: Host-language evaluator.
        input: Where lines come from.
        output: Where results and diagnostics go.
        printer: Formats values and errors for ``output``.
        commands: Commands available in this session.
        exception_handler: Called with every error raised by user code.
        critical_section: Guard ensuring one active session per process.
        rc_state: Process-wide "startup files loaded" flag.
        backtrace: Stack where the session was created. Captured from the
            caller when not given.
    """

    target: Any = None
    context: EvalContext | None = None
    config: Config = field(default_factory=Config)
    evaluator: Evaluator = field(default_factory=PythonEvaluator)
    input: InputSource = field(default_factory=StreamInput)
    output: OutputSink = field(default_factory=StreamOutput)
    printer: Printer = field(default_factory=PlainPrinter)
    commands: CommandRegistry = field(default_factory=default_commands)
    exception_handler: ExceptionHandler = default_exception_handler
    critical_section: CriticalSection = field(default_factory=lambda: CRITICAL_SECTION)
    rc_state: RCState = field(default_factory=lambda: RC_STATE)
    backtrace: list[traceback.FrameSummary] | None = field(default=None, repr=False)

    # State (initialized in __post_init__)
    context_stack: ContextStack = field(init=False)
    input_history: HistoryArray[str] = field(init=False)
    output_history: HistoryArray[EvalResult] = field(init=False)
    last_result: Any = field(default=None, init=False)
    last_exception: BaseException | None = field(default=None, init=False)
    buffer: list[str] = field(default_factory=list, init=False)
    exit_value: Any = field(default=None, init=False)
    active: bool = field(default=False, init=False)
    state: SessionState = field(default=SessionState.CREATED, init=False)
    _lines_read: int = field(default=0, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.backtrace is None:
            # Drop the __post_init__ and generated __init__ frames
            self.backtrace = list(traceback.extract_stack()[:-2])
        if self.context is None:
            if self.target is None:
                self.context = self.evaluator.create_top_level_context()
            else:
                self.context = self.evaluator.context_for(self.target)
        self.context_stack = ContextStack(self.context)
        self.input_history = HistoryArray(self.config.memory_size)
        self.output_history = HistoryArray(self.config.memory_size)

    # =========================================================================
    # Context Stack
    # =========================================================================

    @property
    def current_context(self) -> EvalContext:
        return self.context_stack.top

    @property
    def depth(self) -> int:
        """Number of contexts entered since the session started."""
        return self.context_stack.depth

    @property
    def exited(self) -> bool:
        return not self.context_stack

    def push_context(self, context: EvalContext) -> None:
        self.context_stack.push(context)
        logger.debug("context_pushed: name=%s depth=%d", context.name, self.depth)

    def pop_context(self, value: Any = None) -> None:
        """Leave the current context. Leaving the last one ends the session."""
        self.context_stack.pop()
        if not self.context_stack:
            self.exit_value = value
            logger.debug("session_exit: via=exit")

    def exit_all(self, value: Any = None) -> None:
        """End the session regardless of nesting depth."""
        self.context_stack.clear()
        self.exit_value = value
        logger.debug("session_exit: via=exit-all")

    def prompt(self) -> str:
        name = self.config.prompt_name
        label = self.evaluator.context_label(self.current_context)
        nesting = f":{self.depth}" if self.depth > 0 else ""
        marker = "*" if self.buffer else ">"
        return f"[{self.input_history.count + 1}] {name}({label}){nesting}{marker} "

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def run(self) -> Any:
        """Run the read-eval-print loop until the session exits.

        Returns:
            The value given to the final ``exit``/``exit-all``, or None.
            Also None when burrow is disabled or another session is active.
        """
        if self.config.disabled:
            logger.debug("session_skipped: disabled")
            return None

        if not self.critical_section.enter():
            name = self.config.prompt_name
            self.output.write(
                f"ERROR: {name} started inside {name}.\n"
                "This can happen when a session is started from user code "
                "or a startup file while another session is running."
            )
            return None

        try:
            self.active = True
            self.state = SessionState.STARTING
            self.context_stack.reset(self.context)
            self.buffer.clear()
            self.exit_value = None
            self._lines_read = 0
            self._load_rc()
            logger.debug("session_started: context=%s", self.context.name)
            self._loop()
            return self.exit_value
        finally:
            self.active = False
            self.state = SessionState.EXITED
            self.critical_section.exit()
            logger.debug("session_ended: inputs=%d", self.input_history.count)

    def _load_rc(self) -> None:
        if not self.config.should_load_rc or self.rc_state.loaded:
            return
        loader = RCLoader(self.evaluator, self.output, self.rc_state)
        loader.load(self.config.rc_paths())

    def _loop(self) -> None:
        interrupted = False
        while self.context_stack:
            self.state = SessionState.READING
            try:
                line = self.input.next_line(self.prompt())
            except KeyboardInterrupt:
                if interrupted:
                    self.output.write("Exiting...")
                    self.exit_all()
                    break
                interrupted = True
                self.buffer.clear()
                self.output.write("(Press Ctrl-C again to exit, or continue typing)")
                continue
            interrupted = False

            if line is None:
                if self.buffer or not self._lines_read:
                    name = self.config.prompt_name
                    self.output.write(
                        f"Error: {name} ran out of things to read from! "
                        "Attempting to break out of REPL."
                    )
                self.exit_all()
                break

            self._lines_read += 1
            self.feed(line)

    # =========================================================================
    # Read / Classify / Evaluate / Publish
    # =========================================================================

    def feed(self, line: str) -> EvalResult | None:
        """Process one line of input.

        Returns:
            The result published for the line, or None when the line was
            blank, incomplete, or a command without a kept value.
        """
        if not self.buffer:
            if not line.strip():
                return None
            self.state = SessionState.CLASSIFYING
            match = self.commands.find(line)
            if match is not None:
                return self._run_command(match, line)

        self.buffer.append(line)
        source = "\n".join(self.buffer)
        if not self.evaluator.is_complete(source):
            return None

        self.buffer.clear()
        return self.eval_source(source)

    def eval_source(self, source: str, display_text: str | None = None) -> EvalResult:
        """Evaluate a complete unit of input and publish its result.

        Args:
            source: Code to evaluate in the current context.
            display_text: Text the user typed, when it differs from
                ``source``; decides whether display is suppressed.
        """
        self.state = SessionState.EVALUATING
        context = self.context_stack.top

        result: EvalResult
        try:
            with self.specials(context):
                result = Value(self.evaluator.evaluate(context, source))
        except Exception as e:
            result = Errored.from_exception(e)

        typed = source if display_text is None else display_text
        self._publish(source, result, suppressed=self.evaluator.is_suppressed(typed))
        return result

    def _run_command(self, match: CommandMatch, line: str) -> EvalResult | None:
        self.state = SessionState.EXECUTING_COMMAND
        command = match.command
        logger.debug("command: name=%s", command.name)
        ctx = CommandContext(session=self, command=command, arg_text=match.arg_text, line=line)

        try:
            outcome = command.action(ctx)
        except CommandError as e:
            self.output.write(f"Error: {e}")
            return None
        except Exception as e:
            errored = Errored.from_exception(e)
            self.last_exception = e
            self.exception_handler(self.output, errored, self)
            return errored

        if isinstance(outcome, Rewrite):
            return self.eval_source(outcome.source, display_text=line)
        if not command.keep_retval:
            return None

        result = Value(outcome)
        self._publish(line, result, suppressed=self.evaluator.is_suppressed(line))
        return result

    def _publish(self, source: str, result: EvalResult, suppressed: bool) -> None:
        self.state = SessionState.PUBLISHING
        self.input_history.push(source)
        self.output_history.push(result)
        self.last_result = result.payload

        if isinstance(result, Errored):
            self.last_exception = result.error
            self.exception_handler(self.output, result, self)
        elif not suppressed:
            self.output.write(self.printer.format_value(result.value))

    @contextmanager
    def specials(self, context: EvalContext) -> Iterator[None]:
        """Bind ``_``, ``_ex_``, ``_in_``, ``_out_`` and ``_burrow_`` while code runs.

        The names are only visible for the duration of the block. Afterwards
        each one is removed from ``context.locals``, or set back to what it
        was before, unless the evaluated code rebound it. Module and
        top-level contexts therefore keep no trace of the session.
        """
        injected = dict(
            zip(
                SPECIAL_NAMES,
                (
                    self.last_result,
                    self.last_exception,
                    self.input_history,
                    self.output_history,
                    self,
                ),
            )
        )
        namespace = context.locals
        missing = object()
        saved = {name: namespace.get(name, missing) for name in SPECIAL_NAMES}
        namespace.update(injected)
        try:
            yield
        finally:
            for name, value in injected.items():
                if namespace.get(name, missing) is not value:
                    continue
                if saved[name] is missing:
                    del namespace[name]
                else:
                    namespace[name] = saved[name]


# =============================================================================
# Entry Points
# =============================================================================

_SESSION_ARGS = {
    "context",
    "evaluator",
    "input",
    "output",
    "printer",
    "commands",
    "exception_handler",
    "critical_section",
    "rc_state",
    "backtrace",
}


def start(target: Any = None, **options: Any) -> Any:
    """Start a session on ``target`` (top level when None) and run it.

    Session collaborators (``input``, ``output``, ``evaluator``...) are
    passed through; every other option configures the session, and
    options burrow does not recognize are kept in ``Config.extras``.

    Returns:
        The session's exit value, or None if burrow is disabled.
    """
    config = options.pop("config", None)
    if (config or Config()).disabled:
        return None

    session_args = {key: options.pop(key) for key in list(options) if key in _SESSION_ARGS}
    session_args.setdefault("backtrace", traceback.extract_stack(sys._getframe(1)))
    if config is None:
        config = Config.from_options(**options)
    elif options:
        config = config.with_options(**options)
    return Session(target=target, config=config, **session_args).run()


def here(**options: Any) -> Any:
    """Start a session in the caller's frame.

    Code runs against the caller's globals and a copy of its locals, with
    ``self`` bound when the caller has one.
    """
    frame = sys._getframe(1)
    try:
        evaluator = options.pop("evaluator", None) or PythonEvaluator()
        context = EvalContext(
            target=frame.f_locals.get("self"),
            globals=frame.f_globals,
            locals=dict(frame.f_locals),
            name=frame.f_code.co_name,
        )
        options.setdefault("backtrace", traceback.extract_stack(frame))
    finally:
        del frame
    return start(context=context, evaluator=evaluator, **options)
