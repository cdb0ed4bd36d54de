"""Evaluation results.

Every evaluated input produces exactly one result:

    Value(value)          the code ran and produced ``value``
    Errored(kind, error)  the code raised ``error``

Both are recorded in a session's output history.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Union


class ErrorKind(Enum):
    """What went wrong while evaluating user input."""

    SYNTAX = "syntax"  # Input could not be compiled
    EXCEPTION = "exception"  # Input raised while running


@dataclass(frozen=True)
class Value:
    """Successful evaluation."""

    value: Any

    @property
    def payload(self) -> Any:
        return self.value

    @property
    def is_error(self) -> bool:
        return False


@dataclass(frozen=True)
class Errored:
    """Evaluation that raised an exception."""

    kind: ErrorKind
    error: Exception

    @classmethod
    def from_exception(cls, error: Exception) -> Errored:
        kind = ErrorKind.SYNTAX if isinstance(error, SyntaxError) else ErrorKind.EXCEPTION
        return cls(kind=kind, error=error)

    @property
    def payload(self) -> Exception:
        return self.error

    @property
    def is_error(self) -> bool:
        return True


EvalResult = Union[Value, Errored]
