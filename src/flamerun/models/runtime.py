"""
Runtime data models.

This module contains the data structures that exist during a single sampling
run: the captured workload, the sampler invocation, the sampler's termination
status and its interpretation, and the run's lifecycle states.
"""

import os
import signal as signal_module
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, Tuple, Union

from ..validation.validators import validate_workload_tokens


@dataclass(frozen=True)
class Workload:
    """
    The command and arguments to be profiled, captured once per run.
    """

    tokens: Tuple[str, ...]

    def __post_init__(self):
        object.__setattr__(self, "tokens", validate_workload_tokens(self.tokens))

    @classmethod
    def from_string(cls, text: str) -> "Workload":
        return cls(validate_workload_tokens(text))

    @classmethod
    def coerce(cls, workload: Union["Workload", str, Sequence[str]]) -> "Workload":
        """Accept a Workload, a shell-style string or a token sequence."""
        if isinstance(workload, Workload):
            return workload
        if isinstance(workload, str):
            return cls.from_string(workload)
        return cls(tuple(workload))

    @property
    def command_line(self) -> str:
        """Tokens joined by single spaces, the form ``dtrace -c`` expects."""
        return " ".join(self.tokens)

    def __str__(self) -> str:
        return self.command_line


@dataclass(frozen=True)
class SamplingCommand:
    """A fully constructed sampler invocation."""

    executable: str
    arguments: Tuple[str, ...]

    @property
    def argv(self) -> List[str]:
        return [self.executable, *self.arguments]

    def __str__(self) -> str:
        return " ".join(self.argv)


@dataclass(frozen=True)
class ExitStatus:
    """
    How the sampler process terminated.

    ``code`` is the exit code for a normal exit and ``signal`` the terminating
    signal number when the platform reports one. At most one of them is set.
    """

    code: Optional[int] = None
    signal: Optional[int] = None

    @classmethod
    def from_returncode(cls, returncode: int) -> "ExitStatus":
        """
        Build a status from a ``Popen.returncode``.

        On POSIX a negative return code means the child was killed by that
        signal. Other platforms carry no signal information.
        """
        if returncode < 0 and os.name == "posix":
            return cls(code=None, signal=-returncode)
        return cls(code=returncode, signal=None)

    @property
    def success(self) -> bool:
        return self.code == 0

    def describe(self) -> str:
        if self.signal is not None:
            try:
                name = signal_module.Signals(self.signal).name
            except ValueError:
                name = str(self.signal)
            return f"terminated by signal {name}"
        if self.code is None:
            return "terminated with unknown status"
        return f"exited with status {self.code}"


class ExitOutcomeKind(Enum):
    SUCCESS = "success"
    USER_INTERRUPTED = "user_interrupted"
    FAILED = "failed"


@dataclass(frozen=True)
class ExitOutcome:
    """The classified result of a sampler run."""

    kind: ExitOutcomeKind
    reason: Optional[str] = None

    @property
    def is_success(self) -> bool:
        return self.kind is ExitOutcomeKind.SUCCESS

    @property
    def is_user_interrupted(self) -> bool:
        return self.kind is ExitOutcomeKind.USER_INTERRUPTED

    @property
    def is_failed(self) -> bool:
        return self.kind is ExitOutcomeKind.FAILED

    @property
    def should_collect(self) -> bool:
        """Whether sampled data should be pushed through the pipeline."""
        return not self.is_failed


class RunState(Enum):
    """Lifecycle of a single sampling run."""

    IDLE = "idle"
    SAMPLING = "sampling"
    CLASSIFYING = "classifying"
    COLLECTING = "collecting"
    COLLAPSING = "collapsing"
    RENDERING = "rendering"
    DONE = "done"
    ABORTED = "aborted"
