"""
Process States Module

Records describing a finished child process.

Author: YSNRFD
Version: 1.0.0
"""

import signal
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional


class TerminationKind(Enum):
    """How a child process ended."""

    EXITED = auto()
    """Process called exit; ``code`` holds its exit status."""

    SIGNALED = auto()
    """Process was killed by a signal; ``code`` holds the signal number."""


@dataclass(frozen=True)
class ChildRecord:
    """A (pid, wait status) pair, discarded once classified."""
    pid: int
    wait_status: int


@dataclass(frozen=True)
class Termination:
    """Classified outcome of a child process."""
    kind: TerminationKind
    code: int
    signal_name: Optional[str] = None

    @property
    def exited(self) -> bool:
        return self.kind is TerminationKind.EXITED

    @property
    def signaled(self) -> bool:
        return self.kind is TerminationKind.SIGNALED

    def describe(self) -> str:
        """The status line printed after the child is reaped."""
        if self.exited:
            return f"Process exited with error code {self.code}"
        return f"Process was terminated by signal {self.code}: {self.signal_name}"


def signal_description(signum: int) -> str:
    """Human-readable signal name, e.g. 'Killed' for 9."""
    try:
        description = signal.strsignal(signum)
    except ValueError:
        description = None
    if description:
        return description
    try:
        return signal.Signals(signum).name
    except ValueError:
        return f"Unknown signal {signum}"
