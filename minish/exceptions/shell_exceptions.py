"""
Shell Exceptions

Exceptions related to the session loop, configuration, word expansion and
the environment store.

Author: YSNRFD
Version: 1.0.0
"""

from enum import Enum
from typing import Optional, Any


class ShellException(Exception):
    """
    Base exception for all shell errors.

    Attributes:
        message: Human-readable error description
        error_code: Numeric error code for programmatic handling
        recoverable: Whether the session can continue after the error
        context: Additional context about the error

    Example:
        >>> raise ShellException("Session failure", error_code=1001)
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[int] = None,
        recoverable: bool = True,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code or 1000
        self.recoverable = recoverable
        self.context = context or {}

    def __str__(self) -> str:
        base = f"[Error {self.error_code}] {self.message}"
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            base = f"{base} ({context_str})"
        return base

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code}, "
            f"recoverable={self.recoverable})"
        )


class FatalShellError(ShellException):
    """
    Unrecoverable failure requiring the interpreter to stop.

    Raised by ``Reporter.report_and_terminate``. The session loop lets it
    unwind through its cleanup, and the entry point turns it into the
    process exit status.

    Example:
        >>> raise FatalShellError("Failed to read next line", exit_code=1)
    """

    def __init__(
        self,
        message: str,
        exit_code: int = 1,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(
            message=message,
            error_code=1999,
            recoverable=False,
            context=context
        )
        self.exit_code = exit_code


class ConfigError(ShellException):
    """Raised when the configuration cannot be loaded or is invalid."""

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        if path is not None:
            ctx["path"] = path
        super().__init__(
            message=message,
            error_code=1001,
            recoverable=False,
            context=ctx
        )
        self.path = path


class ExpansionErrorKind(Enum):
    """Closed set of word expansion failure categories."""
    BAD_CHAR = "bad_char"
    BAD_VALUE = "bad_value"
    COMMAND_SUBSTITUTION = "command_substitution"
    NO_SPACE = "no_space"
    SYNTAX = "syntax"


class ExpansionError(ShellException):
    """
    Word expansion failed.

    The line is abandoned and nothing is executed. ``kind`` selects the
    message the session reports.

    Example:
        >>> raise ExpansionError(ExpansionErrorKind.SYNTAX, "unmatched quote")
    """

    def __init__(
        self,
        kind: ExpansionErrorKind,
        detail: str = "",
        position: Optional[int] = None
    ) -> None:
        ctx: dict[str, Any] = {"kind": kind.value}
        if position is not None:
            ctx["position"] = position
        super().__init__(
            message=detail or kind.value,
            error_code=1100,
            context=ctx
        )
        self.kind = kind
        self.position = position


class EnvironmentStoreError(ShellException):
    """Base error for environment store operations."""

    def __init__(
        self,
        message: str,
        name: Optional[str] = None,
        error_code: int = 1200
    ) -> None:
        ctx = {"name": name} if name is not None else {}
        super().__init__(message=message, error_code=error_code, context=ctx)
        self.name = name


class InvalidVariableError(EnvironmentStoreError):
    """
    A variable name or value cannot be stored in the environment.

    Names must be non-empty and contain neither ``=`` nor NUL; values
    must not contain NUL.
    """

    def __init__(self, name: str, reason: str = "Invalid argument") -> None:
        super().__init__(
            message=reason,
            name=name,
            error_code=1201
        )
        self.reason = reason
