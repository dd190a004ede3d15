"""
Diagnostic Reporter

Writes diagnostics to standard error in the form

    minish: <message>[: <OS error description>]

Two operations with distinct control flow:
- ``report_and_continue``: print and return
- ``report_and_terminate``: print and raise ``FatalShellError``

Author: YSNRFD
Version: 1.0.0
"""

import sys
from typing import NoReturn, Optional, TextIO

from minish.exceptions import FatalShellError, ShellException
from minish.logger import Logger, get_logger


def describe_error(error: BaseException) -> str:
    """Human-readable description of an error, preferring strerror."""
    if isinstance(error, OSError) and error.strerror:
        return error.strerror
    if isinstance(error, ShellException):
        return error.message
    return str(error) or type(error).__name__


class Reporter:
    """
    Reports diagnostics to standard error.

    Every report is also logged on the 'diagnostics' subsystem.

    Example:
        >>> reporter = Reporter('minish')
        >>> reporter.report_and_continue("HOME not set")
        minish: HOME not set
    """

    def __init__(
        self,
        program_name: str = "minish",
        stream: Optional[TextIO] = None,
        logger: Optional[Logger] = None
    ):
        self._program_name = program_name
        self._stream = stream
        self._logger = logger or get_logger('diagnostics')

    @property
    def program_name(self) -> str:
        return self._program_name

    @property
    def stream(self) -> TextIO:
        # Resolved lazily so redirected sys.stderr is honoured
        return self._stream if self._stream is not None else sys.stderr

    def format(self, message: str, error: Optional[BaseException] = None) -> str:
        line = f"{self._program_name}: {message}"
        if error is not None:
            line = f"{line}: {describe_error(error)}"
        return line

    def _write(self, line: str) -> None:
        # Keep ordering with anything already buffered on stdout
        sys.stdout.flush()
        self.stream.write(line + "\n")
        self.stream.flush()

    def report_and_continue(
        self,
        message: str,
        error: Optional[BaseException] = None
    ) -> None:
        """Report a recoverable failure; the caller carries on."""
        line = self.format(message, error)
        self._write(line)
        self._logger.error(line)

    def report_and_terminate(
        self,
        message: str,
        error: Optional[BaseException] = None,
        exit_code: int = 1
    ) -> NoReturn:
        """
        Report an unrecoverable failure and stop the interpreter.

        Raises:
            FatalShellError: Always, carrying ``exit_code``
        """
        line = self.format(message, error)
        self._write(line)
        self._logger.critical(line, context={'exit_code': exit_code})
        raise FatalShellError(message, exit_code=exit_code)
