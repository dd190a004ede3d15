"""
minish Shell Module

The interactive session loop.

Author: YSNRFD
Version: 1.0.0
"""

import sys
from typing import Optional, TextIO

from .builtins import BuiltinCommands
from .expander import WordExpander
from .prompt import Prompt
from .reader import LineReader
from minish.core.config_loader import Config, get_config
from minish.core.environment import Environment
from minish.core.reporter import Reporter
from minish.exceptions import ExpansionError, ExpansionErrorKind
from minish.logger import get_logger
from minish.process.launcher import ProcessLauncher


EXPANSION_MESSAGES = {
    ExpansionErrorKind.BAD_CHAR:
        "Illegal occurrence of newline or one of |, &, ;, <, >, (, ), {, }.",
    ExpansionErrorKind.BAD_VALUE:
        "Undefined shell variable was referenced",
    ExpansionErrorKind.COMMAND_SUBSTITUTION:
        "Command line substitution is prohibited",
    ExpansionErrorKind.NO_SPACE:
        "Out of memory",
    ExpansionErrorKind.SYNTAX:
        "Syntax error: unbalanced parentheses, unmatched quotes etc",
}


class Shell:
    """
    minish interactive shell.

    Provides:
    - Current-directory prompt
    - Word expansion of each line
    - Built-in commands (export, unset, cd, exit)
    - Foreground execution of external programs

    The session owns the line reader and the expander and releases both
    exactly once, whichever way the loop ends.

    Example:
        >>> shell = Shell()
        >>> status = shell.run()
    """

    def __init__(
        self,
        environment: Optional[Environment] = None,
        config: Optional[Config] = None,
        stdin: Optional[TextIO] = None,
        stdout: Optional[TextIO] = None,
        stderr: Optional[TextIO] = None
    ):
        self._config = config or get_config()
        self._logger = get_logger('shell')
        self._environment = environment if environment is not None else Environment()
        self._stdout = stdout

        self._reporter = Reporter(self._config.shell.program_name, stream=stderr)
        self._reader = LineReader(stdin)
        self._expander = WordExpander(
            self._environment,
            undefined_is_error=self._config.expansion.undefined_is_error,
            enable_glob=self._config.expansion.enable_glob,
            enable_tilde=self._config.expansion.enable_tilde,
        )
        self._prompt = Prompt(self._reporter, self._config.prompt, stream=stdout)
        self._launcher = ProcessLauncher(
            self._environment,
            self._reporter,
            exec_failure_status=self._config.launcher.exec_failure_status,
            stream=stdout,
        )
        self._builtins = BuiltinCommands(self)

        self._exiting = False
        self._finished = False

    @property
    def environment(self) -> Environment:
        return self._environment

    @property
    def reporter(self) -> Reporter:
        return self._reporter

    @property
    def reader(self) -> LineReader:
        return self._reader

    @property
    def expander(self) -> WordExpander:
        return self._expander

    @property
    def launcher(self) -> ProcessLauncher:
        return self._launcher

    @property
    def builtins(self) -> BuiltinCommands:
        return self._builtins

    @property
    def stdout(self) -> TextIO:
        return self._stdout if self._stdout is not None else sys.stdout

    @property
    def exiting(self) -> bool:
        return self._exiting

    def run(self) -> int:
        """
        Run the interactive shell.

        This is the main REPL loop. It ends at end of input or on the
        ``exit`` built-in.

        Returns:
            Exit status of the session

        Raises:
            FatalShellError: On an unrecoverable error, after cleanup
            RuntimeError: If the session has already run
        """
        if self._finished:
            raise RuntimeError("session has already finished")

        self._logger.info("Session started")

        try:
            while not self._exiting:
                self._prompt.show()

                line = self._reader.read_line()
                if line is None:
                    # Leave the terminal on a fresh line
                    self.stdout.write("\n")
                    self.stdout.flush()
                    break

                self._execute_line(line)
        finally:
            self._finish()

        if self._reader.error is not None:
            self._reporter.report_and_terminate(
                "Failed to read next line", self._reader.error
            )

        self._logger.info("Session finished")
        return 0

    def _finish(self) -> None:
        """Release session resources."""
        self._finished = True
        self._expander.release()
        self._reader.close()

    def _execute_line(self, line: str) -> Optional[int]:
        """
        Execute a command line.

        Args:
            line: Command line string without its newline

        Returns:
            Exit code of the built-in or program, or None if nothing ran
        """
        try:
            words = self._expander.expand(line)
        except ExpansionError as e:
            self._report_expansion_error(e)
            return None

        if not words:
            return None

        command = words.command

        if self._builtins.is_builtin(command):
            return self._builtins.execute(command, words.args)

        termination = self._launcher.launch(command, words.to_list())
        if termination is None:
            return None
        return termination.code if termination.exited else 128 + termination.code

    def _report_expansion_error(self, error: ExpansionError) -> None:
        message = EXPANSION_MESSAGES.get(error.kind)
        if message is None:
            self._reporter.report_and_terminate(
                f"Unexpected wordexp error code: {error.kind}"
            )
        self._reporter.report_and_continue(message)

    def request_exit(self) -> None:
        """Request the shell to exit after the current line."""
        self._exiting = True

