"""
Shell Built-in Commands

Commands executed by the session itself rather than as external
programs: export, unset, cd and exit.

Author: YSNRFD
Version: 1.0.0
"""

import os
from typing import Callable, List

from minish.exceptions import InvalidVariableError
from minish.logger import get_logger


class BuiltinCommands:
    """
    Built-in shell commands.

    Each command takes the words after the command name and returns an
    exit status. Failures are reported and never raised; only a fatal
    condition (FatalShellError) escapes.
    """

    def __init__(self, shell):
        """
        Initialize built-in commands.

        Args:
            shell: The shell instance
        """
        self._shell = shell
        self._logger = get_logger('builtins')
        self._commands: dict[str, Callable[[List[str]], int]] = {
            'export': self.cmd_export,
            'unset': self.cmd_unset,
            'cd': self.cmd_cd,
            'exit': self.cmd_exit,
        }

    def get_commands(self) -> dict[str, Callable[[List[str]], int]]:
        """Get all built-in commands."""
        return self._commands

    def is_builtin(self, name: str) -> bool:
        """Check if a command is built-in (exact match)."""
        return name in self._commands

    def execute(self, name: str, args: List[str]) -> int:
        """
        Execute a built-in command.

        Args:
            name: Command name
            args: Command arguments, command name excluded

        Returns:
            Exit code
        """
        cmd = self._commands.get(name)
        if cmd is None:
            return 127
        self._logger.debug(f"Running built-in {name}", context={'argc': len(args)})
        return cmd(args)

    # Command implementations

    def cmd_export(self, args: List[str]) -> int:
        """Set NAME=VALUE pairs; arguments without '=' are ignored."""
        env = self._shell.environment
        reporter = self._shell.reporter
        status = 0

        for arg in args:
            try:
                key, sep, value = arg.partition('=')
            except MemoryError as e:
                reporter.report_and_terminate("Couldn't copy a string", e)

            if not sep:
                continue

            try:
                env.set(key, value)
            except (InvalidVariableError, OSError) as e:
                reporter.report_and_continue(f"Couldn't set {arg}", e)
                status = 1

        return status

    def cmd_unset(self, args: List[str]) -> int:
        """Remove variables; missing ones are not an error."""
        env = self._shell.environment
        reporter = self._shell.reporter
        status = 0

        for name in args:
            try:
                env.unset(name)
            except (InvalidVariableError, OSError) as e:
                reporter.report_and_continue(f"Couldn't unset {name}", e)
                status = 1

        return status

    def cmd_cd(self, args: List[str]) -> int:
        """Change directory to the argument, or to HOME without one."""
        reporter = self._shell.reporter

        if len(args) > 1:
            reporter.report_and_continue("Too many arguments")
            return 1

        if args:
            path = args[0]
        else:
            path = self._shell.environment.get('HOME')
            if path is None:
                reporter.report_and_continue("HOME not set")
                return 1

        try:
            os.chdir(path)
        except (OSError, ValueError) as e:
            reporter.report_and_continue(f"Couldn't cd to {path}", e)
            return 1

        self._logger.debug(f"Changed directory to {path}")
        return 0

    def cmd_exit(self, args: List[str]) -> int:
        """Exit the shell. Arguments are ignored."""
        self._shell.request_exit()
        return 0
