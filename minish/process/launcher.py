"""
Process Launcher Module

Runs external programs: fork a child, replace its image with the
program, wait for that child and classify how it ended.

The fork/exec split is kept as two operations:
- ``spawn``: create the child; returns the pid in the parent
- ``replace_image``: exec in the child; never returns

Author: YSNRFD
Version: 1.0.0
"""

import os
import sys
from typing import List, NoReturn, Optional, TextIO

from minish.core.environment import Environment
from minish.core.reporter import Reporter
from minish.exceptions import WaitStatusError
from minish.logger import get_logger
from minish.process.states import (
    ChildRecord,
    Termination,
    TerminationKind,
    signal_description,
)


class ProcessLauncher:
    """
    Launches one external program at a time and waits for it.

    There is no retry anywhere: each failure is reported once and
    ``launch`` returns None.

    Example:
        >>> launcher = ProcessLauncher(Environment(), Reporter())
        >>> launcher.launch('/bin/true', ['/bin/true'])
        Process exited with error code 0
        Termination(kind=<TerminationKind.EXITED: 1>, code=0, signal_name=None)
    """

    def __init__(
        self,
        environment: Environment,
        reporter: Reporter,
        exec_failure_status: int = 127,
        stream: Optional[TextIO] = None
    ):
        self._env = environment
        self._reporter = reporter
        self._exec_failure_status = exec_failure_status
        self._stream = stream
        self._logger = get_logger('launcher')

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdout

    @property
    def exec_failure_status(self) -> int:
        return self._exec_failure_status

    def launch(self, program: str, argv: List[str]) -> Optional[Termination]:
        """
        Run ``program`` with ``argv`` and report how it ended.

        Args:
            program: Program name or path, resolved against PATH
            argv: Full argument vector, argv[0] == program

        Returns:
            The classified termination, or None if the child could not
            be created or waited for
        """
        pid = self.spawn(program, argv)
        if pid is None:
            return None

        record = self.wait(pid)
        if record is None:
            return None

        try:
            termination = self.classify(record)
        except WaitStatusError as e:
            self._reporter.report_and_terminate(e.message)

        self.stream.write(termination.describe() + "\n")
        self.stream.flush()
        return termination

    def spawn(self, program: str, argv: List[str]) -> Optional[int]:
        """
        Fork a child that runs ``program``.

        Returns:
            The child's pid, or None if fork failed
        """
        # Buffered output would otherwise be written twice
        sys.stdout.flush()
        sys.stderr.flush()
        self.stream.flush()

        try:
            pid = os.fork()
        except OSError as e:
            self._reporter.report_and_continue("Failed to fork", e)
            return None

        if pid == 0:
            self.replace_image(program, argv)

        self._logger.debug(f"Started {program}", pid=pid, context={'argc': len(argv)})
        return pid

    def replace_image(self, program: str, argv: List[str]) -> NoReturn:
        """
        Replace the current process image with ``program``.

        Only called in the child. If exec fails the error is reported and
        the child exits with the exec failure status; control never
        returns to the caller.
        """
        try:
            try:
                os.execvpe(program, argv, self._env.snapshot())
            except (OSError, ValueError) as e:
                self._reporter.report_and_continue(f"Failed to exec {program}", e)
        finally:
            os._exit(self._exec_failure_status)

    def wait(self, pid: int) -> Optional[ChildRecord]:
        """
        Block until the child ``pid`` terminates.

        Returns:
            The child's record, or None if waiting failed
        """
        try:
            _, status = os.waitpid(pid, 0)
        except OSError as e:
            self._reporter.report_and_continue(f"Failed to wait for child {pid}", e)
            return None
        return ChildRecord(pid=pid, wait_status=status)

    def classify(self, record: ChildRecord) -> Termination:
        """
        Classify a wait status as exited or signaled.

        A blocking wait without WUNTRACED only returns for terminated
        children, so any other status is an inconsistency.

        Raises:
            WaitStatusError: If the status is neither exited nor signaled
        """
        status = record.wait_status

        if os.WIFEXITED(status):
            termination = Termination(TerminationKind.EXITED, os.WEXITSTATUS(status))
        elif os.WIFSIGNALED(status):
            signum = os.WTERMSIG(status)
            termination = Termination(
                TerminationKind.SIGNALED, signum, signal_description(signum)
            )
        else:
            raise WaitStatusError(record.pid, status)

        self._logger.debug(
            termination.describe(),
            pid=record.pid,
            context={'status': status}
        )
        return termination
