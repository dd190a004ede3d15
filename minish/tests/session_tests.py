#!/usr/bin/env python3
"""
minish Session Tests

Tests that fork real child processes or drive the whole session loop:
the process launcher, the REPL and the entry point.

Run with: python -m pytest minish/tests -v
Or: python minish/tests/session_tests.py

Author: YSNRFD
Version: 1.0.0
"""

import errno
import io
import os
import shutil
import signal
import sys
import unittest
from unittest import mock

from minish.core.config_loader import Config, ConfigLoader
from minish.core.environment import Environment
from minish.core.reporter import Reporter
from minish.exceptions import FatalShellError, WaitStatusError
from minish.main import main
from minish.process.launcher import ProcessLauncher
from minish.process.states import ChildRecord, TerminationKind, signal_description
from minish.shell import shell as shell_module
from minish.shell.shell import Shell


TRUE = shutil.which('true') or '/bin/true'
FALSE = shutil.which('false') or '/bin/false'
SH = shutil.which('sh') or '/bin/sh'


def prompt_text() -> str:
    return f"┌[{os.getcwd()}]\n└─> "


class FailingStream(io.StringIO):
    def readline(self, *args):
        raise OSError(errno.EIO, os.strerror(errno.EIO))


class TestProcessLauncher(unittest.TestCase):
    """Test fork/exec/wait and termination classification."""

    def setUp(self):
        self.out = io.StringIO()
        self.err = io.StringIO()
        self.env = Environment({'PATH': os.environ.get('PATH', '/bin:/usr/bin')})
        self.launcher = ProcessLauncher(
            self.env,
            Reporter('minish', stream=self.err),
            stream=self.out,
        )

    def test_true_exits_zero(self):
        termination = self.launcher.launch(TRUE, [TRUE])

        self.assertIs(termination.kind, TerminationKind.EXITED)
        self.assertEqual(termination.code, 0)
        self.assertEqual(self.out.getvalue(), "Process exited with error code 0\n")

    def test_false_exits_one(self):
        termination = self.launcher.launch(FALSE, [FALSE])

        self.assertEqual(termination.code, 1)
        self.assertEqual(self.out.getvalue(), "Process exited with error code 1\n")

    def test_resolves_against_path(self):
        termination = self.launcher.launch('true', ['true'])

        self.assertTrue(termination.exited)
        self.assertEqual(termination.code, 0)

    def test_child_sees_environment(self):
        self.env.set('MINISH_PROBE', 'exported')

        termination = self.launcher.launch(
            SH, [SH, '-c', 'test "$MINISH_PROBE" = exported']
        )

        self.assertEqual(termination.code, 0)

    def test_killed_by_signal(self):
        termination = self.launcher.launch(SH, [SH, '-c', 'kill -9 $$'])

        self.assertIs(termination.kind, TerminationKind.SIGNALED)
        self.assertEqual(termination.code, 9)
        self.assertEqual(termination.signal_name, signal_description(signal.SIGKILL))
        self.assertEqual(
            self.out.getvalue(),
            f"Process was terminated by signal 9: {signal_description(9)}\n"
        )

    def test_exec_failure_exits_child_only(self):
        termination = self.launcher.launch(
            'minish-no-such-program', ['minish-no-such-program']
        )

        self.assertTrue(termination.exited)
        self.assertEqual(termination.code, self.launcher.exec_failure_status)

    def test_fork_failure(self):
        error = OSError(errno.EAGAIN, os.strerror(errno.EAGAIN))
        with mock.patch('os.fork', side_effect=error):
            self.assertIsNone(self.launcher.launch(TRUE, [TRUE]))

        self.assertEqual(
            self.err.getvalue(),
            f"minish: Failed to fork: {os.strerror(errno.EAGAIN)}\n"
        )
        self.assertEqual(self.out.getvalue(), "")

    def test_wait_failure(self):
        error = ChildProcessError(errno.ECHILD, os.strerror(errno.ECHILD))
        with mock.patch('os.fork', return_value=424242), \
                mock.patch('os.waitpid', side_effect=error):
            self.assertIsNone(self.launcher.launch(TRUE, [TRUE]))

        self.assertEqual(
            self.err.getvalue(),
            f"minish: Failed to wait for child 424242: {os.strerror(errno.ECHILD)}\n"
        )

    def test_classify_exit_and_signal(self):
        exited = self.launcher.classify(ChildRecord(pid=1, wait_status=3 << 8))
        signaled = self.launcher.classify(ChildRecord(pid=1, wait_status=signal.SIGTERM))

        self.assertEqual((exited.kind, exited.code), (TerminationKind.EXITED, 3))
        self.assertEqual((signaled.kind, signaled.code), (TerminationKind.SIGNALED, 15))

    def test_classify_rejects_inconsistent_status(self):
        stopped = (signal.SIGSTOP << 8) | 0x7f
        continued = 0xffff

        for status in (stopped, continued):
            with self.subTest(status=status):
                with self.assertRaises(WaitStatusError) as ctx:
                    self.launcher.classify(ChildRecord(pid=1, wait_status=status))
                self.assertEqual(ctx.exception.pid, 1)
                self.assertEqual(ctx.exception.status, status)

    def test_inconsistent_wait_status_is_fatal(self):
        stopped = (signal.SIGSTOP << 8) | 0x7f
        with mock.patch('os.fork', return_value=424242), \
                mock.patch('os.waitpid', return_value=(424242, stopped)):
            with self.assertRaises(FatalShellError) as ctx:
                self.launcher.launch(TRUE, [TRUE])

        self.assertEqual(ctx.exception.exit_code, 1)
        self.assertEqual(
            self.err.getvalue(),
            "minish: waitpid should have waited for the process termination, "
            "but it didn't\n"
        )
        self.assertEqual(self.out.getvalue(), "")


class TestSession(unittest.TestCase):
    """Test the read-eval loop."""

    def make_shell(self, stdin, env=None, config=None):
        self.out = io.StringIO()
        self.err = io.StringIO()
        self.store = {} if env is None else env
        return Shell(
            environment=Environment(self.store),
            config=config or Config(),
            stdin=stdin if not isinstance(stdin, str) else io.StringIO(stdin),
            stdout=self.out,
            stderr=self.err,
        )

    def test_end_of_input(self):
        shell = self.make_shell("")

        self.assertEqual(shell.run(), 0)

        self.assertEqual(self.out.getvalue(), prompt_text() + "\n")
        self.assertEqual(self.err.getvalue(), "")
        self.assertTrue(shell.expander.released)
        self.assertTrue(shell.reader.closed)

    def test_blank_line_does_nothing(self):
        shell = self.make_shell("\n")

        with mock.patch.object(shell.launcher, 'launch') as launch:
            self.assertEqual(shell.run(), 0)

        launch.assert_not_called()
        self.assertEqual(self.out.getvalue(), prompt_text() * 2 + "\n")
        self.assertEqual(self.err.getvalue(), "")

    def test_exit_stops_the_loop(self):
        shell = self.make_shell("exit now\nexport A=1\n")

        self.assertEqual(shell.run(), 0)

        self.assertEqual(self.store, {})
        self.assertEqual(self.out.getvalue(), prompt_text())
        self.assertTrue(shell.expander.released)

    def test_builtins_across_lines(self):
        shell = self.make_shell("export A=1 B=2\nunset A\nexport B\nunset X\nunset X\n")

        self.assertEqual(shell.run(), 0)

        self.assertEqual(self.store, {'B': '2'})
        self.assertEqual(self.err.getvalue(), "")

    def test_expansion_error_skips_line(self):
        shell = self.make_shell("ls | wc\necho $UNDEFINED\n")

        with mock.patch.object(shell.launcher, 'launch') as launch:
            shell.run()

        launch.assert_not_called()
        self.assertEqual(
            self.err.getvalue().splitlines(),
            [
                "minish: Illegal occurrence of newline or one of |, &, ;, <, >, (, ), {, }.",
                "minish: Undefined shell variable was referenced",
            ]
        )

    def test_unknown_expansion_kind_is_fatal(self):
        shell = self.make_shell("echo 'unterminated\n")

        with mock.patch.dict(shell_module.EXPANSION_MESSAGES, clear=True):
            with self.assertRaises(FatalShellError) as ctx:
                shell.run()

        self.assertEqual(ctx.exception.exit_code, 1)
        self.assertIn("Unexpected wordexp error code", self.err.getvalue())
        self.assertTrue(shell.expander.released)
        self.assertTrue(shell.reader.closed)

    def test_external_command(self):
        shell = self.make_shell(f"{TRUE}\n{FALSE} ignored-arg\n")

        shell.run()

        output = self.out.getvalue()
        self.assertIn("Process exited with error code 0\n", output)
        self.assertIn("Process exited with error code 1\n", output)

    def test_program_gets_full_argv(self):
        shell = self.make_shell("prog 'a b' c\n")

        with mock.patch.object(shell.launcher, 'launch', return_value=None) as launch:
            shell.run()

        launch.assert_called_once_with('prog', ['prog', 'a b', 'c'])

    def test_undecodable_line_does_not_end_the_session(self):
        stdin = io.TextIOWrapper(io.BytesIO(b"\xff\nexport A=1\n"), encoding='utf-8')
        shell = self.make_shell(stdin, env={'PATH': os.environ.get('PATH', '/bin:/usr/bin')})

        self.assertEqual(shell.run(), 0)

        self.assertEqual(self.store['A'], '1')
        self.assertIn(
            f"Process exited with error code {shell.launcher.exec_failure_status}\n",
            self.out.getvalue()
        )
        self.assertEqual(self.err.getvalue(), "")

    def test_read_error_is_fatal_after_cleanup(self):
        shell = self.make_shell(FailingStream())

        with self.assertRaises(FatalShellError) as ctx:
            shell.run()

        self.assertEqual(ctx.exception.exit_code, 1)
        self.assertEqual(
            self.err.getvalue(),
            f"minish: Failed to read next line: {os.strerror(errno.EIO)}\n"
        )
        self.assertTrue(shell.expander.released)
        self.assertTrue(shell.reader.closed)

    def test_session_runs_once(self):
        shell = self.make_shell("")
        shell.run()

        with self.assertRaises(RuntimeError):
            shell.run()

    def test_program_name_from_config(self):
        config = Config()
        config.shell.program_name = 'msh'
        shell = self.make_shell("cd a b\n", config=config)

        shell.run()

        self.assertEqual(self.err.getvalue(), "msh: Too many arguments\n")


class TestMain(unittest.TestCase):
    """Test the entry point."""

    def setUp(self):
        ConfigLoader().reset()
        self.environ = mock.patch.dict(os.environ)
        self.environ.start()
        os.environ.pop('MINISH_CONFIG', None)

    def tearDown(self):
        self.environ.stop()
        ConfigLoader().reset()

    def test_exit_status_zero(self):
        with mock.patch('sys.stdin', io.StringIO("exit\n")), \
                mock.patch('sys.stdout', new_callable=io.StringIO):
            self.assertEqual(main([]), 0)

    def test_end_of_input_status_zero(self):
        with mock.patch('sys.stdin', io.StringIO("")), \
                mock.patch('sys.stdout', new_callable=io.StringIO) as out:
            self.assertEqual(main([]), 0)

        self.assertTrue(out.getvalue().endswith("└─> \n"))

    def test_read_error_status_one(self):
        with mock.patch('sys.stdin', FailingStream()), \
                mock.patch('sys.stdout', new_callable=io.StringIO), \
                mock.patch('sys.stderr', new_callable=io.StringIO) as err:
            self.assertEqual(main([]), 1)

        self.assertIn("Failed to read next line", err.getvalue())

    def test_bad_arguments(self):
        with mock.patch('sys.stderr', new_callable=io.StringIO) as err:
            self.assertEqual(main(['--verbose']), 1)
            self.assertEqual(main(['--config']), 1)
            self.assertEqual(main(['--config', '/nonexistent/minish.json']), 1)

        self.assertIn("usage: minish", err.getvalue())


def run_tests():
    """Run all tests."""
    loader = unittest.TestLoader()
    suite = loader.loadTestsFromModule(sys.modules[__name__])

    runner = unittest.TextTestRunner(verbosity=2)
    result = runner.run(suite)

    return 0 if result.wasSuccessful() else 1


if __name__ == '__main__':
    sys.exit(run_tests())
