"""
Prompt Module

Renders the two-line prompt showing the current working directory:

    ┌[/home/ada/src]
    └─>

Author: YSNRFD
Version: 1.0.0
"""

import os
import sys
from typing import Callable, Optional, TextIO

from minish.core.config_loader import PromptConfig
from minish.core.reporter import Reporter


class Prompt:
    """
    Current-directory prompt.

    Failing to obtain the working directory is reported and replaced by
    a placeholder; it never stops the session.
    """

    def __init__(
        self,
        reporter: Reporter,
        config: Optional[PromptConfig] = None,
        stream: Optional[TextIO] = None,
        getcwd: Callable[[], str] = os.getcwd
    ):
        self._reporter = reporter
        self._config = config or PromptConfig()
        self._stream = stream
        self._getcwd = getcwd

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdout

    def current_directory(self) -> str:
        """The directory to display, or a placeholder."""
        try:
            cwd = self._getcwd()
        except OSError as e:
            self._reporter.report_and_continue("Couldn't get cwd", e)
            return self._config.cwd_failed_placeholder

        if len(cwd) >= self._config.max_path_length:
            return self._config.path_too_long_placeholder
        return cwd

    def render(self) -> str:
        return f"┌[{self.current_directory()}]\n└─> "

    def show(self) -> None:
        stream = self.stream
        text = self.render()
        try:
            stream.write(text)
        except UnicodeEncodeError:
            # Box drawing or an undecodable path the stream cannot encode
            encoding = getattr(stream, 'encoding', None) or 'ascii'
            stream.write(text.encode(encoding, 'replace').decode(encoding))
        stream.flush()
