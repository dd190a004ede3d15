"""
Line Reader Module

Reads one command line at a time from an input stream.

Author: YSNRFD
Version: 1.0.0
"""

import sys
from typing import Optional, TextIO


class LineReader:
    """
    Reads newline-delimited lines from an input stream.

    ``read_line`` returns ``None`` both at end-of-stream and when reading
    fails; ``error`` tells the two apart.

    Example:
        >>> reader = LineReader(io.StringIO("ls -l\\n"))
        >>> reader.read_line()
        'ls -l'
        >>> reader.read_line() is None
        True
    """

    def __init__(self, stream: Optional[TextIO] = None):
        self._stream = stream
        self._line: Optional[str] = None
        self._error: Optional[BaseException] = None
        self._closed = False

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdin

    @property
    def line(self) -> Optional[str]:
        """The most recently read line, newline trimmed."""
        return self._line

    @property
    def error(self) -> Optional[BaseException]:
        """The error that stopped reading, if any."""
        return self._error

    @property
    def closed(self) -> bool:
        return self._closed

    @staticmethod
    def trim_newline(line: str) -> str:
        """Remove a single trailing newline."""
        if line.endswith('\n'):
            return line[:-1]
        return line

    @staticmethod
    def _keep_undecodable_bytes(stream: TextIO) -> None:
        """
        Switch a strict text stream to ``surrogateescape``.

        Bytes that are not valid in the stream's encoding then arrive as
        lone surrogates, which ``os.fsencode`` turns back into the
        original bytes for exec and the environment.
        """
        if getattr(stream, 'errors', None) == 'strict' and hasattr(stream, 'reconfigure'):
            stream.reconfigure(errors='surrogateescape')

    def read_line(self) -> Optional[str]:
        """
        Read the next line.

        Returns:
            The line without its trailing newline, or None when no more
            lines are available
        """
        if self._closed:
            raise RuntimeError("line reader is closed")

        stream = self.stream
        self._keep_undecodable_bytes(stream)

        try:
            raw = stream.readline()
        except OSError as e:
            self._error = e
            self._line = None
            return None

        if raw == '':
            self._line = None
            return None

        self._line = self.trim_newline(raw)
        return self._line

    def close(self) -> None:
        """
        Drop the line buffer. The underlying stream is left open.

        Raises:
            RuntimeError: If the reader was already closed
        """
        if self._closed:
            raise RuntimeError("line reader closed twice")
        self._line = None
        self._closed = True
