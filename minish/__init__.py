"""
minish - A minimal interactive command interpreter

Reads a line, expands it into words, runs the export/unset/cd/exit
built-ins itself and launches everything else as an external program,
reporting how it ended.
"""

__version__ = "1.0.0"
__author__ = "YSNRFD"

from .shell.shell import Shell

__all__ = [
    'Shell',
]
