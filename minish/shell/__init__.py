"""
minish Shell Module

Provides the interactive command-line shell:
- Line reading
- Word expansion
- Built-in commands
- Prompt rendering
"""

from .expander import WordExpander, WordVector
from .reader import LineReader
from .prompt import Prompt
from .builtins import BuiltinCommands
from .shell import Shell, EXPANSION_MESSAGES

__all__ = [
    'WordExpander',
    'WordVector',
    'LineReader',
    'Prompt',
    'BuiltinCommands',
    'Shell',
    'EXPANSION_MESSAGES',
]
