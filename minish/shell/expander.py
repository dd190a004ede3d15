"""
Word Expander Module

Turns a raw command line into argument words using POSIX-style rules:
- Whitespace-separated words
- Single quotes, double quotes and backslash escapes
- Variable substitution ($NAME, ${NAME}) with field splitting
- Tilde expansion (~, ~user)
- Pathname (glob) expansion

Failures fall into a closed set of categories (ExpansionErrorKind).

Author: YSNRFD
Version: 1.0.0
"""

import glob
import os
import pwd
import re
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple

from minish.core.environment import Environment
from minish.exceptions import ExpansionError, ExpansionErrorKind
from minish.logger import get_logger


# Characters that are illegal unquoted; no pipelines, redirection or grouping
BAD_CHARS = frozenset('|&;<>(){}\n')
FIELD_SEPARATORS = ' \t\n'
GLOB_CHARS = frozenset('*?[')
SPECIAL_PARAMETERS = frozenset('0123456789?#!@*-$')

_NAME_START = re.compile(r'[A-Za-z_]')
_NAME = re.compile(r'[A-Za-z_][A-Za-z0-9_]*')
_TILDE_USER = re.compile(r'[A-Za-z0-9._-]*')
_SEPARATOR_RUN = re.compile(r'[ \t\n]+')


class WordVector:
    """
    Ordered argument words produced by one expansion.

    The expander owns a single instance and refills it on every call, so
    a vector is only valid until the next ``expand``.
    """

    def __init__(self):
        self._words: List[str] = []

    @property
    def command(self) -> Optional[str]:
        """Word 0, the command or built-in name."""
        return self._words[0] if self._words else None

    @property
    def args(self) -> List[str]:
        """Every word after the command name."""
        return self._words[1:]

    def clear(self) -> None:
        self._words.clear()

    def extend(self, words: List[str]) -> None:
        self._words.extend(words)

    def to_list(self) -> List[str]:
        return list(self._words)

    def __len__(self) -> int:
        return len(self._words)

    def __getitem__(self, index):
        return self._words[index]

    def __iter__(self) -> Iterator[str]:
        return iter(self._words)

    def __eq__(self, other) -> bool:
        if isinstance(other, WordVector):
            return self._words == other._words
        if isinstance(other, list):
            return self._words == other
        return NotImplemented

    def __repr__(self) -> str:
        return f"WordVector({self._words!r})"


@dataclass
class _Word:
    """A word under construction."""
    segments: List[Tuple[str, bool]] = field(default_factory=list)
    started: bool = False
    has_glob: bool = False

    def add(self, text: str, quoted: bool) -> None:
        self.segments.append((text, quoted))
        self.started = True
        if not quoted and any(c in GLOB_CHARS for c in text):
            self.has_glob = True

    def literal(self) -> str:
        return ''.join(text for text, _ in self.segments)

    def pattern(self) -> str:
        return ''.join(
            glob.escape(text) if quoted else text
            for text, quoted in self.segments
        )


class WordExpander:
    """
    Expands command lines into words.

    Handles:
    - Quoting ('...', "...", backslash)
    - $NAME, ${NAME} and $$ substitution
    - Field splitting of unquoted substitutions
    - ~ and ~user at the start of a word
    - *, ? and [...] pathname expansion

    Rejects:
    - Unquoted | & ; < > ( ) { } and newline (BAD_CHAR)
    - Undefined variables (BAD_VALUE)
    - $(...) and `...` (COMMAND_SUBSTITUTION)
    - Unterminated quotes, ${ and trailing backslash (SYNTAX)

    The expander owns one reusable WordVector and must be released
    exactly once when the session ends.

    Example:
        >>> expander = WordExpander(Environment({'HOME': '/home/ada'}))
        >>> expander.expand("ls -l ~/'my docs'").to_list()
        ['ls', '-l', '/home/ada/my docs']
        >>> expander.release()
    """

    def __init__(
        self,
        environment: Optional[Environment] = None,
        undefined_is_error: bool = True,
        enable_glob: bool = True,
        enable_tilde: bool = True
    ):
        self._env = environment if environment is not None else Environment()
        self._undefined_is_error = undefined_is_error
        self._enable_glob = enable_glob
        self._enable_tilde = enable_tilde
        self._logger = get_logger('expander')

        self._buffer = WordVector()
        self._released = False

        # Work area for the line being expanded
        self._fields: List[_Word] = []
        self._current = _Word()

    @property
    def released(self) -> bool:
        return self._released

    def release(self) -> None:
        """
        Release the expansion buffer.

        Raises:
            RuntimeError: If the buffer was already released
        """
        if self._released:
            raise RuntimeError("word expansion buffer released twice")
        self._buffer.clear()
        self._fields = []
        self._released = True

    def expand(self, line: str) -> WordVector:
        """
        Expand a command line.

        Args:
            line: Command line without its trailing newline

        Returns:
            The expander's WordVector, refilled with this line's words

        Raises:
            ExpansionError: If the line cannot be expanded
            RuntimeError: If the expander has been released
        """
        if self._released:
            raise RuntimeError("word expansion buffer has been released")

        self._buffer.clear()
        self._fields = []
        self._current = _Word()

        try:
            self._split(line)
            for word in self._fields:
                self._buffer.extend(self._finish(word))
        except MemoryError:
            self._buffer.clear()
            raise ExpansionError(ExpansionErrorKind.NO_SPACE, "out of memory")
        except ExpansionError as e:
            self._buffer.clear()
            self._logger.debug(
                f"Expansion failed: {e.message}",
                context={'kind': e.kind.value, 'position': e.position}
            )
            raise
        finally:
            self._fields = []

        return self._buffer

    def _split(self, line: str) -> None:
        """Split the line into words, applying quoting and substitutions."""
        quote: Optional[str] = None
        length = len(line)
        i = 0

        while i < length:
            char = line[i]

            # Inside single quotes everything is literal
            if quote == "'":
                if char == "'":
                    quote = None
                else:
                    self._current.add(char, quoted=True)
                i += 1
                continue

            if quote == '"':
                if char == '"':
                    quote = None
                    i += 1
                elif char == '\\' and i + 1 < length and line[i + 1] in '$`"\\\n':
                    self._current.add(line[i + 1], quoted=True)
                    i += 2
                elif char == '`':
                    raise self._command_substitution(i)
                elif char == '$':
                    i = self._substitute(line, i, quoted=True)
                else:
                    self._current.add(char, quoted=True)
                    i += 1
                continue

            if char in ' \t':
                self._end_word()
                i += 1
                continue

            if char in BAD_CHARS:
                raise ExpansionError(
                    ExpansionErrorKind.BAD_CHAR,
                    f"illegal character {char!r}",
                    position=i
                )

            if char in ('"', "'"):
                quote = char
                self._current.started = True
                i += 1
                continue

            if char == '\\':
                if i + 1 >= length:
                    raise ExpansionError(
                        ExpansionErrorKind.SYNTAX,
                        "trailing backslash",
                        position=i
                    )
                self._current.add(line[i + 1], quoted=True)
                i += 2
                continue

            if char == '`':
                raise self._command_substitution(i)

            if char == '$':
                i = self._substitute(line, i, quoted=False)
                continue

            if char == '~' and not self._current.started and self._enable_tilde:
                i = self._expand_tilde(line, i)
                continue

            self._current.add(char, quoted=False)
            i += 1

        if quote is not None:
            raise ExpansionError(
                ExpansionErrorKind.SYNTAX,
                f"unterminated {quote} quote",
                position=length
            )

        self._end_word()

    def _end_word(self) -> None:
        if self._current.started:
            self._fields.append(self._current)
            self._current = _Word()

    def _command_substitution(self, position: int) -> ExpansionError:
        return ExpansionError(
            ExpansionErrorKind.COMMAND_SUBSTITUTION,
            "command substitution is not allowed",
            position=position
        )

    def _substitute(self, line: str, i: int, quoted: bool) -> int:
        """
        Handle a '$' at ``line[i]``.

        Returns:
            Index of the first character after the substitution
        """
        nxt = line[i + 1] if i + 1 < len(line) else ''

        if nxt == '(':
            raise self._command_substitution(i)

        if nxt == '{':
            close = line.find('}', i + 2)
            if close == -1:
                raise ExpansionError(
                    ExpansionErrorKind.SYNTAX,
                    "unterminated ${",
                    position=i
                )
            name = line[i + 2:close]
            if not (_NAME.fullmatch(name) or
                    (len(name) == 1 and name in SPECIAL_PARAMETERS)):
                raise ExpansionError(
                    ExpansionErrorKind.SYNTAX,
                    f"bad substitution ${{{name}}}",
                    position=i
                )
            end = close + 1
        elif nxt and _NAME_START.match(nxt):
            name = _NAME.match(line, i + 1).group(0)
            end = i + 1 + len(name)
        elif nxt and nxt in SPECIAL_PARAMETERS:
            name = nxt
            end = i + 2
        else:
            # A lone '$' stands for itself
            self._current.add('$', quoted=quoted)
            return i + 1

        value = self._lookup(name, i)
        self._insert(value, quoted)
        return end

    def _lookup(self, name: str, position: int) -> str:
        if name == '$':
            return str(os.getpid())

        value = None
        if _NAME.fullmatch(name):
            value = self._env.get(name)

        if value is None:
            if self._undefined_is_error:
                raise ExpansionError(
                    ExpansionErrorKind.BAD_VALUE,
                    f"undefined variable {name}",
                    position=position
                )
            value = ''
        return value

    def _insert(self, value: str, quoted: bool) -> None:
        """Append a substitution result, field-splitting it when unquoted."""
        if quoted:
            self._current.add(value, quoted=True)
            return

        if not value:
            return

        if value[0] in FIELD_SEPARATORS:
            self._end_word()

        stripped = value.strip(FIELD_SEPARATORS)
        if stripped:
            for index, piece in enumerate(_SEPARATOR_RUN.split(stripped)):
                if index > 0:
                    self._end_word()
                self._current.add(piece, quoted=False)

        if value[-1] in FIELD_SEPARATORS:
            self._end_word()

    def _expand_tilde(self, line: str, i: int) -> int:
        """Handle '~' or '~user' at the start of a word."""
        user = _TILDE_USER.match(line, i + 1).group(0)
        end = i + 1 + len(user)

        # Only a prefix ended by '/', a blank or end of line is a tilde prefix
        if end < len(line) and line[end] not in '/ \t':
            self._current.add('~', quoted=False)
            return i + 1

        home = self._home_directory(user)
        if home is None:
            self._current.add(line[i:end], quoted=False)
        else:
            self._current.add(home, quoted=True)
        return end

    def _home_directory(self, user: str) -> Optional[str]:
        if not user:
            home = self._env.get('HOME')
            if home is not None:
                return home
            try:
                return pwd.getpwuid(os.getuid()).pw_dir
            except KeyError:
                return None
        try:
            return pwd.getpwnam(user).pw_dir
        except KeyError:
            return None

    def _finish(self, word: _Word) -> List[str]:
        """Apply pathname expansion to a completed word."""
        literal = word.literal()
        if not (word.has_glob and self._enable_glob):
            return [literal]

        matches = sorted(glob.glob(word.pattern()))
        return matches or [literal]
