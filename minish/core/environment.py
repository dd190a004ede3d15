"""
Environment Store

The key/value mapping the ``export``, ``unset`` and ``cd`` built-ins act on
and the launcher hands to child processes. By default it wraps
``os.environ`` so changes reach the real process environment; tests
inject a plain dict instead.

Author: YSNRFD
Version: 1.0.0
"""

import os
from typing import Iterator, MutableMapping, Optional

from minish.exceptions import InvalidVariableError


class Environment:
    """
    Injectable environment variable store.

    Invariants:
        - names are non-empty and contain neither '=' nor NUL
        - values contain no NUL

    Example:
        >>> env = Environment({})
        >>> env.set('EDITOR', 'vi')
        >>> env.get('EDITOR')
        'vi'
        >>> env.unset('EDITOR')
        >>> 'EDITOR' in env
        False
    """

    def __init__(self, store: Optional[MutableMapping[str, str]] = None):
        self._store = os.environ if store is None else store

    @property
    def is_process_environment(self) -> bool:
        """True when changes go straight to ``os.environ``."""
        return self._store is os.environ

    @staticmethod
    def validate_name(name: str) -> None:
        if not name:
            raise InvalidVariableError(name, "Empty variable name")
        if '=' in name:
            raise InvalidVariableError(name, "Variable name contains '='")
        if '\0' in name:
            raise InvalidVariableError(name, "Variable name contains NUL")

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self._store.get(name, default)

    def set(self, name: str, value: str) -> None:
        """
        Set a variable, overwriting any existing value.

        Raises:
            InvalidVariableError: If the name or value cannot be stored
        """
        self.validate_name(name)
        if '\0' in value:
            raise InvalidVariableError(name, "Variable value contains NUL")
        self._store[name] = value

    def unset(self, name: str) -> None:
        """
        Remove a variable. Removing a missing variable is not an error.

        Raises:
            InvalidVariableError: If the name is not a valid variable name
        """
        self.validate_name(name)
        self._store.pop(name, None)

    def snapshot(self) -> dict[str, str]:
        """Copy of the current mapping, as handed to exec."""
        return dict(self._store)

    def __contains__(self, name: object) -> bool:
        return name in self._store

    def __getitem__(self, name: str) -> str:
        return self._store[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._store)

    def __len__(self) -> int:
        return len(self._store)
