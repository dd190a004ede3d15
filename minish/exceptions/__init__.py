"""
minish Exception Hierarchy

Architecture:
    ShellException (Base)
    ├── FatalShellError
    ├── ConfigError
    ├── ExpansionError
    └── EnvironmentStoreError
        └── InvalidVariableError
    ProcessException (Base)
    └── WaitStatusError
"""

from .shell_exceptions import (
    ShellException,
    FatalShellError,
    ConfigError,
    ExpansionErrorKind,
    ExpansionError,
    EnvironmentStoreError,
    InvalidVariableError,
)

from .process_exceptions import (
    ProcessException,
    WaitStatusError,
)

__all__ = [
    # Shell exceptions
    "ShellException",
    "FatalShellError",
    "ConfigError",
    "ExpansionErrorKind",
    "ExpansionError",
    "EnvironmentStoreError",
    "InvalidVariableError",
    # Process exceptions
    "ProcessException",
    "WaitStatusError",
]
