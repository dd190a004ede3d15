"""
minish Core Module

Core components shared by the shell and the launcher:
- Configuration Loader
- Environment Store
- Diagnostic Reporter
"""

from .config_loader import (
    ConfigLoader,
    Config,
    ShellConfig,
    PromptConfig,
    ExpansionConfig,
    LauncherConfig,
    LoggingConfig,
    get_config,
)
from .environment import Environment
from .reporter import Reporter, describe_error

__all__ = [
    # Config
    'ConfigLoader',
    'Config',
    'ShellConfig',
    'PromptConfig',
    'ExpansionConfig',
    'LauncherConfig',
    'LoggingConfig',
    'get_config',
    # Environment
    'Environment',
    # Reporter
    'Reporter',
    'describe_error',
]
