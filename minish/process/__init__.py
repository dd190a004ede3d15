"""
minish Process Module

External program execution:
- Process launcher (fork, exec, wait)
- Child records and termination classification
"""

from .states import ChildRecord, Termination, TerminationKind, signal_description
from .launcher import ProcessLauncher

__all__ = [
    # States
    'ChildRecord',
    'Termination',
    'TerminationKind',
    'signal_description',
    # Launcher
    'ProcessLauncher',
]
