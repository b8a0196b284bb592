"""
Infrastructure layer for bzrsource.

Contains the collaborators that touch the outside world:
- ProcessExecutor: shell command execution
- Cache: per-repository metadata cache on disk
- Filesystem: directory creation/removal, path checks
- ConsoleIO / NullIO: user-facing output and prompts

These provide clean interfaces that can be mocked for testing.
"""

from .process import ProcessExecutor
from .cache import Cache
from .filesystem import Filesystem
from .console import ConsoleIO, NullIO

__all__ = [
    'ProcessExecutor',
    'Cache',
    'Filesystem',
    'ConsoleIO',
    'NullIO',
]
