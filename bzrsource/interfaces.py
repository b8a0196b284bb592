"""
Capabilities consumed by the driver and downloader.

Each protocol exposes only what bzrsource actually calls, so tests can
pass a MagicMock or a small fake instead of a full object graph.
"""

from typing import Any, Iterable, Optional, Protocol, Tuple, Union, runtime_checkable


@runtime_checkable
class PackageInterface(Protocol):
    """A package as far as checkout is concerned."""

    @property
    def source_url(self) -> str: ...

    @property
    def source_reference(self) -> str: ...


@runtime_checkable
class ConfigInterface(Protocol):
    """Flag lookup by key (``discard-changes``, ``cache-repo-dir``...)."""

    def get(self, key: str, default: Any = None) -> Any: ...


@runtime_checkable
class IOInterface(Protocol):
    """Console output and the single-character prompt."""

    def write(self, messages: Union[str, Iterable[str]]) -> None: ...

    def ask(self, question: str, default: Optional[str] = None) -> str: ...

    def is_interactive(self) -> bool: ...

    def is_verbose(self) -> bool: ...


@runtime_checkable
class ProcessExecutorInterface(Protocol):
    """Runs a shell command; stdout is returned, stderr kept for later."""

    error_output: str

    def execute(self, command: str, cwd: Optional[str] = None) -> Tuple[str, int]: ...


@runtime_checkable
class CacheInterface(Protocol):
    """Byte/text blobs keyed by string."""

    def read(self, key: str) -> Optional[str]: ...

    def write(self, key: str, contents: str) -> bool: ...
