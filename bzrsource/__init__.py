"""
bzrsource - Bazaar repositories as package sources.

Two cooperating pieces let a package manager use a Bazaar repository:
a driver that reads repository metadata and a downloader that manages
local working copies.

Quick Start:
    from bzrsource import BzrDriver, BzrDownloader, Config, ConsoleIO, Package

    # What does the repository offer?
    driver = BzrDriver({"url": "lp:~jdoe/project/trunk"}, ConsoleIO(), Config())
    driver.initialize()
    for name, reference in driver.get_tags().items():
        manifest = driver.get_composer_information(reference)

    # Materialize one reference
    downloader = BzrDownloader(ConsoleIO(), Config())
    source = driver.get_source("1.0")
    downloader.download(Package.from_source(source), "vendor/jdoe/project")

Errors:
    TransportError - manifest fetch failed (network / credentials)
    ToolMissingError - bzr is not installed
    CommandFailureError - any other bzr command failed
    UserAbortedError - user refused to discard local changes
"""

__version__ = "0.3.0"

from .driver import BzrDriver, VcsDriver
from .downloader import BzrDownloader, VcsDownloader
from .domain import Package, RepositoryLocation, ROOT_IDENTIFIER
from .infra import Cache, ConsoleIO, Filesystem, NullIO, ProcessExecutor
from .config import Config, load_config, save_config
from .errors import (
    VcsError,
    TransportError,
    ToolMissingError,
    CommandFailureError,
    UserAbortedError,
    UncommittedChangesError,
    ManifestParseError,
)

__all__ = [
    "__version__",
    # Driver / downloader
    "BzrDriver",
    "VcsDriver",
    "BzrDownloader",
    "VcsDownloader",
    # Domain objects
    "Package",
    "RepositoryLocation",
    "ROOT_IDENTIFIER",
    # Collaborators
    "Cache",
    "ConsoleIO",
    "Filesystem",
    "NullIO",
    "ProcessExecutor",
    # Configuration
    "Config",
    "load_config",
    "save_config",
    # Errors
    "VcsError",
    "TransportError",
    "ToolMissingError",
    "CommandFailureError",
    "UserAbortedError",
    "UncommittedChangesError",
    "ManifestParseError",
]
