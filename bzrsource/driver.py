"""
Repository drivers for bzrsource.

A driver answers repository-level questions (tags, branches, the manifest
at a given reference) so a resolver can pick a version, then hands back
the ``{type, url, reference}`` source used by the downloader.
"""

import hashlib
import json
import logging
import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional
from urllib.parse import urlsplit

from .config import Config
from .domain.location import RepositoryLocation, is_local_url
from .domain.reference import ROOT_IDENTIFIER, resolve_reference, revision_flag
from .errors import CommandFailureError, ManifestParseError, TransportError
from .execution import build_command, run_checked
from .infra.cache import Cache
from .infra.process import ProcessExecutor
from .interfaces import CacheInterface, ConfigInterface, IOInterface, ProcessExecutorInterface
from .parsing import is_absent_file_error, is_auth_failure, parse_log_timestamp, parse_tags

logger = logging.getLogger(__name__)

MANIFEST_FILE = 'composer.json'


class VcsDriver(ABC):
    """
    Base class for repository drivers.

    Holds the collaborators and the per-instance manifest cache; subclasses
    implement the VCS-specific lookups.
    """

    def __init__(
        self,
        repo_config: Dict[str, Any],
        io: IOInterface,
        config: Optional[ConfigInterface] = None,
        process: Optional[ProcessExecutorInterface] = None,
    ):
        """
        Initialize the driver.

        Args:
            repo_config: Repository definition, at least ``{"url": ...}``
            io: Console collaborator
            config: Configuration (defaults loaded if None)
            process: Process collaborator (creates new if None)
        """
        self.repo_config = repo_config
        self.original_url = repo_config['url']
        self.url = self.original_url
        self.io = io
        self.config = config or Config()
        self.process = process or ProcessExecutor(timeout=self.config.get('process-timeout'))
        self.cache: Optional[CacheInterface] = None
        self.info_cache: Dict[str, Optional[Dict[str, Any]]] = {}

    @abstractmethod
    def initialize(self) -> None:
        """Prepare the driver; must be called before any lookup."""

    @abstractmethod
    def get_root_identifier(self) -> str: ...

    @abstractmethod
    def get_composer_information(self, identifier: str) -> Optional[Dict[str, Any]]: ...

    @abstractmethod
    def get_tags(self) -> Dict[str, str]: ...

    @abstractmethod
    def get_branches(self) -> Dict[str, str]: ...

    @abstractmethod
    def get_source(self, identifier: str) -> Dict[str, str]: ...

    def get_dist(self, identifier: str) -> Optional[Dict[str, str]]:
        """Archive distribution for *identifier*; None when only source checkouts exist."""
        return None

    def get_url(self) -> str:
        return self.url

    def has_composer_file(self, identifier: str) -> bool:
        """True when a manifest exists at *identifier* and could be read."""
        try:
            return bool(self.get_composer_information(identifier))
        except TransportError:
            return False

    @staticmethod
    def is_local_url(url: str) -> bool:
        return is_local_url(url)


class BzrDriver(VcsDriver):
    """
    Bazaar repository driver.

    Bazaar is modelled with a single branch per URL: the root identifier
    ("tip") is the only branch, tags come from ``bzr tags`` and map to
    themselves. Known tag names are always resolved as ``tag:<name>``,
    including tags that look like revnos (``1.2.3``, ``2``).

    Example:
        driver = BzrDriver({"url": "lp:~jdoe/project/trunk"}, NullIO(), Config())
        driver.initialize()
        for name, reference in driver.get_tags().items():
            info = driver.get_composer_information(reference)
    """

    SUPPORTED_SCHEMES = re.compile(r'^(bzr|bzr\+ssh|bzr\+https?|lp):', re.IGNORECASE)
    SUPPORTED_HOSTS = re.compile(r'^(bzr|bazaar|codehosting)\.|(^|\.)launchpad\.net$', re.IGNORECASE)

    def __init__(self, repo_config, io, config=None, process=None):
        super().__init__(repo_config, io, config, process)
        self.binary = self.config.get('bzr-binary') or 'bzr'
        self.location: Optional[RepositoryLocation] = None
        self.tags: Optional[Dict[str, str]] = None
        self.tag_revisions: Dict[str, str] = {}
        self.branches: Optional[Dict[str, str]] = None

    def initialize(self) -> None:
        self.location = RepositoryLocation.from_url(self.url)
        self.url = self.location.url

        cache_dir = Path(self.config.get('cache-repo-dir') or '~/.bzrsource/cache/repo')
        self.cache = Cache(
            cache_dir / self.location.cache_key,
            enabled=self.config.get('cache-enabled', True) is not False,
        )

        self.get_tags()

    def get_root_identifier(self) -> str:
        return ROOT_IDENTIFIER

    def get_source(self, identifier: str) -> Dict[str, str]:
        return {'type': 'bzr', 'url': self.url, 'reference': self.resolve(identifier)}

    def resolve(self, identifier: str) -> str:
        """The revision *identifier* stands for, with known tags qualified."""
        return resolve_reference(identifier, self.tags)

    def get_composer_information(self, identifier: str) -> Optional[Dict[str, Any]]:
        """
        Read and parse the manifest at *identifier*.

        Results are cached per reference, in memory and on disk, since a
        revision never changes. A missing manifest gives None.

        Raises:
            TransportError: the manifest could not be fetched
            ManifestParseError: the manifest is not a JSON object
        """
        identifier = identifier or ROOT_IDENTIFIER
        if identifier in self.info_cache:
            return self.info_cache[identifier]

        revision = self.resolve(identifier)
        cache_key = self.cache_key(revision)
        cached = self.cache.read(cache_key) if self.cache else None
        if cached is not None:
            try:
                self.info_cache[identifier] = json.loads(cached)
                return self.info_cache[identifier]
            except json.JSONDecodeError:
                logger.warning(f"Ignoring corrupt cache entry {cache_key} for {self.url}")

        resource = self.location.join(MANIFEST_FILE)
        output = self._read_manifest(resource, revision)
        if not output.strip():
            return None

        try:
            composer = json.loads(output)
        except json.JSONDecodeError as e:
            raise ManifestParseError(f"{resource} at {identifier} does not contain valid JSON: {e}", resource) from e
        if not isinstance(composer, dict):
            raise ManifestParseError(f"{resource} at {identifier} does not contain a JSON object", resource)

        if 'time' not in composer:
            stamp = self._commit_time(revision)
            if stamp:
                composer['time'] = stamp

        if self.cache:
            self.cache.write(cache_key, json.dumps(composer))
        self.info_cache[identifier] = composer
        return composer

    @staticmethod
    def cache_key(revision: str) -> str:
        """Persisted cache entry name for *revision*, one per distinct revision."""
        return hashlib.sha1(revision.encode('utf-8')).hexdigest() + '.json'

    def get_tags(self) -> Dict[str, str]:
        if self.tags is None:
            command = build_command(self.binary, 'tags', '-d', ProcessExecutor.escape(self.url))
            output = self._execute(command)
            self.tags, self.tag_revisions = parse_tags(output)
            logger.debug(f"Found {len(self.tags)} tags in {self.url}")

        return dict(self.tags)

    def get_branches(self) -> Dict[str, str]:
        if self.branches is None:
            root = self.get_root_identifier()
            self.branches = {root: root}

        return dict(self.branches)

    @classmethod
    def supports(
        cls,
        io: IOInterface,
        url: str,
        deep: bool = False,
        process: Optional[ProcessExecutorInterface] = None,
        config: Optional[ConfigInterface] = None,
    ) -> bool:
        """
        Check whether *url* looks like a Bazaar repository.

        Known schemes and hosts match without running anything. Otherwise
        only local URLs, or any URL when *deep* is set, are probed with
        ``bzr info`` (using the configured ``bzr-binary``).
        """
        location = RepositoryLocation.from_url(url)
        if cls.SUPPORTED_SCHEMES.match(location.url):
            return True

        host = urlsplit(location.url).hostname or ''
        if host and cls.SUPPORTED_HOSTS.search(host):
            return True

        # Local URLs are cheap to probe
        if not deep and not location.local:
            return False

        config = config or Config()
        binary = config.get('bzr-binary') or 'bzr'
        process = process or ProcessExecutor(timeout=config.get('process-timeout'))
        command = build_command(binary, 'info', ProcessExecutor.escape(location.url))
        _, code = process.execute(command)
        if code == 0:
            return True

        if is_auth_failure(process.error_output):
            # Reachable, credentials are dealt with by the caller
            return True

        return False

    def _read_manifest(self, resource: str, identifier: str) -> str:
        command = build_command(
            self.binary, 'cat', revision_flag(identifier), ProcessExecutor.escape(resource)
        )
        try:
            return self._execute(command)
        except CommandFailureError as e:
            if is_absent_file_error(e.error_output):
                logger.debug(f"No {MANIFEST_FILE} at {identifier} in {self.url}")
                return ""
            raise TransportError(str(e), command=e.command, error_output=e.error_output) from e

    def _commit_time(self, identifier: str) -> Optional[str]:
        command = build_command(
            self.binary, 'log', '-l1', revision_flag(identifier), ProcessExecutor.escape(self.url)
        )
        stamp = parse_log_timestamp(self._execute(command))
        if stamp is None:
            logger.debug(f"No timestamp in log output for {identifier} in {self.url}")
        return stamp

    def _execute(self, command: str) -> str:
        return run_checked(
            self.process,
            command,
            binary=self.binary,
            context=f"Repository {self.url} could not be processed",
        )
