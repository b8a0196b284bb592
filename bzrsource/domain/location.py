"""
Repository location handling.

Absolute filesystem paths are rewritten to ``file://`` URLs; every other
input passes through untouched.
"""

import re
from dataclasses import dataclass

from ..infra.filesystem import Filesystem


def normalize_url(url: str) -> str:
    """
    Normalize a repository URL.

    Examples:
        /home/jdoe/repo        -> file:///home/jdoe/repo
        C:\\repo               -> file://C:/repo
        bzr+ssh://host/trunk   -> bzr+ssh://host/trunk
    """
    if Filesystem.is_absolute_path(url):
        return 'file://' + url.replace('\\', '/')
    return url


def is_local_url(url: str) -> bool:
    """True for ``file://`` URLs and absolute paths."""
    return bool(re.match(r'^file://', url, re.IGNORECASE)) or Filesystem.is_absolute_path(url)


def cache_token(url: str) -> str:
    """Filesystem-safe token for a URL, used to scope the metadata cache."""
    return re.sub(r'[^a-z0-9.]', '-', url, flags=re.IGNORECASE)


@dataclass(frozen=True)
class RepositoryLocation:
    """Normalized URL of a repository and whether it lives on this machine."""
    url: str
    local: bool = False

    @classmethod
    def from_url(cls, url: str) -> 'RepositoryLocation':
        url = url.rstrip('/') or url
        normalized = normalize_url(url)
        return cls(url=normalized, local=is_local_url(normalized))

    @property
    def cache_key(self) -> str:
        return cache_token(self.url)

    def join(self, *parts: str) -> str:
        """Append path segments to the URL."""
        return '/'.join([self.url] + [p.strip('/') for p in parts if p])
