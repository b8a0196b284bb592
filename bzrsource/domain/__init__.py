"""
Domain layer for bzrsource.

Plain data types with no I/O:
- Package: source URL + reference handed to the downloader
- RepositoryLocation: normalized URL of a repository
- reference helpers: root sentinel, tag resolution and revision-flag composition
"""

from .package import Package
from .location import RepositoryLocation, normalize_url, is_local_url, cache_token
from .reference import (
    ROOT_IDENTIFIER,
    TAG_PREFIX,
    is_root,
    resolve_reference,
    revision_spec,
    revision_flag,
    range_endpoint,
)

__all__ = [
    'Package',
    'RepositoryLocation',
    'normalize_url',
    'is_local_url',
    'cache_token',
    'ROOT_IDENTIFIER',
    'TAG_PREFIX',
    'is_root',
    'resolve_reference',
    'revision_spec',
    'revision_flag',
    'range_endpoint',
]
