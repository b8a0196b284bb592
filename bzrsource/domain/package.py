"""
Package domain object for bzrsource.

Only the fields the downloader reads are modelled here; any object with
``source_url`` and ``source_reference`` attributes works in its place.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class Package:
    """A package pinned to a source location and reference."""
    source_url: str
    source_reference: str
    name: str = ""
    source_type: str = "bzr"
    pretty_version: Optional[str] = None

    @classmethod
    def from_source(cls, source: Dict[str, Any], name: str = "") -> 'Package':
        """Build from a ``get_source()`` dict."""
        return cls(
            source_url=source['url'],
            source_reference=source['reference'],
            name=name,
            source_type=source.get('type', 'bzr'),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result = {
            'name': self.name,
            'source': {
                'type': self.source_type,
                'url': self.source_url,
                'reference': self.source_reference,
            },
        }
        if self.pretty_version:
            result['version'] = self.pretty_version
        return result
