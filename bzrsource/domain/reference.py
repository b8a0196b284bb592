"""
Revision references.

References are plain bzr revision identifiers or tag names. ROOT_IDENTIFIER
stands for "the tip of the branch" and is never sent as a ``-r`` flag.
"""

import re
from typing import Collection, Optional

from ..infra.process import ProcessExecutor

ROOT_IDENTIFIER = "tip"
TAG_PREFIX = "tag:"

# 42, -1, 1.2.3
_REVNO = re.compile(r'^-?\d+(\.\d+\.\d+)?$')
# revid:..., tag:..., date:..., before:..., last:1
_REVSPEC = re.compile(r'^[a-z][a-z-]*:.+$')


def is_root(reference: Optional[str]) -> bool:
    """True when *reference* means "default / tip"."""
    return not reference or reference == ROOT_IDENTIFIER


def resolve_reference(reference: Optional[str], tags: Optional[Collection[str]] = None) -> Optional[str]:
    """
    Qualify a known tag name as ``tag:<name>``.

    Tag names win over revnos, so a tag called ``1.2.3`` or ``2`` is not
    mistaken for a revision number. The root and unknown names are
    returned unchanged.
    """
    if not is_root(reference) and tags and reference in tags:
        return f"{TAG_PREFIX}{reference}"
    return reference


def revision_spec(reference: Optional[str]) -> Optional[str]:
    """
    Turn a reference into a value for ``-r``.

    Returns None for the root sentinel. Revnos and explicit revision
    specs are passed verbatim; anything else is treated as a tag name.
    """
    if is_root(reference):
        return None
    if _REVNO.match(reference) or _REVSPEC.match(reference):
        return reference
    return f"{TAG_PREFIX}{reference}"


def revision_flag(reference: Optional[str]) -> str:
    """``-r <spec>`` for a reference, or an empty string for the root."""
    spec = revision_spec(reference)
    if spec is None:
        return ""
    return f"-r {ProcessExecutor.escape(spec)}"


def range_endpoint(reference: Optional[str]) -> str:
    """Revision spec usable inside ``-rA..B``; the root maps to -1."""
    spec = revision_spec(reference)
    return "-1" if spec is None else spec
