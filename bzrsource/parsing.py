"""
Parsers for bzr command output.

bzr prints free-form text, so each command's output format is handled by
exactly one function here. The expected formats are pinned by fixture
files under tests/fixtures; revalidate them when bzr/breezy changes.
"""

import re
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

TIME_FORMAT = '%Y-%m-%d %H:%M:%S'

# Second column values that are not real revisions
_PLACEHOLDER_REVISIONS = {'./', '.'}

# timestamp: Wed 2013-03-20 22:00:00 +0100
_TIMESTAMP_LINE = re.compile(
    r'^\s*timestamp:\s+(?:[A-Za-z]{3}\s+)?'
    r'(\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2})'
    r'(?:\s+([+-]\d{4}))?\s*$'
)

# Last Changed Date: 2013-03-20 22:00:00 +0100 (Wed, 20 Mar 2013)
_INFO_DATE_LINE = re.compile(
    r'^\s*Last Changed Date:\s+(\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2})(?:\s+([+-]\d{4}))?'
)

_ABSENT_FILE_MARKERS = (
    'not versioned',
    'no such file',
    'does not exist',
    'not present in revision',
)

_AUTH_FAILURE_MARKERS = (
    'authorization failed:',
    'authentication failed',
    'permission denied (publickey',
)


def parse_tags(output: str) -> Tuple[Dict[str, str], Dict[str, str]]:
    """
    Parse ``bzr tags`` output.

    Each line is ``<name> <revno>``. Lines whose revision column is a
    current-directory placeholder are skipped; a ``?`` revno (tag not in
    the branch ancestry) is kept.

    Returns:
        Tuple of (tag name -> reference, tag name -> revno)
    """
    tags: Dict[str, str] = {}
    revisions: Dict[str, str] = {}

    for line in output.splitlines():
        parts = line.split()
        if len(parts) < 2:
            continue

        name, revno = parts[0], parts[-1]
        if revno in _PLACEHOLDER_REVISIONS:
            continue

        key = name.rstrip('/')
        if not key:
            continue
        tags[key] = key
        revisions[key] = revno

    return tags, revisions


def to_utc_string(moment: datetime) -> str:
    """Format a moment in UTC as ``YYYY-MM-DD HH:MM:SS``; naive means UTC."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).strftime(TIME_FORMAT)


def _parse_moment(stamp: str, offset: Optional[str]) -> datetime:
    if offset:
        return datetime.strptime(f"{stamp} {offset}", f"{TIME_FORMAT} %z")
    return datetime.strptime(stamp, TIME_FORMAT).replace(tzinfo=timezone.utc)


def parse_log_timestamp(output: str) -> Optional[str]:
    """
    Find the commit timestamp in ``bzr log`` or ``bzr info`` output.

    Returns:
        UTC time as ``YYYY-MM-DD HH:MM:SS`` or None if no line matched
    """
    for line in output.splitlines():
        match = _TIMESTAMP_LINE.match(line) or _INFO_DATE_LINE.match(line)
        if not match:
            continue
        try:
            return to_utc_string(_parse_moment(match.group(1), match.group(2)))
        except ValueError:
            continue
    return None


def split_changes(changes: str) -> List[str]:
    """Split status output into one stripped entry per changed file."""
    return [line for line in re.split(r'\s*\r?\n\s*', changes.strip()) if line]


def is_absent_file_error(error_output: str) -> bool:
    """True when a failed ``bzr cat`` only means the file is not there."""
    lowered = error_output.lower()
    return any(marker in lowered for marker in _ABSENT_FILE_MARKERS)


def is_auth_failure(error_output: str) -> bool:
    """True when bzr reached the server but was refused credentials."""
    lowered = error_output.lower()
    return any(marker in lowered for marker in _AUTH_FAILURE_MARKERS)
