"""
Filesystem helpers used around working copies.
"""

import re
from pathlib import Path
import logging

logger = logging.getLogger(__name__)


class Filesystem:
    """Directory creation and path checks."""

    def ensure_directory_exists(self, path: str) -> None:
        """Create *path* and its parents; fail if a file is in the way."""
        target = Path(path)
        if target.is_dir():
            return
        if target.exists():
            raise NotADirectoryError(f"{path} exists and is not a directory.")
        target.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def is_absolute_path(path: str) -> bool:
        """True for /unix, C:\\windows or \\\\unc paths."""
        return path.startswith('/') or path.startswith('\\\\') or bool(re.match(r'^[a-zA-Z]:[\\/]', path))
