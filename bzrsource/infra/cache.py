"""
Metadata cache infrastructure for bzrsource.

One directory per repository, one file per key, with:
- Atomic writes (write to temp, then rename)
- Thread-safe operations
- Automatic directory creation
"""

import os
import re
import tempfile
import threading
from pathlib import Path
from typing import Optional
import logging

logger = logging.getLogger(__name__)


class Cache:
    """
    File-per-key cache rooted at a directory.

    Reads of a missing key return None. When the root cannot be created
    or written the cache disables itself and every read misses.

    Example:
        cache = Cache(Path("~/.bzrsource/cache/repo/lp-foo"))
        cache.write("tip.json", '{"name": "foo/bar"}')
        data = cache.read("tip.json")
    """

    def __init__(self, root: Path, whitelist: str = r"a-z0-9.", enabled: bool = True):
        """
        Initialize Cache.

        Args:
            root: Cache directory
            whitelist: Characters allowed in file names; others become "-"
            enabled: Start disabled when False
        """
        self.root = Path(root).expanduser()
        self.whitelist = whitelist
        self._lock = threading.Lock()
        self.enabled = enabled and self._ensure_root()

    def _ensure_root(self) -> bool:
        try:
            self.root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.warning(f"Cannot create cache directory {self.root}: {e}")
            return False
        return os.access(self.root, os.W_OK)

    def _path(self, key: str) -> Path:
        name = re.sub(f"[^{self.whitelist}]", "-", key, flags=re.IGNORECASE)
        return self.root / name

    def read(self, key: str) -> Optional[str]:
        """
        Read a cached entry.

        Returns:
            Cached contents or None on a miss
        """
        if not self.enabled:
            return None

        path = self._path(key)
        try:
            contents = path.read_text(encoding='utf-8')
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.warning(f"Error reading cache file {path}: {e}")
            return None

        logger.debug(f"Reading {path} from cache")
        return contents

    def write(self, key: str, contents: str) -> bool:
        """
        Write an entry atomically.

        Returns:
            True when the entry was written
        """
        if not self.enabled:
            return False

        path = self._path(key)
        with self._lock:
            fd, temp_path = tempfile.mkstemp(
                dir=self.root,
                prefix=f".{path.name}.",
                suffix=".tmp"
            )
            try:
                with os.fdopen(fd, 'w', encoding='utf-8') as f:
                    f.write(contents)
                os.replace(temp_path, path)
            except Exception:
                try:
                    os.unlink(temp_path)
                except OSError:
                    pass
                raise

        logger.debug(f"Writing {path} into cache")
        return True
