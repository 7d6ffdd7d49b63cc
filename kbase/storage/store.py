"""JSON key/value store backed by one file per key.

Keeps notebooks, pages, documents, the query log and settings across
restarts. All operations fail soft: errors are logged and reported
through the return value so callers can fall back to in-memory state.
"""

import json
import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

# keys map one-to-one onto file names
_KEY_RE = re.compile(r"[A-Za-z0-9_-][A-Za-z0-9_.-]*")


class JSONStore:
    """Persistent key/value storage.

    With ``data_dir=None`` the store is disabled: writes return False
    and reads return None. Keys must be plain file names (letters,
    digits, ``_``, ``-`` and ``.``, not starting with a dot); other keys
    are rejected the same way.
    """

    def __init__(self, data_dir: Path | None) -> None:
        self._dir = data_dir
        if self._dir is not None:
            try:
                self._dir.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                logger.error(f"Cannot create data directory {self._dir}: {e}")
                self._dir = None

    @property
    def enabled(self) -> bool:
        return self._dir is not None

    def _path(self, key: str) -> Path | None:
        if self._dir is None:
            return None
        if not _KEY_RE.fullmatch(key):
            logger.error(f"Invalid storage key: {key!r}")
            return None
        return self._dir / f"{key}.json"

    def set(self, key: str, data: Any) -> bool:
        """Serialize data as JSON under key.

        The value goes to a temp file in the data directory that then
        replaces the previous file, so readers see the old value or the
        new one, never a partial write.

        Args:
            key: Storage key.
            data: JSON-serializable value.

        Returns:
            Whether the value was written.
        """
        path = self._path(key)
        if path is None:
            return False

        try:
            serialized = json.dumps(data, ensure_ascii=False, default=str)
        except (TypeError, ValueError) as e:
            logger.error(f"Failed to serialize [{key}]: {e}")
            return False

        tmp_path = None
        try:
            fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=f".{key}_", suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(serialized)
            os.replace(tmp_path, path)
            return True
        except OSError as e:
            logger.error(f"Failed to save [{key}]: {e}")
            if tmp_path and os.path.exists(tmp_path):
                os.remove(tmp_path)
            return False

    def get(self, key: str) -> Any | None:
        """Load and decode the JSON value stored under key.

        Returns:
            The decoded value, or None when missing or unreadable.
        """
        path = self._path(key)
        if path is None:
            return None

        try:
            if not path.exists():
                return None
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.error(f"Failed to load [{key}]: {e}")
            return None

    def set_string(self, key: str, value: str) -> bool:
        return self.set(key, value)

    def get_string(self, key: str) -> str | None:
        value = self.get(key)
        return value if isinstance(value, str) else None

    def remove(self, key: str) -> bool:
        path = self._path(key)
        if path is None:
            return False

        try:
            path.unlink(missing_ok=True)
            return True
        except OSError as e:
            logger.error(f"Failed to remove [{key}]: {e}")
            return False

    def clear(self) -> bool:
        """Remove every stored key."""
        if self._dir is None:
            return False

        try:
            for path in self._dir.glob("*.json"):
                path.unlink()
            return True
        except OSError as e:
            logger.error(f"Failed to clear store: {e}")
            return False

    def has(self, key: str) -> bool:
        path = self._path(key)
        return path is not None and path.exists()
