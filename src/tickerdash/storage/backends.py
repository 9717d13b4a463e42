"""
Key-value storage backends for the dashboard snapshot.

This module provides the persistence boundary implementations:
- MemoryStore: in-process dict, used by tests and ephemeral sessions
- FileStore: one text file per key, survives restarts

Both hold string values and raise PersistenceUnavailable when the
underlying medium cannot be used.
"""

import hashlib
import os
import re
from abc import ABC, abstractmethod
from pathlib import Path
from threading import Lock
from typing import Any, Dict, Optional

from ..config.logging_config import get_logger
from ..exceptions import ConfigurationError, PersistenceUnavailable

logger = get_logger(__name__)

_SAFE_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")


class KeyValueStore(ABC):
    """Abstract base class for storage backends."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Get value by key, None when absent."""
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store value under key."""
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Delete key. Returns True if key existed."""
        pass

    @abstractmethod
    def get_stats(self) -> Dict[str, Any]:
        """Get storage statistics."""
        pass


class MemoryStore(KeyValueStore):
    """In-memory key-value store."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})
        self._lock = Lock()

        # Statistics
        self._reads = 0
        self._writes = 0

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            self._reads += 1
            return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = value
            self._writes += 1

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._data.pop(key, None) is not None

    def get_stats(self) -> Dict[str, Any]:
        with self._lock:
            return {
                'backend': 'memory',
                'size': len(self._data),
                'reads': self._reads,
                'writes': self._writes,
            }


class FileStore(KeyValueStore):
    """Persistent file-based store, one UTF-8 file per key."""

    def __init__(self, directory: str = ".tickerdash"):
        """
        Initialize file store.

        Parameters
        ----------
        directory : str
            Directory holding one <key>.json file per key
        """
        self.directory = Path(directory)
        self._lock = Lock()

        # Statistics
        self._reads = 0
        self._writes = 0

    def get(self, key: str) -> Optional[str]:
        """Read the value for key."""
        path = self._get_file(key)
        with self._lock:
            self._reads += 1
            try:
                return path.read_text(encoding="utf-8")
            except FileNotFoundError:
                return None
            except (OSError, UnicodeDecodeError) as e:
                raise PersistenceUnavailable(key, "read", str(e)) from e

    def set(self, key: str, value: str) -> None:
        """Write the value atomically: temp file first, then rename."""
        path = self._get_file(key)
        temp_path = path.with_suffix(path.suffix + ".tmp")

        with self._lock:
            try:
                self.directory.mkdir(parents=True, exist_ok=True)
                temp_path.write_text(value, encoding="utf-8")
                os.replace(temp_path, path)
                self._writes += 1
            except OSError as e:
                if temp_path.exists():
                    temp_path.unlink()
                raise PersistenceUnavailable(key, "write", str(e)) from e

    def delete(self, key: str) -> bool:
        """Delete the file for key."""
        path = self._get_file(key)
        with self._lock:
            try:
                path.unlink()
                return True
            except FileNotFoundError:
                return False
            except OSError as e:
                raise PersistenceUnavailable(key, "delete", str(e)) from e

    def get_stats(self) -> Dict[str, Any]:
        """Get file store statistics."""
        with self._lock:
            files = list(self.directory.glob("*.json")) if self.directory.exists() else []
            return {
                'backend': 'file',
                'directory': str(self.directory),
                'size': len(files),
                'total_size_bytes': sum(f.stat().st_size for f in files),
                'reads': self._reads,
                'writes': self._writes,
            }

    def _get_file(self, key: str) -> Path:
        """Readable file name for simple keys, hashed otherwise."""
        if _SAFE_KEY.match(key):
            return self.directory / f"{key}.json"
        key_hash = hashlib.md5(key.encode()).hexdigest()
        return self.directory / f"{key_hash}.json"


def create_store(backend: str, directory: str = ".tickerdash") -> KeyValueStore:
    """Create the storage backend named in the settings."""
    if backend == "memory":
        return MemoryStore()
    if backend == "file":
        logger.info(f"Persisting dashboard under {directory}")
        return FileStore(directory)
    raise ConfigurationError(f"Unknown storage backend: {backend}")
