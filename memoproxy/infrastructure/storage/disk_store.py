"""Persistent implementation of the KeyValueStore interface using diskcache.

Also owns the process-wide default store that ``wrap`` falls back to when no
store is given. Entries are written without expiry.
"""

import logging
from pathlib import Path
from typing import Iterator, Optional, Union

import diskcache as dc

from memoproxy.domain.interfaces.storage import KeyValueStore
from memoproxy.domain.models.common import CacheKey, SerializedRecord
from memoproxy.infrastructure.config.settings import get_cache_dir, load_configuration

logger = logging.getLogger(__name__)

class DiskStore(KeyValueStore):
    """Stores serialized cache records in a diskcache directory."""

    def __init__(self, directory: Union[str, Path], timeout: float = 1):
        """Opens (and creates if needed) the store directory.

        Args:
            directory: Directory holding the diskcache database.
            timeout: SQLite connection timeout in seconds.
        """
        self._cache = dc.Cache(str(directory), timeout=timeout)
        logger.info(f"Opened disk store at: {self._cache.directory}")

    @property
    def directory(self) -> str:
        return self._cache.directory

    def get(self, key: CacheKey) -> Optional[SerializedRecord]:
        return self._cache.get(key, default=None)

    def set(self, key: CacheKey, value: SerializedRecord) -> None:
        self._cache.set(key, value)
        logger.debug(f"Disk store PUT key: {key[:10]}...")

    def delete(self, key: CacheKey) -> bool:
        """Removes a record. Returns True if one was stored under the key."""
        return self._cache.delete(key)

    def clear(self) -> int:
        """Removes all records and returns how many were removed."""
        count = self._cache.clear()
        logger.info(f"Cleared disk store at {self.directory}. Removed {count} items.")
        return count

    def keys(self) -> Iterator[CacheKey]:
        return self._cache.iterkeys()

    def volume(self) -> int:
        """Estimated size of the store on disk, in bytes."""
        return self._cache.volume()

    def close(self) -> None:
        self._cache.close()

    def __len__(self) -> int:
        return len(self._cache)

    def __enter__(self) -> "DiskStore":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

# --- Default Store ---
_default_store: Optional[DiskStore] = None

def get_default_store() -> DiskStore:
    """Returns the process-wide disk store, opening it on first use."""
    global _default_store
    if _default_store is None:
        load_configuration()
        _default_store = DiskStore(get_cache_dir())
    return _default_store

def reset_default_store() -> None:
    """Closes the default store; the next get_default_store opens a fresh one."""
    global _default_store
    if _default_store is not None:
        _default_store.close()
        _default_store = None
