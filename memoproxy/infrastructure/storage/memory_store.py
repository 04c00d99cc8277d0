"""In-memory implementation of the KeyValueStore interface."""

import logging
from typing import Dict, Iterator, Optional

from memoproxy.domain.interfaces.storage import KeyValueStore
from memoproxy.domain.models.common import CacheKey, SerializedRecord

logger = logging.getLogger(__name__)

class MemoryStore(KeyValueStore):
    """Dict-backed store. Records live as long as the instance."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._records: Dict[CacheKey, SerializedRecord] = {}
        if initial:
            for key, value in initial.items():
                self._records[CacheKey(key)] = SerializedRecord(value)

    def get(self, key: CacheKey) -> Optional[SerializedRecord]:
        return self._records.get(key)

    def set(self, key: CacheKey, value: SerializedRecord) -> None:
        self._records[key] = value

    def delete(self, key: CacheKey) -> bool:
        """Removes a record. Returns True if one was stored under the key."""
        return self._records.pop(key, None) is not None

    def clear(self) -> int:
        """Removes all records and returns how many there were."""
        count = len(self._records)
        self._records.clear()
        logger.debug(f"Cleared {count} records from memory store.")
        return count

    def keys(self) -> Iterator[CacheKey]:
        return iter(list(self._records))

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, key: object) -> bool:
        return key in self._records
