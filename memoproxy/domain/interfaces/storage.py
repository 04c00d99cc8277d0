"""Interface for the key-value store backing memoized results.

Defines the minimal contract the memoization core relies on: reading and
writing serialized cache records by key. Deletion and enumeration are left
to concrete stores.
"""

import abc
from typing import Optional

from memoproxy.domain.models.common import CacheKey, SerializedRecord

class KeyValueStore(abc.ABC):
    """Abstract Base Class for string key-value storage."""

    @abc.abstractmethod
    def get(self, key: CacheKey) -> Optional[SerializedRecord]:
        """Retrieves a previously stored record.

        Args:
            key: The cache key to look up.

        Returns:
            The stored serialized record, or None if nothing is stored under the key.
        """
        pass

    @abc.abstractmethod
    def set(self, key: CacheKey, value: SerializedRecord) -> None:
        """Stores a serialized record, overwriting any prior value.

        Args:
            key: The cache key to store the record under.
            value: The serialized record.
        """
        pass
