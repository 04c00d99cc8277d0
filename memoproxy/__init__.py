"""memoproxy: transparent memoization of service methods.

``wrap(service, config, storage)`` returns an object exposing the same
members as ``service``, with the methods named in ``config`` cached in a
key-value store by their arguments.
"""

from memoproxy.core.keys import CacheSerializationError, MemoizationError
from memoproxy.core.memoizer import MemoizedService, decorate_method, memoized, unwrap, wrap
from memoproxy.domain.interfaces.storage import KeyValueStore
from memoproxy.domain.models.options import MethodOptions
from memoproxy.infrastructure.storage.disk_store import DiskStore, get_default_store
from memoproxy.infrastructure.storage.memory_store import MemoryStore

__version__ = "1.0.0"

__all__ = [
    "CacheSerializationError",
    "DiskStore",
    "KeyValueStore",
    "MemoizationError",
    "MemoizedService",
    "MemoryStore",
    "MethodOptions",
    "decorate_method",
    "get_default_store",
    "memoized",
    "unwrap",
    "wrap",
]
