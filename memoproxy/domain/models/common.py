"""Defines common Value Objects used across the memoization layer.

These are plain strings at runtime; NewType keeps signatures self-describing.
"""

from typing import NewType

# === Caching Context ===
CacheKey = NewType("CacheKey", str)                  # Unique key for a cache entry
MethodName = NewType("MethodName", str)              # Attribute name of a wrapped method
SerializedRecord = NewType("SerializedRecord", str)  # JSON text of {"value": ...}
