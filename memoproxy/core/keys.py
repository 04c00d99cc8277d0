"""Cache key derivation and cache record (de)serialization.

Keys and records are JSON text. The default key is the compact JSON encoding
of ``{"args": [...], "method": name}`` (plus ``"kwargs"`` when keyword
arguments were passed) with object keys sorted, so structurally equal
arguments give equal keys while argument order still matters. Dicts must
have str keys on both the key and the record path.
"""

import json
import logging
from typing import Any, Dict, Optional, Sequence

from memoproxy.domain.models.common import CacheKey, MethodName, SerializedRecord
from memoproxy.domain.models.options import MethodOptions

logger = logging.getLogger(__name__)

_JSON_SEPARATORS = (",", ":")

class MemoizationError(Exception):
    """Base class for errors raised by the memoization layer itself."""

class CacheSerializationError(MemoizationError, ValueError):
    """Raised when arguments or results cannot be represented as JSON,
    or when a stored record cannot be read back."""

def _check_string_keys(value: Any) -> None:
    """Rejects dicts with non-str keys, which json would silently stringify."""
    if isinstance(value, dict):
        for key, item in value.items():
            if not isinstance(key, str):
                raise CacheSerializationError(
                    f"Dict key {key!r} of type {type(key).__name__} does not survive JSON encoding"
                )
            _check_string_keys(item)
    elif isinstance(value, (list, tuple)):
        for item in value:
            _check_string_keys(item)

def _dumps(payload: Any) -> str:
    try:
        text = json.dumps(payload, separators=_JSON_SEPARATORS, sort_keys=True, allow_nan=False)
    except (TypeError, ValueError) as e:
        # TypeError: unsupported type; ValueError: cycles and NaN/Infinity
        raise CacheSerializationError(f"Value is not JSON serializable: {e}") from e
    # Walked after dumps so cyclic structures have already been rejected
    _check_string_keys(payload)
    return text

def default_key(method_name: MethodName, args: Sequence[Any], kwargs: Optional[Dict[str, Any]] = None) -> CacheKey:
    """Builds the structural cache key for a call."""
    payload: Dict[str, Any] = {"method": method_name, "args": list(args)}
    if kwargs:
        payload["kwargs"] = dict(kwargs)
    return CacheKey(_dumps(payload))

def derive_key(
    method_name: MethodName,
    options: MethodOptions,
    args: Sequence[Any],
    kwargs: Optional[Dict[str, Any]] = None,
) -> CacheKey:
    """Computes the cache key for a call.

    A custom key function is called with the call's arguments and its result
    is used verbatim; otherwise the structural default key is used.
    """
    if options.key is not None:
        return CacheKey(options.key(*args, **(kwargs or {})))
    return default_key(method_name, args, kwargs)

def encode_record(value: Any) -> SerializedRecord:
    """Serializes a result into a cache record."""
    return SerializedRecord(_dumps({"value": value}))

def decode_record(record: SerializedRecord) -> Any:
    """Reads the cached value back out of a stored record."""
    try:
        payload = json.loads(record)
    except (TypeError, ValueError) as e:
        raise CacheSerializationError(f"Stored cache record is not valid JSON: {e}") from e
    if not isinstance(payload, dict) or "value" not in payload:
        raise CacheSerializationError(f"Stored cache record has no 'value' field: {str(record)[:40]}...")
    return payload["value"]
