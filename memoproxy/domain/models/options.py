"""Per-method memoization options and normalisation of config maps.

A method configuration maps method names to options. Callers may hand in
``MethodOptions`` instances, plain dicts (``{}``, ``{"async": True}``,
``{"key": fn}``) or ``None``; everything is normalised permissively here.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional, Union

from memoproxy.domain.models.common import MethodName

logger = logging.getLogger(__name__)

KeyFunction = Callable[..., str]

@dataclass(frozen=True)
class MethodOptions:
    """Options for a single memoized method."""
    is_async: bool = False
    key: Optional[KeyFunction] = None # Receives the call's arguments, returns the key verbatim

    @classmethod
    def from_value(cls, value: Union["MethodOptions", Mapping[str, Any], None]) -> "MethodOptions":
        """Builds options from whatever a config entry holds.

        ``async`` and ``is_async`` are both accepted for the async flag since
        ``async`` cannot be used as a keyword argument. Unknown keys are ignored.
        """
        if isinstance(value, MethodOptions):
            return value
        if value is None:
            return cls()
        if not isinstance(value, Mapping):
            logger.debug(f"Ignoring non-mapping method options of type {type(value).__name__}, using defaults.")
            return cls()

        is_async = value.get("is_async", value.get("async", False))
        key = value.get("key")
        if key is not None and not callable(key):
            logger.debug(f"Ignoring non-callable key option: {key!r}")
            key = None
        return cls(is_async=bool(is_async), key=key)

MethodConfig = Mapping[str, Union[MethodOptions, Mapping[str, Any], None]]

def normalize_config(config: Optional[MethodConfig]) -> Dict[MethodName, MethodOptions]:
    """Normalises a method configuration map into ``MethodOptions`` values."""
    if not config:
        return {}
    return {MethodName(name): MethodOptions.from_value(value) for name, value in config.items()}
