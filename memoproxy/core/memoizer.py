"""Memoizing wrapper around arbitrary service objects.

``wrap`` builds a ``MemoizedService`` whose configured methods read through a
key-value store, while every other member is forwarded to the original
service. Caching functions are built once, at construction time, around the
service's bound methods, so ``self`` inside a method always refers to the
original service.

Concurrent identical calls that both miss will both run the method and both
store the result (last write wins). There is no single-flight guarantee.
"""

import functools
import inspect
import logging
from typing import Any, Awaitable, Callable, Dict, Optional, TypeVar, Union

from memoproxy.core.keys import decode_record, derive_key, encode_record
from memoproxy.domain.interfaces.storage import KeyValueStore
from memoproxy.domain.models.common import MethodName
from memoproxy.domain.models.options import KeyFunction, MethodConfig, MethodOptions, normalize_config
from memoproxy.infrastructure.storage.disk_store import get_default_store

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Instance attributes of MemoizedService; prefixed to stay clear of service members
_SERVICE_ATTR = "_memoproxy_service"
_OPTIONS_ATTR = "_memoproxy_options"
_STORAGE_ATTR = "_memoproxy_storage"
_METHODS_ATTR = "_memoproxy_methods"

async def _resolve(result: Union[T, Awaitable[T]]) -> T:
    """Awaits ``result`` if it is awaitable, otherwise returns it as is."""
    if inspect.isawaitable(result):
        return await result
    return result

def _sync_caching_function(
    method: Callable[..., Any], name: MethodName, options: MethodOptions, storage: KeyValueStore
) -> Callable[..., Any]:
    @functools.wraps(method, updated=())
    def cached(*args: Any, **kwargs: Any) -> Any:
        key = derive_key(name, options, args, kwargs)
        record = storage.get(key)
        if record is not None:
            logger.debug(f"Cache HIT for {name}: {key[:10]}...")
            return decode_record(record)

        logger.debug(f"Cache MISS for {name}: {key[:10]}...")
        value = method(*args, **kwargs)
        storage.set(key, encode_record(value))
        logger.debug(f"Cache PUT for {name}: {key[:10]}...")
        return value
    return cached

def _async_caching_function(
    method: Callable[..., Any], name: MethodName, options: MethodOptions, storage: KeyValueStore
) -> Callable[..., Awaitable[Any]]:
    @functools.wraps(method, updated=())
    async def cached(*args: Any, **kwargs: Any) -> Any:
        key = derive_key(name, options, args, kwargs)
        # Stores may be synchronous or expose coroutine get/set
        record = await _resolve(storage.get(key))
        if record is not None:
            logger.debug(f"Cache HIT for {name} (async): {key[:10]}...")
            return decode_record(record)

        logger.debug(f"Cache MISS for {name} (async): {key[:10]}...")
        # A failed awaitable propagates here and nothing is stored
        value = await _resolve(method(*args, **kwargs))
        await _resolve(storage.set(key, encode_record(value)))
        logger.debug(f"Cache PUT for {name} (async): {key[:10]}...")
        return value
    return cached

def decorate_method(
    method: Callable[..., Any], name: str, options: MethodOptions, storage: KeyValueStore
) -> Callable[..., Any]:
    """Builds the caching function for one method.

    Args:
        method: The callable to memoize, already bound to its service.
        name: Method name, part of the default cache key.
        options: Async flag and optional custom key function.
        storage: Store holding the cache records.

    Returns:
        A plain function for synchronous methods, a coroutine function for
        methods configured as async.
    """
    if options.is_async:
        return _async_caching_function(method, MethodName(name), options, storage)
    return _sync_caching_function(method, MethodName(name), options, storage)

def _rebuild_method(wrapped: "MemoizedService", name: str) -> None:
    """Rebuilds the caching function for ``name`` from the service's current member.

    A configured name whose member is missing or not callable gets no caching
    function and reads pass through. The default store is opened on first need.
    """
    state = wrapped.__dict__
    methods = state[_METHODS_ATTR]
    methods.pop(name, None)
    options = state[_OPTIONS_ATTR].get(name)
    if options is None:
        return

    service = state[_SERVICE_ATTR]
    member = getattr(service, name, None)
    if not callable(member):
        logger.debug(f"'{name}' is not a callable member of {type(service).__name__}, passing it through uncached.")
        return
    if state[_STORAGE_ATTR] is None:
        state[_STORAGE_ATTR] = get_default_store()
    methods[name] = decorate_method(member, name, options, state[_STORAGE_ATTR])

class MemoizedService:
    """Stand-in for a service with some of its methods memoized.

    Reads of configured methods return caching functions; every other read,
    and every write or delete, goes straight to the wrapped service. A write
    or delete of a configured name rebuilds (or drops) its caching function.
    """

    def __init__(
        self,
        service: Any,
        options: Dict[MethodName, MethodOptions],
        storage: Optional[KeyValueStore] = None,
    ):
        object.__setattr__(self, _SERVICE_ATTR, service)
        object.__setattr__(self, _OPTIONS_ATTR, dict(options))
        object.__setattr__(self, _STORAGE_ATTR, storage)
        object.__setattr__(self, _METHODS_ATTR, {})
        for name in options:
            _rebuild_method(self, name)

    def __getattr__(self, name: str) -> Any:
        try:
            methods = self.__dict__[_METHODS_ATTR]
            service = self.__dict__[_SERVICE_ATTR]
        except KeyError:
            raise AttributeError(name) from None
        if name in methods:
            return methods[name]
        return getattr(service, name)

    def __setattr__(self, name: str, value: Any) -> None:
        setattr(self.__dict__[_SERVICE_ATTR], name, value)
        _rebuild_method(self, name)

    def __delattr__(self, name: str) -> None:
        delattr(self.__dict__[_SERVICE_ATTR], name)
        _rebuild_method(self, name)

    def __dir__(self):
        return sorted(set(dir(self.__dict__[_SERVICE_ATTR])) | set(self.__dict__[_METHODS_ATTR]))

    def __repr__(self) -> str:
        service = self.__dict__[_SERVICE_ATTR]
        return f"<MemoizedService {service!r} memoized={sorted(self.__dict__[_METHODS_ATTR])}>"

def wrap(service: Any, config: Optional[MethodConfig] = None, storage: Optional[KeyValueStore] = None) -> Any:
    """Wraps ``service`` so the methods named in ``config`` are memoized.

    Args:
        service: Any object. It is not copied or modified.
        config: Maps method names to ``MethodOptions`` (or plain dicts such as
            ``{}``, ``{"async": True}``, ``{"key": fn}``). Unlisted members pass through.
        storage: Store for cache records. Defaults to the persistent disk store
            from the environment, opened only if some method needs it.

    Returns:
        A ``MemoizedService`` exposing the same members as ``service``.
    """
    wrapped = MemoizedService(service, normalize_config(config), storage)
    logger.debug(f"Wrapped {type(service).__name__} with memoized methods: {sorted(wrapped.__dict__[_METHODS_ATTR])}")
    return wrapped

def unwrap(obj: Any) -> Any:
    """Returns the original service behind a ``MemoizedService``, or ``obj`` itself."""
    if isinstance(obj, MemoizedService):
        return obj.__dict__[_SERVICE_ATTR]
    return obj

def memoized(
    storage: Optional[KeyValueStore] = None,
    key: Optional[KeyFunction] = None,
    is_async: Optional[bool] = None,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Decorator memoizing a plain function through the same pipeline as ``wrap``.

    Args:
        storage: Store for cache records (defaults to the persistent disk store).
        key: Optional custom key function.
        is_async: Treat the function as async. Detected from the function when None.

    Returns:
        A decorator.
    """
    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        options = MethodOptions(
            is_async=inspect.iscoroutinefunction(func) if is_async is None else is_async,
            key=key,
        )
        store = storage if storage is not None else get_default_store()
        return decorate_method(func, getattr(func, "__name__", repr(func)), options, store)
    return decorator
