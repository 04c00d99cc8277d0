import asyncio
import inspect
import pytest
from types import SimpleNamespace
from unittest.mock import AsyncMock

from memoproxy.core.keys import CacheSerializationError
from memoproxy.core.memoizer import memoized, wrap
from memoproxy.infrastructure.storage.memory_store import MemoryStore

class AsyncMemoryStore:
    """Store exposing coroutine get/set, as an async backend would."""

    def __init__(self):
        self.records = {}

    async def get(self, key):
        return self.records.get(key)

    async def set(self, key, value):
        self.records[key] = value

class RemoteCalculator:
    def __init__(self, offset: int):
        self.offset = offset
        self.calls = 0

    async def add(self, x, y):
        self.calls += 1
        await asyncio.sleep(0)
        return x + y + self.offset

@pytest.fixture
def async_add_service():
    return SimpleNamespace(add=AsyncMock(side_effect=lambda x, y: x + y))

def test_uncached_async_method_called_every_time(async_add_service, memory_store: MemoryStore):
    cached_service = wrap(async_add_service, storage=memory_store)

    async def scenario():
        assert await cached_service.add(2, 3) == 5
        assert await cached_service.add(2, 3) == 5

    asyncio.run(scenario())
    assert async_add_service.add.await_count == 2

def test_cached_async_method_called_once_for_same_arguments(async_add_service, memory_store: MemoryStore):
    cached_service = wrap(async_add_service, {"add": {"async": True}}, memory_store)

    async def scenario():
        first = await cached_service.add(2, 3)
        second = await cached_service.add(2, 3)
        return first, second

    assert asyncio.run(scenario()) == (5, 5)
    async_add_service.add.assert_awaited_once_with(2, 3)

def test_cached_async_method_called_per_distinct_arguments(async_add_service, memory_store: MemoryStore):
    cached_service = wrap(async_add_service, {"add": {"is_async": True}}, memory_store)

    async def scenario():
        assert await cached_service.add(2, 3) == 5
        assert await cached_service.add(4, 5) == 9

    asyncio.run(scenario())
    assert async_add_service.add.await_count == 2

def test_cache_hit_returns_awaitable_without_calling(async_add_service):
    store = MemoryStore({'{"args":[2,3],"method":"add"}': '{"value":5}'})
    cached_service = wrap(async_add_service, {"add": {"async": True}}, store)

    pending = cached_service.add(2, 3)
    assert inspect.isawaitable(pending)
    assert asyncio.run(pending) == 5
    async_add_service.add.assert_not_called()

def test_async_method_keeps_instance_context(memory_store: MemoryStore):
    calculator = RemoteCalculator(offset=10)
    cached_service = wrap(calculator, {"add": {"async": True}}, memory_store)

    async def scenario():
        return [await cached_service.add(1, 2) for _ in range(3)]

    assert asyncio.run(scenario()) == [13, 13, 13]
    assert calculator.calls == 1

def test_async_failures_are_not_cached(memory_store: MemoryStore):
    service = SimpleNamespace(fetch=AsyncMock(side_effect=[RuntimeError("boom"), "ok"]))
    cached_service = wrap(service, {"fetch": {"async": True}}, memory_store)

    with pytest.raises(RuntimeError, match="boom"):
        asyncio.run(cached_service.fetch("a"))
    assert len(memory_store) == 0

    assert asyncio.run(cached_service.fetch("a")) == "ok"
    assert asyncio.run(cached_service.fetch("a")) == "ok"
    assert service.fetch.await_count == 2

def test_async_key_errors_surface_when_awaited(memory_store: MemoryStore):
    service = SimpleNamespace(fetch=AsyncMock(return_value="ok"))
    cached_service = wrap(service, {"fetch": {"async": True}}, memory_store)

    pending = cached_service.fetch(object())
    assert inspect.iscoroutine(pending)
    with pytest.raises(CacheSerializationError):
        asyncio.run(pending)
    service.fetch.assert_not_called()

def test_async_custom_key(memory_store: MemoryStore):
    service = SimpleNamespace(lookup=AsyncMock(side_effect=lambda user: user["name"].upper()))
    cached_service = wrap(service, {
        "lookup": {"async": True, "key": lambda user: f"user:{user['id']}"}
    }, memory_store)

    async def scenario():
        first = await cached_service.lookup({"id": 1, "name": "ada"})
        second = await cached_service.lookup({"id": 1, "name": "changed"})
        return first, second

    assert asyncio.run(scenario()) == ("ADA", "ADA")
    assert service.lookup.await_count == 1
    assert memory_store.get("user:1") == '{"value":"ADA"}'

def test_async_none_result_is_cached(memory_store: MemoryStore):
    service = SimpleNamespace(ping=AsyncMock(return_value=None))
    cached_service = wrap(service, {"ping": {"async": True}}, memory_store)

    async def scenario():
        assert await cached_service.ping() is None
        assert await cached_service.ping() is None

    asyncio.run(scenario())
    assert service.ping.await_count == 1

def test_async_store_calls_are_awaited(async_add_service):
    store = AsyncMemoryStore()
    cached_service = wrap(async_add_service, {"add": {"async": True}}, store)

    async def scenario():
        assert await cached_service.add(2, 3) == 5
        assert await cached_service.add(2, 3) == 5

    asyncio.run(scenario())
    assert async_add_service.add.await_count == 1
    assert store.records == {'{"args":[2,3],"method":"add"}': '{"value":5}'}

def test_concurrent_misses_both_compute(memory_store: MemoryStore):
    calculator = RemoteCalculator(offset=0)
    cached_service = wrap(calculator, {"add": {"async": True}}, memory_store)

    async def scenario():
        return await asyncio.gather(cached_service.add(1, 1), cached_service.add(1, 1))

    assert asyncio.run(scenario()) == [2, 2]
    assert calculator.calls == 2
    assert len(memory_store) == 1

def test_memoized_decorator_detects_coroutines(memory_store: MemoryStore):
    calls = []

    @memoized(storage=memory_store)
    async def double(x):
        calls.append(x)
        return x * 2

    async def scenario():
        return [await double(4), await double(4)]

    assert inspect.iscoroutinefunction(double)
    assert asyncio.run(scenario()) == [8, 8]
    assert calls == [4]
