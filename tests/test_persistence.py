from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
import pytest_asyncio
from conftest import BrokenPersistence

from recollect.memory.service import MemoryService
from recollect.persistence.base import GuardedPersistence
from recollect.persistence.cache import MemoryCache
from recollect.persistence.memory import InMemoryPersistence
from recollect.persistence.sqlite import SqlitePersistence


@pytest_asyncio.fixture
async def sqlite(tmp_path: Path) -> AsyncGenerator[SqlitePersistence]:
    store = SqlitePersistence(tmp_path / "nested" / "recollect.db")
    await store.connect()
    yield store
    await store.close()


class TestSqlitePersistence:
    @pytest.mark.asyncio
    async def test_missing_key(self, sqlite: SqlitePersistence):
        assert await sqlite.load("nothing") is None

    @pytest.mark.asyncio
    async def test_save_load_and_overwrite(self, sqlite: SqlitePersistence):
        await sqlite.save("prefs", [{"key": "theme", "value": "dark"}])
        await sqlite.save("prefs", [{"key": "theme", "value": "light"}])
        assert await sqlite.load("prefs") == [{"key": "theme", "value": "light"}]

    @pytest.mark.asyncio
    async def test_delete(self, sqlite: SqlitePersistence):
        await sqlite.save("k", 1)
        assert await sqlite.delete("k")
        assert not await sqlite.delete("k")
        assert await sqlite.load("k") is None

    @pytest.mark.asyncio
    async def test_memory_survives_reconnect(self, tmp_path: Path):
        path = tmp_path / "recollect.db"
        first = SqlitePersistence(path)
        await first.connect()
        await MemoryService(first).record_search_pattern("Budget", ["document"], 0.7)
        await first.close()

        second = SqlitePersistence(path)
        await second.connect()
        try:
            patterns = await MemoryService(second).get_search_patterns()
        finally:
            await second.close()
        assert [(p.query, p.frequency) for p in patterns] == [("Budget", 1)]

    @pytest.mark.asyncio
    async def test_not_connected(self, tmp_path: Path):
        with pytest.raises(RuntimeError):
            await SqlitePersistence(tmp_path / "x.db").load("k")


class TestGuardedPersistence:
    @pytest.mark.asyncio
    async def test_failures_swallowed(self):
        guarded = GuardedPersistence(BrokenPersistence())
        assert await guarded.load("k") is None
        await guarded.save("k", 1)

    @pytest.mark.asyncio
    async def test_passes_through(self):
        port = InMemoryPersistence()
        guarded = GuardedPersistence(port)
        await guarded.save("k", {"a": 1})
        assert await guarded.load("k") == {"a": 1}
        assert port.keys() == ["k"]


class TestInMemoryPersistence:
    @pytest.mark.asyncio
    async def test_values_are_copied(self):
        port = InMemoryPersistence()
        value = {"tags": ["a"]}
        await port.save("k", value)
        value["tags"].append("b")

        loaded = await port.load("k")
        assert loaded == {"tags": ["a"]}
        loaded["tags"].append("c")
        assert await port.load("k") == {"tags": ["a"]}


class TestMemoryCache:
    def test_invalidate_single_key(self):
        cache = MemoryCache()
        cache.set("a", 1)
        cache.set("b", 2)

        assert cache.invalidate("a")
        assert not cache.invalidate("a")
        assert "a" not in cache
        assert cache.stats() == {"size": 1, "keys": ["b"]}

    def test_clear(self):
        cache = MemoryCache()
        cache.set("a", [])
        cache.clear()
        assert cache.get("a") is None
        assert cache.stats()["size"] == 0
