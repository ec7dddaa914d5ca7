from pydantic import BaseModel, ValidationError

from recollect.logging import get_logger
from recollect.persistence.base import GuardedPersistence
from recollect.persistence.cache import MemoryCache

_logger = get_logger(__name__)


class CachedListRepository[T: BaseModel]:
    """A list of models kept in the shared cache and written through to persistence."""

    key: str
    model: type[T]

    def __init__(self, cache: MemoryCache, persistence: GuardedPersistence):
        self._cache = cache
        self._persistence = persistence

    async def _load(self) -> list[T]:
        if self.key in self._cache:
            return self._cache.get(self.key)

        raw = await self._persistence.load(self.key)
        # Another coroutine may have populated the cache while we were loading
        if self.key in self._cache:
            return self._cache.get(self.key)

        items: list[T] = []
        for entry in raw or []:
            try:
                items.append(self.model.model_validate(entry))
            except ValidationError:
                _logger.warning("Skipping malformed %s entry in %r", self.model.__name__, self.key)
        self._cache.set(self.key, items)
        return items

    async def _store(self, items: list[T]) -> None:
        self._cache.set(self.key, items)
        await self._persistence.save(self.key, [item.model_dump(mode="json") for item in items])
