import copy
from typing import Any


class InMemoryPersistence:
    """Process-local stand-in used when no real store is configured."""

    def __init__(self) -> None:
        self._data: dict[str, Any] = {}

    async def load(self, key: str) -> Any | None:
        value = self._data.get(key)
        return copy.deepcopy(value)

    async def save(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)

    def keys(self) -> list[str]:
        return list(self._data)
