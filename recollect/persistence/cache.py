from typing import Any

from recollect.logging import get_logger

_logger = get_logger(__name__)


class MemoryCache:
    """Process-wide key -> value map shared by the memory stores.

    No TTL. Entries are dropped per key with invalidate() or all at once with clear().
    """

    def __init__(self) -> None:
        self._entries: dict[str, Any] = {}

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def get(self, key: str) -> Any | None:
        return self._entries.get(key)

    def set(self, key: str, value: Any) -> None:
        self._entries[key] = value

    def invalidate(self, key: str) -> bool:
        return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        self._entries.clear()
        _logger.info("Memory cache cleared")

    def stats(self) -> dict[str, Any]:
        return {"size": len(self._entries), "keys": list(self._entries)}
