from typing import Any, Protocol

from recollect.logging import get_logger

_logger = get_logger(__name__)


class PersistencePort(Protocol):
    """Key -> JSON-compatible value store the memory layer is built on."""

    async def load(self, key: str) -> Any | None: ...

    async def save(self, key: str, value: Any) -> None: ...


class GuardedPersistence:
    """Wraps a port so load/save never raise; failures are logged and skipped."""

    def __init__(self, port: PersistencePort):
        self._port = port

    async def load(self, key: str) -> Any | None:
        try:
            return await self._port.load(key)
        except Exception:
            _logger.warning("Failed to load %r from persistence", key, exc_info=True)
            return None

    async def save(self, key: str, value: Any) -> None:
        try:
            await self._port.save(key, value)
        except Exception:
            _logger.warning("Failed to save %r to persistence", key, exc_info=True)
