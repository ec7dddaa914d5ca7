from recollect.constants import INTERACTIONS_KEY, INTERACTION_LOG_CAPACITY, RECENT_DOCUMENTS_LIMIT
from recollect.logging import get_logger
from recollect.memory.models import DocumentInteraction, InteractionAction
from recollect.memory.store import CachedListRepository
from recollect.persistence.base import GuardedPersistence
from recollect.persistence.cache import MemoryCache
from recollect.utils import utc_now

_logger = get_logger(__name__)


class InteractionLog(CachedListRepository[DocumentInteraction]):
    """Append-only document interaction log, oldest entries evicted past capacity."""

    key = INTERACTIONS_KEY
    model = DocumentInteraction

    def __init__(self, cache: MemoryCache, persistence: GuardedPersistence, capacity: int = INTERACTION_LOG_CAPACITY):
        super().__init__(cache, persistence)
        self.capacity = capacity

    async def interactions(self) -> list[DocumentInteraction]:
        return list(await self._load())

    async def record(
        self,
        document_id: str,
        document_title: str,
        action: InteractionAction | str,
        context: str | None = None,
    ) -> DocumentInteraction:
        entries = await self._load()
        interaction = DocumentInteraction(
            document_id=document_id,
            document_title=document_title,
            action=InteractionAction(action),
            timestamp=utc_now(),
            context=context,
        )
        entries.append(interaction)
        if len(entries) > self.capacity:
            del entries[: len(entries) - self.capacity]

        await self._store(entries)
        _logger.debug("Recorded %s interaction on %r", interaction.action, document_title)
        return interaction

    async def recent_documents(self, limit: int = RECENT_DOCUMENTS_LIMIT) -> list[str]:
        views = [(i, e) for i, e in enumerate(await self._load()) if e.action == InteractionAction.VIEW]
        # Newest first; entries sharing a timestamp keep later-inserted first
        views.sort(key=lambda pair: (pair[1].timestamp, pair[0]), reverse=True)
        recent = [e.document_id for _, e in views[:limit]]
        return list(dict.fromkeys(recent))
