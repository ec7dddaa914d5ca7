from collections.abc import Iterable
from typing import Any

from recollect.channel import Channel
from recollect.constants import (
    INTERACTION_LOG_CAPACITY,
    RECENT_DOCUMENTS_LIMIT,
    SUGGESTION_DEBOUNCE_SECONDS,
    SUGGESTION_MIN_CHARS,
)
from recollect.debounce import Debouncer
from recollect.events import SearchCompleted
from recollect.memory.context import ProjectContextAggregator
from recollect.memory.interactions import InteractionLog
from recollect.memory.models import (
    DocumentInteraction,
    InteractionAction,
    PreferenceCategory,
    ProjectContext,
    SearchPattern,
    UserPreference,
)
from recollect.memory.patterns import SearchPatternLearner
from recollect.memory.preferences import PreferenceStore
from recollect.persistence.base import GuardedPersistence, PersistencePort
from recollect.persistence.cache import MemoryCache


class MemoryService:
    """Preferences, search patterns, document interactions and project context.

    All four stores share one MemoryCache in front of the persistence port.
    With auto_invalidate_context the cached ProjectContext is dropped whenever
    an interaction or search pattern is recorded; without it the context stays
    stale until invalidate_project_context() or clear_cache().
    """

    def __init__(
        self,
        persistence: PersistencePort,
        interaction_capacity: int = INTERACTION_LOG_CAPACITY,
        auto_invalidate_context: bool = True,
        suggestion_debounce: float = SUGGESTION_DEBOUNCE_SECONDS,
    ):
        self.cache = MemoryCache()
        self.persistence = GuardedPersistence(persistence)
        self.auto_invalidate_context = auto_invalidate_context

        self.preferences = PreferenceStore(self.cache, self.persistence)
        self.patterns = SearchPatternLearner(self.cache, self.persistence)
        self.interactions = InteractionLog(self.cache, self.persistence, capacity=interaction_capacity)
        self.context = ProjectContextAggregator(self.cache, self.interactions, self.patterns, self.preferences)
        self._suggest_debouncer = Debouncer(suggestion_debounce)

    def attach(self, channel: Channel) -> None:
        channel.subscribe(SearchCompleted, self._on_search_completed)

    async def _on_search_completed(self, event: SearchCompleted) -> None:
        outcome = event.outcome
        await self.record_search_pattern(outcome.query, outcome.result_types, outcome.avg_relevance)

    def _mutated(self) -> None:
        if self.auto_invalidate_context:
            self.context.invalidate()

    # --- Preferences ---

    async def get_user_preferences(self) -> list[UserPreference]:
        return await self.preferences.list_all()

    async def get_user_preference(self, category: PreferenceCategory | str, key: str) -> Any | None:
        return await self.preferences.get(category, key)

    async def set_user_preference(
        self,
        category: PreferenceCategory | str,
        key: str,
        value: Any,
        description: str | None = None,
    ) -> UserPreference:
        pref = await self.preferences.set(category, key, value, description)
        if PreferenceCategory(category) == PreferenceCategory.GENERAL:
            self._mutated()
        return pref

    # --- Search patterns ---

    async def record_search_pattern(
        self, query: str, result_types: Iterable[str], relevance_score: float
    ) -> SearchPattern:
        pattern = await self.patterns.record(query, result_types, relevance_score)
        self._mutated()
        return pattern

    async def get_search_patterns(self) -> list[SearchPattern]:
        return await self.patterns.patterns()

    async def get_search_suggestions(self, partial_query: str) -> list[str]:
        return await self.patterns.suggest(partial_query)

    async def suggest_debounced(self, partial_query: str) -> list[str] | None:
        """Suggestions for live typing; None when a newer keystroke superseded this one."""
        if len(partial_query) < SUGGESTION_MIN_CHARS:
            return []
        return await self._suggest_debouncer(lambda: self.patterns.suggest(partial_query))

    # --- Document interactions ---

    async def record_document_interaction(
        self,
        document_id: str,
        document_title: str,
        action: InteractionAction | str,
        context: str | None = None,
    ) -> DocumentInteraction:
        interaction = await self.interactions.record(document_id, document_title, action, context)
        self._mutated()
        return interaction

    async def get_document_interactions(self) -> list[DocumentInteraction]:
        return await self.interactions.interactions()

    async def get_recent_documents(self, limit: int = RECENT_DOCUMENTS_LIMIT) -> list[str]:
        return await self.interactions.recent_documents(limit)

    # --- Project context ---

    async def get_project_context(self) -> ProjectContext:
        return await self.context.get_context()

    async def update_project_context(self, **changes: Any) -> ProjectContext:
        return await self.context.update(**changes)

    def invalidate_project_context(self) -> None:
        self.context.invalidate()

    # --- Cache ---

    def clear_cache(self) -> None:
        self.cache.clear()

    def cache_stats(self) -> dict[str, Any]:
        return self.cache.stats()
