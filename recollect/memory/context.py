from typing import Any

from recollect.constants import (
    DEFAULT_PREFERRED_CATEGORIES,
    DEFAULT_WORKFLOW_PATTERNS,
    FREQUENT_SEARCHES_LIMIT,
    PROJECT_CONTEXT_KEY,
)
from recollect.logging import get_logger
from recollect.memory.interactions import InteractionLog
from recollect.memory.models import PreferenceCategory, ProjectContext
from recollect.memory.patterns import SearchPatternLearner
from recollect.memory.preferences import PreferenceStore
from recollect.persistence.cache import MemoryCache

_logger = get_logger(__name__)

_PREFERENCE_KEYS = {
    "current_project": "currentProject",
    "preferred_categories": "preferredCategories",
    "workflow_patterns": "workflowPatterns",
}


def _as_str_list(value: Any, default: list[str]) -> list[str]:
    if isinstance(value, list) and all(isinstance(v, str) for v in value):
        return value
    return list(default)


class ProjectContextAggregator:
    """Read-only rollup of recent activity and preference hints.

    The computed context is cached and stays stale until invalidate() or a
    full cache clear; the aggregator never refreshes on its own.
    """

    def __init__(
        self,
        cache: MemoryCache,
        interactions: InteractionLog,
        patterns: SearchPatternLearner,
        preferences: PreferenceStore,
    ):
        self._cache = cache
        self._interactions = interactions
        self._patterns = patterns
        self._preferences = preferences

    def invalidate(self) -> None:
        self._cache.invalidate(PROJECT_CONTEXT_KEY)

    async def _compute(self) -> ProjectContext:
        recent_documents = await self._interactions.recent_documents()
        patterns = await self._patterns.patterns()
        current_project = await self._preferences.get(PreferenceCategory.GENERAL, "currentProject")
        categories = await self._preferences.get(PreferenceCategory.GENERAL, "preferredCategories")
        workflows = await self._preferences.get(PreferenceCategory.GENERAL, "workflowPatterns")

        return ProjectContext(
            current_project=current_project if isinstance(current_project, str) else None,
            recent_documents=recent_documents,
            frequent_searches=patterns[:FREQUENT_SEARCHES_LIMIT],
            preferred_categories=_as_str_list(categories, DEFAULT_PREFERRED_CATEGORIES),
            workflow_patterns=_as_str_list(workflows, DEFAULT_WORKFLOW_PATTERNS),
        )

    async def get_context(self) -> ProjectContext:
        cached = self._cache.get(PROJECT_CONTEXT_KEY)
        if cached is not None:
            return cached

        try:
            context = await self._compute()
        except Exception:
            _logger.exception("Failed to build project context")
            return ProjectContext()

        self._cache.set(PROJECT_CONTEXT_KEY, context)
        return context

    async def update(self, **changes: Any) -> ProjectContext:
        """Merge changes into the context.

        Preference-backed fields are written to the general preferences so they
        survive recomputation. Derived fields (recent documents, frequent
        searches) only last until the next invalidation.
        """
        unknown = set(changes) - set(ProjectContext.model_fields)
        if unknown:
            raise ValueError(f"Unknown project context fields: {', '.join(sorted(unknown))}")
        context = await self.get_context()
        updated = ProjectContext.model_validate({**context.model_dump(), **changes})

        for field, key in _PREFERENCE_KEYS.items():
            if field in changes:
                await self._preferences.set(PreferenceCategory.GENERAL, key, getattr(updated, field))

        self._cache.set(PROJECT_CONTEXT_KEY, updated)
        return updated
