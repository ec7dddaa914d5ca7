from recollect.constants import DEFAULT_MAX_DOCUMENT_RESULTS, DEFAULT_MAX_WEB_RESULTS
from recollect.logging import get_logger
from recollect.memory.models import PreferenceCategory
from recollect.memory.service import MemoryService
from recollect.search.orchestrator import SearchOrchestrator
from recollect.search.types import HybridSearchResult, SearchOptions

_logger = get_logger(__name__)

INCLUDE_WEB_PREFERENCE = "includeWebResults"


class SearchService:
    """Hybrid search with the user's saved defaults applied.

    include_web falls back to the search.includeWebResults preference, then to
    the configured default.
    """

    def __init__(
        self,
        orchestrator: SearchOrchestrator,
        memory: MemoryService,
        include_web: bool = True,
        max_document_results: int = DEFAULT_MAX_DOCUMENT_RESULTS,
        max_web_results: int = DEFAULT_MAX_WEB_RESULTS,
    ):
        self.orchestrator = orchestrator
        self.memory = memory
        self.include_web = include_web
        self.max_document_results = max_document_results
        self.max_web_results = max_web_results

    async def default_include_web(self) -> bool:
        saved = await self.memory.get_user_preference(PreferenceCategory.SEARCH, INCLUDE_WEB_PREFERENCE)
        return saved if isinstance(saved, bool) else self.include_web

    async def search(
        self,
        query: str,
        include_web: bool | None = None,
        max_document_results: int | None = None,
        max_web_results: int | None = None,
    ) -> HybridSearchResult:
        if include_web is None:
            include_web = await self.default_include_web()
        options = SearchOptions(
            include_web=include_web,
            max_document_results=self.max_document_results if max_document_results is None else max_document_results,
            max_web_results=self.max_web_results if max_web_results is None else max_web_results,
        )

        _logger.info("Searching %r (web=%s)", query, options.include_web)
        return await self.orchestrator.search_hybrid(query, options)
