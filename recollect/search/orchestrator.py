import asyncio
import time
from collections.abc import Awaitable

from recollect.channel import Channel
from recollect.events import SearchCompleted
from recollect.logging import get_logger
from recollect.search.ranking import merge_results
from recollect.search.types import DocumentResult, HybridSearchResult, SearchOptions, SearchOutcome, WebResult
from recollect.sources.base import DocumentHit, DocumentSearchResponse, DocumentSource, WebSearchSource

_logger = get_logger(__name__)


def _to_document_result(hit: DocumentHit) -> DocumentResult:
    doc = hit.document
    return DocumentResult(
        id=doc.id,
        title=doc.title,
        content=doc.content or "",
        excerpt=hit.summary or "",
        relevance_score=hit.relevance_score,
        document_type=doc.type or "unknown",
        last_modified=doc.last_modified or "",
    )


async def _isolated[T](name: str, query: str, call: Awaitable[list[T]]) -> list[T]:
    try:
        return await call
    except Exception as e:
        _logger.warning("%s search failed for %r, continuing without it: %s", name, query, e)
        return []


class SearchOrchestrator:
    """Fans a query out to the document and web sources and merges the hits.

    A failing source contributes an empty list; search_hybrid itself never raises
    because of a source. Every call is stamped with a monotonically increasing
    request_id so callers can drop results that arrive after a newer search.
    """

    def __init__(
        self,
        documents: DocumentSource | None,
        web: WebSearchSource | None,
        channel: Channel | None = None,
    ):
        self.documents = documents
        self.web = web
        self.channel = channel
        self._last_request_id = 0

    @property
    def last_request_id(self) -> int:
        return self._last_request_id

    def is_latest(self, result: HybridSearchResult) -> bool:
        return result.request_id == self._last_request_id

    async def _search_documents(self, query: str, limit: int) -> list[DocumentResult]:
        if self.documents is None or limit <= 0:
            return []
        response = await self.documents.search(query)
        if not isinstance(response, DocumentSearchResponse):
            response = DocumentSearchResponse.model_validate(response or {})
        return [_to_document_result(hit) for hit in response.documents[:limit]]

    async def _search_web(self, query: str, limit: int) -> list[WebResult]:
        if self.web is None or limit <= 0:
            return []
        results = await self.web.search(query, limit)
        return list(results or [])[:limit]

    async def search_hybrid(self, query: str, options: SearchOptions | None = None) -> HybridSearchResult:
        options = options or SearchOptions()
        self._last_request_id += 1
        request_id = self._last_request_id
        start = time.monotonic()

        # Both calls are dispatched before either is awaited
        doc_task = asyncio.create_task(
            _isolated("Document", query, self._search_documents(query, options.max_document_results))
        )
        web_task = asyncio.create_task(
            _isolated("Web", query, self._search_web(query, options.max_web_results) if options.include_web else _empty())
        )
        document_results, web_results = await asyncio.gather(doc_task, web_task)

        combined = merge_results(document_results, web_results)
        elapsed_ms = int((time.monotonic() - start) * 1000)

        result = HybridSearchResult(
            query=query,
            document_results=document_results,
            web_results=web_results,
            combined_results=combined,
            total_results=len(document_results) + len(web_results),
            search_time=elapsed_ms,
            request_id=request_id,
        )
        _logger.debug(
            "Hybrid search %r: %d documents, %d web in %dms",
            query,
            len(document_results),
            len(web_results),
            elapsed_ms,
        )

        if self.channel:
            self.channel.publish(SearchCompleted(request_id=request_id, outcome=SearchOutcome.from_result(result)))
        return result


async def _empty() -> list:
    return []
