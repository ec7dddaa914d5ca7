import asyncio

from exa_py import Exa

from recollect.constants import WEB_SEARCH_MAX_RESULTS
from recollect.search.types import WebResult
from recollect.sources.base import WebSearchSource
from recollect.utils import clamp_score, truncate

_DESCRIPTION_LIMIT = 300


def _rank_score(index: int, total: int) -> float:
    # Linear fall-off for results Exa returns without a score
    return 1.0 - index / max(total, 1)


class ExaWebSource(WebSearchSource):
    name = "web"

    def __init__(self, api_key: str):
        if not api_key:
            raise ValueError("EXA_API_KEY not configured")
        self._api_key = api_key
        self._client = None

    def _get_client(self) -> Exa:
        if self._client is None:
            self._client = Exa(api_key=self._api_key)
        return self._client

    def _search_sync(self, query: str, num_results: int) -> list[WebResult]:
        client = self._get_client()
        result = client.search_and_contents(
            query,
            num_results=min(max(num_results, 1), WEB_SEARCH_MAX_RESULTS),
            type="auto",
            highlights={"num_sentences": 2, "highlights_per_url": 1, "query": query},
            summary={"query": f"Key information about: {query}"},
        )

        items = result.results
        web_results = []
        for i, r in enumerate(items):
            score = getattr(r, "score", None)
            highlights = getattr(r, "highlights", None) or []
            summary = getattr(r, "summary", None) or ""
            web_results.append(
                WebResult(
                    title=r.title or "",
                    url=r.url or "",
                    description=truncate(summary, _DESCRIPTION_LIMIT),
                    snippet=highlights[0] if highlights else summary,
                    relevance_score=clamp_score(score) if score is not None else _rank_score(i, len(items)),
                )
            )
        return web_results

    async def search(self, query: str, num_results: int) -> list[WebResult]:
        return await asyncio.to_thread(self._search_sync, query, num_results)
