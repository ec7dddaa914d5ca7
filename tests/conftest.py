import asyncio
from collections.abc import AsyncGenerator
from typing import Any

import pytest
import pytest_asyncio

from recollect.channel import Channel
from recollect.memory.service import MemoryService
from recollect.persistence.memory import InMemoryPersistence
from recollect.search.orchestrator import SearchOrchestrator
from recollect.search.types import WebResult
from recollect.sources.base import (
    DocumentHit,
    DocumentRecord,
    DocumentSearchResponse,
    DocumentSource,
    WebSearchSource,
)


def make_hit(doc_id: str, score: float, title: str | None = None, **kwargs: Any) -> DocumentHit:
    return DocumentHit(
        document=DocumentRecord(id=doc_id, title=title or f"Doc {doc_id}", content=f"content of {doc_id}", **kwargs),
        relevance_score=score,
        summary=f"summary of {doc_id}",
    )


def make_web(url: str, score: float, title: str | None = None) -> WebResult:
    return WebResult(title=title or url, url=url, description=f"about {url}", relevance_score=score)


class FakeDocumentSource(DocumentSource):
    name = "documents"

    def __init__(self, hits: list[DocumentHit] | None = None, delay: float = 0.0, error: Exception | None = None):
        self.hits = hits or []
        self.delay = delay
        self.error = error
        self.queries: list[str] = []
        self.records: dict[str, DocumentRecord] = {h.document.id: h.document for h in self.hits}

    async def search(self, query: str) -> DocumentSearchResponse:
        self.queries.append(query)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        return DocumentSearchResponse(documents=self.hits)

    async def get_document(self, document_id: str) -> DocumentRecord | None:
        if self.error:
            raise self.error
        return self.records.get(document_id)


class FakeWebSource(WebSearchSource):
    name = "web"

    def __init__(self, results: list[WebResult] | None = None, delay: float = 0.0, error: Exception | None = None):
        self.results = results or []
        self.delay = delay
        self.error = error
        self.calls: list[tuple[str, int]] = []

    async def search(self, query: str, num_results: int) -> list[WebResult]:
        self.calls.append((query, num_results))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        return self.results[:num_results]


class BrokenPersistence:
    """Every load and save fails."""

    def __init__(self) -> None:
        self.attempts = 0

    async def load(self, key: str) -> Any | None:
        self.attempts += 1
        raise OSError("storage unavailable")

    async def save(self, key: str, value: Any) -> None:
        self.attempts += 1
        raise OSError("storage unavailable")


@pytest.fixture
def persistence() -> InMemoryPersistence:
    return InMemoryPersistence()


@pytest.fixture
def memory(persistence: InMemoryPersistence) -> MemoryService:
    return MemoryService(persistence, suggestion_debounce=0.01)


@pytest.fixture
def documents() -> FakeDocumentSource:
    return FakeDocumentSource([make_hit("d1", 0.9), make_hit("d2", 0.6), make_hit("d3", 0.3)])


@pytest.fixture
def web() -> FakeWebSource:
    return FakeWebSource([make_web("https://a.example", 0.8), make_web("https://b.example", 0.6)])


@pytest_asyncio.fixture
async def channel() -> AsyncGenerator[Channel]:
    channel = Channel()
    yield channel
    await channel.drain()


@pytest.fixture
def orchestrator(documents: FakeDocumentSource, web: FakeWebSource, channel: Channel) -> SearchOrchestrator:
    return SearchOrchestrator(documents, web, channel)
