from abc import ABC, abstractmethod

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from recollect.search.types import WebResult


class _WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class DocumentRecord(_WireModel):
    id: str
    title: str
    content: str | None = None
    type: str | None = None
    last_modified: str | None = None
    category: str | None = None


class DocumentHit(_WireModel):
    document: DocumentRecord
    relevance_score: float
    summary: str | None = None


class DocumentSearchResponse(_WireModel):
    documents: list[DocumentHit] = []


class Source(ABC):
    name: str


class DocumentSource(Source):
    """Private document corpus."""

    @abstractmethod
    async def search(self, query: str) -> DocumentSearchResponse: ...

    @abstractmethod
    async def get_document(self, document_id: str) -> DocumentRecord | None: ...


class WebSearchSource(Source):
    """Public web search."""

    @abstractmethod
    async def search(self, query: str, num_results: int) -> list[WebResult]: ...
