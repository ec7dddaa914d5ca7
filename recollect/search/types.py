from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from recollect.constants import DEFAULT_MAX_DOCUMENT_RESULTS, DEFAULT_MAX_WEB_RESULTS
from recollect.utils import clamp_score


class _ResultModel(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    relevance_score: float

    @field_validator("relevance_score")
    @classmethod
    def _clamp(cls, v: float) -> float:
        return clamp_score(v)


class DocumentResult(_ResultModel):
    id: str
    title: str
    content: str = ""
    excerpt: str = ""
    document_type: str = "unknown"
    last_modified: str = ""
    source: Literal["document"] = "document"


class WebResult(_ResultModel):
    title: str
    url: str
    description: str = ""
    snippet: str = ""
    source: Literal["web"] = "web"


CombinedResult = Annotated[DocumentResult | WebResult, Field(discriminator="source")]


class SearchOptions(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    include_web: bool = True
    max_document_results: int = Field(default=DEFAULT_MAX_DOCUMENT_RESULTS, ge=0)
    max_web_results: int = Field(default=DEFAULT_MAX_WEB_RESULTS, ge=0)


class HybridSearchResult(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    query: str
    document_results: list[DocumentResult]
    web_results: list[WebResult]
    combined_results: list[CombinedResult]
    total_results: int
    search_time: int  # ms
    request_id: int = 0

    @property
    def result_types(self) -> list[str]:
        types = []
        if self.document_results:
            types.append("document")
        if self.web_results:
            types.append("web")
        return types

    @property
    def avg_relevance(self) -> float:
        if not self.combined_results:
            return 0.0
        return sum(r.relevance_score for r in self.combined_results) / len(self.combined_results)


class SearchOutcome(BaseModel):
    """What a finished search tells the pattern learner."""

    model_config = ConfigDict(frozen=True)

    query: str
    document_result_count: int
    web_result_count: int
    total_results: int
    elapsed_ms: int
    result_types: list[str]
    avg_relevance: float

    @classmethod
    def from_result(cls, result: HybridSearchResult) -> "SearchOutcome":
        return cls(
            query=result.query,
            document_result_count=len(result.document_results),
            web_result_count=len(result.web_results),
            total_results=result.total_results,
            elapsed_ms=result.search_time,
            result_types=result.result_types,
            avg_relevance=result.avg_relevance,
        )
