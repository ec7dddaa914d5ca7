from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from recollect.memory.models import InteractionAction
from recollect.search.types import CombinedResult
from recollect.snippets.models import SourceDocumentRef, SourceLocation


class _Request(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Search ---


class SearchRequest(_Request):
    query: str = Field(..., min_length=1)
    include_web: bool | None = None
    max_document_results: int | None = Field(default=None, ge=0)
    max_web_results: int | None = Field(default=None, ge=0)


class QueryRequest(_Request):
    message: str = Field(..., min_length=1)


class SaveResultRequest(_Request):
    result: CombinedResult
    tags: list[str] = []


# --- Memory ---


class PreferenceValue(_Request):
    value: Any = None
    description: str | None = None


class InteractionRequest(_Request):
    document_id: str
    document_title: str
    action: InteractionAction
    context: str | None = None


class SearchPatternRequest(_Request):
    query: str = Field(..., min_length=1)
    result_types: list[str] = []
    relevance_score: float = Field(..., ge=0, le=1)


class UpdateContextRequest(_Request):
    current_project: str | None = None
    preferred_categories: list[str] | None = None
    workflow_patterns: list[str] | None = None


# --- Snippets ---


class CreateSnippetRequest(_Request):
    text: str
    title: str = ""
    source_document: SourceDocumentRef | None = None
    source_location: SourceLocation | None = None
    tags: list[str] = []
    collections: list[str] = []
    notes: str | None = None


class UpdateSnippetRequest(_Request):
    text: str | None = None
    title: str | None = None
    source_location: SourceLocation | None = None
    tags: list[str] | None = None
    collections: list[str] | None = None
    notes: str | None = None


class CreateCollectionRequest(_Request):
    name: str
    description: str | None = None
    tags: list[str] = []
    color: str | None = None


class UpdateCollectionRequest(_Request):
    name: str | None = None
    description: str | None = None
    tags: list[str] | None = None
    color: str | None = None


class SelectCollectionRequest(_Request):
    collection_id: str | None = None
