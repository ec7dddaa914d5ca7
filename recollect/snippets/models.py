from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel


def _dedupe(values: list[str]) -> list[str]:
    return list(dict.fromkeys(v for v in values if v))


class _SnippetModel(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class SortKey(StrEnum):
    CREATED = "created"
    UPDATED = "updated"
    TITLE = "title"
    SOURCE = "source"


class SortDirection(StrEnum):
    ASC = "asc"
    DESC = "desc"


class SourceDocumentRef(_SnippetModel):
    """Just enough of the source document to display a snippet without loading it."""

    id: str
    title: str
    category: str | None = None


class SourceLocation(_SnippetModel):
    document_id: str
    context: str
    page_number: int | None = None
    start_offset: int | None = None
    end_offset: int | None = None


class SnippetDraft(_SnippetModel):
    text: str
    title: str = ""
    source_document: SourceDocumentRef | None = None
    source_location: SourceLocation | None = None
    tags: list[str] = []
    collections: list[str] = []
    notes: str | None = None

    @field_validator("tags", "collections")
    @classmethod
    def _unique(cls, v: list[str]) -> list[str]:
        return _dedupe(v)


class Snippet(_SnippetModel):
    id: str
    text: str
    title: str
    source_document: SourceDocumentRef
    source_location: SourceLocation
    tags: list[str] = []
    collections: list[str] = []
    notes: str | None = None
    created_at: datetime
    updated_at: datetime

    @field_validator("tags", "collections")
    @classmethod
    def _unique(cls, v: list[str]) -> list[str]:
        return _dedupe(v)


class Collection(_SnippetModel):
    """Membership is not stored here; it lives on Snippet.collections."""

    id: str
    name: str
    description: str | None = None
    tags: list[str] = []
    color: str | None = None
    created_at: datetime
    updated_at: datetime

    @field_validator("tags")
    @classmethod
    def _unique(cls, v: list[str]) -> list[str]:
        return _dedupe(v)
