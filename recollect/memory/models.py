from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from recollect.utils import clamp_score


def _parse_datetime(value: Any) -> datetime | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=UTC)
    if isinstance(value, str):
        dt = datetime.fromisoformat(value)
        return dt if dt.tzinfo else dt.replace(tzinfo=UTC)
    raise ValueError(f"Cannot parse datetime from {type(value)}")


class PreferenceCategory(StrEnum):
    UI = "ui"
    SEARCH = "search"
    SYNC = "sync"
    GENERAL = "general"


class InteractionAction(StrEnum):
    VIEW = "view"
    SEARCH = "search"
    SNIPPET = "snippet"
    SHARE = "share"


class _MemoryModel(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class UserPreference(_MemoryModel):
    id: str
    category: PreferenceCategory
    key: str
    value: Any = None
    description: str | None = None
    created_at: datetime
    updated_at: datetime

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def _parse_dt(cls, v: Any) -> datetime | None:
        return _parse_datetime(v)


class SearchPattern(_MemoryModel):
    query: str
    frequency: int = Field(ge=1)
    last_used: datetime
    result_types: list[str]
    avg_relevance: float

    @property
    def identity(self) -> str:
        return self.query.lower()

    @field_validator("last_used", mode="before")
    @classmethod
    def _parse_dt(cls, v: Any) -> datetime | None:
        return _parse_datetime(v)

    @field_validator("avg_relevance")
    @classmethod
    def _clamp(cls, v: float) -> float:
        return clamp_score(v)


class DocumentInteraction(_MemoryModel):
    document_id: str
    document_title: str
    action: InteractionAction
    timestamp: datetime
    context: str | None = None

    @field_validator("timestamp", mode="before")
    @classmethod
    def _parse_dt(cls, v: Any) -> datetime | None:
        return _parse_datetime(v)


class ProjectContext(_MemoryModel):
    current_project: str | None = None
    recent_documents: list[str] = []
    frequent_searches: list[SearchPattern] = []
    preferred_categories: list[str] = []
    workflow_patterns: list[str] = []
