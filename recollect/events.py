from pydantic import BaseModel, ConfigDict

from recollect.search.types import SearchOutcome


class _FrozenEvent(BaseModel):
    model_config = ConfigDict(frozen=True)


class SearchCompleted(_FrozenEvent):
    request_id: int
    outcome: SearchOutcome
