from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from recollect.constants import (
    DEFAULT_MAX_DOCUMENT_RESULTS,
    DEFAULT_MAX_WEB_RESULTS,
    INTERACTION_LOG_CAPACITY,
    SUGGESTION_DEBOUNCE_SECONDS,
    WEB_SEARCH_MAX_RESULTS,
)

RECOLLECT_DIR = Path.home() / ".recollect"


class Config(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="RECOLLECT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        validate_assignment=True,
        populate_by_name=True,
    )

    # Document corpus backend (POST {url}/api/documents/search)
    document_api_url: str | None = None

    # Exa.ai for web search (optional) - no prefix, standard env var
    exa_api_key: str | None = Field(default=None, alias="EXA_API_KEY")

    # Persistence: "memory" keeps everything in-process, "sqlite" writes to db_path
    persistence: Literal["memory", "sqlite"] = "sqlite"
    data_dir: Path = RECOLLECT_DIR

    # Search defaults, overridable per request and by the search.includeWebResults preference
    include_web: bool = True
    max_document_results: int = DEFAULT_MAX_DOCUMENT_RESULTS
    max_web_results: int = DEFAULT_MAX_WEB_RESULTS

    # Adaptive memory
    interaction_log_capacity: int = INTERACTION_LOG_CAPACITY
    suggestion_debounce: float = SUGGESTION_DEBOUNCE_SECONDS
    # False reproduces the stale-until-cleared project context cache
    auto_invalidate_context: bool = True

    log_level: str = "INFO"
    log_json: bool = False

    @field_validator("max_document_results", "max_web_results")
    @classmethod
    def _validate_max_results(cls, v: int) -> int:
        if not 0 <= v <= WEB_SEARCH_MAX_RESULTS * 5:
            raise ValueError(f"max results must be 0-{WEB_SEARCH_MAX_RESULTS * 5}, got {v}")
        return v

    @field_validator("interaction_log_capacity")
    @classmethod
    def _validate_capacity(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"interaction_log_capacity must be positive, got {v}")
        return v

    @field_validator("suggestion_debounce")
    @classmethod
    def _validate_debounce(cls, v: float) -> float:
        if v < 0:
            raise ValueError(f"suggestion_debounce must be >= 0, got {v}")
        return v

    @field_validator("log_level")
    @classmethod
    def _normalize_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unsupported log level: {v}")
        return level

    @property
    def db_path(self) -> Path:
        return self.data_dir / "recollect.db"


def get_config() -> Config:
    return Config()
