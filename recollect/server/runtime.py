from fastapi import Request

from recollect.channel import Channel
from recollect.config import Config, get_config
from recollect.logging import get_logger
from recollect.memory.service import MemoryService
from recollect.persistence.base import PersistencePort
from recollect.persistence.memory import InMemoryPersistence
from recollect.persistence.sqlite import SqlitePersistence
from recollect.search.orchestrator import SearchOrchestrator
from recollect.services.search import SearchService
from recollect.services.snippets import SnippetService
from recollect.snippets.index import SnippetIndex
from recollect.sources.base import DocumentSource, WebSearchSource
from recollect.sources.exa import ExaWebSource
from recollect.sources.http import HttpDocumentSource

_logger = get_logger(__name__)


def create_sources(config: Config) -> tuple[DocumentSource | None, WebSearchSource | None, dict[str, str]]:
    errors: dict[str, str] = {}
    documents = web = None

    if config.document_api_url:
        try:
            documents = HttpDocumentSource(config.document_api_url)
        except Exception as e:
            errors["documents"] = str(e)
            _logger.warning("Document source unavailable: %s", e)

    if config.exa_api_key:
        try:
            web = ExaWebSource(config.exa_api_key)
        except Exception as e:
            errors["web"] = str(e)
            _logger.warning("Web source unavailable: %s", e)

    return documents, web, errors


class Runtime:
    """Composition root: one instance of every service, handed to consumers explicitly."""

    def __init__(
        self,
        config: Config | None = None,
        documents: DocumentSource | None = None,
        web: WebSearchSource | None = None,
        persistence: PersistencePort | None = None,
    ):
        self.config = config or get_config()
        self.channel = Channel()
        self.source_errors: dict[str, str] = {}

        if documents is None and web is None:
            documents, web, self.source_errors = create_sources(self.config)
        self.documents = documents
        self.web = web

        self._sqlite: SqlitePersistence | None = None
        if persistence is None:
            if self.config.persistence == "sqlite":
                self._sqlite = SqlitePersistence(self.config.db_path)
                persistence = self._sqlite
            else:
                persistence = InMemoryPersistence()
        self.persistence = persistence

        self.memory = MemoryService(
            persistence,
            interaction_capacity=self.config.interaction_log_capacity,
            auto_invalidate_context=self.config.auto_invalidate_context,
            suggestion_debounce=self.config.suggestion_debounce,
        )
        self.orchestrator = SearchOrchestrator(self.documents, self.web, self.channel)
        self.search = SearchService(
            self.orchestrator,
            self.memory,
            include_web=self.config.include_web,
            max_document_results=self.config.max_document_results,
            max_web_results=self.config.max_web_results,
        )
        self.snippet_index = SnippetIndex(lookup=self.documents)
        self.snippets = SnippetService(self.snippet_index, self.memory)
        self._connected = False

    @property
    def connected(self) -> bool:
        return self._connected

    def get_available_sources(self) -> list[str]:
        return [s.name for s in (self.documents, self.web) if s is not None]

    async def connect(self) -> None:
        if self._connected:
            return
        if self._sqlite:
            await self._sqlite.connect()
        self.memory.attach(self.channel)
        self._connected = True
        _logger.info("Runtime ready (sources: %s)", ", ".join(self.get_available_sources()) or "none")

    async def close(self) -> None:
        await self.channel.drain()
        if self._sqlite:
            await self._sqlite.close()
        self._connected = False


def get_runtime(request: Request) -> Runtime:
    runtime: Runtime | None = getattr(request.app.state, "runtime", None)
    if runtime is None or not runtime.connected:
        raise RuntimeError("Runtime not connected. Start the app through its lifespan first.")
    return runtime
