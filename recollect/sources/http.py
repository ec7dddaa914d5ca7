import httpx

from recollect.constants import DOCUMENT_SEARCH_TIMEOUT
from recollect.sources.base import DocumentRecord, DocumentSearchResponse, DocumentSource


class HttpDocumentSource(DocumentSource):
    """Document corpus served over the backend's REST API."""

    name = "documents"

    def __init__(self, base_url: str, timeout: float = DOCUMENT_SEARCH_TIMEOUT, transport: httpx.AsyncBaseTransport | None = None):
        if not base_url:
            raise ValueError("document_api_url not configured")
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=self._base_url, timeout=self._timeout, transport=self._transport)

    async def search(self, query: str) -> DocumentSearchResponse:
        async with self._client() as client:
            resp = await client.post("/api/documents/search", json={"query": query})
            resp.raise_for_status()
            data = resp.json()
        return DocumentSearchResponse.model_validate(data or {})

    async def get_document(self, document_id: str) -> DocumentRecord | None:
        async with self._client() as client:
            resp = await client.get(f"/api/documents/{document_id}")
            if resp.status_code == 404:
                return None
            resp.raise_for_status()
            return DocumentRecord.model_validate(resp.json())
