from recollect.memory.models import InteractionAction
from recollect.memory.service import MemoryService
from recollect.search.types import CombinedResult
from recollect.snippets.capture import draft_from_result
from recollect.snippets.index import SnippetIndex
from recollect.snippets.models import Snippet, SnippetDraft


class SnippetService:
    """Snippet capture that also feeds the document interaction log."""

    def __init__(self, index: SnippetIndex, memory: MemoryService):
        self.index = index
        self.memory = memory

    async def capture(self, draft: SnippetDraft) -> Snippet:
        snippet = self.index.add(draft)
        await self.memory.record_document_interaction(
            snippet.source_document.id,
            snippet.source_document.title,
            InteractionAction.SNIPPET,
            context=snippet.id,
        )
        return snippet

    async def save_search_result(self, result: CombinedResult, tags: list[str] | None = None) -> Snippet:
        return await self.capture(draft_from_result(result, tags))
