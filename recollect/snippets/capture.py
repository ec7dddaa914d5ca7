from recollect.constants import SEARCH_RESULT_TAG
from recollect.search.types import CombinedResult, DocumentResult
from recollect.snippets.models import SnippetDraft, SourceDocumentRef, SourceLocation


def draft_from_result(result: CombinedResult, tags: list[str] | None = None) -> SnippetDraft:
    """Turn a hybrid search hit into a snippet draft tagged as a search result."""
    if isinstance(result, DocumentResult):
        text = result.excerpt or result.content
        source = SourceDocumentRef(id=result.id, title=result.title, category=result.document_type)
    else:
        text = result.snippet or result.description
        source = SourceDocumentRef(id=result.url, title=result.title, category="web")

    return SnippetDraft(
        text=text,
        title=result.title,
        source_document=source,
        source_location=SourceLocation(document_id=source.id, context=text),
        tags=[*(tags or []), SEARCH_RESULT_TAG],
    )
