from collections.abc import Sequence

from recollect.search.types import CombinedResult, DocumentResult, WebResult


def merge_results(
    document_results: Sequence[DocumentResult],
    web_results: Sequence[WebResult],
) -> list[CombinedResult]:
    """Merge document and web hits into one list ordered by relevance.

    Documents are concatenated ahead of web results and the sort is stable,
    so on equal scores a document result always ranks above a web result.
    """
    combined: list[CombinedResult] = [*document_results, *web_results]
    combined.sort(key=lambda r: r.relevance_score, reverse=True)
    return combined
