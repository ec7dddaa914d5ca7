from collections.abc import Iterable, Sequence

from recollect.snippets.models import Snippet, SortDirection, SortKey


def matches_query(snippet: Snippet, query: str) -> bool:
    """Every whitespace token must occur in the text, the title or one of the tags."""
    fields = [snippet.text.lower(), snippet.title.lower(), *(t.lower() for t in snippet.tags)]
    return all(any(token in f for f in fields) for token in query.lower().split())


def filter_by_tags(snippets: Sequence[Snippet], tags: Iterable[str]) -> list[Snippet]:
    wanted = set(tags)
    if not wanted:
        return list(snippets)
    return [s for s in snippets if wanted.intersection(s.tags)]


def filter_by_collection(snippets: Sequence[Snippet], collection_id: str | None) -> list[Snippet]:
    if collection_id is None:
        return list(snippets)
    return [s for s in snippets if collection_id in s.collections]


_SORT_KEYS = {
    SortKey.CREATED: lambda s: s.created_at,
    SortKey.UPDATED: lambda s: s.updated_at,
    SortKey.TITLE: lambda s: s.title,
    SortKey.SOURCE: lambda s: s.source_document.title,
}


def sort_snippets(
    snippets: Sequence[Snippet],
    key: SortKey | str = SortKey.UPDATED,
    direction: SortDirection | str = SortDirection.DESC,
) -> list[Snippet]:
    return sorted(
        snippets,
        key=_SORT_KEYS[SortKey(key)],
        reverse=SortDirection(direction) == SortDirection.DESC,
    )
