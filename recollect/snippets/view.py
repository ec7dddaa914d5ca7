from dataclasses import dataclass, field

from recollect.snippets.filters import filter_by_collection, filter_by_tags, sort_snippets
from recollect.snippets.index import SnippetIndex
from recollect.snippets.models import Snippet, SortDirection, SortKey


@dataclass
class SnippetView:
    """Search, filter and sort state for browsing an index.

    Filters compose in a fixed order: free-text search, then tags (any of the
    selected tags), then the index's selected collection, then the sort.
    """

    index: SnippetIndex
    query: str = ""
    selected_tags: list[str] = field(default_factory=list)
    sort_key: SortKey = SortKey.UPDATED
    sort_direction: SortDirection = SortDirection.DESC

    def toggle_tag(self, tag: str) -> None:
        if tag in self.selected_tags:
            self.selected_tags.remove(tag)
        else:
            self.selected_tags.append(tag)

    def toggle_sort(self, key: SortKey | str) -> None:
        key = SortKey(key)
        if key == self.sort_key:
            self.sort_direction = SortDirection.ASC if self.sort_direction == SortDirection.DESC else SortDirection.DESC
        else:
            self.sort_key = key
            self.sort_direction = SortDirection.DESC

    def results(self) -> list[Snippet]:
        snippets = self.index.search(self.query) if self.query.strip() else self.index.list_snippets()
        snippets = filter_by_tags(snippets, self.selected_tags)
        snippets = filter_by_collection(snippets, self.index.selected_collection)
        return sort_snippets(snippets, self.sort_key, self.sort_direction)
