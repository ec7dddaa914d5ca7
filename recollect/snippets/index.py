from typing import Any, Protocol
from uuid import uuid4

from pydantic import BaseModel, ValidationError

from recollect.constants import SNIPPET_TITLE_TRUNCATE
from recollect.logging import get_logger
from recollect.snippets.filters import matches_query
from recollect.snippets.models import Collection, Snippet, SnippetDraft, SourceLocation
from recollect.sources.base import DocumentRecord
from recollect.utils import truncate, utc_now

_logger = get_logger(__name__)

_SNIPPET_FIELDS = frozenset({"text", "title", "source_document", "source_location", "tags", "collections", "notes"})
_COLLECTION_FIELDS = frozenset({"name", "description", "tags", "color"})
_NULLABLE_FIELDS = frozenset({"notes", "description", "color"})


class SnippetValidationError(ValueError):
    """A snippet or collection was rejected because of bad user input."""


class DocumentLookup(Protocol):
    async def get_document(self, document_id: str) -> DocumentRecord | None: ...


def _new_id() -> str:
    return uuid4().hex


def _reject_nulls(kind: str, changes: dict[str, Any]) -> None:
    nulls = sorted(k for k, v in changes.items() if v is None and k not in _NULLABLE_FIELDS)
    if nulls:
        raise SnippetValidationError(f"{kind} field(s) cannot be null: {', '.join(nulls)}")


def _rebuild[M: BaseModel](model: type[M], current: M, changes: dict[str, Any]) -> M:
    try:
        return model.model_validate({**current.model_dump(), **changes, "updated_at": utc_now()})
    except ValidationError as e:
        errors = "; ".join(f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors())
        raise SnippetValidationError(f"Invalid {model.__name__.lower()} update: {errors}") from e


class SnippetIndex:
    """User-captured snippets and the collections that group them.

    Collection membership is stored only on Snippet.collections, so deleting a
    snippet removes it from every collection with nothing else to clean up.
    Ids are uuid4 and never reused.
    """

    def __init__(self, lookup: DocumentLookup | None = None):
        self._lookup = lookup
        self._snippets: dict[str, Snippet] = {}
        self._collections: dict[str, Collection] = {}
        self.selected_collection: str | None = None

    # --- Snippets ---

    def _check_collections(self, collection_ids: list[str]) -> None:
        unknown = [c for c in collection_ids if c not in self._collections]
        if unknown:
            raise SnippetValidationError(f"Unknown collection(s): {', '.join(unknown)}")

    def add(self, draft: SnippetDraft) -> Snippet:
        text = draft.text.strip()
        if not text:
            raise SnippetValidationError("Snippet text is required")
        if draft.source_document is None:
            raise SnippetValidationError("A source document is required")
        self._check_collections(draft.collections)

        source = draft.source_document
        now = utc_now()
        snippet = Snippet(
            id=_new_id(),
            text=text,
            title=draft.title.strip() or truncate(f"Snippet from {source.title}", SNIPPET_TITLE_TRUNCATE),
            source_document=source,
            source_location=draft.source_location or SourceLocation(document_id=source.id, context=text),
            tags=draft.tags,
            collections=draft.collections,
            notes=(draft.notes or "").strip() or None,
            created_at=now,
            updated_at=now,
        )
        self._snippets[snippet.id] = snippet
        _logger.debug("Added snippet %s from %r", snippet.id, source.title)
        return snippet

    def get(self, snippet_id: str) -> Snippet:
        snippet = self._snippets.get(snippet_id)
        if snippet is None:
            raise KeyError(f"Snippet {snippet_id} not found")
        return snippet

    def list_snippets(self) -> list[Snippet]:
        return list(self._snippets.values())

    def update(self, snippet_id: str, **changes: Any) -> Snippet:
        snippet = self.get(snippet_id)
        unknown = set(changes) - _SNIPPET_FIELDS
        if unknown:
            raise SnippetValidationError(f"Cannot update snippet field(s): {', '.join(sorted(unknown))}")
        if changes.get("source_document", ...) is None:
            raise SnippetValidationError("A source document is required")
        _reject_nulls("Snippet", changes)
        if "text" in changes:
            changes["text"] = changes["text"].strip()
            if not changes["text"]:
                raise SnippetValidationError("Snippet text is required")
        if "collections" in changes:
            self._check_collections(list(changes["collections"]))

        updated = _rebuild(Snippet, snippet, changes)
        self._snippets[snippet_id] = updated
        return updated

    def delete(self, snippet_id: str) -> None:
        self.get(snippet_id)
        del self._snippets[snippet_id]

    def search(self, query: str) -> list[Snippet]:
        if not query.strip():
            return self.list_snippets()
        return [s for s in self._snippets.values() if matches_query(s, query)]

    def all_tags(self) -> list[str]:
        return sorted({t for s in self._snippets.values() for t in s.tags})

    async def resolve_source(self, snippet_id: str) -> DocumentRecord | None:
        """Fetch the live source document; None if it is gone or no lookup is wired."""
        snippet = self.get(snippet_id)
        if self._lookup is None:
            return None
        try:
            return await self._lookup.get_document(snippet.source_document.id)
        except Exception as e:
            _logger.warning("Failed to resolve source %s for snippet %s: %s", snippet.source_document.id, snippet_id, e)
            return None

    # --- Collections ---

    def add_collection(
        self,
        name: str,
        description: str | None = None,
        tags: list[str] | None = None,
        color: str | None = None,
    ) -> Collection:
        name = name.strip()
        if not name:
            raise SnippetValidationError("Collection name is required")
        now = utc_now()
        collection = Collection(
            id=_new_id(),
            name=name,
            description=description,
            tags=tags or [],
            color=color,
            created_at=now,
            updated_at=now,
        )
        self._collections[collection.id] = collection
        return collection

    def get_collection(self, collection_id: str) -> Collection:
        collection = self._collections.get(collection_id)
        if collection is None:
            raise KeyError(f"Collection {collection_id} not found")
        return collection

    def list_collections(self) -> list[Collection]:
        return list(self._collections.values())

    def update_collection(self, collection_id: str, **changes: Any) -> Collection:
        collection = self.get_collection(collection_id)
        unknown = set(changes) - _COLLECTION_FIELDS
        if unknown:
            raise SnippetValidationError(f"Cannot update collection field(s): {', '.join(sorted(unknown))}")
        _reject_nulls("Collection", changes)
        if "name" in changes:
            changes["name"] = changes["name"].strip()
            if not changes["name"]:
                raise SnippetValidationError("Collection name is required")

        updated = _rebuild(Collection, collection, changes)
        self._collections[collection_id] = updated
        return updated

    def delete_collection(self, collection_id: str) -> int:
        """Delete a collection and drop it from every snippet. Returns affected snippet count."""
        self.get_collection(collection_id)
        del self._collections[collection_id]

        affected = 0
        for snippet in list(self._snippets.values()):
            if collection_id in snippet.collections:
                self._snippets[snippet.id] = snippet.model_copy(
                    update={"collections": [c for c in snippet.collections if c != collection_id]}
                )
                affected += 1

        if self.selected_collection == collection_id:
            self.selected_collection = None
        return affected

    def members(self, collection_id: str) -> list[Snippet]:
        self.get_collection(collection_id)
        return [s for s in self._snippets.values() if collection_id in s.collections]

    def assign(self, snippet_id: str, collection_id: str) -> Snippet:
        snippet = self.get(snippet_id)
        self.get_collection(collection_id)
        if collection_id in snippet.collections:
            return snippet
        return self.update(snippet_id, collections=[*snippet.collections, collection_id])

    def unassign(self, snippet_id: str, collection_id: str) -> Snippet:
        snippet = self.get(snippet_id)
        if collection_id not in snippet.collections:
            return snippet
        return self.update(snippet_id, collections=[c for c in snippet.collections if c != collection_id])

    def select_collection(self, collection_id: str | None) -> None:
        if collection_id is not None:
            self.get_collection(collection_id)
        self.selected_collection = collection_id
