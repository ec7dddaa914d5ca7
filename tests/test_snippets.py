from datetime import UTC, datetime, timedelta

import pytest
from conftest import FakeDocumentSource, make_hit, make_web

from recollect.memory.models import InteractionAction
from recollect.memory.service import MemoryService
from recollect.search.types import DocumentResult
from recollect.services.snippets import SnippetService
from recollect.snippets.filters import sort_snippets
from recollect.snippets.index import SnippetIndex, SnippetValidationError
from recollect.snippets.models import SnippetDraft, SortDirection, SortKey, SourceDocumentRef
from recollect.snippets.view import SnippetView

SOURCE = SourceDocumentRef(id="d1", title="Business Plan", category="business-plan")


def _draft(text: str = "Revenue grows 20% a year", **kwargs) -> SnippetDraft:
    return SnippetDraft(text=text, source_document=kwargs.pop("source_document", SOURCE), **kwargs)


@pytest.fixture
def index() -> SnippetIndex:
    return SnippetIndex()


class TestAddSnippet:
    def test_defaults(self, index: SnippetIndex):
        snippet = index.add(_draft("  Revenue grows  "))

        assert snippet.text == "Revenue grows"
        assert snippet.title == "Snippet from Business Plan"
        assert snippet.source_location.document_id == "d1"
        assert snippet.source_location.context == "Revenue grows"
        assert snippet.created_at == snippet.updated_at
        assert index.get(snippet.id) == snippet

    def test_ids_unique(self, index: SnippetIndex):
        ids = {index.add(_draft()).id for _ in range(20)}
        assert len(ids) == 20

    def test_empty_text_rejected(self, index: SnippetIndex):
        with pytest.raises(SnippetValidationError):
            index.add(_draft("   "))

    def test_source_required(self, index: SnippetIndex):
        with pytest.raises(SnippetValidationError):
            index.add(SnippetDraft(text="orphan"))

    def test_unknown_collection_rejected(self, index: SnippetIndex):
        with pytest.raises(SnippetValidationError):
            index.add(_draft(collections=["missing"]))

    def test_tags_deduplicated(self, index: SnippetIndex):
        snippet = index.add(_draft(tags=["finance", "finance", "q3"]))
        assert snippet.tags == ["finance", "q3"]


class TestUpdateDelete:
    def test_update_bumps_updated_at(self, index: SnippetIndex):
        snippet = index.add(_draft())
        updated = index.update(snippet.id, title="Growth", tags=["finance"])

        assert updated.title == "Growth"
        assert updated.tags == ["finance"]
        assert updated.created_at == snippet.created_at
        assert updated.updated_at >= snippet.updated_at

    def test_update_rejects_blank_text(self, index: SnippetIndex):
        snippet = index.add(_draft())
        with pytest.raises(SnippetValidationError):
            index.update(snippet.id, text=" ")

    def test_update_rejects_unknown_field(self, index: SnippetIndex):
        snippet = index.add(_draft())
        with pytest.raises(SnippetValidationError):
            index.update(snippet.id, id="other")

    @pytest.mark.parametrize("field", ["title", "tags", "collections", "source_location", "text"])
    def test_update_rejects_null(self, index: SnippetIndex, field: str):
        snippet = index.add(_draft())
        with pytest.raises(SnippetValidationError, match=field):
            index.update(snippet.id, **{field: None})
        assert index.get(snippet.id) == snippet

    def test_update_allows_null_notes(self, index: SnippetIndex):
        snippet = index.add(_draft(notes="draft"))
        assert index.update(snippet.id, notes=None).notes is None

    def test_update_invalid_type_is_validation_error(self, index: SnippetIndex):
        snippet = index.add(_draft())
        with pytest.raises(SnippetValidationError, match="Invalid snippet update"):
            index.update(snippet.id, source_location={"context": "missing document id"})

    def test_missing_snippet(self, index: SnippetIndex):
        with pytest.raises(KeyError):
            index.get("nope")
        with pytest.raises(KeyError):
            index.delete("nope")

    def test_delete_removes_from_collections(self, index: SnippetIndex):
        collection = index.add_collection("Research")
        snippet = index.add(_draft(collections=[collection.id]))

        index.delete(snippet.id)

        assert index.members(collection.id) == []
        assert index.list_snippets() == []


class TestCollections:
    def test_name_required(self, index: SnippetIndex):
        with pytest.raises(SnippetValidationError):
            index.add_collection("  ")

    def test_assign_and_unassign(self, index: SnippetIndex):
        collection = index.add_collection("Research", color="#ff0000")
        snippet = index.add(_draft())

        index.assign(snippet.id, collection.id)
        index.assign(snippet.id, collection.id)
        assert index.get(snippet.id).collections == [collection.id]
        assert index.members(collection.id) == [index.get(snippet.id)]

        index.unassign(snippet.id, collection.id)
        assert index.members(collection.id) == []

    def test_delete_collection_strips_membership(self, index: SnippetIndex):
        keep = index.add_collection("Keep")
        drop = index.add_collection("Drop")
        a = index.add(_draft(collections=[keep.id, drop.id]))
        b = index.add(_draft(collections=[drop.id]))
        index.select_collection(drop.id)

        assert index.delete_collection(drop.id) == 2

        assert index.get(a.id).collections == [keep.id]
        assert index.get(b.id).collections == []
        assert index.selected_collection is None
        with pytest.raises(KeyError):
            index.get_collection(drop.id)

    def test_update_collection(self, index: SnippetIndex):
        collection = index.add_collection("Research")
        updated = index.update_collection(collection.id, name="Deep research", tags=["x", "x"])
        assert updated.name == "Deep research"
        assert updated.tags == ["x"]

    def test_update_collection_rejects_null(self, index: SnippetIndex):
        collection = index.add_collection("Research", color="#00ff00")
        with pytest.raises(SnippetValidationError):
            index.update_collection(collection.id, name=None)
        with pytest.raises(SnippetValidationError):
            index.update_collection(collection.id, tags=None)
        assert index.update_collection(collection.id, color=None).color is None

    def test_select_unknown_collection(self, index: SnippetIndex):
        with pytest.raises(KeyError):
            index.select_collection("missing")


class TestSearchAndView:
    @pytest.fixture
    def populated(self, index: SnippetIndex) -> SnippetIndex:
        index.add(_draft("Revenue grows 20% a year", title="Growth", tags=["finance"]))
        index.add(_draft("Launch campaign in spring", title="Campaign", tags=["marketing"]))
        index.add(_draft("Hiring plan for engineering", title="Hiring", tags=["ops", "finance"]))
        return index

    def test_search_all_tokens_must_match(self, populated: SnippetIndex):
        assert [s.title for s in populated.search("revenue year")] == ["Growth"]
        assert populated.search("revenue spring") == []

    def test_search_matches_tags(self, populated: SnippetIndex):
        assert {s.title for s in populated.search("FINANCE")} == {"Growth", "Hiring"}

    def test_blank_search_returns_all(self, populated: SnippetIndex):
        assert len(populated.search("  ")) == 3

    def test_all_tags(self, populated: SnippetIndex):
        assert populated.all_tags() == ["finance", "marketing", "ops"]

    def test_tag_filter_is_any_of(self, populated: SnippetIndex):
        view = SnippetView(populated)
        view.toggle_tag("marketing")
        view.toggle_tag("ops")
        assert {s.title for s in view.results()} == {"Campaign", "Hiring"}

        view.toggle_tag("ops")
        assert [s.title for s in view.results()] == ["Campaign"]

    def test_selected_collection_applies(self, populated: SnippetIndex):
        collection = populated.add_collection("Money")
        growth = populated.search("revenue")[0]
        populated.assign(growth.id, collection.id)
        populated.select_collection(collection.id)

        assert [s.title for s in SnippetView(populated).results()] == ["Growth"]

    def test_sort_by_title_and_toggle(self, populated: SnippetIndex):
        view = SnippetView(populated)
        view.toggle_sort(SortKey.TITLE)
        assert view.sort_direction == SortDirection.DESC
        assert [s.title for s in view.results()] == ["Hiring", "Growth", "Campaign"]

        view.toggle_sort(SortKey.TITLE)
        assert view.sort_direction == SortDirection.ASC
        assert [s.title for s in view.results()] == ["Campaign", "Growth", "Hiring"]

    def test_sort_by_created_both_directions(self, index: SnippetIndex):
        base = datetime(2024, 1, 1, tzinfo=UTC)
        snippets = [
            index.add(_draft(title=title)).model_copy(update={"created_at": base + timedelta(days=day)})
            for title, day in (("middle", 1), ("oldest", 0), ("newest", 2))
        ]

        assert [s.title for s in sort_snippets(snippets, SortKey.CREATED, SortDirection.DESC)] == [
            "newest",
            "middle",
            "oldest",
        ]
        assert [s.title for s in sort_snippets(snippets, "created", "asc")] == ["oldest", "middle", "newest"]

    def test_sort_by_source_title_both_directions(self, index: SnippetIndex):
        for source_title in ("Marketing Deck", "Annual Report", "Zoning Memo"):
            index.add(_draft(source_document=SourceDocumentRef(id=source_title, title=source_title)))

        view = SnippetView(index)
        view.toggle_sort(SortKey.SOURCE)
        assert [s.source_document.title for s in view.results()] == ["Zoning Memo", "Marketing Deck", "Annual Report"]

        view.toggle_sort(SortKey.SOURCE)
        assert [s.source_document.title for s in view.results()] == ["Annual Report", "Marketing Deck", "Zoning Memo"]

    def test_default_sort_newest_update_first(self, populated: SnippetIndex):
        first = populated.list_snippets()[0]
        populated.update(first.id, notes="touched")
        assert SnippetView(populated).results()[0].id == first.id


class TestResolveSource:
    @pytest.mark.asyncio
    async def test_live_lookup(self):
        index = SnippetIndex(lookup=FakeDocumentSource([make_hit("d1", 0.5, title="Business Plan v2")]))
        snippet = index.add(_draft())

        record = await index.resolve_source(snippet.id)
        assert record.title == "Business Plan v2"

    @pytest.mark.asyncio
    async def test_lookup_failure_returns_none(self):
        index = SnippetIndex(lookup=FakeDocumentSource(error=RuntimeError("down")))
        snippet = index.add(_draft())
        assert await index.resolve_source(snippet.id) is None

    @pytest.mark.asyncio
    async def test_no_lookup(self, index: SnippetIndex):
        snippet = index.add(_draft())
        assert await index.resolve_source(snippet.id) is None


class TestSnippetService:
    @pytest.mark.asyncio
    async def test_capture_records_interaction(self, index: SnippetIndex, memory: MemoryService):
        service = SnippetService(index, memory)
        snippet = await service.capture(_draft())

        log = await memory.get_document_interactions()
        assert len(log) == 1
        assert log[0].action == InteractionAction.SNIPPET
        assert log[0].document_id == "d1"
        assert log[0].context == snippet.id

    @pytest.mark.asyncio
    async def test_invalid_capture_records_nothing(self, index: SnippetIndex, memory: MemoryService):
        with pytest.raises(SnippetValidationError):
            await SnippetService(index, memory).capture(_draft(" "))
        assert await memory.get_document_interactions() == []

    @pytest.mark.asyncio
    async def test_save_document_result(self, index: SnippetIndex, memory: MemoryService):
        result = DocumentResult(
            id="d7", title="Forecast", excerpt="Q3 looks strong", document_type="financial", relevance_score=0.8
        )
        snippet = await SnippetService(index, memory).save_search_result(result, ["q3"])

        assert snippet.text == "Q3 looks strong"
        assert snippet.title == "Forecast"
        assert snippet.source_document.category == "financial"
        assert snippet.tags == ["q3", "search-result"]

    @pytest.mark.asyncio
    async def test_save_web_result(self, index: SnippetIndex, memory: MemoryService):
        result = make_web("https://news.example/a", 0.5, title="News")
        snippet = await SnippetService(index, memory).save_search_result(result)

        assert snippet.source_document.id == "https://news.example/a"
        assert snippet.source_document.category == "web"
        assert snippet.text == "about https://news.example/a"
        assert snippet.tags == ["search-result"]
