from fastapi import APIRouter, Depends, HTTPException, Query

from recollect.server.runtime import Runtime, get_runtime
from recollect.server.schemas import (
    CreateCollectionRequest,
    CreateSnippetRequest,
    SelectCollectionRequest,
    UpdateCollectionRequest,
    UpdateSnippetRequest,
)
from recollect.snippets.filters import filter_by_collection, filter_by_tags, sort_snippets
from recollect.snippets.index import SnippetValidationError
from recollect.snippets.models import SnippetDraft, SortDirection, SortKey

router = APIRouter(tags=["snippets"])


def _dump(model) -> dict:
    return model.model_dump(by_alias=True, mode="json")


# --- Snippets ---


@router.get("/snippets")
async def list_snippets(
    q: str = "",
    tags: list[str] = Query(default=[]),
    collection: str | None = None,
    sort: SortKey = SortKey.UPDATED,
    direction: SortDirection = SortDirection.DESC,
    runtime: Runtime = Depends(get_runtime),
):
    index = runtime.snippet_index
    snippets = index.search(q)
    snippets = filter_by_tags(snippets, tags)
    snippets = filter_by_collection(snippets, collection)
    snippets = sort_snippets(snippets, sort, direction)
    return {"snippets": [_dump(s) for s in snippets], "tags": index.all_tags()}


@router.post("/snippets", status_code=201)
async def create_snippet(request: CreateSnippetRequest, runtime: Runtime = Depends(get_runtime)):
    draft = SnippetDraft.model_validate(request.model_dump())
    try:
        snippet = await runtime.snippets.capture(draft)
    except SnippetValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return _dump(snippet)


@router.get("/snippets/{snippet_id}")
async def get_snippet(snippet_id: str, runtime: Runtime = Depends(get_runtime)):
    try:
        snippet = runtime.snippet_index.get(snippet_id)
    except KeyError:
        raise HTTPException(status_code=404, detail="Snippet not found")
    source = await runtime.snippet_index.resolve_source(snippet_id)
    return {**_dump(snippet), "resolvedSource": source.model_dump(by_alias=True) if source else None}


@router.patch("/snippets/{snippet_id}")
async def update_snippet(snippet_id: str, request: UpdateSnippetRequest, runtime: Runtime = Depends(get_runtime)):
    try:
        snippet = runtime.snippet_index.update(snippet_id, **request.model_dump(exclude_unset=True))
    except KeyError:
        raise HTTPException(status_code=404, detail="Snippet not found")
    except SnippetValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return _dump(snippet)


@router.delete("/snippets/{snippet_id}")
async def delete_snippet(snippet_id: str, runtime: Runtime = Depends(get_runtime)):
    try:
        runtime.snippet_index.delete(snippet_id)
    except KeyError:
        raise HTTPException(status_code=404, detail="Snippet not found")
    return {"status": "deleted"}


# --- Collections ---


@router.get("/collections")
async def list_collections(runtime: Runtime = Depends(get_runtime)):
    index = runtime.snippet_index
    return {
        "collections": [
            {**_dump(c), "snippetCount": len(index.members(c.id))} for c in index.list_collections()
        ],
        "selected": index.selected_collection,
    }


@router.post("/collections", status_code=201)
async def create_collection(request: CreateCollectionRequest, runtime: Runtime = Depends(get_runtime)):
    try:
        collection = runtime.snippet_index.add_collection(
            request.name, description=request.description, tags=request.tags, color=request.color
        )
    except SnippetValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return _dump(collection)


@router.put("/collections/selected")
async def select_collection(request: SelectCollectionRequest, runtime: Runtime = Depends(get_runtime)):
    try:
        runtime.snippet_index.select_collection(request.collection_id)
    except KeyError:
        raise HTTPException(status_code=404, detail="Collection not found")
    return {"selected": runtime.snippet_index.selected_collection}


@router.get("/collections/{collection_id}/snippets")
async def collection_members(collection_id: str, runtime: Runtime = Depends(get_runtime)):
    try:
        members = runtime.snippet_index.members(collection_id)
    except KeyError:
        raise HTTPException(status_code=404, detail="Collection not found")
    return {"snippets": [_dump(s) for s in members]}


@router.put("/collections/{collection_id}/snippets/{snippet_id}")
async def assign_snippet(collection_id: str, snippet_id: str, runtime: Runtime = Depends(get_runtime)):
    try:
        snippet = runtime.snippet_index.assign(snippet_id, collection_id)
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e).strip("'"))
    return _dump(snippet)


@router.delete("/collections/{collection_id}/snippets/{snippet_id}")
async def unassign_snippet(collection_id: str, snippet_id: str, runtime: Runtime = Depends(get_runtime)):
    try:
        snippet = runtime.snippet_index.unassign(snippet_id, collection_id)
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e).strip("'"))
    return _dump(snippet)


@router.patch("/collections/{collection_id}")
async def update_collection(
    collection_id: str, request: UpdateCollectionRequest, runtime: Runtime = Depends(get_runtime)
):
    try:
        collection = runtime.snippet_index.update_collection(collection_id, **request.model_dump(exclude_unset=True))
    except KeyError:
        raise HTTPException(status_code=404, detail="Collection not found")
    except SnippetValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return _dump(collection)


@router.delete("/collections/{collection_id}")
async def delete_collection(collection_id: str, runtime: Runtime = Depends(get_runtime)):
    try:
        affected = runtime.snippet_index.delete_collection(collection_id)
    except KeyError:
        raise HTTPException(status_code=404, detail="Collection not found")
    return {"status": "deleted", "affected_snippets": affected}
