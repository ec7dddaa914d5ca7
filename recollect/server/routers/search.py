from fastapi import APIRouter, Depends, HTTPException

from recollect.search.classify import is_search_query
from recollect.server.runtime import Runtime, get_runtime
from recollect.server.schemas import QueryRequest, SaveResultRequest, SearchRequest
from recollect.snippets.index import SnippetValidationError

router = APIRouter(tags=["search"])


@router.post("/search")
async def search(request: SearchRequest, runtime: Runtime = Depends(get_runtime)):
    result = await runtime.search.search(
        request.query,
        include_web=request.include_web,
        max_document_results=request.max_document_results,
        max_web_results=request.max_web_results,
    )
    return result.model_dump(by_alias=True, mode="json")


@router.post("/query")
async def query(request: QueryRequest, runtime: Runtime = Depends(get_runtime)):
    message = request.message.strip()
    if not is_search_query(message):
        return {"kind": "conversation", "message": message}
    result = await runtime.search.search(message)
    return {"kind": "search", "result": result.model_dump(by_alias=True, mode="json")}


@router.get("/suggestions")
async def suggestions(q: str = "", runtime: Runtime = Depends(get_runtime)):
    suggested = await runtime.memory.suggest_debounced(q)
    return {"query": q, "suggestions": suggested or [], "superseded": suggested is None}


@router.post("/search/save")
async def save_result(request: SaveResultRequest, runtime: Runtime = Depends(get_runtime)):
    try:
        snippet = await runtime.snippets.save_search_result(request.result, request.tags)
    except SnippetValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return snippet.model_dump(by_alias=True, mode="json")
