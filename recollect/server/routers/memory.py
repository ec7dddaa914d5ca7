from fastapi import APIRouter, Depends, HTTPException

from recollect.memory.models import PreferenceCategory
from recollect.server.runtime import Runtime, get_runtime
from recollect.server.schemas import InteractionRequest, PreferenceValue, SearchPatternRequest, UpdateContextRequest

router = APIRouter(tags=["memory"])


def _category(category: str) -> PreferenceCategory:
    try:
        return PreferenceCategory(category)
    except ValueError:
        valid = ", ".join(c.value for c in PreferenceCategory)
        raise HTTPException(status_code=422, detail=f"Unknown category {category!r}. Must be one of: {valid}")


@router.get("/preferences")
async def list_preferences(runtime: Runtime = Depends(get_runtime)):
    prefs = await runtime.memory.get_user_preferences()
    return {"preferences": [p.model_dump(by_alias=True, mode="json") for p in prefs]}


@router.get("/preferences/{category}/{key}")
async def get_preference(category: str, key: str, runtime: Runtime = Depends(get_runtime)):
    pref = await runtime.memory.preferences.get_preference(_category(category), key)
    if pref is None:
        raise HTTPException(status_code=404, detail="Preference not found")
    return pref.model_dump(by_alias=True, mode="json")


@router.put("/preferences/{category}/{key}")
async def set_preference(category: str, key: str, request: PreferenceValue, runtime: Runtime = Depends(get_runtime)):
    pref = await runtime.memory.set_user_preference(_category(category), key, request.value, request.description)
    return pref.model_dump(by_alias=True, mode="json")


@router.get("/patterns")
async def list_patterns(runtime: Runtime = Depends(get_runtime)):
    patterns = await runtime.memory.get_search_patterns()
    return {"patterns": [p.model_dump(by_alias=True, mode="json") for p in patterns]}


@router.post("/patterns")
async def record_pattern(request: SearchPatternRequest, runtime: Runtime = Depends(get_runtime)):
    pattern = await runtime.memory.record_search_pattern(request.query, request.result_types, request.relevance_score)
    return pattern.model_dump(by_alias=True, mode="json")


@router.post("/interactions")
async def record_interaction(request: InteractionRequest, runtime: Runtime = Depends(get_runtime)):
    interaction = await runtime.memory.record_document_interaction(
        request.document_id, request.document_title, request.action, request.context
    )
    return interaction.model_dump(by_alias=True, mode="json")


@router.get("/documents/recent")
async def recent_documents(limit: int = 10, runtime: Runtime = Depends(get_runtime)):
    return {"documents": await runtime.memory.get_recent_documents(limit)}


@router.get("/context")
async def get_context(runtime: Runtime = Depends(get_runtime)):
    context = await runtime.memory.get_project_context()
    return context.model_dump(by_alias=True, mode="json")


@router.patch("/context")
async def update_context(request: UpdateContextRequest, runtime: Runtime = Depends(get_runtime)):
    try:
        context = await runtime.memory.update_project_context(**request.model_dump(exclude_unset=True))
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return context.model_dump(by_alias=True, mode="json")


@router.post("/cache/clear")
async def clear_cache(runtime: Runtime = Depends(get_runtime)):
    runtime.memory.clear_cache()
    return {"status": "cleared"}


@router.get("/cache/stats")
async def cache_stats(runtime: Runtime = Depends(get_runtime)):
    return runtime.memory.cache_stats()
