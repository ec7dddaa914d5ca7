from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware

from recollect import __version__
from recollect.logging import configure_logging
from recollect.server.routers.memory import router as memory_router
from recollect.server.routers.search import router as search_router
from recollect.server.routers.snippets import router as snippets_router
from recollect.server.runtime import Runtime


def create_app(runtime: Runtime | None = None) -> FastAPI:
    """Build the API app. A runtime passed in is used as-is and never closed here."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = runtime is None
        rt = runtime or Runtime()
        configure_logging(rt.config.log_level, rt.config.log_json)
        await rt.connect()
        app.state.runtime = rt
        yield
        if owned:
            await rt.close()

    app = FastAPI(
        title="recollect",
        description="Hybrid document and web search with learned user memory",
        version=__version__,
        lifespan=lifespan,
    )
    if runtime is not None:
        app.state.runtime = runtime

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(search_router)
    app.include_router(memory_router)
    app.include_router(snippets_router)

    @app.get("/health")
    async def health(request: Request):
        rt: Runtime | None = getattr(request.app.state, "runtime", None)
        if rt is None:
            raise HTTPException(status_code=503, detail="Runtime not started")
        return {"status": "ok", "sources": rt.get_available_sources(), "source_errors": rt.source_errors}

    return app
