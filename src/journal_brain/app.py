from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from typing import Any
from sqlalchemy import text
from journal_brain.common.logging.logger import logger
from journal_brain.config.app_config import get_service_settings
from journal_brain.core.lifespan import lifespan
from journal_brain.common.db.session import get_async_session_maker
from journal_brain.api.routes.agent_route import router as agent_router

settings = get_service_settings()

# docs are only served locally
include_docs = settings.INCLUDE_DOCS
logger.info(f"Include FastAPI docs: {include_docs}")

docs_config: dict[str, Any] = {
    "docs_url": "/docs" if include_docs else None,
    "redoc_url": "/redoc" if include_docs else None,
    "openapi_url": "/openapi.json" if include_docs else None,
}

# main app, asgi entrypoint
app = FastAPI(
    title="Journal Brain Service",
    description="Retrieval-grounded ReAct agent over a personal journal corpus",
    version="0.1.0",
    lifespan=lifespan,
    **docs_config,
)

# wildcard origins can't be combined with credentials
allow_all_origins = settings.CORS_ALLOW_ORIGINS == ["*"]
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOW_ORIGINS,
    allow_credentials=not allow_all_origins,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

@app.get("/")
async def root():
    return {"message": "Journal Brain service is running"}

@app.get("/health")
async def health():
    """
    DB connectivity plus the agent wiring (registered tools, cached retrieve results).
    """
    main_session_maker = get_async_session_maker(app.state.main_db_engine)

    try:
        async with main_session_maker() as session:
            await session.execute(text("SELECT 1"))
    except Exception as e:
        logger.error(f"Health check failed to reach main database: {e}")
        return {"status": "error", "database": "unable to connect to main database"}

    return {
        "status": "ok",
        "database": "connected to main database",
        "agent": {
            "model": app.state.agent_kernel.model,
            "maxIterations": app.state.agent_kernel.max_iterations,
            "tools": app.state.tool_registry.tool_names,
            "cachedResults": len(app.state.result_cache),
        },
    }

app.include_router(agent_router)
