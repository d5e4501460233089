import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from flowscroll.analytics.client import get_analytics_client
from flowscroll.config import get_settings
from flowscroll.content.words import get_relation_index
from flowscroll.storage.profile_store import get_profile_store
from flowscroll.tasks.factory import create_task_batch
from flowscroll.tasks.profile import ProfileSummary, summarize
from flowscroll.websocket.handler import router as websocket_router

# Configure logging
settings = get_settings()
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager for startup/shutdown events."""
    logger.info("Starting FlowScroll backend...")
    logger.info(f"Debug mode: {settings.debug}")
    logger.info(f"Profiles dir: {settings.profiles_dir}")
    if not settings.analytics_endpoint:
        logger.info("Analytics endpoint not configured, results stay local")

    # Build the word relation index before the first connect task is requested
    get_relation_index()

    yield

    logger.info("Shutting down FlowScroll backend...")
    get_analytics_client().close(wait=False)
    get_analytics_client.cache_clear()


app = FastAPI(
    title="FlowScroll API",
    description="Adaptive task generation and difficulty engine for the FlowScroll feed",
    version="0.1.0",
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(websocket_router)


class DuelRequest(BaseModel):
    user_id: str | None = None
    count: int | None = Field(None, ge=1, le=100)


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint for health check."""
    return {"status": "ok", "service": "flowscroll-backend"}


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {
        "status": "healthy",
        "version": "0.1.0",
    }


@app.get("/profiles/{user_id}/summary", response_model=ProfileSummary)
async def profile_summary(user_id: str, limit: int = 20) -> ProfileSummary:
    """Stats screen data for a stored profile."""
    profile = get_profile_store().load(user_id)
    return summarize(profile, history_limit=limit)


@app.post("/duel/tasks")
async def duel_tasks(request: DuelRequest) -> dict:
    """Fixed task list for a duel room, generated from the host's levels."""
    profile = get_profile_store().load(request.user_id)
    tasks = create_task_batch(profile, request.count or settings.duel_task_count)
    return {"userId": profile.user_id, "tasks": [t.to_dict() for t in tasks]}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "flowscroll.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        workers=settings.workers,
    )
