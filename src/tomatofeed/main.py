"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from tomatofeed.api.errors import register_exception_handlers
from tomatofeed.api.routes import feeds, health
from tomatofeed.config import settings
from tomatofeed.services.response_cache import build_response_cache

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: configure logging and build the response cache
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app.state.response_cache = build_response_cache(settings)
    logger.info(f"Response cache ready (ttl {settings.cache_ttl}s)")

    yield

    # Shutdown: release cache connections
    await app.state.response_cache.close()
    logger.info("Response cache closed")


# Create FastAPI app
app = FastAPI(
    title="tomatofeed",
    description="RSS feeds for the RottenTomatoes popular movies and TV shows guides",
    version="0.1.0",
    lifespan=lifespan,
    redirect_slashes=False,
)

register_exception_handlers(app)

# Include routers; health must come before the catch-all feed route
app.include_router(health.router)
app.include_router(feeds.router)


def run() -> None:
    """Run the application with uvicorn."""
    import uvicorn

    uvicorn.run("tomatofeed.main:app", host=settings.api_host, port=settings.api_port)
