"""Shared test fixtures."""

import pytest
from fastapi import FastAPI

from tomatofeed.api.errors import register_exception_handlers
from tomatofeed.api.routes import feeds, health
from tomatofeed.cache import get_response_cache
from tomatofeed.services.response_cache import InMemoryResponseCache


class FakeClock:
    """Manually advanced clock for cache expiry tests."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def response_cache(clock: FakeClock) -> InMemoryResponseCache:
    return InMemoryResponseCache(max_entries=16, clock=clock)


@pytest.fixture
def test_app(response_cache: InMemoryResponseCache) -> FastAPI:
    """Minimal FastAPI app without the lifespan, backed by an in-memory cache."""
    app = FastAPI(redirect_slashes=False)
    register_exception_handlers(app)
    app.include_router(health.router)
    app.include_router(feeds.router)
    app.dependency_overrides[get_response_cache] = lambda: response_cache
    return app
