"""Response cache wiring for the FastAPI application."""

from fastapi import Request

from tomatofeed.services.response_cache import ResponseCache


def get_response_cache(request: Request) -> ResponseCache:
    """
    Dependency for FastAPI to provide the application's response cache.

    The cache is created in the application lifespan and kept on
    ``app.state``; tests replace it through ``app.dependency_overrides``.

    Usage:
        @router.get("/endpoint")
        async def endpoint(cache: ResponseCache = Depends(get_response_cache)):
            # Use cache here
    """
    return request.app.state.response_cache
