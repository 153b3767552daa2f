"""RSS feed endpoints."""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse, Response

from tomatofeed.api.errors import NOT_FOUND_MESSAGE
from tomatofeed.cache import get_response_cache
from tomatofeed.config import settings
from tomatofeed.scrapers import UpstreamUnavailable, get_feed_source
from tomatofeed.services.feed_builder import build_feed
from tomatofeed.services.feed_renderer import RenderedFeed
from tomatofeed.services.response_cache import CachedResponse, ResponseCache

logger = logging.getLogger(__name__)
router = APIRouter()


def _to_response(cached: CachedResponse) -> Response:
    return Response(
        content=cached.body,
        status_code=cached.status_code,
        media_type=cached.media_type,
        headers=cached.headers,
    )


@router.api_route("/{feed_key}", methods=["GET", "HEAD"], tags=["feeds"])
async def get_feed(
    feed_key: str,
    request: Request,
    cache: ResponseCache = Depends(get_response_cache),
) -> Response:
    """
    Serve the RSS feed for a listing page.

    The cache is checked before anything else and only successful feeds are
    stored, so error responses are always computed fresh.

    Responses:
        200: RSS 2.0 document with ``Cache-Control: max-age=<ttl>``
        404: Unknown feed
        500: No items found, or an item without a link
        502/504: Upstream listing page unavailable
    """
    cache_key = str(request.url)

    cached = await cache.lookup(cache_key)
    if cached is not None:
        logger.info(f"Returning {cache_key} from cache")
        return _to_response(cached)

    source = get_feed_source(feed_key)
    if source is None:
        return PlainTextResponse(NOT_FOUND_MESSAGE, status_code=404)

    try:
        outcome = await build_feed(source, self_link=cache_key)
    except UpstreamUnavailable as e:
        return PlainTextResponse(e.message, status_code=e.status_code)

    if not isinstance(outcome, RenderedFeed):
        return PlainTextResponse(outcome.message, status_code=500)

    fresh = CachedResponse(
        status_code=200,
        body=outcome.body,
        media_type=outcome.media_type,
        headers={"Cache-Control": f"max-age={settings.cache_ttl}"},
    )
    await cache.store(cache_key, fresh, ttl=settings.cache_ttl)

    logger.info(f"Serving fresh response for {cache_key}")
    return _to_response(fresh)
