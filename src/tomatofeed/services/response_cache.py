"""Request-keyed, TTL-bounded cache for rendered responses."""

import base64
import json
import logging
import time
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Callable, Protocol

from redis import asyncio as aioredis
from redis.exceptions import RedisError

from tomatofeed.config import Settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CachedResponse:
    """A response as stored in the cache: status, body bytes and headers."""

    status_code: int
    body: bytes
    media_type: str
    headers: dict[str, str] = field(default_factory=dict)

    def to_json(self) -> str:
        return json.dumps(
            {
                "status_code": self.status_code,
                "body": base64.b64encode(self.body).decode("ascii"),
                "media_type": self.media_type,
                "headers": self.headers,
            }
        )

    @classmethod
    def from_json(cls, raw: str | bytes) -> "CachedResponse":
        data = json.loads(raw)
        return cls(
            status_code=data["status_code"],
            body=base64.b64decode(data["body"]),
            media_type=data["media_type"],
            headers=data.get("headers", {}),
        )


class ResponseCache(Protocol):
    """Cache capability used by the feed routes."""

    async def lookup(self, key: str) -> CachedResponse | None:
        """Return the stored response for ``key`` if present and fresh."""
        ...

    async def store(self, key: str, response: CachedResponse, ttl: int) -> None:
        """Store ``response`` under ``key`` for ``ttl`` seconds."""
        ...

    async def close(self) -> None:
        ...


class InMemoryResponseCache:
    """
    Process-local cache with per-entry expiry and LRU eviction.

    ``clock`` returns seconds and defaults to ``time.monotonic``; tests pass
    their own to move time forward.
    """

    def __init__(
        self,
        max_entries: int = 256,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._entries: OrderedDict[str, tuple[CachedResponse, float]] = OrderedDict()
        self._max_entries = max_entries
        self._clock = clock

    async def lookup(self, key: str) -> CachedResponse | None:
        entry = self._entries.get(key)
        if entry is None:
            return None

        response, expires_at = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            logger.debug(f"Cache entry expired for {key}")
            return None

        self._entries.move_to_end(key)
        return response

    async def store(self, key: str, response: CachedResponse, ttl: int) -> None:
        if key in self._entries:
            self._entries.move_to_end(key)
        self._entries[key] = (response, self._clock() + ttl)

        # Evict least recently used entries beyond the bound
        while len(self._entries) > self._max_entries:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug(f"Evicted cache entry for {evicted}")

    async def close(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


class RedisResponseCache:
    """
    Cache backed by Redis, using SETEX for expiry.

    Redis failures are logged and treated as a miss or a skipped store so a
    cache outage never fails a feed request.
    """

    KEY_PREFIX = "tomatofeed:response:"

    def __init__(self, redis_client: aioredis.Redis) -> None:
        self.redis = redis_client

    @classmethod
    def from_url(cls, url: str) -> "RedisResponseCache":
        return cls(aioredis.from_url(url))

    def _build_key(self, key: str) -> str:
        return f"{self.KEY_PREFIX}{key}"

    async def lookup(self, key: str) -> CachedResponse | None:
        try:
            cached = await self.redis.get(self._build_key(key))
        except RedisError as e:
            logger.warning(f"Redis cache get failed: {e}")
            return None

        if cached is None:
            return None

        try:
            return CachedResponse.from_json(cached)
        except (ValueError, KeyError, TypeError) as e:
            logger.warning(f"Discarding unreadable cache entry for {key}: {e}")
            return None

    async def store(self, key: str, response: CachedResponse, ttl: int) -> None:
        try:
            await self.redis.setex(self._build_key(key), ttl, response.to_json())
        except RedisError as e:
            logger.warning(f"Redis cache set failed: {e}")

    async def close(self) -> None:
        await self.redis.aclose()


def build_response_cache(settings: Settings) -> ResponseCache:
    """
    Create the cache backend selected by settings.

    Uses Redis when ``redis_url`` is set, otherwise an in-memory cache.
    """
    if settings.redis_url:
        logger.info("Using Redis response cache")
        return RedisResponseCache.from_url(settings.redis_url)

    logger.info(f"Using in-memory response cache (max {settings.cache_max_entries} entries)")
    return InMemoryResponseCache(max_entries=settings.cache_max_entries)
