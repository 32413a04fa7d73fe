"""
Cache for the per-client read views (assigned workouts, logged sessions,
progress history).

- Redis with a TTL, shared between workers
- Writes invalidate the views that depend on them
- Graceful fallback: without REDIS_URL, or when Redis is down, every read
  simply goes to the database
"""
import json
import logging
from typing import Any, Awaitable, Callable, Optional

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from app.core.config import settings

logger = logging.getLogger(__name__)

WORKOUTS_VIEW = "workouts"
LOGS_VIEW = "logs"
PROGRESS_VIEW = "progress"
CLIENT_VIEWS = (WORKOUTS_VIEW, LOGS_VIEW, PROGRESS_VIEW)


class QueryCache:
    def __init__(self, url: Optional[str] = None, ttl: Optional[int] = None):
        self.url = url if url is not None else settings.REDIS_URL
        self.ttl = ttl if ttl is not None else settings.CACHE_TTL
        self._redis: Optional[aioredis.Redis] = None

    @property
    def enabled(self) -> bool:
        return bool(self.url) or self._redis is not None

    def _get_redis(self) -> aioredis.Redis:
        if self._redis is None:
            self._redis = aioredis.from_url(
                self.url,
                decode_responses=True,
                socket_connect_timeout=2,
                socket_timeout=2,
            )
        return self._redis

    @staticmethod
    def key(view: str, username: str) -> str:
        return f"ptcoach:{view}:{username}"

    async def get(self, view: str, username: str) -> Optional[Any]:
        if not self.enabled:
            return None
        try:
            raw = await self._get_redis().get(self.key(view, username))
        except RedisError as e:
            logger.warning("Cache read failed for %s/%s: %s", view, username, e)
            return None
        return json.loads(raw) if raw is not None else None

    async def set(self, view: str, username: str, value: Any) -> None:
        if not self.enabled:
            return
        try:
            await self._get_redis().set(self.key(view, username), json.dumps(value), ex=self.ttl)
        except RedisError as e:
            logger.warning("Cache write failed for %s/%s: %s", view, username, e)

    async def invalidate(self, username: str, *views: str) -> None:
        if not self.enabled:
            return
        keys = [self.key(view, username) for view in (views or CLIENT_VIEWS)]
        try:
            await self._get_redis().delete(*keys)
        except RedisError as e:
            logger.warning("Cache invalidation failed for %s: %s", username, e)

    async def get_or_load(self, view: str, username: str, loader: Callable[[], Awaitable[Any]]) -> Any:
        """Cached JSON-ready value of a view, loading it on a miss."""
        cached = await self.get(view, username)
        if cached is not None:
            return cached
        value = await loader()
        await self.set(view, username, value)
        return value

    async def close(self) -> None:
        if self._redis is not None:
            await self._redis.aclose()
            self._redis = None


query_cache = QueryCache()
