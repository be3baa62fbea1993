"""
Redis Caching Utility for the portal API
Read-through cache keyed by (entity kind, user), invalidated wholesale per kind
after any write touching that kind.
"""

import redis
import json
import os
from typing import Optional, Any, Callable
import logging

logger = logging.getLogger(__name__)

# Redis connection settings
REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")
CACHE_ENABLED = os.getenv("CACHE_ENABLED", "true").lower() == "true"


class CacheTTL:
    USER_QUERY = 300  # 5 minutes


class CacheKeys:
    USER_QUERY = "{kind}:{user_id}"
    KIND_PATTERN = "{kind}:*"


class RedisCache:
    """Redis cache manager with error handling. Every failure degrades to a miss."""

    def __init__(self, client: Optional[redis.Redis] = None, enabled: bool = CACHE_ENABLED):
        self._redis_client = client
        self._enabled = enabled
        if self._redis_client is None and enabled:
            try:
                self._redis_client = redis.from_url(
                    REDIS_URL,
                    decode_responses=True,
                    socket_connect_timeout=5,
                    socket_timeout=5,
                    retry_on_timeout=True
                )
                self._redis_client.ping()
                logger.info("Redis cache connected successfully")
            except redis.RedisError as e:
                logger.warning(f"Redis connection failed: {e}. Caching disabled.")
                self._redis_client = None

    @property
    def is_available(self) -> bool:
        return self._enabled and self._redis_client is not None

    def get(self, key: str) -> Optional[Any]:
        """Get value from cache"""
        if not self.is_available:
            return None
        try:
            value = self._redis_client.get(key)
            if value:
                return json.loads(value)
            return None
        except (redis.RedisError, ValueError) as e:
            logger.error(f"Cache get error for key {key}: {e}")
            return None

    def set(self, key: str, value: Any, ttl: int = CacheTTL.USER_QUERY) -> bool:
        """Set value in cache with TTL"""
        if not self.is_available:
            return False
        try:
            serialized = json.dumps(value, default=str)
            self._redis_client.setex(key, ttl, serialized)
            return True
        except (redis.RedisError, TypeError) as e:
            logger.error(f"Cache set error for key {key}: {e}")
            return False

    def delete_pattern(self, pattern: str) -> int:
        """Delete all keys matching pattern"""
        if not self.is_available:
            return 0
        try:
            keys = self._redis_client.keys(pattern)
            if keys:
                return self._redis_client.delete(*keys)
            return 0
        except redis.RedisError as e:
            logger.error(f"Cache delete pattern error for {pattern}: {e}")
            return 0


class QueryCache:
    """Per-user query results, one entry per (kind, user)"""

    def __init__(self, backend: RedisCache, ttl: int = CacheTTL.USER_QUERY):
        self.backend = backend
        self.ttl = ttl

    def get_or_load(self, kind: str, user_id: str, loader: Callable[[], Any]) -> Any:
        key = CacheKeys.USER_QUERY.format(kind=kind, user_id=user_id)
        cached_value = self.backend.get(key)
        if cached_value is not None:
            logger.debug(f"Cache hit for {key}")
            return cached_value

        result = loader()
        if result is not None:
            self.backend.set(key, result, self.ttl)
        return result

    def invalidate(self, kind: str) -> int:
        """Drop every user's entry for this kind"""
        removed = self.backend.delete_pattern(CacheKeys.KIND_PATTERN.format(kind=kind))
        if removed:
            logger.debug(f"Invalidated {removed} cached '{kind}' entries")
        return removed


# Module-level instances
cache = RedisCache()
query_cache = QueryCache(cache)
