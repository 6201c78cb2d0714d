"""
Caching service backed by Redis.

A thin high-level interface with JSON serialization and TTL handling. Every
Redis failure is logged and treated as a cache miss, so the service keeps
working without Redis.
"""

import json
from typing import Any, Optional

import redis.asyncio as redis
from redis.asyncio import Redis

from src.config.logger import configure_logger
from src.config.redis_settings import (get_redis_connection_params,
                                       redis_settings)

logger = configure_logger(__name__)


class CacheService:
    """High-level cache operations on Redis."""

    def __init__(self, enabled: Optional[bool] = None):
        self._redis: Optional[Redis] = None
        self._connection_params = get_redis_connection_params()
        self.enabled = (
            redis_settings.redis_cache_enabled if enabled is None else enabled
        )

    async def get_redis(self) -> Redis:
        """
        Lazily open the Redis connection.

        Returns:
            Redis client
        """
        if self._redis is None:
            client = redis.Redis(**self._connection_params)
            await client.ping()
            self._redis = client
            logger.info("Redis connection established")
        return self._redis

    async def close(self) -> None:
        """Close the Redis connection."""
        if self._redis:
            await self._redis.aclose()
            self._redis = None
            logger.info("Redis connection closed")

    def _serialize(self, data: Any) -> str:
        return json.dumps(data, default=str, ensure_ascii=False)

    def _deserialize(self, data: str) -> Any:
        return json.loads(data)

    def build_key(self, prefix: str, *parts: Any) -> str:
        """
        Build a cache key from a prefix and parts.

        Args:
            prefix: Key prefix
            *parts: Key parts

        Returns:
            Full cache key
        """
        return f"{prefix}:{':'.join(str(part) for part in parts)}"

    async def get(self, key: str) -> Optional[Any]:
        """
        Read a value from the cache.

        Args:
            key: Cache key

        Returns:
            Cached value or None on miss
        """
        if not self.enabled:
            return None
        try:
            redis_client = await self.get_redis()
            data = await redis_client.get(key)
            if data is None:
                return None
            return self._deserialize(data)
        except Exception as e:
            logger.error(f"Failed to read cache key '{key}': {e}")
            return None

    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        """
        Store a value in the cache.

        Args:
            key: Cache key
            value: Value to cache
            ttl: Time to live in seconds

        Returns:
            True on success
        """
        if not self.enabled:
            return False
        try:
            redis_client = await self.get_redis()
            serialized_value = self._serialize(value)
            if ttl:
                await redis_client.setex(key, ttl, serialized_value)
            else:
                await redis_client.set(key, serialized_value)
            return True
        except Exception as e:
            logger.error(f"Failed to write cache key '{key}': {e}")
            return False

    async def delete(self, key: str) -> bool:
        """
        Remove a key from the cache.

        Args:
            key: Cache key

        Returns:
            True if a key was removed
        """
        if not self.enabled:
            return False
        try:
            redis_client = await self.get_redis()
            result = await redis_client.delete(key)
            return result > 0
        except Exception as e:
            logger.error(f"Failed to delete cache key '{key}': {e}")
            return False

    async def invalidate_pattern(self, pattern: str) -> int:
        """
        Remove every key matching a pattern.

        Args:
            pattern: Redis key pattern (e.g. "exams:status:12:*")

        Returns:
            Number of removed keys
        """
        if not self.enabled:
            return 0
        try:
            redis_client = await self.get_redis()
            deleted = 0
            async for key in redis_client.scan_iter(match=pattern):
                deleted += await redis_client.delete(key)
            if deleted:
                logger.info(f"Invalidated {deleted} keys matching {pattern}")
            return deleted
        except Exception as e:
            logger.error(f"Failed to invalidate pattern '{pattern}': {e}")
            return 0


cache_service = CacheService()
