"""Redis-backed cache for authorization lookups"""
from __future__ import annotations

import json
import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import redis.asyncio as redis

from wms.infrastructure.config.settings import get_settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CacheService:
    """
    JSON values in Redis with a TTL.

    Holds per-user role and permission sets. Redis is optional: when it is
    disabled, unreachable or failing, reads miss and writes are skipped, and
    callers go to the database.
    """

    def __init__(self, redis_client: redis.Redis | None = None):
        self.redis = redis_client
        self.settings = get_settings()

    async def connect(self) -> None:
        """Open the connection on startup; stays unavailable if Redis does not answer"""
        if self.redis is not None:
            return

        client = redis.Redis(
            host=self.settings.redis_host,
            port=self.settings.redis_port,
            db=self.settings.redis_db,
            password=self.settings.redis_password or None,
            decode_responses=True,
            socket_connect_timeout=5,
        )
        try:
            await client.ping()
        except (redis.ConnectionError, redis.TimeoutError) as e:
            logger.warning("Redis unavailable (%s); permissions will be read from the database", e)
            await client.aclose()
            return

        self.redis = client
        logger.info("Redis cache connected: %s:%s", self.settings.redis_host, self.settings.redis_port)

    async def disconnect(self) -> None:
        if self.redis is not None:
            await self.redis.aclose()
            self.redis = None
            logger.info("Redis cache disconnected")

    def is_available(self) -> bool:
        return self.redis is not None

    async def _guarded(self, what: str, op: Callable[[redis.Redis], Awaitable[T]], default: T) -> T:
        if self.redis is None:
            return default
        try:
            return await op(self.redis)
        except Exception as e:
            logger.error("Cache %s failed: %s", what, e)
            return default

    async def get(self, key: str) -> Any | None:
        """Decoded value, or None on a miss"""

        async def op(client: redis.Redis) -> Any | None:
            raw = await client.get(key)
            return json.loads(raw) if raw else None

        return await self._guarded(f"get {key}", op, None)

    async def set(self, key: str, value: Any, ttl: int = 300) -> bool:
        async def op(client: redis.Redis) -> bool:
            await client.setex(key, ttl, json.dumps(value))
            return True

        return await self._guarded(f"set {key}", op, False)

    async def delete(self, *keys: str) -> int:
        """Drop the given keys in one round trip; returns how many existed"""
        if not keys:
            return 0

        async def op(client: redis.Redis) -> int:
            return int(await client.delete(*keys))

        removed = await self._guarded(f"delete {len(keys)} key(s)", op, 0)
        if removed:
            logger.debug("Cache invalidated %d key(s)", removed)
        return removed


_cache_service: CacheService | None = None


def get_cache_service() -> CacheService | None:
    """Process-wide cache, or None before startup / when Redis is disabled"""
    return _cache_service


def set_cache_service(cache: CacheService | None) -> None:
    global _cache_service
    _cache_service = cache
