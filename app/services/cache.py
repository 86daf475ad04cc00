# app/services/cache.py
"""
Thin JSON wrapper over redis for memoized API responses.

Independent of the database-as-cache policy in the services: this only saves
a query round trip. Redis failures are logged and behave like a miss.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Optional

import redis

logger = logging.getLogger(__name__)

CHAMPIONS_KEY = "champions"
RACE_WINNERS_PREFIX = "race_winners"
DEFAULT_TTL = 300
HEALTH_CHECK_KEY = "health_check"


def champions_key() -> str:
    return CHAMPIONS_KEY


def race_winners_key(year: int) -> str:
    return f"{RACE_WINNERS_PREFIX}:{year}"


class CacheService:
    def __init__(self, client: Optional[redis.Redis] = None):
        self.client = client

    @classmethod
    def from_url(cls, url: Optional[str]) -> "CacheService":
        if not url:
            logger.info("No CACHE_URL configured; response cache disabled")
            return cls(None)
        return cls(redis.Redis.from_url(url, decode_responses=True, socket_connect_timeout=2, socket_timeout=2))

    @property
    def enabled(self) -> bool:
        return self.client is not None

    def get(self, key: str) -> Any:
        if not self.enabled:
            return None
        try:
            raw = self.client.get(key)
        except redis.RedisError as e:
            logger.error("Cache get error for key %s: %s", key, e)
            return None
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError:
            logger.warning("Discarding undecodable cache entry %s", key)
            return None

    def set(self, key: str, value: Any, ttl: int = DEFAULT_TTL) -> None:
        if not self.enabled:
            return
        try:
            self.client.set(key, json.dumps(value), ex=max(1, int(ttl)))
        except (redis.RedisError, TypeError) as e:
            logger.error("Cache set error for key %s: %s", key, e)

    def delete(self, key: str) -> int:
        if not self.enabled:
            return 0
        try:
            return int(self.client.delete(key))
        except redis.RedisError as e:
            logger.error("Cache delete error for key %s: %s", key, e)
            return 0

    def delete_pattern(self, pattern: str) -> int:
        """Delete every key matching a glob pattern (``race_winners:*``)."""
        if not self.enabled:
            return 0
        try:
            keys = list(self.client.scan_iter(match=pattern, count=500))
            return int(self.client.delete(*keys)) if keys else 0
        except redis.RedisError as e:
            logger.error("Cache pattern delete error for %s: %s", pattern, e)
            return 0

    def is_healthy(self) -> bool:
        if not self.enabled:
            return False
        try:
            self.client.set(HEALTH_CHECK_KEY, "ok", ex=1)
            ok = self.client.get(HEALTH_CHECK_KEY) == "ok"
            self.client.delete(HEALTH_CHECK_KEY)
            return ok
        except redis.RedisError as e:
            logger.error("Cache health check failed: %s", e)
            return False

    def stats(self) -> dict:
        if not self.enabled:
            return {"enabled": False, "total_keys": 0, "keys_by_prefix": {}}
        try:
            by_prefix: dict[str, int] = {}
            for key in self.client.scan_iter(count=500):
                prefix = key.split(":", 1)[0]
                by_prefix[prefix] = by_prefix.get(prefix, 0) + 1
            return {"enabled": True, "total_keys": int(self.client.dbsize()), "keys_by_prefix": by_prefix}
        except redis.RedisError as e:
            logger.error("Error getting cache stats: %s", e)
            return {"enabled": True, "total_keys": 0, "keys_by_prefix": {}}
