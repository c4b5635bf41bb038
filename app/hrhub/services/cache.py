"""Best-effort shared cache backed by Redis.

Every failure is logged, counted and reported to the caller as a miss, so a
cache outage only costs a database round trip.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Optional

import redis

from app.hrhub.core.config import settings
from app.hrhub.core.metrics import metrics

logger = logging.getLogger("hrhub.cache")


class CacheBackend:
    def get_json(self, key: str) -> Optional[Any]:
        return None

    def set_json(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        return False

    def delete(self, key: str) -> bool:
        return False


class NullCache(CacheBackend):
    """Used when no REDIS_URL is configured."""


class RedisCache(CacheBackend):
    def __init__(self, url: str = "", client=None):
        self._url = url
        self._client = client

    def _get_client(self):
        if self._client is None:
            self._client = redis.Redis.from_url(
                self._url,
                decode_responses=True,
                socket_timeout=2.0,
                socket_connect_timeout=2.0,
            )
        return self._client

    def _degraded(self, operation: str, key: str, exc: Exception) -> None:
        metrics.increment_cache_error(operation)
        logger.warning("Cache %s failed for %s: %s", operation, key, exc)

    def get_json(self, key: str) -> Optional[Any]:
        try:
            raw = self._get_client().get(key)
        except redis.RedisError as exc:
            self._degraded("get", key, exc)
            return None
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except (TypeError, ValueError) as exc:
            self._degraded("decode", key, exc)
            return None

    def set_json(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        try:
            payload = json.dumps(value, default=str)
            if ttl:
                self._get_client().setex(key, ttl, payload)
            else:
                self._get_client().set(key, payload)
            return True
        except (redis.RedisError, TypeError, ValueError) as exc:
            self._degraded("set", key, exc)
            return False

    def delete(self, key: str) -> bool:
        try:
            return bool(self._get_client().delete(key))
        except redis.RedisError as exc:
            self._degraded("delete", key, exc)
            return False


_cache: Optional[CacheBackend] = None


def get_cache() -> CacheBackend:
    global _cache
    if _cache is None:
        if settings.REDIS_URL:
            _cache = RedisCache(settings.REDIS_URL)
        else:
            _cache = NullCache()
    return _cache


def set_cache(backend: Optional[CacheBackend]) -> None:
    global _cache
    _cache = backend
