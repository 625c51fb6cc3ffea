from __future__ import annotations

import json
import logging
from typing import Any

import redis
from ..core.config import get_settings

logger = logging.getLogger(__name__)


def _get_sync_redis() -> redis.Redis | None:
    """
    Create a fresh sync Redis client per call; returns None when no
    REDIS_URL is configured so callers simply skip the cache.
    """
    settings = get_settings()
    if not settings.REDIS_URL:
        return None
    return redis.from_url(
        settings.REDIS_URL,
        decode_responses=True,
        socket_timeout=5,
        socket_connect_timeout=5,
    )


def cached_get(
    key: str,
    set_value: Any | None = None,
    ttl: int | None = None,
) -> Any:
    """
    TTL cache backed by Redis.

    Usage:

        value = cached_get("k")                  # read
        cached_get("k", set_value=value, ttl=60) # write with TTL

    - On read: returns cached value (deserialized JSON) or None if missing/expired.
    - On write: stores value (serialized JSON) with optional TTL and returns it.
    - Redis being unavailable is never fatal: reads miss, writes are dropped.
    """
    client = _get_sync_redis()
    if client is None:
        return set_value

    try:
        if set_value is None:
            # Read path
            val = client.get(key)
            if val is not None:
                return json.loads(val)
            return None

        # Write path
        serialized = json.dumps(set_value)
        if ttl is not None:
            client.set(key, serialized, ex=ttl)
        else:
            client.set(key, serialized)
        return set_value

    except redis.RedisError:
        logger.warning("Redis unavailable; cache bypassed for %s", key)
        return set_value
    finally:
        try:
            client.close()
        except redis.RedisError:
            pass
