"""
Key/value cache behind the query cache and the toast queue.

Redis when REDIS_URL is set and answers a ping, otherwise a process-local
store. Both hold JSON text, so a value read back is always a fresh copy
and never aliases what a caller cached.

Usage:
    from app.utils.cache import cache

    cache.set("study-plans:user-123:", [...], ttl=60)
    cache.get("study-plans:user-123:")

    # Drop every key of a family for one caller
    cache.delete_prefix("study-plan:user-123:")
"""

import os
import re
import json
import time
import logging
import threading
from collections import OrderedDict
from typing import Any, Iterable, List, Optional, Tuple

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = int(os.getenv("QUERY_CACHE_TTL_SECONDS", "300"))


def _encode(value: Any) -> str:
    return json.dumps(value, default=str)


def _decode(raw: Optional[str]) -> Optional[Any]:
    return json.loads(raw) if raw is not None else None


def _glob_escape(text: str) -> str:
    """Escape the characters Redis MATCH patterns treat specially."""
    return re.sub(r"([*?\[\]\\])", r"\\\1", text)


class MemoryStore:
    """Thread-safe in-process store with per-key expiry and a size cap."""

    def __init__(self, maxsize: int = 1000):
        self.maxsize = maxsize
        self._entries: "OrderedDict[str, Tuple[float, str]]" = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            expires_at, raw = entry
            if expires_at <= time.monotonic():
                del self._entries[key]
                return None
            return raw

    def set(self, key: str, raw: str, ttl: int) -> None:
        with self._lock:
            self._entries.pop(key, None)
            while len(self._entries) >= self.maxsize:
                # Oldest write goes first
                self._entries.popitem(last=False)
            self._entries[key] = (time.monotonic() + ttl, raw)

    def delete(self, keys: Iterable[str]) -> int:
        with self._lock:
            removed = 0
            for key in keys:
                if self._entries.pop(key, None) is not None:
                    removed += 1
            return removed

    def keys(self, prefix: str = "") -> List[str]:
        with self._lock:
            return [key for key in self._entries if key.startswith(prefix)]

    def flush(self) -> None:
        with self._lock:
            self._entries.clear()


class RedisStore:
    """Same surface as MemoryStore over a Redis connection."""

    def __init__(self, client):
        self._client = client

    @classmethod
    def connect(cls, redis_url: str) -> Optional["RedisStore"]:
        import redis

        try:
            client = redis.from_url(
                redis_url,
                decode_responses=True,
                socket_timeout=5,
                socket_connect_timeout=5,
            )
            client.ping()
        except redis.RedisError as e:
            logger.warning(f"Redis unavailable, using in-memory cache: {e}")
            return None

        logger.info("Redis cache connected")
        return cls(client)

    def get(self, key: str) -> Optional[str]:
        return self._client.get(key)

    def set(self, key: str, raw: str, ttl: int) -> None:
        self._client.setex(key, ttl, raw)

    def delete(self, keys: Iterable[str]) -> int:
        keys = list(keys)
        return self._client.delete(*keys) if keys else 0

    def keys(self, prefix: str = "") -> List[str]:
        return list(self._client.scan_iter(match=f"{_glob_escape(prefix)}*"))

    def flush(self) -> None:
        self.delete(self.keys())


class HybridCache:
    """
    JSON value cache over Redis or the in-memory store, picked once at
    construction. Redis errors after connecting are logged and treated as
    misses; the cache is never the source of truth.
    """

    def __init__(self, maxsize: int = 1000, default_ttl: int = DEFAULT_TTL_SECONDS, redis_url: Optional[str] = None):
        self.default_ttl = default_ttl
        redis_url = redis_url or os.getenv("REDIS_URL")
        self._store = (RedisStore.connect(redis_url) if redis_url else None) or MemoryStore(maxsize)

    @property
    def backend(self) -> str:
        return "redis" if isinstance(self._store, RedisStore) else "memory"

    def get(self, key: str) -> Optional[Any]:
        try:
            return _decode(self._store.get(key))
        except Exception as e:
            logger.warning(f"Cache get failed for {key}: {e}")
            return None

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        try:
            self._store.set(key, _encode(value), ttl or self.default_ttl)
        except Exception as e:
            logger.warning(f"Cache set failed for {key}: {e}")

    def delete(self, key: str) -> bool:
        try:
            return self._store.delete([key]) > 0
        except Exception as e:
            logger.warning(f"Cache delete failed for {key}: {e}")
            return False

    def delete_prefix(self, prefix: str) -> int:
        """Delete every key starting with prefix. Returns the number removed."""
        try:
            return self._store.delete(self._store.keys(prefix))
        except Exception as e:
            logger.warning(f"Cache delete_prefix failed for {prefix}: {e}")
            return 0

    def clear(self) -> None:
        try:
            self._store.flush()
        except Exception as e:
            logger.warning(f"Cache clear failed: {e}")


cache = HybridCache(maxsize=1000)
