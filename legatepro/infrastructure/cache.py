"""
============================================================
CRC CARD — infrastructure/cache.py
============================================================
Module: Page cache (backends for the PageCache port)

Responsibilities:
  - Cache payloads of server-rendered estate views by page path.
  - Drop entries when a guarded mutation revalidates their paths.
  - Pick a backend: Redis when REDIS_URL is configured, in-memory otherwise.
  - Expire entries by TTL (Redis SETEX / timestamp in memory).

Collaborators:
  - domain.services.PageCache (port)
  - redis-py (optional backend)
  - crosscutting.exceptions.CacheError

Notes:
  - Redis failures surface as CacheError; the guard logs them and keeps the
    already-stored mutation.
  - Revalidation only drops entries; nothing is kept per invalidated path.
============================================================
"""

from __future__ import annotations

import json
import time
from dataclasses import dataclass
from threading import Lock
from typing import Any, Iterable

from redis import Redis, RedisError

from ..crosscutting.exceptions import CacheError


@dataclass(frozen=True, slots=True)
class CacheEntry:
    payload: Any
    created_at: float

    def is_expired(self, ttl_seconds: float, now: float) -> bool:
        return (now - self.created_at) > ttl_seconds


class InMemoryPageCache:
    """Thread-safe dict-backed cache with TTL."""

    def __init__(self, *, ttl_seconds: float = 300) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be > 0")
        self._ttl_seconds = float(ttl_seconds)
        self._entries: dict[str, CacheEntry] = {}
        self._lock = Lock()

    def get(self, path: str) -> Any | None:
        now = time.time()
        with self._lock:
            entry = self._entries.get(path)
            if entry is None:
                return None
            if entry.is_expired(self._ttl_seconds, now):
                self._entries.pop(path, None)
                return None
            return entry.payload

    def set(self, path: str, payload: Any) -> None:
        with self._lock:
            self._entries[path] = CacheEntry(payload=payload, created_at=time.time())

    def revalidate(self, paths: Iterable[str]) -> None:
        with self._lock:
            for path in paths:
                self._entries.pop(path, None)

    def size(self) -> int:
        with self._lock:
            return len(self._entries)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()


class RedisPageCache:
    """Redis-backed cache; payloads are JSON under a namespaced key."""

    def __init__(
        self, client: Redis, *, ttl_seconds: int = 300, prefix: str = "legatepro:page:"
    ) -> None:
        self._client = client
        self._ttl_seconds = int(ttl_seconds)
        self._prefix = prefix

    def _key(self, path: str) -> str:
        return f"{self._prefix}{path}"

    def get(self, path: str) -> Any | None:
        try:
            raw = self._client.get(self._key(path))
        except RedisError as exc:
            raise CacheError("page cache read failed", original_error=exc) from exc
        if raw is None:
            return None
        return json.loads(raw)

    def set(self, path: str, payload: Any) -> None:
        try:
            self._client.setex(
                self._key(path), self._ttl_seconds, json.dumps(payload, default=str)
            )
        except RedisError as exc:
            raise CacheError("page cache write failed", original_error=exc) from exc

    def revalidate(self, paths: Iterable[str]) -> None:
        keys = [self._key(p) for p in paths]
        if not keys:
            return
        try:
            self._client.delete(*keys)
        except RedisError as exc:
            raise CacheError("page cache invalidation failed", original_error=exc) from exc


def build_page_cache(redis_url: str, *, ttl_seconds: int):
    """Redis if a URL is configured, in-memory otherwise."""
    if redis_url.strip():
        return RedisPageCache(Redis.from_url(redis_url), ttl_seconds=ttl_seconds)
    return InMemoryPageCache(ttl_seconds=ttl_seconds)
