"""Unit tests for the page cache backends."""

import json
from unittest.mock import MagicMock

import pytest
from redis import RedisError

from legatepro.crosscutting.exceptions import CacheError
from legatepro.infrastructure.cache import (
    InMemoryPageCache,
    RedisPageCache,
    build_page_cache,
)

pytestmark = pytest.mark.unit


class TestInMemoryPageCache:
    def test_set_get_revalidate(self):
        cache = InMemoryPageCache(ttl_seconds=60)
        cache.set("/app/estates/e1", {"score": 40})

        assert cache.get("/app/estates/e1") == {"score": 40}

        cache.revalidate(["/app/estates/e1", "/app/estates/e1/rent"])

        assert cache.get("/app/estates/e1") is None
        assert cache.size() == 0

    def test_entries_expire(self, monkeypatch):
        clock = {"now": 1000.0}
        monkeypatch.setattr("legatepro.infrastructure.cache.time.time", lambda: clock["now"])
        cache = InMemoryPageCache(ttl_seconds=10)
        cache.set("/p", "payload")

        clock["now"] += 11

        assert cache.get("/p") is None

    def test_rejects_non_positive_ttl(self):
        with pytest.raises(ValueError):
            InMemoryPageCache(ttl_seconds=0)

    def test_clear(self):
        cache = InMemoryPageCache()
        cache.set("/p", 1)
        cache.clear()
        assert cache.get("/p") is None
        assert cache.size() == 0

    def test_revalidation_keeps_nothing_behind(self):
        cache = InMemoryPageCache()
        for i in range(500):
            cache.set(f"/app/estates/e1/tasks/t{i}", {"n": i})
            cache.revalidate([f"/app/estates/e1/tasks/t{i}", "/app/estates/e1/tasks"])

        assert cache.size() == 0
        assert set(vars(cache)) == {"_ttl_seconds", "_entries", "_lock"}


class TestRedisPageCache:
    def test_set_uses_namespaced_key_and_ttl(self):
        client = MagicMock()
        cache = RedisPageCache(client, ttl_seconds=30)

        cache.set("/app/estates/e1", {"score": 10})

        key, ttl, raw = client.setex.call_args.args
        assert key == "legatepro:page:/app/estates/e1"
        assert ttl == 30
        assert json.loads(raw) == {"score": 10}

    def test_get_decodes_json(self):
        client = MagicMock()
        client.get.return_value = b'{"score": 10}'

        assert RedisPageCache(client).get("/x") == {"score": 10}

    def test_revalidate_deletes_keys(self):
        client = MagicMock()
        RedisPageCache(client).revalidate(["/a", "/b"])
        client.delete.assert_called_once_with("legatepro:page:/a", "legatepro:page:/b")

    def test_redis_errors_become_cache_error(self):
        client = MagicMock()
        client.delete.side_effect = RedisError("connection refused")

        with pytest.raises(CacheError):
            RedisPageCache(client).revalidate(["/a"])


def test_build_page_cache_without_url_is_in_memory():
    assert isinstance(build_page_cache("", ttl_seconds=60), InMemoryPageCache)


def test_build_page_cache_with_url_is_redis():
    # Redis.from_url connects lazily, so no server is needed here.
    cache = build_page_cache("redis://localhost:6379/0", ttl_seconds=60)
    assert isinstance(cache, RedisPageCache)
