"""Tests for RedisCacheBackend against a mocked client."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import RedisError

from customer_access.core.exceptions import CacheConnectionError, CacheError
from customer_access.features.cache.adapters import redis_adapter
from customer_access.features.cache.adapters.redis_adapter import RedisCacheBackend


def scan_results(keys):
    async def scan_iter(match=None):
        for key in keys:
            yield key
    return MagicMock(side_effect=scan_iter)


class TestRedisCacheBackend:
    """Test suite for the Redis backend."""

    @pytest.fixture
    def client(self):
        client = AsyncMock()
        client.get.return_value = None
        client.delete.return_value = 0
        return client

    @pytest.fixture
    def backend(self, client):
        return RedisCacheBackend(client=client)

    def test_requires_url_or_client(self):
        with pytest.raises(CacheConnectionError):
            RedisCacheBackend()

    def test_supports_pattern_delete(self, backend):
        assert backend.supports_pattern_delete

    @pytest.mark.asyncio
    async def test_get_and_set(self, backend, client):
        client.get.return_value = '{"kind":"blocked"}'

        await backend.set("k", "v", ttl=60)

        assert await backend.get("k") == '{"kind":"blocked"}'
        client.set.assert_awaited_once_with("k", "v", ex=60)

    @pytest.mark.asyncio
    async def test_set_without_ttl(self, backend, client):
        await backend.set("k", "v")

        client.set.assert_awaited_once_with("k", "v", ex=None)

    @pytest.mark.asyncio
    async def test_delete(self, backend, client):
        client.delete.return_value = 1

        assert await backend.delete("k")

    @pytest.mark.asyncio
    async def test_errors_become_cache_errors(self, backend, client):
        client.get.side_effect = RedisError("boom")

        with pytest.raises(CacheError):
            await backend.get("k")

    @pytest.mark.asyncio
    async def test_delete_pattern_batches(self, backend, client, monkeypatch):
        monkeypatch.setattr(redis_adapter, "DELETE_BATCH_SIZE", 2)
        client.scan_iter = scan_results(["a", "b", "c"])
        client.delete.side_effect = lambda *keys: len(keys)

        removed = await backend.delete_pattern("prefix:*")

        assert removed == 3
        assert client.delete.await_count == 2
        client.scan_iter.assert_called_once_with(match="prefix:*")

    @pytest.mark.asyncio
    async def test_delete_pattern_without_matches(self, backend, client):
        client.scan_iter = scan_results([])

        assert await backend.delete_pattern("prefix:*") == 0
        client.delete.assert_not_called()

    @pytest.mark.asyncio
    async def test_connects_lazily_from_url(self):
        client = AsyncMock()
        client.get.return_value = "v"
        with patch.object(redis_adapter.redis, "from_url", return_value=client) as from_url:
            backend = RedisCacheBackend(redis_url="redis://localhost:6379/0")
            from_url.assert_not_called()

            assert await backend.get("k") == "v"

        from_url.assert_called_once()
        client.ping.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_connect_failure(self):
        client = AsyncMock()
        client.ping.side_effect = RedisConnectionError("refused")
        with patch.object(redis_adapter.redis, "from_url", return_value=client):
            backend = RedisCacheBackend(redis_url="redis://localhost:6379/0")

            with pytest.raises(CacheConnectionError):
                await backend.get("k")

    @pytest.mark.asyncio
    async def test_health_check(self, backend, client):
        assert await backend.health_check()

        client.ping.side_effect = RedisError("down")
        assert not await backend.health_check()

    @pytest.mark.asyncio
    async def test_disconnect(self, backend, client):
        await backend.disconnect()

        client.aclose.assert_awaited_once()
        assert backend.redis_client is None
