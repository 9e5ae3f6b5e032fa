"""
Tests for the TTL existence stores.

Validates window expiry and overwrite semantics for the in-memory store,
and the Redis command mapping and error translation for the Redis store.
"""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import TimeoutError as RedisTimeoutError

from relay_common.errors import StoreUnavailable

from relay.store import InMemoryTTLStore, RedisTTLStore


# ── in-memory ──


class TestInMemoryStore:

    async def test_unknown_key_does_not_exist(self, store) -> None:
        assert await store.exists("k") is False

    async def test_recorded_key_exists(self, store) -> None:
        await store.record("k")
        assert await store.exists("k") is True

    async def test_key_expires_after_window(self, store, clock) -> None:
        await store.record("k")
        clock.advance(store.ttl_s - 1)
        assert await store.exists("k") is True
        clock.advance(1)
        assert await store.exists("k") is False

    async def test_record_resets_window(self, store, clock) -> None:
        await store.record("k")
        clock.advance(store.ttl_s - 1)
        await store.record("k")
        clock.advance(store.ttl_s - 1)
        assert await store.exists("k") is True

    async def test_record_does_not_duplicate(self, store) -> None:
        await store.record("k")
        await store.record("k")
        assert len(store) == 1

    async def test_insert_if_absent_first_time(self, store) -> None:
        assert await store.insert_if_absent("k") is False
        assert await store.exists("k") is True

    async def test_insert_if_absent_when_present(self, store, clock) -> None:
        await store.record("k")
        clock.advance(10)
        assert await store.insert_if_absent("k") is True
        # The window is not extended by a hit.
        clock.advance(store.ttl_s - 10)
        assert await store.exists("k") is False

    async def test_insert_if_absent_after_expiry(self, store, clock) -> None:
        await store.record("k")
        clock.advance(store.ttl_s)
        assert await store.insert_if_absent("k") is False

    async def test_purge_expired(self, store, clock) -> None:
        await store.record("old")
        clock.advance(store.ttl_s)
        await store.record("new")
        assert store.purge_expired() == 1
        assert len(store) == 1

    async def test_writes_sweep_expired_keys(self, clock) -> None:
        s = InMemoryTTLStore(ttl_s=1, clock=clock)
        for i in range(999):
            await s.record(f"k{i}")
        clock.advance(1)
        await s.record("fresh")
        assert len(s) == 1


# ── redis ──


class TestRedisStore:

    async def test_exists_maps_to_exists(self, mock_redis) -> None:
        mock_redis.exists = AsyncMock(return_value=1)
        s = RedisTTLStore(mock_redis, ttl_s=60)
        assert await s.exists("k") is True
        mock_redis.exists.assert_awaited_once_with("k")

    async def test_missing_key(self, mock_redis) -> None:
        s = RedisTTLStore(mock_redis, ttl_s=60)
        assert await s.exists("k") is False

    async def test_record_sets_with_expiry(self, mock_redis) -> None:
        s = RedisTTLStore(mock_redis, ttl_s=60)
        await s.record("k")
        mock_redis.set.assert_awaited_once_with("k", "1", ex=60)

    async def test_insert_if_absent_fresh(self, mock_redis) -> None:
        mock_redis.set = AsyncMock(return_value=True)  # NX succeeded → new key
        s = RedisTTLStore(mock_redis, ttl_s=60)
        assert await s.insert_if_absent("k") is False
        assert mock_redis.set.call_args.kwargs == {"nx": True, "ex": 60}

    async def test_insert_if_absent_present(self, mock_redis) -> None:
        mock_redis.set = AsyncMock(return_value=None)  # NX failed → already exists
        s = RedisTTLStore(mock_redis, ttl_s=60)
        assert await s.insert_if_absent("k") is True

    @pytest.mark.parametrize("method", ["exists", "record", "insert_if_absent"])
    async def test_connection_errors_become_store_unavailable(self, mock_redis, method) -> None:
        mock_redis.exists = AsyncMock(side_effect=RedisConnectionError("refused"))
        mock_redis.set = AsyncMock(side_effect=RedisConnectionError("refused"))
        s = RedisTTLStore(mock_redis, ttl_s=60)
        with pytest.raises(StoreUnavailable) as info:
            await getattr(s, method)("k")
        assert isinstance(info.value.__cause__, RedisConnectionError)

    async def test_timeout_becomes_store_unavailable(self, mock_redis) -> None:
        mock_redis.exists = AsyncMock(side_effect=RedisTimeoutError("slow"))
        s = RedisTTLStore(mock_redis, ttl_s=60)
        with pytest.raises(StoreUnavailable):
            await s.exists("k")
