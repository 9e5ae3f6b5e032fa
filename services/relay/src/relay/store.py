"""
TTL existence store for relay deduplication.

Records "seen" fingerprint keys with an expiry equal to the configured
persistence time.  Only existence matters; values are never read back.

Implementation
--------------
* **Redis** — ``EXISTS`` for lookups, ``SET key 1 EX ttl`` for records
  (a fresh record resets the window), and ``SET key 1 NX EX ttl`` for
  the atomic insert-if-absent.  Expiry is handled by Redis.
* **In-memory** — dict of key → monotonic expiry, evicted lazily on
  access.  Suitable for a single process and for tests.
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

import structlog
from redis.exceptions import RedisError

from relay_common.errors import StoreUnavailable

logger = structlog.get_logger()

# In-memory writes between sweeps of expired keys.
_PURGE_EVERY = 1000


class TTLStore(ABC):
    """Existence-only key store with a fixed per-key time-to-live.

    Attributes:
        ttl_s: Seconds a recorded key stays present.
    """

    ttl_s: int

    @abstractmethod
    async def exists(self, key: str) -> bool:
        """Return ``True`` if *key* was recorded less than ``ttl_s`` ago."""

    @abstractmethod
    async def record(self, key: str) -> None:
        """Record *key*, restarting its window if it is already present."""

    @abstractmethod
    async def insert_if_absent(self, key: str) -> bool:
        """Atomically record *key* unless it is present.

        Returns:
            ``True`` if *key* was already present (nothing written),
            ``False`` if it was freshly recorded.
        """


class RedisTTLStore(TTLStore):
    """TTL store backed by Redis key expiry.

    Args:
        redis: An async Redis connection (the raw ``redis.asyncio.Redis``
               instance, **not** the ``RedisClient`` wrapper).
        ttl_s: Seconds a recorded key stays present.
    """

    def __init__(self, redis: Any, *, ttl_s: int) -> None:
        self._redis = redis
        self.ttl_s = ttl_s

    async def exists(self, key: str) -> bool:
        try:
            count = await self._redis.exists(key)
        except RedisError as exc:
            logger.error("store_exists_failed", key=key, error=str(exc))
            raise StoreUnavailable(f"EXISTS failed for {key!r}") from exc
        return bool(count)

    async def record(self, key: str) -> None:
        try:
            await self._redis.set(key, "1", ex=self.ttl_s)
        except RedisError as exc:
            logger.error("store_record_failed", key=key, error=str(exc))
            raise StoreUnavailable(f"SET failed for {key!r}") from exc

    async def insert_if_absent(self, key: str) -> bool:
        try:
            # SET … NX returns True only when the key was freshly created.
            was_set = await self._redis.set(key, "1", nx=True, ex=self.ttl_s)
        except RedisError as exc:
            logger.error("store_insert_failed", key=key, error=str(exc))
            raise StoreUnavailable(f"SET NX failed for {key!r}") from exc
        return not bool(was_set)


class InMemoryTTLStore(TTLStore):
    """Process-local TTL store.

    Args:
        ttl_s: Seconds a recorded key stays present.
        clock: Monotonic time source in seconds (injectable for tests).
    """

    def __init__(self, *, ttl_s: int, clock: Callable[[], float] = time.monotonic) -> None:
        self.ttl_s = ttl_s
        self._clock = clock
        self._expiry: dict[str, float] = {}
        self._writes = 0

    def _live(self, key: str) -> bool:
        expires_at = self._expiry.get(key)
        if expires_at is None:
            return False
        if self._clock() >= expires_at:
            del self._expiry[key]
            return False
        return True

    async def exists(self, key: str) -> bool:
        return self._live(key)

    def _write(self, key: str) -> None:
        self._expiry[key] = self._clock() + self.ttl_s
        self._writes += 1
        if self._writes % _PURGE_EVERY == 0:
            self.purge_expired()

    async def record(self, key: str) -> None:
        self._write(key)

    async def insert_if_absent(self, key: str) -> bool:
        # No await between check and set, so this is atomic on one event loop.
        if self._live(key):
            return True
        self._write(key)
        return False

    def purge_expired(self) -> int:
        """Drop every expired key and return how many were removed."""
        now = self._clock()
        stale = [key for key, expires_at in self._expiry.items() if now >= expires_at]
        for key in stale:
            del self._expiry[key]
        return len(stale)

    def __len__(self) -> int:
        return len(self._expiry)
