"""
Redis client wrapper for the AppNeta relay.

Owns the connection the deduplication store issues its ``EXISTS`` and
``SET`` commands on.  Short socket timeouts keep a stalled Redis from
holding up the webhook; the store turns the resulting errors into
``StoreUnavailable``.
"""

from __future__ import annotations

from urllib.parse import urlsplit

import redis.asyncio as aioredis
import structlog
from redis.exceptions import RedisError

from relay_common.config import get_settings

logger = structlog.get_logger()


def _redact(url: str) -> str:
    """Drop credentials from a Redis URL before logging it."""
    parts = urlsplit(url)
    host = parts.hostname or ""
    port = f":{parts.port}" if parts.port else ""
    return f"{parts.scheme}://{host}{port}{parts.path}"


class RedisClient:
    """Async Redis connection holder for the TTL store.

    Args:
        url: Redis connection URL.  Falls back to ``Settings.redis_url``.
        socket_timeout: Seconds before a connect or command is abandoned.
    """

    def __init__(self, url: str | None = None, socket_timeout: float = 2.0) -> None:
        self._url = url or get_settings().redis_url
        self._socket_timeout = socket_timeout
        self._redis: aioredis.Redis | None = None

    # ── lifecycle ──

    async def connect(self) -> None:
        """Create the connection pool (idempotent, no round trip)."""
        if self._redis is not None:
            return
        self._redis = aioredis.from_url(
            self._url,
            decode_responses=True,
            socket_timeout=self._socket_timeout,
            socket_connect_timeout=self._socket_timeout,
        )
        logger.info("redis_connected", url=_redact(self._url))

    async def close(self) -> None:
        if self._redis is not None:
            await self._redis.aclose()
            self._redis = None
            logger.info("redis_closed")

    @property
    def redis(self) -> aioredis.Redis:
        """The underlying ``redis.asyncio.Redis`` instance.

        Raises:
            RuntimeError: If ``connect()`` has not been called.
        """
        if self._redis is None:
            raise RuntimeError("RedisClient is not connected. Call connect() first.")
        return self._redis

    # ── health check ──

    async def health_check(self) -> bool:
        """``PING`` Redis; ``False`` if unconnected or unreachable."""
        if self._redis is None:
            return False
        try:
            return bool(await self._redis.ping())
        except (RedisError, OSError) as exc:
            logger.warning("redis_health_check_failed", error=str(exc))
            return False
