"""Shared Redis client.

Redis backs the rate limiter and the readiness check only. Short socket
timeouts keep an unreachable Redis from stalling requests behind the limiter.
"""

from __future__ import annotations

import redis.asyncio as redis

_client: redis.Redis | None = None


async def init_redis(url: str, *, max_connections: int = 20, socket_timeout: float | None = None) -> redis.Redis:
    """Create the shared client. No connection is opened until first use."""
    global _client  # noqa: PLW0603
    pool = redis.ConnectionPool.from_url(
        url,
        decode_responses=True,
        max_connections=max_connections,
        socket_timeout=socket_timeout,
        socket_connect_timeout=socket_timeout,
    )
    _client = redis.Redis(connection_pool=pool)
    return _client


async def close_redis() -> None:
    global _client  # noqa: PLW0603
    if _client is not None:
        await _client.aclose()
        await _client.connection_pool.disconnect()
        _client = None


def get_redis() -> redis.Redis:
    """Return the shared client.

    Raises RuntimeError before ``init_redis`` (tests, scripts); callers treat
    that as "no Redis".
    """
    if _client is None:
        msg = "Redis not initialized. Call init_redis() first."
        raise RuntimeError(msg)
    return _client
