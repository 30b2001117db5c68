"""
Redis connection factory for the admission gate.
"""

import redis.asyncio as redis


def create_redis(url: str) -> redis.Redis:
    """Build a pooled asyncio client. Connections are opened lazily."""
    return redis.from_url(
        url,
        encoding="utf-8",
        decode_responses=True,
        socket_connect_timeout=5,
        socket_timeout=5,
        retry_on_timeout=True,
        health_check_interval=30,
    )
