"""Shared Redis connection for the rate limiter and the broadcaster.

Redis is optional.  ``build_redis`` yields ``None`` when the server cannot
be reached at startup, and both consumers then fall back to in-process
behaviour: per-process rate-limit buckets and log-only broadcasting.
"""

import logging
from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends
from redis.asyncio import Redis
from redis.exceptions import RedisError

from flybus.configs.config import AppConfig, get_app_config

logger = logging.getLogger(__name__)


async def connect_redis(uri: str) -> Redis | None:
    """Return a connected client, or ``None`` when the ping fails."""
    client = Redis.from_url(uri, decode_responses=True)
    try:
        await client.ping()
    except (RedisError, OSError) as exc:
        logger.warning("Redis at startup unreachable (%s), using local fallbacks", exc)
        await client.aclose()
        return None
    return client


async def build_redis(
    config: Annotated[AppConfig, Depends(get_app_config)],
) -> AsyncGenerator[Redis | None, None]:
    """Lifespan dependency: one client for the whole process, closed on exit."""
    client = await connect_redis(config.third_party.redis_uri)
    try:
        yield client
    finally:
        if client is not None:
            await client.aclose()
