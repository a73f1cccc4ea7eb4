"""Per-IP sliding-window rate limit for the chat endpoint.

When Redis is available the window lives in a sorted set per IP and the
check runs as one pipeline call; otherwise an in-process list of
timestamps per IP is used.

``enforce_rate_limit`` is a side-effect dependency: the endpoint declares
it and never touches rate-limit logic directly.  ``RateLimited`` is turned
into a 429 response by the handlers in ``flybus.api.exceptions``.
"""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncGenerator, Callable
from datetime import timedelta
from typing import Annotated

from fastapi import Depends, FastAPI, Request
from redis.asyncio import Redis

from flybus.configs.config import AppConfig, get_app_config
from flybus.infra.lifespan import get_app
from flybus.infra.redis import build_redis

logger = logging.getLogger(__name__)

_RATELIMIT_KEY = "flybus:ratelimit:ip:{ip}"

# Checked in order; the first one present wins. X-Forwarded-For may hold a
# proxy chain, of which the leftmost entry is the client.
_CLIENT_IP_HEADERS = ("cf-connecting-ip", "x-real-ip", "x-forwarded-for")


class RateLimited(Exception):
    """Raised when a client exceeds its request budget."""

    def __init__(self, message: str, *, ip: str = "") -> None:
        super().__init__(message)
        self.ip = ip


class RequestGuard:
    """Sliding-window limiter keyed by client IP."""

    def __init__(
        self,
        *,
        redis: Redis | None,
        max_requests: int,
        window: timedelta,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._redis = redis
        self._max_requests = max_requests
        self._window = window.total_seconds()
        self._clock = clock

        # Local fallback state
        self._local_buckets: dict[str, list[float]] = {}

    async def check(self, ip: str) -> None:
        """Record one request from *ip*; raise ``RateLimited`` when over budget."""
        if self._max_requests <= 0:
            return
        if self._redis is not None:
            count = await self._count_redis(ip)
        else:
            count = self._count_local(ip)
        if count > self._max_requests:
            raise RateLimited(
                f"Rate limit exceeded ({self._max_requests} requests "
                f"per {int(self._window)}s)",
                ip=ip,
            )

    async def _count_redis(self, ip: str) -> int:
        now = self._clock()
        key = _RATELIMIT_KEY.format(ip=ip)

        pipe = self._redis.pipeline()
        pipe.zremrangebyscore(key, 0, now - self._window)
        pipe.zadd(key, {str(now): now})
        pipe.zcard(key)
        pipe.expire(key, int(self._window) + 1)
        results = await pipe.execute()
        return int(results[2])

    def _count_local(self, ip: str) -> int:
        now = self._clock()
        window_start = now - self._window
        timestamps = [t for t in self._local_buckets.get(ip, []) if t > window_start]
        timestamps.append(now)
        self._local_buckets[ip] = timestamps
        return len(timestamps)

    async def aclose(self) -> None:
        self._local_buckets.clear()


# ---------------------------------------------------------------------------
# Lifespan dependency
# ---------------------------------------------------------------------------


async def build_request_guard(
    app: Annotated[FastAPI, Depends(get_app)],
    redis_client: Annotated[Redis | None, Depends(build_redis)],
    config: Annotated[AppConfig, Depends(get_app_config)],
) -> AsyncGenerator[None, None]:
    """Create a ``RequestGuard``, attach to ``app.state``; close on shutdown."""
    api = config.api
    guard = RequestGuard(
        redis=redis_client,
        max_requests=api.rate_limit_max_requests,
        window=api.rate_limit_window,
    )
    app.state.request_guard = guard
    logger.info(
        "RequestGuard: %s backend (%d requests per %s)",
        "Redis" if redis_client is not None else "local",
        api.rate_limit_max_requests,
        api.rate_limit_window,
    )
    yield
    await guard.aclose()


# ---------------------------------------------------------------------------
# Per-request dependencies
# ---------------------------------------------------------------------------


def client_ip(request: Request) -> str:
    """Client address behind Cloudflare or a reverse proxy, else the peer."""
    for header in _CLIENT_IP_HEADERS:
        if value := request.headers.get(header):
            return value.split(",", 1)[0].strip()
    return request.client.host if request.client else "unknown"


def get_request_guard(request: Request) -> RequestGuard:
    return request.app.state.request_guard


async def enforce_rate_limit(
    ip: Annotated[str, Depends(client_ip)],
    guard: Annotated[RequestGuard, Depends(get_request_guard)],
) -> None:
    await guard.check(ip)
