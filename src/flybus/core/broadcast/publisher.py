"""Fire-and-forget conversation broadcast.

``Broadcaster.publish`` never raises: a failed publish is logged and
counted, and the turn carries on.  Events go to a Redis pub/sub channel
when Redis is reachable; otherwise they are only written to the log.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, FastAPI, Request
from redis.asyncio import Redis

from flybus.configs.config import AppConfig, get_app_config
from flybus.core.service.metrics import BROADCAST_PUBLISH_TOTAL
from flybus.infra.lifespan import get_app
from flybus.infra.redis import build_redis
from flybus.infra.telemetry import SPAN_BROADCAST_PUBLISH, tracer

from .models import ConversationEvent

logger = logging.getLogger(__name__)


class Broadcaster(ABC):
    """Publishes conversation events; failures are swallowed and logged."""

    async def publish(self, event: ConversationEvent) -> bool:
        """Publish *event*; returns ``False`` when delivery failed."""
        with tracer.start_as_current_span(SPAN_BROADCAST_PUBLISH):
            try:
                await self._publish(event)
            except Exception:
                logger.exception("Failed to broadcast conversation event %s", event.id)
                BROADCAST_PUBLISH_TOTAL.labels(status="error").inc()
                return False
        BROADCAST_PUBLISH_TOTAL.labels(status="ok").inc()
        return True

    @abstractmethod
    async def _publish(self, event: ConversationEvent) -> None: ...


class RedisBroadcaster(Broadcaster):
    """Publishes ``{"event": ..., "data": ...}`` envelopes to a Redis channel."""

    def __init__(self, redis: Redis, channel: str, event_name: str) -> None:
        self._redis = redis
        self._channel = channel
        self._event_name = event_name

    async def _publish(self, event: ConversationEvent) -> None:
        payload = json.dumps(
            {
                "event": self._event_name,
                "data": event.model_dump(mode="json", by_alias=True),
            },
            ensure_ascii=False,
        )
        await self._redis.publish(self._channel, payload)


class LogBroadcaster(Broadcaster):
    """Writes events to the log only; used when no channel is available."""

    async def _publish(self, event: ConversationEvent) -> None:
        logger.info(
            "Conversation event %s (topic=%s, type=%s)",
            event.id,
            event.topic,
            event.type,
        )


# ---------------------------------------------------------------------------
# Lifespan dependency
# ---------------------------------------------------------------------------


async def build_broadcaster(
    app: Annotated[FastAPI, Depends(get_app)],
    redis_client: Annotated[Redis | None, Depends(build_redis)],
    config: Annotated[AppConfig, Depends(get_app_config)],
) -> AsyncGenerator[None, None]:
    settings = config.broadcast
    broadcaster: Broadcaster
    if settings.enabled and redis_client is not None:
        broadcaster = RedisBroadcaster(
            redis_client, settings.channel, settings.event_name
        )
        logger.info("Broadcasting conversation events to %s", settings.channel)
    else:
        broadcaster = LogBroadcaster()
        logger.info("Conversation events are logged only")
    app.state.broadcaster = broadcaster
    yield


def get_broadcaster(request: Request) -> Broadcaster:
    return request.app.state.broadcaster
