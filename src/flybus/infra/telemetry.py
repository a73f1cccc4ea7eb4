"""Tracing for chat turns.

Span names and attribute keys used across the service live here, next to
the module-level ``tracer``.  Spans are non-recording until
``init_telemetry`` installs an SDK provider, which only happens when
``tracing.enabled`` is set and an OTLP endpoint with credentials is
configured.

A traced turn looks like::

    HTTP POST /chat                (FastAPI instrumentation)
      chat.turn                    turn.path, turn.topic
        knowledge.lookup           knowledge.item_count
        llm.generate               llm.model
          HTTP POST .../chat/completions  (httpx instrumentation)
        broadcast.publish
"""

from __future__ import annotations

import base64
import logging

from fastapi import FastAPI
from opentelemetry import trace

from flybus.configs.system import TracingConfig

logger = logging.getLogger(__name__)

tracer = trace.get_tracer("flybus")

SPAN_CHAT_TURN = "chat.turn"
SPAN_KNOWLEDGE_LOOKUP = "knowledge.lookup"
SPAN_GENERATION = "llm.generate"
SPAN_BROADCAST_PUBLISH = "broadcast.publish"

ATTR_TURN_PATH = "turn.path"
ATTR_TURN_TOPIC = "turn.topic"
ATTR_KNOWLEDGE_ITEM_COUNT = "knowledge.item_count"
ATTR_GENERATION_MODEL = "llm.model"


def _basic_auth(username: str, password: str) -> dict[str, str]:
    token = base64.b64encode(f"{username}:{password}".encode()).decode()
    return {"Authorization": f"Basic {token}"}


def _install_provider(settings: TracingConfig) -> None:
    from opentelemetry.exporter.otlp.proto.http.trace_exporter import (
        OTLPSpanExporter,
    )
    from opentelemetry.sdk.resources import Resource
    from opentelemetry.sdk.trace import TracerProvider
    from opentelemetry.sdk.trace.export import BatchSpanProcessor
    from opentelemetry.sdk.trace.sampling import ParentBased, TraceIdRatioBased

    provider = TracerProvider(
        resource=Resource.create({"service.name": settings.service_name}),
        sampler=ParentBased(root=TraceIdRatioBased(settings.sample_rate)),
    )
    exporter = OTLPSpanExporter(
        endpoint=settings.endpoint,
        headers=_basic_auth(settings.username, settings.password),
    )
    provider.add_span_processor(BatchSpanProcessor(exporter))
    trace.set_tracer_provider(provider)


def _instrument(app: FastAPI | None, settings: TracingConfig) -> None:
    from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor

    if app is not None:
        from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor

        FastAPIInstrumentor.instrument_app(
            app, excluded_urls=",".join(settings.excluded_urls)
        )
    HTTPXClientInstrumentor().instrument()


def init_telemetry(
    app: FastAPI | None = None, settings: TracingConfig | None = None
) -> bool:
    """Export spans over OTLP when configured; return whether it did."""
    if settings is None or not settings.enabled:
        logger.info("Tracing disabled")
        return False
    if not (settings.endpoint and settings.username and settings.password):
        logger.warning("Tracing enabled without endpoint or credentials, skipped")
        return False

    _install_provider(settings)
    _instrument(app, settings)
    logger.info(
        "Tracing to %s as %s (sample rate %.2f)",
        settings.endpoint,
        settings.service_name,
        settings.sample_rate,
    )
    return True
