"""Prometheus metrics for the Flybus chat service.

Business metrics that complement the auto-instrumented HTTP metrics
provided by ``prometheus-fastapi-instrumentator``.

All metrics use the ``flybus_`` prefix.
"""

import logging

from fastapi import FastAPI
from prometheus_client import Counter, Histogram
from prometheus_fastapi_instrumentator import Instrumentator

from flybus.configs.system import TracingConfig

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Turn metrics
# ---------------------------------------------------------------------------

CHAT_TURNS_TOTAL = Counter(
    "flybus_chat_turns_total",
    "Total chat turns, by response path",
    ["path"],  # greeting | generated | acknowledgment | unknown | error
)

KNOWLEDGE_ITEMS_RETURNED = Histogram(
    "flybus_knowledge_items_returned",
    "Number of knowledge items attached per lookup",
    buckets=(0, 1, 2, 3, 5, 10),
)

# ---------------------------------------------------------------------------
# Collaborator metrics
# ---------------------------------------------------------------------------

GENERATION_LATENCY_SECONDS = Histogram(
    "flybus_generation_latency_seconds",
    "Latency of text generation calls",
    ["model_name"],
    buckets=(0.25, 0.5, 1, 2, 5, 10, 30, 60),
)

BROADCAST_PUBLISH_TOTAL = Counter(
    "flybus_broadcast_publish_total",
    "Conversation event publishes, by outcome",
    ["status"],  # ok | error
)

RATE_LIMIT_REJECTIONS_TOTAL = Counter(
    "flybus_rate_limit_rejections_total",
    "Total rate-limit rejections (429 responses)",
)


# ---------------------------------------------------------------------------
# App setup
# ---------------------------------------------------------------------------


def instrument_app(app: FastAPI, config: TracingConfig) -> None:
    """Attach HTTP instrumentation and the ``/metrics`` endpoint to *app*.

    Must run while the app is being built: middleware cannot be added
    once the application has started.
    """
    Instrumentator(
        excluded_handlers=config.excluded_urls,
    ).instrument(app).expose(app, endpoint="/metrics")
    logger.info("Prometheus metrics initialised")
