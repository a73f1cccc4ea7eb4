"""Text generation collaborator.

``TextGenerator`` is the seam the orchestrator depends on: a single
blocking (awaited, non-streaming) call that turns a system instruction and
a user message into reply text.  ``ChatModelGenerator`` implements it on
top of any LangChain chat model.
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import HumanMessage, SystemMessage

from flybus.core.service.metrics import GENERATION_LATENCY_SECONDS
from flybus.infra.telemetry import ATTR_GENERATION_MODEL, SPAN_GENERATION, tracer

logger = logging.getLogger(__name__)


class GenerationError(Exception):
    """Raised when the model returns no usable text."""


class TextGenerator(ABC):
    @abstractmethod
    async def generate(self, system_instruction: str, user_content: str) -> str:
        """Return the model's reply for one grounded request."""


class ChatModelGenerator(TextGenerator):
    """Generate replies with a LangChain chat model."""

    def __init__(self, llm: BaseChatModel, model_name: str = "unknown") -> None:
        self._llm = llm
        self._model_name = model_name

    async def generate(self, system_instruction: str, user_content: str) -> str:
        messages = [
            SystemMessage(content=system_instruction),
            HumanMessage(content=user_content),
        ]
        with tracer.start_as_current_span(SPAN_GENERATION) as span:
            span.set_attribute(ATTR_GENERATION_MODEL, self._model_name)
            start = time.monotonic()
            try:
                result = await self._llm.ainvoke(messages)
            finally:
                GENERATION_LATENCY_SECONDS.labels(model_name=self._model_name).observe(
                    time.monotonic() - start
                )

        text = result.content if isinstance(result.content, str) else ""
        if not text.strip():
            raise GenerationError(f"Model {self._model_name} returned an empty reply")
        logger.debug("Generated %d characters with %s", len(text), self._model_name)
        return text
