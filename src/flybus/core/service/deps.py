"""Lifespan and request dependencies for the dialogue orchestrator.

``build_orchestrator`` wires the process-wide collaborators (session store,
broadcaster, knowledge base, text generator, language detector) into one
``DialogueOrchestrator`` on ``app.state``.  Routes read it back with
``get_orchestrator``.
"""

import logging
from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, FastAPI, Request

from flybus.configs.config import AppConfig, get_app_config
from flybus.core.broadcast import build_broadcaster
from flybus.core.context import build_session_store, get_language_detector
from flybus.core.knowledge import KnowledgeBase
from flybus.core.llm import TextGenerator, get_text_generator
from flybus.infra.lifespan import get_app

from .orchestrator import DialogueOrchestrator

logger = logging.getLogger(__name__)


async def build_orchestrator(
    app: Annotated[FastAPI, Depends(get_app)],
    config: Annotated[AppConfig, Depends(get_app_config)],
    generator: Annotated[TextGenerator, Depends(get_text_generator)],
    _store: Annotated[None, Depends(build_session_store)],
    _broadcaster: Annotated[None, Depends(build_broadcaster)],
) -> AsyncGenerator[None, None]:
    """Build the ``DialogueOrchestrator`` once the store and broadcaster exist."""
    knowledge = KnowledgeBase(config.knowledge)
    app.state.orchestrator = DialogueOrchestrator(
        store=app.state.session_store,
        knowledge=knowledge,
        generator=generator,
        broadcaster=app.state.broadcaster,
        detector=get_language_detector(config.session.language_detector),
        prompt=config.prompt,
    )
    logger.info(
        "Dialogue orchestrator ready (%d knowledge sections, %d locations)",
        len(config.knowledge.sections),
        len(config.knowledge.locations),
    )
    yield


def get_orchestrator(request: Request) -> DialogueOrchestrator:
    return request.app.state.orchestrator
