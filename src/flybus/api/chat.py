"""Chat API endpoint implementation."""

import logging
from datetime import datetime, timezone
from typing import Annotated

from fastapi import APIRouter, Depends, Header, Response

from flybus.infra.guards import enforce_rate_limit
from flybus.infra.id_utils import PREFIX_SESSION, generate_id

from .deps import OrchestratorDep
from .models import ChatRequest, ChatResponse, ContextView, HealthResponse
from .security import verify_api_key

logger = logging.getLogger(__name__)

SERVICE_NAME = "Reykjavik Excursions Chat Backend"

router = APIRouter(tags=["chat"])


@router.get("/")
async def health() -> HealthResponse:
    return HealthResponse(service=SERVICE_NAME, timestamp=datetime.now(timezone.utc))


@router.post(
    "/chat",
    dependencies=[Depends(enforce_rate_limit), Depends(verify_api_key)],
)
async def chat(
    chat_request: ChatRequest,
    orchestrator: OrchestratorDep,
    response: Response,
    x_session_id: Annotated[str | None, Header()] = None,
) -> ChatResponse:
    """Answer one user message within its session.

    The session is taken from the body, then the ``x-session-id`` header,
    and is generated when neither is present.  A turn that failed inside
    the dialogue engine still returns the normal shape, with status 500
    and an apology as the message.
    """
    session_id = chat_request.session_id or x_session_id or generate_id(PREFIX_SESSION)
    result = await orchestrator.handle_turn(session_id, chat_request.message)

    if result.failed:
        response.status_code = 500

    logger.info(
        "Session %s answered (topic=%s, failed=%s)",
        session_id,
        result.topic.value,
        result.failed,
    )
    return ChatResponse(
        message=result.message,
        language=result.language,
        session_id=result.session_id,
        context=ContextView.from_snapshot(result.context),
    )
