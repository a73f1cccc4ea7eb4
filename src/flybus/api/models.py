"""Pydantic models for the chat API.

Wire keys are camelCase (``sessionId``, ``lastTopic``); Python attributes
stay snake_case and either form is accepted on input.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from flybus.core.context import ContextSnapshot, Destination, Language, Topic

# Maximum length for a chat message, only short messages are allowed
CHAT_MESSAGE_MAX_LENGTH = 1024


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ChatRequest(_CamelModel):
    """Request model for the chat endpoint."""

    message: str = Field(
        description="User message to answer", max_length=CHAT_MESSAGE_MAX_LENGTH
    )
    session_id: str | None = Field(
        default=None, description="Conversation session to continue"
    )

    @field_validator("message")
    @classmethod
    def _reject_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("message must not be blank")
        return value


class ContextView(_CamelModel):
    """Public view of the session context after the turn."""

    last_topic: Topic | None = None
    flight_time: str | None = None
    flight_destination: Destination | None = None

    @classmethod
    def from_snapshot(cls, snapshot: ContextSnapshot) -> "ContextView":
        return cls(
            last_topic=snapshot.last_topic,
            flight_time=snapshot.flight_time,
            flight_destination=snapshot.flight_destination,
        )


class ChatResponse(_CamelModel):
    """Reply to one chat turn; same shape on success and failure."""

    message: str = Field(description="Reply text")
    language: Language = Field(description="Reply language code")
    session_id: str = Field(description="Session the turn was recorded under")
    context: ContextView = Field(description="Context snapshot after the turn")


class HealthResponse(BaseModel):
    status: str = "OK"
    service: str
    timestamp: datetime
