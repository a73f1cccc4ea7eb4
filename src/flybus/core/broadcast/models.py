"""Conversation event published after every turn."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

EVENT_TYPE_DIRECT_RESPONSE = "direct_response"
EVENT_TYPE_GPT_RESPONSE = "gpt_response"

EventType = Literal["direct_response", "gpt_response"]


class ConversationEvent(BaseModel):
    """Serialised with camelCase keys (``userMessage``, ``botResponse``)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(description="Event ID")
    timestamp: datetime = Field(description="When the reply was produced")
    user_message: str = Field(description="Raw user message")
    bot_response: str = Field(description="Reply sent to the user")
    language: str = Field(description="Reply language code")
    topic: str = Field(description="Topic reported for the turn")
    type: EventType = Field(description="How the reply was produced")
