from .models import (
    EVENT_TYPE_DIRECT_RESPONSE,
    EVENT_TYPE_GPT_RESPONSE,
    ConversationEvent,
)
from .publisher import (
    Broadcaster,
    LogBroadcaster,
    RedisBroadcaster,
    build_broadcaster,
    get_broadcaster,
)

__all__ = [
    "EVENT_TYPE_DIRECT_RESPONSE",
    "EVENT_TYPE_GPT_RESPONSE",
    "Broadcaster",
    "ConversationEvent",
    "LogBroadcaster",
    "RedisBroadcaster",
    "build_broadcaster",
    "get_broadcaster",
]
