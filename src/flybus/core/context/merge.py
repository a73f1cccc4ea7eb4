"""Context merge: prior state + this turn's signals -> next context.

Order of precedence, lowest first:

1. the prior context (or a fresh one),
2. entities extracted this turn, folded in only while the conversation is
   about flight timing and only when a value was actually found,
3. knowledge-layer feedback, whose non-null values win over step 2,
4. a final override that keeps ``last_topic`` on flight timing once the
   message or the prior topic points there.

Sticky fields are never cleared: every overwrite requires a non-null value.
"""

import copy
from datetime import datetime

from .models import (
    ExtractedEntities,
    KnowledgeFeedback,
    Language,
    SessionContext,
    Topic,
    TurnTopic,
)


def new_context(session_id: str, language: Language, now: datetime) -> SessionContext:
    return SessionContext(session_id=session_id, language=language, timestamp=now)


def merge_context(
    prior: SessionContext | None,
    extracted: ExtractedEntities,
    classified: TurnTopic,
    feedback: KnowledgeFeedback | None = None,
    *,
    session_id: str,
    language: Language,
    flight_mentioned: bool,
    now: datetime,
) -> SessionContext:
    """Return the next context; *prior* is left untouched.

    Merging the same extraction twice is a no-op the second time, so the
    orchestrator may merge before the knowledge lookup and again once
    feedback is available.
    """
    if prior is None:
        context = new_context(session_id, language, now)
    else:
        context = copy.deepcopy(prior)
        context.language = language

    if (
        classified == TurnTopic.FLIGHT_TIMING
        or context.last_topic == Topic.FLIGHT_TIMING
    ):
        if extracted.destination is not None:
            context.flight_destination = extracted.destination
        if extracted.time is not None:
            context.flight_time = extracted.time
        if context.last_topic is None:
            context.last_topic = Topic.FLIGHT_TIMING

    if feedback is not None:
        if feedback.last_topic is not None:
            context.last_topic = feedback.last_topic
        if feedback.flight_time is not None:
            context.flight_time = feedback.flight_time
        if feedback.flight_destination is not None:
            context.flight_destination = feedback.flight_destination

    if flight_mentioned or context.last_topic == Topic.FLIGHT_TIMING:
        context.last_topic = Topic.FLIGHT_TIMING

    context.timestamp = now
    return context
