"""Turn-level dialogue control flow.

One call to ``DialogueOrchestrator.handle_turn`` runs one turn::

    greeting? ── yes ─> canned greeting (store untouched)
        │ no
    load + merge context ─> knowledge lookup
        │
        ├─ items found ─> generate ─> fold feedback ─> persist ─> reply
        ├─ acknowledgment? ─> canned acknowledgment
        └─ otherwise ─> "contact support"

Any exception raised while the context is merged, the knowledge is looked
up or the reply is generated becomes a fixed apology with ``failed=True``.
Nothing is retried and nothing is persisted for a failed turn.  Only the
generated path writes the store.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from flybus.configs.system import PromptConfig
from flybus.core.broadcast import (
    EVENT_TYPE_DIRECT_RESPONSE,
    EVENT_TYPE_GPT_RESPONSE,
    Broadcaster,
    ConversationEvent,
)
from flybus.core.broadcast.models import EventType
from flybus.core.context import (
    EMPTY_SNAPSHOT,
    ContextSnapshot,
    ExtractedEntities,
    Language,
    LanguageDetector,
    SessionContext,
    SessionContextStore,
    Topic,
    TurnTopic,
    classify_topic,
    extract_entities,
    is_acknowledgment,
    is_greeting,
    mentions_flight,
    merge_context,
)
from flybus.core.context.models import ROLE_ASSISTANT, ROLE_USER, KnowledgeFeedback
from flybus.core.knowledge import (
    ITEM_TYPE_LOCATION_DETAILS,
    ITEM_TYPE_SERVICE_INFO,
    KnowledgeBase,
    KnowledgeItem,
    KnowledgeResult,
)
from flybus.core.llm import TextGenerator
from flybus.infra.id_utils import PREFIX_EVENT, generate_id
from flybus.infra.telemetry import (
    ATTR_KNOWLEDGE_ITEM_COUNT,
    ATTR_TURN_PATH,
    ATTR_TURN_TOPIC,
    SPAN_CHAT_TURN,
    SPAN_KNOWLEDGE_LOOKUP,
    tracer,
)

from .metrics import CHAT_TURNS_TOTAL, KNOWLEDGE_ITEMS_RETURNED
from .prompt import (
    ACKNOWLEDGMENT_REPLIES,
    APOLOGY_REPLIES,
    GREETING_REPLIES,
    UNKNOWN_REPLIES,
    build_system_instruction,
    build_user_content,
)

logger = logging.getLogger(__name__)

PATH_GREETING = "greeting"
PATH_GENERATED = "generated"
PATH_ACKNOWLEDGMENT = "acknowledgment"
PATH_UNKNOWN = "unknown"
PATH_ERROR = "error"

# Messages mentioning any of these also get a pick-up location search.
LOCATION_KEYWORDS = ("hotel", "pickup", "location")
# Naming the service is enough to ground a reply in the basic service info.
SERVICE_KEYWORD = "flybus"


class EmptyMessageError(ValueError):
    """Raised for a blank message; no context work is done."""


@dataclass(frozen=True)
class TurnResult:
    message: str
    language: Language
    session_id: str
    context: ContextSnapshot
    topic: Topic
    failed: bool = False


@dataclass(frozen=True)
class _TurnSignals:
    extracted: ExtractedEntities
    classified: TurnTopic
    flight_mentioned: bool


class DialogueOrchestrator:
    """Runs turns against the shared store and collaborators."""

    def __init__(
        self,
        *,
        store: SessionContextStore,
        knowledge: KnowledgeBase,
        generator: TextGenerator,
        broadcaster: Broadcaster,
        detector: LanguageDetector,
        prompt: PromptConfig,
    ) -> None:
        self._store = store
        self._knowledge = knowledge
        self._generator = generator
        self._broadcaster = broadcaster
        self._detector = detector
        self._prompt = prompt

    async def handle_turn(self, session_id: str, message: str) -> TurnResult:
        if not message or not message.strip():
            raise EmptyMessageError("Message must not be empty")

        language = self._detector.detect(message)

        with tracer.start_as_current_span(SPAN_CHAT_TURN) as span:
            if is_greeting(message):
                result = await self._reply_direct(
                    session_id,
                    message,
                    language,
                    GREETING_REPLIES[language],
                    Topic.GREETING,
                    EMPTY_SNAPSHOT,
                )
                path = PATH_GREETING
            else:
                result, path = await self._handle_contextual_turn(
                    session_id, message, language
                )
            span.set_attribute(ATTR_TURN_PATH, path)
            span.set_attribute(ATTR_TURN_TOPIC, result.topic.value)

        CHAT_TURNS_TOTAL.labels(path=path).inc()
        return result

    async def _handle_contextual_turn(
        self, session_id: str, message: str, language: Language
    ) -> tuple[TurnResult, str]:
        working: SessionContext | None = None
        try:
            prior = self._store.get(session_id)
            signals = _TurnSignals(
                extracted=extract_entities(message),
                classified=classify_topic(
                    message, prior.last_topic if prior is not None else None
                ),
                flight_mentioned=mentions_flight(message),
            )
            working = self._merge(prior, signals, None, session_id, language)
            knowledge = self._gather_knowledge(message, working)
            if knowledge.relevant_info:
                result = await self._reply_generated(
                    session_id, message, language, working, signals, knowledge
                )
                return result, PATH_GENERATED
        except Exception:
            logger.exception("Turn failed for session %s", session_id)
            snapshot = working.snapshot() if working is not None else EMPTY_SNAPSHOT
            result = TurnResult(
                message=APOLOGY_REPLIES[language],
                language=language,
                session_id=session_id,
                context=snapshot,
                topic=Topic.UNKNOWN,
                failed=True,
            )
            return result, PATH_ERROR

        if is_acknowledgment(message):
            snapshot = ContextSnapshot(
                last_topic=Topic.ACKNOWLEDGMENT,
                flight_time=working.flight_time,
                flight_destination=working.flight_destination,
            )
            result = await self._reply_direct(
                session_id,
                message,
                language,
                ACKNOWLEDGMENT_REPLIES[language],
                Topic.ACKNOWLEDGMENT,
                snapshot,
            )
            return result, PATH_ACKNOWLEDGMENT

        result = await self._reply_direct(
            session_id,
            message,
            language,
            UNKNOWN_REPLIES[language],
            Topic.UNKNOWN,
            working.snapshot(),
        )
        return result, PATH_UNKNOWN

    def _merge(
        self,
        prior: SessionContext | None,
        signals: _TurnSignals,
        feedback: KnowledgeFeedback | None,
        session_id: str,
        language: Language,
    ) -> SessionContext:
        return merge_context(
            prior,
            signals.extracted,
            signals.classified,
            feedback,
            session_id=session_id,
            language=language,
            flight_mentioned=signals.flight_mentioned,
            now=self._store.now(),
        )

    def _gather_knowledge(
        self, message: str, context: SessionContext
    ) -> KnowledgeResult:
        with tracer.start_as_current_span(SPAN_KNOWLEDGE_LOOKUP) as span:
            result = self._knowledge.lookup(message, context)
            items = list(result.relevant_info)
            text = message.lower()

            if any(keyword in text for keyword in LOCATION_KEYWORDS):
                locations = self._knowledge.search_location(message)
                if locations.exact_matches:
                    items.append(
                        KnowledgeItem(
                            type=ITEM_TYPE_LOCATION_DETAILS,
                            data=locations.model_dump(mode="json"),
                        )
                    )

            if not items and SERVICE_KEYWORD in text:
                items.append(
                    KnowledgeItem(
                        type=ITEM_TYPE_SERVICE_INFO, data=self._knowledge.basic_info
                    )
                )

            span.set_attribute(ATTR_KNOWLEDGE_ITEM_COUNT, len(items))
        KNOWLEDGE_ITEMS_RETURNED.observe(len(items))
        return KnowledgeResult(relevant_info=items, context=result.context)

    async def _reply_generated(
        self,
        session_id: str,
        message: str,
        language: Language,
        working: SessionContext,
        signals: _TurnSignals,
        knowledge: KnowledgeResult,
    ) -> TurnResult:
        reply = await self._generator.generate(
            build_system_instruction(working.language, self._prompt),
            build_user_content(knowledge.relevant_info, message),
        )

        context = self._merge(working, signals, knowledge.context, session_id, language)
        context.append_message(ROLE_USER, message, context.timestamp)
        context.append_message(ROLE_ASSISTANT, reply, context.timestamp)
        self._store.put(session_id, context)

        logger.info(
            "Context updated for session %s (topic=%s, flight_time=%s, "
            "destination=%s)",
            session_id,
            context.last_topic,
            context.flight_time,
            context.flight_destination,
        )

        topic = context.last_topic or Topic.GENERAL
        await self._publish(message, reply, language, topic, EVENT_TYPE_GPT_RESPONSE)
        return TurnResult(
            message=reply,
            language=language,
            session_id=session_id,
            context=context.snapshot(),
            topic=topic,
        )

    async def _reply_direct(
        self,
        session_id: str,
        message: str,
        language: Language,
        reply: str,
        topic: Topic,
        snapshot: ContextSnapshot,
    ) -> TurnResult:
        await self._publish(message, reply, language, topic, EVENT_TYPE_DIRECT_RESPONSE)
        return TurnResult(
            message=reply,
            language=language,
            session_id=session_id,
            context=snapshot,
            topic=topic,
        )

    async def _publish(
        self,
        message: str,
        reply: str,
        language: Language,
        topic: Topic,
        event_type: EventType,
    ) -> None:
        await self._broadcaster.publish(
            ConversationEvent(
                id=generate_id(PREFIX_EVENT),
                timestamp=self._store.now(),
                user_message=message,
                bot_response=reply,
                language=language.value,
                topic=topic.value,
                type=event_type,
            )
        )
