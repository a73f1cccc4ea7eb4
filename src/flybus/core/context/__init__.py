"""Dialogue context engine: extraction, classification, storage and merge."""

from .classifier import (
    TOPIC_RULES,
    classify_topic,
    is_acknowledgment,
    is_greeting,
    mentions_flight,
)
from .extractor import extract_destination, extract_entities, extract_time
from .language import FixedLanguageDetector, LanguageDetector, get_language_detector
from .merge import merge_context, new_context
from .models import (
    EMPTY_SNAPSHOT,
    PRIMARY_LANGUAGE,
    ContextSnapshot,
    Destination,
    ExtractedEntities,
    KnowledgeFeedback,
    Language,
    SessionContext,
    Topic,
    TranscriptMessage,
    TurnTopic,
)
from .store import SessionContextStore, build_session_store, get_session_store

__all__ = [
    "EMPTY_SNAPSHOT",
    "PRIMARY_LANGUAGE",
    "TOPIC_RULES",
    "ContextSnapshot",
    "Destination",
    "ExtractedEntities",
    "FixedLanguageDetector",
    "KnowledgeFeedback",
    "Language",
    "LanguageDetector",
    "SessionContext",
    "SessionContextStore",
    "Topic",
    "TranscriptMessage",
    "TurnTopic",
    "build_session_store",
    "classify_topic",
    "extract_destination",
    "extract_entities",
    "extract_time",
    "get_language_detector",
    "get_session_store",
    "is_acknowledgment",
    "is_greeting",
    "mentions_flight",
    "merge_context",
    "new_context",
]
