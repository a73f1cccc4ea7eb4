"""Dialogue context data model.

``SessionContext`` is the per-session state kept between turns.  Only
``flight_time`` and ``flight_destination`` (the "sticky" fields) and
``last_topic`` carry meaning from one turn to the next; ``messages`` is a
transcript that is not replayed into generation.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Literal


class Language(str, Enum):
    ENGLISH = "en"
    ICELANDIC = "is"


PRIMARY_LANGUAGE = Language.ENGLISH


class Topic(str, Enum):
    """Topic stored on the context and reported in broadcast events."""

    FLIGHT_TIMING = "flight_timing"
    ACKNOWLEDGMENT = "acknowledgment"
    GREETING = "greeting"
    GENERAL = "general"
    UNKNOWN = "unknown"


class TurnTopic(str, Enum):
    """Advisory label the classifier assigns to a single message."""

    GREETING = "greeting"
    ACKNOWLEDGMENT = "acknowledgment"
    FLIGHT_TIMING = "flight_timing"
    NONE = "none"


class Destination(str, Enum):
    EUROPE = "europe"
    US_CANADA = "us_canada"


ROLE_USER = "user"
ROLE_ASSISTANT = "assistant"


@dataclass
class TranscriptMessage:
    role: Literal["user", "assistant"]
    content: str
    timestamp: datetime


@dataclass(frozen=True)
class ExtractedEntities:
    """Entities found in a single message; ``None`` means not mentioned."""

    time: str | None = None
    destination: Destination | None = None


@dataclass(frozen=True)
class KnowledgeFeedback:
    """Context hints returned by the knowledge layer.

    Non-null values override what the extractor observed this turn.
    """

    last_topic: Topic | None = None
    flight_time: str | None = None
    flight_destination: Destination | None = None

    @property
    def is_empty(self) -> bool:
        return (
            self.last_topic is None
            and self.flight_time is None
            and self.flight_destination is None
        )


@dataclass(frozen=True)
class ContextSnapshot:
    """Public view of a context returned with every reply."""

    last_topic: Topic | None = None
    flight_time: str | None = None
    flight_destination: Destination | None = None


EMPTY_SNAPSHOT = ContextSnapshot()


@dataclass
class SessionContext:
    """Dialogue state for one session."""

    session_id: str
    language: Language
    timestamp: datetime
    last_topic: Topic | None = None
    flight_time: str | None = None
    flight_destination: Destination | None = None
    messages: list[TranscriptMessage] = field(default_factory=list)

    def snapshot(self) -> ContextSnapshot:
        return ContextSnapshot(
            last_topic=self.last_topic,
            flight_time=self.flight_time,
            flight_destination=self.flight_destination,
        )

    def append_message(
        self,
        role: Literal["user", "assistant"],
        content: str,
        timestamp: datetime,
    ) -> None:
        self.messages.append(
            TranscriptMessage(role=role, content=content, timestamp=timestamp)
        )
