"""Keyword topic classification.

Rules live in ``TOPIC_RULES`` and are evaluated in order; the first rule
that matches decides the label.  The label is advisory: the orchestrator
checks greetings before loading any context and acknowledgments only after
the knowledge lookup came back empty.
"""

import re
from dataclasses import dataclass

from .models import Topic, TurnTopic

GREETING_PATTERN = re.compile(r"^\s*(hi|hello|hey|hæ|halló|sæl)\b", re.IGNORECASE)
ACKNOWLEDGMENT_PATTERN = re.compile(
    r"^\s*(thanks|thank you|takk|þakka)\b", re.IGNORECASE
)
FLIGHT_KEYWORD_PATTERN = re.compile(r"flight", re.IGNORECASE)
FLIGHT_REGION_PATTERN = re.compile(
    r"\b(to|for)\s+(us|canada|europe|new york)\b", re.IGNORECASE
)


@dataclass(frozen=True)
class TopicRule:
    """Maps a message pattern, or a prior stored topic, to a turn label."""

    topic: TurnTopic
    pattern: re.Pattern[str] | None = None
    prior_topic: Topic | None = None

    def matches(self, message: str, prior_topic: Topic | None) -> bool:
        if self.pattern is not None:
            return self.pattern.search(message) is not None
        return self.prior_topic is not None and prior_topic == self.prior_topic


TOPIC_RULES: tuple[TopicRule, ...] = (
    TopicRule(TurnTopic.GREETING, pattern=GREETING_PATTERN),
    TopicRule(TurnTopic.FLIGHT_TIMING, pattern=FLIGHT_KEYWORD_PATTERN),
    TopicRule(TurnTopic.FLIGHT_TIMING, pattern=FLIGHT_REGION_PATTERN),
    TopicRule(TurnTopic.FLIGHT_TIMING, prior_topic=Topic.FLIGHT_TIMING),
    TopicRule(TurnTopic.ACKNOWLEDGMENT, pattern=ACKNOWLEDGMENT_PATTERN),
)


def classify_topic(message: str, prior_topic: Topic | None = None) -> TurnTopic:
    """Label *message* using the first matching rule in ``TOPIC_RULES``."""
    for rule in TOPIC_RULES:
        if rule.matches(message, prior_topic):
            return rule.topic
    return TurnTopic.NONE


def is_greeting(message: str) -> bool:
    return GREETING_PATTERN.search(message) is not None


def is_acknowledgment(message: str) -> bool:
    return ACKNOWLEDGMENT_PATTERN.search(message) is not None


def mentions_flight(message: str) -> bool:
    return FLIGHT_KEYWORD_PATTERN.search(message) is not None
