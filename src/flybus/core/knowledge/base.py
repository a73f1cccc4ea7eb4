"""Keyword lookup over the static Flybus knowledge corpus.

The corpus is immutable after construction, so one ``KnowledgeBase`` is
shared by every turn without synchronisation.
"""

import logging
import re

from flybus.configs.knowledge import (
    FlightGuidance,
    KnowledgeCorpus,
    KnowledgeSection,
    PickupLocation,
)
from flybus.core.context.models import KnowledgeFeedback, SessionContext, Topic

from .models import (
    ITEM_TYPE_FLIGHT_GUIDANCE,
    KnowledgeItem,
    KnowledgeResult,
    LocationSearchResult,
)

logger = logging.getLogger(__name__)

# Section types that make departure guidance relevant for a flight context.
_TIMING_SECTION_TYPES = frozenset({"schedule", "flight_timing", "pickup_service"})

# Words too common in location names to count as a partial match.
_LOCATION_STOP_WORDS = frozenset(
    {"hotel", "hostel", "guesthouse", "reykjavík", "reykjavik", "bus", "stop", "the"}
)
_MIN_PARTIAL_WORD_LENGTH = 4

_WORD_PATTERN = re.compile(r"[\w'-]+")


def _keyword_pattern(keywords: list[str]) -> re.Pattern[str] | None:
    if not keywords:
        return None
    alternatives = "|".join(re.escape(k.lower()) for k in keywords)
    return re.compile(rf"\b(?:{alternatives})\b", re.IGNORECASE)


class KnowledgeBase:
    """Answers ``lookup`` and ``search_location`` from a ``KnowledgeCorpus``."""

    def __init__(self, corpus: KnowledgeCorpus) -> None:
        self._corpus = corpus
        self._sections: list[tuple[KnowledgeSection, re.Pattern[str] | None]] = [
            (section, _keyword_pattern(section.keywords)) for section in corpus.sections
        ]
        self._guidance: dict[str, FlightGuidance] = {
            g.region: g for g in corpus.flight_guidance
        }

    @property
    def basic_info(self) -> dict:
        return self._corpus.basic_info

    def lookup(self, message: str, context: SessionContext) -> KnowledgeResult:
        """Return the sections relevant to *message* plus context feedback.

        When the conversation is about flight timing and a destination is
        known, the departure guidance for that region is attached and the
        feedback confirms the topic and the region it was computed for.
        """
        items = [
            KnowledgeItem(type=section.type, data=section.data)
            for section, pattern in self._sections
            if pattern is not None and pattern.search(message)
        ]

        feedback = KnowledgeFeedback()
        matched_types = {item.type for item in items}
        if (
            context.last_topic == Topic.FLIGHT_TIMING
            and matched_types & _TIMING_SECTION_TYPES
        ):
            feedback = KnowledgeFeedback(last_topic=Topic.FLIGHT_TIMING)
            guidance = (
                self._guidance.get(context.flight_destination.value)
                if context.flight_destination is not None
                else None
            )
            if guidance is not None:
                items.append(
                    KnowledgeItem(
                        type=ITEM_TYPE_FLIGHT_GUIDANCE,
                        data={
                            **guidance.model_dump(),
                            "flight_time": context.flight_time,
                        },
                    )
                )
                feedback = KnowledgeFeedback(
                    last_topic=Topic.FLIGHT_TIMING,
                    flight_time=context.flight_time,
                    flight_destination=context.flight_destination,
                )

        logger.debug(
            "Knowledge lookup matched %d item(s): %s",
            len(items),
            [item.type for item in items],
        )
        return KnowledgeResult(relevant_info=items, context=feedback)

    def search_location(self, message: str) -> LocationSearchResult:
        """Find pick-up locations named in *message*.

        A location is an exact match when its full name appears in the
        message and a partial match when one of its distinctive words does.
        """
        text = message.lower()
        words = set(_WORD_PATTERN.findall(text))
        exact: list[PickupLocation] = []
        partial: list[PickupLocation] = []
        for location in self._corpus.locations:
            name = location.name.lower()
            if name in text:
                exact.append(location)
                continue
            significant = {
                w
                for w in _WORD_PATTERN.findall(name)
                if len(w) >= _MIN_PARTIAL_WORD_LENGTH and w not in _LOCATION_STOP_WORDS
            }
            if significant & words:
                partial.append(location)
        return LocationSearchResult(exact_matches=exact, partial_matches=partial)
