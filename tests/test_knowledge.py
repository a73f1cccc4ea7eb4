"""Tests for the keyword knowledge lookup and location search."""

from datetime import datetime, timezone

from flybus.core.context import (
    Destination,
    KnowledgeFeedback,
    Language,
    SessionContext,
    Topic,
)
from flybus.core.knowledge import ITEM_TYPE_FLIGHT_GUIDANCE, KnowledgeBase


def _context(**fields) -> SessionContext:
    return SessionContext(
        session_id="sess_1",
        language=Language.ENGLISH,
        timestamp=datetime(2024, 6, 1, tzinfo=timezone.utc),
        **fields,
    )


def _types(result) -> list[str]:
    return [item.type for item in result.relevant_info]


# =========================================================================
# lookup
# =========================================================================


class TestLookup:
    def test_matches_by_keyword(self, knowledge: KnowledgeBase):
        result = knowledge.lookup("How much is a ticket?", _context())
        assert _types(result) == ["pricing"]
        assert result.context == KnowledgeFeedback()

    def test_case_insensitive(self, knowledge: KnowledgeBase):
        assert _types(knowledge.lookup("PRICE please", _context())) == ["pricing"]

    def test_whole_words_only(self, knowledge: KnowledgeBase):
        # "sometimes" contains "time" but is not the keyword
        assert knowledge.lookup("sometimes", _context()).relevant_info == []

    def test_no_match(self, knowledge: KnowledgeBase):
        result = knowledge.lookup("blah blah unrelated nonsense", _context())
        assert result.relevant_info == []
        assert result.context.is_empty

    def test_flight_guidance_for_known_destination(self, knowledge: KnowledgeBase):
        context = _context(
            last_topic=Topic.FLIGHT_TIMING,
            flight_time="14:00",
            flight_destination=Destination.US_CANADA,
        )
        result = knowledge.lookup("What time is my pickup?", context)

        assert ITEM_TYPE_FLIGHT_GUIDANCE in _types(result)
        guidance = result.relevant_info[-1].data
        assert guidance["region"] == "us_canada"
        assert guidance["flight_time"] == "14:00"
        assert result.context == KnowledgeFeedback(
            last_topic=Topic.FLIGHT_TIMING,
            flight_time="14:00",
            flight_destination=Destination.US_CANADA,
        )

    def test_flight_topic_without_destination(self, knowledge: KnowledgeBase):
        context = _context(last_topic=Topic.FLIGHT_TIMING, flight_time="14:00")
        result = knowledge.lookup("when should I leave for the airport", context)

        assert ITEM_TYPE_FLIGHT_GUIDANCE not in _types(result)
        assert result.context == KnowledgeFeedback(last_topic=Topic.FLIGHT_TIMING)

    def test_no_guidance_for_unrelated_section(self, knowledge: KnowledgeBase):
        context = _context(
            last_topic=Topic.FLIGHT_TIMING, flight_destination=Destination.EUROPE
        )
        result = knowledge.lookup("how much does it cost", context)
        assert _types(result) == ["pricing"]
        assert result.context.is_empty

    def test_no_guidance_without_flight_topic(self, knowledge: KnowledgeBase):
        context = _context(flight_destination=Destination.EUROPE)
        result = knowledge.lookup("what time does it leave", context)
        assert _types(result) == ["schedule"]


# =========================================================================
# search_location
# =========================================================================


class TestSearchLocation:
    def test_exact_match(self, knowledge: KnowledgeBase):
        result = knowledge.search_location("Pickup at Hotel Borg please")
        assert [loc.name for loc in result.exact_matches] == ["Hotel Borg"]

    def test_partial_match(self, knowledge: KnowledgeBase):
        result = knowledge.search_location("I'm staying at the Nordica")
        assert result.exact_matches == []
        assert [loc.name for loc in result.partial_matches] == [
            "Hilton Reykjavík Nordica"
        ]

    def test_common_words_do_not_match(self, knowledge: KnowledgeBase):
        result = knowledge.search_location("which hotel bus stop in Reykjavík")
        assert result.exact_matches == []
        assert result.partial_matches == []

    def test_basic_info(self, knowledge: KnowledgeBase):
        assert knowledge.basic_info["name"] == "Flybus"
