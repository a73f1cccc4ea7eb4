"""Tests for the ordered topic rule table and language detection."""

import pytest

from flybus.core.context import (
    TOPIC_RULES,
    Language,
    Topic,
    TurnTopic,
    classify_topic,
    get_language_detector,
    is_acknowledgment,
    is_greeting,
    mentions_flight,
)


class TestClassifyTopic:
    @pytest.mark.parametrize("message", ["Hello", "hi there", "Hey!", "Hæ", "halló"])
    def test_greetings(self, message):
        assert classify_topic(message) == TurnTopic.GREETING

    def test_greeting_beats_flight(self):
        assert classify_topic("hi, when is my flight?") == TurnTopic.GREETING

    def test_flight_keyword(self):
        assert classify_topic("My flight is at 10") == TurnTopic.FLIGHT_TIMING

    @pytest.mark.parametrize("message", ["going to Europe", "bus for New York"])
    def test_flight_region(self, message):
        assert classify_topic(message) == TurnTopic.FLIGHT_TIMING

    def test_prior_flight_topic_carries(self):
        assert (
            classify_topic("how much is it?", Topic.FLIGHT_TIMING)
            == TurnTopic.FLIGHT_TIMING
        )

    def test_prior_flight_topic_beats_acknowledgment(self):
        assert classify_topic("thanks", Topic.FLIGHT_TIMING) == TurnTopic.FLIGHT_TIMING

    def test_acknowledgment(self):
        assert classify_topic("thanks") == TurnTopic.ACKNOWLEDGMENT
        assert classify_topic("Takk fyrir") == TurnTopic.ACKNOWLEDGMENT

    def test_other_prior_topic_ignored(self):
        assert classify_topic("how much is it?", Topic.GENERAL) == TurnTopic.NONE

    def test_nothing_matches(self):
        assert classify_topic("blah blah unrelated nonsense") == TurnTopic.NONE

    def test_greeting_is_first_rule(self):
        assert TOPIC_RULES[0].topic == TurnTopic.GREETING


class TestPatternHelpers:
    def test_greeting_needs_word_boundary(self):
        assert not is_greeting("highway to the airport")
        assert not is_greeting("say hello")

    def test_acknowledgment_needs_word_boundary(self):
        assert is_acknowledgment("Thank you!")
        assert not is_acknowledgment("thanksgiving schedule")

    def test_mentions_flight_case_insensitive(self):
        assert mentions_flight("FLIGHTS to Spain")
        assert not mentions_flight("bus to Spain")


class TestLanguageDetector:
    def test_fixed_detector_reports_english(self):
        detector = get_language_detector("fixed")
        assert detector.detect("Hvenær fer rútan?") == Language.ENGLISH

    def test_unknown_detector(self):
        with pytest.raises(NotImplementedError):
            get_language_detector("cld3")
