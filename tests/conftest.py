"""Shared fixtures: fake clock, fake collaborators and a small corpus."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from flybus.configs.knowledge import (
    FlightGuidance,
    KnowledgeCorpus,
    KnowledgeSection,
    PickupLocation,
)
from flybus.configs.system import PromptConfig
from flybus.core.broadcast import Broadcaster, ConversationEvent
from flybus.core.context import FixedLanguageDetector, SessionContextStore
from flybus.core.knowledge import KnowledgeBase
from flybus.core.llm import TextGenerator
from flybus.core.service.orchestrator import DialogueOrchestrator

TTL = timedelta(hours=1)
START = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    """Manually advanced clock for deterministic TTL tests."""

    def __init__(self, start: datetime = START) -> None:
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, delta: timedelta) -> None:
        self.current += delta


class FakeGenerator(TextGenerator):
    """Returns a canned reply and records every request."""

    def __init__(self, reply: str = "Here is what I found.") -> None:
        self.reply = reply
        self.calls: list[tuple[str, str]] = []
        self.error: Exception | None = None

    async def generate(self, system_instruction: str, user_content: str) -> str:
        self.calls.append((system_instruction, user_content))
        if self.error is not None:
            raise self.error
        return self.reply


class RecordingBroadcaster(Broadcaster):
    """Keeps published events in memory; can be told to fail."""

    def __init__(self) -> None:
        self.events: list[ConversationEvent] = []
        self.fail = False

    async def _publish(self, event: ConversationEvent) -> None:
        if self.fail:
            raise ConnectionError("channel unavailable")
        self.events.append(event)


def make_corpus() -> KnowledgeCorpus:
    return KnowledgeCorpus(
        sections=[
            KnowledgeSection(
                type="schedule",
                keywords=["schedule", "departure", "when", "time"],
                data={"to_airport": "Every 30 minutes from BSÍ."},
            ),
            KnowledgeSection(
                type="pricing",
                keywords=["price", "cost", "how much", "ticket"],
                data={"flybus_one_way": "3999 ISK"},
            ),
            KnowledgeSection(
                type="pickup_service",
                keywords=["pickup", "pick-up", "hotel"],
                data={"flybus_plus": "Hotel pick-up in Reykjavík."},
            ),
            KnowledgeSection(
                type="flight_timing",
                keywords=["flight", "airport"],
                data={"general": "Arrive 2 hours before departure."},
            ),
        ],
        flight_guidance=[
            FlightGuidance(
                region="europe",
                arrive_before_departure="2 hours",
                recommended_bus="Leave BSÍ 3 hours before your flight.",
            ),
            FlightGuidance(
                region="us_canada",
                arrive_before_departure="3 hours",
                recommended_bus="Leave BSÍ 4 hours before your flight.",
            ),
        ],
        locations=[
            PickupLocation(name="Hotel Borg", bus_stop="Bus Stop 3 - Ráðhúsið"),
            PickupLocation(name="Hilton Reykjavík Nordica"),
            PickupLocation(name="BSÍ Bus Terminal", kind="bus_stop"),
        ],
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock: FakeClock) -> SessionContextStore:
    return SessionContextStore(ttl=TTL, clock=clock)


@pytest.fixture
def knowledge() -> KnowledgeBase:
    return KnowledgeBase(make_corpus())


@pytest.fixture
def generator() -> FakeGenerator:
    return FakeGenerator()


@pytest.fixture
def broadcaster() -> RecordingBroadcaster:
    return RecordingBroadcaster()


@pytest.fixture
def orchestrator(
    store: SessionContextStore,
    knowledge: KnowledgeBase,
    generator: FakeGenerator,
    broadcaster: RecordingBroadcaster,
) -> DialogueOrchestrator:
    return DialogueOrchestrator(
        store=store,
        knowledge=knowledge,
        generator=generator,
        broadcaster=broadcaster,
        detector=FixedLanguageDetector(),
        prompt=PromptConfig(),
    )
