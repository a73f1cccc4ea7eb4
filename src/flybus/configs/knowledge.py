from typing import Any

from pydantic import BaseModel, Field


class KnowledgeSection(BaseModel):
    """A static block of service facts, matched by keyword."""

    type: str = Field(..., description="Item type reported to the prompt")
    keywords: list[str] = Field(
        default_factory=list,
        description="Keywords; a whole-word, case-insensitive hit selects the section",
    )
    data: dict[str, Any] = Field(
        default_factory=dict, description="Facts embedded verbatim in the prompt"
    )


class FlightGuidance(BaseModel):
    """Recommended departure from Reykjavík for a destination region."""

    region: str = Field(..., description="Destination region, e.g. 'europe'")
    arrive_before_departure: str = Field(
        ..., description="How long before the flight to be at the airport"
    )
    recommended_bus: str = Field(
        ..., description="Which Flybus departure to take relative to the flight"
    )


class PickupLocation(BaseModel):
    """A hotel or bus stop served by the pick-up service."""

    name: str = Field(..., description="Hotel or stop name")
    kind: str = Field(default="hotel", description="'hotel' or 'bus_stop'")
    bus_stop: str | None = Field(
        default=None, description="Stop used for pick-up when not door-to-door"
    )
    pickup_minutes_before: int = Field(
        default=30, description="Pick-up starts this long before departure"
    )
    address: str | None = Field(default=None, description="Street address")


class KnowledgeCorpus(BaseModel):
    """Static knowledge shipped with the service."""

    basic_info: dict[str, Any] = Field(
        default_factory=lambda: {
            "name": "Flybus",
            "operator": "Reykjavík Excursions",
            "description": (
                "Airport transfer between Keflavík International Airport "
                "and BSÍ Bus Terminal in Reykjavík, with optional hotel "
                "pick-up and drop-off."
            ),
            "contact": {"phone": "580 5400", "email": "info@icelandia.is"},
        },
        description="General service description",
    )
    sections: list[KnowledgeSection] = Field(
        default_factory=list, description="Keyword-matched fact sections"
    )
    flight_guidance: list[FlightGuidance] = Field(
        default_factory=list, description="Departure advice per region"
    )
    locations: list[PickupLocation] = Field(
        default_factory=list, description="Pick-up locations"
    )
