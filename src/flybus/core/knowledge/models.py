"""Knowledge lookup result types."""

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, Field

from flybus.configs.knowledge import PickupLocation
from flybus.core.context.models import KnowledgeFeedback

ITEM_TYPE_LOCATION_DETAILS = "location_details"
ITEM_TYPE_SERVICE_INFO = "service_info"
ITEM_TYPE_FLIGHT_GUIDANCE = "flight_guidance"


class KnowledgeItem(BaseModel):
    """One fact block embedded verbatim into the generation prompt."""

    type: str = Field(description="Item type, e.g. 'schedule' or 'location_details'")
    data: Any = Field(description="Opaque JSON-serialisable payload")


class LocationSearchResult(BaseModel):
    exact_matches: list[PickupLocation] = Field(default_factory=list)
    partial_matches: list[PickupLocation] = Field(default_factory=list)


@dataclass
class KnowledgeResult:
    relevant_info: list[KnowledgeItem] = field(default_factory=list)
    context: KnowledgeFeedback = field(default_factory=KnowledgeFeedback)
