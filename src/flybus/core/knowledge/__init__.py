from .base import KnowledgeBase
from .models import (
    ITEM_TYPE_FLIGHT_GUIDANCE,
    ITEM_TYPE_LOCATION_DETAILS,
    ITEM_TYPE_SERVICE_INFO,
    KnowledgeItem,
    KnowledgeResult,
    LocationSearchResult,
)

__all__ = [
    "ITEM_TYPE_FLIGHT_GUIDANCE",
    "ITEM_TYPE_LOCATION_DETAILS",
    "ITEM_TYPE_SERVICE_INFO",
    "KnowledgeBase",
    "KnowledgeItem",
    "KnowledgeResult",
    "LocationSearchResult",
]
