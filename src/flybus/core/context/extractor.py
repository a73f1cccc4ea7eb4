"""Entity extraction: flight time and destination region.

Pure functions of the message text.
"""

import re

from .models import Destination, ExtractedEntities

# Clock time with optional minutes and meridiem, optionally preceded by
# "at".  Group 1 never includes the "at " prefix.
TIME_PATTERN = re.compile(
    r"\b(?:at\s+)?(\d{1,2}(?::\d{2})?\s*(?:am|pm)?)\b",
    re.IGNORECASE,
)

# Declaration order is the tie-break: the first region with a keyword hit
# wins when a message names places from both.
DESTINATION_KEYWORDS: tuple[tuple[Destination, tuple[str, ...]], ...] = (
    (Destination.EUROPE, ("europe", "spain", "uk", "france", "germany")),
    (
        Destination.US_CANADA,
        ("us", "usa", "united states", "canada", "new york", "toronto"),
    ),
)


def extract_time(message: str) -> str | None:
    """Return the first clock-time token in *message*, or ``None``."""
    match = TIME_PATTERN.search(message)
    if match is None:
        return None
    return match.group(1).strip()


def extract_destination(message: str) -> Destination | None:
    """Return the destination region mentioned in *message*, or ``None``.

    Keywords match as case-insensitive substrings.
    """
    text = message.lower()
    for destination, keywords in DESTINATION_KEYWORDS:
        if any(keyword in text for keyword in keywords):
            return destination
    return None


def extract_entities(message: str) -> ExtractedEntities:
    return ExtractedEntities(
        time=extract_time(message),
        destination=extract_destination(message),
    )
