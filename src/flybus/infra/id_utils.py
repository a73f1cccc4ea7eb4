"""Identifiers minted by the server: ``sess_<hex>`` and ``evt_<hex>``."""

import uuid

PREFIX_SESSION = "sess"
PREFIX_EVENT = "evt"


def generate_id(prefix: str) -> str:
    """Return a random v4 UUID in hex form, tagged with *prefix*."""
    return f"{prefix}_{uuid.uuid4().hex}"
