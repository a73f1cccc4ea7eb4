"""Shared-secret authentication for the chat endpoint.

Clients send the secret in the ``x-api-key`` header.  When no key is
configured every request is rejected.  ``Unauthorized`` is turned into a
401 response by the handlers in ``flybus.api.exceptions``.
"""

import logging
import secrets
from typing import Annotated

from fastapi import Depends
from fastapi.security import APIKeyHeader

from flybus.configs.config import get_api_config
from flybus.configs.system import APIConfig

logger = logging.getLogger(__name__)

API_KEY_HEADER = "x-api-key"

_api_key_header = APIKeyHeader(name=API_KEY_HEADER, auto_error=False)


class Unauthorized(Exception):
    """Raised when the request carries no valid API key."""


async def verify_api_key(
    api_key: Annotated[str | None, Depends(_api_key_header)],
    config: Annotated[APIConfig, Depends(get_api_config)],
) -> None:
    expected = config.api_key.get_secret_value()
    if not api_key or not expected:
        logger.warning("Rejected request with missing API key")
        raise Unauthorized("Missing API key")
    if not secrets.compare_digest(api_key.encode(), expected.encode()):
        logger.warning("Rejected request with invalid API key")
        raise Unauthorized("Invalid API key")
