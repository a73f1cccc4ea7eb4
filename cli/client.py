"""API client for the Flybus chat endpoint."""

import logging

import httpx

from .config import CLIConfig

logger = logging.getLogger(__name__)


class ChatAPIClient:
    """Posts messages to ``/chat`` and returns the decoded reply.

    Transport and HTTP errors are returned as ``{"error": ..., "code": ...}``
    dicts so the REPL never has to handle exceptions.
    """

    def __init__(
        self,
        config: CLIConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.config = config
        self.client = httpx.AsyncClient(timeout=90.0, transport=transport)

    async def chat(self, message: str, session_id: str | None = None) -> dict:
        url = self.config.chat_url
        payload: dict[str, str] = {"message": message}
        if session_id:
            payload["sessionId"] = session_id
        headers = {"x-api-key": self.config.api_key.get_secret_value()}

        logger.debug("POST %s (session=%s)", url, session_id)

        try:
            response = await self.client.post(url, json=payload, headers=headers)
        except httpx.TimeoutException:
            return {"error": "Request timed out.", "code": "TIMEOUT"}
        except httpx.ConnectError as e:
            return {"error": f"Connection error: {e}", "code": "CONNECTION_ERROR"}

        logger.debug("Response status: %s", response.status_code)

        try:
            body = response.json()
        except ValueError:
            return {
                "error": f"HTTP {response.status_code}: {response.text}",
                "code": "HTTP_ERROR",
            }

        # 500 still carries a regular reply (the apology)
        if response.status_code in (200, 500) and "message" in body:
            return body

        if response.status_code == 422:
            return {"error": "The message was rejected as invalid.", "code": "INVALID"}
        return {
            "error": body.get("error", f"HTTP {response.status_code}"),
            "code": f"HTTP_{response.status_code}",
        }

    async def close(self) -> None:
        await self.client.aclose()
