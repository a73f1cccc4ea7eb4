"""Tests for the interactive CLI against a mocked HTTP transport."""

import io
import json

import httpx
import pytest

from cli.client import ChatAPIClient
from cli.config import CLIConfig
from cli.flybus_cli import FlybusCLI


def _reply(session_id: str, message: str = "Hi!") -> dict:
    return {
        "message": message,
        "language": "en",
        "sessionId": session_id,
        "context": {
            "lastTopic": "flight_timing",
            "flightTime": "14:00",
            "flightDestination": None,
        },
    }


class TestChatAPIClient:
    @pytest.mark.asyncio
    async def test_sends_key_and_session(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=_reply("sess_1"))

        config = CLIConfig(api_key="k")
        client = ChatAPIClient(config, transport=httpx.MockTransport(handler))
        reply = await client.chat("hello", "sess_1")
        await client.close()

        assert reply["sessionId"] == "sess_1"
        assert seen[0].headers["x-api-key"] == "k"
        assert json.loads(seen[0].content) == {
            "message": "hello",
            "sessionId": "sess_1",
        }

    @pytest.mark.asyncio
    async def test_unauthorized(self):
        transport = httpx.MockTransport(
            lambda request: httpx.Response(401, json={"error": "Unauthorized request"})
        )
        client = ChatAPIClient(CLIConfig(), transport=transport)
        reply = await client.chat("hello")
        await client.close()

        assert reply == {"error": "Unauthorized request", "code": "HTTP_401"}

    @pytest.mark.asyncio
    async def test_apology_on_500_is_a_reply(self):
        transport = httpx.MockTransport(
            lambda request: httpx.Response(500, json=_reply("sess_1", "Sorry"))
        )
        client = ChatAPIClient(CLIConfig(), transport=transport)
        reply = await client.chat("hello")
        await client.close()

        assert reply["message"] == "Sorry"


class TestFlybusCLI:
    @pytest.mark.asyncio
    async def test_keeps_session_between_turns(self):
        sessions: list[str | None] = []

        def handler(request: httpx.Request) -> httpx.Response:
            sessions.append(json.loads(request.content).get("sessionId"))
            return httpx.Response(200, json=_reply("sess_new"))

        config = CLIConfig()
        output = io.StringIO()
        cli = FlybusCLI(
            config,
            input_stream=io.StringIO("hello\nwhen is my flight?\nexit\n"),
            output_stream=output,
            client=ChatAPIClient(config, transport=httpx.MockTransport(handler)),
        )
        await cli.run()

        assert sessions == [None, "sess_new"]
        text = output.getvalue()
        assert "Hi!" in text
        assert "flight time=14:00" in text
        assert "Goodbye!" in text

    @pytest.mark.asyncio
    async def test_new_session_command(self):
        sessions: list[str | None] = []

        def handler(request: httpx.Request) -> httpx.Response:
            sessions.append(json.loads(request.content).get("sessionId"))
            return httpx.Response(200, json=_reply("sess_new"))

        config = CLIConfig()
        cli = FlybusCLI(
            config,
            input_stream=io.StringIO("hello\n/new\nhello again\n"),
            output_stream=io.StringIO(),
            client=ChatAPIClient(config, transport=httpx.MockTransport(handler)),
        )
        await cli.run()

        assert sessions == [None, None]
