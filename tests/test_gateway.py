"""
Tests for the AI gateway forwarder.

Last Grunted: 10/18/2026
"""

from __future__ import annotations

import gzip
import json

import httpx
import pytest

from photorabbit.gateway import (
    GatewayError,
    GatewayNotConfiguredError,
    GatewaySettings,
    InterviewGateway,
)
from photorabbit.models import ChatMessage, ChatRequest, MessageRole
from photorabbit.transcript import WINDOW_BRIDGE_NOTE
from tests.mock_data import sse_stream


def make_request(count: int = 1, **fields: object) -> ChatRequest:
    messages = [
        ChatMessage(role=MessageRole.USER if i % 2 == 0 else MessageRole.ASSISTANT, content=f"m{i}")
        for i in range(count)
    ]
    return ChatRequest(messages=messages, pet_name="Luna", pet_type="cat", user_message_count=1, **fields)


def make_gateway(handler, api_key: str | None = "key") -> InterviewGateway:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return InterviewGateway(GatewaySettings(url="https://gateway.test/v1/chat", api_key=api_key), client)


def unreachable(request: httpx.Request) -> httpx.Response:
    raise AssertionError("gateway should not be called")


class TestBuildBody:
    """Tests for InterviewGateway.build_body."""

    def test_body_fields(self) -> None:
        """Model parameters, streaming and the system prompt first."""
        body = make_gateway(unreachable).build_body(make_request(mood="memorial"))

        assert body["model"] == "openai/gpt-5-mini"
        assert body["stream"] is True
        assert body["temperature"] == 0.85
        assert body["max_completion_tokens"] == 300
        assert body["messages"][0]["role"] == "system"
        assert '"Luna". They are a cat.' in body["messages"][0]["content"]
        assert body["messages"][1] == {"role": "user", "content": "m0"}

    def test_photo_brief_in_prompt(self) -> None:
        """The analysis brief reaches the system prompt."""
        request = make_request(photo_context_brief="Photo 1: Luna on a windowsill")

        body = make_gateway(unreachable).build_body(request)

        assert "Photo 1: Luna on a windowsill" in body["messages"][0]["content"]

    def test_windowed_with_bridge(self) -> None:
        """Long transcripts get the bridge note between slices."""
        body = make_gateway(unreachable).build_body(make_request(30))

        assert len(body["messages"]) == 22
        assert body["messages"][7] == {"role": "system", "content": WINDOW_BRIDGE_NOTE}


class TestOpenStream:
    """Tests for InterviewGateway.open_stream."""

    @pytest.mark.asyncio
    async def test_success(self) -> None:
        """Posts the body with the bearer key and returns the open stream."""
        seen: list[httpx.Request] = []
        data = sse_stream(["Hi ", "Luna"])

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, content=data)

        gateway = make_gateway(handler)
        response = await gateway.open_stream(make_request())
        body = b"".join([chunk async for chunk in response.aiter_bytes()])
        await response.aclose()

        assert body == data
        assert seen[0].headers["Authorization"] == "Bearer key"
        assert str(seen[0].url) == "https://gateway.test/v1/chat"
        assert json.loads(seen[0].content)["stream"] is True

    @pytest.mark.asyncio
    async def test_compressed_body_decoded(self) -> None:
        """Content-Encoding is undone before the body is relayed."""
        data = sse_stream(["Hi ", "Luna"])

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200,
                headers={"Content-Encoding": "gzip"},
                content=gzip.compress(data),
            )

        response = await make_gateway(handler).open_stream(make_request())
        body = b"".join([chunk async for chunk in response.aiter_bytes()])
        await response.aclose()

        assert body == data

    @pytest.mark.asyncio
    async def test_error_status(self) -> None:
        """Non-success statuses raise GatewayError with the status."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(429, text="slow down")

        with pytest.raises(GatewayError) as exc_info:
            await make_gateway(handler).open_stream(make_request())

        assert exc_info.value.status_code == 429

    @pytest.mark.asyncio
    async def test_not_configured(self) -> None:
        """No API key, no upstream call."""
        gateway = make_gateway(unreachable, api_key=None)

        assert gateway.configured is False
        with pytest.raises(GatewayNotConfiguredError):
            await gateway.open_stream(make_request())
