"""
AI gateway proxy for the interview-chat function.

Turns a ``ChatRequest`` into an upstream streaming chat-completion call:
system prompt from the mood plugin, a server-side window over the
transcript, and the model parameters from service configuration.

Last Grunted: 10/18/2026
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from moods.prompts import build_system_prompt

from .models import ChatMessage, ChatRequest, MessageRole
from .transcript import WINDOW_BRIDGE_NOTE, window_messages


__all__ = [
    "DEFAULT_GATEWAY_URL",
    "DEFAULT_MODEL",
    "GatewayError",
    "GatewayNotConfiguredError",
    "GatewaySettings",
    "InterviewGateway",
]


logger = logging.getLogger(__name__)

DEFAULT_GATEWAY_URL = "https://ai.gateway.lovable.dev/v1/chat/completions"
DEFAULT_MODEL = "openai/gpt-5-mini"
DEFAULT_TEMPERATURE = 0.85
DEFAULT_MAX_COMPLETION_TOKENS = 300


class GatewayError(Exception):
    """Raised when the gateway answers with a non-success status."""

    def __init__(self, status_code: int, detail: str = "") -> None:
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"AI gateway returned {status_code}")


class GatewayNotConfiguredError(Exception):
    """Raised when no gateway API key is configured."""


@dataclass(frozen=True)
class GatewaySettings:
    """Upstream endpoint and model parameters."""

    url: str = DEFAULT_GATEWAY_URL
    api_key: Optional[str] = None
    model: str = DEFAULT_MODEL
    temperature: float = DEFAULT_TEMPERATURE
    max_completion_tokens: int = DEFAULT_MAX_COMPLETION_TOKENS


class InterviewGateway:
    """
    Forwards interview turns to the AI gateway.

    Example:
        >>> gateway = InterviewGateway(GatewaySettings(api_key="..."), http_client)
        >>> response = await gateway.open_stream(request)
        >>> async for chunk in response.aiter_bytes():
        ...     ...
        >>> await response.aclose()
    """

    def __init__(self, settings: GatewaySettings, http_client: httpx.AsyncClient) -> None:
        self.settings = settings
        self._http_client = http_client

    @property
    def configured(self) -> bool:
        return bool(self.settings.api_key)

    def build_body(self, request: ChatRequest) -> dict[str, Any]:
        """
        Upstream chat-completion body for one turn.

        The client already windows what it sends; the gateway windows again
        so direct callers are bounded too, with a system note marking the gap.
        """
        system_prompt = build_system_prompt(
            pet_name=request.pet_name,
            pet_type=request.pet_type,
            user_message_count=request.user_message_count,
            photo_captions=request.photo_captions,
            photo_context_brief=request.photo_context_brief,
            product_type=request.product_type,
            mood=request.mood,
        )
        bridge = ChatMessage(role=MessageRole.SYSTEM, content=WINDOW_BRIDGE_NOTE)
        windowed = window_messages(request.messages, bridge=bridge)
        messages = [ChatMessage(role=MessageRole.SYSTEM, content=system_prompt), *windowed]

        return {
            "model": self.settings.model,
            "messages": [m.model_dump(mode="json") for m in messages],
            "stream": True,
            "temperature": self.settings.temperature,
            "max_completion_tokens": self.settings.max_completion_tokens,
        }

    async def open_stream(self, request: ChatRequest) -> httpx.Response:
        """
        Send the turn upstream and return the open streaming response.

        The caller owns the returned response and must close it.

        Raises:
            GatewayNotConfiguredError: If no API key is set.
            GatewayError: On a non-success upstream status.
            httpx.HTTPError: On transport failures.
        """
        if not self.configured:
            raise GatewayNotConfiguredError("AI gateway API key is not configured")

        body = self.build_body(request)
        logger.info(
            "Forwarding turn to gateway: model=%s messages=%d user_messages=%d mood=%s",
            self.settings.model,
            len(body["messages"]),
            request.user_message_count,
            request.mood or "-",
        )

        upstream = self._http_client.build_request(
            "POST",
            self.settings.url,
            json=body,
            headers={
                "Authorization": f"Bearer {self.settings.api_key}",
                "Content-Type": "application/json",
            },
        )
        response = await self._http_client.send(upstream, stream=True)

        if not response.is_success:
            try:
                detail = (await response.aread()).decode("utf-8", errors="replace")[:500]
            finally:
                await response.aclose()
            logger.error("AI gateway error: %d %s", response.status_code, detail)
            raise GatewayError(response.status_code, detail)

        return response
