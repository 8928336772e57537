"""
Streaming interview chat client.

Drives one conversational turn: saves the user's message, sends a bounded
transcript to the interview-chat function, decodes the streamed reply as it
arrives, and saves the finished assistant message.

Every failure is handled at the turn boundary: ``send_message`` returns a
``TurnResult`` and publishes a user-visible notice instead of raising.
Cancelling the task that awaits ``send_message`` aborts the turn at its
current suspension point.

Thread Safety:
    One turn at a time per client. A second ``send_message`` while a turn is
    in flight returns ``TurnOutcome.BUSY`` without touching the store.

Last Grunted: 10/18/2026
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Sequence

import httpx

from .chain_log import NULL_CHAIN_LOG, ChainLogSink, ChainPhase, ChainStatus
from .models import ChatRequest, InterviewMessage, MessageRole
from .pubsub import ChatEventPublisher, NoticeLevel
from .store import MessageStore, StoreError
from .stream_decoder import ChatStreamDecoder
from .transcript import build_transcript, count_user_messages, window_messages


__all__ = [
    "ChatStreamError",
    "CreditsExhaustedError",
    "InterviewChatClient",
    "PARTIAL_REPLY_MARKER",
    "RateLimitedError",
    "TurnOutcome",
    "TurnResult",
]


logger = logging.getLogger(__name__)

PARTIAL_REPLY_MARKER = " […]"
DEFAULT_TIMEOUT_SECONDS = 60.0

NOTICE_SAVE_FAILED = "Failed to save message"
NOTICE_REPLY_SAVE_FAILED = "Failed to save the reply"
NOTICE_RATE_LIMITED = "Too many requests, please wait a moment"
NOTICE_CREDITS_EXHAUSTED = "AI credits exhausted"
NOTICE_STREAM_FAILED = "Failed to get AI response"
NOTICE_BUSY = "Still answering your last message"


class TurnOutcome(str, Enum):
    """How a chat turn ended."""

    COMPLETED = "completed"
    EMPTY = "empty"
    BUSY = "busy"
    SAVE_FAILED = "save_failed"
    RATE_LIMITED = "rate_limited"
    CREDITS_EXHAUSTED = "credits_exhausted"
    STREAM_FAILED = "stream_failed"
    REPLY_SAVE_FAILED = "reply_save_failed"


class ChatStreamError(Exception):
    """Raised when the completion stream cannot be opened or read."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class RateLimitedError(ChatStreamError):
    """Upstream answered 429."""


class CreditsExhaustedError(ChatStreamError):
    """Upstream answered 402."""


@dataclass
class TurnResult:
    """
    Result of one ``send_message`` call.

    Attributes:
        outcome: How the turn ended.
        content: Assistant text that was received (may be partial on failure).
        user_message: The saved user message, if step one succeeded.
        assistant_message: The saved assistant message, if any.
        notice: The notice shown to the user, if any.
    """

    outcome: TurnOutcome
    content: str = ""
    user_message: Optional[InterviewMessage] = None
    assistant_message: Optional[InterviewMessage] = None
    notice: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.outcome == TurnOutcome.COMPLETED


class InterviewChatClient:
    """
    Client for one project's interview chat.

    Example:
        >>> client = InterviewChatClient(
        ...     "proj_123",
        ...     store=InMemoryMessageStore(),
        ...     chat_url="http://127.0.0.1:8787/interview-chat",
        ... )
        >>> result = await client.send_message(
        ...     "he brings me his ball every morning",
        ...     prior_messages=await store.list_messages("proj_123"),
        ...     subject_name="Max",
        ...     subject_type="dog",
        ... )
        >>> result.outcome
        <TurnOutcome.COMPLETED: 'completed'>
    """

    def __init__(
        self,
        project_id: str,
        store: MessageStore,
        chat_url: str,
        *,
        api_key: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        publisher: Optional[ChatEventPublisher] = None,
        chain_log: Optional[ChainLogSink] = None,
        persist_partial: bool = False,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        """
        Bind the client to a project.

        Args:
            project_id: Project whose interview this client drives.
            store: Where messages are persisted.
            chat_url: Streaming completion endpoint (the interview-chat function).
            api_key: Sent as a bearer token when given.
            http_client: Shared client; one is created (and owned) otherwise.
            publisher: Receives streaming content and notices.
            chain_log: Receives one event per turn.
            persist_partial: Save partial replies (with a marker) when the
                stream breaks mid-reply. Off by default.
            timeout_seconds: Timeout for an owned HTTP client.

        Raises:
            ValueError: If project_id or chat_url is empty.
        """
        if not project_id:
            raise ValueError("project_id is required")
        if not chat_url:
            raise ValueError("chat_url is required")

        self.project_id = project_id
        self.store = store
        self.chat_url = chat_url
        self.publisher = publisher or ChatEventPublisher()
        self.chain_log: ChainLogSink = chain_log or NULL_CHAIN_LOG
        self.persist_partial = persist_partial

        self._api_key = api_key
        self._owns_http_client = http_client is None
        self._http_client = http_client or httpx.AsyncClient(timeout=timeout_seconds)
        self._is_streaming = False
        self._streaming_content = ""

    @property
    def is_streaming(self) -> bool:
        """Whether a turn is in flight."""
        return self._is_streaming

    @property
    def streaming_content(self) -> str:
        """Assistant text received so far in the current turn."""
        return self._streaming_content

    async def aclose(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_http_client:
            await self._http_client.aclose()

    async def __aenter__(self) -> "InterviewChatClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    # -------------------------------------------------------------------------
    # Turn
    # -------------------------------------------------------------------------

    def build_request(
        self,
        user_text: str,
        prior_messages: Sequence[InterviewMessage],
        subject_name: str,
        subject_type: str,
        photo_captions: Optional[list[str]] = None,
        photo_context_brief: Optional[str] = None,
        product_type: Optional[str] = None,
        mood: Optional[str] = None,
    ) -> ChatRequest:
        """
        Upstream request for a turn: windowed transcript plus metadata.

        ``userMessageCount`` is counted over the full transcript, before
        windowing.
        """
        transcript = build_transcript(prior_messages, user_text)
        return ChatRequest(
            messages=window_messages(transcript),
            pet_name=subject_name,
            pet_type=subject_type,
            user_message_count=count_user_messages(transcript),
            photo_captions=photo_captions,
            photo_context_brief=photo_context_brief,
            product_type=product_type,
            mood=mood,
        )

    async def send_message(
        self,
        user_text: str,
        prior_messages: Sequence[InterviewMessage],
        subject_name: str,
        subject_type: str,
        photo_captions: Optional[list[str]] = None,
        photo_context_brief: Optional[str] = None,
        product_type: Optional[str] = None,
        mood: Optional[str] = None,
    ) -> TurnResult:
        """
        Run one chat turn.

        The user message is saved before anything is sent upstream. The
        assistant message is saved only after the stream ends with content.

        Args:
            user_text: What the user typed.
            prior_messages: Stored transcript before this turn, oldest first.
            subject_name: Subject's name (``petName``).
            subject_type: Subject type (``petType``).
            photo_captions: Captions of uploaded photos.
            photo_context_brief: Detailed per-photo brief, when available.
            product_type: What is being made, e.g. "storybook".
            mood: Interview mood id.

        Returns:
            TurnResult describing what was saved and shown.
        """
        if self._is_streaming:
            logger.warning("send_message rejected: turn already in flight for %s", self.project_id)
            return await self._finish_with_notice(TurnResult(TurnOutcome.BUSY), NOTICE_BUSY)

        self._is_streaming = True
        self._streaming_content = ""
        started = time.monotonic()
        event_id = self.chain_log.add_event(
            ChainPhase.INTERVIEW,
            "interview-chat turn",
            ChainStatus.RUNNING,
            input=user_text,
        )

        result: Optional[TurnResult] = None
        try:
            result = await self._run_turn(
                user_text,
                lambda: self.build_request(
                    user_text,
                    prior_messages,
                    subject_name,
                    subject_type,
                    photo_captions=photo_captions,
                    photo_context_brief=photo_context_brief,
                    product_type=product_type,
                    mood=mood,
                ),
            )
        finally:
            self._is_streaming = False
            self._streaming_content = ""
            duration_ms = round((time.monotonic() - started) * 1000, 1)
            if result is None:
                # Cancelled, or a BaseException escaped the turn.
                self.chain_log.update_event(
                    event_id,
                    status=ChainStatus.ERROR,
                    duration_ms=duration_ms,
                    error_message="cancelled",
                )
            else:
                self.chain_log.update_event(
                    event_id,
                    status=ChainStatus.SUCCESS if result.ok else ChainStatus.ERROR,
                    duration_ms=duration_ms,
                    output=result.content or None,
                    error_message=None if result.ok else result.outcome.value,
                )

        return result

    async def _run_turn(
        self,
        user_text: str,
        make_request: Callable[[], ChatRequest],
    ) -> TurnResult:
        # Durable write before any network call.
        try:
            user_message = await self.store.append(self.project_id, MessageRole.USER, user_text)
        except StoreError as e:
            logger.error("Failed to save user message for %s: %s", self.project_id, e)
            return await self._finish_with_notice(TurnResult(TurnOutcome.SAVE_FAILED), NOTICE_SAVE_FAILED)

        await self.publisher.publish_message(
            user_message.content,
            role=user_message.role.value,
            message_id=user_message.id,
            project_id=self.project_id,
        )

        try:
            request = make_request()
            logger.info(
                "Sending turn for %s: %d messages, %d user messages",
                self.project_id,
                len(request.messages),
                request.user_message_count,
            )
            full_content = await self._stream_reply(request)
        except RateLimitedError:
            logger.warning("Interview chat rate limited for %s", self.project_id)
            return await self._finish_with_notice(
                TurnResult(TurnOutcome.RATE_LIMITED, user_message=user_message),
                NOTICE_RATE_LIMITED,
            )
        except CreditsExhaustedError:
            logger.warning("Interview chat credits exhausted for %s", self.project_id)
            return await self._finish_with_notice(
                TurnResult(TurnOutcome.CREDITS_EXHAUSTED, user_message=user_message),
                NOTICE_CREDITS_EXHAUSTED,
            )
        except Exception as e:  # noqa: BLE001 - a turn must never raise into the UI
            logger.error("Interview chat error for %s: %s", self.project_id, e, exc_info=True)
            await self.publisher.publish_error(f"Interview chat error: {e!s}", project_id=self.project_id)
            partial = self._streaming_content
            result = TurnResult(TurnOutcome.STREAM_FAILED, content=partial, user_message=user_message)
            if self.persist_partial and partial:
                result.assistant_message = await self._save_assistant(partial + PARTIAL_REPLY_MARKER)
            return await self._finish_with_notice(result, NOTICE_STREAM_FAILED)

        if not full_content:
            logger.info("Stream for %s ended without content", self.project_id)
            return TurnResult(TurnOutcome.EMPTY, user_message=user_message)

        assistant_message = await self._save_assistant(full_content)
        if assistant_message is None:
            return await self._finish_with_notice(
                TurnResult(TurnOutcome.REPLY_SAVE_FAILED, content=full_content, user_message=user_message),
                NOTICE_REPLY_SAVE_FAILED,
            )

        return TurnResult(
            TurnOutcome.COMPLETED,
            content=full_content,
            user_message=user_message,
            assistant_message=assistant_message,
        )

    async def _stream_reply(self, request: ChatRequest) -> str:
        """
        POST the request and decode the streamed reply.

        Returns:
            The accumulated assistant text (empty if the stream carried none).

        Raises:
            RateLimitedError: On HTTP 429.
            CreditsExhaustedError: On HTTP 402.
            ChatStreamError: On any other non-success status.
            httpx.HTTPError: On transport failures.
        """
        headers = {"Content-Type": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"

        decoder = ChatStreamDecoder()
        async with self._http_client.stream(
            "POST",
            self.chat_url,
            json=request.to_payload(),
            headers=headers,
        ) as response:
            if response.status_code == 429:
                raise RateLimitedError("Rate limited", status_code=429)
            if response.status_code == 402:
                raise CreditsExhaustedError("Credits exhausted", status_code=402)
            if not response.is_success:
                body = (await response.aread())[:200]
                logger.error("Interview chat returned %d: %r", response.status_code, body)
                raise ChatStreamError("Stream failed", status_code=response.status_code)

            async for chunk in response.aiter_bytes():
                for delta in decoder.feed(chunk):
                    self._streaming_content += delta
                    await self.publisher.publish_streaming(
                        self._streaming_content,
                        delta=delta,
                        project_id=self.project_id,
                    )

        return decoder.content

    async def _save_assistant(self, content: str) -> Optional[InterviewMessage]:
        try:
            message = await self.store.append(self.project_id, MessageRole.ASSISTANT, content)
        except StoreError as e:
            logger.error("Failed to save assistant message for %s: %s", self.project_id, e)
            return None
        await self.publisher.publish_message(
            message.content,
            role=message.role.value,
            message_id=message.id,
            project_id=self.project_id,
        )
        return message

    async def _finish_with_notice(self, result: TurnResult, notice: str) -> TurnResult:
        result.notice = notice
        await self.publisher.publish_notice(notice, level=NoticeLevel.ERROR, project_id=self.project_id)
        return result
