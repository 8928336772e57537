"""
Real-time Pub/Sub for interview chat events.

Provides an in-memory pub/sub system the chat client uses to surface live
streaming content and user-visible notices to whatever is rendering the
conversation (the CLI, a UI bridge, tests).

Uses asyncio queues; one publisher is created per chat surface and passed
to the components that publish to it.

Example usage:
    publisher = ChatEventPublisher()
    queue = await publisher.subscribe()
    await publisher.publish_streaming("I'd love to hear", project_id="proj_1")
    event = await queue.get()
"""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


logger = logging.getLogger(__name__)


class ChatEventType(str, Enum):
    """
    Types of chat events published to the stream.

    Attributes:
        STREAMING: Current accumulated assistant reply while it streams.
        NOTICE: User-visible notification (rate limited, save failed...).
        MESSAGE: A message was durably saved.
        SYSTEM: System messages (turn start/end, etc.).
        ERROR: Error messages for operators.
    """

    STREAMING = "streaming"
    NOTICE = "notice"
    MESSAGE = "message"
    SYSTEM = "system"
    ERROR = "error"


class NoticeLevel(str, Enum):
    """Severity of a user-visible notice."""

    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"


def _get_utc_timestamp() -> str:
    """
    Get current UTC timestamp in ISO format.

    Returns:
        ISO-formatted UTC timestamp string.
    """
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


@dataclass
class ChatEvent:
    """
    A single event from the chat client.

    Attributes:
        event_type: Category of the event.
        content: Main text content (streamed text, notice text...).
        timestamp: UTC timestamp when the event was created.
        project_id: Project the event belongs to.
        level: Severity for notices.
        role: Message role for MESSAGE events.
        message_id: Saved message id for MESSAGE events.
        delta: Newest text fragment for STREAMING events.
    """

    event_type: ChatEventType
    content: str
    timestamp: str = field(default_factory=_get_utc_timestamp)
    project_id: str | None = None
    level: NoticeLevel | None = None
    role: str | None = None
    message_id: str | None = None
    delta: str | None = None

    def to_dict(self) -> dict[str, object]:
        """
        Convert event to dictionary for JSON serialization.

        Returns:
            Dictionary representation of the event.
        """
        return {
            "event_type": self.event_type.value,
            "content": self.content,
            "timestamp": self.timestamp,
            "project_id": self.project_id,
            "level": self.level.value if self.level else None,
            "role": self.role,
            "message_id": self.message_id,
            "delta": self.delta,
        }

    def to_json(self) -> str:
        """
        Convert event to JSON string.

        Returns:
            JSON string representation of the event.
        """
        return json.dumps(self.to_dict())


class ChatEventPublisher:
    """
    Publisher for chat events.

    Manages multiple subscriber queues and broadcasts events to all.
    Safe for use from concurrent asyncio tasks through lock usage.

    Example:
        publisher = ChatEventPublisher()
        queue = await publisher.subscribe()
        await publisher.publish_notice("AI credits exhausted", level=NoticeLevel.ERROR)
        event = await queue.get()
    """

    def __init__(self, max_history: int = 100) -> None:
        """
        Initialize the publisher.

        Args:
            max_history: Maximum number of events to retain in history.
        """
        self._subscribers: list[asyncio.Queue[ChatEvent]] = []
        self._history: list[ChatEvent] = []
        self._max_history = max_history
        self._lock = asyncio.Lock()
        logger.debug("ChatEventPublisher initialized with max_history=%d", max_history)

    async def subscribe(self, replay_history: bool = True) -> asyncio.Queue[ChatEvent]:
        """
        Subscribe to chat events.

        Caller is responsible for calling unsubscribe when done.

        Args:
            replay_history: Whether to pre-load the queue with past events.

        Returns:
            Queue that will receive published events.
        """
        queue: asyncio.Queue[ChatEvent] = asyncio.Queue()
        async with self._lock:
            self._subscribers.append(queue)
            if replay_history:
                for event in self._history:
                    await queue.put(event)
        logger.debug("New subscriber added. Total: %d", len(self._subscribers))
        return queue

    async def unsubscribe(self, queue: asyncio.Queue[ChatEvent]) -> None:
        """
        Remove a subscriber.

        Args:
            queue: The queue to unsubscribe.
        """
        async with self._lock:
            if queue in self._subscribers:
                self._subscribers.remove(queue)
        logger.debug("Subscriber removed. Total: %d", len(self._subscribers))

    async def publish(self, event: ChatEvent) -> None:
        """
        Publish an event to all subscribers and store it in history.

        Args:
            event: The event to publish.
        """
        async with self._lock:
            self._history.append(event)
            if len(self._history) > self._max_history:
                self._history = self._history[-self._max_history :]

            for queue in self._subscribers:
                await queue.put(event)

        logger.debug("Published event: %s", event.event_type.value)

    async def publish_streaming(
        self,
        content: str,
        *,
        delta: str | None = None,
        project_id: str | None = None,
    ) -> None:
        """
        Publish the current streaming content.

        Args:
            content: Full assistant text received so far.
            delta: The fragment that was just appended.
            project_id: Project the turn belongs to.
        """
        await self.publish(
            ChatEvent(
                event_type=ChatEventType.STREAMING,
                content=content,
                delta=delta,
                project_id=project_id,
            )
        )

    async def publish_notice(
        self,
        content: str,
        *,
        level: NoticeLevel = NoticeLevel.INFO,
        project_id: str | None = None,
    ) -> None:
        """
        Publish a user-visible notice.

        Args:
            content: Notice text, safe to show to end users.
            level: Notice severity.
            project_id: Project the notice relates to.
        """
        await self.publish(
            ChatEvent(
                event_type=ChatEventType.NOTICE,
                content=content,
                level=level,
                project_id=project_id,
            )
        )

    async def publish_message(
        self,
        content: str,
        *,
        role: str,
        message_id: str,
        project_id: str | None = None,
    ) -> None:
        """
        Publish that a message was durably saved.

        Args:
            content: Message text.
            role: Message role.
            message_id: Identifier assigned by the store.
            project_id: Owning project.
        """
        await self.publish(
            ChatEvent(
                event_type=ChatEventType.MESSAGE,
                content=content,
                role=role,
                message_id=message_id,
                project_id=project_id,
            )
        )

    async def publish_system(self, content: str, *, project_id: str | None = None) -> None:
        """
        Publish system message.

        Args:
            content: System message content.
            project_id: Related project.
        """
        await self.publish(
            ChatEvent(
                event_type=ChatEventType.SYSTEM,
                content=content,
                project_id=project_id,
            )
        )

    async def publish_error(self, content: str, *, project_id: str | None = None) -> None:
        """
        Publish error message.

        Args:
            content: Error message content.
            project_id: Related project.
        """
        await self.publish(
            ChatEvent(
                event_type=ChatEventType.ERROR,
                content=content,
                project_id=project_id,
            )
        )

    async def get_history(self) -> list[ChatEvent]:
        """
        Get the event history (async-safe).

        Returns:
            Copy of the event history list.
        """
        async with self._lock:
            return list(self._history)

    async def clear_history(self) -> None:
        """Clear the event history (async-safe)."""
        async with self._lock:
            self._history.clear()
        logger.debug("History cleared")

    @property
    def subscriber_count(self) -> int:
        """
        Get the number of active subscribers.

        Not async-safe; provides an approximate count.
        """
        return len(self._subscribers)
