"""
Transcript windowing.

Builds the bounded message list submitted upstream. Long conversations keep
their opening exchanges (subject intro, first facts) and their most recent
turns; the middle is dropped.

Last Grunted: 10/18/2026
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence, TypeVar

from .models import ChatMessage, InterviewMessage, MessageRole


__all__ = [
    "MAX_WINDOW_MESSAGES",
    "EARLY_WINDOW_MESSAGES",
    "RECENT_WINDOW_MESSAGES",
    "WINDOW_BRIDGE_NOTE",
    "build_transcript",
    "count_user_messages",
    "window_messages",
]


logger = logging.getLogger(__name__)

MAX_WINDOW_MESSAGES = 20
EARLY_WINDOW_MESSAGES = 6
RECENT_WINDOW_MESSAGES = 14

WINDOW_BRIDGE_NOTE = (
    "[The conversation has been ongoing. Here are the first few exchanges for "
    "context, followed by the most recent messages. The middle portion has been "
    "omitted to save space, but assume a natural flowing conversation occurred "
    "between these segments.]"
)

T = TypeVar("T")


def build_transcript(
    prior_messages: Iterable[InterviewMessage | ChatMessage],
    user_text: str,
) -> list[ChatMessage]:
    """
    Full ordered transcript for a turn: prior messages plus the new user text.

    Args:
        prior_messages: Messages already in the store, oldest first.
        user_text: The message being sent this turn.

    Returns:
        List of role/content pairs, new user message last.
    """
    transcript = [
        m.as_chat_message() if isinstance(m, InterviewMessage) else m
        for m in prior_messages
    ]
    transcript.append(ChatMessage(role=MessageRole.USER, content=user_text))
    return transcript


def count_user_messages(messages: Iterable[ChatMessage]) -> int:
    """Number of user-role entries."""
    return sum(1 for m in messages if m.role == MessageRole.USER)


def window_messages(
    messages: Sequence[T],
    bridge: Optional[T] = None,
) -> list[T]:
    """
    Reduce a transcript to at most twenty entries.

    Transcripts of twenty or fewer entries are returned unchanged. Longer
    ones become the first six entries followed by the last fourteen, in
    original order. When ``bridge`` is given it is placed between the two
    slices (the gateway uses this for a system note; the chat client does
    not).

    Args:
        messages: Ordered transcript.
        bridge: Optional entry inserted between early and recent slices.

    Returns:
        The windowed transcript as a new list.

    Example:
        >>> window_messages(list(range(25)))
        [0, 1, 2, 3, 4, 5, 11, 12, 13, 14, 15, 16, 17, 18, 19, 20, 21, 22, 23, 24]
    """
    if len(messages) <= MAX_WINDOW_MESSAGES:
        return list(messages)

    early = list(messages[:EARLY_WINDOW_MESSAGES])
    recent = list(messages[-RECENT_WINDOW_MESSAGES:])
    logger.debug(
        "Windowed transcript to %d messages (from %d)",
        len(early) + len(recent),
        len(messages),
    )
    if bridge is None:
        return early + recent
    return early + [bridge] + recent
