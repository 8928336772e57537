"""
Quick-reply chips for the rabbit interview.

Pure keyword matching: given the rabbit's latest message, return three or
four tappable replies, or nothing when the message is not a question.

Last Grunted: 10/18/2026
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional


__all__ = [
    "FALLBACK_REPLIES",
    "OWN_STORY_REPLY",
    "QUICK_REPLY_TOPICS",
    "WRAP_UP_SIGNALS",
    "QuickReplyTopic",
    "get_quick_replies",
]


OWN_STORY_REPLY = "✍️ Tell my own story"


@dataclass(frozen=True)
class QuickReplyTopic:
    """One keyword group and the chips it offers."""

    id: str
    keywords: re.Pattern[str]
    replies: tuple[str, ...]


def _topic(topic_id: str, pattern: str, *replies: str) -> QuickReplyTopic:
    return QuickReplyTopic(
        id=topic_id,
        keywords=re.compile(pattern, re.IGNORECASE),
        replies=(*replies, OWN_STORY_REPLY),
    )


# Priority order: the first topic whose keywords match wins.
QUICK_REPLY_TOPICS: tuple[QuickReplyTopic, ...] = (
    _topic(
        "humor",
        r"\b(funny|ridiculous|hilarious|funniest|chaos|goofy|silly|weird)\b",
        "Total chaos agent 😂",
        "Always begging for attention",
        "The look they give me",
    ),
    _topic(
        "memorial",
        r"\b(miss|memorial|remember|gone|passed|losing|lost)\b",
        "Their silly little habits",
        "The way they'd greet me",
        "Quiet moments together",
    ),
    _topic(
        "origin",
        r"\b(first|meet|found|rescue|adopt|beginning|start)\b",
        "Pure accident",
        "Love at first sight",
        "They found me actually",
    ),
    _topic(
        "adventure",
        r"\b(adventure|explore|bravest|brave|wild|fearless|escape)\b",
        "Into everything, fearless",
        "That one epic escape",
        "Every walk is a mission",
    ),
    _topic(
        "personality",
        r"\b(personality|character|like them|like her|like him|describe|energy|soul|spirit)\b",
        "Total drama queen",
        "The most gentle soul",
        "One-of-a-kind energy",
    ),
    _topic(
        "routine",
        r"\b(morning|routine|everyday|day|daily|habit|alarm|wake)\b",
        "Alarm clock, basically",
        "Chaos from the jump",
        "Pure chill until food time",
    ),
    _topic(
        "favorite_photo",
        r"\b(photo|shot|picture|capture|image|favourite|favorite|best shot)\b",
        "Sunset on the back porch",
        "Their favourite nap spot",
        "Mid-zoomies action shot",
    ),
    _topic(
        "memory",
        r"\b(memory|moment|bottl|keep forever|cherish|never forget|remember)\b",
        "The first day we met",
        "A quiet morning together",
        "A trip we took",
    ),
    _topic(
        "uniqueness",
        r"\b(special|unique|nobody|different|stand out|one thing|one word)\b",
        "The way they look at me",
        "Their weird little rituals",
        "Somehow always knows",
    ),
    _topic(
        "bond",
        r"\b(bond|relationship|connect|mean to you|love about|feel about)\b",
        "They just get me",
        "My whole world, honestly",
        "Like they were made for me",
    ),
    _topic(
        "naming",
        r"\b(name|call them|call her|call him|named)\b",
        "Named after a character",
        "It just suited them",
        "Long story, honestly",
    ),
)

FALLBACK_REPLIES: tuple[str, ...] = (
    "So much to say...",
    "A little bit of everything",
    "Hard to pick just one",
    OWN_STORY_REPLY,
)

# Wrap-up and affirmation messages get no chips.
WRAP_UP_SIGNALS = re.compile(
    r"\b(I have everything|that'?s all I need|I'?ve got enough|perfect|let'?s make"
    r"|making it now|watch this|I'?m going to paint|I'?m painting)\b",
    re.IGNORECASE,
)


def get_quick_replies(
    content: str,
    pet_name: str = "",
    mood: Optional[str] = None,
) -> list[str]:
    """
    Reply chips for one rabbit message.

    Args:
        content: The rabbit's full message text.
        pet_name: Subject's name; reserved for personalised chips.
        mood: Project mood; reserved for mood-specific chips.

    Returns:
        A new list of four chips, or an empty list when the message is
        empty, wraps up the interview, or asks no question.
    """
    if not content:
        return []
    if WRAP_UP_SIGNALS.search(content):
        return []
    if "?" not in content:
        return []

    for topic in QUICK_REPLY_TOPICS:
        if topic.keywords.search(content):
            return list(topic.replies)

    return list(FALLBACK_REPLIES)
