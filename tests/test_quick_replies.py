"""
Tests for quick-reply chips.

Last Grunted: 10/18/2026
"""

from __future__ import annotations

import pytest

from photorabbit.quick_replies import (
    FALLBACK_REPLIES,
    OWN_STORY_REPLY,
    QUICK_REPLY_TOPICS,
    get_quick_replies,
)


def topic_replies(topic_id: str) -> list[str]:
    return next(list(t.replies) for t in QUICK_REPLY_TOPICS if t.id == topic_id)


class TestGetQuickReplies:
    """Tests for get_quick_replies."""

    def test_empty_content(self) -> None:
        """No message, no chips."""
        assert get_quick_replies("") == []

    def test_no_question(self) -> None:
        """Statements get no chips."""
        assert get_quick_replies("What a good boy Max is.") == []

    def test_wrap_up_suppresses_chips(self) -> None:
        """Wrap-up messages get no chips even when they ask something."""
        assert get_quick_replies("I have everything I need. Anything else to add?") == []
        assert get_quick_replies("Perfect! Ready for the next step?") == []
        assert get_quick_replies("I'm painting it now, want to watch?") == []

    def test_humor_topic(self) -> None:
        """Funny questions get the humor chips."""
        chips = get_quick_replies("What's the funniest thing Max has ever done?")
        assert chips == topic_replies("humor")
        assert chips[0] == "Total chaos agent 😂"

    def test_memorial_topic(self) -> None:
        """Remembrance questions get the memorial chips."""
        chips = get_quick_replies("What do you miss most about her?")
        assert chips == topic_replies("memorial")

    def test_origin_topic(self) -> None:
        """How-you-met questions get the origin chips."""
        chips = get_quick_replies("How did you first meet?")
        assert chips == topic_replies("origin")

    def test_routine_topic(self) -> None:
        """Questions about a typical day get the routine chips."""
        chips = get_quick_replies("What does his morning look like?")
        assert chips == topic_replies("routine")

    def test_naming_topic(self) -> None:
        """Name questions get the naming chips."""
        chips = get_quick_replies("Where did his name come from?")
        assert chips == topic_replies("naming")

    def test_priority_order(self) -> None:
        """The first matching topic wins."""
        # Matches humor, origin and routine; humor comes first.
        chips = get_quick_replies("What was the funniest thing on the first day?")
        assert chips == topic_replies("humor")

    def test_case_insensitive(self) -> None:
        """Keywords match regardless of case."""
        assert get_quick_replies("ANY ADVENTURE stories?") == topic_replies("adventure")

    def test_whole_words_only(self) -> None:
        """Keywords inside longer words do not match."""
        # "daylight" is not "day"; "starting" is not "start".
        chips = get_quick_replies("Was it daylight?")
        assert chips == list(FALLBACK_REPLIES)

    def test_fallback(self) -> None:
        """Questions matching no topic get the fallback chips."""
        chips = get_quick_replies("Anything else?")
        assert chips == list(FALLBACK_REPLIES)

    def test_always_offers_own_story(self) -> None:
        """Every non-empty chip list ends with the own-story chip."""
        for question in ("What's funny?", "How did you meet?", "Anything else?"):
            chips = get_quick_replies(question)
            assert len(chips) == 4
            assert chips[-1] == OWN_STORY_REPLY

    def test_returns_fresh_list(self) -> None:
        """Mutating the result does not affect later calls."""
        chips = get_quick_replies("Anything else?")
        chips.clear()
        assert get_quick_replies("Anything else?") == list(FALLBACK_REPLIES)

    def test_deterministic(self) -> None:
        """Same input, same chips; name and mood do not change the result."""
        question = "What makes Max so special?"
        assert get_quick_replies(question) == get_quick_replies(question, "Max", "funny")


class TestQuickReplyTopics:
    """One sample question per topic group."""

    @pytest.mark.parametrize(
        ("topic_id", "question"),
        [
            ("humor", "What's the most ridiculous thing he does?"),
            ("memorial", "What do you miss most?"),
            ("origin", "Was he a rescue?"),
            ("adventure", "What's the bravest thing she's done?"),
            ("personality", "How would you describe her personality?"),
            ("routine", "What's a typical morning with him?"),
            ("favorite_photo", "Which photo is your favorite?"),
            ("memory", "Is there a moment you'll cherish?"),
            ("uniqueness", "What makes him so special?"),
            ("bond", "What do you love about him most?"),
            ("naming", "How did she get her name?"),
        ],
    )
    def test_topic_chips(self, topic_id: str, question: str) -> None:
        """Each topic's keywords select that topic's chips."""
        assert get_quick_replies(question) == topic_replies(topic_id)

    def test_every_topic_covered(self) -> None:
        """The table has exactly the eleven known topics."""
        assert [t.id for t in QUICK_REPLY_TOPICS] == [
            "humor",
            "memorial",
            "origin",
            "adventure",
            "personality",
            "routine",
            "favorite_photo",
            "memory",
            "uniqueness",
            "bond",
            "naming",
        ]

    def test_remember_goes_to_memorial(self) -> None:
        """'remember' is listed by memory too, but memorial comes first."""
        chips = get_quick_replies("What do you remember about that trip?")
        assert chips == topic_replies("memorial")
        assert chips != topic_replies("memory")
