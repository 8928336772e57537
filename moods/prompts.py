"""
System prompt for the interview-chat function.

Combines the mood persona with the shared interview rules, the subject,
whatever is known about the uploaded photos, and the pacing instruction
driven by how many messages the user has sent.
"""

from __future__ import annotations

from typing import Optional, Sequence

from moods.registry import resolve_mood


WRAP_UP_AFTER_USER_MESSAGES = 15
DEFAULT_PRODUCT_TYPE = "storybook"
_GENERIC_SUBJECT_TYPES = {"", "unknown", "general"}

SHARED_RULES = f"""

RULES (follow these EXACTLY):
1. Ask exactly ONE question per response. Never two. Never zero (unless wrapping up).
2. Keep responses to 2-3 sentences max. One reaction + one question.
3. Never use generic language. Make every word specific to what they just told you.
4. React to what they said FIRST, then ask your question.

ADAPTIVE SELF-ASSESSMENT:
After each response, internally evaluate: "Do I have 4-5 distinct scenes or memories with vivid, specific details that could each become a storybook page?"
- Rich, detailed messages count more than short ones. Two great messages might be enough.
- When you believe you have enough material, proactively say something like: "I think I have everything I need to make something amazing, unless there's anything else you want to include?"
- Do NOT wrap up too early. You need real scenes with sensory details, not just facts.
- Hard ceiling: after {WRAP_UP_AFTER_USER_MESSAGES} user messages, you MUST wrap up regardless."""


def build_system_prompt(
    pet_name: str,
    pet_type: str,
    user_message_count: int,
    photo_captions: Optional[Sequence[str]] = None,
    photo_context_brief: Optional[str] = None,
    product_type: Optional[str] = None,
    mood: Optional[str] = None,
) -> str:
    """
    Build the interviewer system prompt for one turn.

    Args:
        pet_name: Subject's name.
        pet_type: Subject type; generic values are not mentioned.
        user_message_count: User messages in the full transcript.
        photo_captions: Per-photo captions, used when no brief exists.
        photo_context_brief: Detailed per-photo analysis brief.
        product_type: What is being made; defaults to a storybook.
        mood: Mood id; unknown or missing moods use the default persona.

    Returns:
        The complete system prompt.
    """
    product = product_type or DEFAULT_PRODUCT_TYPE
    prompt = f"{resolve_mood(mood).persona}{SHARED_RULES}"

    subject_kind = ""
    if (pet_type or "").strip().lower() not in _GENERIC_SUBJECT_TYPES:
        subject_kind = f" They are a {pet_type}."
    prompt += (
        f'\n\nThe subject\'s name is "{pet_name}".{subject_kind} '
        f"Use their name naturally in conversation. You are helping create a {product}."
    )

    if photo_context_brief:
        prompt += (
            f"\n\nYou have DEEPLY analyzed the photos related to {pet_name}. "
            f"Here is what you saw in each photo:\n\n{photo_context_brief}\n\n"
            "Use this knowledge naturally and specifically in conversation. Reference "
            "particular scenes, settings, people, and moments you noticed. Show them you "
            "truly looked at and understood their photos. Ask about the stories behind "
            "specific moments you observed."
        )
    elif photo_captions:
        listed = "\n".join(f"- Photo {i}: {c}" for i, c in enumerate(photo_captions, 1))
        prompt += (
            f"\n\nPhotos related to {pet_name} have been uploaded. Here are AI-generated "
            f"descriptions of what's in them:\n{listed}\n"
            "Reference specific photos naturally in your conversation to show you've seen them."
        )

    if user_message_count >= WRAP_UP_AFTER_USER_MESSAGES:
        prompt += (
            "\n\nIMPORTANT: You have received MORE than enough material. DO NOT ask any more "
            "questions. Thank them warmly and confirm you have everything you need to create "
            f"a wonderful {product}. End the conversation gracefully."
        )

    prompt += f"\n\nCurrent exchange count: {user_message_count} user messages so far."
    return prompt
