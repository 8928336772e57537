"""
Interviewer mood plugins and the interview-chat system prompt.
"""

from moods.base import BaseMoodPlugin, MoodPlugin
from moods.prompts import SHARED_RULES, build_system_prompt
from moods.registry import DEFAULT_MOOD_ID, available_moods, load_mood, resolve_mood

__all__ = [
    "BaseMoodPlugin",
    "DEFAULT_MOOD_ID",
    "MoodPlugin",
    "SHARED_RULES",
    "available_moods",
    "build_system_prompt",
    "load_mood",
    "resolve_mood",
]
