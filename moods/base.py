"""
Mood plugin base types.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


class MoodPlugin(Protocol):
    """Interviewer persona for one storybook mood."""

    @property
    def mood_id(self) -> str: ...

    @property
    def display_name(self) -> str: ...

    @property
    def persona(self) -> str: ...


@dataclass(frozen=True)
class BaseMoodPlugin:
    """Persona definition shared by the built-in moods."""

    mood_id: str
    display_name: str
    persona: str
