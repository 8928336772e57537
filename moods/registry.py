"""
Mood plugin registry.
"""

from __future__ import annotations

import logging
from typing import Optional

from moods.base import MoodPlugin
from moods.catalog import BUILTIN_MOODS


logger = logging.getLogger(__name__)

DEFAULT_MOOD_ID = "heartfelt"


def _build_registry() -> dict[str, MoodPlugin]:
    return {plugin.mood_id: plugin for plugin in BUILTIN_MOODS}


_REGISTRY = _build_registry()


def available_moods() -> tuple[str, ...]:
    """Return all supported mood IDs."""
    return tuple(sorted(_REGISTRY.keys()))


def load_mood(mood_id: str) -> MoodPlugin:
    """Load a mood plugin by ID."""
    normalized = (mood_id or "").strip().lower()
    if not normalized:
        raise ValueError("Mood id is empty.")

    plugin = _REGISTRY.get(normalized)
    if plugin is None:
        supported = ", ".join(available_moods())
        raise ValueError(
            f"Unknown mood '{mood_id}'. Supported moods: {supported}."
        )
    return plugin


def resolve_mood(mood_id: Optional[str]) -> MoodPlugin:
    """Load a mood, falling back to the default for missing or unknown ids."""
    if not mood_id:
        return _REGISTRY[DEFAULT_MOOD_ID]
    try:
        return load_mood(mood_id)
    except ValueError:
        logger.warning("Unknown mood '%s', using %s", mood_id, DEFAULT_MOOD_ID)
        return _REGISTRY[DEFAULT_MOOD_ID]
