"""
Photo summary: the rabbit's opening line once photos have been analysed.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Iterable

from .models import PhotoAnalysis, PhotoRecord


__all__ = [
    "EMPTY_SUMMARY",
    "INVITATION",
    "build_photo_summary",
    "collect_photo_captions",
]


INVITATION = "What do you want to make?"
EMPTY_SUMMARY = "I've looked at these. Let's make something."
_MAX_LISTED_SCENES = 3


def _lower_first(text: str) -> str:
    return text[:1].lower() + text[1:]


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _as_mapping(analysis: Any) -> Mapping[str, Any] | None:
    if isinstance(analysis, PhotoAnalysis):
        return analysis.model_dump()
    if isinstance(analysis, Mapping):
        return analysis
    return None


def build_photo_summary(analyses: Iterable[Any]) -> str:
    """
    One conversational sentence summarising a set of photo analyses.

    Args:
        analyses: Analysis records (mappings or PhotoAnalysis); anything
            else, including None, is ignored.

    Returns:
        The opener. Never raises.

    Example:
        >>> build_photo_summary([{"scene_summary": "A dog running in a park"}])
        'I see a dog running in a park. What do you want to make?'
    """
    valid = [m for m in (_as_mapping(a) for a in analyses) if m is not None]
    if not valid:
        return EMPTY_SUMMARY

    summaries = []
    for record in valid:
        details = record.get("notable_details")
        notable = details[0] if isinstance(details, list) and details else ""
        summaries.append(
            {
                "scene": _text(record.get("scene_summary")),
                "subject_type": _text(record.get("subject_type")),
                "subject_mood": _text(record.get("subject_mood")),
                "notable": _text(notable),
            }
        )

    if len(valid) == 1:
        s = summaries[0]
        if s["scene"]:
            flavor = f" — {s['notable'].lower()}" if s["notable"] else ""
            return f"I see {_lower_first(s['scene'])}{flavor}. {INVITATION}"
        if s["subject_type"]:
            article = "" if s["subject_type"].startswith("a") else "a "
            looking = f" looking {s['subject_mood']}" if s["subject_mood"] else ""
            return f"I see {article}{s['subject_type']}{looking}. {INVITATION}"
        return f"There's definitely a story here. {INVITATION}"

    subjects = [s["scene"] or s["subject_type"] for s in summaries]
    subjects = [s for s in subjects if s][:_MAX_LISTED_SCENES]

    if len(subjects) >= 2:
        scenes = [_lower_first(s) for s in subjects]
        last = scenes.pop()
        return f"I see {len(valid)} photos — {', '.join(scenes)}, and {last}. {INVITATION}"

    return (
        f"I've been through all {len(valid)} photos. "
        f"I can see what makes these special. {INVITATION}"
    )


def collect_photo_captions(photos: Iterable[PhotoRecord]) -> list[str]:
    """Captions of the photos that have one, in upload order."""
    return [p.caption for p in photos if p.caption]
