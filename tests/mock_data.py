"""
Mock data generators for PhotoRabbit testing.

Builds completion-stream chunks in the gateway's server-sent-events framing,
photo analyses shaped like the captioning pipeline's output, and interview
transcripts of arbitrary length.

Last Grunted: 10/18/2026
"""

import json
import random
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

from photorabbit.models import InterviewMessage, MessageRole


# =============================================================================
# Interview Content
# =============================================================================

USER_ANSWERS = [
    "max is the best boy ever",
    "he brings me his ball every morning and drops it on my face",
    "full body wiggle, he can't contain himself",
    "he loves swimming, goes straight for the pond every time",
    "full send belly flop and then he shakes off right next to me",
    "he's 3, got him as a puppy from a breeder in virginia",
    "classic golden color, about 80 pounds with a huge fluffy tail",
    "he steals socks and hides them under the couch",
]

RABBIT_QUESTIONS = [
    "I'd love to hear about Max! What's the first thing that comes to mind?",
    "A golden retriever alarm clock! What does Max do after you wake up?",
    "The full body wiggle! What does a typical day with Max look like?",
    "What's his favorite thing at the park?",
    "Does he belly flop into the pond, or wade in carefully?",
    "How old is he and how did you get him?",
    "What does Max look like?",
    "What title feels right for the book?",
]

SCENES = [
    "A golden retriever mid-leap into a pond",
    "A dog asleep on a sunny porch",
    "Two kids hugging a fluffy dog on a beach",
    "A puppy chewing a red sock",
    "A dog wearing a birthday hat",
]


# =============================================================================
# Stream Chunks
# =============================================================================


def sse_line(content: str) -> str:
    """One ``data:`` line carrying a content delta."""
    payload = {"choices": [{"index": 0, "delta": {"content": content}}]}
    return f"data: {json.dumps(payload, ensure_ascii=False)}\n"


def sse_stream(deltas: list[str], done: bool = True, keepalive: bool = False) -> bytes:
    """
    Full completion stream body for the given deltas.

    Args:
        deltas: Content fragments, in order.
        done: Append the ``[DONE]`` sentinel.
        keepalive: Prefix a comment line like the gateway's keep-alives.
    """
    lines = [": OPENROUTER PROCESSING\n\n"] if keepalive else []
    lines.extend(sse_line(d) + "\n" for d in deltas)
    if done:
        lines.append("data: [DONE]\n\n")
    return "".join(lines).encode("utf-8")


def split_bytes(data: bytes, sizes: Optional[list[int]] = None, seed: int = 7) -> list[bytes]:
    """
    Cut a byte string into consecutive chunks.

    Args:
        data: Bytes to split.
        sizes: Explicit chunk sizes; random small sizes when omitted.
        seed: Random seed for reproducible splits.
    """
    rng = random.Random(seed)
    chunks = []
    pos = 0
    index = 0
    while pos < len(data):
        size = sizes[index % len(sizes)] if sizes else rng.randint(1, 9)
        chunks.append(data[pos:pos + size])
        pos += size
        index += 1
    return chunks


# =============================================================================
# Photo Analyses
# =============================================================================


def generate_analysis(
    scene_summary: Optional[str] = None,
    subject_type: Optional[str] = None,
    subject_mood: Optional[str] = None,
    notable_details: Optional[list[str]] = None,
) -> dict[str, object]:
    """A photo analysis record; omitted fields are left out."""
    record: dict[str, object] = {"setting": "outdoors"}
    if scene_summary is not None:
        record["scene_summary"] = scene_summary
    if subject_type is not None:
        record["subject_type"] = subject_type
    if subject_mood is not None:
        record["subject_mood"] = subject_mood
    if notable_details is not None:
        record["notable_details"] = notable_details
    return record


def generate_analyses(count: int) -> list[dict[str, object]]:
    """``count`` analyses with distinct scene summaries."""
    return [
        generate_analysis(scene_summary=SCENES[i % len(SCENES)], notable_details=["Wet fur"])
        for i in range(count)
    ]


# =============================================================================
# Transcripts
# =============================================================================


def generate_transcript(
    project_id: str,
    count: int,
    start: Optional[datetime] = None,
    first_role: MessageRole = MessageRole.USER,
) -> list[InterviewMessage]:
    """
    Alternating user/assistant messages, one second apart.

    Content is numbered (``"user 0"``, ``"assistant 1"``...) so tests can
    check which entries survive windowing.
    """
    start = start or datetime(2024, 1, 1, tzinfo=timezone.utc)
    other = MessageRole.ASSISTANT if first_role == MessageRole.USER else MessageRole.USER
    messages = []
    for i in range(count):
        role = first_role if i % 2 == 0 else other
        messages.append(
            InterviewMessage(
                id=str(uuid.uuid4()),
                project_id=project_id,
                role=role,
                content=f"{role.value} {i}",
                created_at=start + timedelta(seconds=i),
            )
        )
    return messages


def generate_realistic_transcript(project_id: str, exchanges: int = 4) -> list[InterviewMessage]:
    """User answers and rabbit questions about Max, oldest first."""
    start = datetime(2024, 1, 1, tzinfo=timezone.utc)
    messages = []
    for i in range(exchanges):
        for offset, (role, content) in enumerate(
            (
                (MessageRole.USER, USER_ANSWERS[i % len(USER_ANSWERS)]),
                (MessageRole.ASSISTANT, RABBIT_QUESTIONS[i % len(RABBIT_QUESTIONS)]),
            )
        ):
            messages.append(
                InterviewMessage(
                    id=str(uuid.uuid4()),
                    project_id=project_id,
                    role=role,
                    content=content,
                    created_at=start + timedelta(seconds=2 * i + offset),
                )
            )
    return messages
