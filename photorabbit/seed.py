"""
Interview seed transcripts and the autofill routine that loads them.

Used to populate demo and test projects with a realistic conversation.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Sequence

from .models import InterviewMessage, MessageRole
from .store import MessageStore


__all__ = [
    "SEED_BATCH_SIZE",
    "SEED_EPOCH",
    "SEED_TRANSCRIPTS",
    "SHORT_INTERVIEW_SEED",
    "autofill_interview",
    "build_seed_messages",
    "load_seed",
]


logger = logging.getLogger(__name__)

SEED_BATCH_SIZE = 20
SEED_EPOCH = datetime(2024, 1, 1, tzinfo=timezone.utc)

USER = MessageRole.USER
ASSISTANT = MessageRole.ASSISTANT


# Max: a golden retriever, 3 years old. Short interview for minimal-input runs.
SHORT_INTERVIEW_SEED: tuple[tuple[MessageRole, str], ...] = (
    (USER, "Hi! I'd love to start sharing about my pet."),
    (USER, "max is the best boy ever"),
    (
        ASSISTANT,
        "I'd love to hear about Max! When you say he's the best boy, what's the first "
        "thing that comes to mind — a specific moment or something he does every day?",
    ),
    (USER, "he brings me his ball every morning and drops it on my face while i'm sleeping"),
    (
        ASSISTANT,
        "A golden retriever alarm clock! Ball on the face is such a dedicated move. What "
        "does Max do after you wake up — does he wait patiently or is he bouncing around?",
    ),
    (USER, "full body wiggle he can't contain himself"),
    (
        ASSISTANT,
        "The full body wiggle! That's such a golden retriever thing — joy they literally "
        "can't keep inside. What does a typical day with Max look like?",
    ),
    (
        USER,
        "walk in the morning he loves the park then he naps all afternoon and wants to "
        "play fetch at dinner time",
    ),
    (
        ASSISTANT,
        "Max has a solid routine: morning park, afternoon naps, evening fetch. What's his "
        "favorite thing at the park — other dogs, squirrels, or just running?",
    ),
    (USER, "he loves swimming he goes straight for the pond every time"),
    (
        ASSISTANT,
        "A water-loving golden — of course! Does he do the classic golden retriever belly "
        "flop into the pond, or does he wade in carefully?",
    ),
    (USER, "full send belly flop every time and then he shakes off right next to me"),
    (
        ASSISTANT,
        "The belly flop followed by the revenge shake — classic Max! How old is he and how "
        "did you get him?",
    ),
    (USER, "he's 3 got him as a puppy from a breeder in virginia"),
    (
        ASSISTANT,
        "Three years old and full of energy! What does Max look like — is he more golden or "
        "cream colored, and is he a big boy or more medium?",
    ),
    (USER, "classic golden color big boy about 80 pounds with a huge fluffy tail"),
    (
        ASSISTANT,
        "80 pounds of golden fluff with that signature tail! For the book, what title feels "
        "right — something like \"Max's Park Day\" or \"The Adventures of Max\" or do you "
        "have an idea?",
    ),
    (USER, "Max and the Magic Ball"),
)

SEED_TRANSCRIPTS: dict[str, tuple[tuple[MessageRole, str], ...]] = {
    "max": SHORT_INTERVIEW_SEED,
}


def load_seed(seed_id: str) -> tuple[tuple[MessageRole, str], ...]:
    """Look up a seed transcript by id."""
    normalized = (seed_id or "").strip().lower()
    seed = SEED_TRANSCRIPTS.get(normalized)
    if seed is None:
        supported = ", ".join(sorted(SEED_TRANSCRIPTS))
        raise ValueError(f"Unknown seed '{seed_id}'. Supported seeds: {supported}.")
    return seed


def build_seed_messages(
    project_id: str,
    seed: Sequence[tuple[MessageRole, str]],
    epoch: datetime = SEED_EPOCH,
) -> list[InterviewMessage]:
    """
    Materialise a seed transcript as messages.

    Message ``i`` is stamped ``epoch + i seconds`` so reading back by
    timestamp reproduces seed order regardless of insertion latency.
    """
    return [
        InterviewMessage(
            id=str(uuid.uuid4()),
            project_id=project_id,
            role=role,
            content=content,
            created_at=epoch + timedelta(seconds=index),
        )
        for index, (role, content) in enumerate(seed)
    ]


async def autofill_interview(
    store: MessageStore,
    project_id: str,
    seed: Sequence[tuple[MessageRole, str]] = SHORT_INTERVIEW_SEED,
    *,
    epoch: datetime = SEED_EPOCH,
    batch_size: int = SEED_BATCH_SIZE,
) -> int:
    """
    Replace a project's interview with a seed transcript.

    Deletes every existing message for the project, then inserts the seed
    in batches.

    Args:
        store: Message store to write to.
        project_id: Project to populate.
        seed: Ordered (role, content) pairs.
        epoch: Timestamp of the first seed message.
        batch_size: Messages per insert call.

    Returns:
        Number of messages inserted.
    """
    if batch_size < 1:
        raise ValueError("batch_size must be at least 1")

    removed = await store.delete_project(project_id)
    messages = build_seed_messages(project_id, seed, epoch)

    for start in range(0, len(messages), batch_size):
        await store.insert_many(messages[start:start + batch_size])

    logger.info(
        "Autofilled project %s with %d seed messages (replaced %d)",
        project_id,
        len(messages),
        removed,
    )
    return len(messages)
