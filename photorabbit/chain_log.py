"""
Chain log: a structured record of the AI pipeline steps behind a project.

Components that want to report progress take a ``ChainLog`` by reference.
Callers that do not care pass nothing and get ``NULL_CHAIN_LOG``, which
accepts every call and records nothing.
"""

from __future__ import annotations

import uuid
from dataclasses import asdict, dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Protocol


__all__ = [
    "ChainEvent",
    "ChainLog",
    "ChainLogSink",
    "ChainPhase",
    "ChainStatus",
    "NULL_CHAIN_LOG",
    "NullChainLog",
]


class ChainPhase(str, Enum):
    """Pipeline phase an event belongs to."""

    PHOTO_ANALYSIS = "photo-analysis"
    APPEARANCE_PROFILE = "appearance-profile"
    INTERVIEW = "interview"
    STORY = "story"
    ILLUSTRATION = "illustration"
    PDF = "pdf"
    SYSTEM = "system"


class ChainStatus(str, Enum):
    """Lifecycle of a chain event."""

    PENDING = "pending"
    RUNNING = "running"
    SUCCESS = "success"
    ERROR = "error"
    SKIPPED = "skipped"


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ChainEvent:
    """One step in the chain log."""

    id: str
    phase: ChainPhase
    step: str
    status: ChainStatus
    timestamp: datetime = field(default_factory=_now_utc)
    duration_ms: float | None = None
    input: str | None = None
    output: str | None = None
    model: str | None = None
    token_count: int | None = None
    cost_cents: float | None = None
    error_message: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["phase"] = self.phase.value
        data["status"] = self.status.value
        data["timestamp"] = self.timestamp.isoformat().replace("+00:00", "Z")
        return data


class ChainLogSink(Protocol):
    """What components need from a chain log."""

    def add_event(
        self,
        phase: ChainPhase,
        step: str,
        status: ChainStatus,
        **details: Any,
    ) -> str: ...

    def update_event(self, event_id: str, **changes: Any) -> None: ...


class ChainLog:
    """In-memory chain log for one workspace."""

    def __init__(self) -> None:
        self._events: list[ChainEvent] = []

    @property
    def events(self) -> list[ChainEvent]:
        return list(self._events)

    def add_event(
        self,
        phase: ChainPhase,
        step: str,
        status: ChainStatus,
        **details: Any,
    ) -> str:
        """Record a new event and return its id."""
        event = ChainEvent(
            id=str(uuid.uuid4()),
            phase=ChainPhase(phase),
            step=step,
            status=ChainStatus(status),
            **details,
        )
        self._events.append(event)
        return event.id

    def update_event(self, event_id: str, **changes: Any) -> None:
        """Merge ``changes`` into the event with ``event_id``; unknown ids are ignored."""
        if "status" in changes:
            changes["status"] = ChainStatus(changes["status"])
        self._events = [
            replace(e, **changes) if e.id == event_id else e
            for e in self._events
        ]

    def clear(self) -> None:
        self._events = []


class NullChainLog:
    """Chain log that records nothing."""

    @property
    def events(self) -> list[ChainEvent]:
        return []

    def add_event(
        self,
        phase: ChainPhase,
        step: str,
        status: ChainStatus,
        **details: Any,
    ) -> str:
        return ""

    def update_event(self, event_id: str, **changes: Any) -> None:
        return None

    def clear(self) -> None:
        return None


NULL_CHAIN_LOG = NullChainLog()
