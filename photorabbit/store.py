"""
Typed persistence for interview messages, projects and photos.

Each entity has a small async repository interface so callers never touch
raw rows. In-memory implementations back tests and the default service;
``JsonFileMessageStore`` persists interviews to one JSON file per project.

Thread Safety:
    Stores serialize their own writes with an asyncio lock. They are not
    safe to share across event loops or processes.

Last Grunted: 10/18/2026
"""

import asyncio
import json
import logging
import re
import uuid
from collections import defaultdict
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Optional, Protocol, Sequence

import aiofiles
from pydantic import ValidationError

from .models import InterviewMessage, MessageRole, PhotoRecord, ProjectRecord, utc_now


__all__ = [
    "InMemoryMessageStore",
    "InMemoryPhotoStore",
    "InMemoryProjectStore",
    "InvalidProjectIdError",
    "JsonFileMessageStore",
    "MessageStore",
    "PhotoStore",
    "ProjectNotFoundError",
    "ProjectStore",
    "StoreError",
    "StoreReadError",
    "StoreWriteError",
    "next_timestamp",
]


logger = logging.getLogger(__name__)

_PROJECT_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,128}$")
_TIMESTAMP_STEP = timedelta(microseconds=1)


class StoreError(Exception):
    """Base class for persistence failures."""


class StoreWriteError(StoreError):
    """Raised when a write is rejected or fails."""

    def __init__(self, target: str, cause: Exception) -> None:
        self.target = target
        self.cause = cause
        super().__init__(f"Failed to write to {target}: {cause}")


class StoreReadError(StoreError):
    """Raised when stored data cannot be read back."""

    def __init__(self, target: str, cause: Exception) -> None:
        self.target = target
        self.cause = cause
        super().__init__(f"Failed to read from {target}: {cause}")


class ProjectNotFoundError(StoreError):
    """Raised when a project id does not exist."""

    def __init__(self, project_id: str) -> None:
        self.project_id = project_id
        super().__init__(f"Project '{project_id}' not found")


class InvalidProjectIdError(StoreError, ValueError):
    """Raised for project ids that cannot be used as storage keys."""

    def __init__(self, project_id: str) -> None:
        self.project_id = project_id
        super().__init__(f"Invalid project id '{project_id}'")


def next_timestamp(last: Optional[datetime], candidate: Optional[datetime] = None) -> datetime:
    """
    Timestamp for a new message that sorts strictly after ``last``.

    Args:
        last: created_at of the newest stored message, if any.
        candidate: Preferred timestamp (defaults to now).

    Returns:
        ``candidate`` or, if it would not sort after ``last``, ``last`` plus
        one microsecond.
    """
    stamp = candidate or utc_now()
    if stamp.tzinfo is None:
        stamp = stamp.replace(tzinfo=timezone.utc)
    if last is not None and stamp <= last:
        return last + _TIMESTAMP_STEP
    return stamp


def _ordered(messages: Sequence[InterviewMessage]) -> list[InterviewMessage]:
    # sorted() is stable: equal timestamps keep insertion order.
    return sorted(messages, key=lambda m: m.created_at)


# =============================================================================
# Repository interfaces
# =============================================================================


class MessageStore(Protocol):
    """Ordered interview messages per project."""

    async def append(
        self,
        project_id: str,
        role: MessageRole,
        content: str,
    ) -> InterviewMessage:
        """Persist one message stamped after every existing one."""

    async def insert_many(self, messages: Sequence[InterviewMessage]) -> list[InterviewMessage]:
        """Persist pre-built messages with their own timestamps."""

    async def list_messages(self, project_id: str) -> list[InterviewMessage]:
        """All messages of a project, oldest first."""

    async def delete_project(self, project_id: str) -> int:
        """Remove every message of a project; returns how many were removed."""


class ProjectStore(Protocol):
    """Storybook projects."""

    async def create(self, project: ProjectRecord) -> ProjectRecord: ...

    async def get(self, project_id: str) -> ProjectRecord: ...

    async def delete(self, project_id: str) -> None: ...


class PhotoStore(Protocol):
    """Uploaded photos and their analyses."""

    async def add(self, photo: PhotoRecord) -> PhotoRecord: ...

    async def list_photos(self, project_id: str) -> list[PhotoRecord]: ...

    async def delete_project(self, project_id: str) -> int: ...


# =============================================================================
# Messages
# =============================================================================


class InMemoryMessageStore:
    """
    Message store held in process memory.

    Example:
        >>> store = InMemoryMessageStore()
        >>> await store.append("proj_1", MessageRole.USER, "max is the best boy ever")
        >>> [m.content for m in await store.list_messages("proj_1")]
        ['max is the best boy ever']
    """

    def __init__(self) -> None:
        self._messages: dict[str, list[InterviewMessage]] = defaultdict(list)
        self._lock = asyncio.Lock()

    async def append(
        self,
        project_id: str,
        role: MessageRole,
        content: str,
    ) -> InterviewMessage:
        async with self._lock:
            existing = self._messages[project_id]
            last = max((m.created_at for m in existing), default=None)
            message = InterviewMessage(
                id=str(uuid.uuid4()),
                project_id=project_id,
                role=role,
                content=content,
                created_at=next_timestamp(last),
            )
            existing.append(message)
        logger.debug("Appended %s message to %s", message.role.value, project_id)
        return message

    async def insert_many(self, messages: Sequence[InterviewMessage]) -> list[InterviewMessage]:
        async with self._lock:
            for message in messages:
                self._messages[message.project_id].append(message)
        return list(messages)

    async def list_messages(self, project_id: str) -> list[InterviewMessage]:
        async with self._lock:
            return _ordered(self._messages.get(project_id, []))

    async def delete_project(self, project_id: str) -> int:
        async with self._lock:
            removed = self._messages.pop(project_id, [])
        return len(removed)


class JsonFileMessageStore:
    """
    Writes interview messages to JSON files.

    Output files are named: {project_id}_interview.json

    Example:
        >>> store = JsonFileMessageStore(Path("./data"))
        >>> await store.append("proj_1", MessageRole.USER, "Hi!")
    """

    def __init__(self, data_dir: Path) -> None:
        """
        Initialize the store.

        Args:
            data_dir: Directory holding one file per project.
                      Created if it doesn't exist.

        Raises:
            StoreWriteError: If directory creation fails.
        """
        self.data_dir = Path(data_dir)
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StoreWriteError(str(self.data_dir), e) from e
        self._lock = asyncio.Lock()
        logger.debug("Message store directory ready: %s", self.data_dir)

    def _get_path(self, project_id: str) -> Path:
        if not _PROJECT_ID_PATTERN.match(project_id or ""):
            raise InvalidProjectIdError(project_id)
        return self.data_dir / f"{project_id}_interview.json"

    async def _load(self, path: Path) -> list[InterviewMessage]:
        if not path.exists():
            return []
        try:
            async with aiofiles.open(path, "r", encoding="utf-8") as f:
                data = json.loads(await f.read())
            return [InterviewMessage.model_validate(m) for m in data.get("messages", [])]
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            raise StoreReadError(str(path), e) from e

    async def _save(self, path: Path, project_id: str, messages: list[InterviewMessage]) -> None:
        data = {
            "project_id": project_id,
            "messages": [m.model_dump(mode="json") for m in _ordered(messages)],
            "_meta": {
                "written_at": utc_now().isoformat().replace("+00:00", "Z"),
                "version": "1.0",
            },
        }
        try:
            async with aiofiles.open(path, "w", encoding="utf-8") as f:
                await f.write(json.dumps(data, indent=2, ensure_ascii=False))
        except OSError as e:
            raise StoreWriteError(str(path), e) from e

    async def append(
        self,
        project_id: str,
        role: MessageRole,
        content: str,
    ) -> InterviewMessage:
        path = self._get_path(project_id)
        async with self._lock:
            messages = await self._load(path)
            last = max((m.created_at for m in messages), default=None)
            message = InterviewMessage(
                id=str(uuid.uuid4()),
                project_id=project_id,
                role=role,
                content=content,
                created_at=next_timestamp(last),
            )
            messages.append(message)
            await self._save(path, project_id, messages)
        logger.debug("Appended %s message to %s", message.role.value, path)
        return message

    async def insert_many(self, messages: Sequence[InterviewMessage]) -> list[InterviewMessage]:
        by_project: dict[str, list[InterviewMessage]] = defaultdict(list)
        for message in messages:
            by_project[message.project_id].append(message)

        async with self._lock:
            for project_id, batch in by_project.items():
                path = self._get_path(project_id)
                existing = await self._load(path)
                await self._save(path, project_id, existing + batch)
        logger.info("Inserted %d messages across %d projects", len(messages), len(by_project))
        return list(messages)

    async def list_messages(self, project_id: str) -> list[InterviewMessage]:
        path = self._get_path(project_id)
        async with self._lock:
            return _ordered(await self._load(path))

    async def delete_project(self, project_id: str) -> int:
        path = self._get_path(project_id)
        async with self._lock:
            messages = await self._load(path)
            try:
                path.unlink(missing_ok=True)
            except OSError as e:
                raise StoreWriteError(str(path), e) from e
        logger.info("Deleted %d messages for %s", len(messages), project_id)
        return len(messages)


# =============================================================================
# Projects and photos
# =============================================================================


class InMemoryProjectStore:
    """Projects held in process memory."""

    def __init__(self) -> None:
        self._projects: dict[str, ProjectRecord] = {}
        self._lock = asyncio.Lock()

    async def create(self, project: ProjectRecord) -> ProjectRecord:
        async with self._lock:
            if project.id in self._projects:
                raise StoreWriteError(
                    f"project {project.id}",
                    ValueError("project already exists"),
                )
            self._projects[project.id] = project
        logger.info("Created project %s for '%s'", project.id, project.pet_name)
        return project

    async def get(self, project_id: str) -> ProjectRecord:
        async with self._lock:
            project = self._projects.get(project_id)
        if project is None:
            raise ProjectNotFoundError(project_id)
        return project

    async def delete(self, project_id: str) -> None:
        async with self._lock:
            if self._projects.pop(project_id, None) is None:
                raise ProjectNotFoundError(project_id)
        logger.info("Deleted project %s", project_id)


class InMemoryPhotoStore:
    """Photos held in process memory, in upload order."""

    def __init__(self) -> None:
        self._photos: dict[str, list[PhotoRecord]] = defaultdict(list)
        self._lock = asyncio.Lock()

    async def add(self, photo: PhotoRecord) -> PhotoRecord:
        async with self._lock:
            self._photos[photo.project_id].append(photo)
        return photo

    async def list_photos(self, project_id: str) -> list[PhotoRecord]:
        async with self._lock:
            return list(self._photos.get(project_id, []))

    async def delete_project(self, project_id: str) -> int:
        async with self._lock:
            removed = self._photos.pop(project_id, [])
        return len(removed)
