"""
Message store backed by the PhotoRabbit service's interview endpoints.

Lets a chat client running outside the service persist its transcript the
same way the web workspace does: over HTTP, one call per write.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Optional, Sequence

import httpx
from pydantic import ValidationError

from .models import InterviewMessage, MessageRole
from .store import ProjectNotFoundError, StoreReadError, StoreWriteError


__all__ = ["HttpMessageStore"]


logger = logging.getLogger(__name__)


class HttpMessageStore:
    """
    ``MessageStore`` over REST.

    Example:
        >>> async with httpx.AsyncClient(base_url="http://127.0.0.1:8787") as http:
        ...     store = HttpMessageStore(http)
        ...     await store.append("proj_1", MessageRole.USER, "Hi!")
    """

    def __init__(self, client: httpx.AsyncClient, headers: Optional[dict[str, str]] = None) -> None:
        """
        Args:
            client: HTTP client whose base_url points at the service.
            headers: Extra headers sent with every call (e.g. Authorization).
        """
        self._client = client
        self._headers = headers or {}

    def _path(self, project_id: str) -> str:
        return f"/projects/{project_id}/interview"

    async def _request(
        self,
        method: str,
        project_id: str,
        *,
        json: Optional[dict[str, Any]] = None,
        writing: bool,
    ) -> dict[str, Any]:
        path = self._path(project_id)
        error_cls = StoreWriteError if writing else StoreReadError
        try:
            response = await self._client.request(method, path, json=json, headers=self._headers)
        except httpx.HTTPError as e:
            raise error_cls(path, e) from e

        if response.status_code == 404:
            raise ProjectNotFoundError(project_id)
        if response.status_code >= 400:
            logger.error("%s %s failed: HTTP %d %s", method, path, response.status_code, response.text[:160])
            raise error_cls(path, RuntimeError(f"HTTP {response.status_code}"))

        try:
            data = response.json()
        except ValueError as e:
            raise StoreReadError(path, e) from e
        if not isinstance(data, dict):
            raise StoreReadError(path, TypeError(f"expected a JSON object, got {type(data).__name__}"))
        return data

    def _parse(self, project_id: str, data: dict[str, Any]) -> list[InterviewMessage]:
        rows = data.get("messages", [])
        try:
            if not isinstance(rows, list):
                raise TypeError(f"'messages' is {type(rows).__name__}, not a list")
            return [InterviewMessage.model_validate(m) for m in rows]
        except (ValidationError, TypeError) as e:
            raise StoreReadError(self._path(project_id), e) from e

    async def append(
        self,
        project_id: str,
        role: MessageRole,
        content: str,
    ) -> InterviewMessage:
        data = await self._request(
            "POST",
            project_id,
            json={"messages": [{"role": MessageRole(role).value, "content": content}]},
            writing=True,
        )
        saved = self._parse(project_id, data)
        if not saved:
            raise StoreWriteError(self._path(project_id), RuntimeError("no message returned"))
        return saved[0]

    async def insert_many(self, messages: Sequence[InterviewMessage]) -> list[InterviewMessage]:
        by_project: dict[str, list[InterviewMessage]] = defaultdict(list)
        for message in messages:
            by_project[message.project_id].append(message)

        saved: list[InterviewMessage] = []
        for project_id, batch in by_project.items():
            data = await self._request(
                "POST",
                project_id,
                json={
                    "messages": [
                        m.model_dump(mode="json", include={"id", "role", "content", "created_at"})
                        for m in batch
                    ]
                },
                writing=True,
            )
            saved.extend(self._parse(project_id, data))
        return saved

    async def list_messages(self, project_id: str) -> list[InterviewMessage]:
        data = await self._request("GET", project_id, writing=False)
        return self._parse(project_id, data)

    async def delete_project(self, project_id: str) -> int:
        data = await self._request("DELETE", project_id, writing=True)
        try:
            return int(data.get("deleted", 0))
        except (TypeError, ValueError) as e:
            raise StoreReadError(self._path(project_id), e) from e
