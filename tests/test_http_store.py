"""
Tests for HttpMessageStore, run against the service app in-process.

Last Grunted: 10/18/2026
"""

from __future__ import annotations

import dataclasses
from typing import AsyncIterator

import httpx
import pytest
import pytest_asyncio
from asgi_lifespan import LifespanManager
from httpx import ASGITransport, AsyncClient

from photorabbit.http_store import HttpMessageStore
from photorabbit.models import MessageRole
from photorabbit.seed import SHORT_INTERVIEW_SEED, autofill_interview
from photorabbit.store import ProjectNotFoundError, StoreError, StoreReadError, StoreWriteError
from tests.mock_data import generate_transcript


@pytest_asyncio.fixture
async def http(monkeypatch: pytest.MonkeyPatch) -> AsyncIterator[AsyncClient]:
    """Client for a fresh in-memory service with one project, ``demo``."""
    import interview_service

    monkeypatch.setattr(
        interview_service,
        "RUNTIME_CONFIG",
        dataclasses.replace(interview_service.RUNTIME_CONFIG, data_dir=None),
    )
    async with LifespanManager(interview_service.app) as manager:
        transport = ASGITransport(app=manager.app)
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            response = await ac.post("/projects", json={"id": "demo", "pet_name": "Max"})
            assert response.status_code == 201
            yield ac


@pytest.fixture
def store(http: AsyncClient) -> HttpMessageStore:
    return HttpMessageStore(http)


class TestHttpMessageStore:
    """Tests for the REST-backed message store."""

    @pytest.mark.asyncio
    async def test_append_and_list(self, store: HttpMessageStore) -> None:
        """Appends come back oldest first with server timestamps."""
        first = await store.append("demo", MessageRole.USER, "max is the best boy ever")
        second = await store.append("demo", MessageRole.ASSISTANT, "What does he do all day?")

        messages = await store.list_messages("demo")

        assert [m.id for m in messages] == [first.id, second.id]
        assert first.created_at < second.created_at
        assert messages[1].role == MessageRole.ASSISTANT

    @pytest.mark.asyncio
    async def test_insert_many_keeps_timestamps(self, store: HttpMessageStore) -> None:
        """Pre-built messages keep their ids and timestamps."""
        transcript = generate_transcript("demo", 4)

        saved = await store.insert_many(transcript)
        listed = await store.list_messages("demo")

        assert [m.id for m in saved] == [m.id for m in transcript]
        assert [m.created_at for m in listed] == [m.created_at for m in transcript]

    @pytest.mark.asyncio
    async def test_delete_project(self, store: HttpMessageStore) -> None:
        """Clearing returns the number removed."""
        await store.append("demo", MessageRole.USER, "hi")
        await store.append("demo", MessageRole.USER, "again")

        assert await store.delete_project("demo") == 2
        assert await store.list_messages("demo") == []

    @pytest.mark.asyncio
    async def test_autofill_through_http(self, store: HttpMessageStore) -> None:
        """The seed routine works over REST in batches."""
        inserted = await autofill_interview(store, "demo", batch_size=5)

        messages = await store.list_messages("demo")

        assert inserted == len(SHORT_INTERVIEW_SEED)
        assert [m.content for m in messages] == [content for _, content in SHORT_INTERVIEW_SEED]

    @pytest.mark.asyncio
    async def test_unknown_project(self, store: HttpMessageStore) -> None:
        """A 404 from the service is ProjectNotFoundError."""
        with pytest.raises(ProjectNotFoundError):
            await store.list_messages("nope")

        with pytest.raises(ProjectNotFoundError):
            await store.append("nope", MessageRole.USER, "hi")

    @pytest.mark.asyncio
    async def test_rejected_write(self, store: HttpMessageStore) -> None:
        """Validation failures surface as StoreWriteError."""
        with pytest.raises(StoreWriteError):
            await store.append("demo", MessageRole.SYSTEM, "not allowed")


class TestHttpMessageStoreTransport:
    """Transport failures."""

    @pytest.mark.asyncio
    async def test_connection_error_on_read(self) -> None:
        """A refused connection on read is StoreReadError."""

        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with httpx.AsyncClient(
            transport=httpx.MockTransport(refuse), base_url="http://test"
        ) as client:
            store = HttpMessageStore(client)
            with pytest.raises(StoreReadError):
                await store.list_messages("demo")
            with pytest.raises(StoreWriteError):
                await store.append("demo", MessageRole.USER, "hi")

    @pytest.mark.asyncio
    async def test_headers_sent(self) -> None:
        """Extra headers go out on every call."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"project_id": "demo", "messages": []})

        async with httpx.AsyncClient(
            transport=httpx.MockTransport(handler), base_url="http://test"
        ) as client:
            store = HttpMessageStore(client, headers={"Authorization": "Bearer abc"})
            await store.list_messages("demo")

        assert seen[0].headers["Authorization"] == "Bearer abc"
        assert seen[0].url.path == "/projects/demo/interview"

    @pytest.mark.asyncio
    async def test_non_json_body(self) -> None:
        """An unreadable success body is StoreReadError."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=b"<html>oops</html>")

        async with httpx.AsyncClient(
            transport=httpx.MockTransport(handler), base_url="http://test"
        ) as client:
            store = HttpMessageStore(client)
            with pytest.raises(StoreReadError):
                await store.list_messages("demo")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [
            {"messages": [{"role": "bogus", "content": 1}]},
            {"messages": "not a list"},
            [{"role": "user", "content": "hi"}],
        ],
    )
    async def test_malformed_success_body(self, body: object) -> None:
        """Well-formed JSON with the wrong shape is a store error, on reads and writes."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(201, json=body)

        async with httpx.AsyncClient(
            transport=httpx.MockTransport(handler), base_url="http://test"
        ) as client:
            store = HttpMessageStore(client)
            with pytest.raises(StoreError):
                await store.list_messages("demo")
            with pytest.raises(StoreError):
                await store.append("demo", MessageRole.USER, "hi")

    @pytest.mark.asyncio
    async def test_bad_delete_count(self) -> None:
        """A non-numeric delete count is StoreReadError."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"ok": True, "deleted": "many"})

        async with httpx.AsyncClient(
            transport=httpx.MockTransport(handler), base_url="http://test"
        ) as client:
            with pytest.raises(StoreReadError):
                await HttpMessageStore(client).delete_project("demo")
