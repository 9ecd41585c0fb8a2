"""Tests for progress publishing and the document progress stream."""

import json

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.db import models
from app.services import progress
from stubs import FakeRedis, progress_message


def _use_redis(monkeypatch: pytest.MonkeyPatch, client: FakeRedis) -> None:
    async def get_fake_redis() -> FakeRedis:
        return client

    monkeypatch.setattr(progress, "get_redis", get_fake_redis)


async def _create_document(
    session_maker: async_sessionmaker[AsyncSession],
) -> int:
    async with session_maker() as session:
        document = models.Document(
            filename="lecture.pdf",
            object_key="1-lecture.pdf",
            url="http://storage.test/flashdeck/1-lecture.pdf",
            mime_type="application/pdf",
        )
        session.add(document)
        await session.commit()
        return document.id


class TestPublishProgress:
    @pytest.mark.asyncio
    async def test_publishes_json_on_document_channel(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        redis_client = FakeRedis()
        _use_redis(monkeypatch, redis_client)

        await progress.publish_progress(7, {"batch": 1, "state": "pending"})

        assert redis_client.published == [
            ("flashdeck:progress:7", json.dumps({"batch": 1, "state": "pending"}))
        ]


class TestSubscribeProgress:
    """Tests for relaying progress events from Redis."""

    @pytest.mark.asyncio
    async def test_stops_after_complete(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Events are relayed in order until the terminal one."""
        redis_client = FakeRedis(
            [
                progress_message({"batch": 1, "state": "partially_complete"}),
                progress_message("not json"),
                {"type": "subscribe", "data": 1},
                progress_message({"batch": 2, "state": "complete"}),
                progress_message({"batch": 3, "state": "partially_complete"}),
            ]
        )
        _use_redis(monkeypatch, redis_client)

        events = [e async for e in progress.subscribe_progress(3, poll_interval=0)]

        assert events == [
            {"batch": 1, "state": "partially_complete"},
            {"batch": 2, "state": "complete"},
        ]
        assert redis_client.pubsub_client.channels == []
        assert redis_client.pubsub_client.closed

    @pytest.mark.asyncio
    async def test_stops_after_failed(self, monkeypatch: pytest.MonkeyPatch) -> None:
        redis_client = FakeRedis(
            [progress_message({"batch": 1, "state": "failed", "error": "boom"})]
        )
        _use_redis(monkeypatch, redis_client)

        events = [e async for e in progress.subscribe_progress(3, poll_interval=0)]

        assert events == [{"batch": 1, "state": "failed", "error": "boom"}]


class TestDocumentProgressStream:
    """Tests for GET /documents/{id}/stream."""

    @pytest.mark.asyncio
    async def test_streams_server_sent_events(
        self,
        client: AsyncClient,
        session_maker: async_sessionmaker[AsyncSession],
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        document_id = await _create_document(session_maker)
        first = {"batch": 1, "total_batches": 2, "state": "partially_complete"}
        last = {"batch": 2, "total_batches": 2, "state": "complete"}
        redis_client = FakeRedis([progress_message(first), progress_message(last)])
        _use_redis(monkeypatch, redis_client)

        response = await client.get(f"/api/v1/documents/{document_id}/stream")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/event-stream")
        assert response.text == (
            f"data: {json.dumps(first)}\n\ndata: {json.dumps(last)}\n\n"
        )

    @pytest.mark.asyncio
    async def test_missing_document(self, client: AsyncClient) -> None:
        response = await client.get("/api/v1/documents/999/stream")
        assert response.status_code == 404
