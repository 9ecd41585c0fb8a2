"""Document processing progress events backed by Redis pub/sub."""

import asyncio
import json
from collections.abc import AsyncGenerator
from typing import Any

import redis.asyncio as redis

from app.settings import settings

_redis: redis.Redis | None = None

PROGRESS_CHANNEL_PREFIX = "flashdeck:progress"


async def get_redis() -> redis.Redis:
    """Get the Redis client instance."""
    global _redis
    if _redis is None:
        _redis = redis.from_url(settings.redis_url)
    return _redis


def progress_channel(document_id: int) -> str:
    return f"{PROGRESS_CHANNEL_PREFIX}:{document_id}"


async def publish_progress(document_id: int, event: dict[str, Any]) -> None:
    """Publish a processing progress event for a document."""
    client = await get_redis()
    await client.publish(progress_channel(document_id), json.dumps(event))


async def subscribe_progress(
    document_id: int,
    poll_interval: float = 0.25,
) -> AsyncGenerator[dict[str, Any], None]:
    """Subscribe to progress events for a document."""
    client = await get_redis()
    pubsub = client.pubsub()
    channel = progress_channel(document_id)
    await pubsub.subscribe(channel)

    try:
        while True:
            message = await pubsub.get_message(
                ignore_subscribe_messages=True,
                timeout=1.0,
            )
            if message and message.get("type") == "message":
                data = message.get("data")
                if isinstance(data, bytes):
                    data = data.decode("utf-8")
                if isinstance(data, str):
                    try:
                        event = json.loads(data)
                    except json.JSONDecodeError:
                        continue
                    yield event
                    if event.get("state") in ("complete", "failed"):
                        return
            await asyncio.sleep(poll_interval)
    finally:
        await pubsub.unsubscribe(channel)
        await pubsub.close()
