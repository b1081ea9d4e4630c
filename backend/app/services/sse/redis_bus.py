from __future__ import annotations

import json
from typing import Any

import redis.asyncio as redis
from pydantic import ValidationError

from app.schemas_pydantic.sse import RedisNotificationEvent, RedisNotificationMessage

type BusMessage = RedisNotificationMessage | RedisNotificationEvent


class SSERedisSubscription:
    """Subscription wrapper for Redis pubsub with typed message parsing."""

    def __init__(self, pubsub: redis.client.PubSub, channel: str) -> None:
        self._pubsub = pubsub
        self._channel = channel

    async def get(self, timeout: float = 0.5) -> BusMessage | None:
        """Get the next typed message; malformed payloads are skipped."""
        msg = await self._pubsub.get_message(ignore_subscribe_messages=True, timeout=timeout)
        if not msg or msg.get("type") != "message":
            return None
        try:
            raw: dict[str, Any] = json.loads(msg["data"])
            if "notification_id" in raw:
                return RedisNotificationMessage.model_validate(raw)
            return RedisNotificationEvent.model_validate(raw)
        except (ValueError, ValidationError):
            return None

    async def close(self) -> None:
        try:
            await self._pubsub.unsubscribe(self._channel)
        finally:
            await self._pubsub.aclose()  # type: ignore[no-untyped-call]


class SSERedisBus:
    """Redis-backed pub/sub bus fanning per-user notification events out to every worker."""

    def __init__(self, redis_client: redis.Redis, notif_prefix: str = "sse:notif:") -> None:
        self._redis = redis_client
        self._notif_prefix = notif_prefix

    def _notif_channel(self, user_id: str) -> str:
        return f"{self._notif_prefix}{user_id}"

    async def publish_notification(self, user_id: str, message: BusMessage) -> int:
        """Publish a typed message; returns the number of live subscribers that received it."""
        receivers: int = await self._redis.publish(self._notif_channel(user_id), message.model_dump_json())
        return receivers

    async def open_notification_subscription(self, user_id: str) -> SSERedisSubscription:
        pubsub = self._redis.pubsub()
        channel = self._notif_channel(user_id)
        await pubsub.subscribe(channel)
        return SSERedisSubscription(pubsub, channel)
