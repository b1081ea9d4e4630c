import asyncio
import json
import logging
from collections.abc import AsyncGenerator, Awaitable, Callable
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

from app.domain.enums.notification import NotificationEvent
from app.schemas_pydantic.sse import HeartbeatEvent, RedisNotificationMessage, SSEEvent
from app.services.sse.presence import PresenceRegistry
from app.services.sse.redis_bus import SSERedisBus, SSERedisSubscription
from app.settings import Settings


class NotificationStreamService:
    """Relays a user's bus messages to one SSE connection and keeps presence alive meanwhile."""

    def __init__(
        self,
        bus: SSERedisBus,
        presence: PresenceRegistry,
        settings: Settings,
        logger: logging.Logger,
    ) -> None:
        self.bus = bus
        self.presence = presence
        self.logger = logger
        self.heartbeat_interval = settings.SSE_HEARTBEAT_INTERVAL

    async def create_notification_stream(
        self,
        user_id: str,
        is_disconnected: Callable[[], Awaitable[bool]] | None = None,
        poll_timeout: float = 0.5,
    ) -> AsyncGenerator[dict[str, Any], None]:
        connection_id = f"sse_{user_id}_{uuid4().hex}"
        subscription: SSERedisSubscription | None = None
        try:
            # subscribe before registering presence, otherwise a push can land in between and be lost
            subscription = await self.bus.open_notification_subscription(user_id)
            await self.presence.register(user_id, connection_id)
            self.logger.info("Notification stream opened", extra={"user_id": user_id, "connection_id": connection_id})

            yield self._format_event("connected", {
                "message": "Connected to notification stream",
                "user_id": user_id,
                "connection_id": connection_id,
                "timestamp": datetime.now(UTC).isoformat(),
            })

            last_heartbeat = datetime.now(UTC)
            while not (is_disconnected is not None and await is_disconnected()):
                now = datetime.now(UTC)
                if (now - last_heartbeat).total_seconds() >= self.heartbeat_interval:
                    await self.presence.refresh(user_id)
                    heartbeat = HeartbeatEvent(timestamp=now, user_id=user_id)
                    yield self._format_event(NotificationEvent.HEARTBEAT, heartbeat.model_dump(mode="json"))
                    last_heartbeat = now

                msg = await subscription.get(timeout=poll_timeout)
                if msg is None:
                    continue
                if isinstance(msg, RedisNotificationMessage):
                    yield self._format_event(msg.event, msg.model_dump(mode="json", exclude={"event"}))
                else:
                    yield self._format_event(msg.event, dict(msg.payload))
        except asyncio.CancelledError:
            self.logger.debug("Notification stream cancelled", extra={"user_id": user_id})
            raise
        finally:
            try:
                await self.presence.unregister(user_id, connection_id)
            finally:
                if subscription is not None:
                    await subscription.close()
            self.logger.info("Notification stream closed", extra={"user_id": user_id, "connection_id": connection_id})

    @staticmethod
    def _format_event(event_type: str, data: dict[str, Any]) -> dict[str, Any]:
        return SSEEvent(event=str(event_type), data=json.dumps(data)).model_dump()
