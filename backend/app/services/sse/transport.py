from typing import Any

from app.domain.enums.notification import NotificationEvent
from app.domain.notification import DomainNotification
from app.schemas_pydantic.sse import RedisNotificationEvent, RedisNotificationMessage
from app.services.sse.presence import PresenceRegistry
from app.services.sse.redis_bus import SSERedisBus


class RealtimeTransport:
    """Per-user push channel plus presence lookup."""

    def __init__(self, bus: SSERedisBus, presence: PresenceRegistry) -> None:
        self.bus = bus
        self.presence = presence

    async def send_notification(self, notification: DomainNotification) -> int:
        message = RedisNotificationMessage.model_validate(notification)
        return await self.bus.publish_notification(notification.user_id, message)

    async def send_to_user(self, user_id: str, event: NotificationEvent, payload: dict[str, Any]) -> int:
        """Publish a control event; sessions that are not connected simply miss it."""
        return await self.bus.publish_notification(user_id, RedisNotificationEvent(event=event, payload=payload))

    async def is_user_online(self, user_id: str) -> bool:
        return await self.presence.is_online(user_id)
