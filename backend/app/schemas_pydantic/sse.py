from datetime import datetime
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field

from app.domain.enums.notification import NotificationEvent, NotificationPriority, NotificationType


class RedisNotificationMessage(BaseModel):
    """Notification payload pushed to a user's real-time channel."""

    model_config = ConfigDict(from_attributes=True)

    event: NotificationEvent = NotificationEvent.NOTIFICATION
    notification_id: str
    notification_type: NotificationType
    title: str
    message: str
    priority: NotificationPriority
    data: Dict[str, Any] = Field(default_factory=dict)
    action_url: str | None = None
    created_at: datetime


class RedisNotificationEvent(BaseModel):
    """Control event (read/delete/settings changes) pushed to a user's real-time channel."""

    event: NotificationEvent
    payload: Dict[str, Any] = Field(default_factory=dict)


class SSEEvent(BaseModel):
    """Frame handed to the SSE response."""

    event: str = Field(description="Event type")
    data: str = Field(description="JSON-encoded event data")


class HeartbeatEvent(BaseModel):
    """Keep-alive frame payload."""

    timestamp: datetime = Field(description="Heartbeat timestamp")
    user_id: str | None = Field(None, description="Associated user ID")
