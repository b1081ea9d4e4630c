from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

from beanie import Document, Indexed
from pydantic import ConfigDict, Field
from pymongo import ASCENDING, DESCENDING, IndexModel

from app.domain.enums import NotificationPriority, NotificationType


class NotificationDocument(Document):
    """One notification delivered (or pending delivery) to one user."""

    notification_id: Indexed(str, unique=True) = Field(default_factory=lambda: str(uuid4()))  # type: ignore[valid-type]
    user_id: Indexed(str)  # type: ignore[valid-type]
    notification_type: NotificationType
    priority: NotificationPriority = NotificationPriority.NORMAL

    # Content
    title: str
    message: str
    data: dict[str, Any] = Field(default_factory=dict)
    action_url: str | None = None

    # Tracking (flags only move forward)
    is_delivered: bool = False
    delivered_at: datetime | None = None
    is_read: bool = False
    read_at: datetime | None = None

    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    model_config = ConfigDict(from_attributes=True)

    class Settings:
        name = "notifications"
        use_state_management = True
        indexes = [
            IndexModel([("user_id", ASCENDING), ("created_at", DESCENDING)], name="idx_notif_user_created_desc"),
            IndexModel([("user_id", ASCENDING), ("is_read", ASCENDING)], name="idx_notif_user_read"),
            IndexModel([("is_read", ASCENDING), ("read_at", ASCENDING)], name="idx_notif_read_at"),
        ]


class NotificationSettingsDocument(Document):
    """Per-user channel and category toggles."""

    user_id: Indexed(str, unique=True)  # type: ignore[valid-type]
    email: bool = True
    in_app: bool = True
    course_updates: bool = True
    assignment_updates: bool = True
    discussion_updates: bool = True
    payment_updates: bool = True
    account_updates: bool = True

    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    model_config = ConfigDict(from_attributes=True)

    class Settings:
        name = "notification_settings"
        use_state_management = True
