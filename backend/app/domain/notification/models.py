from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

from app.domain.enums.notification import (
    ChannelStatus,
    NotificationChannel,
    NotificationPriority,
    NotificationType,
)


@dataclass
class DomainNotificationCreate:
    user_id: str
    notification_type: NotificationType
    title: str
    message: str
    priority: NotificationPriority = NotificationPriority.NORMAL
    data: dict[str, Any] = field(default_factory=dict)
    action_url: str | None = None


@dataclass
class DomainNotification:
    notification_id: str = field(default_factory=lambda: str(uuid4()))
    user_id: str = ""
    notification_type: NotificationType = NotificationType.SYSTEM_ANNOUNCEMENT
    priority: NotificationPriority = NotificationPriority.NORMAL

    title: str = ""
    message: str = ""
    data: dict[str, Any] = field(default_factory=dict)
    action_url: str | None = None

    is_delivered: bool = False
    delivered_at: datetime | None = None
    is_read: bool = False
    read_at: datetime | None = None

    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))


@dataclass
class DomainNotificationFilter:
    is_read: bool | None = None
    notification_type: NotificationType | None = None
    priority: NotificationPriority | None = None


@dataclass
class DomainNotificationListResult:
    notifications: list[DomainNotification]
    total: int
    page: int
    limit: int
    unread_count: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0


@dataclass
class DomainNotificationStats:
    total: int
    unread: int
    delivered: int
    by_priority: dict[NotificationPriority, int] = field(default_factory=dict)


@dataclass(frozen=True)
class DeliveryOptions:
    """Per-call channel switches.

    send_email=None defers to the recipient's preferences; True/False override them.
    """

    send_email: bool | None = None
    send_realtime: bool = True


@dataclass(frozen=True)
class ChannelOutcome:
    """Result of one best-effort side-channel attempt; failures are recorded, never raised."""

    channel: NotificationChannel
    status: ChannelStatus
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status in (ChannelStatus.SENT, ChannelStatus.DELIVERED, ChannelStatus.SKIPPED)


@dataclass
class DeliveryReport:
    notification: DomainNotification
    outcomes: list[ChannelOutcome] = field(default_factory=list)

    def outcome(self, channel: NotificationChannel) -> ChannelOutcome | None:
        return next((o for o in self.outcomes if o.channel == channel), None)


@dataclass(frozen=True)
class BulkCreateFailure:
    user_id: str
    error: str


@dataclass
class BulkCreateResult:
    notifications: list[DomainNotification] = field(default_factory=list)
    failures: list[BulkCreateFailure] = field(default_factory=list)
    reports: list[DeliveryReport] = field(default_factory=list)
