from app.domain.enums.notification import (
    ChannelStatus,
    EmailPolicy,
    NotificationChannel,
    NotificationEvent,
    NotificationPriority,
    NotificationType,
)

__all__ = [
    "ChannelStatus",
    "EmailPolicy",
    "NotificationChannel",
    "NotificationEvent",
    "NotificationPriority",
    "NotificationType",
]
