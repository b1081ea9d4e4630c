from .exceptions import (
    NotificationNotFoundError,
    NotificationPersistenceError,
    NotificationValidationError,
    SideChannelError,
)
from .models import (
    BulkCreateFailure,
    BulkCreateResult,
    ChannelOutcome,
    DeliveryOptions,
    DeliveryReport,
    DomainNotification,
    DomainNotificationCreate,
    DomainNotificationFilter,
    DomainNotificationListResult,
    DomainNotificationStats,
)

__all__ = [
    "BulkCreateFailure",
    "BulkCreateResult",
    "ChannelOutcome",
    "DeliveryOptions",
    "DeliveryReport",
    "DomainNotification",
    "DomainNotificationCreate",
    "DomainNotificationFilter",
    "DomainNotificationListResult",
    "DomainNotificationStats",
    "NotificationNotFoundError",
    "NotificationPersistenceError",
    "NotificationValidationError",
    "SideChannelError",
]
