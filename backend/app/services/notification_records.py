import asyncio
import logging
from dataclasses import replace
from datetime import UTC, datetime

from app.core.metrics import NotificationMetrics
from app.db.repositories import NotificationRepository
from app.domain.enums.notification import NotificationPriority, NotificationType
from app.domain.notification import (
    DomainNotification,
    DomainNotificationCreate,
    DomainNotificationFilter,
    DomainNotificationListResult,
    DomainNotificationStats,
    NotificationNotFoundError,
    NotificationValidationError,
)
from app.settings import Settings


class NotificationRecordManager:
    """Owns every write to the notification store and the read-side aggregates."""

    def __init__(
        self,
        repository: NotificationRepository,
        metrics: NotificationMetrics,
        settings: Settings,
        logger: logging.Logger,
    ) -> None:
        self.repository = repository
        self.metrics = metrics
        self.settings = settings
        self.logger = logger

    @staticmethod
    def _validate(create_data: DomainNotificationCreate) -> DomainNotificationCreate:
        missing = [
            name
            for name in ("user_id", "notification_type", "title", "message")
            if not str(getattr(create_data, name) or "").strip()
        ]
        if missing:
            raise NotificationValidationError(f"Missing required notification fields: {', '.join(missing)}")

        try:
            notification_type = NotificationType(create_data.notification_type)
        except ValueError:
            raise NotificationValidationError(
                f"Unknown notification type: {create_data.notification_type}"
            ) from None

        try:
            priority = NotificationPriority(create_data.priority or NotificationPriority.NORMAL)
        except ValueError:
            raise NotificationValidationError(f"Unknown notification priority: {create_data.priority}") from None

        return replace(
            create_data,
            notification_type=notification_type,
            priority=priority,
            data=dict(create_data.data or {}),
        )

    async def create(self, create_data: DomainNotificationCreate) -> DomainNotification:
        """Persist a new pending notification. Validation and store failures propagate."""
        valid = self._validate(create_data)
        try:
            notification = await self.repository.create_notification(valid)
        except Exception as e:
            self.logger.error(
                "Failed to persist notification",
                extra={"user_id": valid.user_id, "notification_type": str(valid.notification_type), "error": str(e)},
            )
            self.metrics.record_notification_create_failed(str(valid.notification_type), type(e).__name__)
            raise

        self.metrics.record_notification_created(str(notification.notification_type), str(notification.priority))
        self.logger.info(
            f"Created notification {notification.notification_id}",
            extra={
                "notification_id": notification.notification_id,
                "user_id": notification.user_id,
                "notification_type": str(notification.notification_type),
                "priority": str(notification.priority),
            },
        )
        return notification

    async def mark_delivered(self, notification_id: str) -> datetime | None:
        """Flag a record delivered. Returns the timestamp written, or None if it was already delivered."""
        delivered_at = datetime.now(UTC)
        if await self.repository.mark_delivered(notification_id, delivered_at):
            return delivered_at
        return None

    async def mark_read(self, notification_ids: list[str], user_id: str) -> int:
        ids = list(dict.fromkeys(i for i in notification_ids if i))
        if not ids:
            return 0
        count = await self.repository.mark_as_read(ids, user_id)
        self.metrics.record_notifications_read(count)
        return count

    async def mark_all_read(self, user_id: str) -> int:
        count = await self.repository.mark_all_as_read(user_id)
        self.metrics.record_notifications_read(count)
        return count

    async def delete(self, notification_id: str, user_id: str) -> None:
        if not await self.repository.delete_notification(notification_id, user_id):
            raise NotificationNotFoundError(notification_id)

    async def delete_all_read(self, user_id: str) -> int:
        return await self.repository.delete_all_read(user_id)

    async def delete_read_before(self, cutoff: datetime) -> int:
        return await self.repository.delete_read_before(cutoff)

    async def get_unread_count(self, user_id: str) -> int:
        return await self.repository.get_unread_count(user_id)

    async def get_stats(self, user_id: str) -> DomainNotificationStats:
        total, unread, delivered, by_priority = await asyncio.gather(
            self.repository.count_notifications(user_id),
            self.repository.get_unread_count(user_id),
            self.repository.count_delivered(user_id),
            self.repository.count_unread_by_priority(user_id),
        )
        return DomainNotificationStats(total=total, unread=unread, delivered=delivered, by_priority=by_priority)

    async def list_notifications(
        self,
        user_id: str,
        page: int = 1,
        limit: int | None = None,
        filters: DomainNotificationFilter | None = None,
    ) -> DomainNotificationListResult:
        limit = self.settings.NOTIF_DEFAULT_PAGE_SIZE if limit is None else limit
        if page < 1:
            raise NotificationValidationError("Page must be a positive number")
        if not 1 <= limit <= self.settings.NOTIF_MAX_PAGE_SIZE:
            raise NotificationValidationError(f"Limit must be between 1 and {self.settings.NOTIF_MAX_PAGE_SIZE}")

        notifications, total, unread_count = await asyncio.gather(
            self.repository.list_notifications(user_id, filters, skip=(page - 1) * limit, limit=limit),
            self.repository.count_notifications(user_id, filters),
            self.repository.get_unread_count(user_id),
        )
        return DomainNotificationListResult(
            notifications=notifications, total=total, page=page, limit=limit, unread_count=unread_count
        )
