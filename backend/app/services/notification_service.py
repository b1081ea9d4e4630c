import asyncio
import logging
from dataclasses import replace
from typing import Sequence

from app.domain.enums.notification import ChannelStatus, NotificationChannel, NotificationEvent
from app.domain.notification import (
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
    NotificationValidationError,
)
from app.services.email import EmailDispatcher
from app.services.notification_policy import PreferenceResolver
from app.services.notification_records import NotificationRecordManager
from app.services.realtime_dispatcher import RealtimeDispatcher
from app.services.side_channel import ControlEventPublisher
from app.settings import Settings


class NotificationService:
    """Caller-facing notification API.

    Creation persists first; only a persistence or validation failure fails the call.
    Real-time push and email are then attempted in order and their outcomes recorded
    in a DeliveryReport, never raised.
    """

    def __init__(
        self,
        record_manager: NotificationRecordManager,
        realtime: RealtimeDispatcher,
        email: EmailDispatcher,
        preferences: PreferenceResolver,
        events: ControlEventPublisher,
        settings: Settings,
        logger: logging.Logger,
    ) -> None:
        self.records = record_manager
        self.realtime = realtime
        self.email = email
        self.preferences = preferences
        self.events = events
        self.settings = settings
        self.logger = logger

    async def create_notification(
        self, create_data: DomainNotificationCreate, options: DeliveryOptions | None = None
    ) -> DomainNotification:
        report = await self.deliver(create_data, options)
        return report.notification

    async def deliver(
        self, create_data: DomainNotificationCreate, options: DeliveryOptions | None = None
    ) -> DeliveryReport:
        """Persist one notification and run its side channels. Raises only if persisting fails."""
        notification = await self.records.create(create_data)
        return await self._dispatch(notification, options or DeliveryOptions())

    async def create_bulk_notifications(
        self,
        user_ids: Sequence[str],
        create_data: DomainNotificationCreate,
        options: DeliveryOptions | None = None,
    ) -> BulkCreateResult:
        """Fan the same notification out to many recipients.

        Records are persisted one by one; a failed recipient is collected and the rest
        continue. Side channels for the created records then run concurrently.
        """
        options = options or DeliveryOptions()
        result = BulkCreateResult()

        for user_id in user_ids:
            try:
                notification = await self.records.create(replace(create_data, user_id=user_id))
            except Exception as e:
                self.logger.warning(
                    "Bulk notification creation failed for recipient",
                    extra={"user_id": user_id, "notification_type": str(create_data.notification_type), "error": str(e)},
                )
                result.failures.append(BulkCreateFailure(user_id=user_id, error=str(e)))
                continue
            result.notifications.append(notification)

        sem = asyncio.Semaphore(self.settings.NOTIF_BULK_CONCURRENCY)

        async def worker(notification: DomainNotification) -> DeliveryReport:
            async with sem:
                return await self._dispatch(notification, options)

        result.reports = list(await asyncio.gather(*(worker(n) for n in result.notifications)))

        self.logger.info(
            "Bulk notification completed",
            extra={
                "notification_type": str(create_data.notification_type),
                "total_users": len(user_ids),
                "created": len(result.notifications),
                "failed": len(result.failures),
            },
        )
        return result

    async def _dispatch(self, notification: DomainNotification, options: DeliveryOptions) -> DeliveryReport:
        report = DeliveryReport(notification=notification)

        if options.send_realtime:
            report.outcomes.append(await self.realtime.push(notification))

        if await self._should_email(notification, options):
            report.outcomes.append(await self.email.dispatch(notification))
        else:
            report.outcomes.append(ChannelOutcome(channel=NotificationChannel.EMAIL, status=ChannelStatus.SKIPPED))

        failed = [o for o in report.outcomes if not o.ok]
        if failed:
            self.logger.warning(
                f"Notification {notification.notification_id} persisted with side-channel failures",
                extra={
                    "notification_id": notification.notification_id,
                    "user_id": notification.user_id,
                    "failed_channels": [str(o.channel) for o in failed],
                },
            )
        return report

    async def _should_email(self, notification: DomainNotification, options: DeliveryOptions) -> bool:
        if options.send_email is not None:
            return options.send_email
        return await self.preferences.should_send_email(notification.user_id, notification.notification_type)

    async def get_user_notifications(
        self,
        user_id: str,
        page: int = 1,
        limit: int | None = None,
        filters: DomainNotificationFilter | None = None,
    ) -> DomainNotificationListResult:
        return await self.records.list_notifications(user_id, page=page, limit=limit, filters=filters)

    async def mark_as_read(self, notification_ids: list[str], user_id: str) -> int:
        if len(notification_ids) > self.settings.NOTIF_MAX_MARK_READ_IDS:
            raise NotificationValidationError(
                f"Cannot mark more than {self.settings.NOTIF_MAX_MARK_READ_IDS} notifications at once"
            )
        count = await self.records.mark_read(notification_ids, user_id)
        if count > 0:
            await self.events.publish(
                user_id, NotificationEvent.MARKED_READ, {"notification_ids": notification_ids, "count": count}
            )
        return count

    async def mark_all_as_read(self, user_id: str) -> int:
        count = await self.records.mark_all_read(user_id)
        if count > 0:
            await self.events.publish(user_id, NotificationEvent.ALL_READ, {"count": count})
        return count

    async def delete_notification(self, notification_id: str, user_id: str) -> None:
        await self.records.delete(notification_id, user_id)
        await self.events.publish(user_id, NotificationEvent.DELETED, {"notification_id": notification_id})

    async def delete_all_read(self, user_id: str) -> int:
        count = await self.records.delete_all_read(user_id)
        if count > 0:
            await self.events.publish(user_id, NotificationEvent.READ_DELETED, {"count": count})
        return count

    async def get_unread_count(self, user_id: str) -> int:
        return await self.records.get_unread_count(user_id)

    async def get_notification_stats(self, user_id: str) -> DomainNotificationStats:
        return await self.records.get_stats(user_id)
