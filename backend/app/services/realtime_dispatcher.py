import logging

from app.core.metrics import NotificationMetrics
from app.domain.enums.notification import ChannelStatus, NotificationChannel
from app.domain.notification import ChannelOutcome, DomainNotification, SideChannelError
from app.services.notification_records import NotificationRecordManager
from app.services.side_channel import SideChannelDispatcher
from app.services.sse import RealtimeTransport
from app.settings import Settings


class RealtimeDispatcher(SideChannelDispatcher):
    """Pushes a persisted notification to the recipient's live sessions.

    The push fires regardless of presence. Presence is checked right after, and an
    online recipient gets the record flagged delivered. "Delivered" only means a
    session was live at push time.
    """

    channel = NotificationChannel.REALTIME

    def __init__(
        self,
        transport: RealtimeTransport,
        record_manager: NotificationRecordManager,
        metrics: NotificationMetrics,
        settings: Settings,
        logger: logging.Logger,
    ) -> None:
        super().__init__(metrics, logger, settings.NOTIF_SIDE_CHANNEL_TIMEOUT_SECONDS)
        self.transport = transport
        self.record_manager = record_manager

    async def push(self, notification: DomainNotification) -> ChannelOutcome:
        async def _push() -> ChannelStatus:
            try:
                await self.transport.send_notification(notification)
                online = await self.transport.is_user_online(notification.user_id)
            except Exception as e:
                raise SideChannelError(self.channel, str(e)) from e
            return ChannelStatus.DELIVERED if online else ChannelStatus.SENT

        async def _flag_delivered(status: ChannelStatus) -> ChannelStatus:
            if status != ChannelStatus.DELIVERED:
                return status
            try:
                delivered_at = await self.record_manager.mark_delivered(notification.notification_id)
            except Exception as e:
                raise SideChannelError(self.channel, f"could not flag delivered: {e}") from e
            if delivered_at is not None:
                notification.is_delivered = True
                notification.delivered_at = delivered_at
            return status

        outcome = await self._attempt(notification, _push, finalize=_flag_delivered)
        if outcome.status == ChannelStatus.DELIVERED:
            self.logger.debug(
                "Recipient online; notification marked delivered",
                extra={"notification_id": notification.notification_id, "user_id": notification.user_id},
            )
        return outcome
