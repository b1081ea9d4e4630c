import logging

from app.core.metrics import NotificationMetrics
from app.db.repositories import UserRepository
from app.domain.enums.notification import ChannelStatus, NotificationChannel
from app.domain.notification import ChannelOutcome, DomainNotification, SideChannelError
from app.services.email.client import EmailClient, EmailMessage
from app.services.email.templates import Branding, render_email
from app.services.side_channel import SideChannelDispatcher
from app.settings import Settings


class EmailDispatcher(SideChannelDispatcher):
    channel = NotificationChannel.EMAIL

    def __init__(
        self,
        client: EmailClient,
        user_repository: UserRepository,
        metrics: NotificationMetrics,
        settings: Settings,
        logger: logging.Logger,
    ) -> None:
        super().__init__(metrics, logger, settings.NOTIF_SIDE_CHANNEL_TIMEOUT_SECONDS)
        self.client = client
        self.user_repository = user_repository
        self.brand = Branding(name=settings.BRAND_NAME, app_url=settings.APP_URL)

    async def dispatch(self, notification: DomainNotification) -> ChannelOutcome:
        """Render and send the email for a notification. Never raises."""

        async def _send() -> ChannelStatus:
            try:
                recipient = await self.user_repository.get_recipient(notification.user_id)
            except Exception as e:
                raise SideChannelError(self.channel, f"recipient lookup failed: {e}") from e
            if recipient is None or not recipient.email:
                self.logger.info(
                    "No email address on file; email skipped",
                    extra={"notification_id": notification.notification_id, "user_id": notification.user_id},
                )
                return ChannelStatus.SKIPPED

            try:
                content = render_email(notification, recipient, self.brand)
            except Exception as e:
                raise SideChannelError(self.channel, f"rendering failed: {e}") from e
            if content is None:
                return ChannelStatus.SKIPPED

            try:
                await self.client.send(
                    EmailMessage(to=recipient.email, subject=content.subject, html=content.html, text=content.text)
                )
            except Exception as e:
                raise SideChannelError(self.channel, str(e)) from e
            return ChannelStatus.SENT

        return await self._attempt(notification, _send)
