import logging
from dataclasses import asdict

from app.db.repositories import NotificationSettingsRepository
from app.domain.enums.notification import NotificationEvent
from app.domain.user import DomainNotificationSettings, DomainNotificationSettingsUpdate
from app.services.side_channel import ControlEventPublisher


class NotificationSettingsService:
    def __init__(
        self,
        repository: NotificationSettingsRepository,
        events: ControlEventPublisher,
        logger: logging.Logger,
    ) -> None:
        self.repository = repository
        self.events = events
        self.logger = logger

    async def get_notification_settings(self, user_id: str) -> DomainNotificationSettings:
        """Stored settings, or the all-enabled defaults for a user who never saved any."""
        settings = await self.repository.get_settings(user_id)
        return settings if settings is not None else DomainNotificationSettings()

    async def update_notification_settings(
        self, user_id: str, update: DomainNotificationSettingsUpdate
    ) -> DomainNotificationSettings:
        changes = update.changes()
        settings = await self.repository.upsert_settings(user_id, changes)
        self.logger.info(
            "Notification settings updated",
            extra={"user_id": user_id, "changed_fields": sorted(changes)},
        )
        await self.events.publish(user_id, NotificationEvent.SETTINGS_UPDATED, {"settings": asdict(settings)})
        return settings
