import logging
from datetime import UTC, datetime

from beanie.operators import Eq

from app.db.docs import NotificationSettingsDocument
from app.db.repositories.notification_repository import translate_persistence_errors
from app.domain.user import DomainNotificationSettings


class NotificationSettingsRepository:
    def __init__(self, logger: logging.Logger) -> None:
        self.logger = logger

    @staticmethod
    def _to_domain(doc: NotificationSettingsDocument) -> DomainNotificationSettings:
        return DomainNotificationSettings(**doc.model_dump(exclude={"id", "revision_id", "user_id", "created_at"}))

    @translate_persistence_errors
    async def get_settings(self, user_id: str) -> DomainNotificationSettings | None:
        doc = await NotificationSettingsDocument.find_one(Eq(NotificationSettingsDocument.user_id, user_id))
        return self._to_domain(doc) if doc else None

    @translate_persistence_errors
    async def upsert_settings(self, user_id: str, changes: dict[str, bool]) -> DomainNotificationSettings:
        doc = await NotificationSettingsDocument.find_one(Eq(NotificationSettingsDocument.user_id, user_id))
        if doc is None:
            doc = NotificationSettingsDocument(user_id=user_id, **changes)
            await doc.insert()
            self.logger.info("Created notification settings", extra={"user_id": user_id})
        else:
            await doc.set({**changes, "updated_at": datetime.now(UTC)})
        return self._to_domain(doc)
