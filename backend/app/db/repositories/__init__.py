from app.db.repositories.notification_repository import NotificationRepository
from app.db.repositories.notification_settings_repository import NotificationSettingsRepository
from app.db.repositories.user_repository import UserRepository

__all__ = [
    "NotificationRepository",
    "NotificationSettingsRepository",
    "UserRepository",
]
