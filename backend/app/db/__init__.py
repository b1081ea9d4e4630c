from app.db.docs import ALL_DOCUMENTS
from app.db.repositories import NotificationRepository, NotificationSettingsRepository, UserRepository

__all__ = [
    "ALL_DOCUMENTS",
    "NotificationRepository",
    "NotificationSettingsRepository",
    "UserRepository",
]
