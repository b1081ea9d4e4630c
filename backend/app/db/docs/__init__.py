from app.db.docs.notification import (
    NotificationDocument,
    NotificationSettingsDocument,
)
from app.db.docs.user import UserDocument

# All document classes that need to be initialized with Beanie
ALL_DOCUMENTS = [
    NotificationDocument,
    NotificationSettingsDocument,
    UserDocument,
]

__all__ = [
    "ALL_DOCUMENTS",
    # Notification
    "NotificationDocument",
    "NotificationSettingsDocument",
    # User
    "UserDocument",
]
