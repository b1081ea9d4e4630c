from .settings_models import DomainNotificationSettings, DomainNotificationSettingsUpdate
from .user_models import DomainRecipient

__all__ = [
    "DomainNotificationSettings",
    "DomainNotificationSettingsUpdate",
    "DomainRecipient",
]
