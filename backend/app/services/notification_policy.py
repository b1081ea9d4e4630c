"""Email channel policy.

Two pieces decide whether a notification also goes out by email:

* ``classify`` is a static lookup from notification type to an ``EmailPolicy`` bucket.
* ``PreferenceResolver`` combines that bucket with the recipient's stored settings.

Transactional and security types are always emailed, even when the user has switched
email off. A few course-activity types are emailed only when both ``email`` and
``course_updates`` are enabled. Everything else stays in-app.
"""

import logging

from app.db.repositories import NotificationSettingsRepository
from app.domain.enums.notification import EmailPolicy, NotificationType
from app.domain.user import DomainNotificationSettings

ALWAYS_EMAIL_TYPES: frozenset[NotificationType] = frozenset(
    {
        NotificationType.PAYMENT_CONFIRMED,
        NotificationType.PAYMENT_FAILED,
        NotificationType.SECURITY_ALERT,
        NotificationType.ACCOUNT_SUSPENDED,
        NotificationType.COURSE_APPROVED,
        NotificationType.COURSE_REJECTED,
        NotificationType.ASSIGNMENT_GRADED,
        NotificationType.CERTIFICATE_READY,
        NotificationType.REFUND_PROCESSED,
        NotificationType.PAYOUT_PROCESSED,
    }
)

CONDITIONAL_EMAIL_TYPES: frozenset[NotificationType] = frozenset(
    {
        NotificationType.NEW_STUDENT_ENROLLED,
        NotificationType.COURSE_COMPLETED,
        NotificationType.SUPPORT_TICKET_RESOLVED,
    }
)

# Used when the user has never saved settings; narrower than ALWAYS_EMAIL_TYPES.
DEFAULT_EMAIL_TYPES: frozenset[NotificationType] = frozenset(
    {
        NotificationType.PAYMENT_CONFIRMED,
        NotificationType.PAYMENT_FAILED,
        NotificationType.SECURITY_ALERT,
        NotificationType.ACCOUNT_SUSPENDED,
        NotificationType.CERTIFICATE_READY,
    }
)


def classify(notification_type: NotificationType) -> EmailPolicy:
    if notification_type in ALWAYS_EMAIL_TYPES:
        return EmailPolicy.ALWAYS
    if notification_type in CONDITIONAL_EMAIL_TYPES:
        return EmailPolicy.CONDITIONAL
    return EmailPolicy.NEVER


def email_decision(notification_type: NotificationType, settings: DomainNotificationSettings | None) -> bool:
    """Pure email decision for a type given the user's settings (None = never saved)."""
    if settings is None:
        return notification_type in DEFAULT_EMAIL_TYPES

    match classify(notification_type):
        case EmailPolicy.ALWAYS:
            return True
        case EmailPolicy.CONDITIONAL:
            return settings.email and settings.course_updates
        case _:
            return False


class PreferenceResolver:
    def __init__(self, settings_repository: NotificationSettingsRepository, logger: logging.Logger) -> None:
        self.settings_repository = settings_repository
        self.logger = logger

    async def should_send_email(self, user_id: str, notification_type: NotificationType) -> bool:
        """Fail closed: an unreadable settings store means no email."""
        try:
            settings = await self.settings_repository.get_settings(user_id)
        except Exception as e:
            self.logger.error(
                "Failed to read notification settings; suppressing email",
                extra={"user_id": user_id, "notification_type": str(notification_type), "error": str(e)},
            )
            return False

        return email_decision(notification_type, settings)
