from app.domain.enums.notification import NotificationChannel
from app.domain.exceptions import DomainError, InfrastructureError, NotFoundError, ValidationError


class NotificationNotFoundError(NotFoundError):
    """Raised when a notification is not found."""

    def __init__(self, notification_id: str) -> None:
        super().__init__("Notification", notification_id)


class NotificationValidationError(ValidationError):
    """Raised when notification validation fails."""

    pass


class NotificationPersistenceError(InfrastructureError):
    """Raised when the notification store cannot be reached or rejects a write."""

    pass


class SideChannelError(DomainError):
    """Raised by a real-time or email dispatcher; always converted to a logged ChannelOutcome."""

    def __init__(self, channel: NotificationChannel, message: str) -> None:
        self.channel = channel
        super().__init__(f"{channel} delivery failed: {message}")
