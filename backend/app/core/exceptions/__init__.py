from app.core.exceptions.handlers import configure_exception_handlers
from app.domain.exceptions import (
    DomainError,
    InfrastructureError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from app.domain.notification.exceptions import (
    NotificationNotFoundError,
    NotificationPersistenceError,
    NotificationValidationError,
)

__all__ = [
    "DomainError",
    "InfrastructureError",
    "NotFoundError",
    "NotificationNotFoundError",
    "NotificationPersistenceError",
    "NotificationValidationError",
    "UnauthorizedError",
    "ValidationError",
    "configure_exception_handlers",
]
