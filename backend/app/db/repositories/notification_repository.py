import functools
import logging
from dataclasses import asdict
from datetime import UTC, datetime
from typing import Any, Awaitable, Callable, ParamSpec, TypeVar

from beanie.odm.enums import SortDirection
from beanie.operators import LT, Eq, In, Set
from pymongo.errors import PyMongoError

from app.db.docs import NotificationDocument
from app.domain.enums.notification import NotificationPriority
from app.domain.notification import (
    DomainNotification,
    DomainNotificationCreate,
    DomainNotificationFilter,
    NotificationPersistenceError,
)

P = ParamSpec("P")
R = TypeVar("R")


def translate_persistence_errors(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
    """Surface driver failures as NotificationPersistenceError."""

    @functools.wraps(func)
    async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        try:
            return await func(*args, **kwargs)
        except PyMongoError as e:
            raise NotificationPersistenceError(f"{func.__name__} failed: {e}") from e

    return wrapper


class NotificationRepository:
    def __init__(self, logger: logging.Logger) -> None:
        self.logger = logger

    @staticmethod
    def _to_domain(doc: NotificationDocument) -> DomainNotification:
        return DomainNotification(**doc.model_dump(exclude={"id", "revision_id"}))

    @staticmethod
    def _filter_conditions(user_id: str, filters: DomainNotificationFilter | None) -> list[Any]:
        conditions: list[Any] = [Eq(NotificationDocument.user_id, user_id)]
        if filters is None:
            return conditions
        if filters.is_read is not None:
            conditions.append(Eq(NotificationDocument.is_read, filters.is_read))
        if filters.notification_type is not None:
            conditions.append(Eq(NotificationDocument.notification_type, filters.notification_type))
        if filters.priority is not None:
            conditions.append(Eq(NotificationDocument.priority, filters.priority))
        return conditions

    @translate_persistence_errors
    async def create_notification(self, create_data: DomainNotificationCreate) -> DomainNotification:
        doc = NotificationDocument(**asdict(create_data))
        await doc.insert()
        return self._to_domain(doc)

    @translate_persistence_errors
    async def create_notifications(self, items: list[DomainNotificationCreate]) -> list[DomainNotification]:
        """Insert many records in one round trip; all-or-nothing from the caller's view."""
        if not items:
            return []
        docs = [NotificationDocument(**asdict(item)) for item in items]
        await NotificationDocument.insert_many(docs)
        return [self._to_domain(d) for d in docs]

    @translate_persistence_errors
    async def mark_delivered(self, notification_id: str, delivered_at: datetime | None = None) -> bool:
        """Set the delivered flag once; a second call matches nothing and is a no-op."""
        result = await NotificationDocument.find(
            Eq(NotificationDocument.notification_id, notification_id),
            Eq(NotificationDocument.is_delivered, False),
        ).update_many(Set({"is_delivered": True, "delivered_at": delivered_at or datetime.now(UTC)}))
        return bool(result and result.modified_count > 0)

    @translate_persistence_errors
    async def mark_as_read(self, notification_ids: list[str], user_id: str) -> int:
        # Only unread rows owned by the caller; read_at is written exactly once.
        result = await NotificationDocument.find(
            In(NotificationDocument.notification_id, notification_ids),
            Eq(NotificationDocument.user_id, user_id),
            Eq(NotificationDocument.is_read, False),
        ).update_many(Set({"is_read": True, "read_at": datetime.now(UTC)}))
        return result.modified_count if result else 0

    @translate_persistence_errors
    async def mark_all_as_read(self, user_id: str) -> int:
        result = await NotificationDocument.find(
            Eq(NotificationDocument.user_id, user_id),
            Eq(NotificationDocument.is_read, False),
        ).update_many(Set({"is_read": True, "read_at": datetime.now(UTC)}))
        return result.modified_count if result else 0

    @translate_persistence_errors
    async def delete_notification(self, notification_id: str, user_id: str) -> bool:
        doc = await NotificationDocument.find_one(
            Eq(NotificationDocument.notification_id, notification_id),
            Eq(NotificationDocument.user_id, user_id),
        )
        if not doc:
            return False
        await doc.delete()
        return True

    @translate_persistence_errors
    async def delete_all_read(self, user_id: str) -> int:
        result = await NotificationDocument.find(
            Eq(NotificationDocument.user_id, user_id),
            Eq(NotificationDocument.is_read, True),
        ).delete()
        return result.deleted_count if result else 0

    @translate_persistence_errors
    async def delete_read_before(self, cutoff: datetime) -> int:
        result = await NotificationDocument.find(
            Eq(NotificationDocument.is_read, True),
            LT(NotificationDocument.read_at, cutoff),
        ).delete()
        return result.deleted_count if result else 0

    @translate_persistence_errors
    async def list_notifications(
        self,
        user_id: str,
        filters: DomainNotificationFilter | None = None,
        skip: int = 0,
        limit: int = 20,
    ) -> list[DomainNotification]:
        docs = (
            await NotificationDocument.find(*self._filter_conditions(user_id, filters))
            .sort([("created_at", SortDirection.DESCENDING)])
            .skip(skip)
            .limit(limit)
            .to_list()
        )
        return [self._to_domain(d) for d in docs]

    @translate_persistence_errors
    async def count_notifications(self, user_id: str, filters: DomainNotificationFilter | None = None) -> int:
        return await NotificationDocument.find(*self._filter_conditions(user_id, filters)).count()

    async def get_unread_count(self, user_id: str) -> int:
        return await self.count_notifications(user_id, DomainNotificationFilter(is_read=False))

    @translate_persistence_errors
    async def count_delivered(self, user_id: str) -> int:
        return await NotificationDocument.find(
            Eq(NotificationDocument.user_id, user_id),
            Eq(NotificationDocument.is_delivered, True),
        ).count()

    async def count_unread_by_priority(self, user_id: str) -> dict[NotificationPriority, int]:
        counts: dict[NotificationPriority, int] = {}
        for priority in NotificationPriority:
            n = await self.count_notifications(user_id, DomainNotificationFilter(is_read=False, priority=priority))
            if n:
                counts[priority] = n
        return counts
