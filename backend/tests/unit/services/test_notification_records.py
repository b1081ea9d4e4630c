from datetime import UTC, datetime, timedelta

import pytest
from app.domain.enums.notification import EmailPolicy, NotificationPriority, NotificationType
from app.domain.notification import (
    DomainNotificationCreate,
    DomainNotificationFilter,
    NotificationNotFoundError,
    NotificationPersistenceError,
    NotificationValidationError,
)
from app.services.notification_policy import classify
from app.services.notification_records import NotificationRecordManager

from tests.helpers.fakes import FakeNotificationRepository

pytestmark = pytest.mark.unit


def _create(user_id: str = "u1", **overrides: object) -> DomainNotificationCreate:
    fields: dict[str, object] = {
        "user_id": user_id,
        "notification_type": NotificationType.NEW_REVIEW,
        "title": "New review",
        "message": "Someone reviewed your course",
    }
    fields.update(overrides)
    return DomainNotificationCreate(**fields)  # type: ignore[arg-type]


class TestCreate:
    @pytest.mark.asyncio
    async def test_creates_pending_record_with_defaults(self, record_manager: NotificationRecordManager) -> None:
        n = await record_manager.create(_create())

        assert n.notification_id
        assert n.priority == NotificationPriority.NORMAL
        assert n.is_delivered is False and n.delivered_at is None
        assert n.is_read is False and n.read_at is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("field", ["user_id", "title", "message"])
    async def test_blank_required_field_is_rejected(
            self, record_manager: NotificationRecordManager, notification_repo: FakeNotificationRepository, field: str
    ) -> None:
        with pytest.raises(NotificationValidationError, match=field):
            await record_manager.create(_create(**{field: "  "}))
        assert notification_repo.rows == {}

    @pytest.mark.asyncio
    async def test_unknown_type_is_rejected(self, record_manager: NotificationRecordManager) -> None:
        with pytest.raises(NotificationValidationError, match="Unknown notification type"):
            await record_manager.create(_create(notification_type="carrier_pigeon"))

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "notification_type",
        [
            "payout_requested",
            "payment_details_updated",
            "coupon_used",
            "coupons_expiring",
            "coupon_bulk_updated",
            "system_maintenance",
            "verification_request_submitted",
        ],
    )
    async def test_earnings_coupon_and_admin_types_are_accepted(
            self, record_manager: NotificationRecordManager, notification_type: str
    ) -> None:
        n = await record_manager.create(_create(notification_type=notification_type))
        assert n.notification_type == notification_type
        assert classify(n.notification_type) == EmailPolicy.NEVER

    @pytest.mark.asyncio
    async def test_string_values_are_coerced(self, record_manager: NotificationRecordManager) -> None:
        n = await record_manager.create(_create(notification_type="payment_failed", priority="HIGH"))
        assert n.notification_type is NotificationType.PAYMENT_FAILED
        assert n.priority is NotificationPriority.HIGH

    @pytest.mark.asyncio
    async def test_store_failure_propagates(
            self, record_manager: NotificationRecordManager, notification_repo: FakeNotificationRepository
    ) -> None:
        notification_repo.fail_all = True
        with pytest.raises(NotificationPersistenceError):
            await record_manager.create(_create())


class TestStateTransitions:
    @pytest.mark.asyncio
    async def test_mark_delivered_is_idempotent(
            self, record_manager: NotificationRecordManager, notification_repo: FakeNotificationRepository
    ) -> None:
        n = await record_manager.create(_create())

        first = await record_manager.mark_delivered(n.notification_id)
        second = await record_manager.mark_delivered(n.notification_id)

        assert first is not None
        assert second is None
        assert notification_repo.rows[n.notification_id].delivered_at == first

    @pytest.mark.asyncio
    async def test_mark_read_only_touches_owned_unread_rows(
            self, record_manager: NotificationRecordManager, notification_repo: FakeNotificationRepository
    ) -> None:
        mine = await record_manager.create(_create("u1"))
        theirs = await record_manager.create(_create("u2"))

        count = await record_manager.mark_read([mine.notification_id, theirs.notification_id, "missing"], "u1")

        assert count == 1
        assert notification_repo.rows[theirs.notification_id].is_read is False
        first_read_at = notification_repo.rows[mine.notification_id].read_at
        assert first_read_at is not None

        assert await record_manager.mark_read([mine.notification_id], "u1") == 0
        assert notification_repo.rows[mine.notification_id].read_at == first_read_at

    @pytest.mark.asyncio
    async def test_mark_read_with_no_ids(self, record_manager: NotificationRecordManager) -> None:
        assert await record_manager.mark_read(["", ""], "u1") == 0

    @pytest.mark.asyncio
    async def test_mark_all_read(self, record_manager: NotificationRecordManager) -> None:
        for _ in range(3):
            await record_manager.create(_create("u1"))
        await record_manager.create(_create("u2"))

        assert await record_manager.mark_all_read("u1") == 3
        assert await record_manager.get_unread_count("u1") == 0
        assert await record_manager.get_unread_count("u2") == 1

    @pytest.mark.asyncio
    async def test_delete_requires_ownership(self, record_manager: NotificationRecordManager) -> None:
        n = await record_manager.create(_create("u1"))

        with pytest.raises(NotificationNotFoundError):
            await record_manager.delete(n.notification_id, "u2")

        await record_manager.delete(n.notification_id, "u1")
        with pytest.raises(NotificationNotFoundError):
            await record_manager.delete(n.notification_id, "u1")

    @pytest.mark.asyncio
    async def test_delete_read_before_cutoff(
            self, record_manager: NotificationRecordManager, notification_repo: FakeNotificationRepository
    ) -> None:
        now = datetime.now(UTC)
        old = await record_manager.create(_create())
        recent = await record_manager.create(_create())
        unread = await record_manager.create(_create())
        await record_manager.mark_read([old.notification_id, recent.notification_id], "u1")
        notification_repo.rows[old.notification_id].read_at = now - timedelta(days=10)

        assert await record_manager.delete_read_before(now - timedelta(days=5)) == 1
        assert set(notification_repo.rows) == {recent.notification_id, unread.notification_id}


class TestReadSide:
    @pytest.mark.asyncio
    async def test_list_pagination(self, record_manager: NotificationRecordManager) -> None:
        for i in range(5):
            await record_manager.create(_create(title=f"n{i}"))

        page = await record_manager.list_notifications("u1", page=2, limit=2)

        assert page.total == 5
        assert page.total_pages == 3
        assert page.unread_count == 5
        assert len(page.notifications) == 2
        assert page.notifications[0].created_at >= page.notifications[1].created_at

    @pytest.mark.asyncio
    async def test_list_uses_default_page_size(self, record_manager: NotificationRecordManager) -> None:
        page = await record_manager.list_notifications("u1")
        assert page.limit == 20
        assert page.total_pages == 0

    @pytest.mark.asyncio
    async def test_list_filters(self, record_manager: NotificationRecordManager) -> None:
        await record_manager.create(_create(priority=NotificationPriority.HIGH))
        await record_manager.create(_create())

        page = await record_manager.list_notifications(
            "u1", filters=DomainNotificationFilter(priority=NotificationPriority.HIGH)
        )
        assert page.total == 1
        assert page.unread_count == 2

    @pytest.mark.asyncio
    @pytest.mark.parametrize(("page", "limit"), [(0, 10), (1, 0), (1, 101)])
    async def test_list_rejects_bad_paging(
            self, record_manager: NotificationRecordManager, page: int, limit: int
    ) -> None:
        with pytest.raises(NotificationValidationError):
            await record_manager.list_notifications("u1", page=page, limit=limit)

    @pytest.mark.asyncio
    async def test_stats(self, record_manager: NotificationRecordManager) -> None:
        high = await record_manager.create(_create(priority=NotificationPriority.HIGH))
        await record_manager.create(_create(priority=NotificationPriority.HIGH))
        low = await record_manager.create(_create(priority=NotificationPriority.LOW))
        await record_manager.mark_delivered(high.notification_id)
        await record_manager.mark_read([low.notification_id], "u1")

        stats = await record_manager.get_stats("u1")

        assert stats.total == 3
        assert stats.unread == 2
        assert stats.delivered == 1
        assert stats.by_priority == {NotificationPriority.HIGH: 2}
