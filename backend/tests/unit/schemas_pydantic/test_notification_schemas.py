import pytest
from pydantic import ValidationError

from app.domain.enums.notification import NotificationPriority, NotificationType
from app.domain.notification import DomainNotification
from app.schemas_pydantic.notification import (
    MarkReadRequest,
    NotificationResponse,
    NotificationSettingsUpdate,
    NotificationStatsResponse,
)

pytestmark = pytest.mark.unit


def test_mark_read_requires_ids_or_mark_all() -> None:
    assert MarkReadRequest(notification_ids=["n1"]).mark_all is False
    assert MarkReadRequest(mark_all=True).notification_ids is None

    with pytest.raises(ValidationError):
        MarkReadRequest()
    with pytest.raises(ValidationError):
        MarkReadRequest(notification_ids=[])


def test_notification_response_from_domain() -> None:
    n = DomainNotification(
        user_id="u1",
        notification_type=NotificationType.PAYMENT_CONFIRMED,
        title="Payment received",
        message="Thanks for your purchase",
        priority=NotificationPriority.HIGH,
        data={"amount": 49},
    )
    resp = NotificationResponse.model_validate(n)
    assert resp.notification_id == n.notification_id
    assert resp.notification_type == NotificationType.PAYMENT_CONFIRMED
    assert resp.is_read is False and resp.read_at is None
    assert resp.data == {"amount": 49}


def test_settings_update_rejects_unknown_toggles() -> None:
    upd = NotificationSettingsUpdate(email=False)
    assert upd.model_dump(exclude_none=True) == {"email": False}

    with pytest.raises(ValidationError):
        NotificationSettingsUpdate(sms=True)  # type: ignore[call-arg]


def test_stats_keys_by_priority() -> None:
    stats = NotificationStatsResponse(
        total=3, unread=2, delivered=1, by_priority={NotificationPriority.HIGH: 2}
    )
    dumped = stats.model_dump(mode="json")
    assert dumped["by_priority"] == {"HIGH": 2}
