import asyncio
from datetime import UTC, datetime

import pytest
from app.domain.enums.notification import NotificationEvent, NotificationPriority, NotificationType
from app.schemas_pydantic.sse import RedisNotificationEvent, RedisNotificationMessage
from app.services.sse.redis_bus import BusMessage, SSERedisBus, SSERedisSubscription
from fakeredis import FakeAsyncRedis

pytestmark = pytest.mark.unit


async def _wait_for_message(sub: SSERedisSubscription, timeout: float = 1.0) -> BusMessage:
    """Wait for a non-None message with explicit timeout."""
    async with asyncio.timeout(timeout):
        while True:
            msg = await sub.get(timeout=0.05)
            if msg is not None:
                return msg


def _message(notification_id: str = "n1") -> RedisNotificationMessage:
    return RedisNotificationMessage(
        notification_id=notification_id,
        notification_type=NotificationType.PAYMENT_CONFIRMED,
        title="Payment confirmed",
        message="Thanks for your purchase",
        priority=NotificationPriority.HIGH,
        data={"amount": 499},
        created_at=datetime(2025, 1, 1, tzinfo=UTC),
    )


@pytest.mark.asyncio
async def test_notification_round_trip() -> None:
    redis = FakeAsyncRedis(decode_responses=True)
    bus = SSERedisBus(redis)
    sub = await bus.open_notification_subscription("user-1")

    receivers = await bus.publish_notification("user-1", _message())
    got = await _wait_for_message(sub)

    assert receivers == 1
    assert isinstance(got, RedisNotificationMessage)
    assert got.notification_id == "n1"
    assert got.event == NotificationEvent.NOTIFICATION
    assert got.data == {"amount": 499}

    await sub.close()
    await redis.aclose()


@pytest.mark.asyncio
async def test_control_event_round_trip() -> None:
    redis = FakeAsyncRedis(decode_responses=True)
    bus = SSERedisBus(redis)
    sub = await bus.open_notification_subscription("user-1")

    await bus.publish_notification(
        "user-1", RedisNotificationEvent(event=NotificationEvent.ALL_READ, payload={"count": 3})
    )
    got = await _wait_for_message(sub)

    assert isinstance(got, RedisNotificationEvent)
    assert got.event == NotificationEvent.ALL_READ
    assert got.payload == {"count": 3}

    await sub.close()
    await redis.aclose()


@pytest.mark.asyncio
async def test_malformed_payloads_are_skipped() -> None:
    redis = FakeAsyncRedis(decode_responses=True)
    bus = SSERedisBus(redis)
    sub = await bus.open_notification_subscription("user-1")

    await redis.publish("sse:notif:user-1", "not-json")
    await redis.publish("sse:notif:user-1", '{"event": "no_such_event"}')
    await bus.publish_notification("user-1", _message("n2"))

    # the valid message arrives, proving the bad ones were dropped without crashing
    got = await _wait_for_message(sub)
    assert isinstance(got, RedisNotificationMessage)
    assert got.notification_id == "n2"

    await sub.close()
    await redis.aclose()


@pytest.mark.asyncio
async def test_channels_are_per_user() -> None:
    redis = FakeAsyncRedis(decode_responses=True)
    bus = SSERedisBus(redis)
    sub = await bus.open_notification_subscription("user-1")

    assert await bus.publish_notification("user-2", _message()) == 0
    assert await sub.get(timeout=0.05) is None

    await sub.close()
    await redis.aclose()
