import pytest
from app.domain.enums.notification import ChannelStatus, NotificationChannel, NotificationType
from app.domain.notification import DomainNotification
from app.services.email import EmailDispatcher

from tests.helpers.fakes import FakeEmailClient, FakeUserRepository

pytestmark = pytest.mark.unit


def _payment_failed(user_id: str = "u1") -> DomainNotification:
    return DomainNotification(
        user_id=user_id,
        notification_type=NotificationType.PAYMENT_FAILED,
        title="Payment failed",
        message="Your card was declined",
        data={"amount": 1299, "retryUrl": "https://educademy.com/checkout/retry"},
    )


@pytest.mark.asyncio
async def test_sends_rendered_email(
        email_dispatcher: EmailDispatcher, email_client: FakeEmailClient, user_repo: FakeUserRepository
) -> None:
    user_repo.add("u1", "asha@example.com", first_name="Asha")

    outcome = await email_dispatcher.dispatch(_payment_failed())

    assert outcome.channel == NotificationChannel.EMAIL
    assert outcome.status == ChannelStatus.SENT
    [message] = email_client.sent
    assert message.to == "asha@example.com"
    assert message.subject == "Payment Failed - Educademy"
    assert "Hi Asha," in message.html
    assert message.text and "INR 1299" in message.text


@pytest.mark.asyncio
async def test_unknown_recipient_is_skipped(email_dispatcher: EmailDispatcher, email_client: FakeEmailClient) -> None:
    outcome = await email_dispatcher.dispatch(_payment_failed("ghost"))

    assert outcome.status == ChannelStatus.SKIPPED
    assert email_client.sent == []


@pytest.mark.asyncio
async def test_recipient_without_address_is_skipped(
        email_dispatcher: EmailDispatcher, email_client: FakeEmailClient, user_repo: FakeUserRepository
) -> None:
    user_repo.add("u1", "")

    outcome = await email_dispatcher.dispatch(_payment_failed())

    assert outcome.status == ChannelStatus.SKIPPED
    assert email_client.sent == []


@pytest.mark.asyncio
async def test_type_without_template_is_skipped(
        email_dispatcher: EmailDispatcher, email_client: FakeEmailClient, user_repo: FakeUserRepository
) -> None:
    user_repo.add("u1", "asha@example.com")
    notification = DomainNotification(
        user_id="u1", notification_type=NotificationType.ACCOUNT_SUSPENDED, title="t", message="m"
    )

    outcome = await email_dispatcher.dispatch(notification)

    assert outcome.status == ChannelStatus.SKIPPED
    assert email_client.sent == []


@pytest.mark.asyncio
async def test_transport_failure_is_recorded(
        email_dispatcher: EmailDispatcher, email_client: FakeEmailClient, user_repo: FakeUserRepository
) -> None:
    user_repo.add("u1", "asha@example.com")
    email_client.fail = True

    outcome = await email_dispatcher.dispatch(_payment_failed())

    assert outcome.status == ChannelStatus.FAILED
    assert outcome.error is not None and "email delivery failed" in outcome.error


@pytest.mark.asyncio
async def test_recipient_lookup_failure_is_recorded(
        email_dispatcher: EmailDispatcher, user_repo: FakeUserRepository
) -> None:
    user_repo.fail = True

    outcome = await email_dispatcher.dispatch(_payment_failed())

    assert outcome.status == ChannelStatus.FAILED
    assert "recipient lookup failed" in (outcome.error or "")


@pytest.mark.asyncio
async def test_slow_relay_times_out(
        email_dispatcher: EmailDispatcher, email_client: FakeEmailClient, user_repo: FakeUserRepository
) -> None:
    user_repo.add("u1", "asha@example.com")
    email_client.delay = 2.0

    outcome = await email_dispatcher.dispatch(_payment_failed())

    assert outcome.status == ChannelStatus.TIMED_OUT
    assert email_client.sent == []


@pytest.mark.asyncio
async def test_untranslated_error_becomes_failed_outcome(email_dispatcher: EmailDispatcher) -> None:
    async def _explode() -> ChannelStatus:
        raise RuntimeError("template cache corrupted")

    outcome = await email_dispatcher._attempt(_payment_failed(), _explode)

    assert outcome.status == ChannelStatus.FAILED
    assert outcome.error == "template cache corrupted"
