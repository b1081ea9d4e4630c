import logging
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from app.core.database_context import Database
from app.core.metrics import NotificationMetrics
from app.db.docs import ALL_DOCUMENTS
from app.services.email import EmailDispatcher
from app.services.notification_policy import PreferenceResolver
from app.services.notification_records import NotificationRecordManager
from app.services.notification_service import NotificationService
from app.services.realtime_dispatcher import RealtimeDispatcher
from app.services.side_channel import ControlEventPublisher
from app.settings import Settings
from beanie import init_beanie
from dishka import AsyncContainer

from tests.helpers.fakes import (
    FakeEmailClient,
    FakeNotificationRepository,
    FakeNotificationSettingsRepository,
    FakeRealtimeTransport,
    FakeUserRepository,
    create_test_container,
)

_test_logger = logging.getLogger("test.unit")


@pytest_asyncio.fixture
async def unit_container(test_settings: Settings) -> AsyncGenerator[AsyncContainer, None]:
    """DI container for unit tests with fake boundary clients.

    Provides:
    - Fake Redis, console email, MongoDB (boundary clients)
    - Real metrics, repositories, services (internal)

    Function scoped: every test starts from an empty mongomock database and FakeRedis.
    """
    container = create_test_container(test_settings)

    db = await container.get(Database)
    await init_beanie(database=db, document_models=ALL_DOCUMENTS)

    yield container
    await container.close()


@pytest.fixture
def notification_metrics(test_settings: Settings) -> NotificationMetrics:
    return NotificationMetrics(test_settings)


@pytest.fixture
def notification_repo() -> FakeNotificationRepository:
    return FakeNotificationRepository()


@pytest.fixture
def settings_repo() -> FakeNotificationSettingsRepository:
    return FakeNotificationSettingsRepository()


@pytest.fixture
def user_repo() -> FakeUserRepository:
    return FakeUserRepository()


@pytest.fixture
def transport() -> FakeRealtimeTransport:
    return FakeRealtimeTransport()


@pytest.fixture
def email_client() -> FakeEmailClient:
    return FakeEmailClient()


@pytest.fixture
def record_manager(
        notification_repo: FakeNotificationRepository,
        notification_metrics: NotificationMetrics,
        test_settings: Settings,
) -> NotificationRecordManager:
    return NotificationRecordManager(
        notification_repo,  # type: ignore[arg-type]
        notification_metrics,
        test_settings,
        _test_logger,
    )


@pytest.fixture
def realtime_dispatcher(
        transport: FakeRealtimeTransport,
        record_manager: NotificationRecordManager,
        notification_metrics: NotificationMetrics,
        test_settings: Settings,
) -> RealtimeDispatcher:
    return RealtimeDispatcher(
        transport,  # type: ignore[arg-type]
        record_manager,
        notification_metrics,
        test_settings,
        _test_logger,
    )


@pytest.fixture
def email_dispatcher(
        email_client: FakeEmailClient,
        user_repo: FakeUserRepository,
        notification_metrics: NotificationMetrics,
        test_settings: Settings,
) -> EmailDispatcher:
    return EmailDispatcher(
        email_client,
        user_repo,  # type: ignore[arg-type]
        notification_metrics,
        test_settings,
        _test_logger,
    )


@pytest.fixture
def control_events(transport: FakeRealtimeTransport, test_settings: Settings) -> ControlEventPublisher:
    return ControlEventPublisher(transport, test_settings, _test_logger)  # type: ignore[arg-type]


@pytest.fixture
def notification_service(
        record_manager: NotificationRecordManager,
        realtime_dispatcher: RealtimeDispatcher,
        email_dispatcher: EmailDispatcher,
        settings_repo: FakeNotificationSettingsRepository,
        control_events: ControlEventPublisher,
        test_settings: Settings,
) -> NotificationService:
    """Real coordinator wired to in-memory stores and transports."""
    return NotificationService(
        record_manager,
        realtime_dispatcher,
        email_dispatcher,
        PreferenceResolver(settings_repo, _test_logger),  # type: ignore[arg-type]
        control_events,
        test_settings,
        _test_logger,
    )
