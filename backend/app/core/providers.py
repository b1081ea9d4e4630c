import logging
from typing import AsyncIterator

import redis.asyncio as redis
from dishka import Provider, Scope, from_context, provide

from app.core.database_context import AsyncDatabaseConnection, Database, DatabaseConfig
from app.core.logging import setup_logger
from app.core.metrics import NotificationMetrics
from app.db.repositories import NotificationRepository, NotificationSettingsRepository, UserRepository
from app.services.email import EmailClient, EmailDispatcher, create_email_client
from app.services.notification_policy import PreferenceResolver
from app.services.notification_records import NotificationRecordManager
from app.services.notification_retention import RetentionSweeper
from app.services.notification_service import NotificationService
from app.services.notification_settings_service import NotificationSettingsService
from app.services.realtime_dispatcher import RealtimeDispatcher
from app.services.side_channel import ControlEventPublisher
from app.services.sse import (
    NotificationStreamService,
    PresenceRegistry,
    RealtimeTransport,
    SSERedisBus,
)
from app.settings import Settings


class SettingsProvider(Provider):
    """Settings are built by the caller and handed to the container as context."""

    settings = from_context(provides=Settings, scope=Scope.APP)


class LoggingProvider(Provider):
    scope = Scope.APP

    @provide
    def get_logger(self, settings: Settings) -> logging.Logger:
        return setup_logger(settings.LOG_LEVEL)


class DatabaseProvider(Provider):
    scope = Scope.APP

    @provide
    async def get_database_connection(
            self, settings: Settings, logger: logging.Logger
    ) -> AsyncIterator[AsyncDatabaseConnection]:
        db_connection = AsyncDatabaseConnection(DatabaseConfig.from_settings(settings), logger)
        await db_connection.connect()
        yield db_connection
        await db_connection.disconnect()

    @provide
    def get_database(self, db_connection: AsyncDatabaseConnection) -> Database:
        return db_connection.database


class RedisProvider(Provider):
    scope = Scope.APP

    @provide
    async def get_redis_client(self, settings: Settings, logger: logging.Logger) -> AsyncIterator[redis.Redis]:
        client = redis.Redis(
            host=settings.REDIS_HOST,
            port=settings.REDIS_PORT,
            db=settings.REDIS_DB,
            password=settings.REDIS_PASSWORD,
            ssl=settings.REDIS_SSL,
            max_connections=settings.REDIS_MAX_CONNECTIONS,
            decode_responses=settings.REDIS_DECODE_RESPONSES,
            socket_connect_timeout=5,
            socket_timeout=5,
        )
        # Test connection
        await client.ping()
        logger.info(f"Redis connected: {settings.REDIS_HOST}:{settings.REDIS_PORT}/{settings.REDIS_DB}")
        yield client
        await client.aclose()


class MetricsProvider(Provider):
    scope = Scope.APP

    @provide
    def get_notification_metrics(self, settings: Settings) -> NotificationMetrics:
        return NotificationMetrics(settings)


class RepositoryProvider(Provider):
    scope = Scope.APP

    @provide
    def get_notification_repository(self, logger: logging.Logger) -> NotificationRepository:
        return NotificationRepository(logger)

    @provide
    def get_notification_settings_repository(self, logger: logging.Logger) -> NotificationSettingsRepository:
        return NotificationSettingsRepository(logger)

    @provide
    def get_user_repository(self) -> UserRepository:
        return UserRepository()


class RealtimeProvider(Provider):
    scope = Scope.APP

    @provide
    def get_sse_redis_bus(self, redis_client: redis.Redis) -> SSERedisBus:
        return SSERedisBus(redis_client)

    @provide
    def get_presence_registry(
            self, redis_client: redis.Redis, settings: Settings, logger: logging.Logger
    ) -> PresenceRegistry:
        return PresenceRegistry(redis_client, logger, ttl_seconds=settings.SSE_PRESENCE_TTL)

    @provide
    def get_realtime_transport(self, bus: SSERedisBus, presence: PresenceRegistry) -> RealtimeTransport:
        return RealtimeTransport(bus, presence)

    @provide
    def get_control_event_publisher(
            self, transport: RealtimeTransport, settings: Settings, logger: logging.Logger
    ) -> ControlEventPublisher:
        return ControlEventPublisher(transport, settings, logger)

    @provide
    def get_notification_stream_service(
            self,
            bus: SSERedisBus,
            presence: PresenceRegistry,
            settings: Settings,
            logger: logging.Logger,
    ) -> NotificationStreamService:
        return NotificationStreamService(bus, presence, settings, logger)


class EmailProvider(Provider):
    scope = Scope.APP

    @provide
    def get_email_client(self, settings: Settings, logger: logging.Logger) -> EmailClient:
        return create_email_client(settings, logger)


class NotificationServicesProvider(Provider):
    scope = Scope.APP

    @provide
    def get_record_manager(
            self,
            repository: NotificationRepository,
            metrics: NotificationMetrics,
            settings: Settings,
            logger: logging.Logger,
    ) -> NotificationRecordManager:
        return NotificationRecordManager(repository, metrics, settings, logger)

    @provide
    def get_preference_resolver(
            self, settings_repository: NotificationSettingsRepository, logger: logging.Logger
    ) -> PreferenceResolver:
        return PreferenceResolver(settings_repository, logger)

    @provide
    def get_realtime_dispatcher(
            self,
            transport: RealtimeTransport,
            record_manager: NotificationRecordManager,
            metrics: NotificationMetrics,
            settings: Settings,
            logger: logging.Logger,
    ) -> RealtimeDispatcher:
        return RealtimeDispatcher(transport, record_manager, metrics, settings, logger)

    @provide
    def get_email_dispatcher(
            self,
            client: EmailClient,
            user_repository: UserRepository,
            metrics: NotificationMetrics,
            settings: Settings,
            logger: logging.Logger,
    ) -> EmailDispatcher:
        return EmailDispatcher(client, user_repository, metrics, settings, logger)

    @provide
    def get_notification_service(
            self,
            record_manager: NotificationRecordManager,
            realtime: RealtimeDispatcher,
            email: EmailDispatcher,
            preferences: PreferenceResolver,
            events: ControlEventPublisher,
            settings: Settings,
            logger: logging.Logger,
    ) -> NotificationService:
        return NotificationService(record_manager, realtime, email, preferences, events, settings, logger)

    @provide
    def get_notification_settings_service(
            self,
            repository: NotificationSettingsRepository,
            events: ControlEventPublisher,
            logger: logging.Logger,
    ) -> NotificationSettingsService:
        return NotificationSettingsService(repository, events, logger)

    @provide
    async def get_retention_sweeper(
            self,
            record_manager: NotificationRecordManager,
            metrics: NotificationMetrics,
            settings: Settings,
            logger: logging.Logger,
    ) -> AsyncIterator[RetentionSweeper]:
        sweeper = RetentionSweeper(record_manager, metrics, settings, logger)
        yield sweeper
        await sweeper.stop()
