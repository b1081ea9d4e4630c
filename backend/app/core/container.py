from dishka import AsyncContainer, make_async_container
from dishka.integrations.fastapi import FastapiProvider

from app.core.providers import (
    DatabaseProvider,
    EmailProvider,
    LoggingProvider,
    MetricsProvider,
    NotificationServicesProvider,
    RealtimeProvider,
    RedisProvider,
    RepositoryProvider,
    SettingsProvider,
)
from app.settings import Settings


def create_app_container(settings: Settings) -> AsyncContainer:
    """
    Create the application DI container.
    """
    return make_async_container(
        SettingsProvider(),
        LoggingProvider(),
        DatabaseProvider(),
        RedisProvider(),
        MetricsProvider(),
        RepositoryProvider(),
        RealtimeProvider(),
        EmailProvider(),
        NotificationServicesProvider(),
        FastapiProvider(),
        context={Settings: settings},
    )
