"""Fake implementations for external boundary clients and stores used in tests."""

from .notifications import (
    FakeEmailClient,
    FakeNotificationRepository,
    FakeNotificationSettingsRepository,
    FakeRealtimeTransport,
    FakeUserRepository,
)
from .providers import FakeBoundaryClientProvider, FakeDatabaseProvider, create_test_container

__all__ = [
    "FakeBoundaryClientProvider",
    "FakeDatabaseProvider",
    "FakeEmailClient",
    "FakeNotificationRepository",
    "FakeNotificationSettingsRepository",
    "FakeRealtimeTransport",
    "FakeUserRepository",
    "create_test_container",
]
