from app.services.sse.notification_stream import NotificationStreamService
from app.services.sse.presence import PresenceRegistry
from app.services.sse.redis_bus import SSERedisBus, SSERedisSubscription
from app.services.sse.transport import RealtimeTransport

__all__ = [
    "NotificationStreamService",
    "PresenceRegistry",
    "RealtimeTransport",
    "SSERedisBus",
    "SSERedisSubscription",
]
