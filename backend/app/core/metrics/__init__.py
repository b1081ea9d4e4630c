from app.core.metrics.base import BaseMetrics
from app.core.metrics.notifications import NotificationMetrics

__all__ = [
    "BaseMetrics",
    "NotificationMetrics",
]
