import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from typing import Any

from app.core.metrics import NotificationMetrics
from app.domain.enums.notification import ChannelStatus, NotificationChannel, NotificationEvent
from app.domain.notification import ChannelOutcome, DomainNotification, SideChannelError
from app.services.sse import RealtimeTransport
from app.settings import Settings


class SideChannelDispatcher:
    """Runs one best-effort side-channel attempt and turns every failure into a ChannelOutcome.

    Subclasses raise SideChannelError for transport failures. Timeouts and errors are
    logged and recorded, never raised to the caller.
    """

    channel: NotificationChannel

    def __init__(self, metrics: NotificationMetrics, logger: logging.Logger, timeout_seconds: float) -> None:
        self.metrics = metrics
        self.logger = logger
        self.timeout_seconds = timeout_seconds

    async def _attempt(
        self,
        notification: DomainNotification,
        operation: Callable[[], Awaitable[ChannelStatus]],
        finalize: Callable[[ChannelStatus], Awaitable[ChannelStatus]] | None = None,
    ) -> ChannelOutcome:
        """Run ``operation`` under the side-channel timeout, then ``finalize`` without it.

        ``finalize`` is for store writes that follow a successful send: a write that
        commits late must not be reported as TIMED_OUT while the store says otherwise.
        """
        log_extra = {
            "notification_id": notification.notification_id,
            "user_id": notification.user_id,
            "notification_type": str(notification.notification_type),
            "channel": str(self.channel),
        }
        start = time.monotonic()
        try:
            async with asyncio.timeout(self.timeout_seconds):
                status = await operation()
            if finalize is not None:
                status = await finalize(status)
            outcome = ChannelOutcome(channel=self.channel, status=status)
        except TimeoutError:
            self.logger.warning(
                f"{self.channel} delivery timed out after {self.timeout_seconds}s",
                extra=log_extra,
            )
            outcome = ChannelOutcome(
                channel=self.channel,
                status=ChannelStatus.TIMED_OUT,
                error=f"timed out after {self.timeout_seconds}s",
            )
        except SideChannelError as e:
            self.logger.error(e.message, extra={**log_extra, "error": str(e.__cause__ or e)})
            outcome = ChannelOutcome(channel=self.channel, status=ChannelStatus.FAILED, error=e.message)
        except Exception as e:
            # anything a dispatcher did not translate still must not escape past a persisted record
            self.logger.error(
                f"{self.channel} delivery failed unexpectedly", extra={**log_extra, "error": str(e)}, exc_info=True
            )
            outcome = ChannelOutcome(channel=self.channel, status=ChannelStatus.FAILED, error=str(e) or type(e).__name__)

        self.metrics.record_channel_outcome(
            str(self.channel), str(outcome.status), time.monotonic() - start, str(notification.notification_type)
        )
        return outcome


class ControlEventPublisher:
    """Best-effort push of control events (read/delete/settings) after a mutation has committed."""

    def __init__(self, transport: RealtimeTransport, settings: Settings, logger: logging.Logger) -> None:
        self.transport = transport
        self.logger = logger
        self.timeout_seconds = settings.NOTIF_SIDE_CHANNEL_TIMEOUT_SECONDS

    async def publish(self, user_id: str, event: NotificationEvent, payload: dict[str, Any]) -> bool:
        try:
            async with asyncio.timeout(self.timeout_seconds):
                await self.transport.send_to_user(user_id, event, payload)
        except Exception as e:
            self.logger.warning(
                f"Failed to publish {event} event",
                extra={"user_id": user_id, "event": str(event), "error": str(e) or type(e).__name__},
            )
            return False
        return True
