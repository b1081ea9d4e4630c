import logging
from datetime import UTC, datetime, timedelta
from enum import auto

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from app.core.metrics import NotificationMetrics
from app.core.utils import StringEnum
from app.services.notification_records import NotificationRecordManager
from app.settings import Settings


class ServiceState(StringEnum):
    """Service lifecycle states."""

    IDLE = auto()
    RUNNING = auto()
    STOPPING = auto()
    STOPPED = auto()


class RetentionSweeper:
    """Periodically deletes read notifications whose read_at is older than the retention window.

    APScheduler owns the timer: one interval job, never overlapping itself.
    """

    def __init__(
        self,
        record_manager: NotificationRecordManager,
        metrics: NotificationMetrics,
        settings: Settings,
        logger: logging.Logger,
    ) -> None:
        self.records = record_manager
        self.metrics = metrics
        self.logger = logger
        self.retention = timedelta(days=settings.NOTIF_RETENTION_DAYS)
        self.interval_seconds = settings.NOTIF_CLEANUP_INTERVAL_SECONDS

        self._state = ServiceState.IDLE
        self._scheduler: AsyncIOScheduler | None = None

    @property
    def state(self) -> ServiceState:
        return self._state

    def start(self) -> None:
        if self._state != ServiceState.IDLE:
            self.logger.warning(f"Cannot start retention sweeper in state: {self._state}")
            return
        self._scheduler = AsyncIOScheduler()
        self._scheduler.add_job(
            self.sweep_once,
            trigger="interval",
            seconds=self.interval_seconds,
            id="notification_retention_sweep",
            max_instances=1,
            misfire_grace_time=60,
        )
        self._scheduler.start()
        self._state = ServiceState.RUNNING
        self.logger.info(
            "Retention sweeper started",
            extra={"retention_days": self.retention.days, "interval_seconds": self.interval_seconds},
        )

    async def stop(self) -> None:
        if self._state in (ServiceState.IDLE, ServiceState.STOPPED):
            self._state = ServiceState.STOPPED
            return

        self._state = ServiceState.STOPPING
        if self._scheduler is not None:
            self._scheduler.shutdown(wait=False)
            self._scheduler = None
        self._state = ServiceState.STOPPED
        self.logger.info("Retention sweeper stopped")

    async def sweep_once(self, now: datetime | None = None) -> int:
        """Run one cycle; a failed cycle is logged and reported as zero deletions."""
        cutoff = (now or datetime.now(UTC)) - self.retention
        try:
            deleted = await self.records.delete_read_before(cutoff)
        except Exception as e:
            self.logger.error(
                "Retention sweep failed", extra={"cutoff": cutoff.isoformat(), "error": str(e)}, exc_info=True
            )
            self.metrics.record_sweep_failure()
            return 0

        self.metrics.record_sweep(deleted)
        self.logger.info(f"Cleaned up {deleted} read notifications", extra={"cutoff": cutoff.isoformat()})
        return deleted
