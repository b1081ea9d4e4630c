from app.core.metrics.base import BaseMetrics


class NotificationMetrics(BaseMetrics):
    """Metrics for notifications."""

    def _create_instruments(self) -> None:
        self.notifications_created = self._meter.create_counter(
            name="notifications.created.total", description="Total number of notifications persisted", unit="1"
        )

        self.notifications_create_failed = self._meter.create_counter(
            name="notifications.create.failed.total",
            description="Total number of notification creations that failed",
            unit="1",
        )

        # Channel-specific metrics
        self.notifications_by_channel = self._meter.create_counter(
            name="notifications.by.channel.total", description="Side-channel attempts by channel and status", unit="1"
        )

        self.channel_delivery_time = self._meter.create_histogram(
            name="notification.channel.delivery.time", description="Side-channel call time in seconds", unit="s"
        )

        self.channel_failures = self._meter.create_counter(
            name="notification.channel.failures.total", description="Total side-channel failures by channel", unit="1"
        )

        # User engagement metrics
        self.notifications_read = self._meter.create_counter(
            name="notifications.read.total", description="Total notifications marked read by users", unit="1"
        )

        # Retention
        self.notifications_swept = self._meter.create_counter(
            name="notifications.swept.total", description="Read notifications removed by retention sweeps", unit="1"
        )

        self.sweep_failures = self._meter.create_counter(
            name="notifications.sweep.failures.total", description="Retention sweep cycles that failed", unit="1"
        )

    def record_notification_created(self, notification_type: str, priority: str) -> None:
        self.notifications_created.add(1, attributes={"category": notification_type, "priority": priority})

    def record_notification_create_failed(self, notification_type: str, error: str) -> None:
        self.notifications_create_failed.add(1, attributes={"category": notification_type, "error": error})

    def record_channel_outcome(
        self, channel: str, status: str, duration_seconds: float, notification_type: str
    ) -> None:
        self.notifications_by_channel.add(1, attributes={"channel": channel, "status": status})
        self.channel_delivery_time.record(
            duration_seconds, attributes={"channel": channel, "category": notification_type}
        )
        if status in ("failed", "timed_out"):
            self.channel_failures.add(1, attributes={"channel": channel, "status": status})

    def record_notifications_read(self, count: int) -> None:
        if count:
            self.notifications_read.add(count)

    def record_sweep(self, deleted: int) -> None:
        self.notifications_swept.add(deleted)

    def record_sweep_failure(self) -> None:
        self.sweep_failures.add(1)
