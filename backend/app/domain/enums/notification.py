from app.core.utils import StringEnum


class NotificationType(StringEnum):
    """Domain event categories a notification can be raised for."""
    # Payments
    PAYMENT_CONFIRMED = "payment_confirmed"
    PAYMENT_FAILED = "payment_failed"
    REFUND_PROCESSED = "refund_processed"
    PAYOUT_PROCESSED = "payout_processed"
    PAYOUT_REQUESTED = "payout_requested"
    PAYMENT_DETAILS_UPDATED = "payment_details_updated"
    # Account
    SECURITY_ALERT = "security_alert"
    ACCOUNT_SUSPENDED = "account_suspended"
    ACCOUNT_REACTIVATED = "account_reactivated"
    # Course review / lifecycle
    COURSE_APPROVED = "course_approved"
    COURSE_REJECTED = "course_rejected"
    COURSE_UPDATED = "course_updated"
    COURSE_COMPLETED = "course_completed"
    NEW_STUDENT_ENROLLED = "new_student_enrolled"
    CERTIFICATE_READY = "certificate_ready"
    # Learning
    ASSIGNMENT_SUBMITTED = "assignment_submitted"
    ASSIGNMENT_GRADED = "assignment_graded"
    QUIZ_COMPLETED = "quiz_completed"
    # Community
    NEW_REVIEW = "new_review"
    REVIEW_REPLY = "review_reply"
    QNA_QUESTION = "qna_question"
    QNA_ANSWER = "qna_answer"
    MESSAGE_RECEIVED = "message_received"
    # Support / moderation
    SUPPORT_TICKET_CREATED = "support_ticket_created"
    SUPPORT_TICKET_RESOLVED = "support_ticket_resolved"
    CONTENT_REMOVED = "content_removed"
    VERIFICATION_REQUEST_SUBMITTED = "verification_request_submitted"
    # Marketing / system
    COUPON_EXPIRING = "coupon_expiring"
    COUPONS_EXPIRING = "coupons_expiring"
    COUPON_USED = "coupon_used"
    COUPON_BULK_UPDATED = "coupon_bulk_updated"
    ACHIEVEMENT_UNLOCKED = "achievement_unlocked"
    SYSTEM_ANNOUNCEMENT = "system_announcement"
    SYSTEM_MAINTENANCE = "system_maintenance"


class NotificationPriority(StringEnum):
    """Notification priority levels."""
    LOW = "LOW"
    NORMAL = "NORMAL"
    HIGH = "HIGH"


class EmailPolicy(StringEnum):
    """Which bucket a notification type falls into for the email channel."""
    ALWAYS = "always"
    CONDITIONAL = "conditional"
    NEVER = "never"


class NotificationChannel(StringEnum):
    """Side channels a persisted notification is announced on."""
    REALTIME = "realtime"
    EMAIL = "email"


class ChannelStatus(StringEnum):
    """Outcome of a single best-effort side-channel attempt."""
    SENT = "sent"
    DELIVERED = "delivered"
    SKIPPED = "skipped"
    FAILED = "failed"
    TIMED_OUT = "timed_out"


class NotificationEvent(StringEnum):
    """Event names pushed to a user's real-time channel."""
    NOTIFICATION = "notification"
    MARKED_READ = "notifications_marked_read"
    ALL_READ = "all_notifications_read"
    DELETED = "notification_deleted"
    READ_DELETED = "read_notifications_deleted"
    SETTINGS_UPDATED = "notification_settings_updated"
    HEARTBEAT = "heartbeat"
