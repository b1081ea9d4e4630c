from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from app.domain.enums.notification import NotificationPriority, NotificationType


class NotificationResponse(BaseModel):
    """Response schema for notification endpoints"""
    notification_id: str
    notification_type: NotificationType
    priority: NotificationPriority
    title: str
    message: str
    data: dict[str, Any] = Field(default_factory=dict)
    action_url: str | None = None
    is_delivered: bool
    delivered_at: datetime | None = None
    is_read: bool
    read_at: datetime | None = None
    created_at: datetime

    model_config = ConfigDict(
        from_attributes=True
    )


class PaginationInfo(BaseModel):
    total: int
    page: int
    limit: int
    total_pages: int


class NotificationListResponse(BaseModel):
    """Response schema for notification list endpoints"""
    notifications: list[NotificationResponse]
    pagination: PaginationInfo
    unread_count: int


class UnreadCountResponse(BaseModel):
    unread_count: int


class NotificationStatsResponse(BaseModel):
    total: int
    unread: int
    delivered: int
    by_priority: dict[NotificationPriority, int] = Field(default_factory=dict)

    model_config = ConfigDict(
        from_attributes=True
    )


class MarkReadRequest(BaseModel):
    """Either a list of ids or mark_all=true"""
    notification_ids: list[str] | None = None
    mark_all: bool = False

    @model_validator(mode="after")
    def require_ids_or_mark_all(self) -> "MarkReadRequest":
        if not self.mark_all and not self.notification_ids:
            raise ValueError("notification_ids must be a non-empty list unless mark_all is true")
        return self


class MarkReadResponse(BaseModel):
    message: str
    count: int


class DeleteNotificationResponse(BaseModel):
    message: str


class DeleteReadResponse(BaseModel):
    message: str
    count: int


class NotificationSettingsResponse(BaseModel):
    email: bool
    in_app: bool
    course_updates: bool
    assignment_updates: bool
    discussion_updates: bool
    payment_updates: bool
    account_updates: bool
    updated_at: datetime | None = None

    model_config = ConfigDict(
        from_attributes=True
    )


class NotificationSettingsUpdate(BaseModel):
    """Partial update; omitted toggles keep their current value"""
    email: bool | None = None
    in_app: bool | None = None
    course_updates: bool | None = None
    assignment_updates: bool | None = None
    discussion_updates: bool | None = None
    payment_updates: bool | None = None
    account_updates: bool | None = None

    model_config = ConfigDict(extra="forbid")
